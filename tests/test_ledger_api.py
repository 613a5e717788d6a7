import datetime as dt


def test_liability_without_principal_uses_balance(client, auth_headers):
    r = client.post(
        "/liabilities",
        json={"name": "Hipoteca", "type": "mortgage", "current_balance": 150000, "interest_rate": 2.5},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["principal"] == 150000
    assert r.json()["currency"] == "EUR"


def test_liability_update_and_delete(client, auth_headers):
    created = client.post(
        "/liabilities",
        json={"name": "Visa", "type": "credit_card", "principal": 3000, "current_balance": 1200, "interest_rate": 19},
        headers=auth_headers,
    ).json()

    r = client.put(
        f"/liabilities/{created['id']}",
        json={"name": "Visa", "type": "credit_card", "current_balance": 800, "interest_rate": 19},
        headers=auth_headers,
    )
    assert r.json()["current_balance"] == 800
    assert r.json()["principal"] == 3000

    assert client.delete(f"/liabilities/{created['id']}", headers=auth_headers).status_code == 200
    assert client.get("/liabilities", headers=auth_headers).json() == []


def test_liability_negative_balance_is_invalid(client, auth_headers):
    r = client.post(
        "/liabilities",
        json={"name": "X", "current_balance": -1, "interest_rate": 0},
        headers=auth_headers,
    )
    assert r.status_code == 422


def test_liquidity_account_crud(client, auth_headers):
    r = client.post(
        "/liquidity-accounts",
        json={"name": "Nómina", "type": "checking", "balance": 2500},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    account_id = r.json()["id"]

    dup = client.post(
        "/liquidity-accounts",
        json={"name": "Nómina", "type": "savings", "balance": 1},
        headers=auth_headers,
    )
    assert dup.status_code == 400

    r = client.put(
        f"/liquidity-accounts/{account_id}",
        json={"name": "Nómina", "type": "checking", "balance": 3000, "currency": "USD"},
        headers=auth_headers,
    )
    assert r.json()["balance"] == 3000
    assert r.json()["currency"] == "USD"

    assert client.delete(f"/liquidity-accounts/{account_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/liquidity-accounts/{account_id}", headers=auth_headers).status_code == 404


def test_transactions_default_date_and_order(client, auth_headers):
    client.post(
        "/transactions",
        json={"type": "income", "category": "Salary", "amount": 2000, "date": "2024-01-31"},
        headers=auth_headers,
    )
    r = client.post(
        "/transactions",
        json={"type": "expense", "category": "Food", "amount": 40},
        headers=auth_headers,
    )
    assert r.json()["date"] == dt.date.today().isoformat()

    listed = client.get("/transactions", headers=auth_headers).json()
    assert [t["category"] for t in listed] == ["Food", "Salary"]

    incomes = client.get("/transactions", params={"type": "income"}, headers=auth_headers).json()
    assert [t["category"] for t in incomes] == ["Salary"]


def test_transaction_amount_must_be_positive(client, auth_headers):
    r = client.post(
        "/transactions",
        json={"type": "expense", "category": "Food", "amount": 0},
        headers=auth_headers,
    )
    assert r.status_code == 422


def test_delete_transaction(client, auth_headers):
    created = client.post(
        "/transactions",
        json={"type": "expense", "category": "Food", "amount": 12},
        headers=auth_headers,
    ).json()

    assert client.delete(f"/transactions/{created['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/transactions/{created['id']}", headers=auth_headers).status_code == 404


def test_endpoints_require_token(client):
    for path in ("/investments", "/crypto", "/liabilities", "/liquidity-accounts", "/transactions", "/dashboard/totals"):
        assert client.get(path).status_code == 401
