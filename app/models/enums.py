from enum import Enum

class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class AssetCategory(str, Enum):
    investment = "investment"
    crypto = "crypto"


class InvestmentType(str, Enum):
    stock = "stock"
    etf = "etf"
    bond = "bond"


class LiabilityType(str, Enum):
    mortgage = "mortgage"
    loan = "loan"
    credit_card = "credit_card"
    other = "other"


class LiquidityAccountType(str, Enum):
    checking = "checking"
    savings = "savings"
    cash = "cash"
    money_market = "money_market"


class Currency(str, Enum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    CHF = "CHF"
