import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.database import create_db_and_tables
from app.api import (
    auth,
    calculations,
    crypto,
    dashboard,
    investments,
    liabilities,
    liquidity_accounts,
    profile,
    transactions,
)
from app.routes import fx
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield
    fx.clear_cache()

app = FastAPI(title="Wealth Compass", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(investments.router)
app.include_router(crypto.router)
app.include_router(liabilities.router)
app.include_router(liquidity_accounts.router)
app.include_router(transactions.router)
app.include_router(dashboard.router)
app.include_router(calculations.router)
app.include_router(fx.router)

@app.get("/")
def root():
    return {"message": "Servidor de patrimonio personal"}
