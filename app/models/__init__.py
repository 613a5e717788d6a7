from app.models.user import User
from app.models.profile import Profile
from app.models.asset import Asset
from app.models.liability import Liability
from app.models.liquidity_account import LiquidityAccount
from app.models.portfolio_snapshot import PortfolioSnapshot
from app.models.transaction import Transaction

__all__ = [
    "User",
    "Profile",
    "Asset",
    "Liability",
    "LiquidityAccount",
    "PortfolioSnapshot",
    "Transaction",
]
