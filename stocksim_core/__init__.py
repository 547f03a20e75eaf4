"""
stocksim-core: single-user, in-memory stock trading simulator engine.

Market prices, portfolio accounting, snapshot persistence. No console I/O.
"""

__version__ = "0.1.0"

from stocksim_core.config import SimulatorConfig
from stocksim_core.errors import (
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidQuantityError,
    PersistenceError,
    PersistenceIOError,
    SnapshotFormatError,
    StockNotFoundError,
    StockSimError,
    TradeRejectedError,
)
from stocksim_core.market import Market, random_walk
from stocksim_core.portfolio import Portfolio, PortfolioSnapshot
from stocksim_core.session import TradingSession
from stocksim_core.stock import Stock
from stocksim_core.transaction import Side, Transaction
from stocksim_core.valuation import HoldingLine, Valuation

__all__ = [
    "SimulatorConfig",
    "Market",
    "random_walk",
    "Portfolio",
    "PortfolioSnapshot",
    "TradingSession",
    "Stock",
    "Side",
    "Transaction",
    "HoldingLine",
    "Valuation",
    "StockSimError",
    "TradeRejectedError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "InvalidQuantityError",
    "StockNotFoundError",
    "PersistenceError",
    "PersistenceIOError",
    "SnapshotFormatError",
]
