"""
Trading session: the application context for one simulator run.

Owns one Market and one Portfolio. Front-ends call it with raw symbols and
integer quantities; it resolves the stock, runs the trade through the Portfolio
and reports the outcome as a TradeStatus. Rejections are logged, never raised.
Persistence errors are raised as typed exceptions for the caller to present.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from stocksim_core.config import SimulatorConfig
from stocksim_core.errors import (
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidQuantityError,
    StockNotFoundError,
    TradeRejectedError,
)
from stocksim_core.market import Market
from stocksim_core.persistence import load_portfolio, save_portfolio
from stocksim_core.portfolio import Portfolio, PortfolioSnapshot
from stocksim_core.transaction import Side, Transaction
from stocksim_core.types import RejectedTrade, RejectReason, TradeStatus, TradeStatusKind
from stocksim_core.valuation import Valuation

logger = logging.getLogger(__name__)

_REASONS: dict[type[Exception], RejectReason] = {
    StockNotFoundError: RejectReason.NOT_FOUND,
    InsufficientFundsError: RejectReason.INSUFFICIENT_FUNDS,
    InsufficientSharesError: RejectReason.INSUFFICIENT_SHARES,
    InvalidQuantityError: RejectReason.INVALID_QUANTITY,
}


class TradingSession:
    """
    One Market, one Portfolio, one caller. Not thread-safe: operations are
    compound read-modify-write sequences and must be serialized by the owner.
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        market: Market | None = None,
        portfolio: Portfolio | None = None,
    ) -> None:
        self.config = config or SimulatorConfig()
        self.market = market if market is not None else Market.default(
            max_change=self.config.max_price_change,
            price_floor=self.config.price_floor,
            seed=self.config.seed,
        )
        self.portfolio = portfolio if portfolio is not None else Portfolio(self.config.starting_balance)
        self._rejected_log: list[RejectedTrade] = []

    def tick(self) -> None:
        """Advance every market price by one step."""
        self.market.update_all()

    def buy(self, symbol: str, quantity: int) -> TradeStatus:
        return self._trade(Side.BUY, symbol, quantity)

    def sell(self, symbol: str, quantity: int) -> TradeStatus:
        return self._trade(Side.SELL, symbol, quantity)

    def _trade(self, side: Side, symbol: str, quantity: int) -> TradeStatus:
        try:
            stock = self.market.get(symbol)
            if side == Side.BUY:
                txn = self.portfolio.buy(stock, quantity)
            else:
                txn = self.portfolio.sell(stock, quantity)
        except (StockNotFoundError, TradeRejectedError) as exc:
            return self._reject(side, symbol, quantity, exc)
        logger.info("%s %d %s @ %.2f (total %.2f)", side.name, txn.quantity, txn.symbol, txn.unit_price, txn.total)
        return TradeStatus(status=TradeStatusKind.FILLED, transaction=txn)

    def _reject(self, side: Side, symbol: str, quantity: object, exc: Exception) -> TradeStatus:
        reason = next(r for cls, r in _REASONS.items() if isinstance(exc, cls))
        message = str(exc)
        self._rejected_log.append(
            RejectedTrade(
                side=side,
                symbol=symbol,
                quantity=quantity,
                reason=reason,
                message=message,
                timestamp=datetime.now(),
            )
        )
        logger.info("%s rejected (%s): %s", side.name, reason.value, message)
        return TradeStatus(status=TradeStatusKind.REJECTED, reason=reason, message=message)

    def get_rejected_log(self) -> list[RejectedTrade]:
        """Rejected trade requests, oldest first."""
        return list(self._rejected_log)

    def valuation(self) -> Valuation:
        valuation = self.portfolio.valuation(self.market)
        if valuation.unpriced:
            logger.warning("Holdings not in market, excluded from total: %s", sorted(valuation.unpriced))
        return valuation

    def history(self) -> list[Transaction]:
        return self.portfolio.transaction_log()

    def save(self, path: str | Path | None = None) -> Path:
        """Write balance and holdings to path (default: config.portfolio_file)."""
        return save_portfolio(self.portfolio, path or self.config.portfolio_file)

    def load(self, path: str | Path | None = None) -> PortfolioSnapshot:
        """Replace balance and holdings from path (default: config.portfolio_file)."""
        return load_portfolio(self.portfolio, path or self.config.portfolio_file)
