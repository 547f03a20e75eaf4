"""
Session-level result types: trade status and rejected-trade log entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from stocksim_core.transaction import Side, Transaction


class TradeStatusKind(Enum):
    """Outcome of a trade request."""

    FILLED = "filled"
    REJECTED = "rejected"


class RejectReason(Enum):
    NOT_FOUND = "not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_SHARES = "insufficient_shares"
    INVALID_QUANTITY = "invalid_quantity"


@dataclass(frozen=True)
class TradeStatus:
    """Result of a buy/sell request. Immutable."""

    status: TradeStatusKind
    transaction: Transaction | None = None
    reason: RejectReason | None = None
    message: str | None = None

    @property
    def filled(self) -> bool:
        return self.status == TradeStatusKind.FILLED


@dataclass(frozen=True)
class RejectedTrade:
    """One entry in the session's rejected-trade log."""

    side: Side
    symbol: str
    quantity: object
    reason: RejectReason
    message: str
    timestamp: datetime
