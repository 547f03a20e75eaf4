"""
Transaction: immutable record of one executed buy or sell.

Appended to Portfolio history; never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pandas as pd


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Transaction:
    """A filled trade. total is unit_price * quantity at execution time."""

    side: Side
    symbol: str
    unit_price: float
    quantity: int
    total: float
    timestamp: datetime | None = None

    def __str__(self) -> str:
        return (
            f"{self.side.name} {self.quantity} shares of {self.symbol} at ${self.unit_price:.2f}"
            f" | Total: ${self.total:.2f}"
        )


TRANSACTION_COLUMNS = ["timestamp", "side", "symbol", "unit_price", "quantity", "total"]


def transactions_to_dataframe(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """One row per transaction, in history order."""
    rows = [
        {
            "timestamp": t.timestamp,
            "side": t.side.value,
            "symbol": t.symbol,
            "unit_price": t.unit_price,
            "quantity": t.quantity,
            "total": t.total,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
