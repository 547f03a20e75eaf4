"""
Valuation: balance plus market value of holdings at current prices.

Read model produced by Portfolio.valuation(); the front-end formats it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class HoldingLine:
    """One priced holding."""

    symbol: str
    quantity: int
    price: float
    value: float


@dataclass(frozen=True)
class Valuation:
    """
    balance + sum(line.value). Holdings whose symbol is not in the market are
    left out of total and listed in unpriced (symbol -> quantity).
    """

    balance: float
    lines: tuple[HoldingLine, ...] = ()
    unpriced: dict[str, int] = field(default_factory=dict)

    @property
    def holdings_value(self) -> float:
        return sum(line.value for line in self.lines)

    @property
    def total(self) -> float:
        return self.balance + self.holdings_value

    def to_dataframe(self) -> pd.DataFrame:
        """Per-symbol breakdown: symbol, quantity, price, value."""
        rows = [
            {"symbol": line.symbol, "quantity": line.quantity, "price": line.price, "value": line.value}
            for line in self.lines
        ]
        return pd.DataFrame(rows, columns=["symbol", "quantity", "price", "value"])
