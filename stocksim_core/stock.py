"""
Stock: a tradable security with a live price.

Mutable; only the Market moves its price (see Market.update_all).
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PRICE_FLOOR = 1.0


def symbol_key(symbol: str) -> str:
    """Canonical form used to compare and store symbols: stripped, upper-case."""
    return symbol.strip().upper()


@dataclass
class Stock:
    """Symbol, display name and current price."""

    symbol: str
    name: str
    price: float

    def __post_init__(self) -> None:
        if not self.symbol or not self.symbol.strip():
            raise ValueError("Stock symbol must not be empty")
        if self.price <= 0:
            raise ValueError(f"Stock price must be positive, got {self.price!r}")
        self.price = float(self.price)

    def apply_change(self, delta: float, floor: float = DEFAULT_PRICE_FLOOR) -> float:
        """Move price by delta, clamped to floor. Returns the new price."""
        self.price = max(self.price + delta, floor)
        return self.price

    def matches(self, symbol: str) -> bool:
        """Case-insensitive symbol comparison."""
        return symbol_key(self.symbol) == symbol_key(symbol)

    def __str__(self) -> str:
        return f"{self.symbol} ({self.name}) - ${self.price:.2f}"
