"""
Market: the fixed, ordered list of tradable stocks and their live prices.

Prices move by an injectable perturbation (default: seedable uniform random walk)
and are clamped to a floor. Lookup is case-insensitive.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

import numpy as np
import pandas as pd

from stocksim_core.errors import StockNotFoundError
from stocksim_core.stock import DEFAULT_PRICE_FLOOR, Stock, symbol_key

DEFAULT_MAX_CHANGE = 5.0

Perturbation = Callable[[Stock], float]


def random_walk(max_change: float = DEFAULT_MAX_CHANGE, seed: int | None = None) -> Perturbation:
    """
    Uniform price change in [-max_change, max_change] per stock per update.
    Same seed gives the same sequence of changes.
    """
    if max_change < 0:
        raise ValueError(f"max_change must be non-negative, got {max_change!r}")
    rng = np.random.default_rng(seed)

    def perturb(stock: Stock) -> float:
        return float(rng.uniform(-max_change, max_change))

    return perturb


def default_stocks() -> list[Stock]:
    """The simulator's starting market."""
    return [
        Stock("AAPL", "Apple Inc.", 150.00),
        Stock("GOOGL", "Alphabet Inc.", 2800.00),
        Stock("TSLA", "Tesla Inc.", 700.00),
        Stock("AMZN", "Amazon.com Inc.", 3300.00),
    ]


class Market:
    """
    Ordered collection of Stocks. Owns price updates; Portfolio only reads prices.
    """

    def __init__(
        self,
        stocks: Iterable[Stock],
        *,
        perturb: Perturbation | None = None,
        price_floor: float = DEFAULT_PRICE_FLOOR,
    ) -> None:
        if price_floor <= 0:
            raise ValueError(f"price_floor must be positive, got {price_floor!r}")
        self._stocks: list[Stock] = []
        seen: set[str] = set()
        for stock in stocks:
            key = symbol_key(stock.symbol)
            if key in seen:
                raise ValueError(f"Duplicate symbol in market: {stock.symbol}")
            seen.add(key)
            self._stocks.append(stock)
        self._perturb = perturb or random_walk()
        self.price_floor = price_floor

    @classmethod
    def default(
        cls,
        *,
        max_change: float = DEFAULT_MAX_CHANGE,
        price_floor: float = DEFAULT_PRICE_FLOOR,
        seed: int | None = None,
    ) -> Market:
        """Market of the default stocks with a random walk of the given range."""
        return cls(default_stocks(), perturb=random_walk(max_change, seed), price_floor=price_floor)

    def __iter__(self) -> Iterator[Stock]:
        return iter(self._stocks)

    def __len__(self) -> int:
        return len(self._stocks)

    def symbols(self) -> list[str]:
        return [s.symbol for s in self._stocks]

    def prices(self) -> dict[str, float]:
        """symbol -> current price."""
        return {s.symbol: s.price for s in self._stocks}

    def update_all(self) -> None:
        """Apply one perturbation to every stock, clamped to the price floor."""
        for stock in self._stocks:
            stock.apply_change(self._perturb(stock), self.price_floor)

    def find_by_symbol(self, symbol: str) -> Stock | None:
        """Case-insensitive exact match. None if no stock matches."""
        for stock in self._stocks:
            if stock.matches(symbol):
                return stock
        return None

    def get(self, symbol: str) -> Stock:
        """Like find_by_symbol but raises StockNotFoundError on a miss."""
        stock = self.find_by_symbol(symbol)
        if stock is None:
            raise StockNotFoundError(symbol)
        return stock

    def to_dataframe(self) -> pd.DataFrame:
        """One row per stock, in market order."""
        rows = [{"symbol": s.symbol, "name": s.name, "price": s.price} for s in self._stocks]
        return pd.DataFrame(rows, columns=["symbol", "name", "price"])
