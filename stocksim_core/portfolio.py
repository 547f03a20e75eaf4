"""
Portfolio: cash balance, holdings and transaction history.

Sole mutator of its own state. Every public operation either applies completely
or raises a typed error with no effect. Invariants after every call:

- balance >= 0
- every holdings value is a positive int (zero entries are removed)
- opening balance + sells - buys since the last baseline == balance
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from numbers import Integral
from typing import TYPE_CHECKING, Any

from stocksim_core.errors import (
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidQuantityError,
    SnapshotFormatError,
)
from stocksim_core.stock import symbol_key
from stocksim_core.transaction import Side, Transaction
from stocksim_core.valuation import HoldingLine, Valuation

if TYPE_CHECKING:
    from stocksim_core.market import Market
    from stocksim_core.stock import Stock


@dataclass(frozen=True)
class PortfolioSnapshot:
    """The persisted subset of a Portfolio: balance and holdings only."""

    balance: float
    holdings: dict[str, int] = field(default_factory=dict)


def _checked_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, Integral) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return int(quantity)


def _validate_snapshot(snapshot: PortfolioSnapshot) -> tuple[float, dict[str, int]]:
    """Return (balance, holdings) copies or raise SnapshotFormatError."""
    try:
        balance = float(snapshot.balance)
    except (TypeError, ValueError):
        raise SnapshotFormatError(f"Balance is not a number: {snapshot.balance!r}") from None
    if not math.isfinite(balance) or balance < 0:
        raise SnapshotFormatError(f"Balance must be a finite, non-negative number: {snapshot.balance!r}")
    if not isinstance(snapshot.holdings, Mapping):
        raise SnapshotFormatError("Holdings must be a mapping of symbol to quantity")
    holdings: dict[str, int] = {}
    for symbol, qty in snapshot.holdings.items():
        if not isinstance(symbol, str) or not symbol.strip():
            raise SnapshotFormatError(f"Invalid holding symbol: {symbol!r}")
        if isinstance(qty, bool) or not isinstance(qty, Integral) or qty <= 0:
            raise SnapshotFormatError(f"Holding quantity for {symbol} must be a positive integer: {qty!r}")
        key = symbol_key(symbol)
        if key in holdings:
            raise SnapshotFormatError(f"Duplicate holding for {key}")
        holdings[key] = int(qty)
    return balance, holdings


class Portfolio:
    """
    Cash, share holdings and append-only trade history for one trader.
    """

    def __init__(self, starting_balance: float = 0.0) -> None:
        balance = float(starting_balance)
        if not math.isfinite(balance) or balance < 0:
            raise ValueError(f"Starting balance must be a finite, non-negative number, got {starting_balance!r}")
        self._balance = balance
        self._holdings: dict[str, int] = {}
        self._history: list[Transaction] = []
        self._opening_balance = balance
        self._baseline_index = 0

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def holdings(self) -> dict[str, int]:
        """Copy of symbol -> quantity, keyed by upper-case symbol. Absent symbols are held at zero."""
        return dict(self._holdings)

    def quantity(self, symbol: str) -> int:
        """Shares held in symbol (any case). 0 if not present."""
        return self._holdings.get(symbol_key(symbol), 0)

    def _update_position(self, symbol: str, delta: int) -> None:
        """Adjust holding by delta (positive = buy); drop the entry at zero."""
        key = symbol_key(symbol)
        self._holdings[key] = self.quantity(key) + delta
        if self._holdings[key] == 0:
            del self._holdings[key]

    # --- Trading ---

    def buy(self, stock: Stock, quantity: int) -> Transaction:
        """
        Buy quantity shares at stock.price. Raises InvalidQuantityError or
        InsufficientFundsError without touching state.
        """
        qty = _checked_quantity(quantity)
        price = stock.price
        cost = price * qty
        if cost > self._balance:
            raise InsufficientFundsError(stock.symbol, cost, self._balance)
        txn = Transaction(
            side=Side.BUY,
            symbol=stock.symbol,
            unit_price=price,
            quantity=qty,
            total=cost,
            timestamp=datetime.now(),
        )
        self._balance -= cost
        self._update_position(stock.symbol, qty)
        self._history.append(txn)
        return txn

    def sell(self, stock: Stock, quantity: int) -> Transaction:
        """
        Sell quantity shares at stock.price. Raises InvalidQuantityError or
        InsufficientSharesError without touching state.
        """
        qty = _checked_quantity(quantity)
        held = self.quantity(stock.symbol)
        if qty > held:
            raise InsufficientSharesError(stock.symbol, qty, held)
        price = stock.price
        proceeds = price * qty
        txn = Transaction(
            side=Side.SELL,
            symbol=stock.symbol,
            unit_price=price,
            quantity=qty,
            total=proceeds,
            timestamp=datetime.now(),
        )
        self._balance += proceeds
        self._update_position(stock.symbol, -qty)
        self._history.append(txn)
        return txn

    # --- Reporting ---

    def valuation(self, market: Market) -> Valuation:
        """Balance plus holdings at market prices. Symbols missing from market are unpriced."""
        lines: list[HoldingLine] = []
        unpriced: dict[str, int] = {}
        for symbol, qty in self._holdings.items():
            stock = market.find_by_symbol(symbol)
            if stock is None:
                unpriced[symbol] = qty
                continue
            lines.append(HoldingLine(symbol=symbol, quantity=qty, price=stock.price, value=stock.price * qty))
        return Valuation(balance=self._balance, lines=tuple(lines), unpriced=unpriced)

    def transaction_log(self) -> list[Transaction]:
        """History in execution order. Empty list if nothing traded."""
        return list(self._history)

    def expected_balance(self) -> float:
        """Opening balance adjusted by every trade since the last baseline (creation or restore)."""
        flow = 0.0
        for txn in self._history[self._baseline_index:]:
            flow += txn.total if txn.side == Side.SELL else -txn.total
        return self._opening_balance + flow

    # --- Snapshot ---

    def snapshot(self) -> PortfolioSnapshot:
        """Balance and holdings. History is not part of the snapshot."""
        return PortfolioSnapshot(balance=self._balance, holdings=dict(self._holdings))

    def restore(self, snapshot: PortfolioSnapshot) -> None:
        """
        Replace balance and holdings wholesale. Raises SnapshotFormatError and
        leaves the portfolio unchanged if the snapshot breaks an invariant.
        History is kept; the reconciliation baseline moves to the restored balance.
        """
        balance, holdings = _validate_snapshot(snapshot)
        self._balance = balance
        self._holdings = holdings
        self._opening_balance = balance
        self._baseline_index = len(self._history)
