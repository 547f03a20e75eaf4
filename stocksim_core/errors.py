"""
Typed failures raised by the core.

All are recoverable: the core never exits the process. Callers (session, CLI) decide
how to present them. Each error carries a context dict for logging.
"""

from __future__ import annotations

from typing import Any


class StockSimError(Exception):
    """Base class for every error raised by stocksim_core."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# --- Trading ---


class TradeRejectedError(StockSimError):
    """A buy or sell was refused. Portfolio state is unchanged."""


class InsufficientFundsError(TradeRejectedError):
    """Buy cost exceeds the available balance."""

    def __init__(self, symbol: str, cost: float, balance: float) -> None:
        super().__init__(
            f"Insufficient balance to buy {symbol}: cost {cost:.2f} exceeds balance {balance:.2f}",
            {"symbol": symbol, "cost": cost, "balance": balance},
        )
        self.symbol = symbol
        self.cost = cost
        self.balance = balance


class InsufficientSharesError(TradeRejectedError):
    """Sell quantity exceeds the shares held."""

    def __init__(self, symbol: str, requested: int, held: int) -> None:
        super().__init__(
            f"Not enough shares of {symbol} to sell: requested {requested}, held {held}",
            {"symbol": symbol, "requested": requested, "held": held},
        )
        self.symbol = symbol
        self.requested = requested
        self.held = held


class InvalidQuantityError(TradeRejectedError, ValueError):
    """Quantity is not a positive integer."""

    def __init__(self, quantity: Any) -> None:
        super().__init__(
            f"Quantity must be a positive integer, got {quantity!r}",
            {"quantity": quantity},
        )
        self.quantity = quantity


# --- Market ---


class StockNotFoundError(StockSimError, LookupError):
    """No stock in the market matches the symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Stock not found: {symbol}", {"symbol": symbol})
        self.symbol = symbol


# --- Persistence ---


class PersistenceError(StockSimError):
    """Base class for snapshot save/load failures."""


class SnapshotFormatError(PersistenceError, ValueError):
    """Snapshot text is malformed. Nothing was restored."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None) -> None:
        where = f" (line {line_number}: {line!r})" if line_number is not None else ""
        super().__init__(f"{message}{where}", {"line_number": line_number, "line": line})
        self.line_number = line_number
        self.line = line


class PersistenceIOError(PersistenceError):
    """Underlying storage could not be read or written."""

    def __init__(self, path: str, operation: str, cause: OSError | None = None) -> None:
        detail = f": {cause.strerror or cause}" if cause is not None else ""
        super().__init__(
            f"Could not {operation} portfolio file {path}{detail}",
            {"path": path, "operation": operation},
        )
        self.path = path
        self.operation = operation
