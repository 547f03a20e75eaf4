"""
Snapshot persistence: newline-delimited text, balance then one holding per line.

    <balance>
    <symbol>,<quantity>
    ...

Only balance and holdings are stored; transaction history is not. Loading parses
the whole file before touching the portfolio, so a bad file changes nothing.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from stocksim_core.errors import PersistenceIOError, SnapshotFormatError
from stocksim_core.portfolio import Portfolio, PortfolioSnapshot
from stocksim_core.stock import symbol_key

logger = logging.getLogger(__name__)


def dump_snapshot(snapshot: PortfolioSnapshot) -> str:
    """Serialize to the text format. repr() keeps the balance exact on reload."""
    lines = [repr(float(snapshot.balance))]
    lines.extend(f"{symbol},{qty}" for symbol, qty in snapshot.holdings.items())
    return "\n".join(lines) + "\n"


def _parse_balance(line: str, line_number: int) -> float:
    try:
        balance = float(line)
    except ValueError:
        raise SnapshotFormatError("Balance is not a decimal number", line_number, line) from None
    if not math.isfinite(balance) or balance < 0:
        raise SnapshotFormatError("Balance must be a finite, non-negative number", line_number, line)
    return balance


def _parse_holding(line: str, line_number: int) -> tuple[str, int]:
    parts = line.split(",")
    if len(parts) != 2:
        raise SnapshotFormatError("Holding line must be <symbol>,<quantity>", line_number, line)
    symbol, raw_qty = parts[0].strip(), parts[1].strip()
    if not symbol:
        raise SnapshotFormatError("Holding symbol is empty", line_number, line)
    try:
        qty = int(raw_qty)
    except ValueError:
        raise SnapshotFormatError("Holding quantity is not an integer", line_number, line) from None
    if qty <= 0:
        raise SnapshotFormatError("Holding quantity must be positive", line_number, line)
    return symbol, qty


def parse_snapshot(text: str) -> PortfolioSnapshot:
    """Parse snapshot text. Blank lines are ignored. Raises SnapshotFormatError."""
    numbered = [(n, line.strip()) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if not numbered:
        raise SnapshotFormatError("Snapshot is empty")
    first_number, first_line = numbered[0]
    balance = _parse_balance(first_line, first_number)
    holdings: dict[str, int] = {}
    seen: set[str] = set()
    for line_number, line in numbered[1:]:
        symbol, qty = _parse_holding(line, line_number)
        key = symbol_key(symbol)
        if key in seen:
            raise SnapshotFormatError(f"Duplicate holding for {key}", line_number, line)
        seen.add(key)
        holdings[symbol] = qty
    return PortfolioSnapshot(balance=balance, holdings=holdings)


def save_portfolio(portfolio: Portfolio, path: str | Path) -> Path:
    """Overwrite path with the portfolio's snapshot. Returns the path written."""
    target = Path(path)
    text = dump_snapshot(portfolio.snapshot())
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise PersistenceIOError(str(target), "write", exc) from exc
    logger.info("Portfolio saved to %s", target)
    return target


def load_portfolio(portfolio: Portfolio, path: str | Path) -> PortfolioSnapshot:
    """Read path and restore it into portfolio. Portfolio is untouched on any error."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise PersistenceIOError(str(source), "read", exc) from exc
    except UnicodeDecodeError:
        raise SnapshotFormatError(f"Portfolio file {source} is not valid UTF-8 text") from None
    snapshot = parse_snapshot(text)
    portfolio.restore(snapshot)
    logger.info("Portfolio loaded from %s (%d holdings)", source, len(snapshot.holdings))
    return snapshot
