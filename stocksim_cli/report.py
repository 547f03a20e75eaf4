"""
Text reports: market data, portfolio valuation and transaction history.
"""

from __future__ import annotations

from collections.abc import Sequence

from stocksim_core import Market, Transaction, Valuation


def format_market(market: Market) -> list[str]:
    """One line per stock, in market order."""
    lines = ["=== Market Data ==="]
    lines.extend(str(stock) for stock in market)
    return lines


def format_valuation(valuation: Valuation) -> list[str]:
    """
    Balance, one line per priced holding, unpriced holdings (if any) and total.

    Parameters
    ----------
    valuation : Valuation
        Output of Portfolio.valuation() or TradingSession.valuation().

    Returns
    -------
    list of str
        Lines ready to print.
    """
    lines = ["=== Portfolio ===", f"Balance: ${valuation.balance:,.2f}"]
    if not valuation.lines and not valuation.unpriced:
        lines.append("No holdings.")
    for line in valuation.lines:
        lines.append(f"{line.symbol}: {line.quantity} shares @ ${line.price:,.2f} = ${line.value:,.2f}")
    for symbol, qty in sorted(valuation.unpriced.items()):
        lines.append(f"{symbol}: {qty} shares (not in market, excluded from total)")
    lines.append(f"Total Portfolio Value: ${valuation.total:,.2f}")
    return lines


def format_history(transactions: Sequence[Transaction]) -> list[str]:
    lines = ["=== Transaction History ==="]
    if not transactions:
        lines.append("No transactions yet.")
    lines.extend(str(t) for t in transactions)
    return lines
