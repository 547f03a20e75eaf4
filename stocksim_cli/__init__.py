"""
Interactive console front-end for stocksim_core.

Menu loop and text reports only; all state lives in a TradingSession.
"""

from stocksim_cli.app import main, run_menu
from stocksim_cli.report import format_history, format_market, format_valuation

__all__ = [
    "main",
    "run_menu",
    "format_history",
    "format_market",
    "format_valuation",
]
