"""
Scripted session: drive the simulator without the interactive menu.

Shows: TradingSession with a seeded market, buy/sell statuses, valuation,
transaction log as a DataFrame, rejected-trade log, and save/load.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from stocksim_core import SimulatorConfig, TradingSession
from stocksim_core.transaction import transactions_to_dataframe


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    snapshot_file = Path(tempfile.gettempdir()) / "stocksim_example.txt"
    session = TradingSession(SimulatorConfig(starting_balance=10_000.0, portfolio_file=str(snapshot_file), seed=42))

    print("--- Market ---")
    print(session.market.to_dataframe().to_string(index=False))

    for symbol, qty in [("AAPL", 10), ("TSLA", 5), ("AMZN", 3)]:
        status = session.buy(symbol, qty)
        print(f"buy {qty} {symbol}: {status.status.value} {status.message or ''}")

    for _ in range(10):
        session.tick()

    status = session.sell("AAPL", 4)
    print(f"sell 4 AAPL: {status.status.value}")
    status = session.sell("GOOGL", 1)
    print(f"sell 1 GOOGL: {status.status.value} ({status.reason.value})")

    valuation = session.valuation()
    print("\n--- Valuation ---")
    print(valuation.to_dataframe().to_string(index=False))
    print(f"Balance: {valuation.balance:,.2f}  Total: {valuation.total:,.2f}")

    print("\n--- History ---")
    print(transactions_to_dataframe(session.history()).to_string(index=False))

    print("\n--- Rejected ---")
    for entry in session.get_rejected_log():
        print(f"  {entry.side.name} {entry.quantity} {entry.symbol}: {entry.reason.value}")

    session.save()
    restored = TradingSession(session.config)
    restored.load()
    print(f"\nRestored from {snapshot_file}: balance={restored.portfolio.balance:,.2f}, holdings={restored.portfolio.holdings}")


if __name__ == "__main__":
    main()
