"""
Menu loop: the console trading platform on top of TradingSession.

Each menu choice first advances market prices by one step, then runs the action.
Trading and persistence failures are reported and the loop carries on.
"""

from __future__ import annotations

import logging

import click

from stocksim_core import (
    PersistenceError,
    SimulatorConfig,
    TradingSession,
    __version__,
)
from stocksim_cli.report import format_history, format_market, format_valuation

MENU = """
=== Stock Trading Platform ===
1. View Market Data
2. Buy Stock
3. Sell Stock
4. View Portfolio
5. View Transaction History
6. Save Portfolio
7. Load Portfolio
0. Exit"""


def _echo_lines(lines: list[str]) -> None:
    click.echo("")
    for line in lines:
        click.echo(line)


def _trade(session: TradingSession, action: str) -> None:
    symbol = click.prompt(f"Enter stock symbol to {action}", type=str).strip().upper()
    if session.market.find_by_symbol(symbol) is None:
        click.echo("Stock not found.")
        return
    quantity = click.prompt("Enter quantity", type=click.INT)
    status = session.buy(symbol, quantity) if action == "buy" else session.sell(symbol, quantity)
    if status.filled:
        txn = status.transaction
        verb = "Bought" if action == "buy" else "Sold"
        click.echo(f"{verb} {txn.quantity} shares of {txn.symbol} at ${txn.unit_price:,.2f}")
    else:
        click.echo(status.message)


def _save(session: TradingSession) -> None:
    try:
        path = session.save()
    except PersistenceError as exc:
        click.echo(f"Error saving portfolio: {exc}")
        return
    click.echo(f"Portfolio saved to {path}")


def _load(session: TradingSession) -> None:
    try:
        session.load()
    except PersistenceError as exc:
        click.echo(f"Error loading portfolio: {exc}")
        return
    click.echo(f"Portfolio loaded from {session.config.portfolio_file}")


def run_menu(session: TradingSession) -> None:
    """Drive the session from stdin until the user picks 0."""
    while True:
        click.echo(MENU)
        choice = click.prompt("Choose an option", type=str).strip()

        session.tick()

        if choice == "1":
            _echo_lines(format_market(session.market))
        elif choice == "2":
            _trade(session, "buy")
        elif choice == "3":
            _trade(session, "sell")
        elif choice == "4":
            _echo_lines(format_valuation(session.valuation()))
        elif choice == "5":
            _echo_lines(format_history(session.history()))
        elif choice == "6":
            _save(session)
        elif choice == "7":
            _load(session)
        elif choice == "0":
            click.echo("Exiting... Thank you!")
            return
        else:
            click.echo("Invalid option.")


@click.command()
@click.option("--balance", type=float, default=None, help="Starting cash balance.")
@click.option("--file", "portfolio_file", type=click.Path(dir_okay=False), default=None, help="Snapshot file for save/load.")
@click.option("--seed", type=int, default=None, help="Seed for the price random walk.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.version_option(__version__, prog_name="stocksim")
def main(balance: float | None, portfolio_file: str | None, seed: int | None, log_level: str) -> None:
    """Interactive single-user stock trading simulator."""
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        base = SimulatorConfig.from_env()
        config = SimulatorConfig(
            starting_balance=base.starting_balance if balance is None else balance,
            portfolio_file=portfolio_file or base.portfolio_file,
            max_price_change=base.max_price_change,
            price_floor=base.price_floor,
            seed=base.seed if seed is None else seed,
        )
        session = TradingSession(config)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    run_menu(session)


if __name__ == "__main__":
    main()
