"""
Tests for stocksim_core: Stock, Market, Transaction, Portfolio, Valuation.
"""

import numpy as np
import pytest

from stocksim_core import (
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidQuantityError,
    Market,
    Portfolio,
    PortfolioSnapshot,
    Side,
    SnapshotFormatError,
    Stock,
    StockNotFoundError,
    random_walk,
)
from stocksim_core.market import default_stocks
from stocksim_core.transaction import transactions_to_dataframe


def _fixed_market(delta: float = 0.0, floor: float = 1.0) -> Market:
    """Default stocks with a deterministic price change per update."""
    return Market(default_stocks(), perturb=lambda stock: delta, price_floor=floor)


# --- Stock ---


def test_stock_creation():
    s = Stock("AAPL", "Apple Inc.", 150.0)
    assert s.symbol == "AAPL"
    assert s.name == "Apple Inc."
    assert s.price == 150.0
    assert str(s) == "AAPL (Apple Inc.) - $150.00"


def test_stock_rejects_non_positive_price():
    with pytest.raises(ValueError):
        Stock("AAPL", "Apple Inc.", 0.0)


def test_stock_apply_change_clamps_to_floor():
    s = Stock("AAPL", "Apple Inc.", 3.0)
    assert s.apply_change(-10.0, floor=1.0) == 1.0
    assert s.price == 1.0


# --- Market ---


def test_market_find_by_symbol_case_insensitive():
    market = _fixed_market()
    assert market.find_by_symbol("aapl").symbol == "AAPL"
    assert market.find_by_symbol("GoOgL").symbol == "GOOGL"
    assert market.find_by_symbol("MSFT") is None


def test_market_get_raises_not_found():
    market = _fixed_market()
    with pytest.raises(StockNotFoundError) as info:
        market.get("MSFT")
    assert info.value.symbol == "MSFT"


def test_market_rejects_duplicate_symbols():
    with pytest.raises(ValueError):
        Market([Stock("AAPL", "Apple", 1.0), Stock("aapl", "Apple again", 2.0)])


def test_market_update_all_applies_perturbation():
    market = _fixed_market(delta=2.5)
    market.update_all()
    assert market.prices() == {"AAPL": 152.5, "GOOGL": 2802.5, "TSLA": 702.5, "AMZN": 3302.5}


def test_market_update_all_clamps_to_floor():
    market = _fixed_market(delta=-10_000.0, floor=1.0)
    market.update_all()
    assert all(price == 1.0 for price in market.prices().values())


def test_random_walk_stays_in_range():
    market = Market(default_stocks(), perturb=random_walk(5.0, seed=7))
    before = market.prices()
    market.update_all()
    after = market.prices()
    for symbol, price in after.items():
        assert abs(price - before[symbol]) <= 5.0


def test_random_walk_same_seed_same_path():
    a = Market.default(seed=42)
    b = Market.default(seed=42)
    for _ in range(20):
        a.update_all()
        b.update_all()
    assert a.prices() == b.prices()


def test_market_to_dataframe():
    df = _fixed_market().to_dataframe()
    assert list(df.columns) == ["symbol", "name", "price"]
    assert list(df["symbol"]) == ["AAPL", "GOOGL", "TSLA", "AMZN"]


# --- Portfolio: buy ---


def test_portfolio_initial_state():
    p = Portfolio(10_000.0)
    assert p.balance == 10_000.0
    assert p.holdings == {}
    assert p.quantity("AAPL") == 0
    assert p.transaction_log() == []


def test_portfolio_rejects_negative_starting_balance():
    with pytest.raises(ValueError):
        Portfolio(-1.0)


def test_buy_updates_balance_holdings_history():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 150.0)
    txn = p.buy(stock, 10)
    assert p.balance == 8_500.0
    assert p.holdings == {"AAPL": 10}
    assert txn.side == Side.BUY
    assert txn.unit_price == 150.0
    assert txn.quantity == 10
    assert txn.total == 1_500.0
    assert p.transaction_log() == [txn]


def test_buy_accumulates_existing_holding():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 100.0)
    p.buy(stock, 3)
    p.buy(stock, 4)
    assert p.quantity("AAPL") == 7


def test_buy_exact_balance_allowed():
    p = Portfolio(1_500.0)
    p.buy(Stock("AAPL", "Apple Inc.", 150.0), 10)
    assert p.balance == 0.0


def test_buy_insufficient_funds_no_effect():
    p = Portfolio(1_000.0)
    stock = Stock("AAPL", "Apple Inc.", 150.0)
    with pytest.raises(InsufficientFundsError) as info:
        p.buy(stock, 10)
    assert info.value.cost == 1_500.0
    assert info.value.balance == 1_000.0
    assert p.balance == 1_000.0
    assert p.holdings == {}
    assert p.transaction_log() == []


@pytest.mark.parametrize("qty", [0, -3, 1.5, True, "2"])
def test_buy_invalid_quantity_no_effect(qty):
    p = Portfolio(1_000.0)
    with pytest.raises(InvalidQuantityError):
        p.buy(Stock("AAPL", "Apple Inc.", 10.0), qty)
    assert p.balance == 1_000.0
    assert p.holdings == {}
    assert p.transaction_log() == []


def test_buy_accepts_numpy_integer():
    p = Portfolio(1_000.0)
    p.buy(Stock("AAPL", "Apple Inc.", 10.0), np.int64(3))
    assert p.holdings == {"AAPL": 3}
    assert type(p.holdings["AAPL"]) is int


# --- Portfolio: sell ---


def test_sell_updates_balance_holdings_history():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 150.0)
    p.buy(stock, 10)
    stock.price = 160.0
    txn = p.sell(stock, 4)
    assert p.balance == 9_140.0
    assert p.holdings == {"AAPL": 6}
    assert txn.side == Side.SELL
    assert txn.total == 640.0
    assert [t.side for t in p.transaction_log()] == [Side.BUY, Side.SELL]


def test_sell_all_removes_entry():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 150.0)
    p.buy(stock, 10)
    p.sell(stock, 10)
    assert "AAPL" not in p.holdings
    assert p.quantity("AAPL") == 0
    assert p.balance == 10_000.0


def test_sell_never_bought_insufficient_shares():
    p = Portfolio(10_000.0)
    with pytest.raises(InsufficientSharesError) as info:
        p.sell(Stock("TSLA", "Tesla Inc.", 700.0), 5)
    assert info.value.held == 0
    assert info.value.requested == 5
    assert p.balance == 10_000.0
    assert p.holdings == {}
    assert p.transaction_log() == []


def test_sell_more_than_held_no_effect():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 100.0)
    p.buy(stock, 2)
    with pytest.raises(InsufficientSharesError):
        p.sell(stock, 3)
    assert p.balance == 9_800.0
    assert p.holdings == {"AAPL": 2}
    assert len(p.transaction_log()) == 1


def test_sell_zero_quantity_rejected():
    p = Portfolio(10_000.0)
    stock = Stock("AAPL", "Apple Inc.", 100.0)
    p.buy(stock, 2)
    with pytest.raises(InvalidQuantityError):
        p.sell(stock, 0)
    assert p.holdings == {"AAPL": 2}


# --- Portfolio: valuation ---


def test_valuation_concrete_scenario():
    market = _fixed_market(delta=10.0)
    p = Portfolio(10_000.0)
    aapl = market.get("AAPL")
    p.buy(aapl, 10)
    market.update_all()  # AAPL 150 -> 160
    p.sell(aapl, 4)
    v = p.valuation(market)
    assert v.balance == 9_140.0
    assert len(v.lines) == 1
    line = v.lines[0]
    assert (line.symbol, line.quantity, line.price, line.value) == ("AAPL", 6, 160.0, 960.0)
    assert v.total == 10_100.0
    assert v.unpriced == {}


def test_valuation_excludes_symbols_missing_from_market():
    p = Portfolio(1_000.0)
    p.buy(Stock("XYZ", "Delisted Co.", 10.0), 5)
    v = p.valuation(_fixed_market())
    assert v.lines == ()
    assert v.unpriced == {"XYZ": 5}
    assert v.total == 950.0


def test_valuation_empty_portfolio():
    v = Portfolio(500.0).valuation(_fixed_market())
    assert v.total == 500.0
    assert v.to_dataframe().empty


def test_valuation_does_not_mutate():
    market = _fixed_market()
    p = Portfolio(10_000.0)
    p.buy(market.get("TSLA"), 2)
    before = (p.balance, p.holdings, p.transaction_log())
    p.valuation(market)
    assert (p.balance, p.holdings, p.transaction_log()) == before


# --- Portfolio: invariants ---


def test_random_trading_keeps_invariants():
    rng = np.random.default_rng(0)
    market = Market.default(seed=1)
    p = Portfolio(10_000.0)
    for _ in range(500):
        stock = list(market)[int(rng.integers(len(market)))]
        qty = int(rng.integers(1, 6))
        try:
            if rng.random() < 0.5:
                p.buy(stock, qty)
            else:
                p.sell(stock, qty)
        except (InsufficientFundsError, InsufficientSharesError):
            pass
        market.update_all()
        assert p.balance >= 0
        assert all(isinstance(q, int) and q > 0 for q in p.holdings.values())
        assert p.balance == pytest.approx(p.expected_balance())


def test_transaction_log_is_a_copy():
    p = Portfolio(1_000.0)
    p.buy(Stock("AAPL", "Apple Inc.", 10.0), 1)
    log = p.transaction_log()
    log.clear()
    assert len(p.transaction_log()) == 1


def test_transaction_immutable():
    p = Portfolio(1_000.0)
    txn = p.buy(Stock("AAPL", "Apple Inc.", 10.0), 1)
    with pytest.raises(AttributeError):
        txn.quantity = 5


def test_transactions_to_dataframe():
    p = Portfolio(1_000.0)
    stock = Stock("AAPL", "Apple Inc.", 10.0)
    p.buy(stock, 3)
    p.sell(stock, 1)
    df = transactions_to_dataframe(p.transaction_log())
    assert list(df["side"]) == ["buy", "sell"]
    assert list(df["total"]) == [30.0, 10.0]


# --- Portfolio: snapshot ---


def test_snapshot_round_trip_into_fresh_portfolio():
    p = Portfolio(10_000.0)
    p.buy(Stock("AAPL", "Apple Inc.", 150.0), 10)
    p.buy(Stock("TSLA", "Tesla Inc.", 700.0), 2)
    fresh = Portfolio()
    fresh.restore(p.snapshot())
    assert fresh.balance == p.balance
    assert fresh.holdings == p.holdings
    assert fresh.transaction_log() == []


def test_restore_keeps_history_and_moves_baseline():
    p = Portfolio(1_000.0)
    p.buy(Stock("AAPL", "Apple Inc.", 10.0), 1)
    p.restore(PortfolioSnapshot(balance=500.0, holdings={"TSLA": 3}))
    assert p.balance == 500.0
    assert p.holdings == {"TSLA": 3}
    assert len(p.transaction_log()) == 1
    assert p.expected_balance() == 500.0


@pytest.mark.parametrize(
    "snapshot",
    [
        PortfolioSnapshot(balance=-1.0),
        PortfolioSnapshot(balance=float("nan")),
        PortfolioSnapshot(balance=100.0, holdings={"AAPL": 0}),
        PortfolioSnapshot(balance=100.0, holdings={"AAPL": -2}),
        PortfolioSnapshot(balance=100.0, holdings={"AAPL": 1.5}),
        PortfolioSnapshot(balance=100.0, holdings={"": 1}),
    ],
)
def test_restore_invalid_snapshot_leaves_state(snapshot):
    p = Portfolio(1_000.0)
    p.buy(Stock("AAPL", "Apple Inc.", 10.0), 2)
    with pytest.raises(SnapshotFormatError):
        p.restore(snapshot)
    assert p.balance == 980.0
    assert p.holdings == {"AAPL": 2}


def test_restore_normalizes_symbol_case_for_trading():
    market = _fixed_market()
    p = Portfolio()
    p.restore(PortfolioSnapshot(balance=100.0, holdings={"aapl": 5}))
    assert p.holdings == {"AAPL": 5}
    assert p.quantity("Aapl") == 5
    p.sell(market.get("AAPL"), 2)
    p.buy(Stock("aapl", "Apple Inc.", 10.0), 1)
    assert p.holdings == {"AAPL": 4}


def test_restore_rejects_symbols_differing_only_in_case():
    p = Portfolio(1_000.0)
    with pytest.raises(SnapshotFormatError):
        p.restore(PortfolioSnapshot(balance=100.0, holdings={"AAPL": 1, "aapl": 2}))
    assert p.balance == 1_000.0
    assert p.holdings == {}
