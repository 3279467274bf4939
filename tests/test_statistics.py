# tests/test_statistics.py
from __future__ import annotations

import math
from datetime import timedelta

import pytest

from challenge.models import AggregateStats, Side
from challenge.statistics import aggregate_stats, symbol_breakdown

from tests.factories import at, make_trade


def mixed_trades():
    return [
        make_trade("1", 300.0, at(3, 10), symbol="EURUSD", side=Side.BUY, volume=1.0),
        make_trade("2", -100.0, at(3, 11), symbol="XAUUSD", side=Side.SELL, volume=0.5),
        make_trade("3", 100.0, at(4, 10), symbol="EURUSD", side=Side.SELL, volume=2.0),
        make_trade("4", -200.0, at(4, 12), symbol="EURUSD", side=Side.BUY, volume=1.0),
        make_trade("5", 0.0, at(5, 10), symbol="NAS100", side=Side.BUY, volume=0.5),
    ]


def test_zero_trades_give_zeroed_stats():
    stats = aggregate_stats([])
    assert stats == AggregateStats()
    assert stats.total_trades == 0
    assert stats.win_rate == 0.0
    assert stats.profit_factor == 0.0
    assert stats.expectancy == 0.0
    assert stats.symbols == ()


def test_mixed_history():
    stats = aggregate_stats(mixed_trades())

    assert stats.total_trades == 5
    assert stats.winning_trades == 2
    assert stats.losing_trades == 2
    assert stats.win_rate == pytest.approx(40.0)
    assert stats.loss_rate == pytest.approx(40.0)
    assert stats.gross_profit == pytest.approx(400.0)
    assert stats.gross_loss == pytest.approx(300.0)
    assert stats.net_profit == pytest.approx(100.0)
    assert stats.profit_factor == pytest.approx(400.0 / 300.0)
    assert stats.expectancy == pytest.approx(20.0)
    assert stats.average_win == pytest.approx(200.0)
    assert stats.average_loss == pytest.approx(150.0)
    assert stats.largest_win == pytest.approx(300.0)
    assert stats.largest_loss == pytest.approx(200.0)
    assert stats.profit_loss_ratio == pytest.approx(200.0 / 150.0)
    assert stats.total_volume == pytest.approx(5.0)
    assert stats.buy_trades == 3
    assert stats.sell_trades == 2


def test_break_even_trade_keeps_rates_below_hundred():
    stats = aggregate_stats(mixed_trades())
    assert stats.win_rate + stats.loss_rate < 100.0


def test_profit_factor_is_infinite_without_losses():
    stats = aggregate_stats([make_trade("1", 50.0), make_trade("2", 25.0, at(3, 13))])
    assert math.isinf(stats.profit_factor) and stats.profit_factor > 0
    assert math.isinf(stats.profit_loss_ratio)
    assert stats.largest_loss == 0.0
    assert stats.average_loss == 0.0


def test_profit_factor_is_zero_when_everything_breaks_even():
    stats = aggregate_stats([make_trade("1", 0.0), make_trade("2", 0.0, at(3, 13))])
    assert stats.profit_factor == 0.0
    assert stats.win_rate == 0.0
    assert stats.loss_rate == 0.0


def test_costs_can_turn_a_gross_winner_into_a_loss():
    t = make_trade("1", -2.0, commission=-12.0)  # profit 10, commission -12
    stats = aggregate_stats([t])
    assert t.profit == pytest.approx(10.0)
    assert stats.losing_trades == 1
    assert stats.winning_trades == 0


def test_open_trades_are_ignored():
    trades = mixed_trades() + [make_trade("open", 999.0, closed=False)]
    assert aggregate_stats(trades) == aggregate_stats(mixed_trades())


def test_average_hold_time():
    t1 = make_trade("1", 10.0, at(3, 10), open_time=at(3, 9))
    t2 = make_trade("2", 10.0, at(3, 12), open_time=at(3, 9))
    stats = aggregate_stats([t1, t2])
    assert stats.average_hold_seconds == pytest.approx(timedelta(hours=2).total_seconds())


def test_symbol_breakdown_sorted_by_trade_count():
    rows = symbol_breakdown(mixed_trades())

    assert [r.symbol for r in rows] == ["EURUSD", "NAS100", "XAUUSD"]

    eur = rows[0]
    assert eur.trades == 3
    assert eur.wins == 2
    assert eur.losses == 1
    assert eur.win_rate == pytest.approx(200.0 / 3.0)
    assert eur.total_profit == pytest.approx(200.0)
    assert eur.average_profit == pytest.approx(200.0 / 3.0)

    nas = rows[1]
    assert nas.wins == 0 and nas.losses == 0


def test_symbol_breakdown_is_part_of_aggregate_stats():
    stats = aggregate_stats(mixed_trades())
    assert stats.symbols == symbol_breakdown(mixed_trades())


def test_unknown_side_counts_as_a_trade_but_not_as_buy_or_sell():
    trades = mixed_trades() + [make_trade("6", 75.0, at(5, 12), side=None)]
    stats = aggregate_stats(trades)

    assert stats.total_trades == 6
    assert stats.winning_trades == 3
    assert stats.buy_trades == 3
    assert stats.sell_trades == 2
