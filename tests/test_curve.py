# tests/test_curve.py
from __future__ import annotations

import random
from datetime import datetime

import pytest

from challenge.curve import build_balance_curve, chart_references, closed_in_order
from challenge.models import AccountParameters, BalancePoint

from tests.factories import at, make_trade


def make_history():
    return [
        make_trade("t1", 500.0, at(3, 10)),
        make_trade("t2", -200.0, at(3, 15)),
        make_trade("t3", 300.0, at(4, 9)),
        make_trade("t4", -50.0, at(5, 11)),
        make_trade("open-1", -75.0, closed=False, open_time=at(5, 12)),
    ]


def test_curve_has_one_point_per_closed_trade_plus_initial():
    trades = make_history()
    curve = build_balance_curve(10_000.0, trades)

    assert len(curve) == 4 + 1
    assert curve[0] == BalancePoint(timestamp=at(3, 10), balance=10_000.0)
    assert [p.balance for p in curve] == pytest.approx([10_000.0, 10_500.0, 10_300.0, 10_600.0, 10_550.0])


def test_open_trades_do_not_move_the_curve():
    trades = make_history()
    closed_only = [t for t in trades if t.is_closed]
    assert build_balance_curve(10_000.0, trades) == build_balance_curve(10_000.0, closed_only)


def test_final_balance_equals_initial_plus_net_of_closed_trades():
    trades = make_history()
    curve = build_balance_curve(10_000.0, trades)
    net = sum(t.net_profit for t in trades if t.is_closed)
    assert curve[-1].balance - 10_000.0 == pytest.approx(net)


def test_curve_timestamps_are_non_decreasing():
    curve = build_balance_curve(10_000.0, make_history())
    stamps = [p.timestamp for p in curve]
    assert stamps == sorted(stamps)


def test_scrambled_input_gives_identical_curve():
    trades = make_history()
    expected = build_balance_curve(10_000.0, trades)

    rng = random.Random(7)
    for _ in range(10):
        shuffled = trades[:]
        rng.shuffle(shuffled)
        assert build_balance_curve(10_000.0, shuffled) == expected


def test_equal_close_times_are_ordered_by_id():
    same_time = at(3, 10)
    b = make_trade("b", 100.0, same_time)
    a = make_trade("a", -50.0, same_time)

    curve_ab = build_balance_curve(1_000.0, [b, a])
    curve_ba = build_balance_curve(1_000.0, [a, b])

    assert curve_ab == curve_ba
    assert [p.balance for p in curve_ab] == pytest.approx([1_000.0, 950.0, 1_050.0])
    assert [t.id for t in closed_in_order([b, a])] == ["a", "b"]


def test_no_closed_trades_gives_single_point_at_evaluation_time():
    as_of = datetime(2025, 3, 10, 18, 0)
    open_only = [make_trade("o1", 10.0, closed=False)]

    curve = build_balance_curve(100_000.0, open_only, as_of=as_of)

    assert curve == (BalancePoint(timestamp=as_of, balance=100_000.0),)


def test_empty_curve_needs_evaluation_time():
    with pytest.raises(ValueError):
        build_balance_curve(100_000.0, [])


def test_raw_payloads_are_refused():
    with pytest.raises(TypeError):
        build_balance_curve(100_000.0, [{"OrderId": "1"}], as_of=datetime(2025, 1, 1))


def test_chart_references():
    params = AccountParameters(
        initial_balance=100_000.0,
        profit_target_percent=8.0,
        max_drawdown_percent=10.0,
    )
    refs = chart_references(params)
    assert refs.profit_target_level == pytest.approx(108_000.0)
    assert refs.max_drawdown_level == pytest.approx(90_000.0)
