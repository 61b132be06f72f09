from __future__ import annotations

import pytest

from stocktrends.analysis.periods import AggregatedPeriod, Granularity, PeriodKey, aggregate
from stocktrends.errors import InvalidPeriodKey, InvalidRequest
from stocktrends.utils import round2


@pytest.fixture
def daily_bars(bar):  # noqa: ANN001
    days = [
        ("2023-01-02", 10.0, 11.0),
        ("2023-01-09", 11.0, 12.0),
        ("2023-01-30", 12.0, 12.5),
        ("2023-02-01", 12.5, 13.0),
        ("2023-03-31", 13.0, 12.0),
        ("2023-04-03", 12.0, 14.0),
        ("2024-01-02", 14.0, 15.0),
    ]
    return [bar(d, o, c) for d, o, c in days]


@pytest.mark.parametrize("granularity", list(Granularity))
def test_bucket_open_and_close_come_from_first_and_last_bar(daily_bars, granularity) -> None:  # noqa: ANN001
    out = aggregate(daily_bars, granularity)

    expected: dict[str, list] = {}
    for b in daily_bars:
        expected.setdefault(PeriodKey.for_date(b.date, granularity).encode(), []).append(b)

    assert list(out) == list(expected)
    for key, members in expected.items():
        assert out[key].open == members[0].open
        assert out[key].close == members[-1].close
        assert out[key].change == members[-1].close - members[0].open


def test_monthly_keys_and_values(daily_bars) -> None:  # noqa: ANN001
    out = aggregate(daily_bars, "monthly")
    assert list(out) == ["2023-01", "2023-02", "2023-03", "2023-04", "2024-01"]
    assert out["2023-01"] == AggregatedPeriod("2023-01", 10.0, 12.5, 2.5, 25.0)


def test_quarterly_and_yearly_keys(daily_bars) -> None:  # noqa: ANN001
    assert list(aggregate(daily_bars, Granularity.QUARTERLY)) == ["2023-Q1", "2023-Q2", "2024-Q1"]
    assert list(aggregate(daily_bars, Granularity.YEARLY)) == ["2023", "2024"]


def test_weekly_keys_use_day_of_month(daily_bars) -> None:  # noqa: ANN001
    # Jan 2 -> W1, Jan 9 -> W2, Jan 30 -> W5, Feb 1 joins W1, Mar 31 -> W5.
    assert list(aggregate(daily_bars, Granularity.WEEKLY)) == ["2023-W1", "2023-W2", "2023-W5", "2024-W1"]


def test_change_percent_rounds_to_two_places(bar) -> None:  # noqa: ANN001
    out = aggregate([bar("2023-05-01", 100.0, 105.0)], "monthly")
    assert out["2023-05"].change_percent == 5.0

    out = aggregate([bar("2023-05-01", 3.0, 4.0)], "monthly")
    assert out["2023-05"].change_percent == 33.33


def test_single_flat_bar_still_produces_a_bucket(bar) -> None:  # noqa: ANN001
    out = aggregate([bar("2023-06-15", 50.0, 50.0)], "yearly")
    assert out["2023"].open == 50.0
    assert out["2023"].close == 50.0
    assert out["2023"].change_percent == 0.0


def test_output_follows_scan_order_for_non_monotonic_input(bar) -> None:  # noqa: ANN001
    bars = [
        bar("2023-03-01", 30.0, 31.0),
        bar("2023-01-01", 10.0, 11.0),
        bar("2023-03-15", 31.0, 33.0),
    ]
    out = aggregate(bars, "monthly")
    assert list(out) == ["2023-03", "2023-01"]
    assert out["2023-03"].open == 30.0
    assert out["2023-03"].close == 33.0


def test_empty_input_yields_no_buckets() -> None:
    assert aggregate([], "monthly") == {}


def test_unknown_granularity_is_rejected(daily_bars) -> None:  # noqa: ANN001
    with pytest.raises(InvalidRequest):
        aggregate(daily_bars, "daily")


@pytest.mark.parametrize(
    "text, granularity, index",
    [
        ("2023", Granularity.YEARLY, 0),
        ("2023-Q2", Granularity.QUARTERLY, 2),
        ("2023-W3", Granularity.WEEKLY, 3),
        ("2023-07", Granularity.MONTHLY, 7),
    ],
)
def test_period_key_decode(text, granularity, index) -> None:  # noqa: ANN001
    key = PeriodKey.decode(text)
    assert key.year == 2023
    assert key.granularity is granularity
    assert key.index == index
    assert key.encode() == text


@pytest.mark.parametrize("text", ["", "abc", "23-01", "2023-13", "2023-Q5", "2023-W0", "2023-Qx", "2023-01-05"])
def test_period_key_decode_rejects_malformed(text) -> None:  # noqa: ANN001
    with pytest.raises(InvalidPeriodKey):
        PeriodKey.decode(text)


def test_round2_is_half_up() -> None:
    assert round2(2.675) == 2.68
    assert round2(0.125) == 0.13
    assert round2(-1.005) == -1.01
    assert round2(5.0) == 5.0
