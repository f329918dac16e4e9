import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bfx_api.errors import PreconditionViolation
from bfx_api.helpers import to_milliseconds
from bfx_api.queries import (
    book_path,
    candle_segment,
    category_of,
    funding_stats_path,
    hist_query,
    history_body,
    history_params,
    numeric_string,
    order_selector,
    parse_currency_from_symbol,
    raw_book_path,
    require_funding_symbol,
    require_trading_symbol,
    stat_path,
    time_in_force_string,
)
from bfx_api.types import BookPrecision, CandleAggPeriod, InstrumentCategory, StatKey


@pytest.mark.parametrize(
    "period, agg, expected",
    [
        (30, CandleAggPeriod.A10, "a10:p21:p30"),
        (20, CandleAggPeriod.NONE, "p20"),
        (30, CandleAggPeriod.A30, "a30:p2:p30"),
        (120, CandleAggPeriod.A30, "a30:p91:p120"),
        (10, 10, "a10:p2:p10"),
        (2, "none", "p2"),
    ],
)
def test_candle_segment(period, agg, expected):
    assert candle_segment(period, agg) == expected


def test_candle_segment_warns_on_non_multiple(caplog):
    with caplog.at_level(logging.WARNING, logger="bfx_api.queries"):
        assert candle_segment(25, CandleAggPeriod.A10) == "a10:p16:p25"

    assert "not a multiple" in caplog.text


@pytest.mark.parametrize("period", [0, -30, True, 1.5])
def test_candle_segment_rejects_period(period):
    with pytest.raises(PreconditionViolation):
        candle_segment(period, CandleAggPeriod.A10)


def test_candle_segment_rejects_unknown_aggregation():
    with pytest.raises(PreconditionViolation):
        candle_segment(30, 15)


@pytest.mark.parametrize(
    "precision, expected",
    [
        (1, "book/tBTCUSD/P1?len=250"),
        (BookPrecision.P3, "book/tBTCUSD/P3?len=250"),
        ("P4", "book/tBTCUSD/P4?len=250"),
    ],
)
def test_book_path(precision, expected):
    assert book_path("tBTCUSD", precision) == expected


def test_raw_book_path():
    assert raw_book_path("fUSD") == "book/fUSD/R0?len=250"


def test_stat_default_side_pair(caplog):
    with caplog.at_level(logging.WARNING, logger="bfx_api.queries"):
        path = stat_path("fUSD", "credits.size.sym")

    assert path == "stats1/credits.size.sym:1m:fUSD:tBTCUSD/hist?sort=-1"
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING


def test_stat_path_with_window():
    start = datetime(2023, 3, 1, tzinfo=timezone.utc)

    path = stat_path(
        "tBTCUSD", StatKey.POS_SIZE, use_short=False, limit=5, start=start
    )

    assert path == "stats1/pos.size:1m:tBTCUSD:long/hist?sort=-1&limit=5&start=1677628800000"


def test_unknown_stat_key():
    with pytest.raises(PreconditionViolation):
        stat_path("fUSD", "open.interest")


@pytest.mark.parametrize(
    "symbol, expected",
    [
        ("fUSD", InstrumentCategory.FUNDING),
        ("tBTCUSD", InstrumentCategory.TRADING),
        ("FUSD", None),
        ("BTCUSD", None),
        ("", None),
    ],
)
def test_category_of(symbol, expected):
    assert category_of(symbol) is expected


def test_require_symbol_category():
    assert require_funding_symbol("fUSD", "Test") == "fUSD"
    assert require_trading_symbol("tBTCUSD", "Test") == "tBTCUSD"

    with pytest.raises(PreconditionViolation) as exc_info:
        require_funding_symbol("tBTCUSD", "Funding book")

    assert str(exc_info.value) == (
        "Funding book requires a funding symbol (e.g. fUSD), got 'tBTCUSD'"
    )


@pytest.mark.parametrize(
    "symbol, currency",
    [
        ("fUSD", "USD"),
        ("fUST", "UST"),
        ("tBTCUSD", "USD"),
        ("tETHBTC", "BTC"),
        ("tETH:USDT", "USDT"),
        ("tTESTBTC:TESTUSD", "TESTUSD"),
        ("USD", "USD"),
    ],
)
def test_parse_currency_from_symbol(symbol, currency):
    assert parse_currency_from_symbol(symbol) == currency


def test_hist_query():
    assert hist_query() == "?sort=-1"
    assert hist_query(sort=False) == ""
    assert hist_query(10, 1000, 2000) == "?sort=-1&limit=10&start=1000&end=2000"
    assert hist_query(10, sort=False) == "?limit=10"


def test_history_params_and_body():
    end = datetime(2023, 3, 2)

    assert history_params(5, end=end) == [("limit", "5"), ("end", "1677715200000")]
    assert history_body(5, end=end) == {"limit": 5, "end": 1677715200000}


def test_funding_stats_path():
    assert funding_stats_path("fUSD") == "funding/stats/fUSD/hist"
    assert funding_stats_path("fUSD", 3) == "funding/stats/fUSD/hist?limit=3"


def test_to_milliseconds():
    moment = datetime(2023, 3, 16, 17, 52, 13, 467000, tzinfo=timezone.utc)

    assert to_milliseconds(moment) == 1678989133467
    assert to_milliseconds(moment.astimezone(timezone(timedelta(hours=2)))) == 1678989133467
    assert to_milliseconds(1678989133467) == 1678989133467

    with pytest.raises(PreconditionViolation):
        to_milliseconds(True)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("0.1", "0.1"),
        (0.1, "0.1"),
        (-3, "-3"),
        ("1e-5", "0.00001"),
        (0.00005, "0.00005"),
        (1e-7, "0.0000001"),
        (1e21, "1000000000000000000000"),
        (Decimal("2.50"), "2.50"),
    ],
)
def test_numeric_string(value, expected):
    assert numeric_string(value) == expected


@pytest.mark.parametrize(
    "value",
    ["abc", True, "NaN", "Infinity", "-inf", float("nan"), float("inf"), Decimal("NaN"), [1]],
)
def test_numeric_string_rejects(value):
    with pytest.raises(PreconditionViolation):
        numeric_string(value)


def test_time_in_force_is_rendered_in_utc():
    local = datetime(2023, 3, 17, 14, 30, tzinfo=timezone(timedelta(hours=2)))

    assert time_in_force_string(local) == "2023-03-17 12:30:00"


def test_order_selector():
    assert order_selector(12, purpose="Test") == {"id": 12}
    assert order_selector(cid=5, cid_date=date(2023, 3, 16), purpose="Test") == {
        "cid": 5,
        "cid_date": "2023-03-16",
    }

    with pytest.raises(PreconditionViolation) as exc_info:
        order_selector(cid=5, purpose="Order cancellation")

    assert "cid_date" in str(exc_info.value)
