"""Endpoint path and query construction.

Every builder validates its domain rules (instrument category, parameter
companions, ranges) before returning, so a rejected call never reaches the
network.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from bfx_api.errors import PreconditionViolation
from bfx_api.helpers import compact, to_milliseconds
from bfx_api.types import (
    BookPrecision,
    CandleAggPeriod,
    CandleTimeFrame,
    InstrumentCategory,
    QueryParams,
    StatKey,
)

log = logging.getLogger(__name__)

BOOK_LENGTH = 250
RAW_BOOK_SUFFIX = "R0"
DEFAULT_CREDITS_PAIR = "tBTCUSD"
FUNDING_PERIOD_RANGE = range(2, 121)

Timestamp = datetime | int


# ============================================================================
# INSTRUMENT CATEGORY
# ============================================================================


def category_of(symbol: str) -> InstrumentCategory | None:
    """Return the category signalled by the leading marker of ``symbol``."""
    try:
        return InstrumentCategory(symbol[:1])
    except ValueError:
        return None


def require_funding_symbol(symbol: str, purpose: str) -> str:
    """Reject anything but a funding symbol (``fUSD``).

    Raises:
        PreconditionViolation: If ``symbol`` is not a funding symbol.

    """
    if category_of(symbol) is not InstrumentCategory.FUNDING:
        raise PreconditionViolation(
            f"{purpose} requires a funding symbol (e.g. fUSD), got {symbol!r}"
        )
    return symbol


def require_trading_symbol(symbol: str, purpose: str) -> str:
    """Reject anything but a trading symbol (``tBTCUSD``).

    Raises:
        PreconditionViolation: If ``symbol`` is not a trading symbol.

    """
    if category_of(symbol) is not InstrumentCategory.TRADING:
        raise PreconditionViolation(
            f"{purpose} requires a trading symbol (e.g. tBTCUSD), got {symbol!r}"
        )
    return symbol


def parse_currency_from_symbol(symbol: str) -> str:
    """Extract the currency a symbol settles in.

    ``fUSD`` gives ``USD``; ``tETH:USDT`` gives ``USDT``; ``tBTCUSD`` gives
    ``USD``. Symbols without a category marker are returned unchanged.
    """
    category = category_of(symbol)
    if category is InstrumentCategory.FUNDING:
        return symbol[1:]
    if category is InstrumentCategory.TRADING:
        _, sep, quote = symbol.partition(":")
        if sep:
            return quote
        return symbol[4:]
    return symbol


# ============================================================================
# HISTORY WINDOWS
# ============================================================================


def _history_items(
    limit: int | None, start: Timestamp | None, end: Timestamp | None
) -> list[tuple[str, int]]:
    if limit is not None and limit <= 0:
        raise PreconditionViolation(f"limit must be positive, got {limit}")
    items: list[tuple[str, int]] = []
    if limit is not None:
        items.append(("limit", limit))
    if start is not None:
        items.append(("start", to_milliseconds(start)))
    if end is not None:
        items.append(("end", to_milliseconds(end)))
    return items


def hist_query(
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
    *,
    sort: bool = True,
) -> str:
    """Build the query string of a public history endpoint.

    Newest-first ordering (``sort=-1``) leads unless ``sort`` is False. Returns an
    empty string when there is nothing to send.
    """
    parts = ["sort=-1"] if sort else []
    parts.extend(f"{k}={v}" for k, v in _history_items(limit, start, end))
    if not parts:
        return ""
    return "?" + "&".join(parts)


def history_params(
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> QueryParams:
    """Build query parameters for a signed history request."""
    return [(k, str(v)) for k, v in _history_items(limit, start, end)]


def history_body(
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> dict[str, Any]:
    """Build the JSON body of a signed history request."""
    return dict(_history_items(limit, start, end))


# ============================================================================
# BOOKS
# ============================================================================


def book_path(symbol: str, precision: BookPrecision | int | str) -> str:
    """Path of an aggregated book, ``book/{symbol}/P{1..4}?len=250``."""
    suffix = BookPrecision.parse(precision).suffix
    return f"book/{symbol}/{suffix}?len={BOOK_LENGTH}"


def raw_book_path(symbol: str) -> str:
    """Path of an unaggregated book, ``book/{symbol}/R0?len=250``."""
    return f"book/{symbol}/{RAW_BOOK_SUFFIX}?len={BOOK_LENGTH}"


# ============================================================================
# CANDLES
# ============================================================================


def candle_segment(period: int, agg_period: CandleAggPeriod | int | str) -> str:
    """Build the period segment of a funding candle key.

    With aggregation the segment is ``a{agg}:p{start}:p{period}`` where
    ``start = max(1, max(period, agg) - agg) + 1``; without it, ``p{period}``.

    The exchange answers an empty list for periods that are not a multiple of
    the aggregation window. Such combinations are sent unchanged and logged.

    Examples:
        >>> candle_segment(30, CandleAggPeriod.A10)
        'a10:p21:p30'
        >>> candle_segment(20, CandleAggPeriod.NONE)
        'p20'

    """
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise PreconditionViolation(f"period must be a positive integer, got {period!r}")

    agg = CandleAggPeriod.parse(agg_period)
    if agg is CandleAggPeriod.NONE:
        return f"p{period}"

    if period % agg.value != 0:
        log.warning(
            "Candle period %d is not a multiple of aggregation %d, "
            "the exchange will likely return no candles",
            period,
            agg.value,
        )
    start_period = max(1, max(period, agg.value) - agg.value) + 1
    return f"a{agg.value}:p{start_period}:p{period}"


def funding_candle_path(
    symbol: str,
    period: int,
    agg_period: CandleAggPeriod | int | str,
    time_frame: CandleTimeFrame | str,
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> str:
    """Path of funding candles, ``candles/trade:{tf}:{symbol}:{segment}/hist``."""
    tf = CandleTimeFrame.parse(time_frame)
    segment = candle_segment(period, agg_period)
    return f"candles/trade:{tf.value}:{symbol}:{segment}/hist" + hist_query(
        limit, start, end
    )


def trading_candle_path(
    symbol: str,
    time_frame: CandleTimeFrame | str,
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> str:
    """Path of trading candles, ``candles/trade:{tf}:{symbol}/hist``."""
    tf = CandleTimeFrame.parse(time_frame)
    return f"candles/trade:{tf.value}:{symbol}/hist" + hist_query(limit, start, end)


# ============================================================================
# STATISTICS
# ============================================================================


@dataclass(frozen=True)
class StatRoute:
    """Routing rule of one statistic key."""

    window: str
    category: InstrumentCategory | None = None
    # platform-wide statistics are keyed on BFX instead of the symbol
    platform_wide: bool = False


_STAT_ROUTES: dict[StatKey, StatRoute] = {
    StatKey.FUNDING_SIZE: StatRoute("1m", InstrumentCategory.FUNDING),
    StatKey.CREDITS_SIZE: StatRoute("1m", InstrumentCategory.FUNDING),
    StatKey.CREDITS_SIZE_SYM: StatRoute("1m", InstrumentCategory.FUNDING),
    StatKey.POS_SIZE: StatRoute("1m", InstrumentCategory.TRADING),
    StatKey.VWAP: StatRoute("1d"),
}

_DEFAULT_STAT_ROUTE = StatRoute("30m", platform_wide=True)


def stat_path(
    symbol: str,
    key: StatKey | str,
    side_pair: str | None = None,
    use_short: bool | None = None,
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> str:
    """Path of a statistics series, ``stats1/{key}:{window}:{subject}[:{qualifier}]/hist``.

    Args:
        symbol: Funding symbol for the size keys, trading symbol for
            ``pos.size``, any symbol for ``vwap``; ignored for volume keys.
        key: The statistic key.
        side_pair: Trading pair qualifier of ``credits.size.sym``. Defaults to
            tBTCUSD with a warning when omitted.
        use_short: Side qualifier of ``pos.size``. Defaults to long.
        limit: Maximum number of points (up to 10000).
        start: Window start.
        end: Window end.

    Raises:
        PreconditionViolation: If the symbol category does not fit the key.

    """
    stat_key = StatKey.parse(key)
    route = _STAT_ROUTES.get(stat_key, _DEFAULT_STAT_ROUTE)

    if route.category is InstrumentCategory.FUNDING:
        require_funding_symbol(symbol, f"{stat_key.value} stat")
    elif route.category is InstrumentCategory.TRADING:
        require_trading_symbol(symbol, f"{stat_key.value} stat")

    subject = "BFX" if route.platform_wide else symbol
    segments = [f"{stat_key.value}:{route.window}:{subject}"]

    if stat_key is StatKey.CREDITS_SIZE_SYM:
        if side_pair is None:
            log.warning(
                "Querying %s without a side pair, defaulting to %s",
                stat_key.value,
                DEFAULT_CREDITS_PAIR,
            )
            side_pair = DEFAULT_CREDITS_PAIR
        segments.append(side_pair)
    elif stat_key is StatKey.POS_SIZE:
        segments.append("short" if use_short else "long")

    return f"stats1/{':'.join(segments)}/hist" + hist_query(limit, start, end)


def funding_stats_path(
    symbol: str,
    limit: int | None = None,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
) -> str:
    """Path of funding statistics, ``funding/stats/{symbol}/hist``."""
    return f"funding/stats/{symbol}/hist" + hist_query(limit, start, end, sort=False)


# ============================================================================
# PARAMETER FORMATTING
# ============================================================================


def numeric_string(value: Decimal | float | int | str | None) -> str | None:
    """Render an amount, price or rate as the decimal string the exchange expects.

    The result is always in plain positional notation, so ``0.00005`` is sent
    as ``"0.00005"`` rather than ``"5e-05"``.

    Raises:
        PreconditionViolation: If the value is not a finite number.

    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise PreconditionViolation(f"Expected a number, got {value!r}")
    if isinstance(value, str):
        try:
            number = Decimal(value)
        except InvalidOperation as e:
            raise PreconditionViolation(f"Not a number: {value!r}") from e
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, Decimal):
        number = value
    else:
        raise PreconditionViolation(
            f"Invalid numeric input type {value!r} - {type(value)}"
        )
    if not number.is_finite():
        raise PreconditionViolation(f"Not a finite number: {value!r}")
    return format(number, "f")


def cid_date_string(value: date | str | None) -> str | None:
    """Render the creation date of a client order id as ``YYYY-MM-DD``."""
    if value is None or isinstance(value, str):
        return value
    return value.strftime("%Y-%m-%d")


def time_in_force_string(value: datetime | str | None) -> str | None:
    """Render an order expiry as ``YYYY-MM-DD HH:MM:SS`` (UTC)."""
    if value is None or isinstance(value, str):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S")


def order_selector(
    order_id: int | None = None,
    cid: int | None = None,
    cid_date: date | str | None = None,
    *,
    purpose: str,
) -> dict[str, Any]:
    """Build the order identification fields of a request body.

    Either an exchange ``order_id`` or a client id with its creation date
    identifies an order.

    Raises:
        PreconditionViolation: If neither identifier is given, or ``cid`` is
            given without ``cid_date``.

    """
    if order_id is None and cid is None:
        raise PreconditionViolation(f"{purpose} requires either order_id or cid")
    if cid is not None and cid_date is None:
        raise PreconditionViolation(f"{purpose} requires cid_date when cid is given")
    return compact(id=order_id, cid=cid, cid_date=cid_date_string(cid_date))
