"""Funding endpoints: market data for funding currencies, credits and offers."""

import logging
from decimal import Decimal

from bfx_api.codec import decode_record, decode_records
from bfx_api.errors import PreconditionViolation
from bfx_api.helpers import compact
from bfx_api.queries import (
    FUNDING_PERIOD_RANGE,
    Timestamp,
    book_path,
    funding_candle_path,
    hist_query,
    history_params,
    numeric_string,
    parse_currency_from_symbol,
    raw_book_path,
    require_funding_symbol,
)
from bfx_api.transport import TransportClient
from bfx_api.types import (
    BookPrecision,
    Candle,
    CandleAggPeriod,
    CandleTimeFrame,
    FundingBook,
    FundingBookRaw,
    FundingCredit,
    FundingOffer,
    FundingOfferResult,
    FundingOrderType,
    FundingTicker,
    FundingTrade,
)

log = logging.getLogger(__name__)


class FundingEndpoints:
    """Funding operations, mixed into :class:`bfx_api.BitfinexApiClient`."""

    _transport: TransportClient

    """ Public market data """

    async def get_funding_book(
        self, symbol: str, precision: BookPrecision | int = BookPrecision.P2
    ) -> list[FundingBook]:
        """Get the aggregated funding book of a currency.

        Args:
            symbol: Funding symbol, e.g. ``fUSD``.
            precision: Aggregation level 1 (finest) to 4.

        Raises:
            PreconditionViolation: If ``symbol`` is not a funding symbol.

        Endpoint:
            GET /book/{symbol}/P{precision}

        """
        require_funding_symbol(symbol, "Funding book")
        data = await self._transport.get_json(book_path(symbol, precision))
        return decode_records(FundingBook, data)

    async def get_funding_book_raw(self, symbol: str) -> list[FundingBookRaw]:
        """Get the raw (per-offer) funding book of a currency.

        Endpoint:
            GET /book/{symbol}/R0

        """
        require_funding_symbol(symbol, "Raw funding book")
        data = await self._transport.get_json(raw_book_path(symbol))
        return decode_records(FundingBookRaw, data)

    async def get_funding_trades(
        self,
        symbol: str,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[FundingTrade]:
        """Get public funding trades of a currency, newest first.

        Endpoint:
            GET /trades/{symbol}/hist

        """
        require_funding_symbol(symbol, "Funding trades")
        path = f"trades/{symbol}/hist" + hist_query(limit, start, end)
        return decode_records(FundingTrade, await self._transport.get_json(path))

    async def get_funding_ticker(self, symbol: str) -> FundingTicker:
        """Get the ticker of a funding currency.

        Endpoint:
            GET /ticker/{symbol}

        """
        require_funding_symbol(symbol, "Funding ticker")
        data = await self._transport.get_json(f"ticker/{symbol}")
        return decode_record(FundingTicker, data)

    async def get_funding_candles(
        self,
        symbol: str,
        period: int = 30,
        agg_period: CandleAggPeriod | int = CandleAggPeriod.A30,
        time_frame: CandleTimeFrame | str = CandleTimeFrame.THIRTY_MINUTES,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[Candle]:
        """Get funding candles of a currency, newest first.

        With an aggregation window, candles cover offers of periods from
        ``max(1, max(period, agg) - agg) + 1`` to ``period`` days. ``period``
        should then be a multiple of the window, otherwise the exchange answers
        an empty list. ``CandleAggPeriod.NONE`` selects offers of exactly
        ``period`` days.

        Args:
            symbol: Funding symbol.
            period: Funding period in days.
            agg_period: Aggregation window.
            time_frame: Candle width.
            limit: Maximum number of candles (up to 10000).
            start: Window start.
            end: Window end.

        Endpoint:
            GET /candles/trade:{time_frame}:{symbol}:[a{agg}:p{start}:]p{period}/hist

        """
        require_funding_symbol(symbol, "Funding candles")
        path = funding_candle_path(
            symbol, period, agg_period, time_frame, limit, start, end
        )
        return decode_records(Candle, await self._transport.get_json(path))

    async def get_funding_candles_default(self, symbol: str) -> list[Candle]:
        """Get funding candles with the default web UI setup (30 days, 30-day window, 30m)."""
        return await self.get_funding_candles(
            symbol, 30, CandleAggPeriod.A30, CandleTimeFrame.THIRTY_MINUTES
        )

    """ Credits and offers """

    async def get_funding_credits(self, symbol: str) -> list[FundingCredit]:
        """Get funds currently used in positions.

        Endpoint:
            POST /auth/r/funding/credits/{symbol}

        """
        require_funding_symbol(symbol, "Funding credits")
        data = await self._transport.post_json(f"auth/r/funding/credits/{symbol}")
        return decode_records(FundingCredit, data)

    async def get_funding_credits_history(
        self,
        symbol: str,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[FundingCredit]:
        """Get past funding credits.

        Endpoint:
            POST /auth/r/funding/credits/{symbol}/hist

        """
        require_funding_symbol(symbol, "Funding credits history")
        data = await self._transport.post_json(
            f"auth/r/funding/credits/{symbol}/hist",
            params=history_params(limit, start, end),
        )
        return decode_records(FundingCredit, data)

    async def get_funding_offers(self, symbol: str) -> list[FundingOffer]:
        """Get active funding offers.

        Endpoint:
            POST /auth/r/funding/offers/{symbol}

        """
        require_funding_symbol(symbol, "Funding offers")
        data = await self._transport.post_json(f"auth/r/funding/offers/{symbol}")
        return decode_records(FundingOffer, data)

    async def get_funding_offers_history(
        self,
        symbol: str,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[FundingOffer]:
        """Get past funding offers.

        Endpoint:
            POST /auth/r/funding/offers/{symbol}/hist

        """
        require_funding_symbol(symbol, "Funding offers history")
        data = await self._transport.post_json(
            f"auth/r/funding/offers/{symbol}/hist",
            params=history_params(limit, start, end),
        )
        return decode_records(FundingOffer, data)

    async def submit_funding_offer(
        self,
        symbol: str,
        amount: Decimal | float | int | str,
        rate: Decimal | float | int | str,
        period: int,
        order_type: FundingOrderType | str = FundingOrderType.LIMIT,
    ) -> FundingOffer:
        """Submit a funding offer.

        Args:
            symbol: Funding symbol.
            amount: Offered amount; positive lends, negative borrows.
            rate: Daily rate.
            period: Offer period in days, 2 to 120.
            order_type: Offer type.

        Returns:
            The created offer.

        Raises:
            PreconditionViolation: If ``symbol`` is not a funding symbol, the
                period is out of range, or ``order_type`` is unknown.
            ExceedMaxOfferCount: If the account already holds the maximum
                number of active offers.

        Endpoint:
            POST /auth/w/funding/offer/submit

        """
        require_funding_symbol(symbol, "Funding offer submission")
        if (
            isinstance(period, bool)
            or not isinstance(period, int)
            or period not in FUNDING_PERIOD_RANGE
        ):
            raise PreconditionViolation(
                "Funding period must be a whole number of days between "
                f"{FUNDING_PERIOD_RANGE.start} and "
                f"{FUNDING_PERIOD_RANGE.stop - 1} days, got {period}"
            )
        payload = compact(
            symbol=symbol,
            amount=numeric_string(amount),
            rate=numeric_string(rate),
            period=period,
            type=FundingOrderType.parse(order_type).value,
        )
        data = await self._transport.post_json("auth/w/funding/offer/submit", payload)
        result = decode_record(FundingOfferResult, data)
        log.info("Submitted funding offer %d on %s", result.offer.id, symbol)
        return result.offer

    async def cancel_funding_offer(self, offer_id: int) -> FundingOffer:
        """Cancel one funding offer.

        Endpoint:
            POST /auth/w/funding/offer/cancel

        """
        data = await self._transport.post_json(
            "auth/w/funding/offer/cancel", {"id": offer_id}
        )
        return decode_record(FundingOfferResult, data).offer

    async def cancel_all_funding_offers(self, symbol: str) -> None:
        """Cancel every funding offer in the currency of ``symbol``.

        Failures propagate to the caller.

        Endpoint:
            POST /auth/w/funding/offer/cancel/all

        """
        currency = parse_currency_from_symbol(symbol)
        await self._transport.post(
            "auth/w/funding/offer/cancel/all", {"currency": currency}
        )
