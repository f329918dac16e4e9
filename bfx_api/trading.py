"""Trading endpoints: market data for trading pairs and order management."""

import logging
from datetime import date, datetime
from decimal import Decimal

from bfx_api.codec import decode_record, decode_records
from bfx_api.helpers import compact
from bfx_api.queries import (
    Timestamp,
    book_path,
    cid_date_string,
    hist_query,
    history_body,
    numeric_string,
    order_selector,
    raw_book_path,
    require_trading_symbol,
    time_in_force_string,
    trading_candle_path,
)
from bfx_api.transport import TransportClient
from bfx_api.types import (
    BookPrecision,
    Candle,
    CandleTimeFrame,
    TradingBook,
    TradingBookRaw,
    TradingOrder,
    TradingOrderMultiResult,
    TradingOrderResult,
    TradingOrderType,
    TradingTicker,
    TradingTrade,
)

log = logging.getLogger(__name__)

Numeric = Decimal | float | int | str


class TradingEndpoints:
    """Trading pair operations, mixed into :class:`bfx_api.BitfinexApiClient`."""

    _transport: TransportClient

    """ Public market data """

    async def get_trading_book(
        self, symbol: str, precision: BookPrecision | int = BookPrecision.P2
    ) -> list[TradingBook]:
        """Get the aggregated order book of a trading pair.

        Args:
            symbol: Trading symbol, e.g. ``tBTCUSD``.
            precision: Aggregation level 1 (finest) to 4.

        Returns:
            Up to 250 price levels per side. Negative amounts are asks.

        Raises:
            PreconditionViolation: If ``symbol`` is not a trading symbol.

        Endpoint:
            GET /book/{symbol}/P{precision}

        """
        require_trading_symbol(symbol, "Trading book")
        data = await self._transport.get_json(book_path(symbol, precision))
        return decode_records(TradingBook, data)

    async def get_trading_book_raw(self, symbol: str) -> list[TradingBookRaw]:
        """Get the raw (per-order) book of a trading pair.

        Endpoint:
            GET /book/{symbol}/R0

        """
        require_trading_symbol(symbol, "Raw trading book")
        data = await self._transport.get_json(raw_book_path(symbol))
        return decode_records(TradingBookRaw, data)

    async def get_trading_trades(
        self,
        symbol: str,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[TradingTrade]:
        """Get public trades of a trading pair, newest first.

        Args:
            symbol: Trading symbol.
            limit: Maximum number of trades (up to 10000).
            start: Only trades at or after this time.
            end: Only trades at or before this time.

        Endpoint:
            GET /trades/{symbol}/hist

        """
        require_trading_symbol(symbol, "Trading trades")
        path = f"trades/{symbol}/hist" + hist_query(limit, start, end)
        return decode_records(TradingTrade, await self._transport.get_json(path))

    async def get_trading_ticker(self, symbol: str) -> TradingTicker:
        """Get the ticker of a trading pair.

        Endpoint:
            GET /ticker/{symbol}

        """
        require_trading_symbol(symbol, "Trading ticker")
        data = await self._transport.get_json(f"ticker/{symbol}")
        return decode_record(TradingTicker, data)

    async def get_trading_candles(
        self,
        symbol: str,
        time_frame: CandleTimeFrame | str = CandleTimeFrame.THIRTY_MINUTES,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[Candle]:
        """Get candles of a trading pair, newest first.

        Endpoint:
            GET /candles/trade:{time_frame}:{symbol}/hist

        """
        require_trading_symbol(symbol, "Trading candles")
        path = trading_candle_path(symbol, time_frame, limit, start, end)
        return decode_records(Candle, await self._transport.get_json(path))

    """ Orders """

    async def get_trading_orders(
        self,
        symbol: str | None = None,
        group_id: int | None = None,
        client_id: int | None = None,
        client_id_date: date | str | None = None,
    ) -> list[TradingOrder]:
        """Get active orders, optionally filtered.

        Args:
            symbol: Restrict to one trading pair.
            group_id: Restrict to one order group.
            client_id: Restrict to one client order id.
            client_id_date: Creation date of ``client_id``; required with it.

        Raises:
            PreconditionViolation: If ``client_id`` is given without ``client_id_date``.

        Endpoint:
            POST /auth/r/orders[/{symbol}]

        """
        path = "auth/r/orders"
        if symbol is not None:
            require_trading_symbol(symbol, "Trading orders")
            path = f"{path}/{symbol}"
        payload = compact(gid=group_id)
        if client_id is not None:
            payload.update(
                order_selector(cid=client_id, cid_date=client_id_date, purpose="Order query")
            )
        data = await self._transport.post_json(path, payload)
        return decode_records(TradingOrder, data)

    async def get_trading_orders_history(
        self,
        symbol: str | None = None,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[TradingOrder]:
        """Get closed and cancelled orders.

        Args:
            symbol: Restrict to one trading pair.
            limit: Maximum number of orders (up to 2500).
            start: Window start.
            end: Window end.

        Endpoint:
            POST /auth/r/orders[/{symbol}]/hist

        """
        path = "auth/r/orders"
        if symbol is not None:
            require_trading_symbol(symbol, "Trading orders history")
            path = f"{path}/{symbol}"
        data = await self._transport.post_json(
            f"{path}/hist", history_body(limit, start, end)
        )
        return decode_records(TradingOrder, data)

    async def submit_trading_order(
        self,
        symbol: str,
        order_type: TradingOrderType | str,
        amount: Numeric,
        price: Numeric,
        lev: int | None = None,
        price_trailing: Numeric | None = None,
        price_aux_limit: Numeric | None = None,
        price_oco_stop: Numeric | None = None,
        gid: int | None = None,
        cid: int | None = None,
        flags: int | None = None,
        time_in_force: datetime | str | None = None,
    ) -> list[TradingOrder]:
        """Submit a new order.

        Args:
            symbol: Trading symbol.
            order_type: Order type, e.g. ``TradingOrderType.EXCHANGE_LIMIT`` or
                ``"exchange-limit"``.
            amount: Order size; positive buys, negative sells.
            price: Limit price.
            lev: Leverage of a derivative order.
            price_trailing: Trailing distance, for trailing stop orders.
            price_aux_limit: Limit price, for stop limit orders.
            price_oco_stop: Stop price of the OCO counterpart.
            gid: Group id.
            cid: Client order id.
            flags: Sum of the order flags.
            time_in_force: Automatic cancellation time.

        Returns:
            The created orders.

        Raises:
            PreconditionViolation: If ``symbol`` is not a trading symbol or
                ``order_type`` is unknown.

        Endpoint:
            POST /auth/w/order/submit

        """
        require_trading_symbol(symbol, "Order submission")
        payload = compact(
            symbol=symbol,
            type=TradingOrderType.parse(order_type).value,
            amount=numeric_string(amount),
            price=numeric_string(price),
            lev=lev,
            price_trailing=numeric_string(price_trailing),
            price_aux_limit=numeric_string(price_aux_limit),
            price_oco_stop=numeric_string(price_oco_stop),
            gid=gid,
            cid=cid,
            flags=flags,
            tif=time_in_force_string(time_in_force),
        )
        data = await self._transport.post_json("auth/w/order/submit", payload)
        result = decode_record(TradingOrderMultiResult, data)
        log.info("Submitted %d order(s) on %s: %s", len(result.orders), symbol, result.status)
        return result.orders

    async def update_trading_order(
        self,
        order_id: int,
        amount: Numeric | None = None,
        price: Numeric | None = None,
        delta: Numeric | None = None,
        lev: int | None = None,
        price_trailing: Numeric | None = None,
        price_aux_limit: Numeric | None = None,
        gid: int | None = None,
        cid: int | None = None,
        cid_date: date | str | None = None,
        flags: int | None = None,
        time_in_force: datetime | str | None = None,
    ) -> TradingOrder:
        """Update an active order. Only the given fields change.

        Args:
            order_id: Exchange id of the order.
            delta: Amount change applied to the current amount.

        Endpoint:
            POST /auth/w/order/update

        """
        payload = compact(
            id=order_id,
            amount=numeric_string(amount),
            price=numeric_string(price),
            delta=numeric_string(delta),
            lev=lev,
            price_trailing=numeric_string(price_trailing),
            price_aux_limit=numeric_string(price_aux_limit),
            gid=gid,
            cid=cid,
            cid_date=cid_date_string(cid_date),
            flags=flags,
            tif=time_in_force_string(time_in_force),
        )
        data = await self._transport.post_json("auth/w/order/update", payload)
        return decode_record(TradingOrderResult, data).order

    async def cancel_trading_order(
        self,
        order_id: int | None = None,
        cid: int | None = None,
        cid_date: date | str | None = None,
    ) -> TradingOrder:
        """Cancel one order by exchange id, or by client id and its date.

        Raises:
            PreconditionViolation: If neither ``order_id`` nor ``cid`` is given,
                or ``cid`` is given without ``cid_date``.

        Endpoint:
            POST /auth/w/order/cancel

        """
        payload = order_selector(order_id, cid, cid_date, purpose="Order cancellation")
        data = await self._transport.post_json("auth/w/order/cancel", payload)
        return decode_record(TradingOrderResult, data).order

    async def cancel_all_trading_orders(self) -> list[TradingOrder]:
        """Cancel every active order.

        Endpoint:
            POST /auth/w/order/cancel/multi

        """
        data = await self._transport.post_json("auth/w/order/cancel/multi", {"all": 1})
        return decode_record(TradingOrderMultiResult, data).orders
