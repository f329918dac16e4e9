"""HTTP API client for the Bitfinex exchange.

This module provides the main BitfinexApiClient class, which owns the
credential and the transport and exposes every endpoint operation: general
market information here, and trading, funding and account operations through
the endpoint mixins.
"""

import logging
from types import TracebackType
from typing import Any, Self

from bfx_api.account import AccountEndpoints
from bfx_api.codec import decode_record, decode_records, first_element
from bfx_api.errors import DecodeError
from bfx_api.executors import DEFAULT_HTTP_EXECUTOR, HttpExecutor
from bfx_api.funding import FundingEndpoints
from bfx_api.helpers import PRIVATE_URL, PUBLIC_URL
from bfx_api.queries import Timestamp, funding_stats_path, stat_path
from bfx_api.trading import TradingEndpoints
from bfx_api.transport import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_INTERVAL,
    TransportClient,
)
from bfx_api.types import (
    Credential,
    DerivativesStatus,
    FundingStats,
    PlatformStatus,
    Stat,
    StatKey,
)

log = logging.getLogger(__name__)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError(f"Expected a list of strings, got {value!r}")
    return value


class BitfinexApiClient(TradingEndpoints, FundingEndpoints, AccountEndpoints):
    """Bitfinex v2 REST API client.

    Public endpoints work without credentials. Authenticated endpoints raise
    MissingCredentialsError before any request is sent when the client was
    built without a key pair.

    Examples:
        .. code-block:: python

            import asyncio

            from bfx_api import BitfinexApiClient
            from bfx_api.env_setup import load_credential

            async def main() -> None:
                credential = load_credential()
                async with BitfinexApiClient(credential.key, credential.secret) as bfx:
                    ticker = await bfx.get_funding_ticker("fUSD")
                    print(f"FRR: {ticker.frr}")

                    for wallet in await bfx.get_wallets():
                        print(wallet.wallet_type, wallet.currency, wallet.balance)

            asyncio.run(main())
    """

    _transport: TransportClient

    def __init__(
        self,
        api_key: str = "",
        api_secret: str | bytes = "",
        *,
        executor: HttpExecutor | None = None,
        public_url: str = PUBLIC_URL,
        private_url: str = PRIVATE_URL,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
    ):
        """Initialize the Bitfinex API client.

        Args:
            api_key: Your API key (empty for public-only usage)
            api_secret: Your API secret (empty for public-only usage)
            executor: Custom HTTP executor (optional, uses default if not provided)
            public_url: Base URL of public endpoints
            private_url: Base URL of authenticated endpoints
            timeout: Per-attempt request timeout in seconds, used by the default executor
            max_attempts: Total attempts per request, including the first
            retry_interval: Seconds to wait between attempts

        """
        self._credential = Credential.from_strings(api_key, api_secret)
        self._http_executor = (
            executor
            if executor is not None
            else DEFAULT_HTTP_EXECUTOR(
                public_url=public_url,
                private_url=private_url,
                timeout=timeout,
            )
        )
        self._transport = TransportClient(
            self._http_executor,
            self._credential,
            max_attempts=max_attempts,
            retry_interval=retry_interval,
        )
        if self._credential.is_public_only:
            log.debug("No API credentials configured, only public endpoints available")

    @property
    def api_key(self) -> str:
        """Get the public API key (empty for public-only clients)."""
        return self._credential.key

    async def aclose(self) -> None:
        """Release the executor's pooled connections."""
        await self._http_executor.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    """ General market information, can be called without credentials """

    async def get_platform_status(self) -> PlatformStatus:
        """Get the platform status.

        Returns:
            PlatformStatus: ``status`` is True when operative, False during maintenance

        Endpoint:
            GET /platform/status

        """
        data = await self._transport.get_json("platform/status")
        return decode_record(PlatformStatus, data)

    async def get_stats(
        self,
        symbol: str,
        key: StatKey | str,
        side_pair: str | None = None,
        use_short: bool | None = None,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[Stat]:
        """Get a statistics series, newest first.

        Funding-only keys are ``funding.size``, ``credits.size`` and
        ``credits.size.sym``; ``pos.size`` is trading-only.

        Args:
            symbol: Symbol the statistic refers to.
            key: Statistic key.
            side_pair: Trading pair, only for ``credits.size.sym``. When omitted,
                tBTCUSD is used and a WARNING is logged on the
                ``bfx_api.queries`` logger; the library installs no handlers,
                so configure logging to see it.
            use_short: Short side instead of long, only for ``pos.size``.
            limit: Maximum number of points (up to 10000).
            start: Window start.
            end: Window end.

        Raises:
            PreconditionViolation: If the symbol category does not fit the key.

        Endpoint:
            GET /stats1/{key}:{window}:{symbol}[:{qualifier}]/hist

        """
        path = stat_path(symbol, key, side_pair, use_short, limit, start, end)
        return decode_records(Stat, await self._transport.get_json(path))

    async def get_funding_stats(
        self,
        symbol: str,
        limit: int | None = None,
        start: Timestamp | None = None,
        end: Timestamp | None = None,
    ) -> list[FundingStats]:
        """Get funding statistics of a currency (limit up to 250).

        Endpoint:
            GET /funding/stats/{symbol}/hist

        """
        path = funding_stats_path(symbol, limit, start, end)
        return decode_records(FundingStats, await self._transport.get_json(path))

    async def get_derivatives_status(self, keys: str) -> list[DerivativesStatus]:
        """Get the status of derivatives pairs.

        Args:
            keys: Comma separated pairs (e.g. ``tBTCF0:USTF0,tETHF0:USTF0``), or ``ALL``.

        Endpoint:
            GET /status/deriv

        """
        data = await self._transport.get_json(f"status/deriv?keys={keys}")
        return decode_records(DerivativesStatus, data)

    async def get_exchange_rate(self, ccy: str, to_ccy: str) -> float:
        """Get the foreign exchange rate between two currencies.

        This endpoint is served by the authenticated host and requires credentials.

        Endpoint:
            POST /calc/fx

        """
        data = await self._transport.post_json("calc/fx", {"ccy1": ccy, "ccy2": to_ccy})
        rate = first_element(data, "exchange rate")
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise DecodeError(f"Expected a numeric exchange rate, got {rate!r}")
        return float(rate)

    async def get_available_exchange_pairs(self) -> list[str]:
        """Get the trading pairs listed on the exchange.

        Endpoint:
            GET /conf/pub:list:pair:exchange

        """
        data = await self._transport.get_json("conf/pub:list:pair:exchange")
        return _string_list(first_element(data, "exchange pairs"))

    async def get_available_currencies(self) -> list[str]:
        """Get the currencies listed on the exchange.

        Endpoint:
            GET /conf/pub:list:currency

        """
        data = await self._transport.get_json("conf/pub:list:currency")
        return _string_list(first_element(data, "currencies"))
