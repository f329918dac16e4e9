"""
Public API Example

This example demonstrates the Bitfinex public endpoints. No authentication is
required: they provide market data available to everyone.

Endpoints covered:
- Platform status
- Tickers (trading and funding)
- Order books
- Recent trades
- Funding candles and statistics
"""

import asyncio
import logging

from bfx_api import (
    BitfinexApiClient,
    CandleAggPeriod,
    CandleTimeFrame,
    StatKey,
    get_version,
    print_data,
)


async def example_public_api() -> None:
    """Demonstrate the public API endpoints without authentication."""

    print("=" * 70)
    print("Bitfinex Public API Example")
    print("=" * 70)

    print(f"\n[Info] bfx-api version: {get_version()}\n")

    async with BitfinexApiClient() as bfx:
        # ==================================================================
        # PLATFORM
        # ==================================================================
        status = await bfx.get_platform_status()
        print(f"[Platform] operative: {status.status}")

        # ==================================================================
        # TICKERS
        # ==================================================================
        print("\n" + "=" * 70)
        print("1. TICKERS")
        print("=" * 70)

        ticker = await bfx.get_trading_ticker("tBTCUSD")
        print(f"\n[tBTCUSD] bid {ticker.bid} / ask {ticker.ask}, last {ticker.last_price}")

        funding = await bfx.get_funding_ticker("fUSD")
        print(f"[fUSD] FRR {funding.frr}, bid {funding.bid} for {funding.bid_period} days")

        # ==================================================================
        # BOOKS AND TRADES
        # ==================================================================
        print("\n" + "=" * 70)
        print("2. BOOKS AND TRADES")
        print("=" * 70)

        book = await bfx.get_funding_book("fUSD", 1)
        print(f"\n[fUSD book] {len(book)} levels, best:")
        print_data(book[:3])

        trades = await bfx.get_trading_trades("tBTCUSD", limit=5)
        print("\n[tBTCUSD trades]")
        print_data(trades)

        # ==================================================================
        # FUNDING MARKET
        # ==================================================================
        print("\n" + "=" * 70)
        print("3. FUNDING MARKET")
        print("=" * 70)

        candles = await bfx.get_funding_candles(
            "fUSD", 30, CandleAggPeriod.A10, CandleTimeFrame.ONE_HOUR, limit=3
        )
        print("\n[fUSD candles, 21 to 30 days]")
        print_data(candles)

        lent = await bfx.get_stats("fUSD", StatKey.CREDITS_SIZE, limit=1)
        print(f"\n[fUSD] funds used in positions: {lent[0].value if lent else 'n/a'}")

        stats = await bfx.get_funding_stats("fUSD", limit=1)
        print_data(stats)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(example_public_api())
