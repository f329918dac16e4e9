"""
Funding Offers Example

This example lists wallets and active funding offers, then places a small
funding offer and cancels it again.

Credentials are read from BFX_API_KEY / BFX_API_SECRET, or from a
.bfx_cli.env file in the working or home directory.
"""

import asyncio
import logging

from bfx_api import BitfinexApiClient, ExceedMaxOfferCount, print_data
from bfx_api.env_setup import load_credential


async def example_funding_offers() -> None:
    credential = load_credential()
    if credential.is_public_only:
        print("No API credentials found, set BFX_API_KEY and BFX_API_SECRET")
        return

    async with BitfinexApiClient(credential.key, credential.secret) as bfx:
        print("[Wallets]")
        print_data(await bfx.get_wallets())

        print("\n[Active fUSD offers]")
        print_data(await bfx.get_funding_offers("fUSD"))

        try:
            offer = await bfx.submit_funding_offer("fUSD", "150", "0.0005", 2)
        except ExceedMaxOfferCount as e:
            print(f"\n[Offer] not placed: {e}")
            return

        print(f"\n[Offer] placed {offer.id}: {offer.amount} at {offer.rate}")
        cancelled = await bfx.cancel_funding_offer(offer.id)
        print(f"[Offer] cancelled {cancelled.id}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(example_funding_offers())
