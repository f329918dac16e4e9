"""Account endpoints: user info, wallets, ledgers, key permissions, deposits."""

import logging

from bfx_api.codec import decode_record, decode_records
from bfx_api.helpers import create_with
from bfx_api.transport import TransportClient
from bfx_api.types import (
    DepositAddress,
    DepositAddressResult,
    DepositMethod,
    KeyPermission,
    Ledger,
    LedgerCategory,
    Permission,
    User,
    Wallet,
    WalletType,
)

log = logging.getLogger(__name__)


class AccountEndpoints:
    """Account operations, mixed into :class:`bfx_api.BitfinexApiClient`."""

    _transport: TransportClient

    async def get_user_info(self) -> User:
        """Get account information of the key owner.

        Endpoint:
            POST /auth/r/info/user

        """
        data = await self._transport.post_json("auth/r/info/user")
        return decode_record(User, data)

    async def get_wallets(self) -> list[Wallet]:
        """Get balances of every wallet.

        Endpoint:
            POST /auth/r/wallets

        """
        data = await self._transport.post_json("auth/r/wallets")
        return decode_records(Wallet, data)

    async def get_ledger(
        self,
        currency: str,
        limit: int | None = None,
        category: LedgerCategory | int | str = LedgerCategory.INTEREST,
    ) -> list[Ledger]:
        """Get ledger entries of a currency.

        Args:
            currency: Currency code, e.g. ``USD``.
            limit: Maximum number of entries (up to 2500).
            category: Entry category; interest payments by default.

        Endpoint:
            POST /auth/r/ledgers/{currency}/hist

        """
        payload = {"category": LedgerCategory.parse(category).value}
        params = [("limit", str(limit))] if limit is not None else None
        data = await self._transport.post_json(
            f"auth/r/ledgers/{currency}/hist", payload, params
        )
        return decode_records(Ledger, data)

    async def get_key_permission(self) -> KeyPermission:
        """Get the permissions of the API key in use.

        The exchange answers a list of ``[scope, read, write]`` entries, folded
        here into one record keyed by scope. Scopes unknown to
        :class:`KeyPermission` are ignored.

        Endpoint:
            POST /auth/r/permissions

        """
        data = await self._transport.post_json("auth/r/permissions")
        permissions = decode_records(Permission, data)
        return create_with(KeyPermission, {p.name: p for p in permissions})

    async def get_deposit_address(
        self,
        wallet: WalletType | str,
        method: DepositMethod | str,
    ) -> DepositAddress:
        """Get the deposit address of a wallet for a deposit method.

        Args:
            wallet: Destination wallet.
            method: Deposit method, e.g. ``bitcoin``.

        Raises:
            PreconditionViolation: If ``wallet`` or ``method`` is unknown.

        Endpoint:
            POST /auth/w/deposit/address

        """
        payload = {
            "wallet": WalletType.parse(wallet).value,
            "method": DepositMethod.parse(method).value,
            "op_renew": 0,
        }
        data = await self._transport.post_json("auth/w/deposit/address", payload)
        return decode_record(DepositAddressResult, data).address

