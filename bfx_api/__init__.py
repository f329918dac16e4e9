"""Async Python client for the Bitfinex v2 REST API."""

from importlib.metadata import PackageNotFoundError, version

from bfx_api.api import BitfinexApiClient
from bfx_api.errors import (
    BadHttpStatus,
    BaseError,
    DecodeError,
    DeserializationError,
    ExceedMaxOfferCount,
    ExchangeError,
    GenericExchangeError,
    HttpConnectionError,
    InvalidCredentialsError,
    InvalidCurrency,
    InvalidKeyDigest,
    MissingCredentialsError,
    NonceTooSmall,
    PreconditionViolation,
    RateLimited,
    RetryExhausted,
    SerializationError,
    TemporarilyUnavailable,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from bfx_api.helpers import print_data
from bfx_api.types import (
    BookPrecision,
    Candle,
    CandleAggPeriod,
    CandleTimeFrame,
    CreditSide,
    Credential,
    DepositAddress,
    DepositMethod,
    DerivativesStatus,
    FundingBook,
    FundingBookRaw,
    FundingCredit,
    FundingOffer,
    FundingOrderType,
    FundingStats,
    FundingTicker,
    FundingTrade,
    KeyPermission,
    Ledger,
    LedgerCategory,
    Permission,
    PlatformStatus,
    Stat,
    StatKey,
    TradingBook,
    TradingBookRaw,
    TradingOrder,
    TradingOrderType,
    TradingTicker,
    TradingTrade,
    User,
    Wallet,
    WalletType,
)


def get_version() -> str:
    """Return the installed distribution version, or "unknown" from a source tree."""
    try:
        return version("bfx-api")
    except PackageNotFoundError:
        return "unknown"


__version__ = get_version()

__all__ = [
    "BitfinexApiClient",
    "get_version",
    "print_data",
    # errors
    "BaseError",
    "ExchangeError",
    "GenericExchangeError",
    "ExceedMaxOfferCount",
    "InvalidCurrency",
    "InvalidKeyDigest",
    "NonceTooSmall",
    "TemporarilyUnavailable",
    "RateLimited",
    "BadHttpStatus",
    "TransportError",
    "HttpConnectionError",
    "TransportTimeoutError",
    "SerializationError",
    "DeserializationError",
    "DecodeError",
    "ValidationError",
    "PreconditionViolation",
    "MissingCredentialsError",
    "InvalidCredentialsError",
    "RetryExhausted",
    # types
    "Credential",
    "BookPrecision",
    "CandleAggPeriod",
    "CandleTimeFrame",
    "CreditSide",
    "DepositMethod",
    "FundingOrderType",
    "LedgerCategory",
    "StatKey",
    "TradingOrderType",
    "WalletType",
    "Candle",
    "DepositAddress",
    "DerivativesStatus",
    "FundingBook",
    "FundingBookRaw",
    "FundingCredit",
    "FundingOffer",
    "FundingStats",
    "FundingTicker",
    "FundingTrade",
    "KeyPermission",
    "Ledger",
    "Permission",
    "PlatformStatus",
    "Stat",
    "TradingBook",
    "TradingBookRaw",
    "TradingOrder",
    "TradingTicker",
    "TradingTrade",
    "User",
    "Wallet",
]
