"""Type definitions for the Bitfinex API client.

This module contains type definitions, enums, and record dataclasses used
throughout the library, organized into logical sections for clarity. Every
record decoded from the wire declares its positional layout as ``SCHEMA``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Self, TypeAlias

from bfx_api.codec import (
    Field,
    Schema,
    enum_of,
    int_bool,
    json_object,
    mts,
    nested,
    nested_list,
    optional,
    reserved,
)
from bfx_api.errors import PreconditionViolation

# ============================================================================
# TYPE ALIASES
# ============================================================================

JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray

# Query parameters attached to signed POST requests
QueryParams: TypeAlias = list[tuple[str, str]]


# ============================================================================
# CREDENTIAL
# ============================================================================


@dataclass(frozen=True)
class Credential:
    """API key pair owned by a client for its whole lifetime.

    Empty values mean public-only usage.
    """

    key: str = ""
    secret: bytes = field(default=b"", repr=False)

    @classmethod
    def from_strings(cls, key: str | None, secret: str | bytes | None) -> Self:
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        return cls(key=key or "", secret=secret or b"")

    @property
    def is_public_only(self) -> bool:
        return not self.key or not self.secret


# ============================================================================
# CORE ENUMS
# ============================================================================

_MISSING: Any = object()


def _normalize(token: str) -> str:
    return "".join(c for c in token.upper() if c not in " -_")


class WireEnum(Enum):
    """Closed enumeration with a bidirectional wire mapping.

    ``member.value`` is the literal sent to and received from the exchange.
    :meth:`parse` also accepts user-facing spellings such as ``exchange-limit``
    or member names.
    """

    @classmethod
    def parse(cls, token: Any, default: Any = _MISSING) -> Any:
        """Resolve ``token`` to a member.

        Args:
            token: A member, its wire value, or a spelling of its value or name.
            default: Returned when no member matches. When omitted, an unknown
                token raises PreconditionViolation.

        """
        if isinstance(token, cls):
            return token
        for member in cls:
            if member.value == token:
                return member
        if isinstance(token, str):
            key = _normalize(token)
            for member in cls:
                if key in (_normalize(str(member.value)), _normalize(member.name)):
                    return member
        if default is _MISSING:
            choices = ", ".join(str(m.value) for m in cls)
            raise PreconditionViolation(
                f"Unknown {cls.__name__} {token!r}, expected one of: {choices}"
            )
        return default


class InstrumentCategory(WireEnum):
    """Market category, signalled by the leading character of a symbol."""

    FUNDING = "f"
    TRADING = "t"


class BookPrecision(WireEnum):
    """Aggregation level of a price book, from precise (1) to coarse (4)."""

    P1 = 1
    P2 = 2
    P3 = 3
    P4 = 4

    @property
    def suffix(self) -> str:
        return f"P{self.value}"


class CandleAggPeriod(WireEnum):
    """Funding candle aggregation window. NONE requests per-period candles."""

    NONE = 0
    A10 = 10
    A30 = 30
    A120 = 120


class CandleTimeFrame(WireEnum):
    """Candle time frames."""

    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    THREE_HOURS = "3h"
    FOUR_HOURS = "4h"
    SIX_HOURS = "6h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1d"
    ONE_WEEK = "1w"
    TWO_WEEKS = "2w"
    ONE_MONTH = "1M"


class TradingOrderType(WireEnum):
    """Trading order types."""

    LIMIT = "LIMIT"
    EXCHANGE_LIMIT = "EXCHANGE LIMIT"
    MARKET = "MARKET"
    EXCHANGE_MARKET = "EXCHANGE MARKET"
    STOP = "STOP"
    EXCHANGE_STOP = "EXCHANGE STOP"
    STOP_LIMIT = "STOP LIMIT"
    EXCHANGE_STOP_LIMIT = "EXCHANGE STOP LIMIT"
    TRAILING_STOP = "TRAILING STOP"
    EXCHANGE_TRAILING_STOP = "EXCHANGE TRAILING STOP"
    FOK = "FOK"
    EXCHANGE_FOK = "EXCHANGE FOK"
    IOC = "IOC"
    EXCHANGE_IOC = "EXCHANGE IOC"


class FundingOrderType(WireEnum):
    """Funding offer types."""

    LIMIT = "LIMIT"
    FRR_DELTA_VAR = "FRRDELTAVAR"
    FRR_DELTA_FIX = "FRRDELTAFIX"


class StatKey(WireEnum):
    """Keys of the public statistics endpoint."""

    POS_SIZE = "pos.size"
    FUNDING_SIZE = "funding.size"
    CREDITS_SIZE = "credits.size"
    CREDITS_SIZE_SYM = "credits.size.sym"
    VOL_1D = "vol.1d"
    VOL_7D = "vol.7d"
    VOL_30D = "vol.30d"
    VWAP = "vwap"


class WalletType(WireEnum):
    """Wallet types."""

    EXCHANGE = "exchange"
    MARGIN = "margin"
    FUNDING = "funding"


class DepositMethod(WireEnum):
    """Deposit methods accepted by the deposit address endpoint."""

    BITCOIN = "bitcoin"
    LITECOIN = "litecoin"
    ETHEREUM = "ethereum"
    TETHER_USO = "tetheruso"
    TETHER_USL = "tetherusl"
    TETHER_USX = "tetherusx"
    TETHER_USS = "tetheruss"
    ETHEREUM_C = "ethereumc"
    ZCASH = "zcash"
    MONERO = "monero"
    IOTA = "iota"


class LedgerCategory(WireEnum):
    """Ledger entry categories (numeric wire codes)."""

    EXCHANGE = 5
    INTEREST = 28
    TRANSFER = 51
    TRADING_FEE = 201


class CreditSide(WireEnum):
    """Side of a funding credit."""

    LENDER = 1
    BOTH = 0
    BORROWER = -1


# ============================================================================
# PUBLIC MARKET RECORDS
# ============================================================================


@dataclass
class Candle:
    """Candlestick data."""

    time: datetime
    open: float
    close: float
    high: float
    low: float
    volume: float

    SCHEMA: ClassVar[Schema] = (
        Field("time", mts),
        Field("open"),
        Field("close"),
        Field("high"),
        Field("low"),
        Field("volume"),
    )


@dataclass
class Stat:
    """Single point of a statistics series."""

    time: datetime
    value: float

    SCHEMA: ClassVar[Schema] = (Field("time", mts), Field("value"))


@dataclass
class PlatformStatus:
    """Platform status, True when operative and False during maintenance."""

    status: bool

    SCHEMA: ClassVar[Schema] = (Field("status", int_bool),)


@dataclass
class FundingStats:
    """Funding statistics snapshot for a currency."""

    time: datetime
    frr: float
    avg_period: float
    funding_amount: float
    funding_amount_used: float
    funding_below_threshold: float

    SCHEMA: ClassVar[Schema] = (
        Field("time", mts),
        *reserved(2),
        Field("frr"),
        Field("avg_period"),
        *reserved(2),
        Field("funding_amount"),
        Field("funding_amount_used"),
        *reserved(2),
        Field("funding_below_threshold"),
    )


@dataclass
class DerivativesStatus:
    """Status of a derivatives pair."""

    key: str
    time: datetime
    deriv_price: float
    spot_price: float
    insurance_fund_balance: float
    next_funding_evt_time: datetime | None
    next_funding_accrued: float | None
    next_funding_step: int | None
    current_funding: float | None
    mark_price: float
    open_interest: float | None
    clamp_min: float | None
    clamp_max: float | None

    SCHEMA: ClassVar[Schema] = (
        Field("key"),
        Field("time", mts),
        *reserved(),
        Field("deriv_price"),
        Field("spot_price"),
        *reserved(),
        Field("insurance_fund_balance"),
        *reserved(),
        Field("next_funding_evt_time", optional(mts)),
        Field("next_funding_accrued"),
        Field("next_funding_step"),
        *reserved(),
        Field("current_funding"),
        *reserved(2),
        Field("mark_price"),
        *reserved(2),
        Field("open_interest"),
        *reserved(3),
        Field("clamp_min"),
        Field("clamp_max"),
    )


# ============================================================================
# TRADING RECORDS
# ============================================================================


@dataclass
class TradingTicker:
    """Ticker of a trading pair."""

    bid: float
    bid_size: float
    ask: float
    ask_size: float
    daily_change: float
    daily_change_relative: float
    last_price: float
    volume: float
    high: float
    low: float

    SCHEMA: ClassVar[Schema] = (
        Field("bid"),
        Field("bid_size"),
        Field("ask"),
        Field("ask_size"),
        Field("daily_change"),
        Field("daily_change_relative"),
        Field("last_price"),
        Field("volume"),
        Field("high"),
        Field("low"),
    )


@dataclass
class TradingTrade:
    """Public trade on a trading pair. Negative amount means a sell."""

    id: int
    time: datetime
    amount: float
    price: float

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("time", mts),
        Field("amount"),
        Field("price"),
    )


@dataclass
class TradingBook:
    """Aggregated price level of a trading book."""

    price: float
    count: int
    amount: float

    SCHEMA: ClassVar[Schema] = (Field("price"), Field("count"), Field("amount"))


@dataclass
class TradingBookRaw:
    """Single order of a raw trading book."""

    order_id: int
    price: float
    amount: float

    SCHEMA: ClassVar[Schema] = (Field("order_id"), Field("price"), Field("amount"))


@dataclass
class TradingOrder:
    """Order on a trading pair."""

    id: int
    group_id: int | None
    client_order_id: int
    symbol: str
    created: datetime
    updated: datetime
    amount: float
    amount_orig: float
    order_type: TradingOrderType
    type_prev: TradingOrderType | None
    mts_time_in_force: int | None
    flags: int | None
    status: str
    price: float
    price_avg: float
    price_trailing: float
    price_aux_limit: float
    notify: int | None
    hidden: int | None
    placed_id: int | None
    routing: str
    meta: dict[str, Any] | None

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("group_id"),
        Field("client_order_id"),
        Field("symbol"),
        Field("created", mts),
        Field("updated", mts),
        Field("amount"),
        Field("amount_orig"),
        Field("order_type", enum_of(TradingOrderType, TradingOrderType.LIMIT)),
        Field(
            "type_prev",
            optional(enum_of(TradingOrderType, TradingOrderType.LIMIT)),
        ),
        Field("mts_time_in_force"),
        *reserved(),
        Field("flags"),
        Field("status"),
        *reserved(2),
        Field("price"),
        Field("price_avg"),
        Field("price_trailing"),
        Field("price_aux_limit"),
        *reserved(3),
        Field("notify"),
        Field("hidden"),
        Field("placed_id"),
        *reserved(2),
        Field("routing"),
        *reserved(2),
        Field("meta", optional(json_object)),
    )


@dataclass
class TradingOrderMultiResult:
    """Notification envelope wrapping a list of orders."""

    time: datetime
    noti_type: str
    message_id: int | None
    orders: list[TradingOrder]
    code: int | None
    status: str
    message: str | None

    SCHEMA: ClassVar[Schema] = (
        Field("time", mts),
        Field("noti_type"),
        Field("message_id"),
        *reserved(),
        Field("orders", nested_list(TradingOrder)),
        Field("code"),
        Field("status"),
        Field("message"),
    )


@dataclass
class TradingOrderResult:
    """Notification envelope wrapping a single order."""

    time: datetime
    noti_type: str
    message_id: int | None
    order: TradingOrder
    code: int | None
    status: str
    message: str | None

    SCHEMA: ClassVar[Schema] = (
        Field("time", mts),
        Field("noti_type"),
        Field("message_id"),
        *reserved(),
        Field("order", nested(TradingOrder)),
        Field("code"),
        Field("status"),
        Field("message"),
    )


# ============================================================================
# FUNDING RECORDS
# ============================================================================


@dataclass
class FundingBook:
    """Aggregated rate level of a funding book. Positive amount is an ask."""

    rate: float
    period: int
    count: int
    amount: float

    SCHEMA: ClassVar[Schema] = (
        Field("rate"),
        Field("period"),
        Field("count"),
        Field("amount"),
    )


@dataclass
class FundingBookRaw:
    """Single offer of a raw funding book."""

    id: int
    period: int
    rate: float
    amount: float

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("period"),
        Field("rate"),
        Field("amount"),
    )


@dataclass
class FundingTrade:
    """Public trade on a funding currency."""

    id: int
    created: datetime
    amount: float
    rate: float
    period: int

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("created", mts),
        Field("amount"),
        Field("rate"),
        Field("period"),
    )


@dataclass
class FundingTicker:
    """Ticker of a funding currency."""

    frr: float
    bid: float
    bid_period: int
    bid_size: float
    ask: float
    ask_period: int
    ask_size: float
    daily_change: float
    daily_change_perc: float
    last_price: float
    volume: float
    high: float
    low: float
    frr_amount_available: float

    SCHEMA: ClassVar[Schema] = (
        Field("frr"),
        Field("bid"),
        Field("bid_period"),
        Field("bid_size"),
        Field("ask"),
        Field("ask_period"),
        Field("ask_size"),
        Field("daily_change"),
        Field("daily_change_perc"),
        Field("last_price"),
        Field("volume"),
        Field("high"),
        Field("low"),
        *reserved(2),
        Field("frr_amount_available"),
    )


@dataclass
class FundingCredit:
    """Funds used in a position."""

    id: int
    symbol: str
    side: CreditSide
    created: datetime
    updated: datetime
    amount: float
    status: str
    rate_type: str
    rate: float
    period: int
    opened: datetime
    last_payout: datetime | None
    notify: bool | None
    hidden: bool
    renew: bool
    no_close: bool
    pair: str

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("symbol"),
        Field("side", enum_of(CreditSide, CreditSide.BOTH)),
        Field("created", mts),
        Field("updated", mts),
        Field("amount"),
        *reserved(),  # flags
        Field("status"),
        Field("rate_type"),
        *reserved(2),
        Field("rate"),
        Field("period"),
        Field("opened", mts),
        Field("last_payout", optional(mts)),
        Field("notify", optional(int_bool)),
        Field("hidden", int_bool),
        *reserved(),
        Field("renew", int_bool),
        *reserved(),
        Field("no_close", int_bool),
        Field("pair"),
    )


@dataclass
class FundingOffer:
    """Funding offer."""

    id: int
    symbol: str
    created: datetime
    updated: datetime
    amount: float
    amount_orig: float
    offer_type: FundingOrderType
    status: str
    rate: float
    period: int
    notify: bool | None
    hidden: bool | None
    renew: bool | None

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("symbol"),
        Field("created", mts),
        Field("updated", mts),
        Field("amount"),
        Field("amount_orig"),
        Field("offer_type", enum_of(FundingOrderType, FundingOrderType.LIMIT)),
        *reserved(2),
        *reserved(),  # flags
        Field("status"),
        *reserved(3),
        Field("rate"),
        Field("period"),
        Field("notify", optional(int_bool)),
        Field("hidden", optional(int_bool)),
        *reserved(),
        Field("renew", optional(int_bool)),
        *reserved(),
    )


@dataclass
class FundingOfferResult:
    """Notification envelope wrapping a funding offer."""

    created: datetime
    event_type: str
    message_id: int | None
    offer: FundingOffer
    code: int | None
    status: str
    message: str | None

    SCHEMA: ClassVar[Schema] = (
        Field("created", mts),
        Field("event_type"),
        Field("message_id"),
        *reserved(),
        Field("offer", nested(FundingOffer)),
        Field("code"),
        Field("status"),
        Field("message"),
    )


# ============================================================================
# ACCOUNT RECORDS
# ============================================================================


@dataclass
class Wallet:
    """Wallet balance."""

    wallet_type: WalletType
    currency: str
    balance: float
    unsettled_interest: float
    available_balance: float | None

    SCHEMA: ClassVar[Schema] = (
        Field("wallet_type", enum_of(WalletType, WalletType.EXCHANGE)),
        Field("currency"),
        Field("balance"),
        Field("unsettled_interest"),
        Field("available_balance"),
        *reserved(2),
    )


@dataclass
class Ledger:
    """Ledger entry."""

    id: int
    currency: str
    wallet: str | None
    time: datetime
    amount: float
    balance: float
    description: str | None

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("currency"),
        Field("wallet"),
        Field("time", mts),
        *reserved(),
        Field("amount"),
        Field("balance"),
        *reserved(),
        Field("description"),
    )


@dataclass
class User:
    """Account information of the key owner."""

    id: int
    email: str
    username: str
    created: datetime
    verified: bool
    verification_level: int
    timezone: str
    locale: str
    company: str | None
    email_verified: bool
    subaccount_type: str | None
    master_account_created: datetime | None
    group_id: int | None
    master_account_id: int | None
    inherit_master_account_verification: bool | None
    is_group_master: bool
    group_withdraw_enabled: bool | None
    ppt_enabled: Any
    merchant_enabled: bool
    competition_enabled: Any
    two_factor_modes: list[str] | None
    is_securities_master: bool
    securities_enabled: bool | None
    is_securities_investor_accredited: bool | None
    is_securities_el_salvador: bool | None
    allow_disable_ctxswitch: bool | None
    ctxswitch_disabled: bool
    last_login: datetime | None
    verification_level_submitted: int | None
    comp_countries: list[str] | None
    comp_countries_resid: list[str] | None
    compl_account_type: str | None
    is_merchant_enterprise: bool

    SCHEMA: ClassVar[Schema] = (
        Field("id"),
        Field("email"),
        Field("username"),
        Field("created", mts),
        Field("verified", int_bool),
        Field("verification_level"),
        *reserved(),
        Field("timezone"),
        Field("locale"),
        Field("company"),
        Field("email_verified", int_bool),
        *reserved(),
        Field("subaccount_type"),
        *reserved(),
        Field("master_account_created", optional(mts)),
        Field("group_id"),
        Field("master_account_id"),
        Field("inherit_master_account_verification", optional(int_bool)),
        Field("is_group_master", int_bool),
        Field("group_withdraw_enabled", optional(int_bool)),
        *reserved(),
        Field("ppt_enabled"),
        Field("merchant_enabled", int_bool),
        Field("competition_enabled"),
        *reserved(2),
        Field("two_factor_modes"),
        *reserved(),
        Field("is_securities_master", int_bool),
        Field("securities_enabled", optional(int_bool)),
        Field("is_securities_investor_accredited", optional(int_bool)),
        Field("is_securities_el_salvador", optional(int_bool)),
        *reserved(6),
        Field("allow_disable_ctxswitch", optional(int_bool)),
        Field("ctxswitch_disabled", int_bool),
        *reserved(4),
        Field("last_login", optional(mts)),
        *reserved(2),
        Field("verification_level_submitted"),
        *reserved(),
        Field("comp_countries"),
        Field("comp_countries_resid"),
        Field("compl_account_type"),
        *reserved(2),
        Field("is_merchant_enterprise", int_bool),
    )


@dataclass
class Permission:
    """Read/write permission of an API key on one scope."""

    name: str
    read: bool
    write: bool

    SCHEMA: ClassVar[Schema] = (
        Field("name"),
        Field("read", int_bool),
        Field("write", int_bool),
    )


@dataclass
class KeyPermission:
    """Permissions of the current API key, one entry per scope."""

    account: Permission | None = None
    orders: Permission | None = None
    funding: Permission | None = None
    settings: Permission | None = None
    wallets: Permission | None = None
    withdraw: Permission | None = None
    history: Permission | None = None
    positions: Permission | None = None
    ui_withdraw: Permission | None = None
    bfxpay: Permission | None = None
    eaas_agreement: Permission | None = None
    eaas_withdraw: Permission | None = None
    eaas_deposit: Permission | None = None
    eaas_brokerage: Permission | None = None


@dataclass
class DepositAddress:
    """Deposit address for a currency."""

    method: str
    currency: str
    address: str
    pool_address: str | None

    SCHEMA: ClassVar[Schema] = (
        *reserved(),
        Field("method"),
        Field("currency"),
        *reserved(),
        Field("address"),
        Field("pool_address"),
    )


@dataclass
class DepositAddressResult:
    """Notification envelope wrapping a deposit address."""

    created: datetime
    noti_type: str
    message_id: int | None
    address: DepositAddress
    code: int | None
    status: str
    message: str | None

    SCHEMA: ClassVar[Schema] = (
        Field("created", mts),
        Field("noti_type"),
        Field("message_id"),
        *reserved(),
        Field("address", nested(DepositAddress)),
        Field("code"),
        Field("status"),
        Field("message"),
    )
