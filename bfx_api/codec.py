"""Positional record codec.

Bitfinex answers with unlabeled JSON arrays where field meaning is defined by
index only. A record type describes its wire layout as an ordered ``SCHEMA`` of
:class:`Field` entries, including reserved slots that are consumed but never
retained. :func:`decode_record` walks any schema generically, so arity and
position rules live here once instead of in every record type.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, ClassVar, Protocol, Sequence, TypeAlias, TypeVar

from bfx_api.errors import DecodeError

log = logging.getLogger(__name__)

DecodeRule: TypeAlias = Callable[[Any], Any]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# SCHEMA DESCRIPTORS
# ============================================================================


def passthrough(value: Any) -> Any:
    """Return the wire value unchanged."""
    return value


@dataclass(frozen=True)
class Field:
    """One position of a positional record.

    A field with ``name=None`` is a reserved slot: its value is read to keep
    positions aligned and then dropped, whatever its JSON type.
    """

    name: str | None
    rule: DecodeRule = passthrough

    @property
    def reserved(self) -> bool:
        return self.name is None


Schema: TypeAlias = Sequence[Field]


def reserved(count: int = 1) -> list[Field]:
    """Build ``count`` consecutive reserved slots for splicing into a schema."""
    return [Field(None) for _ in range(count)]


class PositionalRecord(Protocol):
    SCHEMA: ClassVar[Schema]

    def __init__(self, **kwargs: Any) -> None: ...


R = TypeVar("R", bound=PositionalRecord)


# ============================================================================
# DECODE RULES
# ============================================================================


def mts(value: Any) -> datetime:
    """Convert integer milliseconds since epoch to a UTC-aware datetime."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected integer milliseconds, got {value!r}")
    try:
        return EPOCH + timedelta(milliseconds=value)
    except OverflowError as e:
        raise DecodeError(f"Timestamp out of range: {value!r}") from e


def int_bool(value: Any) -> bool:
    """Coerce a native bool, integer 0/1, or "true"/"false" into a bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value == 0:
            return False
        if value == 1:
            return True
        raise DecodeError(f"Expected 0 or 1 for boolean field, got {value!r}")
    if value == "true":
        return True
    if value == "false":
        return False
    raise DecodeError(f"Expected a boolean, 0/1 or 'true'/'false', got {value!r}")


def optional(rule: DecodeRule) -> DecodeRule:
    """Wrap a rule so that a JSON null decodes to None."""

    def decode(value: Any) -> Any:
        if value is None:
            return None
        return rule(value)

    return decode


E = TypeVar("E", bound=Enum)


def enum_of(enum_type: type[E], default: E) -> Callable[[Any], E]:
    """Decode a numeric code or string token into ``enum_type``.

    Tokens outside the closed mapping decode to ``default`` instead of failing,
    so new wire values introduced by the exchange do not break decoding. The
    substitution is logged at debug level with the original token.
    """
    parse = getattr(enum_type, "parse", None)

    def decode(value: Any) -> E:
        try:
            return enum_type(value)
        except ValueError:
            pass
        if parse is not None and isinstance(value, str):
            parsed = parse(value, None)
            if parsed is not None:
                return parsed  # type: ignore[no-any-return]
        log.debug(
            "Unmapped %s token %r, using default %s",
            enum_type.__name__,
            value,
            default.name,
        )
        return default

    return decode


def json_object(value: Any) -> dict[str, Any]:
    """Accept a nested JSON object as-is."""
    if not isinstance(value, dict):
        raise DecodeError(f"Expected a JSON object, got {value!r}")
    return value


def nested(record_type: type[R]) -> Callable[[Any], R]:
    """Decode a sub-array with the schema of ``record_type``."""

    def decode(value: Any) -> R:
        return decode_record(record_type, value)

    return decode


def nested_list(record_type: type[R]) -> Callable[[Any], list[R]]:
    """Decode a list of sub-arrays element-wise with ``record_type``."""

    def decode(value: Any) -> list[R]:
        return decode_records(record_type, value)

    return decode


# ============================================================================
# DECODING
# ============================================================================


def decode_record(record_type: type[R], data: Any) -> R:
    """Decode one positional array into ``record_type``.

    Args:
        record_type: A record class exposing an ordered ``SCHEMA``.
        data: The already-parsed JSON value.

    Returns:
        An instance of ``record_type`` built from the non-reserved positions.

    Raises:
        DecodeError: If ``data`` is not an array, its length differs from the
            schema, or a value fails its rule.

    """
    schema = record_type.SCHEMA
    if not isinstance(data, list):
        raise DecodeError(
            f"Expected an array for {record_type.__name__}, got {type(data).__name__}"
        )
    if len(data) != len(schema):
        raise DecodeError(
            f"{record_type.__name__} expects {len(schema)} fields, got {len(data)}",
            expected=len(schema),
            actual=len(data),
        )

    kwargs: dict[str, Any] = {}
    for position, (field, value) in enumerate(zip(schema, data)):
        if field.reserved:
            continue
        try:
            kwargs[field.name] = field.rule(value)  # type: ignore[index]
        except DecodeError as e:
            raise DecodeError(
                f"{record_type.__name__}.{field.name} (position {position}): {e.message}",
                expected=e.expected,
                actual=e.actual,
            ) from e
    return record_type(**kwargs)


def decode_records(record_type: type[R], data: Any) -> list[R]:
    """Decode an array of positional arrays into a list of ``record_type``."""
    if not isinstance(data, list):
        raise DecodeError(
            f"Expected a list of {record_type.__name__}, got {type(data).__name__}"
        )
    return [decode_record(record_type, item) for item in data]


def first_element(data: Any, what: str) -> Any:
    """Unwrap the single-element array some endpoints answer with."""
    if not isinstance(data, list) or not data:
        raise DecodeError(f"Expected a non-empty array for {what}, got {data!r}")
    return data[0]
