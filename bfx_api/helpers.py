"""Helper utilities for the Bitfinex API client.

This module contains utility functions for serialization, deserialization,
error-envelope classification, time conversion, and display formatting.
"""

import inspect
import logging
import re
from dataclasses import asdict, is_dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, TypeVar

import orjson
from prettyprinter import cpprint

from bfx_api.codec import EPOCH
from bfx_api.errors import (
    BadHttpStatus,
    DeserializationError,
    ExceedMaxOfferCount,
    ExchangeError,
    GenericExchangeError,
    InvalidCurrency,
    InvalidKeyDigest,
    NonceTooSmall,
    PreconditionViolation,
    RateLimited,
    SerializationError,
    TemporarilyUnavailable,
)

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

PUBLIC_URL: str = "https://api-pub.bitfinex.com/v2"
PRIVATE_URL: str = "https://api.bitfinex.com/v2"


# ============================================================================
# CLIENT IDENTIFICATION
# ============================================================================


@lru_cache(maxsize=1)
def get_client_id() -> str:
    """Get the client identification string sent as user agent."""
    import bfx_api

    return f"BfxPythonSDK/{bfx_api.__version__}"


# ============================================================================
# SERIALIZATION / DESERIALIZATION
# ============================================================================


def serialize_request(request: Any) -> str | None:
    """Serialize a request body to the exact JSON text that is signed and sent.

    Args:
        request: Request data to serialize

    Returns:
        JSON text or None if request is None

    Raises:
        SerializationError: If serialization fails

    """
    if request is None:
        return None
    try:
        return orjson.dumps(request).decode("utf-8")
    except Exception as e:
        raise SerializationError(f"Failed to serialize {request=}") from e


def deserialize_response(response_body: str | bytes, url: str) -> Any:
    """Deserialize a JSON response body.

    Args:
        response_body: Response text to deserialize
        url: URL that was requested (for error messages)

    Returns:
        Deserialized JSON value

    Raises:
        DeserializationError: If deserialization fails

    """
    try:
        return orjson.loads(response_body)
    except Exception as e:
        raise DeserializationError(
            f"Failed to parse JSON response from {url}: {e}"
        ) from e


# ============================================================================
# ERROR ENVELOPE
# ============================================================================

# "error",<code>,"<message>" anywhere in the body, whitespace tolerated
_ERROR_ENVELOPE = re.compile(
    r'"error"\s*,\s*(-?\d+)\s*,\s*(?:"((?:[^"\\]|\\.)*)"|null)'
)

_CODE_TO_ERROR: dict[int, type[ExchangeError]] = {
    10020: InvalidCurrency,
    10100: InvalidKeyDigest,
    10114: NonceTooSmall,
    11000: TemporarilyUnavailable,
    11010: RateLimited,
}

TOO_MANY_OFFERS = "too many active offers"


def parse_error_envelope(body: str) -> tuple[int, str] | None:
    """Locate an in-body ``"error",code,"message"`` triple.

    The envelope usually arrives with a successful HTTP status, and may be the
    whole body or embedded in a larger one, so it is searched textually.

    Returns:
        The (code, message) pair, or None if the body holds no envelope.

    """
    match = _ERROR_ENVELOPE.search(body)
    if match is None:
        return None
    message = match.group(2) or ""
    if "\\" in message:
        try:
            message = orjson.loads(f'"{message}"')
        except orjson.JSONDecodeError:
            pass
    return int(match.group(1)), message


def classify_error(code: int, message: str) -> ExchangeError:
    """Map an envelope code to its typed exchange error."""
    if code == ExceedMaxOfferCount.code:
        if TOO_MANY_OFFERS in message:
            return ExceedMaxOfferCount(message)
        return GenericExchangeError(message, code=code)
    error_type = _CODE_TO_ERROR.get(code)
    if error_type is None:
        return GenericExchangeError(message, code=code)
    return error_type(message)


def raise_response_errors(status: int, body: str) -> None:
    """Raise the error carried by a response, if any.

    The in-body envelope takes precedence over the HTTP status because the
    exchange reports most application errors through it.

    Raises:
        ExchangeError: The classified envelope error.
        BadHttpStatus: For non-2XX responses without an envelope.

    """
    envelope = parse_error_envelope(body)
    if envelope is not None:
        error = classify_error(*envelope)
        log.debug("Exchange reported %s: %s", type(error).__name__, error)
        raise error

    if 200 <= status < 300:
        return

    error_message = body.strip() or "<no error message>"
    if 400 <= status < 500:
        raise BadHttpStatus(status, f"Client error ({status}): {error_message}")
    if 500 <= status < 600:
        raise BadHttpStatus(status, f"Server error ({status}): {error_message}")
    raise BadHttpStatus(status, f"Unexpected status code ({status}): {error_message}")


# ============================================================================
# OBJECT CONSTRUCTION
# ============================================================================

T = TypeVar("T")


def create_with(func: Callable[..., T], data: dict[str, Any]) -> T:
    """Create an object from a dictionary, filtering to only valid parameters.

    Keys the constructor does not accept are dropped, so new entries sent by
    the exchange do not break construction.

    Args:
        func: Constructor or factory function to call
        data: Dictionary of data to pass as kwargs

    Returns:
        Instance created by calling func with filtered data

    """
    valid_keys = inspect.signature(func).parameters.keys()
    unknown = [k for k in data if k not in valid_keys]
    if unknown:
        log.debug("Ignoring unknown fields for %s: %s", func.__name__, unknown)
    return func(**{k: v for k, v in data.items() if k in valid_keys})


def compact(**fields: Any) -> dict[str, Any]:
    """Build a request body from keyword fields, dropping those set to None."""
    return {k: v for k, v in fields.items() if v is not None}


# ============================================================================
# TIME CONVERSION
# ============================================================================


def to_milliseconds(value: datetime | int) -> int:
    """Convert a datetime (or already-converted milliseconds) to epoch milliseconds.

    Naive datetimes are interpreted as UTC.
    """
    if isinstance(value, bool):
        raise PreconditionViolation(f"Expected a datetime, got {value!r}")
    if isinstance(value, int):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


# ============================================================================
# DISPLAY FORMATTING
# ============================================================================


def print_data(response: Any) -> None:
    """Pretty-print response data, handling dataclasses specially.

    Dataclass instances, and lists of them, are converted to dictionaries
    before printing for better formatting.

    Args:
        response: Data to print

    """
    if is_dataclass(response) and not isinstance(response, type):
        cpprint(asdict(response))
    elif isinstance(response, list) and all(
        is_dataclass(item) and not isinstance(item, type) for item in response
    ):
        cpprint([asdict(item) for item in response])  # type: ignore[arg-type]
    else:
        cpprint(response)
