"""Exception hierarchy for the Bitfinex API client.

This module defines the public exception hierarchy for the entire library. All
exceptions raised by this library inherit from BaseError.

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - API server returned an error (in-body envelope or HTTP status)
├── TransportError - Network/protocol-level errors during transmission
├── ValidationError - Client-side input validation failures
└── RetryExhausted - All attempts of a retried request failed

Every class carries a ``retryable`` flag. The transport layer retries exactly the
errors whose flag is set and surfaces everything else untouched.
"""


class BaseError(Exception):
    """Base exception for all Bitfinex client errors.

    All exceptions raised by this library inherit from this class, allowing users
    to catch all client-related errors with a single except clause.

    This exception should not be raised directly. Use one of the specific subclasses
    instead (ExchangeError, TransportError, ValidationError, RetryExhausted).
    """

    retryable: bool = False


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """Exception raised when the API server reports an error.

    Bitfinex reports application errors as an ``["error", code, message]`` array
    embedded in the response body, frequently alongside a successful HTTP status.
    The classifier in :mod:`bfx_api.helpers` maps the code to one of the
    subclasses below.
    """

    code: int | None = None
    message: str

    def __init__(self, message: str, code: int | None = None):
        """Initialize an ExchangeError.

        Args:
            message: The message text reported by the exchange.
            code: The numeric error code from the envelope, if any.

        """
        self.message = message
        if code is not None:
            self.code = code
        if self.code is not None:
            super().__init__(f"[{self.code}] {message}")
        else:
            super().__init__(message)


class GenericExchangeError(ExchangeError):
    """Raised for envelope codes without a dedicated class."""

    pass


class ExceedMaxOfferCount(ExchangeError):
    """Raised when the account already holds the maximum number of active offers."""

    code = 10001


class InvalidCurrency(ExchangeError):
    """Raised when the exchange rejects a currency or symbol parameter."""

    code = 10020


class InvalidKeyDigest(ExchangeError):
    """Raised when the API key or signature digest is rejected."""

    code = 10100


class NonceTooSmall(ExchangeError):
    """Raised when the request nonce is not above the last accepted one.

    Retryable: a rebuilt request carries a fresh, larger nonce.
    """

    code = 10114
    retryable = True


class TemporarilyUnavailable(ExchangeError):
    """Raised when the exchange reports it is not ready to serve the request."""

    code = 11000


class RateLimited(ExchangeError):
    """Raised when the exchange rate limit has been hit."""

    code = 11010


class BadHttpStatus(ExchangeError):
    """Raised when response status is not 2XX and the body holds no error envelope."""

    status_code: int

    def __init__(self, status_code: int, message: str):
        """Initialize a BadHttpStatus error.

        Args:
            status_code: The HTTP status code returned by the server.
            message: Description of the HTTP error.

        """
        self.status_code = status_code
        super().__init__(message)


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """Exception raised for errors in the process of transporting data to/from the API server.

    TransportError indicates that:
    - The error occurred in the process of transporting data
    - Valid application-level data was not successfully exchanged

    Connection and timeout failures are transient and retried; serialization
    and decoding failures are structural and are not.
    """

    pass


class HttpConnectionError(TransportError):
    """Raised when a connection cannot be established or is lost."""

    retryable = True

    def __init__(self, message: str, url: str | None = None):
        """Initialize an HttpConnectionError.

        Args:
            message: Description of the connection error.
            url: The URL that failed to connect, if available.

        """
        self.message = message
        self.url = url
        if url:
            super().__init__(f"{message} (url: {url})")
        else:
            super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when a request or connection times out."""

    retryable = True

    def __init__(self, message: str, timeout_seconds: float | None = None):
        """Initialize a TransportTimeoutError.

        Args:
            message: Description of the timeout error.
            timeout_seconds: The timeout duration in seconds, if available.

        """
        self.message = message
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            super().__init__(f"{message} (timeout: {timeout_seconds}s)")
        else:
            super().__init__(message)


class SerializationError(TransportError):
    """Raised when request data cannot be serialized/encoded."""

    def __init__(self, message: str):
        """Initialize a SerializationError.

        Args:
            message: Description of the serialization error.

        """
        self.message = message
        super().__init__(message)


class DeserializationError(TransportError):
    """Raised when response data cannot be deserialized/decoded."""

    def __init__(self, message: str):
        """Initialize a DeserializationError.

        Args:
            message: Description of the deserialization error.

        """
        self.message = message
        super().__init__(message)


class DecodeError(DeserializationError):
    """Raised when a positional record does not match its schema.

    Either the array arity differs from the schema (``expected``/``actual`` are
    set) or a single value failed its coercion rule.
    """

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
    ):
        """Initialize a DecodeError.

        Args:
            message: Description of the mismatch.
            expected: The arity required by the schema, for arity mismatches.
            actual: The arity found on the wire, for arity mismatches.

        """
        self.expected = expected
        self.actual = actual
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """Exception raised for client-side input validation failures.

    ValidationError indicates that:
    - No network request was attempted
    - The error is due to invalid input from the caller
    - The error can be fixed by correcting the input parameters
    """

    pass


class PreconditionViolation(ValidationError):
    """Raised when an endpoint's domain rules reject the arguments.

    Common causes include a funding symbol passed to a trading-only operation
    (or the reverse), a missing companion parameter, or an out-of-range value.
    """

    pass


class MissingCredentialsError(ValidationError):
    """Raised when required authentication credentials are missing."""

    def __init__(self, credential_type: str = "API key"):
        """Initialize a MissingCredentialsError.

        Args:
            credential_type: The type of credential that is missing (default: "API key").

        """
        self.credential_type = credential_type
        super().__init__(f"{credential_type} is not set")


class InvalidCredentialsError(ValidationError):
    """Raised when a credential cannot be encoded into request headers."""

    pass


# ============================================================================
# RETRY EXHAUSTION
# ============================================================================


class RetryExhausted(BaseError):
    """Raised when every attempt of a retried request failed with a retryable error."""

    def __init__(self, attempts: int, last_error: BaseError | None = None):
        """Initialize a RetryExhausted error.

        Args:
            attempts: The number of attempts that were made.
            last_error: The retryable error raised by the final attempt.

        """
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Exceeded max retry count after {attempts} attempts: {last_error}"
        )
