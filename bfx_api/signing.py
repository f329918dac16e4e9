"""Request signing for authenticated Bitfinex endpoints.

Private calls carry a nonce, the public API key, and an HMAC-SHA384 signature
over ``/api/v2/{path}{nonce}{body}`` keyed with the API secret. Signatures are
rebuilt for every attempt because each attempt draws a new nonce.
"""

import hmac
import logging
import threading
from hashlib import sha384
from time import time_ns

from bfx_api.errors import InvalidCredentialsError, MissingCredentialsError
from bfx_api.helpers import get_client_id
from bfx_api.types import Credential

log = logging.getLogger(__name__)

SIGNATURE_PREFIX = "/api/v2/"


# ============================================================================
# NONCE ISSUANCE
# ============================================================================


class NonceSource:
    """Strictly increasing nonces seeded from wall-clock microseconds.

    Two calls never receive the same value, even when the clock has not
    advanced or has stepped backwards between them.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> str:
        with self._lock:
            self._last = max(time_ns() // 1000, self._last + 1)
            return str(self._last)


_sources: dict[str, NonceSource] = {}
_sources_lock = threading.Lock()


def nonce_source_for(api_key: str) -> NonceSource:
    """Return the process-wide nonce source shared by every user of ``api_key``."""
    with _sources_lock:
        source = _sources.get(api_key)
        if source is None:
            source = _sources[api_key] = NonceSource()
        return source


# ============================================================================
# SIGNATURE
# ============================================================================


def sign_payload(secret: bytes, path: str, nonce: str, body: str = "") -> str:
    """Compute the hex HMAC-SHA384 signature of a private request.

    Args:
        secret: The API secret.
        path: Endpoint path relative to the API version, e.g. ``auth/r/wallets``.
        nonce: The decimal nonce sent alongside the request.
        body: The serialized JSON body, or an empty string.

    Returns:
        The lowercase hex digest.

    """
    message = f"{SIGNATURE_PREFIX}{path}{nonce}{body}"
    return hmac.new(secret, message.encode("utf-8"), sha384).hexdigest()


def build_auth_headers(
    credential: Credential, path: str, nonce: str, body: str = ""
) -> dict[str, str]:
    """Build the header set of one signed attempt.

    Raises:
        MissingCredentialsError: If the credential is public-only.
        InvalidCredentialsError: If the API key cannot be sent as a header value.

    """
    if not credential.key:
        raise MissingCredentialsError("API key")
    if not credential.secret:
        raise MissingCredentialsError("API secret")
    if not credential.key.isascii() or not credential.key.isprintable():
        raise InvalidCredentialsError(
            "API key contains characters that are not valid in an HTTP header"
        )

    return {
        "user-agent": get_client_id(),
        "bfx-nonce": nonce,
        "bfx-apikey": credential.key,
        "bfx-signature": sign_payload(credential.secret, path, nonce, body),
        "content-type": "application/json",
    }
