"""Request transport with error-envelope classification and retries.

Public calls are GET requests to the public host. Private calls are signed POST
requests to the authenticated host, and their headers are rebuilt on every
attempt so each retry carries a fresh nonce.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from bfx_api.errors import BaseError, PreconditionViolation, RetryExhausted
from bfx_api.executors.interface import HttpExecutor, HttpResponse
from bfx_api.helpers import deserialize_response, raise_response_errors, serialize_request
from bfx_api.signing import NonceSource, build_auth_headers, nonce_source_for
from bfx_api.types import Credential, QueryParams

log = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_RETRY_INTERVAL = 1.0


class TransportClient:
    """Send requests through an executor and surface typed failures.

    Errors flagged ``retryable`` (connection failures, timeouts and the
    "nonce too small" envelope) are retried after a fixed interval, up to
    ``max_attempts`` attempts in total. Every other error is raised as soon as
    it occurs.
    """

    def __init__(
        self,
        executor: HttpExecutor,
        credential: Credential,
        nonce_source: NonceSource | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
    ):
        """Initialize the transport.

        Args:
            executor: The HTTP executor performing single attempts.
            credential: The credential used to sign private requests.
            nonce_source: Nonce issuer; defaults to the one shared by every
                client using the same API key.
            max_attempts: Total attempts per request, including the first.
            retry_interval: Seconds to wait between attempts.

        Raises:
            PreconditionViolation: If max_attempts is below 1 or retry_interval is negative.

        """
        if max_attempts < 1:
            raise PreconditionViolation(f"max_attempts must be >= 1, got {max_attempts}")
        if retry_interval < 0:
            raise PreconditionViolation(
                f"retry_interval must be >= 0, got {retry_interval}"
            )
        self.executor = executor
        self.credential = credential
        self.nonce_source = nonce_source or nonce_source_for(credential.key)
        self.max_attempts = max_attempts
        self.retry_interval = retry_interval

    async def get(self, path: str) -> str:
        """Send a public GET request and return the verbatim success body."""
        return await self._send_with_retry(
            f"GET {path}", lambda: self.executor.send_public_request(path)
        )

    async def post(
        self,
        path: str,
        payload: Any | None = None,
        params: QueryParams | None = None,
    ) -> str:
        """Send a signed POST request and return the verbatim success body.

        Args:
            path: Endpoint path relative to the API version.
            payload: JSON-serializable body, or None for an empty body.
            params: Optional query parameters.

        """
        body = serialize_request(payload)

        async def attempt() -> HttpResponse:
            nonce = self.nonce_source.next()
            headers = build_auth_headers(self.credential, path, nonce, body or "")
            return await self.executor.send_private_request(path, headers, body, params)

        return await self._send_with_retry(f"POST {path}", attempt)

    async def get_json(self, path: str) -> Any:
        """Send a public GET request and parse the JSON body."""
        return deserialize_response(await self.get(path), path)

    async def post_json(
        self,
        path: str,
        payload: Any | None = None,
        params: QueryParams | None = None,
    ) -> Any:
        """Send a signed POST request and parse the JSON body."""
        return deserialize_response(await self.post(path, payload, params), path)

    async def _send_with_retry(
        self,
        description: str,
        send: Callable[[], Awaitable[HttpResponse]],
    ) -> str:
        last_error: BaseError | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await send()
                raise_response_errors(response.status, response.text)
                return response.text
            except BaseError as e:
                if not e.retryable:
                    raise
                last_error = e

            if attempt < self.max_attempts:
                log.warning(
                    "%s attempt %d/%d failed: %s. Retrying in %.1f seconds...",
                    description,
                    attempt,
                    self.max_attempts,
                    last_error,
                    self.retry_interval,
                )
                await asyncio.sleep(self.retry_interval)

        raise RetryExhausted(self.max_attempts, last_error)
