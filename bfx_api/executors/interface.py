"""Abstract interface for HTTP executors.

This module defines the abstract base class that all HTTP executor
implementations must follow, enabling pluggable transport layers.
"""

from abc import ABC, abstractmethod

from bfx_api.types import QueryParams


class HttpResponse:
    """Container for HTTP response data.

    The body is kept as raw text: error envelopes are located textually and
    records are decoded downstream.
    """

    status: int
    text: str
    headers: dict[str, str] | None

    __slots__ = ("status", "text", "headers")

    def __init__(
        self,
        *,
        status: int,
        text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize an HTTP response object.

        Args:
            status: The HTTP status code of the response.
            text: The decoded response body.
            headers: Optional HTTP response headers as key-value pairs.

        """
        self.status = status
        self.text = text
        self.headers = headers


class HttpExecutor(ABC):
    """Abstract base class for async HTTP request executors.

    An executor performs exactly one network exchange per call and maps
    library-specific failures onto the transport errors of
    :mod:`bfx_api.errors`. Retrying and signing are not its concern.
    """

    public_url: str
    private_url: str

    @abstractmethod
    def __init__(
        self,
        public_url: str,
        private_url: str,
        timeout: float,
    ):
        """Initialize the HTTP executor.

        Args:
            public_url: Base URL of the unauthenticated API.
            private_url: Base URL of the authenticated API.
            timeout: Per-request timeout in seconds.

        """
        ...

    @abstractmethod
    async def send_public_request(self, path: str) -> HttpResponse:
        """Send an unauthenticated GET request.

        Args:
            path: The URL path, including any query string, relative to public_url.

        Returns:
            An HttpResponse object containing the status, body, and headers.

        """
        ...

    @abstractmethod
    async def send_private_request(
        self,
        path: str,
        headers: dict[str, str],
        body: str | None = None,
        params: QueryParams | None = None,
    ) -> HttpResponse:
        """Send a signed POST request.

        Args:
            path: The URL path relative to private_url.
            headers: The signed header set of this attempt.
            body: The serialized JSON body that was signed, if any.
            params: Optional query parameters, not covered by the signature.

        Returns:
            An HttpResponse object containing the status, body, and headers.

        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release pooled connections."""
        ...
