"""HTTP executor implementation using httpx.

This module provides async HTTP request handling using the httpx library,
the default transport of the client.
"""

from typing import override

import httpx

from bfx_api.errors import (
    BaseError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from bfx_api.executors.interface import HttpExecutor, HttpResponse
from bfx_api.helpers import PRIVATE_URL, PUBLIC_URL, get_client_id
from bfx_api.types import QueryParams


class HttpxHttpExecutor(HttpExecutor):
    """HTTP executor implementation using httpx.

    Provides asynchronous HTTP request execution over one pooled
    ``httpx.AsyncClient``, which is safe to share between concurrent calls.
    """

    @override
    def __init__(
        self,
        public_url: str = PUBLIC_URL,
        private_url: str = PRIVATE_URL,
        timeout: float = 30.0,
    ):
        """Initialize the HTTPX HTTP executor.

        Args:
            public_url: The base URL for public endpoints. Defaults to PUBLIC_URL.
            private_url: The base URL for authenticated endpoints. Defaults to PRIVATE_URL.
            timeout: Per-request timeout in seconds.

        """
        self.public_url = public_url
        self.private_url = private_url
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout)

    @override
    async def send_public_request(self, path: str) -> HttpResponse:
        """Send an unauthenticated GET request.

        Args:
            path: The API endpoint path to request (will be appended to public_url).

        Returns:
            HttpResponse containing the status code and response text.

        Raises:
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If there is a connection or network error.
            TransportError: If any other transport-level error occurs.

        """
        url = f"{self.public_url}/{path}"
        try:
            response = await self.client.get(
                url,
                headers={"user-agent": get_client_id()},
            )
        except BaseError:
            raise
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"Request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except httpx.ConnectError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(
                f"Network error during request to {url}", url=url
            ) from e
        except Exception as e:
            raise TransportError(f"Request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    @override
    async def send_private_request(
        self,
        path: str,
        headers: dict[str, str],
        body: str | None = None,
        params: QueryParams | None = None,
    ) -> HttpResponse:
        """Send a signed POST request.

        Args:
            path: The API endpoint path to request (will be appended to private_url).
            headers: The signed headers of this attempt.
            body: Serialized JSON body, sent byte-for-byte as signed.
            params: Optional query parameters.

        Returns:
            HttpResponse containing the status code and response text.

        Raises:
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If there is a connection or network error.
            TransportError: If any other transport-level error occurs.

        """
        url = f"{self.private_url}/{path}"
        try:
            response = await self.client.post(
                url,
                headers=headers,
                content=body.encode("utf-8") if body is not None else None,
                params=params,
            )
        except BaseError:
            raise
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"POST request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except httpx.ConnectError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(
                f"Network error during POST request to {url}", url=url
            ) from e
        except Exception as e:
            raise TransportError(f"POST request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    @override
    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self.client.aclose()
