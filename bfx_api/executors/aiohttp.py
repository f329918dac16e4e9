"""HTTP executor implementation using aiohttp.

This module provides an alternative async transport built on the aiohttp
library, for applications that already run an aiohttp session.
"""

import asyncio
from typing import override

import aiohttp

from bfx_api.errors import (
    BaseError,
    DeserializationError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from bfx_api.executors.interface import HttpExecutor, HttpResponse
from bfx_api.helpers import PRIVATE_URL, PUBLIC_URL, get_client_id
from bfx_api.types import QueryParams


class AiohttpHttpExecutor(HttpExecutor):
    """HTTP executor implementation using aiohttp.

    The ClientSession is created lazily on first use, inside the running
    event loop.
    """

    @override
    def __init__(
        self,
        public_url: str = PUBLIC_URL,
        private_url: str = PRIVATE_URL,
        timeout: float = 30.0,
    ):
        """Initialize an AiohttpHttpExecutor.

        Args:
            public_url: The base URL for public endpoints.
            private_url: The base URL for authenticated endpoints.
            timeout: Per-request timeout in seconds.

        """
        self.public_url = public_url
        self.private_url = private_url
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None = None,
        params: QueryParams | None = None,
    ) -> HttpResponse:
        try:
            async with self._get_session().request(
                method,
                url,
                headers=headers,
                data=body.encode("utf-8") if body is not None else None,
                params=params,
            ) as response:
                text = await response.text()
                return HttpResponse(
                    status=response.status,
                    text=text,
                    headers=dict(response.headers),
                )
        except BaseError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportTimeoutError(
                f"{method} request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except aiohttp.ClientConnectionError as e:
            raise HttpConnectionError(
                f"Failed to connect to {url}: {e}", url=url
            ) from e
        except UnicodeDecodeError as e:
            raise DeserializationError(
                f"Failed to decode response from {url}: {e}"
            ) from e
        except Exception as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e

    @override
    async def send_public_request(self, path: str) -> HttpResponse:
        """Send an unauthenticated GET request.

        Raises:
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If the connection fails.
            TransportError: If any other transport-level error occurs.

        """
        url = f"{self.public_url}/{path}"
        return await self._request("GET", url, {"user-agent": get_client_id()})

    @override
    async def send_private_request(
        self,
        path: str,
        headers: dict[str, str],
        body: str | None = None,
        params: QueryParams | None = None,
    ) -> HttpResponse:
        """Send a signed POST request.

        Raises:
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If the connection fails.
            TransportError: If any other transport-level error occurs.

        """
        url = f"{self.private_url}/{path}"
        return await self._request("POST", url, headers, body, params)

    @override
    async def close(self) -> None:
        """Close the executor and its underlying aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
