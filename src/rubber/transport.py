import asyncio
import logging
from typing import Protocol

import aiohttp

from .errors import TransportError
from .models import Response

logger = logging.getLogger(__name__)


class HttpTransport(Protocol):
    async def get(self, uri: str) -> Response:
        """Issue one GET; raise TransportError if no response arrives."""
        ...


class AiohttpTransport:
    """GETs through one shared aiohttp session.

    Use as an async context manager, or pass an existing session in; a
    session passed in is left open on close().
    """

    def __init__(
        self,
        request_timeout_s: float = 30.0,
        session: aiohttp.ClientSession | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self.request_timeout_s = request_timeout_s
        self.default_headers = default_headers or {"User-Agent": "rubber/0.1"}
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AiohttpTransport":
        if self._session is None:
            # limit=0: the dispatcher is the only concurrency cap
            connector = aiohttp.TCPConnector(limit=0)
            timeout = aiohttp.ClientTimeout(total=self.request_timeout_s)
            self._session = aiohttp.ClientSession(
                connector=connector, timeout=timeout, headers=self.default_headers
            )
            logger.debug(f"Opened HTTP session (timeout={self.request_timeout_s}s)")
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("Closed HTTP session")

    async def get(self, uri: str) -> Response:
        if self._session is None:
            raise RuntimeError("AiohttpTransport used outside of 'async with'")
        try:
            async with self._session.get(uri) as resp:
                content = await resp.read()
                logger.debug(
                    f"Fetched {uri}: status={resp.status}, size={len(content)} bytes"
                )
                return Response(status=resp.status, size=len(content))
        except asyncio.TimeoutError as e:
            # aiohttp's timeout errors are also ClientErrors; keep them distinct
            raise TransportError(uri, "timeout") from e
        except aiohttp.ClientConnectorError as e:
            raise TransportError(uri, f"connection error: {e}") from e
        except aiohttp.ClientError as e:
            raise TransportError(uri, f"{type(e).__name__}: {e}") from e
