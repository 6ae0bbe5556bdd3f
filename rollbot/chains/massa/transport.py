"""JSON-RPC transport over a single long-lived HTTP session."""
from __future__ import annotations

import asyncio
import ipaddress
import itertools
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...errors import NodeConnectionError, RpcError

logger = logging.getLogger(__name__)


def build_url(host: str, port: int, use_tls: bool = False) -> str:
    """Node URL; IPv6 literals are bracketed."""
    try:
        if isinstance(ipaddress.ip_address(host), ipaddress.IPv6Address):
            host = f"[{host}]"
    except ValueError:
        pass  # hostname
    scheme = "https" if use_tls else "http"
    return f"{scheme}://{host}:{port}"


class Transport:
    """One connection to the node; each ``call`` is an independent request on it."""

    def __init__(
        self, url: str, session: aiohttp.ClientSession, timeout: float = 30
    ) -> None:
        self.url = url
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._ids = itertools.count(1)

    @classmethod
    async def connect(
        cls, host: str, port: int, timeout: float = 30, use_tls: bool = False
    ) -> Transport:
        """Open the session and check the node answers at all.

        Raises:
            NodeConnectionError: the node is unreachable.
        """
        url = build_url(host, port, use_tls)
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        session = aiohttp.ClientSession(connector=connector)

        try:
            # Any HTTP response, whatever its status, proves the node is up.
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                logger.debug("Probe of %s answered HTTP %s", url, response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await session.close()
            raise NodeConnectionError(f"Unable to connect to node at {url}: {e}") from e

        logger.info("Connected to node at %s", url)
        return cls(url, session, timeout)

    @property
    def closed(self) -> bool:
        return self._session.closed

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result``.

        Raises:
            RpcError: on any transport, protocol or node-side failure.
        """
        if self._session.closed:
            raise RpcError(method, "transport is closed")

        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("RPC -> %s %s", method, params)

        try:
            async with self._session.post(
                self.url, json=payload, timeout=self._timeout
            ) as response:
                body = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise RpcError(method, "request timed out") from e
        except (aiohttp.ClientError, OSError, RuntimeError) as e:
            raise RpcError(method, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise RpcError(method, f"invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise RpcError(method, f"malformed response: {body!r}")

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(
                    method, str(error.get("message", error)), error.get("code")
                )
            raise RpcError(method, str(error))

        if "result" not in body:
            raise RpcError(method, "response carries neither result nor error")

        return body["result"]

    async def close(self) -> None:
        if not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
