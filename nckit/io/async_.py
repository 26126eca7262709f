"""
Asyncio transport, built on aiohttp.
"""

import logging
from typing import Optional

import aiohttp

from nckit.io.base import log_request, log_response
from nckit.protocol.types import DAVRequest, DAVResponse

log = logging.getLogger(__name__)


class AsyncIO:
    """
    Runs a DAVRequest through an ``aiohttp.ClientSession``.

    aiohttp wants its session created inside a running event loop, so
    it is only opened on the first request.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        proxy: Optional[str] = None,
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.verify_ssl = verify_ssl
        self.proxy = proxy

    def _open(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                connector=aiohttp.TCPConnector(ssl=self.verify_ssl),
            )
        return self._session

    async def execute(self, request: DAVRequest) -> DAVResponse:
        session = self._open()
        log_request(log, request)
        kwargs = {}
        if self.proxy:
            kwargs["proxy"] = self.proxy
        async with session.request(
            method=request.method.value,
            url=request.url,
            headers=request.headers,
            data=request.body,
            **kwargs,
        ) as r:
            body = await r.read()
            log_response(log, r.status, r.reason, body)
            return DAVResponse(status=r.status, headers=dict(r.headers), body=body)

    async def close(self) -> None:
        ## a session handed in belongs to the caller
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AsyncIO":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
