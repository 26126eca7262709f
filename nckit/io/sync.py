"""
Blocking transport, built on requests.
"""

import logging
from typing import Optional

import requests

from nckit.io.base import log_request, log_response
from nckit.protocol.types import DAVRequest, DAVResponse

log = logging.getLogger(__name__)


class SyncIO:
    """
    Runs a DAVRequest through a ``requests.Session``.

    Example:
        with SyncIO(timeout=60) as io:
            response = io.execute(request)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        verify: bool = True,
        proxies: Optional[dict] = None,
    ):
        """
        Args:
            session: A session to reuse, it is left open by close()
            timeout: Seconds, for connecting and for each read
            verify: Check the server certificate
            proxies: As requests takes them, i.e. {"https": "http://proxy:3128"}
        """
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.proxies = proxies

    def execute(self, request: DAVRequest) -> DAVResponse:
        log_request(log, request)
        r = self.session.request(
            method=request.method.value,
            url=request.url,
            headers=request.headers,
            data=request.body,
            timeout=self.timeout,
            verify=self.verify,
            proxies=self.proxies,
        )
        log_response(log, r.status_code, r.reason, r.content)
        return DAVResponse(status=r.status_code, headers=dict(r.headers), body=r.content)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        return self

    def __exit__(self, *args) -> None:
        self.close()
