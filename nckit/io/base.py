"""
What the clients expect from an I/O shell.

Anything with an ``execute`` turning a DAVRequest into a DAVResponse can
drive the clients, a Mock included.  Non-2xx answers are returned like
any other, raising is left to ``NextcloudProtocol.check_response``.
"""

import logging
from typing import Protocol, runtime_checkable

from nckit.lib.debug import loggable_body
from nckit.protocol.types import DAVRequest, DAVResponse

## Never written to the logs
SECRET_HEADERS = frozenset(("authorization", "cookie"))


@runtime_checkable
class SyncIOProtocol(Protocol):
    def execute(self, request: DAVRequest) -> DAVResponse:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class AsyncIOProtocol(Protocol):
    async def execute(self, request: DAVRequest) -> DAVResponse:
        ...

    async def close(self) -> None:
        ...


def log_request(log: logging.Logger, request: DAVRequest) -> None:
    if not log.isEnabledFor(logging.DEBUG):
        return
    headers = {
        k: v for k, v in request.headers.items() if k.lower() not in SECRET_HEADERS
    }
    log.debug(
        "sending request - method=%s, url=%s, headers=%s\nbody:\n%s",
        request.method.value,
        request.url,
        headers,
        loggable_body(request.body),
    )


def log_response(
    log: logging.Logger, status: int, reason: str, body: bytes
) -> None:
    log.debug(
        "server responded with %i %s\nbody:\n%s",
        status,
        reason,
        loggable_body(body),
    )
