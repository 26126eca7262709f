"""
Transports.  ``SyncIO`` (requests) and ``AsyncIO`` (aiohttp) do nothing
but send a DAVRequest and wrap what comes back in a DAVResponse; building
requests and reading answers is the business of nckit.protocol::

    protocol = NextcloudProtocol(session)
    with SyncIO() as io:
        response = io.execute(protocol.list_trash_request())
        trash = protocol.parse_trash(response)
"""

from .async_ import AsyncIO
from .base import AsyncIOProtocol, SyncIOProtocol
from .sync import SyncIO

__all__ = ["AsyncIO", "AsyncIOProtocol", "SyncIO", "SyncIOProtocol"]
