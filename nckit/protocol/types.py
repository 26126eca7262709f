"""
Request and response records passed between the protocol layer and the
I/O shells.  Nothing in here performs I/O.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from http import HTTPStatus

from lxml.etree import _Element


class DAVMethod(Enum):
    """HTTP and WebDAV methods used against the server."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PROPFIND = "PROPFIND"
    PROPPATCH = "PROPPATCH"
    REPORT = "REPORT"
    SEARCH = "SEARCH"
    MKCOL = "MKCOL"
    MOVE = "MOVE"
    COPY = "COPY"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"


@dataclass(frozen=True)
class DAVRequest:
    """
    A request as built by ``NextcloudProtocol``, ready to be handed to
    ``SyncIO.execute`` or ``AsyncIO.execute``.

    ``url`` is complete, query string included, and ``body`` is either
    an XML/JSON document or None.
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def with_header(self, name: str, value: str) -> "DAVRequest":
        return replace(self, headers={**self.headers, name: value})


@dataclass(frozen=True)
class DAVResponse:
    """Status, headers and raw body of whatever the server answered"""

    status: int
    headers: dict[str, str]
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_multistatus(self) -> bool:
        return self.status == 207

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    def header(self, name: str, default: str | None = None) -> str | None:
        ## requests and aiohttp hand over case-insensitive mappings,
        ## a plain dict does not
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default


@dataclass
class PropfindResult:
    """
    One ``<d:response>`` of a multistatus document.

    Attributes:
        href: Path of the resource, as sent by the server
        properties: Clark notation tag -> property element, merged from
            every propstat that was not a 404
        status: HTTP status of the first propstat (200 if absent)
    """

    href: str
    properties: dict[str, _Element] = field(default_factory=dict)
    status: int = 200

    def text(self, tag: str) -> str | None:
        """Text of a property, None if the property is missing or empty."""
        element = self.properties.get(tag)
        if element is None:
            return None
        return element.text
