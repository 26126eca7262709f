"""
Reading the XML the server answers with: multistatus documents and the
Sabre error documents of failed requests.
"""

import re

from lxml import etree
from lxml.etree import _Element

from nckit.lib import error
from nckit.lib.namespace import ns
from nckit.lib.url import URL

from .types import PropfindResult

RESPONSE = ns("d", "response")
HREF = ns("d", "href")
PROPSTAT = ns("d", "propstat")
PROP = ns("d", "prop")
STATUS = ns("d", "status")
SABRE_MESSAGE = ns("s", "message")
STATUS_LINE = re.compile(r"\s*HTTP/\S+\s+(\d{3})")


def parse_xml(body: bytes | str, huge_tree: bool = False) -> _Element:
    """
    Parse a response body into an element tree.

    Raises:
        XMLError: If body is not well-formed XML
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    parser = etree.XMLParser(huge_tree=huge_tree, resolve_entities=False)
    try:
        return etree.fromstring(body, parser)
    except etree.XMLSyntaxError as e:
        raise error.XMLError(reason=str(e)) from e


def parse_multistatus(body: bytes | str, huge_tree: bool = False) -> list[PropfindResult]:
    """
    Parse a 207 Multi-Status response body.

    Every ``<d:response>`` is reduced to its href and a map of property
    tag -> property element.  The href is kept as sent (still percent
    encoded); absolute URLs are cut down to their path.

    Args:
        body: Raw XML response bytes
        huge_tree: Allow parsing very large XML documents

    Returns:
        One PropfindResult per response element, in document order

    Raises:
        XMLError: If body is not valid XML
    """
    tree = parse_xml(body, huge_tree=huge_tree)
    ## iter() also copes with a bare response or a multistatus wrapped
    ## in an extra element
    return [
        PropfindResult(
            href=_response_href(response),
            properties=_extract_properties(response),
            status=_response_status(response),
        )
        for response in tree.iter(RESPONSE)
    ]


def dav_error_message(body: bytes | str | None) -> str | None:
    """
    The ``<s:message>`` of a Sabre ``<d:error>`` document, None if the
    body is something else.
    """
    if not body:
        return None
    try:
        tree = parse_xml(body)
    except error.XMLError:
        return None
    message = tree.find(SABRE_MESSAGE)
    if message is None or not message.text:
        return None
    return message.text.strip()


def _response_href(response: _Element) -> str:
    href = response.findtext(HREF)
    if href is None:
        error.weirdness("response without href", response)
        return ""
    href = href.strip()
    ## some servers send absolute urls
    if "://" in href:
        href = URL(href).path
    return href


def _response_status(response: _Element) -> int:
    """
    The status of the response element itself, falling back to the one
    of its first propstat.
    """
    status = response.findtext(STATUS)
    if status is None:
        status = response.findtext("%s/%s" % (PROPSTAT, STATUS))
    return _status_to_code(status)


def _extract_properties(response: _Element) -> dict[str, _Element]:
    """
    Properties of all propstats in one dict.  Those reported as 404 are
    left out, so a missing property and an unknown one look the same.
    """
    properties: dict[str, _Element] = {}
    for propstat in response.iterfind(PROPSTAT):
        if _status_to_code(propstat.findtext(STATUS)) == 404:
            continue
        for prop in propstat.iterfind(PROP):
            for child in prop:
                ## skip comments and processing instructions
                if isinstance(child.tag, str):
                    properties.setdefault(child.tag, child)
    return properties


def _status_to_code(status: str | None) -> int:
    """``HTTP/1.1 404 Not Found`` -> 404, anything unreadable -> 200"""
    match = STATUS_LINE.match(status or "")
    return int(match.group(1)) if match else 200
