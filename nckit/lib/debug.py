from typing import Union

from lxml import etree

## Bodies are cut to this many characters in debug logs
MAX_LOGGED_BODY = 2000


def xmlstring(root) -> str:
    """Printable form of an element, a BaseElement or a raw body"""
    if isinstance(root, str):
        return root
    if isinstance(root, bytes):
        return root.decode("utf-8", errors="replace")
    if hasattr(root, "xmlelement"):
        root = root.xmlelement()
    try:
        return etree.tostring(root, pretty_print=True).decode("utf-8")
    except TypeError:
        return str(root)


def loggable_body(body: Union[bytes, str, None]) -> str:
    if not body:
        return ""
    text = xmlstring(body)
    if len(text) > MAX_LOGGED_BODY:
        cut = len(text) - MAX_LOGGED_BODY
        text = "%s... (%i more characters)" % (text[:MAX_LOGGED_BODY], cut)
    return text
