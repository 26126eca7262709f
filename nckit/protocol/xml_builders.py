"""
Pure functions for building WebDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from typing import Any

from lxml import etree

from nckit.elements import dav
from nckit.elements import oc
from nckit.elements.base import BaseElement
from nckit.elements.base import PropertyElement
from nckit.lib.namespace import ns

from .properties import COMMENT_PROPERTIES
from .properties import FILE_EXISTS_PROPERTIES
from .properties import FileProperty
from .properties import TRASH_PROPERTIES

## Properties the media search can filter and order on
LAST_MODIFIED = ns("d", "getlastmodified")
UPLOAD_TIME = ns("nc", "upload_time")


def _tostring(element: BaseElement) -> bytes:
    return etree.tostring(element.xmlelement(), encoding="utf-8", xml_declaration=True)


def _prop(tags: list[str]) -> BaseElement:
    return dav.Prop() + [PropertyElement(tag) for tag in tags]


def _file_tags(
    create_properties: list[FileProperty] | None,
    remove_properties: list[FileProperty] | None,
) -> list[str]:
    return [p.value for p in FileProperty.select(create_properties, remove_properties)]


def build_propfind_body(props: list[str] | None = None) -> bytes:
    """
    Build PROPFIND request body XML.

    Args:
        props: Property tags (Clark notation) to retrieve.  An empty
               ``<d:prop/>`` is sent when None.

    Returns:
        UTF-8 encoded XML bytes
    """
    return _tostring(dav.Propfind() + _prop(props or []))


def build_file_propfind_body(
    create_properties: list[FileProperty] | None = None,
    remove_properties: list[FileProperty] | None = None,
) -> bytes:
    """
    PROPFIND body for listing files.  Every known FileProperty is
    asked for, unless ``create_properties`` narrows the set.
    """
    return build_propfind_body(_file_tags(create_properties, remove_properties))


def build_file_exists_body() -> bytes:
    return build_propfind_body(FILE_EXISTS_PROPERTIES)


def build_trash_body() -> bytes:
    return build_propfind_body(TRASH_PROPERTIES)


def build_comments_body() -> bytes:
    return build_propfind_body(COMMENT_PROPERTIES)


def build_proppatch_body(set_props: dict[str, Any] | None = None) -> bytes:
    """
    Build PROPPATCH request body for setting properties.

    Args:
        set_props: Property tag (Clark notation) -> value.  A value of
                   None gives an empty element.

    Returns:
        UTF-8 encoded XML bytes
    """
    prop = dav.Prop()
    for tag, value in (set_props or {}).items():
        prop += PropertyElement(tag, value)
    return _tostring(dav.PropertyUpdate() + (dav.Set() + prop))


def build_set_favorite_body(favorite: bool) -> bytes:
    return build_proppatch_body({oc.Favorite.tag: 1 if favorite else 0})


def build_live_photo_body(live_photo_file: str) -> bytes:
    return build_proppatch_body({oc.LivePhoto.tag: live_photo_file})


def build_comment_update_body(message: str) -> bytes:
    return build_proppatch_body({oc.Message.tag: message})


def build_comments_read_marker_body() -> bytes:
    return build_proppatch_body({oc.ReadMarker.tag: None})


def build_favorites_body(
    create_properties: list[FileProperty] | None = None,
    remove_properties: list[FileProperty] | None = None,
) -> bytes:
    """REPORT body listing the files flagged as favorite"""
    filter_files = oc.FilterFiles() + [
        _prop(_file_tags(create_properties, remove_properties)),
        oc.FilterRules() + oc.Favorite(1),
    ]
    return _tostring(filter_files)


def _search_request(
    props: list[str],
    href: str,
    depth: str,
    where: BaseElement,
    orderby: BaseElement | None = None,
    limit: int | None = None,
) -> bytes:
    basicsearch = dav.BasicSearch() + [
        dav.Select() + _prop(props),
        dav.From() + (dav.Scope() + [dav.Href(href), dav.Depth(depth)]),
    ]
    if orderby is not None:
        basicsearch += orderby
    basicsearch += where
    if limit is not None:
        basicsearch += dav.Limit() + dav.NResults(limit)
    return _tostring(dav.SearchRequest() + basicsearch)


def build_search_literal_body(
    href: str,
    depth: str,
    literal: str,
    create_properties: list[FileProperty] | None = None,
    remove_properties: list[FileProperty] | None = None,
) -> bytes:
    """
    SEARCH body matching display names containing ``literal``.  The
    ``%`` wildcards are added here.
    """
    where = dav.Where() + (
        dav.Like()
        + [dav.Prop() + dav.DisplayName(), dav.Literal("%" + literal + "%")]
    )
    return _search_request(
        _file_tags(create_properties, remove_properties), href, depth, where
    )


def build_search_file_id_body(
    user_id: str,
    file_id: str,
    create_properties: list[FileProperty] | None = None,
    remove_properties: list[FileProperty] | None = None,
) -> bytes:
    where = dav.Where() + (
        dav.Eq() + [dav.Prop() + oc.FileId(), dav.Literal(file_id)]
    )
    return _search_request(
        _file_tags(create_properties, remove_properties),
        "/files/" + user_id,
        "infinity",
        where,
    )


def build_search_media_body(
    href: str,
    element_date: str,
    less_date: str,
    greater_date: str,
    limit: int | None = None,
    create_properties: list[FileProperty] | None = None,
    remove_properties: list[FileProperty] | None = None,
) -> bytes:
    """
    SEARCH body for photos and videos whose ``element_date`` property
    (a Clark notation tag, i.e. last modification or upload time) lies
    strictly between ``greater_date`` and ``less_date``, newest first.
    """
    orderby = dav.OrderBy() + [
        dav.Order() + [dav.Prop() + PropertyElement(element_date), dav.Descending()],
        dav.Order() + [dav.Prop() + dav.DisplayName(), dav.Descending()],
    ]
    content_types = dav.Or() + [
        dav.Like() + [dav.Prop() + dav.GetContentType(), dav.Literal("image/%")],
        dav.Like() + [dav.Prop() + dav.GetContentType(), dav.Literal("video/%")],
    ]
    date_range = dav.Or() + (
        dav.And()
        + [
            dav.Lt()
            + [dav.Prop() + PropertyElement(element_date), dav.Literal(less_date)],
            dav.Gt()
            + [dav.Prop() + PropertyElement(element_date), dav.Literal(greater_date)],
        ]
    )
    where = dav.Where() + (dav.And() + [content_types, date_range])
    return _search_request(
        _file_tags(create_properties, remove_properties),
        href,
        "infinity",
        where,
        orderby=orderby,
        limit=limit,
    )

