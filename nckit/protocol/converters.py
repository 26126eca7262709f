"""
Conversion of multistatus responses into model records.

This is where the WebDAV listing gets its meaning: hrefs are turned
into parent paths and file names, hidden entries are filtered out, the
raw properties are mapped onto FileEntry fields through a fixed table,
the type classifier is applied and finally images and videos sharing a
base name are paired as live photos.

Malformed property values never abort a listing, the field they would
have set keeps its default.
"""

import logging
from typing import Callable
from typing import Iterable

from lxml import etree
from lxml.etree import _Element

from nckit.lib import coerce
from nckit.lib import url
from nckit.lib.namespace import ns
from nckit.models import CommentEntry
from nckit.models import DownloadLimit
from nckit.models import FileEntry
from nckit.models import FileLock
from nckit.models import LockType
from nckit.models import TrashEntry
from nckit.session import Session
from nckit.typeidentifiers import DIRECTORY_MIME_TYPE
from nckit.typeidentifiers import TypeClassFile

from .types import PropfindResult
from .xml_parsers import parse_multistatus
from .xml_parsers import parse_xml

log = logging.getLogger(__name__)

COLLECTION = ns("d", "collection")


def _localname(element: _Element) -> str:
    return etree.QName(element).localname


def _child_text(element: _Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None:
        return None
    return child.text


def _children_by_localname(element: _Element) -> dict[str, str | None]:
    return {
        _localname(child): child.text
        for child in element
        if isinstance(child.tag, str)
    }


# Setters, one per property.  Each receives the entry and the property
# element, and leaves the entry alone if the value can't be used.


def _text_setter(attribute: str) -> Callable[[FileEntry, _Element], None]:
    def setter(entry: FileEntry, element: _Element) -> None:
        if element.text is not None:
            setattr(entry, attribute, element.text)

    return setter


def _bool_setter(attribute: str) -> Callable[[FileEntry, _Element], None]:
    def setter(entry: FileEntry, element: _Element) -> None:
        if element.text is not None:
            setattr(entry, attribute, coerce.to_bool(element.text))

    return setter


def _int_setter(attribute: str) -> Callable[[FileEntry, _Element], None]:
    def setter(entry: FileEntry, element: _Element) -> None:
        if element.text is not None:
            setattr(entry, attribute, coerce.to_int(element.text))

    return setter


def _timestamp_setter(attribute: str) -> Callable[[FileEntry, _Element], None]:
    def setter(entry: FileEntry, element: _Element) -> None:
        instant = coerce.positive_timestamp(element.text)
        if instant is not None:
            setattr(entry, attribute, instant)

    return setter


def _geometry_setter(*names: str) -> Callable[[FileEntry, _Element], None]:
    """For the gps and size metadata, whose values are child elements"""

    def setter(entry: FileEntry, element: _Element) -> None:
        values = _children_by_localname(element)
        for name in names:
            value = coerce.to_optional_float(values.get(name))
            if value is not None:
                setattr(entry, name, value)

    return setter


def _set_last_modified(entry: FileEntry, element: _Element) -> None:
    date = coerce.parse_http_date(element.text)
    if date is not None:
        entry.date = date


def _set_etag(entry: FileEntry, element: _Element) -> None:
    if element.text is not None:
        entry.etag = element.text.replace('"', "")


def _set_share_permissions_collaboration(entry: FileEntry, element: _Element) -> None:
    value = coerce.to_optional_int(element.text)
    if value is not None:
        entry.share_permissions_collaboration = value


def _set_share_permissions_cloud_mesh(entry: FileEntry, element: _Element) -> None:
    ## a JSON-ish list, i.e. ["share","read","write"]
    if element.text is None:
        return
    for part in element.text.split(","):
        entry.share_permissions_cloud_mesh.append(
            part.replace("[", "").replace("]", "").replace('"', "")
        )


def _set_resource_type(entry: FileEntry, element: _Element) -> None:
    if element.find(COLLECTION) is not None:
        entry.directory = True
        entry.content_type = DIRECTORY_MIME_TYPE
    elif element.text is not None:
        entry.resource_type = element.text


def _set_share_types(entry: FileEntry, element: _Element) -> None:
    for child in element.findall(ns("oc", "share-type")):
        value = coerce.to_optional_int(child.text)
        if value is not None:
            entry.share_type.append(value)


def _set_system_tags(entry: FileEntry, element: _Element) -> None:
    for child in element.findall(ns("nc", "system-tag")):
        if child.text is not None:
            entry.tags.append(child.text)


def _set_live_photo(entry: FileEntry, element: _Element) -> None:
    if element.text is not None:
        entry.live_photo_file = element.text
        entry.is_flagged_as_live_photo_by_server = True


def _set_exif(entry: FileEntry, element: _Element) -> None:
    for child in element:
        if isinstance(child.tag, str):
            entry.exif_photos.append({_localname(child): child.text})


def _set_place(entry: FileEntry, element: _Element) -> None:
    entry.place_photos = element.text


def _set_download_limits(entry: FileEntry, element: _Element) -> None:
    for child in element.findall(ns("nc", "share-download-limit")):
        token = _child_text(child, ns("nc", "token"))
        limit = coerce.to_optional_int(_child_text(child, ns("nc", "limit")))
        count = coerce.to_optional_int(_child_text(child, ns("nc", "count")))
        if token is None or limit is None or count is None:
            continue
        entry.download_limits.append(DownloadLimit(token=token, limit=limit, count=count))


## Applied in this order.  getcontenttype comes before resourcetype,
## which overrides it for collections, and the older file-metadata-*
## geometry comes before the metadata-photos-* one that replaces it.
FILE_PROPERTY_SETTERS: list[tuple[str, Callable[[FileEntry, _Element], None]]] = [
    (ns("d", "getlastmodified"), _set_last_modified),
    (ns("nc", "creation_time"), _timestamp_setter("creation_date")),
    (ns("nc", "upload_time"), _timestamp_setter("upload_date")),
    (ns("d", "getetag"), _set_etag),
    (ns("d", "getcontenttype"), _text_setter("content_type")),
    (ns("d", "data-fingerprint"), _text_setter("data_fingerprint")),
    (ns("oc", "data-fingerprint"), _text_setter("data_fingerprint")),
    (ns("d", "downloadURL"), _text_setter("download_url")),
    (ns("oc", "downloadURL"), _text_setter("download_url")),
    (ns("nc", "note"), _text_setter("note")),
    (ns("ocs", "share-permissions"), _set_share_permissions_collaboration),
    (ns("ocm", "share-permissions"), _set_share_permissions_cloud_mesh),
    (ns("d", "checksums"), _text_setter("checksums")),
    (ns("oc", "checksums"), _text_setter("checksums")),
    (ns("d", "resourcetype"), _set_resource_type),
    (ns("d", "quota-available-bytes"), _int_setter("quota_available_bytes")),
    (ns("d", "quota-used-bytes"), _int_setter("quota_used_bytes")),
    (ns("oc", "permissions"), _text_setter("permissions")),
    (ns("oc", "id"), _text_setter("oc_id")),
    (ns("oc", "fileid"), _text_setter("file_id")),
    (ns("oc", "size"), _int_setter("size")),
    (ns("oc", "share-types"), _set_share_types),
    (ns("oc", "favorite"), _bool_setter("favorite")),
    (ns("oc", "owner-id"), _text_setter("owner_id")),
    (ns("oc", "owner-display-name"), _text_setter("owner_display_name")),
    (ns("oc", "comments-unread"), _bool_setter("comments_unread")),
    (ns("nc", "is-encrypted"), _bool_setter("e2e_encrypted")),
    (ns("nc", "has-preview"), _bool_setter("has_preview")),
    (ns("nc", "mount-type"), _text_setter("mount_type")),
    (ns("nc", "rich-workspace"), _text_setter("rich_workspace")),
    (ns("nc", "system-tags"), _set_system_tags),
    (ns("nc", "file-metadata-gps"), _geometry_setter("latitude", "longitude", "altitude")),
    (ns("nc", "file-metadata-size"), _geometry_setter("width", "height")),
    (ns("nc", "metadata-photos-gps"), _geometry_setter("latitude", "longitude", "altitude")),
    (ns("nc", "metadata-photos-size"), _geometry_setter("width", "height")),
    (ns("nc", "metadata-files-live-photo"), _set_live_photo),
    (ns("nc", "hidden"), _bool_setter("hidden")),
    (ns("nc", "metadata-photos-original_date_time"), _timestamp_setter("date_photos_original")),
    (ns("nc", "metadata-photos-exif"), _set_exif),
    (ns("nc", "metadata-photos-place"), _set_place),
    (ns("nc", "share-download-limits"), _set_download_limits),
]


def lock_from_properties(result: PropfindResult) -> FileLock | None:
    """
    The lock described by the nc:lock-* properties, None unless
    nc:lock is a number greater than zero.  The timeout instant is the
    lock time plus nc:lock-timeout seconds.
    """
    locked = coerce.to_optional_int(result.text(ns("nc", "lock")))
    if not locked or locked <= 0:
        return None

    lock = FileLock(
        owner=result.text(ns("nc", "lock-owner")) or "",
        owner_editor=result.text(ns("nc", "lock-owner-editor")),
        owner_display_name=result.text(ns("nc", "lock-owner-displayname")) or "",
        token=result.text(ns("nc", "lock-token")),
    )

    owner_type = coerce.to_optional_int(result.text(ns("nc", "lock-owner-type")))
    if owner_type is not None:
        try:
            lock.owner_type = LockType(owner_type)
        except ValueError:
            log.warning("Unknown lock owner type %s", owner_type)

    lock_time = coerce.to_optional_int(result.text(ns("nc", "lock-time")))
    if lock_time is not None:
        lock.time = coerce.from_timestamp(lock_time)

    timeout = coerce.to_optional_int(result.text(ns("nc", "lock-timeout")))
    if timeout is not None:
        lock.timeout_seconds = timeout
        lock.timeout = coerce.add_seconds(lock.time, timeout)

    return lock


def is_hidden(href: str, include_hidden_files: Iterable[str] = ()) -> bool:
    """
    True if the listing should leave this href out when hidden files
    are not shown.  An href is hidden when one of its path components
    starts with a dot, unless one of its components is in
    ``include_hidden_files``, in which case it is shown even if other
    components are dot-prefixed as well.
    """
    components = [url.percent_decoded(c) for c in url.path_components(href)]
    if not any(c.startswith(".") for c in components):
        return False
    include = set(include_hidden_files)
    if include and any(c in include for c in components):
        return False
    return True


def pair_live_photos(files: list[FileEntry]) -> list[FileEntry]:
    """
    Sort the listing by (server_url, base name, class) and link every
    image with the video right after it when both share a base name.

    The match is greedy and first-wins: with more than two files of the
    same base name only the first adjacent image/video pair is linked.
    Directories and entries that already carry a link (set by the
    server) are left alone.  Returns the sorted list.
    """
    files = sorted(
        files,
        key=lambda f: (f.server_url, f.file_name_without_ext, f.class_file),
    )
    for index, current in enumerate(files[:-1]):
        if current.live_photo_file or current.directory:
            continue
        following = files[index + 1]
        if (
            current.file_name_without_ext == following.file_name_without_ext
            and current.class_file == TypeClassFile.image.value
            and following.class_file == TypeClassFile.video.value
        ):
            current.live_photo_file = following.file_id
            following.live_photo_file = current.file_id
    return files


def convert_file(
    result: PropfindResult,
    session: Session,
    host_name: str,
    root_file_name: str = ".",
) -> FileEntry:
    """Builds one FileEntry out of a multistatus response"""
    entry = FileEntry(account=session.account)

    href = result.href
    file_name_path = href[:-1] if href.endswith("/") else href
    parent = url.deleting_last_path_component(file_name_path)
    entry.path = url.percent_decoded(parent.rstrip("/") + "/")
    entry.file_name = url.percent_decoded(url.last_path_component(file_name_path))

    if href == session.files_root:
        entry.file_name = root_file_name
        entry.server_url = host_name + session.files_root.rstrip("/")
    else:
        entry.server_url = host_name + entry.path[:-1]

    for tag, setter in FILE_PROPERTY_SETTERS:
        element = result.properties.get(tag)
        if element is not None:
            setter(entry, element)

    entry.lock = lock_from_properties(result)

    internal_type = session.type_identifiers.get_internal_type(
        entry.file_name, entry.content_type, entry.directory
    )
    entry.content_type = internal_type.mime_type
    entry.icon_name = internal_type.icon_name
    entry.class_file = internal_type.class_file
    entry.type_identifier = internal_type.type_identifier
    entry.name = "files"

    entry.url_base = session.url_base
    entry.user = session.user
    entry.user_id = session.user_id
    return entry


def parse_file_listing(
    body: bytes | str,
    session: Session,
    root_file_name: str = ".",
    show_hidden_files: bool = True,
    include_hidden_files: Iterable[str] = (),
) -> list[FileEntry]:
    """
    Parse the multistatus answer of a PROPFIND, REPORT or SEARCH on
    the files tree into FileEntry records.

    Args:
        body: Raw XML response body
        session: Account the listing belongs to, used for the files root,
                 the type registry and to stamp the entries
        root_file_name: Name given to the entry of the files root itself
        show_hidden_files: When False, entries with a dot-prefixed path
                 component are left out
        include_hidden_files: Names that keep an entry in the listing
                 even when it is hidden

    Returns:
        The entries sorted by (server_url, base name, class), with live
        photos paired.  Empty if no host can be derived from
        ``session.url_base``.

    Raises:
        XMLError: If body is not well-formed XML
    """
    host_name = session.host_name
    if host_name is None:
        log.error("Cannot derive a host name from %s", session.url_base)
        return []

    include_hidden_files = list(include_hidden_files)
    files: list[FileEntry] = []
    for result in parse_multistatus(body):
        if not show_hidden_files and is_hidden(result.href, include_hidden_files):
            continue
        files.append(convert_file(result, session, host_name, root_file_name))

    return pair_live_photos(files)


def parse_trash_listing(body: bytes | str, session: Session) -> list[TrashEntry]:
    """
    Parse the PROPFIND answer of the trash bin.  The first response
    describes the trash collection itself and is skipped.
    """
    host_name = session.host_name
    if host_name is None:
        log.error("Cannot derive a host name from %s", session.url_base)
        return []

    items: list[TrashEntry] = []
    for result in parse_multistatus(body)[1:]:
        entry = TrashEntry()
        href = result.href
        file_name_path = href[:-1] if href.endswith("/") else href
        parent = url.deleting_last_path_component(file_name_path)
        entry.file_path = host_name + url.percent_decoded(parent.rstrip("/") + "/")
        entry.file_name = url.percent_decoded(url.last_path_component(file_name_path))

        entry.date = coerce.parse_http_date(result.text(ns("d", "getlastmodified")))
        entry.content_type = result.text(ns("d", "getcontenttype")) or ""

        resource_type = result.properties.get(ns("d", "resourcetype"))
        if resource_type is not None and resource_type.find(COLLECTION) is not None:
            entry.directory = True
            entry.content_type = DIRECTORY_MIME_TYPE

        entry.oc_id = result.text(ns("oc", "id")) or ""
        entry.file_id = result.text(ns("oc", "fileid")) or ""
        entry.has_preview = coerce.to_bool(result.text(ns("nc", "has-preview")))
        entry.size = coerce.to_int(result.text(ns("oc", "size")))
        entry.trashbin_file_name = result.text(ns("nc", "trashbin-filename")) or ""
        entry.trashbin_original_location = (
            result.text(ns("nc", "trashbin-original-location")) or ""
        )
        entry.trashbin_deletion_time = coerce.from_timestamp(
            coerce.to_optional_float(result.text(ns("nc", "trashbin-deletion-time")))
        )

        internal_type = session.type_identifiers.get_internal_type(
            entry.trashbin_file_name, entry.content_type, entry.directory
        )
        entry.content_type = internal_type.mime_type
        entry.class_file = internal_type.class_file
        entry.icon_name = internal_type.icon_name
        entry.type_identifier = internal_type.type_identifier

        items.append(entry)

    return items


def parse_comments(body: bytes | str) -> list[CommentEntry]:
    """
    Parse the PROPFIND answer of a comments collection.  Only responses
    whose status is 200 are kept, which drops the collection itself.
    """
    items: list[CommentEntry] = []
    for result in parse_multistatus(body):
        if result.status != 200:
            continue
        items.append(
            CommentEntry(
                path=result.href,
                actor_display_name=result.text(ns("oc", "actorDisplayName")) or "",
                actor_id=result.text(ns("oc", "actorId")) or "",
                actor_type=result.text(ns("oc", "actorType")) or "",
                creation_date_time=coerce.parse_http_date(
                    result.text(ns("oc", "creationDateTime"))
                ),
                is_unread=coerce.to_bool(result.text(ns("oc", "isUnread"))),
                message=result.text(ns("oc", "message")) or "",
                message_id=result.text(ns("oc", "id")) or "",
                object_id=result.text(ns("oc", "objectId")) or "",
                object_type=result.text(ns("oc", "objectType")) or "",
                verb=result.text(ns("oc", "verb")) or "",
            )
        )
    return items


def parse_lock(body: bytes | str) -> FileLock | None:
    """
    The lock described by the ``<d:prop>`` document a LOCK request
    answers with, None unless the file is locked and the owner, owner
    type, time and timeout are all present.
    """
    tree = parse_xml(body)
    prop = tree if tree.tag == ns("d", "prop") else tree.find(".//" + ns("d", "prop"))
    if prop is None:
        return None

    result = PropfindResult(
        href="",
        properties={child.tag: child for child in prop if isinstance(child.tag, str)},
    )
    for required in (
        "lock-owner",
        "lock-owner-displayname",
        "lock-owner-type",
        "lock-time",
        "lock-timeout",
    ):
        if result.text(ns("nc", required)) is None:
            return None
    return lock_from_properties(result)


def parse_app_password(body: bytes | str) -> str | None:
    """Text of ``ocs/data/apppassword`` in an XML OCS answer"""
    tree = parse_xml(body)
    element = tree.find("data/apppassword")
    if element is None:
        return None
    return element.text
