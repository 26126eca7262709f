"""
Everything nckit knows about talking to a Nextcloud server, as pure
functions and data.  Nothing in this package opens a socket.

- types: DAVRequest, DAVResponse and the raw PropfindResult
- properties: the WebDAV properties a file listing can ask for
- xml_builders: PROPFIND, PROPPATCH, REPORT and SEARCH bodies
- xml_parsers: multistatus and Sabre error documents
- converters: PropfindResults -> FileEntry, TrashEntry, CommentEntry ...
- json_parsers: OCS answers -> ShareEntry, ActivityEntry, LoginFlow ...
- operations: NextcloudProtocol, one request builder and one parser
  per server operation

A round trip with any transport (SyncIO, AsyncIO or a test double)::

    protocol = NextcloudProtocol(Session("https://cloud.example.com", "alice", password="secret"))
    request = protocol.read_file_or_folder_request(protocol.session.files_url, depth="1")
    response = transport.execute(request)
    files = protocol.parse_file_listing(protocol.check_response(response, request))
"""

from .types import (
    DAVMethod,
    DAVRequest,
    DAVResponse,
    PropfindResult,
)
from .properties import FileProperty
from .xml_builders import (
    build_comment_update_body,
    build_comments_body,
    build_comments_read_marker_body,
    build_favorites_body,
    build_file_exists_body,
    build_file_propfind_body,
    build_live_photo_body,
    build_propfind_body,
    build_proppatch_body,
    build_search_file_id_body,
    build_search_literal_body,
    build_search_media_body,
    build_set_favorite_body,
    build_trash_body,
)
from .xml_parsers import (
    dav_error_message,
    parse_multistatus,
)
from .converters import (
    pair_live_photos,
    parse_app_password,
    parse_comments,
    parse_file_listing,
    parse_lock,
    parse_trash_listing,
)
from .json_parsers import (
    ocs_error_message,
    parse_activities,
    parse_login_flow,
    parse_login_flow_poll,
    parse_ocs,
    parse_share,
    parse_shares,
)
from .operations import NextcloudProtocol

__all__ = [
    # Enums
    "DAVMethod",
    "FileProperty",
    # Request/Response
    "DAVRequest",
    "DAVResponse",
    # Result types
    "PropfindResult",
    # XML Builders
    "build_comment_update_body",
    "build_comments_body",
    "build_comments_read_marker_body",
    "build_favorites_body",
    "build_file_exists_body",
    "build_file_propfind_body",
    "build_live_photo_body",
    "build_propfind_body",
    "build_proppatch_body",
    "build_search_file_id_body",
    "build_search_literal_body",
    "build_search_media_body",
    "build_set_favorite_body",
    "build_trash_body",
    # XML Parsers
    "dav_error_message",
    "parse_multistatus",
    # Converters
    "pair_live_photos",
    "parse_app_password",
    "parse_comments",
    "parse_file_listing",
    "parse_lock",
    "parse_trash_listing",
    # JSON Parsers
    "ocs_error_message",
    "parse_activities",
    "parse_login_flow",
    "parse_login_flow_poll",
    "parse_ocs",
    "parse_share",
    "parse_shares",
    # Protocol
    "NextcloudProtocol",
]
