"""
Nextcloud protocol operations combining request building and response parsing.

This class provides a high-level interface to the server's WebDAV and OCS
endpoints while remaining completely I/O-free.
"""

import base64
import json
import logging
from datetime import datetime
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Union
from urllib.parse import urlencode

from nckit.lib import coerce
from nckit.lib import error
from nckit.lib import url
from nckit.models import ActivityPage
from nckit.models import CommentEntry
from nckit.models import FileEntry
from nckit.models import FileLock
from nckit.models import LoginFlow
from nckit.models import LoginFlowResult
from nckit.models import ShareEntry
from nckit.models import TrashEntry
from nckit.session import Session

from .converters import parse_app_password
from .converters import parse_comments
from .converters import parse_file_listing
from .converters import parse_lock
from .converters import parse_trash_listing
from .json_parsers import parse_activities
from .json_parsers import parse_login_flow
from .json_parsers import parse_login_flow_poll
from .json_parsers import parse_shares
from .properties import FileProperty
from .types import DAVMethod
from .types import DAVRequest
from .types import DAVResponse
from .xml_builders import build_comment_update_body
from .xml_builders import build_comments_body
from .xml_builders import build_comments_read_marker_body
from .xml_builders import build_favorites_body
from .xml_builders import build_file_exists_body
from .xml_builders import build_file_propfind_body
from .xml_builders import build_live_photo_body
from .xml_builders import build_search_file_id_body
from .xml_builders import build_search_literal_body
from .xml_builders import build_search_media_body
from .xml_builders import build_set_favorite_body
from .xml_builders import build_trash_body
from .xml_builders import LAST_MODIFIED

log = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

SHARES_ENDPOINT = "ocs/v2.php/apps/files_sharing/api/v1/shares"
ACTIVITY_ENDPOINT = "ocs/v2.php/apps/activity/api/v2/activity/"
APP_PASSWORD_ENDPOINT = "ocs/v2.php/core/getapppassword"
LOGIN_FLOW_ENDPOINT = "index.php/login/v2"

## A date bound of the media search: an instant or a unix timestamp
DateBound = Union[datetime, int]


class NextcloudProtocol:
    """
    Sans-I/O protocol handler for one account.

    Builds requests and parses responses without doing any I/O.
    All HTTP communication is delegated to an external I/O implementation.

    Example:
        protocol = NextcloudProtocol(Session("https://cloud.example.com", "alice", password="secret"))

        # Build request
        request = protocol.read_file_or_folder_request(protocol.session.files_url, depth="1")

        # Execute with your I/O (not shown)
        response = io.execute(request)

        # Parse response
        files = protocol.parse_file_listing(response)
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _auth_header(self) -> Optional[str]:
        """Build Basic auth header if credentials provided."""
        if self.session.user and self.session.password:
            credentials = f"{self.session.user}:{self.session.password}"
            encoded = base64.b64encode(credentials.encode()).decode()
            return f"Basic {encoded}"
        return None

    def standard_headers(
        self,
        content_type: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, str]:
        """
        Headers sent with every request: authentication, user agent,
        content type (form encoded unless told otherwise), ``Accept:
        application/json`` for anything but XML and the OCS marker.
        """
        headers = {}
        auth = self._auth_header()
        if auth:
            headers["Authorization"] = auth
        if self.session.user_agent:
            headers["User-Agent"] = self.session.user_agent
        headers["Content-Type"] = content_type or FORM_CONTENT_TYPE
        if content_type != XML_CONTENT_TYPE:
            headers["Accept"] = "application/json"
        headers["OCS-APIRequest"] = "true"
        headers.update(extra_headers or {})
        return headers

    def _resolve_url(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        """
        Percent-encode a (decoded) URL, or the endpoint below url_base when
        ``path`` is relative, and append the query parameters.
        """
        if "://" not in path:
            path = str(url.make(self.session.url_base).join(path))
        if url.host_name(path) is None:
            raise error.URLError(url=path)
        resolved = url.url_encoded(path)
        if params:
            resolved += "?" + urlencode(params)
        return resolved

    # =========================================================================
    # Files
    # =========================================================================

    def read_file_or_folder_request(
        self,
        server_url_file_name: str,
        depth: str = "1",
        body: Optional[bytes] = None,
        create_properties: Optional[List[FileProperty]] = None,
        remove_properties: Optional[List[FileProperty]] = None,
    ) -> DAVRequest:
        """
        Build a PROPFIND request listing a file or a folder.

        Args:
            server_url_file_name: Decoded URL of the file or folder
            depth: "0" for the item itself, "1" for a folder and its
                   children.  Depth 0 drops a trailing slash, any other
                   depth adds one.
            body: Request body to send instead of the default one
            create_properties: Only ask for these properties
            remove_properties: Don't ask for these properties

        Returns:
            DAVRequest ready for execution
        """
        depth = str(depth)
        if depth == "0":
            server_url_file_name = server_url_file_name.rstrip("/")
        elif not server_url_file_name.endswith("/"):
            server_url_file_name += "/"

        if body is None:
            body = build_file_propfind_body(create_properties, remove_properties)
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(XML_CONTENT_TYPE, {"Depth": depth}),
            body=body,
        )

    def file_exists_request(self, server_url_file_name: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(XML_CONTENT_TYPE, {"Depth": "0"}),
            body=build_file_exists_body(),
        )

    def create_folder_request(self, server_url_file_name: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.MKCOL,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(),
        )

    def delete_file_or_folder_request(self, server_url_file_name: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.DELETE,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(),
        )

    def _transfer_request(
        self,
        method: DAVMethod,
        source: str,
        destination: str,
        overwrite: bool,
    ) -> DAVRequest:
        headers = self.standard_headers(
            extra_headers={
                "Destination": self._resolve_url(destination),
                "Overwrite": "T" if overwrite else "F",
            }
        )
        return DAVRequest(method=method, url=self._resolve_url(source), headers=headers)

    def move_file_or_folder_request(
        self, source: str, destination: str, overwrite: bool = False
    ) -> DAVRequest:
        return self._transfer_request(DAVMethod.MOVE, source, destination, overwrite)

    def copy_file_or_folder_request(
        self, source: str, destination: str, overwrite: bool = False
    ) -> DAVRequest:
        return self._transfer_request(DAVMethod.COPY, source, destination, overwrite)

    def set_favorite_request(self, file_name: str, favorite: bool) -> DAVRequest:
        """
        Build a PROPPATCH request flagging a file as favorite.

        Args:
            file_name: Path of the file below the user's files root
            favorite: New value of the flag
        """
        return DAVRequest(
            method=DAVMethod.PROPPATCH,
            url=self._resolve_url(self.session.files_url + "/" + file_name.lstrip("/")),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_set_favorite_body(favorite),
        )

    def list_favorites_request(
        self,
        create_properties: Optional[List[FileProperty]] = None,
        remove_properties: Optional[List[FileProperty]] = None,
    ) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.REPORT,
            url=self._resolve_url(self.session.files_url),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_favorites_body(create_properties, remove_properties),
        )

    def set_live_photo_request(
        self, server_url_file_name: str, live_photo_file: str
    ) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPPATCH,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_live_photo_body(live_photo_file),
        )

    def lock_unlock_file_request(
        self, server_url_file_name: str, should_lock: bool
    ) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.LOCK if should_lock else DAVMethod.UNLOCK,
            url=self._resolve_url(server_url_file_name),
            headers=self.standard_headers(extra_headers={"X-User-Lock": "1"}),
        )

    # =========================================================================
    # Search
    # =========================================================================

    def _search_request(self, body: bytes) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.SEARCH,
            url=self._resolve_url(self.session.dav_url),
            headers=self.standard_headers("text/xml"),
            body=body,
        )

    def search_literal_request(
        self,
        literal: str,
        depth: str = "infinity",
        create_properties: Optional[List[FileProperty]] = None,
        remove_properties: Optional[List[FileProperty]] = None,
    ) -> DAVRequest:
        """SEARCH for files whose display name contains ``literal``"""
        href = url.url_encoded("/files/" + self.session.user_id)
        return self._search_request(
            build_search_literal_body(
                href, depth, literal, create_properties, remove_properties
            )
        )

    def search_file_id_request(
        self,
        file_id: str,
        create_properties: Optional[List[FileProperty]] = None,
        remove_properties: Optional[List[FileProperty]] = None,
    ) -> DAVRequest:
        return self._search_request(
            build_search_file_id_body(
                self.session.user_id, file_id, create_properties, remove_properties
            )
        )

    @staticmethod
    def _format_date_bound(value: DateBound) -> str:
        ## bool is an int, but not a date
        if isinstance(value, datetime):
            return coerce.format_iso_date(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        raise error.InvalidDateError(reason="Invalid date bound %r" % (value,))

    def search_media_request(
        self,
        path: str,
        less_date: DateBound,
        greater_date: DateBound,
        element_date: str = LAST_MODIFIED,
        limit: Optional[int] = None,
        create_properties: Optional[List[FileProperty]] = None,
        remove_properties: Optional[List[FileProperty]] = None,
    ) -> DAVRequest:
        """
        SEARCH for photos and videos below ``path`` (relative to the files
        root) dated between ``greater_date`` and ``less_date``.

        Raises:
            InvalidDateError: If a bound is neither a datetime nor an int
        """
        href = "/files/" + self.session.user_id + path
        return self._search_request(
            build_search_media_body(
                href,
                element_date,
                self._format_date_bound(less_date),
                self._format_date_bound(greater_date),
                limit=limit,
                create_properties=create_properties,
                remove_properties=remove_properties,
            )
        )

    # =========================================================================
    # Trash
    # =========================================================================

    @property
    def trash_url(self) -> str:
        return "%s/trashbin/%s/trash/" % (self.session.dav_url, self.session.user_id)

    def list_trash_request(self) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=self._resolve_url(self.trash_url),
            headers=self.standard_headers(XML_CONTENT_TYPE, {"Depth": "1"}),
            body=build_trash_body(),
        )

    def restore_trash_request(self, item: TrashEntry) -> DAVRequest:
        """Move a trashed item back to where it was deleted from"""
        source = item.file_path + item.file_name
        destination = "%s/trashbin/%s/restore/%s" % (
            self.session.dav_url,
            self.session.user_id,
            item.file_name,
        )
        return self._transfer_request(DAVMethod.MOVE, source, destination, True)

    def empty_trash_request(self) -> DAVRequest:
        return self.delete_file_or_folder_request(self.trash_url.rstrip("/"))

    # =========================================================================
    # Comments
    # =========================================================================

    def _comments_url(self, file_id: str, message_id: Optional[str] = None) -> str:
        comments_url = "%s/comments/files/%s" % (self.session.dav_url, file_id)
        if message_id:
            comments_url += "/" + message_id
        return comments_url

    def get_comments_request(self, file_id: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=self._resolve_url(self._comments_url(file_id)),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_comments_body(),
        )

    def put_comment_request(self, file_id: str, message: str) -> DAVRequest:
        body = json.dumps(
            {"actorType": "users", "verb": "comment", "message": message}
        ).encode("utf-8")
        return DAVRequest(
            method=DAVMethod.POST,
            url=self._resolve_url(self._comments_url(file_id)),
            headers=self.standard_headers("application/json"),
            body=body,
        )

    def update_comment_request(
        self, file_id: str, message_id: str, message: str
    ) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPPATCH,
            url=self._resolve_url(self._comments_url(file_id, message_id)),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_comment_update_body(message),
        )

    def delete_comment_request(self, file_id: str, message_id: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.DELETE,
            url=self._resolve_url(self._comments_url(file_id, message_id)),
            headers=self.standard_headers(),
        )

    def mark_comments_as_read_request(self, file_id: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.PROPPATCH,
            url=self._resolve_url(self._comments_url(file_id)),
            headers=self.standard_headers(XML_CONTENT_TYPE),
            body=build_comments_read_marker_body(),
        )

    # =========================================================================
    # OCS
    # =========================================================================

    def read_shares_request(
        self,
        path: Optional[str] = None,
        id_share: int = 0,
        reshares: bool = False,
        subfiles: bool = False,
        shared_with_me: bool = False,
    ) -> DAVRequest:
        """
        Build the request listing shares: those of ``path`` when given,
        the single share ``id_share`` when positive, all of them else.
        """
        endpoint = SHARES_ENDPOINT
        if id_share > 0:
            endpoint += "/%d" % id_share
        params = {
            "reshares": "true" if reshares else "false",
            "subfiles": "true" if subfiles else "false",
            "shared_with_me": "true" if shared_with_me else "false",
        }
        if path is not None:
            params["path"] = path
        return DAVRequest(
            method=DAVMethod.GET,
            url=self._resolve_url(endpoint, params),
            headers=self.standard_headers(),
        )

    def get_activity_request(
        self,
        since: int = 0,
        limit: int = 50,
        object_id: Optional[str] = None,
        object_type: Optional[str] = None,
        previews: bool = False,
    ) -> DAVRequest:
        params = {"format": "json", "since": str(since), "limit": str(limit)}
        if object_id is not None and object_type is not None:
            endpoint = ACTIVITY_ENDPOINT + "filter"
            params["object_id"] = object_id
            params["object_type"] = object_type
        else:
            endpoint = ACTIVITY_ENDPOINT + "all"
        if previews:
            params["previews"] = "true"
        return DAVRequest(
            method=DAVMethod.GET,
            url=self._resolve_url(endpoint, params),
            headers=self.standard_headers(),
        )

    def get_app_password_request(self) -> DAVRequest:
        """Exchange the login password for an app password (XML answer)"""
        headers = self.standard_headers()
        del headers["Accept"]
        del headers["Content-Type"]
        return DAVRequest(
            method=DAVMethod.GET,
            url=self._resolve_url(APP_PASSWORD_ENDPOINT),
            headers=headers,
        )

    def get_login_flow_v2_request(self) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.POST,
            url=self._resolve_url(LOGIN_FLOW_ENDPOINT),
            headers={"User-Agent": self.session.user_agent},
        )

    def get_login_flow_v2_poll_request(self, token: str, endpoint: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.POST,
            url=self._resolve_url(endpoint, {"token": token}),
            headers={"User-Agent": self.session.user_agent},
        )

    # =========================================================================
    # Response parsers
    # =========================================================================

    def check_response(
        self,
        response: DAVResponse,
        request: Optional[DAVRequest] = None,
        expected_status: Optional[Iterable[int]] = None,
    ) -> DAVResponse:
        """
        Return the response if it indicates success, raise the matching
        DAVError otherwise.

        Args:
            response: The DAVResponse to check
            request: The request it answers, for the error message
            expected_status: Acceptable status codes (default: 2xx)
        """
        if expected_status is not None:
            ok = response.status in expected_status
        else:
            ok = response.ok
        if not ok:
            raise error.error_for_response(
                response, url=request.url if request is not None else None
            )
        return response

    def parse_file_listing(
        self,
        response: DAVResponse,
        root_file_name: str = ".",
        show_hidden_files: bool = True,
        include_hidden_files: Iterable[str] = (),
    ) -> List[FileEntry]:
        return parse_file_listing(
            response.body,
            self.session,
            root_file_name=root_file_name,
            show_hidden_files=show_hidden_files,
            include_hidden_files=include_hidden_files,
        )

    def parse_trash(self, response: DAVResponse) -> List[TrashEntry]:
        return parse_trash_listing(response.body, self.session)

    def parse_comments(self, response: DAVResponse) -> List[CommentEntry]:
        return parse_comments(response.body)

    def parse_lock(self, response: DAVResponse) -> Optional[FileLock]:
        if not response.body:
            return None
        return parse_lock(response.body)

    def parse_shares(self, response: DAVResponse) -> List[ShareEntry]:
        return parse_shares(response.body, self.session.account)

    def parse_activities(self, response: DAVResponse) -> ActivityPage:
        return parse_activities(response.body, response.headers)

    def parse_app_password(self, response: DAVResponse) -> Optional[str]:
        return parse_app_password(response.body)

    def parse_login_flow(self, response: DAVResponse) -> LoginFlow:
        return parse_login_flow(response.body)

    def parse_login_flow_poll(self, response: DAVResponse) -> LoginFlowResult:
        return parse_login_flow_poll(response.body)
