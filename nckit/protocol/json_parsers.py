"""
Pure functions for parsing OCS (JSON) responses.

OCS answers come wrapped in an envelope:

    {"ocs": {"meta": {"status": "ok", "statuscode": 200, "message": "OK"},
             "data": ...}}

``statuscode`` is 100 for the v1 API and 200 for v2 on success.
"""

import json
import logging
from typing import Any

from nckit.lib import coerce
from nckit.lib import error
from nckit.models import ActivityEntry
from nckit.models import ActivityPage
from nckit.models import LoginFlow
from nckit.models import LoginFlowResult
from nckit.models import ShareEntry

log = logging.getLogger(__name__)

OCS_SUCCESS = (100, 200)


def _load(body: bytes | str) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise error.ResponseError(reason="Invalid JSON response: %s" % e) from e


def _ocs_message(document: Any) -> str | None:
    if not isinstance(document, dict) or not isinstance(document.get("ocs"), dict):
        return None
    ocs = document["ocs"]
    data = ocs.get("data")
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    meta = ocs.get("meta")
    if isinstance(meta, dict) and meta.get("message"):
        return str(meta["message"])
    return None


def ocs_error_message(body: bytes | str | None) -> str | None:
    """Message of an OCS envelope, None if the body isn't one"""
    if not body:
        return None
    try:
        document = json.loads(body)
    except (TypeError, ValueError):
        return None
    return _ocs_message(document)


def parse_ocs(body: bytes | str) -> Any:
    """
    Unwrap an OCS envelope and return its ``data``.

    Raises:
        OCSError: If ``meta.statuscode`` is not a success code
        ResponseError: If the body is not JSON or not an OCS envelope
    """
    document = _load(body)
    try:
        meta = document["ocs"]["meta"]
    except (KeyError, TypeError) as e:
        raise error.ResponseError(reason="Not an OCS response") from e
    if not isinstance(meta, dict):
        raise error.ResponseError(reason="Not an OCS response")

    status = coerce.to_optional_int(meta.get("statuscode"))
    if status not in OCS_SUCCESS:
        raise error.OCSError(
            reason=_ocs_message(document) or "OCS status %s" % status,
            status=status,
        )
    return document["ocs"].get("data")


def convert_share(data: dict, account: str = "") -> ShareEntry:
    status = data.get("status")
    if not isinstance(status, dict):
        status = {}

    def string(key: str, source: dict = data) -> str:
        value = source.get(key)
        return "" if value is None else str(value)

    def boolean(key: str) -> bool:
        value = data.get(key)
        if isinstance(value, str):
            return coerce.to_bool(value)
        return bool(value)

    clear_at = coerce.to_optional_float(status.get("clearAt"))
    stime = coerce.to_optional_float(data.get("stime"))
    attributes = data.get("attributes")

    return ShareEntry(
        account=account,
        can_delete=boolean("can_delete"),
        can_edit=boolean("can_edit"),
        displayname_file_owner=string("displayname_file_owner"),
        displayname_owner=string("displayname_owner"),
        expiration_date=coerce.parse_ocs_date(data.get("expiration")),
        file_parent=coerce.to_int(data.get("file_parent")),
        file_source=coerce.to_int(data.get("file_source")),
        file_target=string("file_target"),
        hide_download=boolean("hide_download"),
        id_share=coerce.to_int(data.get("id")),
        item_source=coerce.to_int(data.get("item_source")),
        item_type=string("item_type"),
        label=string("label"),
        mail_send=boolean("mail_send"),
        mime_type=string("mimetype"),
        note=string("note"),
        parent=string("parent"),
        password=string("password"),
        path=string("path"),
        permissions=coerce.to_int(data.get("permissions")),
        send_password_by_talk=boolean("send_password_by_talk"),
        share_type=coerce.to_int(data.get("share_type")),
        share_with=string("share_with"),
        share_with_displayname=string("share_with_displayname"),
        date=coerce.from_timestamp(stime),
        storage=coerce.to_int(data.get("storage")),
        storage_id=string("storage_id"),
        token=string("token"),
        uid_file_owner=string("uid_file_owner"),
        uid_owner=string("uid_owner"),
        url=string("url"),
        user_clear_at=coerce.from_timestamp(clear_at),
        user_icon=string("icon", status),
        user_message=string("message", status),
        user_status=string("status", status),
        attributes=attributes if isinstance(attributes, str) else None,
    )


def parse_shares(body: bytes | str, account: str = "") -> list[ShareEntry]:
    data = parse_ocs(body)
    if isinstance(data, dict):
        ## a single share
        data = [data]
    return [convert_share(item, account) for item in data or [] if isinstance(item, dict)]


def parse_share(body: bytes | str, account: str = "") -> ShareEntry | None:
    shares = parse_shares(body, account)
    return shares[0] if shares else None


def convert_activity(data: dict) -> ActivityEntry:
    def string(key: str) -> str:
        value = data.get(key)
        return "" if value is None else str(value)

    return ActivityEntry(
        app=string("app"),
        id_activity=coerce.to_int(data.get("activity_id")),
        date=coerce.parse_iso_date(data.get("datetime")),
        icon=string("icon"),
        link=string("link"),
        message=string("message"),
        message_rich=data.get("message_rich"),
        object_id=coerce.to_int(data.get("object_id")),
        object_name=string("object_name"),
        object_type=string("object_type"),
        previews=data.get("previews"),
        subject=string("subject"),
        subject_rich=data.get("subject_rich"),
        type=string("type"),
        user=string("user"),
    )


def parse_activities(
    body: bytes | str, headers: dict[str, str] | None = None
) -> ActivityPage:
    """
    Activities of one page, plus the paging cursors the server puts in
    the X-Activity-First-Known and X-Activity-Last-Given headers.
    """
    data = parse_ocs(body)
    page = ActivityPage(
        activities=[convert_activity(x) for x in data or [] if isinstance(x, dict)]
    )
    for key, value in (headers or {}).items():
        if key.lower() == "x-activity-first-known":
            page.first_known = coerce.to_int(value)
        elif key.lower() == "x-activity-last-given":
            page.last_given = coerce.to_int(value)
    return page


def parse_login_flow(body: bytes | str) -> LoginFlow:
    document = _load(body)
    try:
        return LoginFlow(
            token=document["poll"]["token"],
            endpoint=document["poll"]["endpoint"],
            login=document["login"],
        )
    except (KeyError, TypeError) as e:
        raise error.ResponseError(reason="Unexpected login flow response") from e


def parse_login_flow_poll(body: bytes | str) -> LoginFlowResult:
    document = _load(body)
    try:
        return LoginFlowResult(
            server=document["server"],
            login_name=document["loginName"],
            app_password=document["appPassword"],
        )
    except (KeyError, TypeError) as e:
        raise error.ResponseError(reason="Unexpected login flow response") from e
