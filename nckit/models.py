"""
Records produced by the parsers.

All records are plain dataclasses built fresh by a single parse call.
They never reference each other directly: a live photo points at its
partner through the partner's ``file_id``.
"""
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from enum import IntEnum
from enum import IntFlag
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from nckit.lib.url import deleting_path_extension


class LockType(IntEnum):
    ## locked by a user through the web interface or a client
    user = 0
    ## locked by a collaborative editing app (Text, Office)
    app = 1
    ## bound to a lock token
    token = 2


@dataclass
class FileLock:
    owner: str = ""
    owner_editor: Optional[str] = None
    owner_type: LockType = LockType.user
    owner_display_name: str = ""
    time: Optional[datetime] = None
    ## time + timeout_seconds; equal to time when the timeout is infinite
    timeout: Optional[datetime] = None
    timeout_seconds: int = 0
    token: Optional[str] = None

    @property
    def is_infinite(self) -> bool:
        return self.timeout_seconds == 0


@dataclass
class DownloadLimit:
    token: str
    limit: int
    count: int


@dataclass
class FileEntry:
    """One resource of a WebDAV listing"""

    file_id: str = ""
    oc_id: str = ""
    etag: str = ""

    path: str = ""
    file_name: str = ""
    server_url: str = ""

    content_type: str = ""
    class_file: str = ""
    icon_name: str = ""
    type_identifier: str = ""
    directory: bool = False
    resource_type: str = ""
    name: str = ""

    size: int = 0
    date: Optional[datetime] = None
    creation_date: Optional[datetime] = None
    upload_date: Optional[datetime] = None
    favorite: bool = False
    has_preview: bool = False
    permissions: str = ""
    checksums: str = ""
    data_fingerprint: str = ""
    download_url: str = ""
    note: str = ""
    mount_type: str = ""
    rich_workspace: Optional[str] = None
    e2e_encrypted: bool = False
    comments_unread: bool = False
    owner_id: str = ""
    owner_display_name: str = ""
    quota_used_bytes: int = 0
    quota_available_bytes: int = 0
    hidden: bool = False
    tags: List[str] = field(default_factory=list)

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    width: float = 0.0
    height: float = 0.0
    date_photos_original: Optional[datetime] = None
    exif_photos: List[Dict[str, Optional[str]]] = field(default_factory=list)
    place_photos: Optional[str] = None

    lock: Optional[FileLock] = None

    share_type: List[int] = field(default_factory=list)
    share_permissions_collaboration: int = 0
    share_permissions_cloud_mesh: List[str] = field(default_factory=list)
    download_limits: List[DownloadLimit] = field(default_factory=list)

    live_photo_file: str = ""
    is_flagged_as_live_photo_by_server: bool = False

    url_base: str = ""
    user: str = ""
    user_id: str = ""
    account: str = ""

    @property
    def is_locked(self) -> bool:
        return self.lock is not None

    @property
    def file_name_without_ext(self) -> str:
        return deleting_path_extension(self.file_name)


@dataclass
class TrashEntry:
    oc_id: str = ""
    file_id: str = ""
    file_name: str = ""
    ## absolute URL of the folder holding the entry inside the trash bin
    file_path: str = ""
    content_type: str = ""
    type_identifier: str = ""
    class_file: str = ""
    icon_name: str = ""
    directory: bool = False
    has_preview: bool = False
    size: int = 0
    date: Optional[datetime] = None
    trashbin_file_name: str = ""
    trashbin_original_location: str = ""
    trashbin_deletion_time: Optional[datetime] = None


@dataclass
class CommentEntry:
    message_id: str = ""
    path: str = ""
    actor_id: str = ""
    actor_type: str = ""
    actor_display_name: str = ""
    message: str = ""
    verb: str = ""
    creation_date_time: Optional[datetime] = None
    is_unread: bool = False
    object_id: str = ""
    object_type: str = ""


class SharePermission(IntFlag):
    """Bitmask of the OCS sharing API ``permissions`` field"""

    read = 1
    update = 2
    create = 4
    delete = 8
    share = 16
    all = 31

    @classmethod
    def default_for(cls, share_type: int) -> "SharePermission":
        """Public links are read only unless asked otherwise"""
        if share_type == ShareType.public_link:
            return cls.read
        return cls.all


class ShareType(IntEnum):
    internal_link = -1
    user = 0
    group = 1
    public_link = 3
    email = 4
    federated_cloud = 6
    team = 7
    guest = 8
    federated_group = 9
    talk_conversation = 10


@dataclass
class ShareEntry:
    id_share: int = 0
    path: str = ""
    item_type: str = ""
    share_type: int = 0
    permissions: int = 0
    password: str = ""
    expiration_date: Optional[datetime] = None
    note: str = ""
    label: str = ""
    parent: str = ""
    uid_owner: str = ""
    displayname_owner: str = ""
    uid_file_owner: str = ""
    displayname_file_owner: str = ""
    share_with: str = ""
    share_with_displayname: str = ""
    token: str = ""
    url: str = ""
    file_source: int = 0
    file_parent: int = 0
    file_target: str = ""
    item_source: int = 0
    mime_type: str = ""
    storage: int = 0
    storage_id: str = ""
    can_edit: bool = False
    can_delete: bool = False
    hide_download: bool = False
    mail_send: bool = False
    send_password_by_talk: bool = False
    date: Optional[datetime] = None
    user_clear_at: Optional[datetime] = None
    user_icon: str = ""
    user_message: str = ""
    user_status: str = ""
    attributes: Optional[str] = None
    account: str = ""

    @property
    def share_permissions(self) -> SharePermission:
        return SharePermission(self.permissions & SharePermission.all)


@dataclass
class ActivityEntry:
    id_activity: int = 0
    app: str = ""
    date: Optional[datetime] = None
    icon: str = ""
    link: str = ""
    message: str = ""
    message_rich: Any = None
    object_id: int = 0
    object_name: str = ""
    object_type: str = ""
    previews: Any = None
    subject: str = ""
    subject_rich: Any = None
    type: str = ""
    user: str = ""


@dataclass
class ActivityPage:
    activities: List[ActivityEntry] = field(default_factory=list)
    ## values of the X-Activity-First-Known / X-Activity-Last-Given headers
    first_known: int = 0
    last_given: int = 0


@dataclass
class LoginFlow:
    token: str
    endpoint: str
    login: str


@dataclass
class LoginFlowResult:
    server: str
    login_name: str
    app_password: str
