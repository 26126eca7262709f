"""
The WebDAV properties a listing can ask the server for.

Values are tags in Clark notation, ``{namespace}name``, which is what
lxml uses for element tags.
"""

from enum import Enum

from nckit.lib.namespace import ns


class FileProperty(Enum):
    # DAV
    displayname = ns("d", "displayname")
    ## provided by the files_downloadlimit app
    download_limit = ns("nc", "share-download-limits")
    getlastmodified = ns("d", "getlastmodified")
    getetag = ns("d", "getetag")
    getcontenttype = ns("d", "getcontenttype")
    resourcetype = ns("d", "resourcetype")
    quota_available_bytes = ns("d", "quota-available-bytes")
    quota_used_bytes = ns("d", "quota-used-bytes")
    getcontentlength = ns("d", "getcontentlength")
    # owncloud.org
    permissions = ns("oc", "permissions")
    id = ns("oc", "id")
    fileid = ns("oc", "fileid")
    size = ns("oc", "size")
    favorite = ns("oc", "favorite")
    share_types = ns("oc", "share-types")
    owner_id = ns("oc", "owner-id")
    owner_display_name = ns("oc", "owner-display-name")
    comments_unread = ns("oc", "comments-unread")
    checksums = ns("oc", "checksums")
    download_url = ns("oc", "downloadURL")
    data_fingerprint = ns("oc", "data-fingerprint")
    # nextcloud.org
    creation_time = ns("nc", "creation_time")
    upload_time = ns("nc", "upload_time")
    is_encrypted = ns("nc", "is-encrypted")
    has_preview = ns("nc", "has-preview")
    mount_type = ns("nc", "mount-type")
    rich_workspace = ns("nc", "rich-workspace")
    note = ns("nc", "note")
    lock = ns("nc", "lock")
    lock_owner = ns("nc", "lock-owner")
    lock_owner_editor = ns("nc", "lock-owner-editor")
    lock_owner_displayname = ns("nc", "lock-owner-displayname")
    lock_owner_type = ns("nc", "lock-owner-type")
    lock_time = ns("nc", "lock-time")
    lock_timeout = ns("nc", "lock-timeout")
    lock_token = ns("nc", "lock-token")
    system_tags = ns("nc", "system-tags")
    file_metadata_size = ns("nc", "file-metadata-size")
    file_metadata_gps = ns("nc", "file-metadata-gps")
    metadata_photos_exif = ns("nc", "metadata-photos-exif")
    metadata_photos_gps = ns("nc", "metadata-photos-gps")
    metadata_photos_original_date_time = ns("nc", "metadata-photos-original_date_time")
    metadata_photos_place = ns("nc", "metadata-photos-place")
    metadata_photos_size = ns("nc", "metadata-photos-size")
    metadata_files_live_photo = ns("nc", "metadata-files-live-photo")
    hidden = ns("nc", "hidden")
    # open-collaboration-services.org
    share_permissions_collaboration = ns("ocs", "share-permissions")
    # open-cloud-mesh.org
    share_permissions_cloud_mesh = ns("ocm", "share-permissions")

    @classmethod
    def select(
        cls,
        create_properties: list["FileProperty"] | None = None,
        remove_properties: list["FileProperty"] | None = None,
    ) -> list["FileProperty"]:
        """
        The properties to request: all of them, or only
        ``create_properties`` when given, minus ``remove_properties``.
        """
        if create_properties is not None:
            selected = list(create_properties)
        else:
            selected = list(cls)
        remove = set(remove_properties or ())
        return [p for p in selected if p not in remove]


TRASH_PROPERTIES = [
    ns("d", "displayname"),
    ns("d", "getcontenttype"),
    ns("d", "resourcetype"),
    ns("oc", "id"),
    ns("oc", "fileid"),
    ns("oc", "size"),
    ns("nc", "has-preview"),
    ns("nc", "trashbin-filename"),
    ns("nc", "trashbin-original-location"),
    ns("nc", "trashbin-deletion-time"),
]

COMMENT_PROPERTIES = [
    ns("oc", "id"),
    ns("oc", "verb"),
    ns("oc", "actorType"),
    ns("oc", "actorId"),
    ns("oc", "creationDateTime"),
    ns("oc", "objectType"),
    ns("oc", "objectId"),
    ns("oc", "isUnread"),
    ns("oc", "message"),
    ns("oc", "actorDisplayName"),
]

FILE_EXISTS_PROPERTIES = [
    ns("d", "getetag"),
    ns("oc", "fileid"),
    ns("oc", "id"),
]
