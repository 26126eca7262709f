"""
Tests for the conversion of multistatus listings into FileEntry,
TrashEntry and CommentEntry records.

All tests are pure - XML in, records out.
"""
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import pytest

from nckit.lib import error
from nckit.models import FileEntry
from nckit.models import LockType
from nckit.protocol.converters import is_hidden
from nckit.protocol.converters import pair_live_photos
from nckit.protocol.converters import parse_app_password
from nckit.protocol.converters import parse_comments
from nckit.protocol.converters import parse_file_listing
from nckit.protocol.converters import parse_lock
from nckit.protocol.converters import parse_trash_listing
from nckit.session import Session

NAMESPACES = (
    'xmlns:d="DAV:" xmlns:oc="http://owncloud.org/ns" '
    'xmlns:nc="http://nextcloud.org/ns" '
    'xmlns:x1="http://open-collaboration-services.org/ns" '
    'xmlns:x2="http://open-cloud-mesh.org/ns"'
)
OK = "<d:status>HTTP/1.1 200 OK</d:status>"
NOT_FOUND = "<d:status>HTTP/1.1 404 Not Found</d:status>"


def response(href, props, missing=""):
    """One <d:response>, with an optional 404 propstat"""
    xml = "<d:response><d:href>%s</d:href>" % href
    xml += "<d:propstat><d:prop>%s</d:prop>%s</d:propstat>" % (props, OK)
    if missing:
        xml += "<d:propstat><d:prop>%s</d:prop>%s</d:propstat>" % (missing, NOT_FOUND)
    return xml + "</d:response>"


def multistatus(*responses):
    return (
        '<?xml version="1.0"?><d:multistatus %s>%s</d:multistatus>'
        % (NAMESPACES, "".join(responses))
    ).encode("utf-8")


def folder(href, file_id="1"):
    return response(
        href,
        "<d:resourcetype><d:collection/></d:resourcetype>"
        "<oc:fileid>%s</oc:fileid>" % file_id,
    )


def file(href, file_id, content_type="", extra=""):
    props = "<d:resourcetype/><oc:fileid>%s</oc:fileid>" % file_id
    if content_type:
        props += "<d:getcontenttype>%s</d:getcontenttype>" % content_type
    return response(href, props + extra)


ROOT = "/remote.php/dav/files/alice/"


@pytest.fixture
def session():
    return Session("https://cloud.example.com", "alice", password="secret")


def by_name(files):
    return {f.file_name: f for f in files}


class TestParseFileListing:
    def test_directory_and_file(self, session):
        """A folder and a.jpg (1024 bytes, favorite) give two entries"""
        body = multistatus(
            folder(ROOT + "Photos/", "2"),
            file(
                ROOT + "a.jpg",
                "3",
                "image/jpeg",
                "<oc:size>1024</oc:size><oc:favorite>1</oc:favorite>",
            ),
        )
        files = parse_file_listing(body, session, show_hidden_files=True)
        assert len(files) == 2
        entries = by_name(files)
        assert entries["Photos"].class_file == "directory"
        assert entries["Photos"].directory
        assert entries["a.jpg"].size == 1024
        assert entries["a.jpg"].favorite is True
        assert entries["a.jpg"].class_file == "image"
        assert entries["a.jpg"].content_type == "image/jpeg"

    def test_location(self, session):
        """path is the decoded parent, server_url the absolute parent"""
        body = multistatus(file(ROOT + "My%20Folder/caf%C3%A9.txt", "5"))
        entry = parse_file_listing(body, session)[0]
        assert entry.file_name == "café.txt"
        assert entry.path == "/remote.php/dav/files/alice/My Folder/"
        assert (
            entry.server_url
            == "https://cloud.example.com/remote.php/dav/files/alice/My Folder"
        )

    def test_absolute_href(self, session):
        body = multistatus(file("https://cloud.example.com" + ROOT + "x.txt", "5"))
        entry = parse_file_listing(body, session)[0]
        assert entry.path == ROOT
        assert entry.file_name == "x.txt"

    def test_root_relabelled(self, session):
        """The files root is named after root_file_name"""
        body = multistatus(folder(ROOT, "1"), file(ROOT + "a.txt", "2"))
        entries = by_name(parse_file_listing(body, session, root_file_name="."))
        root = entries["."]
        assert root.server_url == "https://cloud.example.com/remote.php/dav/files/alice"
        assert root.directory
        assert entries["a.txt"].server_url == root.server_url

    def test_root_relabelled_below_path(self):
        """A server installed below a path keeps it in front of the files root"""
        session = Session("https://cloud.example.com/nextcloud/", "alice")
        href = "/nextcloud" + ROOT
        entry = parse_file_listing(
            multistatus(folder(href)), session, root_file_name="Home"
        )[0]
        assert entry.file_name == "Home"
        assert (
            entry.server_url
            == "https://cloud.example.com/nextcloud/remote.php/dav/files/alice"
        )

    def test_directory_overrides_content_type(self, session):
        body = multistatus(
            response(
                ROOT + "Docs/",
                "<d:resourcetype><d:collection/></d:resourcetype>"
                "<d:getcontenttype>text/plain</d:getcontenttype>",
            )
        )
        entry = parse_file_listing(body, session)[0]
        assert entry.directory
        assert entry.content_type == "httpd/unix-directory"
        assert entry.icon_name == "directory"

    def test_session_stamp(self, session):
        entry = parse_file_listing(multistatus(file(ROOT + "a.txt", "2")), session)[0]
        assert entry.url_base == "https://cloud.example.com"
        assert entry.user == "alice"
        assert entry.user_id == "alice"
        assert entry.account == session.account
        assert entry.name == "files"

    def test_no_host(self):
        """Without a host in url_base nothing can be listed"""
        session = Session("not a url", "alice")
        assert parse_file_listing(multistatus(file(ROOT + "a.txt", "2")), session) == []

    def test_invalid_xml(self, session):
        with pytest.raises(error.XMLError):
            parse_file_listing(b"<d:multistatus", session)

    def test_empty_multistatus(self, session):
        assert parse_file_listing(multistatus(), session) == []


class TestHiddenFiles:
    def test_hidden_left_out(self, session):
        body = multistatus(
            file(ROOT + ".hidden/file.txt", "2"), file(ROOT + "visible.txt", "3")
        )
        files = parse_file_listing(body, session, show_hidden_files=False)
        assert [f.file_name for f in files] == ["visible.txt"]

    def test_hidden_shown(self, session):
        body = multistatus(file(ROOT + ".hidden/file.txt", "2"))
        assert len(parse_file_listing(body, session, show_hidden_files=True)) == 1

    def test_allowlist_rescues(self, session):
        body = multistatus(file(ROOT + ".hidden/file.txt", "2"))
        files = parse_file_listing(
            body, session, show_hidden_files=False, include_hidden_files=[".hidden"]
        )
        assert len(files) == 1

    def test_allowlist_rescues_despite_other_dot_components(self, session):
        """One allowed component is enough, even with dotted siblings"""
        href = ROOT + ".config/.nckit/keep.txt"
        assert not is_hidden(href, [".nckit"])
        assert is_hidden(href, [".other"])
        files = parse_file_listing(
            multistatus(file(href, "2")),
            session,
            show_hidden_files=False,
            include_hidden_files=[".nckit"],
        )
        assert len(files) == 1

    def test_encoded_components(self):
        """Components are compared decoded, as the server would name them"""
        assert is_hidden(ROOT + "%2Esecret")
        assert not is_hidden(ROOT + "not.hidden")
        assert not is_hidden(ROOT + "%2Emy%20notes/a.txt", [".my notes"])


class TestProperties:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1", True),
            ("true", True),
            ("yes", True),
            ("", False),
            ("0", False),
            ("false", False),
        ],
    )
    def test_boolean_coercion(self, session, value, expected):
        flags = (
            "<oc:favorite>%s</oc:favorite><nc:is-encrypted>%s</nc:is-encrypted>"
            "<nc:has-preview>%s</nc:has-preview>"
            "<oc:comments-unread>%s</oc:comments-unread>"
        ) % ((value,) * 4)
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.txt", "2", extra=flags)), session
        )[0]
        assert entry.favorite is expected
        assert entry.e2e_encrypted is expected
        assert entry.has_preview is expected
        assert entry.comments_unread is expected

    def test_all_fields(self, session):
        props = """
            <d:getlastmodified>Tue, 14 Nov 2023 22:13:20 GMT</d:getlastmodified>
            <nc:creation_time>0</nc:creation_time>
            <nc:upload_time>1700000000</nc:upload_time>
            <d:getetag>"abc123"</d:getetag>
            <oc:id>00000010ocabcdef</oc:id>
            <oc:permissions>RGDNVW</oc:permissions>
            <oc:checksums>SHA1:da39a3ee</oc:checksums>
            <oc:data-fingerprint>fp</oc:data-fingerprint>
            <oc:downloadURL>https://dl.example.com/x</oc:downloadURL>
            <nc:note>a note</nc:note>
            <nc:mount-type>group</nc:mount-type>
            <nc:rich-workspace>workspace</nc:rich-workspace>
            <oc:owner-id>bob</oc:owner-id>
            <oc:owner-display-name>Bob</oc:owner-display-name>
            <d:quota-used-bytes>100</d:quota-used-bytes>
            <d:quota-available-bytes>-3</d:quota-available-bytes>
            <nc:hidden>false</nc:hidden>
            <oc:share-types><oc:share-type>0</oc:share-type><oc:share-type>3</oc:share-type></oc:share-types>
            <x1:share-permissions>19</x1:share-permissions>
            <x2:share-permissions>["share","read"]</x2:share-permissions>
            <nc:system-tags><nc:system-tag>holiday</nc:system-tag><nc:system-tag>beach</nc:system-tag></nc:system-tags>
        """
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.jpg", "10", "image/jpeg", props)), session
        )[0]
        assert entry.date == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert entry.creation_date is None
        assert entry.upload_date == datetime.fromtimestamp(1700000000, timezone.utc)
        assert entry.etag == "abc123"
        assert entry.file_id == "10"
        assert entry.oc_id == "00000010ocabcdef"
        assert entry.permissions == "RGDNVW"
        assert entry.checksums == "SHA1:da39a3ee"
        assert entry.data_fingerprint == "fp"
        assert entry.download_url == "https://dl.example.com/x"
        assert entry.note == "a note"
        assert entry.mount_type == "group"
        assert entry.rich_workspace == "workspace"
        assert entry.owner_id == "bob"
        assert entry.owner_display_name == "Bob"
        assert entry.quota_used_bytes == 100
        assert entry.quota_available_bytes == -3
        assert entry.hidden is False
        assert entry.share_type == [0, 3]
        assert entry.share_permissions_collaboration == 19
        assert entry.share_permissions_cloud_mesh == ["share", "read"]
        assert entry.tags == ["holiday", "beach"]

    def test_photo_metadata(self, session):
        props = """
            <nc:file-metadata-gps><nc:latitude>45.1</nc:latitude><nc:longitude>9.2</nc:longitude><nc:altitude>120</nc:altitude></nc:file-metadata-gps>
            <nc:metadata-photos-gps><nc:latitude>46.5</nc:latitude><nc:longitude>9.8</nc:longitude></nc:metadata-photos-gps>
            <nc:file-metadata-size><nc:width>100</nc:width><nc:height>50</nc:height></nc:file-metadata-size>
            <nc:metadata-photos-size><width>4032</width><height>3024</height></nc:metadata-photos-size>
            <nc:metadata-photos-original_date_time>1700000000</nc:metadata-photos-original_date_time>
            <nc:metadata-photos-exif><nc:Make>Apple</nc:Make><nc:FNumber>1.8</nc:FNumber></nc:metadata-photos-exif>
            <nc:metadata-photos-place>Milano</nc:metadata-photos-place>
        """
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.jpg", "10", "image/jpeg", props)), session
        )[0]
        ## the newer metadata-photos-* values win
        assert entry.latitude == 46.5
        assert entry.longitude == 9.8
        assert entry.altitude == 120.0
        assert entry.width == 4032.0
        assert entry.height == 3024.0
        assert entry.date_photos_original == datetime.fromtimestamp(
            1700000000, timezone.utc
        )
        assert entry.exif_photos == [{"Make": "Apple"}, {"FNumber": "1.8"}]
        assert entry.place_photos == "Milano"

    def test_download_limits(self, session):
        props = """
            <nc:share-download-limits>
              <nc:share-download-limit><nc:token>tok1</nc:token><nc:limit>5</nc:limit><nc:count>2</nc:count></nc:share-download-limit>
              <nc:share-download-limit><nc:token>broken</nc:token><nc:limit>x</nc:limit><nc:count>0</nc:count></nc:share-download-limit>
            </nc:share-download-limits>
        """
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.txt", "2", extra=props)), session
        )[0]
        assert len(entry.download_limits) == 1
        limit = entry.download_limits[0]
        assert (limit.token, limit.limit, limit.count) == ("tok1", 5, 2)

    def test_malformed_values_keep_defaults(self, session):
        props = (
            "<oc:size>huge</oc:size><d:getlastmodified>yesterday</d:getlastmodified>"
            "<nc:upload_time>soon</nc:upload_time>"
        )
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.txt", "2", extra=props)), session
        )[0]
        assert entry.size == 0
        assert entry.date is None
        assert entry.upload_date is None

    def test_missing_properties_are_ignored(self, session):
        """Properties in a 404 propstat leave the defaults alone"""
        body = multistatus(
            response(
                ROOT + "a.txt",
                "<oc:fileid>2</oc:fileid>",
                missing="<oc:favorite/><nc:note/><oc:size/>",
            )
        )
        entry = parse_file_listing(body, session)[0]
        assert entry.file_id == "2"
        assert entry.favorite is False
        assert entry.note == ""
        assert entry.size == 0


class TestLock:
    LOCK = """
        <nc:lock>1</nc:lock>
        <nc:lock-owner>bob</nc:lock-owner>
        <nc:lock-owner-displayname>Bob</nc:lock-owner-displayname>
        <nc:lock-owner-editor>text</nc:lock-owner-editor>
        <nc:lock-owner-type>1</nc:lock-owner-type>
        <nc:lock-time>1700000000</nc:lock-time>
        <nc:lock-timeout>1800</nc:lock-timeout>
        <nc:lock-token>opaque</nc:lock-token>
    """

    def test_lock_timeout_derivation(self, session):
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.md", "2", extra=self.LOCK)), session
        )[0]
        lock = entry.lock
        assert entry.is_locked
        assert lock.owner == "bob"
        assert lock.owner_display_name == "Bob"
        assert lock.owner_editor == "text"
        assert lock.owner_type == LockType.app
        assert lock.token == "opaque"
        assert lock.time == datetime.fromtimestamp(1700000000, timezone.utc)
        assert lock.timeout == lock.time + timedelta(seconds=1800)
        assert lock.timeout_seconds == 1800
        assert not lock.is_infinite

    def test_not_locked(self, session):
        props = "<nc:lock>0</nc:lock><nc:lock-owner>bob</nc:lock-owner>"
        entry = parse_file_listing(
            multistatus(file(ROOT + "a.md", "2", extra=props)), session
        )[0]
        assert entry.lock is None
        assert not entry.is_locked

    def test_parse_lock_document(self):
        body = (
            '<d:prop xmlns:d="DAV:" xmlns:nc="http://nextcloud.org/ns">%s</d:prop>'
            % self.LOCK
        ).encode()
        lock = parse_lock(body)
        assert lock.owner == "bob"
        assert lock.timeout_seconds == 1800

    def test_parse_lock_incomplete(self):
        body = (
            b'<d:prop xmlns:d="DAV:" xmlns:nc="http://nextcloud.org/ns">'
            b"<nc:lock>1</nc:lock><nc:lock-owner>bob</nc:lock-owner></d:prop>"
        )
        assert parse_lock(body) is None


class TestLivePhotos:
    def test_pairing(self, session):
        body = multistatus(
            file(ROOT + "IMG_0001.MOV", "21", "video/quicktime"),
            file(ROOT + "IMG_0001.JPG", "20", "image/jpeg"),
            file(ROOT + "IMG_0002.JPG", "22", "image/jpeg"),
        )
        entries = by_name(parse_file_listing(body, session))
        assert entries["IMG_0001.JPG"].live_photo_file == "21"
        assert entries["IMG_0001.MOV"].live_photo_file == "20"
        assert entries["IMG_0002.JPG"].live_photo_file == ""
        assert not entries["IMG_0001.JPG"].is_flagged_as_live_photo_by_server

    def test_first_match_wins(self, session):
        """With three variants only the first image/video pair is linked"""
        body = multistatus(
            file(ROOT + "a.jpg", "30", "image/jpeg"),
            file(ROOT + "a.mov", "31", "video/quicktime"),
            file(ROOT + "a.mp4", "32", "video/mp4"),
        )
        entries = by_name(parse_file_listing(body, session))
        assert entries["a.jpg"].live_photo_file == "31"
        assert entries["a.mov"].live_photo_file == "30"
        assert entries["a.mp4"].live_photo_file == ""

    def test_server_flag(self, session):
        body = multistatus(
            file(
                ROOT + "b.jpg",
                "40",
                "image/jpeg",
                "<nc:metadata-files-live-photo>99</nc:metadata-files-live-photo>",
            ),
            file(ROOT + "b.mov", "41", "video/quicktime"),
        )
        entries = by_name(parse_file_listing(body, session))
        assert entries["b.jpg"].live_photo_file == "99"
        assert entries["b.jpg"].is_flagged_as_live_photo_by_server
        assert entries["b.mov"].live_photo_file == ""

    def test_directories_are_never_paired(self):
        photo_dir = FileEntry(
            file_name="c", file_id="1", directory=True, class_file="directory"
        )
        video = FileEntry(file_name="c.mov", file_id="2", class_file="video")
        pair_live_photos([photo_dir, video])
        assert photo_dir.live_photo_file == ""
        assert video.live_photo_file == ""

    def test_sorted_result(self):
        files = [
            FileEntry(server_url="u", file_name="b.mov", file_id="2", class_file="video"),
            FileEntry(server_url="u", file_name="a.txt", file_id="3", class_file="document"),
            FileEntry(server_url="u", file_name="b.jpg", file_id="1", class_file="image"),
        ]
        result = pair_live_photos(files)
        assert [f.file_name for f in result] == ["a.txt", "b.jpg", "b.mov"]


class TestTrash:
    def test_parse_trash(self, session):
        trash = "/remote.php/dav/trashbin/alice/trash/"
        body = multistatus(
            folder(trash),
            response(
                trash + "report.pdf.d1700000000",
                """
                <d:resourcetype/>
                <d:getcontenttype>application/pdf</d:getcontenttype>
                <oc:id>00000050oc</oc:id>
                <oc:fileid>50</oc:fileid>
                <oc:size>2048</oc:size>
                <nc:has-preview>true</nc:has-preview>
                <nc:trashbin-filename>report.pdf</nc:trashbin-filename>
                <nc:trashbin-original-location>Documents/report.pdf</nc:trashbin-original-location>
                <nc:trashbin-deletion-time>1700000000</nc:trashbin-deletion-time>
                """,
            ),
            folder(trash + "Old.d1700000001", "51"),
        )
        items = parse_trash_listing(body, session)
        assert len(items) == 2
        report, old = items
        assert report.file_name == "report.pdf.d1700000000"
        assert report.file_path == "https://cloud.example.com" + trash
        assert report.file_id == "50"
        assert report.oc_id == "00000050oc"
        assert report.size == 2048
        assert report.has_preview
        assert report.trashbin_file_name == "report.pdf"
        assert report.trashbin_original_location == "Documents/report.pdf"
        assert report.trashbin_deletion_time == datetime.fromtimestamp(
            1700000000, timezone.utc
        )
        assert report.class_file == "document"
        assert report.icon_name == "pdf"
        assert old.directory
        assert old.class_file == "directory"


class TestComments:
    def test_parse_comments(self):
        ## the collection itself only has a 404 propstat
        collection = (
            "<d:response><d:href>/remote.php/dav/comments/files/10/</d:href>"
            "<d:propstat><d:prop><oc:id/></d:prop>%s</d:propstat></d:response>"
            % NOT_FOUND
        )
        body = multistatus(
            collection,
            response(
                "/remote.php/dav/comments/files/10/7",
                """
                <oc:id>7</oc:id>
                <oc:verb>comment</oc:verb>
                <oc:actorType>users</oc:actorType>
                <oc:actorId>bob</oc:actorId>
                <oc:actorDisplayName>Bob</oc:actorDisplayName>
                <oc:creationDateTime>Tue, 14 Nov 2023 22:13:20 GMT</oc:creationDateTime>
                <oc:objectType>files</oc:objectType>
                <oc:objectId>10</oc:objectId>
                <oc:isUnread>true</oc:isUnread>
                <oc:message>Nice picture</oc:message>
                """,
            ),
        )
        comments = parse_comments(body)
        assert len(comments) == 1
        comment = comments[0]
        assert comment.message_id == "7"
        assert comment.path == "/remote.php/dav/comments/files/10/7"
        assert comment.actor_id == "bob"
        assert comment.actor_display_name == "Bob"
        assert comment.actor_type == "users"
        assert comment.verb == "comment"
        assert comment.object_id == "10"
        assert comment.object_type == "files"
        assert comment.is_unread
        assert comment.message == "Nice picture"
        assert comment.creation_date_time == datetime(
            2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc
        )


class TestAppPassword:
    def test_parse_app_password(self):
        body = (
            b'<?xml version="1.0"?><ocs><meta><status>ok</status>'
            b"<statuscode>200</statuscode></meta>"
            b"<data><apppassword>s3cr3t-app</apppassword></data></ocs>"
        )
        assert parse_app_password(body) == "s3cr3t-app"

    def test_missing(self):
        assert parse_app_password(b"<ocs><data/></ocs>") is None
