"""
File type classification.

A file is classified from its name, the MIME type the server reported
and whether it is a collection.  The type identifier of a file is the
MIME type registered for its extension; when the extension is unknown
the MIME type sent by the server takes its place.  The identifier then
falls into one of a fixed, ordered list of categories, each giving a
class (what the file is) and an icon (how to show it).

Applications can register extra identifiers, for instance the MIME
types a document editor on the server can open.  The registry lives on
a ``TypeIdentifiers`` instance, one per session.
"""
import mimetypes
from dataclasses import dataclass
from enum import Enum
from typing import List

from nckit.lib import url

DIRECTORY_MIME_TYPE = "httpd/unix-directory"


class TypeClassFile(str, Enum):
    audio = "audio"
    compress = "compress"
    directory = "directory"
    document = "document"
    image = "image"
    unknow = "unknow"
    url = "url"
    video = "video"


class TypeIconFile(str, Enum):
    audio = "audio"
    code = "code"
    compress = "compress"
    directory = "directory"
    document = "document"
    image = "image"
    movie = "movie"
    pdf = "pdf"
    ppt = "ppt"
    txt = "txt"
    unknow = "file"
    url = "url"
    xls = "xls"


@dataclass(frozen=True)
class InternalType:
    mime_type: str
    class_file: str
    icon_name: str
    type_identifier: str
    file_name_without_ext: str
    ext: str


@dataclass(frozen=True)
class InternalTypeIdentifier:
    """A classification provided by the application for one type identifier"""

    type_identifier: str
    class_file: str
    editor: str
    icon_name: str
    name: str


## Extensions missing from the interpreter's built-in table, or whose
## built-in entry varies between Python versions
EXTRA_TYPES = {
    "heic": "image/heic",
    "heif": "image/heif",
    "webp": "image/webp",
    "dng": "image/x-adobe-dng",
    "avif": "image/avif",
    "mkv": "video/x-matroska",
    "m4v": "video/x-m4v",
    "m4a": "audio/mp4",
    "flac": "audio/flac",
    "ogg": "audio/ogg",
    "opus": "audio/opus",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
    "gz": "application/gzip",
    "tgz": "application/gzip",
    "bz2": "application/x-bzip2",
    "xz": "application/x-xz",
    "7z": "application/x-7z-compressed",
    "rar": "application/vnd.rar",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "pages": "application/x-iwork-pages-sffpages",
    "numbers": "application/x-iwork-numbers-sffnumbers",
    "key": "application/x-iwork-keynote-sffkey",
    "epub": "application/epub+zip",
    "rtf": "application/rtf",
}

ARCHIVE_TYPES = {
    "application/zip",
    "application/x-zip-compressed",
    "application/gzip",
    "application/x-gzip",
    "application/x-tar",
    "application/x-bzip2",
    "application/x-xz",
    "application/x-7z-compressed",
    "application/vnd.rar",
    "application/x-rar-compressed",
}
HTML_TYPES = {"text/html", "application/xhtml+xml"}
RTF_TYPES = {"application/rtf", "text/rtf"}
TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-sh",
    "application/x-csh",
    "application/x-yaml",
    "application/x-python-code",
    "application/x-tex",
    "application/x-latex",
}
SPREADSHEET_TYPES = {
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.oasis.opendocument.spreadsheet",
    "application/x-iwork-numbers-sffnumbers",
}
PRESENTATION_TYPES = {
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.oasis.opendocument.presentation",
    "application/x-iwork-keynote-sffkey",
}
WORD_TYPES = {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.oasis.opendocument.text",
    "application/x-iwork-pages-sffpages",
}
CONTENT_TYPES = {
    "application/epub+zip",
    "application/postscript",
    "application/vnd.visio",
}


class TypeIdentifiers:
    """
    Classifier plus the registry of application provided identifiers.
    """

    def __init__(self) -> None:
        self.internal_type_identifiers: List[InternalTypeIdentifier] = []
        self.mimetypes = mimetypes.MimeTypes()
        for ext, mime_type in EXTRA_TYPES.items():
            self.mimetypes.add_type(mime_type, "." + ext)

    def add_internal_type_identifier(
        self,
        type_identifier: str,
        class_file: str,
        editor: str,
        icon_name: str,
        name: str,
    ) -> None:
        """Registers a classification, once per (type identifier, editor)"""
        for known in self.internal_type_identifiers:
            if known.type_identifier == type_identifier and known.editor == editor:
                return
        self.internal_type_identifiers.append(
            InternalTypeIdentifier(type_identifier, class_file, editor, icon_name, name)
        )

    def get_internal_type_identifier(
        self, type_identifier: str
    ) -> List[InternalTypeIdentifier]:
        return [
            x
            for x in self.internal_type_identifiers
            if x.type_identifier == type_identifier
        ]

    def clear_internal_type_identifiers(self) -> None:
        self.internal_type_identifiers = []

    def type_for_extension(self, ext: str) -> str:
        if not ext:
            return ""
        return self.mimetypes.types_map[True].get(
            "." + ext
        ) or self.mimetypes.types_map[False].get("." + ext, "")

    def get_internal_type(
        self, file_name: str, mime_type: str, directory: bool
    ) -> InternalType:
        ext = url.path_extension(file_name).lower()
        type_identifier = self.type_for_extension(ext) or mime_type

        ## A MIME type given by the caller always wins over the one
        ## derived from the extension
        if not mime_type:
            mime_type = type_identifier

        if directory:
            return InternalType(
                mime_type=DIRECTORY_MIME_TYPE,
                class_file=TypeClassFile.directory.value,
                icon_name=TypeIconFile.directory.value,
                type_identifier=DIRECTORY_MIME_TYPE,
                file_name_without_ext=file_name,
                ext="",
            )

        class_file, icon_name, name = self.classify(type_identifier)
        if name == "text" and not ext:
            ext = "txt"

        return InternalType(
            mime_type=mime_type,
            class_file=class_file,
            icon_name=icon_name,
            type_identifier=type_identifier,
            file_name_without_ext=url.deleting_path_extension(file_name),
            ext=ext,
        )

    def classify(self, type_identifier: str):
        """
        (class, icon, name) for a type identifier.  The categories are
        checked in order, the first match wins.
        """
        major, _, minor = type_identifier.lower().partition("/")
        mime_type = type_identifier.lower()

        if major == "image":
            return TypeClassFile.image.value, TypeIconFile.image.value, "image"
        if major == "video":
            return TypeClassFile.video.value, TypeIconFile.movie.value, "movie"
        if major == "audio":
            return TypeClassFile.audio.value, TypeIconFile.audio.value, "audio"
        if mime_type in ARCHIVE_TYPES:
            return TypeClassFile.compress.value, TypeIconFile.compress.value, "archive"
        if mime_type in HTML_TYPES:
            return TypeClassFile.document.value, TypeIconFile.code.value, "code"
        if mime_type == "application/pdf":
            return TypeClassFile.document.value, TypeIconFile.pdf.value, "document"
        if mime_type in RTF_TYPES:
            return TypeClassFile.document.value, TypeIconFile.txt.value, "document"
        if major == "text" or mime_type in TEXT_APPLICATION_TYPES:
            return TypeClassFile.document.value, TypeIconFile.txt.value, "text"

        ## types registered by the application win over the office
        ## fallbacks below
        registered = self.get_internal_type_identifier(type_identifier)
        if registered:
            return registered[0].class_file, registered[0].icon_name, registered[0].name

        if mime_type in WORD_TYPES:
            return TypeClassFile.document.value, TypeIconFile.document.value, "document"
        if mime_type in SPREADSHEET_TYPES:
            return TypeClassFile.document.value, TypeIconFile.xls.value, "sheet"
        if mime_type in PRESENTATION_TYPES:
            return TypeClassFile.document.value, TypeIconFile.ppt.value, "presentation"

        if mime_type in CONTENT_TYPES or (
            major == "application" and minor.startswith("vnd.")
        ):
            return TypeClassFile.document.value, TypeIconFile.document.value, "document"

        return TypeClassFile.unknow.value, TypeIconFile.unknow.value, "file"
