"""
Tests for the file type classifier.
"""
import pytest

from nckit.typeidentifiers import DIRECTORY_MIME_TYPE
from nckit.typeidentifiers import TypeIdentifiers


@pytest.fixture
def types():
    return TypeIdentifiers()


class TestGetInternalType:
    def test_photo_upper_case_extension(self, types):
        """photo.JPG without MIME type is an image with extension jpg"""
        result = types.get_internal_type("photo.JPG", "", False)
        assert result.class_file == "image"
        assert result.icon_name == "image"
        assert result.ext == "jpg"
        assert result.mime_type == "image/jpeg"
        assert result.type_identifier == "image/jpeg"
        assert result.file_name_without_ext == "photo"

    def test_given_mime_type_is_kept(self, types):
        result = types.get_internal_type("notes.txt", "application/octet-stream", False)
        assert result.mime_type == "application/octet-stream"
        assert result.type_identifier == "text/plain"
        assert result.class_file == "document"
        assert result.icon_name == "txt"

    def test_directory_wins(self, types):
        result = types.get_internal_type("archive.zip", "application/zip", True)
        assert result.mime_type == DIRECTORY_MIME_TYPE
        assert result.class_file == "directory"
        assert result.icon_name == "directory"
        assert result.ext == ""
        assert result.file_name_without_ext == "archive.zip"

    def test_text_without_extension(self, types):
        """Plain text files without extension get "txt" """
        result = types.get_internal_type("README", "text/plain", False)
        assert result.type_identifier == "text/plain"
        assert result.class_file == "document"
        assert result.ext == "txt"
        assert result.file_name_without_ext == "README"

    def test_unknown(self, types):
        result = types.get_internal_type("data.zzzunknown", "", False)
        assert result.class_file == "unknow"
        assert result.icon_name == "file"
        assert result.ext == "zzzunknown"

    def test_unknown_extension_uses_server_mime_type(self, types):
        result = types.get_internal_type("clip.zzzunknown", "video/x-custom", False)
        assert result.type_identifier == "video/x-custom"
        assert result.class_file == "video"


class TestClassify:
    @pytest.mark.parametrize(
        "file_name,class_file,icon_name",
        [
            ("a.png", "image", "image"),
            ("a.heic", "image", "image"),
            ("a.mov", "video", "movie"),
            ("a.mp4", "video", "movie"),
            ("a.mp3", "audio", "audio"),
            ("a.zip", "compress", "compress"),
            ("a.tar", "compress", "compress"),
            ("a.7z", "compress", "compress"),
            ("a.html", "document", "code"),
            ("a.pdf", "document", "pdf"),
            ("a.rtf", "document", "txt"),
            ("a.txt", "document", "txt"),
            ("a.md", "document", "txt"),
            ("a.csv", "document", "txt"),
            ("a.json", "document", "txt"),
            ("a.doc", "document", "document"),
            ("a.docx", "document", "document"),
            ("a.odt", "document", "document"),
            ("a.xlsx", "document", "xls"),
            ("a.ods", "document", "xls"),
            ("a.ppt", "document", "ppt"),
            ("a.pptx", "document", "ppt"),
            ("a.epub", "document", "document"),
        ],
    )
    def test_categories(self, types, file_name, class_file, icon_name):
        result = types.get_internal_type(file_name, "", False)
        assert (result.class_file, result.icon_name) == (class_file, icon_name)

    def test_names(self, types):
        assert types.classify("video/mp4")[2] == "movie"
        assert types.classify("text/plain")[2] == "text"
        assert types.classify("application/vnd.ms-excel")[2] == "sheet"

    def test_case_insensitive_extension(self, types):
        assert types.get_internal_type("SONG.MP3", "", False).class_file == "audio"


class TestRegistry:
    def test_registered_type_before_fallback(self, types):
        types.add_internal_type_identifier(
            "application/x-whiteboard", "document", "whiteboard", "whiteboard", "board"
        )
        result = types.get_internal_type(
            "plan.zzzboard", "application/x-whiteboard", False
        )
        assert result.class_file == "document"
        assert result.icon_name == "whiteboard"

    def test_registered_editor_over_office_types(self, types):
        docx = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        types.add_internal_type_identifier(
            docx, "document", "onlyoffice", "onlyoffice-doc", "onlyoffice"
        )
        result = types.get_internal_type("a.docx", "", False)
        assert result.type_identifier == docx
        assert result.icon_name == "onlyoffice-doc"
        ## unregistered office types keep the built-in icons
        assert types.get_internal_type("a.xlsx", "", False).icon_name == "xls"

    def test_builtin_categories_first(self, types):
        types.add_internal_type_identifier(
            "image/png", "unknow", "editor", "custom", "custom"
        )
        assert types.get_internal_type("a.png", "", False).class_file == "image"

    def test_dedupe_on_identifier_and_editor(self, types):
        types.add_internal_type_identifier("application/x-a", "document", "e1", "i", "n")
        types.add_internal_type_identifier("application/x-a", "document", "e1", "j", "m")
        types.add_internal_type_identifier("application/x-a", "document", "e2", "k", "o")
        registered = types.get_internal_type_identifier("application/x-a")
        assert [x.editor for x in registered] == ["e1", "e2"]
        assert registered[0].icon_name == "i"

    def test_clear(self, types):
        types.add_internal_type_identifier("application/x-a", "document", "e1", "i", "n")
        types.clear_internal_type_identifiers()
        assert types.get_internal_type_identifier("application/x-a") == []

    def test_registries_are_per_instance(self):
        first = TypeIdentifiers()
        second = TypeIdentifiers()
        first.add_internal_type_identifier("application/x-a", "document", "e", "i", "n")
        assert second.get_internal_type_identifier("application/x-a") == []
