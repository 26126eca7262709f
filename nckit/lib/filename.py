#!/usr/bin/env python
"""
Client side checks and fixes of file names against the rules a server
announces in its capabilities (``files.forbidden_filenames``,
``forbidden_filename_basenames``, ``forbidden_filename_characters`` and
``forbidden_filename_extensions``).
"""
import re
import unicodedata
from typing import Iterable
from typing import List
from typing import Optional
from typing import Set

from nckit.lib import url
from nckit.lib.error import FileNameError


class FileNameValidator:
    """
    Checks a proposed file name.  ``check_file_name`` returns a
    FileNameError describing the first broken rule, or None if the
    name is acceptable; it does not raise.
    """

    def __init__(
        self,
        forbidden_file_names: Iterable[str] = (),
        forbidden_file_name_basenames: Iterable[str] = (),
        forbidden_file_name_characters: Iterable[str] = (),
        forbidden_file_name_extensions: Iterable[str] = (),
    ) -> None:
        self.forbidden_file_names = [x.upper() for x in forbidden_file_names]
        self.forbidden_file_name_basenames = [
            x.upper() for x in forbidden_file_name_basenames
        ]
        self.forbidden_file_name_characters = list(forbidden_file_name_characters)
        self.forbidden_file_name_extensions = [
            x.lower() for x in forbidden_file_name_extensions
        ]

    @classmethod
    def from_capabilities(cls, files_capabilities: dict) -> "FileNameValidator":
        """Build a validator from the ``files`` section of the server capabilities"""
        return cls(
            files_capabilities.get("forbidden_filenames") or (),
            files_capabilities.get("forbidden_filename_basenames") or (),
            files_capabilities.get("forbidden_filename_characters") or (),
            files_capabilities.get("forbidden_filename_extensions") or (),
        )

    def check_file_name(
        self, file_name: str, existing_file_names: Optional[Set[str]] = None
    ) -> Optional[FileNameError]:
        if not file_name:
            return FileNameError(reason="File name is empty")

        if existing_file_names and file_name in existing_file_names:
            return FileNameError(
                reason="Unable to complete the operation, a file with the same name exists"
            )

        if file_name.endswith(" ") or file_name.endswith("."):
            return FileNameError(reason="File name ends with a space or a period")

        invalid = self._invalid_characters(file_name)
        if invalid:
            return FileNameError(
                reason="File name contains invalid characters: %s" % "".join(invalid)
            )

        upper = file_name.upper()
        upper_base = url.deleting_path_extension(file_name).upper()
        if (
            upper in self.forbidden_file_names
            or upper_base in self.forbidden_file_names
            or upper_base in self.forbidden_file_name_basenames
        ):
            return FileNameError(reason="%s is a reserved name" % file_name)

        lower = file_name.lower()
        for extension in self.forbidden_file_name_extensions:
            if lower.endswith(extension):
                return FileNameError(
                    reason="%s is a forbidden file extension" % extension
                )

        return None

    def check_file_paths(self, file_paths: Iterable[str]) -> bool:
        return all(self.check_file_name(p) is None for p in file_paths)

    def check_folder_path(self, folder_path: str) -> bool:
        ## both separators, folder paths may come from a Windows client
        segments = [s for s in re.split(r"[/\\]", folder_path) if s]
        return all(self.check_file_name(s) is None for s in segments)

    def check_folder_and_file_paths(
        self, folder_path: str, file_paths: Iterable[str]
    ) -> bool:
        return self.check_folder_path(folder_path) and self.check_file_paths(
            file_paths
        )

    @staticmethod
    def is_file_hidden(name: str) -> bool:
        return name.startswith(".")

    def _invalid_characters(self, file_name: str) -> List[str]:
        forbidden = "".join(self.forbidden_file_name_characters)
        return [c for c in file_name if c in forbidden]


class FileAutoRenamer:
    """
    Turns a name the server would refuse into one it accepts by
    substituting ``_`` for forbidden characters and extensions.
    """

    replacement = "_"

    def __init__(
        self,
        forbidden_file_name_characters: Iterable[str] = (),
        forbidden_file_name_extensions: Iterable[str] = (),
    ) -> None:
        self.forbidden_file_name_characters = list(forbidden_file_name_characters)
        self.forbidden_file_name_extensions = [
            x.upper() for x in forbidden_file_name_extensions
        ]

    @classmethod
    def from_capabilities(cls, files_capabilities: dict) -> "FileAutoRenamer":
        return cls(
            files_capabilities.get("forbidden_filename_characters") or (),
            files_capabilities.get("forbidden_filename_extensions") or (),
        )

    def rename(self, file_name: str, is_folder_path: bool = False) -> str:
        characters = self.forbidden_file_name_characters
        if is_folder_path:
            characters = [c for c in characters if c != "/"]

        segments = []
        for segment in file_name.split("/"):
            for char in characters:
                if char and char.lower() in segment.lower():
                    segment = self._replace(segment, char)

            if " " in self.forbidden_file_name_extensions:
                segment = segment.strip(" \t")

            for extension in self.forbidden_file_name_extensions:
                upper = segment.upper()
                if extension and (
                    upper.endswith(extension) or upper.startswith(extension)
                ):
                    segment = self._replace(segment, extension)
            segments.append(segment)

        return remove_non_printable_characters("/".join(segments))

    def _replace(self, text: str, needle: str) -> str:
        return re.sub(re.escape(needle), self.replacement, text, flags=re.IGNORECASE)


def remove_non_printable_characters(text: str) -> str:
    """Drops control, format, surrogate and unassigned code points"""
    return "".join(c for c in text if not unicodedata.category(c).startswith("C"))
