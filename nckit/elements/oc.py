#!/usr/bin/env python
"""
Elements in the owncloud.org and nextcloud.org namespaces that are
used in request bodies.
"""
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from nckit.lib.namespace import ns


class FilterFiles(BaseElement):
    tag: ClassVar[str] = ns("oc", "filter-files")


class FilterRules(BaseElement):
    tag: ClassVar[str] = ns("oc", "filter-rules")


class Favorite(ValuedBaseElement):
    tag: ClassVar[str] = ns("oc", "favorite")


class FileId(ValuedBaseElement):
    tag: ClassVar[str] = ns("oc", "fileid")


class Id(ValuedBaseElement):
    tag: ClassVar[str] = ns("oc", "id")


class Message(ValuedBaseElement):
    tag: ClassVar[str] = ns("oc", "message")


class ReadMarker(ValuedBaseElement):
    tag: ClassVar[str] = ns("oc", "readMarker")


class LivePhoto(ValuedBaseElement):
    tag: ClassVar[str] = ns("nc", "metadata-files-live-photo")
