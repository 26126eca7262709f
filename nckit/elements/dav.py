#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from nckit.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("d", "propfind")


class PropertyUpdate(BaseElement):
    tag: ClassVar[str] = ns("d", "propertyupdate")


class SearchRequest(BaseElement):
    tag: ClassVar[str] = ns("d", "searchrequest")


class BasicSearch(BaseElement):
    tag: ClassVar[str] = ns("d", "basicsearch")


# Search clauses
class Select(BaseElement):
    tag: ClassVar[str] = ns("d", "select")


class From(BaseElement):
    tag: ClassVar[str] = ns("d", "from")


class Scope(BaseElement):
    tag: ClassVar[str] = ns("d", "scope")


class Depth(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "depth")


class Where(BaseElement):
    tag: ClassVar[str] = ns("d", "where")


class OrderBy(BaseElement):
    tag: ClassVar[str] = ns("d", "orderby")


class Order(BaseElement):
    tag: ClassVar[str] = ns("d", "order")


class Descending(BaseElement):
    tag: ClassVar[str] = ns("d", "descending")


class Limit(BaseElement):
    tag: ClassVar[str] = ns("d", "limit")


class NResults(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "nresults")


# Conditions
class And(BaseElement):
    tag: ClassVar[str] = ns("d", "and")


class Or(BaseElement):
    tag: ClassVar[str] = ns("d", "or")


class Like(BaseElement):
    tag: ClassVar[str] = ns("d", "like")


class Eq(BaseElement):
    tag: ClassVar[str] = ns("d", "eq")


class Lt(BaseElement):
    tag: ClassVar[str] = ns("d", "lt")


class Gt(BaseElement):
    tag: ClassVar[str] = ns("d", "gt")


class Literal(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "literal")


# Components / Data
class Prop(BaseElement):
    tag: ClassVar[str] = ns("d", "prop")


class Set(BaseElement):
    tag: ClassVar[str] = ns("d", "set")


class Href(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "href")


# Properties
class DisplayName(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "displayname")


class GetContentType(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "getcontenttype")


class GetEtag(ValuedBaseElement):
    tag: ClassVar[str] = ns("d", "getetag")
