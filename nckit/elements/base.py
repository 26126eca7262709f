import sys
from collections.abc import Iterable
from typing import ClassVar
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from nckit.lib.namespace import nsmap

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

ElementValue = Union[str, bytes, int, None]


def _text(value: ElementValue) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class BaseElement:
    """
    Building block of the request bodies.  Elements are composed with
    ``+``, which takes a single element or a list of them::

        dav.Propfind() + (dav.Prop() + [dav.DisplayName(), oc.FileId()])
    """

    tag: ClassVar[Optional[str]] = None
    children: List["BaseElement"]
    value: Optional[str]

    def __init__(self, value: ElementValue = None) -> None:
        self.children = []
        self.value = _text(value)

    def __add__(self, other: Union["BaseElement", Iterable["BaseElement"]]) -> Self:
        return self.append(other)

    def __repr__(self) -> str:
        return "%s(%r, %i children)" % (
            self.__class__.__name__,
            self.value,
            len(self.children),
        )

    def append(self, element: Union["BaseElement", Iterable["BaseElement"]]) -> Self:
        if isinstance(element, BaseElement):
            self.children.append(element)
        else:
            self.children.extend(element)
        return self

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("%s has no tag" % self.__class__.__name__)
        root = etree.Element(self.tag, nsmap=nsmap)
        root.text = self.value
        root.extend(child.xmlelement() for child in self.children)
        return root


class ValuedBaseElement(BaseElement):
    ## same as BaseElement, kept apart to mark the elements that carry text
    pass


class PropertyElement(BaseElement):
    """
    An element whose tag is given at runtime, used for the long and
    open ended list of file properties (``{http://owncloud.org/ns}fileid``
    and friends) that don't deserve a class each.
    """

    def __init__(self, tag: str, value: ElementValue = None) -> None:
        super(PropertyElement, self).__init__(value=value)
        self.tag = tag
