"""Namespace-aware XML construction, query and serialization on lxml.

Elements are plain ``lxml.etree._Element`` objects. Construction helpers take
prefixed tag names ("p:sld", "a:off") resolved through :data:`NSMAP`, set
attributes in the order given and never add whitespace, so serialization is
a pure function of the logical content.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from lxml import etree

from openxml_deck.errors import BuilderError, XmlParseError
from openxml_deck.namespaces import NSMAP

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

Element = etree._Element


def qn(tag: str) -> str:
    """Clark-notation name for a prefixed tag, e.g. "p:sld" -> "{...}sld".

    Names that are already in Clark notation or carry no prefix are returned
    unchanged.
    """
    if tag.startswith("{") or ":" not in tag:
        return tag
    prefix, local = tag.split(":", 1)
    return f"{{{NSMAP[prefix]}}}{local}"


def _make_parser() -> etree.XMLParser:
    # lxml parser objects must not be shared between threads
    return etree.XMLParser(
        remove_blank_text=False,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def parse_xml(blob: bytes, part: str | None = None) -> Element:
    """Parse XML bytes into an element tree.

    Attribute order, namespace prefixes and whitespace text are preserved.

    Raises:
        XmlParseError: The bytes are not well-formed XML.
    """
    try:
        return etree.fromstring(blob, _make_parser())
    except etree.XMLSyntaxError as exc:
        line, column = exc.position if exc.position else (None, None)
        raise XmlParseError(exc.msg or str(exc), line, column, part) from exc


def serialize_xml(element: Element) -> bytes:
    """Serialize an element as a standalone UTF-8 XML document."""
    body = etree.tostring(element, encoding="UTF-8", xml_declaration=False)
    return XML_DECLARATION + body


def _set_attrs(element: Element, attrs: Mapping[str, object] | None) -> None:
    if not attrs:
        return
    for name, value in attrs.items():
        if value is None:
            continue
        try:
            element.set(qn(name), _attr_text(value))
        except ValueError as exc:
            raise BuilderError(
                f"Value of '{name}' on <{_display_name(element)}> "
                f"is not XML text: {value!r}"
            ) from exc


def _display_name(element: Element) -> str:
    if element.prefix:
        return f"{element.prefix}:{local_name(element)}"
    return local_name(element)


def _set_text(element: Element, text: str) -> None:
    try:
        element.text = text
    except ValueError as exc:
        raise BuilderError(
            f"Text of <{_display_name(element)}> is not XML text: {text!r}"
        ) from exc


def _attr_text(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def OxmlElement(
    tag: str,
    attrs: Mapping[str, object] | None = None,
    *,
    nsdecls: Iterable[str] = (),
    nsmap: Mapping[str | None, str] | None = None,
    text: str | None = None,
) -> Element:
    """Create a root element.

    Args:
        tag: Prefixed ("p:sld") or Clark-notation tag.
        attrs: Attributes in serialization order; ``None`` values are skipped,
            booleans become "1"/"0".
        nsdecls: Prefixes to declare on the element. The tag's own prefix is
            always declared.
        nsmap: Explicit namespace map, e.g. ``{None: RELATIONSHIPS}`` for
            default-namespace documents. Overrides ``nsdecls``.
        text: Element text.
    """
    if nsmap is None:
        prefixes = list(nsdecls)
        if ":" in tag and not tag.startswith("{"):
            own = tag.split(":", 1)[0]
            if own not in prefixes:
                prefixes.append(own)
        nsmap = {prefix: NSMAP[prefix] for prefix in prefixes}
    element = etree.Element(qn(tag), nsmap=dict(nsmap))
    _set_attrs(element, attrs)
    if text is not None:
        _set_text(element, text)
    return element


def SubElement(
    parent: Element,
    tag: str,
    attrs: Mapping[str, object] | None = None,
    text: str | None = None,
) -> Element:
    """Append a new child to ``parent`` and return it."""
    element = etree.SubElement(parent, qn(tag))
    _set_attrs(element, attrs)
    if text is not None:
        _set_text(element, text)
    return element


def local_name(element: Element) -> str:
    return etree.QName(element).localname


def find(element: Element, path: str) -> Element | None:
    """ElementPath lookup with the standard prefixes, e.g. "p:cSld/p:spTree"."""
    return element.find(path, NSMAP)


def findall(element: Element, path: str) -> list[Element]:
    return element.findall(path, NSMAP)


class ElementQuery:
    """Depth-first, lazy and restartable sequence of matching elements.

    Each iteration walks the tree afresh from ``root`` in document order, so
    the same query object may be iterated any number of times and reflects
    the tree as it is at iteration time.
    """

    def __init__(self, root: Element, match: Callable[[Element], bool]):
        self._root = root
        self._match = match

    def __iter__(self) -> Iterator[Element]:
        for element in self._root.iter():
            if isinstance(element.tag, str) and self._match(element):
                yield element

    def first(self) -> Element | None:
        return next(iter(self), None)

    def count(self) -> int:
        return sum(1 for _ in self)


def iter_elements(
    root: Element,
    tag: str | None = None,
    *,
    namespace: str | None = None,
    predicate: Callable[[Element], bool] | None = None,
) -> ElementQuery:
    """Query descendants (and ``root`` itself) by tag, namespace or predicate.

    Args:
        root: Where the depth-first walk starts.
        tag: Prefixed or Clark-notation tag to match exactly.
        namespace: Namespace URI every match must belong to.
        predicate: Extra test applied to candidates.
    """
    clark = qn(tag) if tag else None

    def match(element: Element) -> bool:
        if clark is not None and element.tag != clark:
            return False
        if namespace is not None and etree.QName(element).namespace != namespace:
            return False
        return predicate is None or predicate(element)

    return ElementQuery(root, match)


def text_of(element: Element) -> str:
    """Concatenated text of all DrawingML text runs below ``element``."""
    return "".join(t.text or "" for t in element.iter(qn("a:t")))
