"""OXML tree: construction, query, serialization and structural checks."""

from openxml_deck.oxml.schema import check_part_xml
from openxml_deck.oxml.tree import (
    XML_DECLARATION,
    Element,
    ElementQuery,
    OxmlElement,
    SubElement,
    find,
    findall,
    iter_elements,
    local_name,
    parse_xml,
    qn,
    serialize_xml,
    text_of,
)

__all__ = [
    "XML_DECLARATION",
    "Element",
    "ElementQuery",
    "OxmlElement",
    "SubElement",
    "check_part_xml",
    "find",
    "findall",
    "iter_elements",
    "local_name",
    "parse_xml",
    "qn",
    "serialize_xml",
    "text_of",
]
