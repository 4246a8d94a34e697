"""Tests for XML construction, query, serialization and structural checks."""

from __future__ import annotations

import pytest

from openxml_deck.errors import BuilderError, SchemaViolation, XmlParseError
from openxml_deck.namespaces import CT_SLIDE, DRAWINGML, PRESENTATIONML
from openxml_deck.oxml import (
    Element,
    OxmlElement,
    SubElement,
    check_part_xml,
    find,
    iter_elements,
    parse_xml,
    qn,
    serialize_xml,
    text_of,
)
from openxml_deck.oxml.schema import check_presentation, check_slide
from tests.fixture_loader import load_fixture_xml


def _text_shape() -> Element:
    sp = OxmlElement("p:sp", nsdecls=("a", "p"))
    txBody = SubElement(sp, "p:txBody")
    p = SubElement(txBody, "a:p")
    r = SubElement(p, "a:r")
    SubElement(r, "a:t", text="Hello ")
    r2 = SubElement(p, "a:r")
    SubElement(r2, "a:t", text="world")
    return sp


class TestConstruction:
    """Tests for OxmlElement and SubElement."""

    def test_qn(self) -> None:
        assert qn("p:sld") == f"{{{PRESENTATIONML}}}sld"
        assert qn("Id") == "Id"
        assert qn(f"{{{DRAWINGML}}}t") == f"{{{DRAWINGML}}}t"

    def test_attribute_order_preserved(self) -> None:
        """Test attributes serialize in insertion order."""
        off = OxmlElement("a:off", {"y": "2", "x": "1"})

        assert b'<a:off xmlns:a="' + DRAWINGML.encode() + b'" y="2" x="1"/>' in serialize_xml(off)

    def test_none_and_bool_attributes(self) -> None:
        """Test None values are skipped and booleans become 1/0."""
        el = OxmlElement("a:rPr", {"lang": None, "b": True, "i": False})

        assert el.get("lang") is None
        assert el.get("b") == "1"
        assert el.get("i") == "0"

    def test_prefixed_attribute(self) -> None:
        el = OxmlElement("p:sldId", {"id": 256, "r:id": "rId2"}, nsdecls=("r",))

        assert el.get(qn("r:id")) == "rId2"
        assert el.get("id") == "256"

    def test_control_character_text(self) -> None:
        p = OxmlElement("a:p")

        with pytest.raises(BuilderError, match="a:t"):
            SubElement(p, "a:t", text="tab\x0bbed")

    def test_control_character_attribute(self) -> None:
        with pytest.raises(BuilderError, match="descr"):
            OxmlElement("p:cNvPr", {"id": 2, "descr": "\x01"})


class TestSerialization:
    """Tests for deterministic serialization."""

    def test_declaration_and_no_whitespace(self) -> None:
        """Test the standalone declaration and absence of incidental whitespace."""
        data = serialize_xml(_text_shape())

        assert data.startswith(b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><p:sp')
        assert b"\n" not in data

    def test_deterministic(self) -> None:
        """Test identical trees serialize to identical bytes."""
        assert serialize_xml(_text_shape()) == serialize_xml(_text_shape())

    def test_escaping_round_trip(self) -> None:
        """Test markup characters in text and attributes survive a round trip."""
        text = "Fish & chips <b>\"quoted\"</b> 'single'"
        el = OxmlElement("a:t", {"descr": text}, text=text)

        parsed = parse_xml(serialize_xml(el))

        assert parsed.text == text
        assert parsed.get("descr") == text

    def test_parse_preserves_bytes(self) -> None:
        """Test prefix spellings and attribute order survive parse -> serialize."""
        source = (
            b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            b'<x:root xmlns:x="urn:example" b="2" a="1"><x:child/></x:root>'
        )

        assert serialize_xml(parse_xml(source)) == source


class TestParse:
    """Tests for parse_xml errors."""

    def test_malformed(self) -> None:
        """Test malformed XML raises XmlParseError with line and column."""
        with pytest.raises(XmlParseError) as exc_info:
            parse_xml(b"<root>\n  <unclosed>\n</root>", part="/ppt/slides/slide1.xml")

        error = exc_info.value
        assert error.line is not None
        assert error.column is not None
        assert error.part == "/ppt/slides/slide1.xml"
        assert "/ppt/slides/slide1.xml" in str(error)

    def test_entities_not_resolved(self) -> None:
        """Test external entities are never expanded."""
        xml = (
            b'<?xml version="1.0"?><!DOCTYPE r [<!ENTITY e SYSTEM "file:///etc/hostname">]>'
            b"<r>&e;</r>"
        )

        root = parse_xml(xml)

        assert not (root.text or "").strip()


class TestQuery:
    """Tests for ElementQuery and text helpers."""

    def test_iter_by_tag(self) -> None:
        query = iter_elements(_text_shape(), "a:t")

        assert [t.text for t in query] == ["Hello ", "world"]

    def test_query_is_restartable(self) -> None:
        """Test iterating the same query twice yields the same matches."""
        query = iter_elements(_text_shape(), "a:r")

        assert query.count() == 2
        assert len(list(query)) == len(list(query)) == 2

    def test_query_sees_later_changes(self) -> None:
        """Test each iteration walks the tree as it is then."""
        sp = _text_shape()
        query = iter_elements(sp, "a:p")
        assert query.count() == 1

        SubElement(find(sp, "p:txBody"), "a:p")

        assert query.count() == 2

    def test_iter_by_namespace(self) -> None:
        """Test matching by namespace only."""
        query = iter_elements(_text_shape(), namespace=PRESENTATIONML)

        assert [el.tag for el in query] == [qn("p:sp"), qn("p:txBody")]

    def test_iter_by_predicate(self) -> None:
        query = iter_elements(_text_shape(), "a:t", predicate=lambda el: el.text == "world")

        assert query.first().text == "world"

    def test_text_of(self) -> None:
        assert text_of(_text_shape()) == "Hello world"


class TestSchemaChecks:
    """Tests for structural checks of known part types."""

    def test_valid_fixture_slide(self) -> None:
        slide = load_fixture_xml("pptx", "minimal", "ppt", "slides", "slide1.xml")

        check_slide(slide, "/ppt/slides/slide1.xml")

    def test_valid_fixture_presentation(self) -> None:
        presentation = load_fixture_xml("pptx", "minimal", "ppt", "presentation.xml")

        check_presentation(presentation)

    def test_slide_without_shape_tree(self) -> None:
        """Test a slide missing its shape tree is rejected."""
        sld = OxmlElement("p:sld")
        SubElement(sld, "p:cSld")

        with pytest.raises(SchemaViolation) as exc_info:
            check_part_xml(CT_SLIDE, sld, "/ppt/slides/slide1.xml")

        assert exc_info.value.node == "p:spTree"
        assert exc_info.value.part == "/ppt/slides/slide1.xml"

    def test_wrong_root(self) -> None:
        with pytest.raises(SchemaViolation, match="Root element"):
            check_part_xml(CT_SLIDE, OxmlElement("p:notes"), "/ppt/slides/slide1.xml")

    def test_presentation_without_masters(self) -> None:
        """Test an empty master list is rejected."""
        presentation = OxmlElement("p:presentation")
        SubElement(presentation, "p:sldMasterIdLst")
        SubElement(presentation, "p:notesSz", {"cx": "1", "cy": "1"})

        with pytest.raises(SchemaViolation, match="sldMasterIdLst"):
            check_presentation(presentation)

    def test_duplicate_slide_ids(self) -> None:
        presentation = load_fixture_xml("pptx", "minimal", "ppt", "presentation.xml")
        sld_id_lst = find(presentation, "p:sldIdLst")
        SubElement(sld_id_lst, "p:sldId", {"id": "256", "r:id": "rId9"})

        with pytest.raises(SchemaViolation, match="Duplicate slide ID"):
            check_presentation(presentation)

    def test_unknown_content_type_unchecked(self) -> None:
        """Test parts without a registered check pass through."""
        check_part_xml("application/vnd.example+xml", OxmlElement("p:notes"), "/x.xml")
