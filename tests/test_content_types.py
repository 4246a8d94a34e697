"""Tests for the content type registry."""

from __future__ import annotations

import pytest

from openxml_deck.content_types import ContentTypeRegistry
from openxml_deck.errors import DuplicateOverride, NoContentType, XmlParseError
from openxml_deck.namespaces import CT_PRESENTATION, CT_SLIDE, CT_XML
from openxml_deck.oxml import findall, parse_xml
from openxml_deck.parts import Opaque, Part
from tests.fixture_loader import load_fixture_bytes


class TestResolve:
    """Tests for registering and resolving content types."""

    def test_default_by_extension(self) -> None:
        """Test resolving through an extension Default."""
        registry = ContentTypeRegistry()
        registry.register_default("png", "image/png")

        assert registry.resolve("/ppt/media/image1.png") == "image/png"

    def test_extension_case_insensitive(self) -> None:
        """Test extensions compare case-insensitively."""
        registry = ContentTypeRegistry()
        registry.register_default("PNG", "image/png")

        assert registry.resolve("/ppt/media/image1.Png") == "image/png"

    def test_override_wins(self) -> None:
        """Test an Override takes precedence over a Default."""
        registry = ContentTypeRegistry()
        registry.register_default("xml", CT_XML)
        registry.register_override("/ppt/slides/slide1.xml", CT_SLIDE)

        assert registry.resolve("/PPT/slides/SLIDE1.xml") == CT_SLIDE
        assert registry.resolve("/ppt/slides/slide2.xml") == CT_XML

    def test_no_content_type(self) -> None:
        """Test an uncovered part raises NoContentType."""
        registry = ContentTypeRegistry()

        with pytest.raises(NoContentType) as exc_info:
            registry.resolve("/ppt/vendor/blob.bin")

        assert exc_info.value.partname == "/ppt/vendor/blob.bin"
        assert not registry.covers("/ppt/vendor/blob.bin")

    def test_duplicate_override(self) -> None:
        """Test a second Override for the same part is rejected."""
        registry = ContentTypeRegistry()
        registry.register_override("/ppt/slides/slide1.xml", CT_SLIDE)

        with pytest.raises(DuplicateOverride):
            registry.register_override("/ppt/Slides/slide1.xml", CT_SLIDE)

    def test_remove_override(self) -> None:
        registry = ContentTypeRegistry()
        registry.register_override("/ppt/slides/slide1.xml", CT_SLIDE)
        registry.remove_override("/ppt/slides/slide1.xml")

        assert len(registry) == 0


class TestParse:
    """Tests for parsing [Content_Types].xml."""

    def test_parse_defaults(self) -> None:
        """Test parsing Default elements."""
        registry = ContentTypeRegistry.from_xml(load_fixture_bytes("content_types", "defaults.xml"))

        assert registry.resolve("/test.rels") == "application/vnd.openxmlformats-package.relationships+xml"
        assert registry.resolve("/test.xml") == CT_XML
        assert registry.defaults["xml"] == CT_XML

    def test_parse_overrides(self) -> None:
        """Test parsing Override elements."""
        registry = ContentTypeRegistry.from_xml(load_fixture_bytes("content_types", "override.xml"))

        assert registry.resolve("/ppt/presentation.xml") == CT_PRESENTATION
        # Default still works for other xml files
        assert registry.resolve("/other.xml") == CT_XML

    def test_parse_duplicate_override(self) -> None:
        """Test case-insensitively duplicated Overrides are rejected on parse."""
        xml = load_fixture_bytes("content_types", "duplicate_override.xml")

        with pytest.raises(DuplicateOverride):
            ContentTypeRegistry.from_xml(xml)

    def test_parse_malformed(self) -> None:
        """Test malformed XML raises XmlParseError with a position."""
        with pytest.raises(XmlParseError) as exc_info:
            ContentTypeRegistry.from_xml(load_fixture_bytes("content_types", "malformed.xml"))

        assert exc_info.value.line is not None
        assert exc_info.value.part == "/[Content_Types].xml"


class TestSerialize:
    """Tests for the canonical serialized form."""

    def test_sorted_output(self) -> None:
        """Test Defaults sorted by extension, then Overrides by part name."""
        registry = ContentTypeRegistry()
        registry.register_override("/ppt/slides/slide2.xml", CT_SLIDE)
        registry.register_default("xml", CT_XML)
        registry.register_override("/ppt/presentation.xml", CT_PRESENTATION)
        registry.register_default("png", "image/png")

        root = parse_xml(registry.to_xml())

        assert [d.get("Extension") for d in findall(root, "ct:Default")] == ["png", "xml"]
        assert [o.get("PartName") for o in findall(root, "ct:Override")] == [
            "/ppt/presentation.xml",
            "/ppt/slides/slide2.xml",
        ]

    def test_round_trip(self) -> None:
        """Test serialized output parses back to the same rules."""
        registry = ContentTypeRegistry.from_xml(load_fixture_bytes("content_types", "override.xml"))
        reparsed = ContentTypeRegistry.from_xml(registry.to_xml())

        assert reparsed.defaults == registry.defaults
        assert reparsed.overrides == registry.overrides
        assert reparsed.to_xml() == registry.to_xml()

    def test_standalone_declaration(self) -> None:
        registry = ContentTypeRegistry()

        assert registry.to_xml().startswith(
            b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><Types'
        )


class TestForParts:
    """Tests for the registry built at assembly time."""

    def test_defaults_and_overrides(self) -> None:
        """Test well-known extensions use a Default, everything else an Override."""
        parts = [
            Part.from_blob("/ppt/slides/slide1.xml", CT_SLIDE, b"<p:sld/>"),
            Part("/ppt/media/image1.png", "image/png", Opaque(b"png")),
            Part.from_blob("/customXml/item1.xml", CT_XML, b"<root/>"),
            Part("/ppt/vendor/data.bin", "application/vnd.example.data", Opaque(b"\x00")),
        ]

        registry = ContentTypeRegistry.for_parts(parts)

        assert registry.defaults == {
            "png": "image/png",
            "rels": "application/vnd.openxmlformats-package.relationships+xml",
            "xml": CT_XML,
        }
        assert registry.overrides == {
            "/ppt/slides/slide1.xml": CT_SLIDE,
            "/ppt/vendor/data.bin": "application/vnd.example.data",
        }
        for part in parts:
            assert registry.resolve(part.partname) == part.content_type

    def test_image_with_mismatched_extension(self) -> None:
        """Test an image whose extension default disagrees gets an Override."""
        parts = [Part("/ppt/media/image1.png", "image/jpeg", Opaque(b"jpeg"))]

        registry = ContentTypeRegistry.for_parts(parts)

        assert registry.resolve("/ppt/media/image1.png") == "image/jpeg"
        assert "png" not in registry.defaults
