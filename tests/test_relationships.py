"""Tests for relationship parsing and handling."""

from __future__ import annotations

import pytest

from openxml_deck.errors import InvalidRelationshipId, RelationshipError
from openxml_deck.namespaces import RT_SLIDE, RT_SLIDE_LAYOUT, RT_THEME
from openxml_deck.oxml import findall, parse_xml
from openxml_deck.relationships import Relationship, Relationships, TargetMode
from tests.fixture_loader import load_fixture_bytes

HYPERLINK = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"


class TestRelationship:
    """Tests for the Relationship dataclass."""

    def test_is_external(self) -> None:
        """Test external relationship detection."""
        rel = Relationship("rId1", HYPERLINK, "https://example.com/", TargetMode.EXTERNAL)
        assert rel.is_external

    def test_is_internal(self) -> None:
        """Test internal relationship detection."""
        rel = Relationship("rId1", RT_SLIDE, "slides/slide1.xml")
        assert not rel.is_external

    def test_resolve_target_relative(self) -> None:
        """Test resolving a relative target path."""
        rel = Relationship("rId1", RT_SLIDE, "slides/slide1.xml")
        assert rel.resolve_target("/ppt/presentation.xml") == "/ppt/slides/slide1.xml"

    def test_resolve_target_with_parent(self) -> None:
        """Test resolving a target with a parent directory reference."""
        rel = Relationship("rId1", RT_THEME, "../theme/theme1.xml")
        assert rel.resolve_target("/ppt/slideMasters/slideMaster1.xml") == "/ppt/theme/theme1.xml"

    def test_resolve_target_from_package(self) -> None:
        """Test resolving a package-level relationship."""
        rel = Relationship("rId1", RT_SLIDE, "ppt/presentation.xml")
        assert rel.resolve_target("/") == "/ppt/presentation.xml"

    def test_resolve_external_unchanged(self) -> None:
        """Test external targets are returned as is."""
        rel = Relationship("rId1", HYPERLINK, "https://example.com/a", TargetMode.EXTERNAL)
        assert rel.resolve_target("/ppt/slides/slide1.xml") == "https://example.com/a"


class TestRelationships:
    """Tests for the Relationships collection."""

    def test_add_allocates_sequential_ids(self) -> None:
        """Test new relationships get rId1, rId2, ..."""
        rels = Relationships("/ppt/presentation.xml")

        first = rels.add(RT_SLIDE, "slides/slide1.xml")
        second = rels.add(RT_SLIDE, "slides/slide2.xml")

        assert (first.rId, second.rId) == ("rId1", "rId2")

    def test_removed_id_not_reused(self) -> None:
        """Test ids stay unique after removal and gaps are allowed."""
        rels = Relationships("/ppt/presentation.xml")
        rels.add(RT_SLIDE, "slides/slide1.xml")
        rels.add(RT_SLIDE, "slides/slide2.xml")
        rels.remove("rId2")

        assert rels.add(RT_SLIDE, "slides/slide3.xml").rId == "rId3"
        assert [rel.rId for rel in rels] == ["rId1", "rId3"]

    def test_get_or_add_reuses_edge(self) -> None:
        """Test an equal internal edge is reused."""
        rels = Relationships("/ppt/slides/slide1.xml")
        first = rels.get_or_add(RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")
        again = rels.get_or_add(RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")

        assert first is again
        assert len(rels) == 1

    def test_get_unknown_id(self) -> None:
        """Test looking up a missing id raises InvalidRelationshipId."""
        rels = Relationships("/ppt/presentation.xml")

        with pytest.raises(InvalidRelationshipId):
            rels.get("rId5")
        with pytest.raises(InvalidRelationshipId):
            rels.remove("rId5")

    def test_by_type(self) -> None:
        rels = Relationships("/ppt/presentation.xml")
        rels.add(RT_SLIDE, "slides/slide1.xml")
        rels.add(RT_THEME, "theme/theme1.xml")
        rels.add(RT_SLIDE, "slides/slide2.xml")

        assert [rel.rId for rel in rels.by_type(RT_SLIDE)] == ["rId1", "rId3"]
        assert rels.first_by_type(RT_THEME).rId == "rId2"
        assert rels.first_by_type(HYPERLINK) is None

    def test_target_uri(self) -> None:
        rels = Relationships("/ppt/slides/slide1.xml")
        rels.add(RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout2.xml")

        assert rels.target_uri("rId1") == "/ppt/slideLayouts/slideLayout2.xml"


class TestParse:
    """Tests for parsing .rels parts."""

    def test_from_xml(self) -> None:
        """Test parsing relationships from XML."""
        rels = Relationships.from_xml(
            load_fixture_bytes("relationships", "two_rels.xml"), "/ppt/slides/slide1.xml"
        )

        assert len(rels) == 2
        assert "rId1" in rels
        assert rels.get("rId4").is_external
        assert rels.get("rId4").target_ref == "https://example.com/page?a=1&b=2"
        assert rels.target_uri("rId1") == "/ppt/slideLayouts/slideLayout2.xml"

    def test_counter_starts_above_loaded_ids(self) -> None:
        """Test new ids are allocated above the highest rIdN seen."""
        rels = Relationships.from_xml(
            load_fixture_bytes("relationships", "custom_ids.xml"), "/ppt/presentation.xml"
        )

        assert "rIdTheme" in rels
        assert rels.add(RT_SLIDE, "slides/slide2.xml").rId == "rId13"

    def test_duplicate_ids(self) -> None:
        """Test duplicate ids are rejected."""
        with pytest.raises(InvalidRelationshipId, match="Duplicate"):
            Relationships.from_xml(
                load_fixture_bytes("relationships", "duplicate_ids.xml"), "/ppt/presentation.xml"
            )

    def test_invalid_id(self) -> None:
        """Test ids that are not XML names are rejected."""
        with pytest.raises(InvalidRelationshipId):
            Relationships.from_xml(
                load_fixture_bytes("relationships", "invalid_id.xml"), "/ppt/presentation.xml"
            )

    def test_unknown_target_mode(self) -> None:
        xml = (
            b'<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
            b'<Relationship Id="rId1" Type="t" Target="x.xml" TargetMode="Sideways"/>'
            b"</Relationships>"
        )

        with pytest.raises(RelationshipError, match="Sideways"):
            Relationships.from_xml(xml, "/ppt/presentation.xml")


class TestSerialize:
    """Tests for .rels serialization."""

    def test_insertion_order_and_target_mode(self) -> None:
        """Test relationships are written in insertion order, TargetMode only when external."""
        rels = Relationships("/ppt/slides/slide1.xml")
        rels.add(RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")
        rels.add(HYPERLINK, "https://example.com/", TargetMode.EXTERNAL)

        root = parse_xml(rels.to_xml())
        elements = findall(root, "pr:Relationship")

        assert [el.get("Id") for el in elements] == ["rId1", "rId2"]
        assert elements[0].get("TargetMode") is None
        assert elements[1].get("TargetMode") == "External"

    def test_round_trip(self) -> None:
        """Test parse -> serialize -> parse preserves every relationship."""
        original = Relationships.from_xml(
            load_fixture_bytes("relationships", "two_rels.xml"), "/ppt/slides/slide1.xml"
        )
        reparsed = Relationships.from_xml(original.to_xml(), "/ppt/slides/slide1.xml")

        assert list(reparsed) == list(original)
