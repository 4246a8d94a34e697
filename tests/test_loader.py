"""Tests for loading packages from container bytes."""

from __future__ import annotations

import pytest

from openxml_deck.errors import (
    CorruptArchive,
    InvalidRelationshipId,
    IssueKind,
    IssueSeverity,
    MalformedPackage,
    NoContentType,
    SchemaViolation,
    XmlParseError,
)
from openxml_deck.loader import load
from openxml_deck.namespaces import CT_SLIDE, CT_XML
from openxml_deck.package import PackageState
from openxml_deck.parts import PresentationPart, SlidePart
from tests.conftest import fixture_entries, zip_bytes

VENDOR_PART = "/ppt/vendor/extension.xml"
VENDOR_CONTENT_TYPE = "application/vnd.example.extension+xml"
RT_CUSTOM_XML = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/customXml"


def _minimal_without(*names: str) -> bytes:
    entries = fixture_entries("minimal")
    for name in names:
        del entries[name]
    return zip_bytes(entries)


class TestLoadMinimal:
    """Tests for loading a well-formed package."""

    def test_parts_in_traversal_order(self, minimal_pptx_bytes: bytes) -> None:
        """Test parts are read breadth first from the package relationships."""
        package = load(minimal_pptx_bytes)

        assert [str(part.partname) for part in package.iter_parts()] == [
            "/ppt/presentation.xml",
            "/docProps/core.xml",
            "/ppt/slideMasters/slideMaster1.xml",
            "/ppt/slides/slide1.xml",
            "/ppt/theme/theme1.xml",
            "/ppt/slideLayouts/slideLayout1.xml",
        ]

    def test_state_and_issues(self, minimal_pptx_bytes: bytes) -> None:
        package = load(minimal_pptx_bytes)

        assert package.state is PackageState.LOADED
        assert package.issues == []

    def test_part_classes(self, minimal_pptx_bytes: bytes) -> None:
        package = load(minimal_pptx_bytes)

        assert isinstance(package.main_document_part, PresentationPart)
        slide = package.get_part("/ppt/slides/slide1.xml")
        assert isinstance(slide, SlidePart)
        assert slide.content_type == CT_SLIDE

    def test_untouched_parts_keep_bytes(self, minimal_pptx_bytes: bytes) -> None:
        """Test loading does not parse or rewrite parts."""
        entries = fixture_entries("minimal")

        package = load(minimal_pptx_bytes)

        for name in ("ppt/slides/slide1.xml", "ppt/presentation.xml", "ppt/theme/theme1.xml"):
            part = package.get_part("/" + name)
            assert part.blob == entries[name]
            assert not part.payload.is_materialized

    def test_relationships_loaded(self, minimal_pptx_bytes: bytes) -> None:
        package = load(minimal_pptx_bytes)

        presentation = package.main_document_part
        assert [rel.rId for rel in presentation.rels] == ["rId1", "rId2", "rId3"]
        assert presentation.slide_ids == [(256, "rId2")]
        layout = package.related_part("/ppt/slides/slide1.xml", "rId1")
        assert layout.partname == "/ppt/slideLayouts/slideLayout1.xml"

    def test_malformed_xml_in_unread_part(self) -> None:
        """Test a theme is not parsed on load."""
        entries = fixture_entries("minimal")
        entries["ppt/theme/theme1.xml"] = b"<a:theme><unclosed></a:theme>"

        package = load(zip_bytes(entries))

        assert package.get_part("/ppt/theme/theme1.xml").blob == b"<a:theme><unclosed></a:theme>"


class TestLoadForeign:
    """Tests for recoverable findings while loading."""

    def test_issues(self, foreign_pptx_bytes: bytes) -> None:
        """Test foreign parts, orphans and dangling edges are reported in order."""
        package = load(foreign_pptx_bytes)

        assert [(issue.kind, issue.severity, issue.part_uri) for issue in package.issues] == [
            (IssueKind.FOREIGN_PART, IssueSeverity.INFO, VENDOR_PART),
            (IssueKind.ORPHAN_PART, IssueSeverity.WARNING, "/customXml/item1.xml"),
            (IssueKind.DANGLING_RELATIONSHIP, IssueSeverity.ERROR, "/ppt/presentation.xml"),
        ]

    def test_dangling_issue_details(self, foreign_pptx_bytes: bytes) -> None:
        package = load(foreign_pptx_bytes)

        dangling = package.issues[-1]
        assert dangling.rId == "rId9"
        assert dangling.target == "/ppt/commentAuthors.xml"
        assert "#rId9" in str(dangling)
        assert package.was_dangling_on_load("/ppt/presentation.xml", "rId9")

    def test_foreign_part_kept(self, foreign_pptx_bytes: bytes) -> None:
        """Test a part of unknown content type is kept with its bytes."""
        entries = fixture_entries("minimal", "foreign")

        package = load(foreign_pptx_bytes)

        vendor = package.require_part(VENDOR_PART)
        assert vendor.content_type == VENDOR_CONTENT_TYPE
        assert vendor.blob == entries["ppt/vendor/extension.xml"]

    def test_orphan_kept(self, foreign_pptx_bytes: bytes) -> None:
        package = load(foreign_pptx_bytes)

        orphan = package.require_part("/customXml/item1.xml")
        assert orphan.content_type == CT_XML
        assert [part.partname for part in package.orphan_parts()] == ["/customXml/item1.xml"]

    def test_external_relationship_kept(self, foreign_pptx_bytes: bytes) -> None:
        package = load(foreign_pptx_bytes)

        rel = package.resolve_relationship("/ppt/presentation.xml", "rId10")
        assert rel.is_external

    def test_counter_continues_after_loaded_ids(self, foreign_pptx_bytes: bytes) -> None:
        """Test new relationships never reuse a loaded id."""
        package = load(foreign_pptx_bytes)

        rId = package.relate("/ppt/presentation.xml", "/customXml/item1.xml", RT_CUSTOM_XML)

        assert rId == "rId11"
        assert package.state is PackageState.MUTATING


class TestLoadErrors:
    """Tests for packages that cannot be loaded."""

    def test_not_a_zip(self) -> None:
        with pytest.raises(CorruptArchive):
            load(b"This is not a ZIP file")

    def test_missing_content_types(self) -> None:
        with pytest.raises(MalformedPackage, match="Content_Types"):
            load(_minimal_without("[Content_Types].xml"))

    def test_missing_package_rels(self) -> None:
        with pytest.raises(MalformedPackage, match="_rels/.rels"):
            load(_minimal_without("_rels/.rels"))

    def test_missing_presentation(self) -> None:
        with pytest.raises(MalformedPackage, match="Main document part"):
            load(_minimal_without("ppt/presentation.xml", "ppt/_rels/presentation.xml.rels"))

    def test_missing_listed_slide(self) -> None:
        """Test a slide listed in presentation.xml must exist."""
        with pytest.raises(MalformedPackage, match="slide1.xml"):
            load(_minimal_without("ppt/slides/slide1.xml", "ppt/slides/_rels/slide1.xml.rels"))

    def test_entry_without_content_type(self) -> None:
        entries = fixture_entries("minimal")
        entries["ppt/vendor/blob.bin"] = b"\x00\x01"

        with pytest.raises(NoContentType) as exc_info:
            load(zip_bytes(entries))

        assert exc_info.value.partname == "/ppt/vendor/blob.bin"

    def test_names_differing_in_case(self) -> None:
        entries = fixture_entries("minimal")
        entries["ppt/Slides/slide1.xml"] = entries["ppt/slides/slide1.xml"]

        with pytest.raises(MalformedPackage, match="case"):
            load(zip_bytes(entries))

    def test_malformed_presentation(self) -> None:
        """Test a presentation.xml that is not well-formed raises XmlParseError."""
        entries = fixture_entries("minimal")
        entries["ppt/presentation.xml"] = b"<p:presentation>\n<p:sldIdLst>\n</p:presentation>"

        with pytest.raises(XmlParseError) as exc_info:
            load(zip_bytes(entries))

        assert exc_info.value.part == "/ppt/presentation.xml"

    @pytest.mark.parametrize(
        "name",
        [
            "ppt/slides/slide1.xml",
            "ppt/slideLayouts/slideLayout1.xml",
            "ppt/slideMasters/slideMaster1.xml",
        ],
    )
    def test_malformed_slide_parts(self, name: str) -> None:
        """Test a truncated slide, layout or master fails the load."""
        entries = fixture_entries("minimal")
        entries[name] = b"<p:sld><unclosed>"

        with pytest.raises(XmlParseError) as exc_info:
            load(zip_bytes(entries))

        assert exc_info.value.part == "/" + name

    def test_presentation_without_notes_size(self) -> None:
        entries = fixture_entries("minimal")
        entries["ppt/presentation.xml"] = entries["ppt/presentation.xml"].replace(
            b'<p:notesSz cx="6858000" cy="9144000"/>', b""
        )

        with pytest.raises(SchemaViolation, match="notesSz"):
            load(zip_bytes(entries))

    def test_duplicate_relationship_ids(self) -> None:
        entries = fixture_entries("minimal")
        rels_name = "ppt/slides/_rels/slide1.xml.rels"
        entries[rels_name] = entries[rels_name].replace(
            b"</Relationships>",
            b'<Relationship Id="rId1" Type="urn:example" Target="../theme/theme1.xml"/>'
            b"</Relationships>",
        )

        with pytest.raises(InvalidRelationshipId, match="Duplicate"):
            load(zip_bytes(entries))
