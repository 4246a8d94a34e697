"""Tests for part names and relative reference resolution."""

from __future__ import annotations

import pytest

from openxml_deck.packuri import (
    PACKAGE_URI,
    PackURI,
    is_rels_uri,
    natural_key,
    source_uri_for_rels,
)


class TestPackURI:
    """Tests for PackURI."""

    def test_must_be_absolute(self) -> None:
        """Test a part name without a leading slash is rejected."""
        with pytest.raises(ValueError):
            PackURI("ppt/presentation.xml")

    def test_components(self) -> None:
        """Test base URI, file name, extension and index."""
        uri = PackURI("/ppt/slides/slide21.xml")

        assert uri.base_uri == "/ppt/slides"
        assert uri.filename == "slide21.xml"
        assert uri.ext == "xml"
        assert uri.idx == 21
        assert uri.membername == "ppt/slides/slide21.xml"

    def test_idx_absent(self) -> None:
        """Test part names without a trailing number have no index."""
        assert PackURI("/ppt/presentation.xml").idx is None

    def test_key_is_case_folded(self) -> None:
        """Test part names compare case-insensitively through their key."""
        assert PackURI("/PPT/Slides/Slide1.XML").key == PackURI("/ppt/slides/slide1.xml").key

    def test_rels_uri(self) -> None:
        """Test the relationship part name of a part and of the package."""
        assert PackURI("/ppt/presentation.xml").rels_uri == "/ppt/_rels/presentation.xml.rels"
        assert PACKAGE_URI.rels_uri == "/_rels/.rels"

    def test_from_member_name(self) -> None:
        """Test conversion from a ZIP entry name."""
        assert PackURI.from_member_name("ppt/slides/slide1.xml") == "/ppt/slides/slide1.xml"


class TestRelativeReferences:
    """Tests for resolving and computing relationship targets."""

    def test_resolve_sibling(self) -> None:
        """Test resolving a reference in the source directory."""
        assert PackURI.from_rel_ref("/ppt", "slides/slide1.xml") == "/ppt/slides/slide1.xml"

    def test_resolve_parent(self) -> None:
        """Test resolving a reference with a parent segment."""
        uri = PackURI.from_rel_ref("/ppt/slides", "../slideLayouts/slideLayout1.xml")
        assert uri == "/ppt/slideLayouts/slideLayout1.xml"

    def test_resolve_from_root(self) -> None:
        """Test resolving a package relationship target."""
        assert PackURI.from_rel_ref("/", "ppt/presentation.xml") == "/ppt/presentation.xml"

    def test_resolve_absolute(self) -> None:
        """Test an absolute reference ignores the base."""
        assert PackURI.from_rel_ref("/ppt/slides", "/ppt/media/image1.png") == "/ppt/media/image1.png"

    def test_relative_ref(self) -> None:
        """Test computing the reference stored for a new edge."""
        target = PackURI("/ppt/slideLayouts/slideLayout1.xml")

        assert target.relative_ref("/ppt/slides") == "../slideLayouts/slideLayout1.xml"
        assert PackURI("/ppt/presentation.xml").relative_ref("/") == "ppt/presentation.xml"

    def test_relative_ref_round_trip(self) -> None:
        """Test a computed reference resolves back to the target."""
        target = PackURI("/ppt/media/image3.png")
        ref = target.relative_ref("/ppt/slides")

        assert PackURI.from_rel_ref("/ppt/slides", ref) == target


class TestHelpers:
    """Tests for module-level helpers."""

    def test_is_rels_uri(self) -> None:
        assert is_rels_uri("/_rels/.rels")
        assert is_rels_uri("/ppt/slides/_rels/slide1.xml.rels")
        assert not is_rels_uri("/ppt/slides/slide1.xml")

    def test_source_uri_for_rels(self) -> None:
        """Test mapping a relationship part back to its source."""
        assert source_uri_for_rels("/ppt/slides/_rels/slide1.xml.rels") == "/ppt/slides/slide1.xml"
        assert source_uri_for_rels("/_rels/.rels") == PACKAGE_URI

    def test_natural_key(self) -> None:
        """Test slide10 sorts after slide2."""
        names = ["/ppt/slides/slide10.xml", "/ppt/slides/slide2.xml", "/ppt/slides/slide1.xml"]

        assert sorted(names, key=natural_key) == [
            "/ppt/slides/slide1.xml",
            "/ppt/slides/slide2.xml",
            "/ppt/slides/slide10.xml",
        ]
