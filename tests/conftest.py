"""pytest configuration and fixtures for openxml_deck tests."""

from __future__ import annotations

import io
import zipfile
from datetime import datetime
from pathlib import Path

import pytest
from lxml import etree

from openxml_deck import Package, create_package
from openxml_deck.builders import PresentationMetadata
from tests.fixture_loader import FIXTURES_DIR

FIXED_METADATA = PresentationMetadata(
    title="Demo",
    author="Tester",
    created=datetime(2024, 1, 31, 12, 0, 0),
)


def _is_xml_file(path: Path) -> bool:
    if path.name == "[Content_Types].xml":
        return True
    return path.suffix in {".xml", ".rels"}


def fixture_entries(*names: str) -> dict[str, bytes]:
    """Entries of one or more fixture directories, later ones overlaying earlier ones."""
    entries: dict[str, bytes] = {}
    for name in names:
        source_dir = FIXTURES_DIR / "pptx" / name
        for file_path in sorted(source_dir.rglob("*")):
            if file_path.is_dir():
                continue
            data = file_path.read_bytes()
            if _is_xml_file(file_path):
                # Validate XML fixtures up front.
                etree.fromstring(data)
            entries[file_path.relative_to(source_dir).as_posix()] = data
    return entries


def zip_bytes(entries: dict[str, bytes]) -> bytes:
    """ZIP archive holding ``entries`` in the given order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def _build_package_from_dir(output_path: Path, *names: str) -> Path:
    output_path.write_bytes(zip_bytes(fixture_entries(*names)))
    return output_path


@pytest.fixture
def tmp_pptx_path(tmp_path: Path) -> Path:
    """Provide a temporary path for PPTX files."""
    return tmp_path / "test.pptx"


@pytest.fixture
def minimal_pptx(tmp_path: Path) -> Path:
    """A minimal hand-written PPTX file with one slide."""
    return _build_package_from_dir(tmp_path / "minimal.pptx", "minimal")


@pytest.fixture
def minimal_pptx_bytes() -> bytes:
    return zip_bytes(fixture_entries("minimal"))


@pytest.fixture
def foreign_pptx(tmp_path: Path) -> Path:
    """PPTX with a vendor part, an orphan entry and a dangling relationship."""
    return _build_package_from_dir(tmp_path / "foreign.pptx", "minimal", "foreign")


@pytest.fixture
def foreign_pptx_bytes() -> bytes:
    return zip_bytes(fixture_entries("minimal", "foreign"))


@pytest.fixture
def not_a_zip(tmp_path: Path) -> Path:
    """Create a file that is not a valid ZIP."""
    path = tmp_path / "not_a_zip.pptx"
    path.write_text("This is not a ZIP file")
    return path


@pytest.fixture
def new_package() -> Package:
    """A freshly created package with fixed metadata and no slides."""
    return create_package(FIXED_METADATA)
