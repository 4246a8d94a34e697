"""Part names (pack URIs) and relative reference resolution."""

from __future__ import annotations

import posixpath
import re

_IDX_PATTERN = re.compile(r"([a-zA-Z]+)([0-9]+)\.[^.]+$")
_DIGITS = re.compile(r"(\d+)")


class PackURI(str):
    """A part name such as ``/ppt/slides/slide1.xml``.

    Always absolute. Part names compare case-insensitively per OPC, so
    containers key parts on :attr:`key` rather than the raw string.
    """

    def __new__(cls, uri: str) -> PackURI:
        if not uri.startswith("/"):
            raise ValueError(f"PackURI must begin with slash, got '{uri}'")
        return str.__new__(cls, uri)

    @classmethod
    def from_rel_ref(cls, base_uri: str, relative_ref: str) -> PackURI:
        """Resolve a relationship target reference against a source directory.

        Args:
            base_uri: Directory of the source part, e.g. "/ppt/slides".
                      For package relationships, use "/".
            relative_ref: The Target attribute, e.g. "../slideLayouts/slideLayout1.xml".
        """
        if relative_ref.startswith("/"):
            return cls(posixpath.normpath(relative_ref))
        joined = posixpath.join(base_uri, relative_ref)
        abs_uri = posixpath.normpath(joined)
        # normpath keeps a leading "//" pair, which is never a valid part name
        if abs_uri.startswith("//"):
            abs_uri = "/" + abs_uri.lstrip("/")
        return cls(abs_uri)

    @classmethod
    def from_member_name(cls, name: str) -> PackURI:
        """Create from a ZIP entry name (no leading slash)."""
        return cls("/" + name.lstrip("/"))

    @property
    def base_uri(self) -> str:
        """Directory portion, e.g. "/ppt/slides" for "/ppt/slides/slide1.xml"."""
        return posixpath.split(self)[0]

    @property
    def filename(self) -> str:
        """Final path segment, e.g. "slide1.xml"; empty for the package root."""
        return posixpath.split(self)[1]

    @property
    def ext(self) -> str:
        """Extension without the leading period, e.g. "xml"."""
        return posixpath.splitext(self)[1].lstrip(".")

    @property
    def idx(self) -> int | None:
        """Trailing partname index, e.g. 21 for "/ppt/slides/slide21.xml"."""
        match = _IDX_PATTERN.search(self.filename)
        if match is None:
            return None
        return int(match.group(2))

    @property
    def membername(self) -> str:
        """ZIP entry name: the part name without its leading slash."""
        return self[1:]

    @property
    def key(self) -> str:
        """Case-folded form used for case-insensitive comparison."""
        return self.lower()

    @property
    def rels_uri(self) -> PackURI:
        """Part name of the .rels part holding this part's relationships.

        "/" maps to "/_rels/.rels" and "/ppt/presentation.xml" maps to
        "/ppt/_rels/presentation.xml.rels".
        """
        rels_filename = f"{self.filename}.rels"
        return PackURI(posixpath.join(self.base_uri, "_rels", rels_filename))

    def relative_ref(self, base_uri: str) -> str:
        """Relative reference from ``base_uri`` to this part."""
        if base_uri == "/":
            return self[1:]
        return posixpath.relpath(self, base_uri)


PACKAGE_URI = PackURI("/")
CONTENT_TYPES_URI = PackURI("/[Content_Types].xml")


def is_rels_uri(uri: str) -> bool:
    """True for relationship parts such as "/_rels/.rels"."""
    return uri.lower().endswith(".rels") and "/_rels/" in uri.lower()


def source_uri_for_rels(rels_uri: str) -> PackURI:
    """Inverse of :attr:`PackURI.rels_uri`."""
    directory, filename = posixpath.split(rels_uri)
    source_dir = posixpath.dirname(directory)
    source_name = filename[: -len(".rels")]
    if not source_name:
        return PACKAGE_URI
    return PackURI(posixpath.join(source_dir, source_name))


def natural_key(uri: str) -> list[int | str]:
    """Sort key that orders "slide2.xml" before "slide10.xml"."""
    return [int(tok) if tok.isdigit() else tok.lower() for tok in _DIGITS.split(uri)]
