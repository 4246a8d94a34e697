"""Content type registry backing [Content_Types].xml."""

from __future__ import annotations

from typing import TYPE_CHECKING

from openxml_deck.errors import DuplicateOverride, NoContentType
from openxml_deck.media import IMAGE_CONTENT_TYPES
from openxml_deck.namespaces import CONTENT_TYPES, CT_RELATIONSHIPS, CT_XML
from openxml_deck.oxml import OxmlElement, SubElement, findall, parse_xml, serialize_xml
from openxml_deck.packuri import CONTENT_TYPES_URI, PackURI

if TYPE_CHECKING:
    from collections.abc import Iterable

    from openxml_deck.parts import Part

# Extensions covered by a Default element when a part's content type matches
DEFAULT_CONTENT_TYPES: dict[str, str] = {
    "rels": CT_RELATIONSHIPS,
    "xml": CT_XML,
    **IMAGE_CONTENT_TYPES,
}


class ContentTypeRegistry:
    """Default (extension) and Override (part name) content type rules.

    Both extensions and part names compare case-insensitively. Override
    always takes precedence over Default.
    """

    def __init__(self) -> None:
        self._defaults: dict[str, str] = {}  # extension (lowercase) -> content type
        self._overrides: dict[str, tuple[PackURI, str]] = {}  # key -> (partname, ct)

    def register_default(self, extension: str, content_type: str) -> None:
        """Bind every part with ``extension`` to ``content_type``."""
        self._defaults[extension.lower().lstrip(".")] = content_type

    def register_override(self, partname: str, content_type: str) -> None:
        """Bind one part name to ``content_type``.

        Raises:
            DuplicateOverride: An Override already exists for ``partname``.
        """
        uri = PackURI(partname)
        if uri.key in self._overrides:
            raise DuplicateOverride(uri)
        self._overrides[uri.key] = (uri, content_type)

    def remove_override(self, partname: str) -> None:
        self._overrides.pop(PackURI(partname).key, None)

    def resolve(self, partname: str) -> str:
        """Content type for a part: its Override, else its extension's Default.

        Raises:
            NoContentType: Neither rule covers ``partname``.
        """
        uri = PackURI(partname)
        override = self._overrides.get(uri.key)
        if override is not None:
            return override[1]
        content_type = self._defaults.get(uri.ext.lower())
        if content_type is None:
            raise NoContentType(uri)
        return content_type

    def covers(self, partname: str) -> bool:
        uri = PackURI(partname)
        return uri.key in self._overrides or uri.ext.lower() in self._defaults

    @property
    def defaults(self) -> dict[str, str]:
        return dict(self._defaults)

    @property
    def overrides(self) -> dict[str, str]:
        return {uri: ct for uri, ct in self._overrides.values()}

    def __len__(self) -> int:
        return len(self._defaults) + len(self._overrides)

    @classmethod
    def from_xml(cls, xml_content: bytes) -> ContentTypeRegistry:
        """Parse [Content_Types].xml content.

        Raises:
            XmlParseError: The content is not well-formed.
            DuplicateOverride: Two Overrides name the same part.
        """
        registry = cls()
        root = parse_xml(xml_content, part=CONTENT_TYPES_URI)

        for default in findall(root, "ct:Default"):
            ext = default.get("Extension", "")
            content_type = default.get("ContentType", "")
            if ext and content_type:
                registry.register_default(ext, content_type)

        for override in findall(root, "ct:Override"):
            part_name = override.get("PartName", "")
            content_type = override.get("ContentType", "")
            if part_name and content_type:
                if not part_name.startswith("/"):
                    part_name = "/" + part_name
                registry.register_override(part_name, content_type)

        return registry

    def to_xml(self) -> bytes:
        """Canonical [Content_Types].xml: Defaults by extension, then Overrides by part name."""
        types = OxmlElement(f"{{{CONTENT_TYPES}}}Types", nsmap={None: CONTENT_TYPES})
        for ext in sorted(self._defaults):
            SubElement(
                types,
                f"{{{CONTENT_TYPES}}}Default",
                {"Extension": ext, "ContentType": self._defaults[ext]},
            )
        for key in sorted(self._overrides):
            uri, content_type = self._overrides[key]
            SubElement(
                types,
                f"{{{CONTENT_TYPES}}}Override",
                {"PartName": uri, "ContentType": content_type},
            )
        return serialize_xml(types)

    @classmethod
    def for_parts(cls, parts: Iterable[Part]) -> ContentTypeRegistry:
        """Smallest registry covering ``parts``.

        A part whose extension has a well-known default matching its content
        type is covered by a Default; every other part gets an Override.
        """
        registry = cls()
        registry.register_default("rels", CT_RELATIONSHIPS)
        registry.register_default("xml", CT_XML)
        for part in parts:
            ext = part.partname.ext.lower()
            if DEFAULT_CONTENT_TYPES.get(ext) == part.content_type:
                registry.register_default(ext, part.content_type)
            else:
                registry.register_override(part.partname, part.content_type)
        return registry
