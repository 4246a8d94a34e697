"""Relationship handling for OPC packages."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from openxml_deck.errors import InvalidRelationshipId, RelationshipError
from openxml_deck.namespaces import RELATIONSHIPS
from openxml_deck.oxml import OxmlElement, SubElement, findall, parse_xml, serialize_xml
from openxml_deck.packuri import PACKAGE_URI, PackURI

if TYPE_CHECKING:
    from collections.abc import Iterator

_RID_PATTERN = re.compile(r"^rId(\d+)$")
# XML NCName, restricted to the characters seen in practice
_NCNAME = re.compile(r"^[A-Za-z_][\w.\-]*$")


class TargetMode(Enum):
    """Whether a relationship target lives inside the package."""

    INTERNAL = "Internal"
    EXTERNAL = "External"


@dataclass(frozen=True)
class Relationship:
    """An OPC relationship from a source part (or the package root)."""

    rId: str  # e.g., "rId1"
    reltype: str  # Relationship type URI
    target_ref: str  # Relative reference, or absolute URI when external
    target_mode: TargetMode = TargetMode.INTERNAL

    @property
    def is_external(self) -> bool:
        return self.target_mode is TargetMode.EXTERNAL

    def resolve_target(self, source_uri: str) -> str:
        """Resolve the target against the source part.

        Args:
            source_uri: The part holding this relationship; "/" for the
                        package root.

        Returns:
            The absolute part name for internal targets, the target reference
            unchanged for external ones.
        """
        if self.is_external:
            return self.target_ref
        base_uri = "/" if source_uri == "/" else PackURI(source_uri).base_uri
        return PackURI.from_rel_ref(base_uri, self.target_ref)


class Relationships:
    """Ordered relationships of one source part.

    Allocates ``rIdN`` ids from a private counter that only moves forward, so
    a removed id is never handed out again by the same collection.
    """

    def __init__(self, source_uri: str = PACKAGE_URI):
        self._source_uri = source_uri
        self._rels: dict[str, Relationship] = {}
        self._next_rid = 1

    @property
    def source_uri(self) -> str:
        return self._source_uri

    def _allocate_rid(self) -> str:
        while f"rId{self._next_rid}" in self._rels:
            self._next_rid += 1
        rId = f"rId{self._next_rid}"
        self._next_rid += 1
        return rId

    def _track(self, rId: str) -> None:
        match = _RID_PATTERN.match(rId)
        if match is not None:
            self._next_rid = max(self._next_rid, int(match.group(1)) + 1)

    def add(
        self,
        reltype: str,
        target_ref: str,
        target_mode: TargetMode = TargetMode.INTERNAL,
    ) -> Relationship:
        """Append a new relationship with the next free id."""
        rel = Relationship(self._allocate_rid(), reltype, target_ref, target_mode)
        self._rels[rel.rId] = rel
        return rel

    def load(self, rel: Relationship) -> None:
        """Append a relationship read from a .rels part, keeping its id.

        Raises:
            InvalidRelationshipId: The id is not an XML name or is already used.
        """
        if not _NCNAME.match(rel.rId):
            raise InvalidRelationshipId(
                f"Relationship id '{rel.rId}' in '{self._source_uri}' is not a valid XML name"
            )
        if rel.rId in self._rels:
            raise InvalidRelationshipId(
                f"Duplicate relationship id '{rel.rId}' in '{self._source_uri}'"
            )
        self._rels[rel.rId] = rel
        self._track(rel.rId)

    def get_or_add(self, reltype: str, target_ref: str) -> Relationship:
        """Existing internal relationship of ``reltype`` to ``target_ref``, or a new one."""
        for rel in self._rels.values():
            if (
                rel.reltype == reltype
                and rel.target_ref == target_ref
                and not rel.is_external
            ):
                return rel
        return self.add(reltype, target_ref)

    def remove(self, rId: str) -> Relationship:
        """Remove and return a relationship.

        Raises:
            InvalidRelationshipId: No relationship has this id.
        """
        try:
            return self._rels.pop(rId)
        except KeyError:
            raise InvalidRelationshipId(
                f"No relationship '{rId}' in '{self._source_uri}'"
            ) from None

    def get(self, rId: str) -> Relationship:
        """Relationship by id.

        Raises:
            InvalidRelationshipId: No relationship has this id.
        """
        rel = self._rels.get(rId)
        if rel is None:
            raise InvalidRelationshipId(f"No relationship '{rId}' in '{self._source_uri}'")
        return rel

    def by_type(self, reltype: str) -> Iterator[Relationship]:
        for rel in self._rels.values():
            if rel.reltype == reltype:
                yield rel

    def first_by_type(self, reltype: str) -> Relationship | None:
        return next(self.by_type(reltype), None)

    def target_uri(self, rId: str) -> str:
        """Absolute target of a relationship."""
        return self.get(rId).resolve_target(self._source_uri)

    def __iter__(self) -> Iterator[Relationship]:
        return iter(self._rels.values())

    def __len__(self) -> int:
        return len(self._rels)

    def __contains__(self, rId: object) -> bool:
        return rId in self._rels

    @classmethod
    def from_xml(cls, xml_content: bytes, source_uri: str = PACKAGE_URI) -> Relationships:
        """Parse a .rels part.

        Args:
            xml_content: The raw XML bytes of the .rels file.
            source_uri: The part these relationships belong to.

        Raises:
            XmlParseError: The content is not well-formed.
            InvalidRelationshipId: An id is missing, duplicated or not an XML name.
        """
        collection = cls(source_uri)
        root = parse_xml(xml_content, part=PackURI(source_uri).rels_uri)

        for rel_elem in findall(root, "pr:Relationship"):
            rel_type = rel_elem.get("Type", "")
            target = rel_elem.get("Target", "")
            mode = rel_elem.get("TargetMode", TargetMode.INTERNAL.value)
            try:
                target_mode = TargetMode(mode)
            except ValueError:
                raise RelationshipError(
                    f"Unknown TargetMode '{mode}' in '{source_uri}'"
                ) from None
            collection.load(
                Relationship(
                    rId=rel_elem.get("Id", ""),
                    reltype=rel_type,
                    target_ref=target,
                    target_mode=target_mode,
                )
            )

        return collection

    def to_xml(self) -> bytes:
        """Serialize in insertion order."""
        root = OxmlElement(f"{{{RELATIONSHIPS}}}Relationships", nsmap={None: RELATIONSHIPS})
        for rel in self._rels.values():
            attrs = {"Id": rel.rId, "Type": rel.reltype, "Target": rel.target_ref}
            if rel.is_external:
                attrs["TargetMode"] = rel.target_mode.value
            SubElement(root, f"{{{RELATIONSHIPS}}}Relationship", attrs)
        return serialize_xml(root)
