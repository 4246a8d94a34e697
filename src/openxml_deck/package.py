"""OPC package: the part registry and relationship graph.

A PPTX file is an OPC package - a ZIP archive containing XML parts and relationships.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING

from openxml_deck.config import DeckConfig
from openxml_deck.content_types import DEFAULT_CONTENT_TYPES, ContentTypeRegistry
from openxml_deck.errors import (
    DanglingRelationship,
    InvalidStateError,
    MalformedPackage,
    PackageIssue,
)
from openxml_deck.namespaces import PRESENTATION_CONTENT_TYPES, RT_OFFICE_DOCUMENT
from openxml_deck.packuri import PACKAGE_URI, PackURI
from openxml_deck.parts import Part, PresentationPart, part_class_for
from openxml_deck.relationships import Relationship, Relationships, TargetMode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from openxml_deck.oxml import Element

logger = logging.getLogger(__name__)


class PackageState(Enum):
    """Lifecycle of a package."""

    EMPTY = "empty"
    BUILDING = "building"
    LOADED = "loaded"
    MUTATING = "mutating"
    ASSEMBLED = "assembled"


class Package:
    """An Open XML presentation package.

    The package is the sole owner of its parts, keyed by case-folded part
    name, and of the package-level relationships. Parts refer to each other
    only through relationship targets.
    """

    def __init__(
        self,
        config: DeckConfig | None = None,
        state: PackageState = PackageState.EMPTY,
    ):
        self.config = config or DeckConfig()
        self.content_types = ContentTypeRegistry()
        self.issues: list[PackageIssue] = []
        self._parts: dict[str, Part] = {}
        self._rels = Relationships(PACKAGE_URI)
        self._state = state
        # (source, rId) of internal edges that were already dangling on load
        self._loaded_dangling: set[tuple[str, str]] = set()

    @property
    def state(self) -> PackageState:
        return self._state

    @property
    def rels(self) -> Relationships:
        """Package-level relationships (_rels/.rels)."""
        return self._rels

    @rels.setter
    def rels(self, rels: Relationships) -> None:
        self._rels = rels

    def _begin_mutation(self) -> None:
        if self._state is PackageState.ASSEMBLED:
            raise InvalidStateError("Package has been assembled and can no longer be modified")
        if self._state is PackageState.EMPTY:
            self._state = PackageState.BUILDING
        elif self._state is PackageState.LOADED:
            self._state = PackageState.MUTATING

    def touch(self) -> None:
        """Record an in-place edit of a part's XML tree."""
        self._begin_mutation()

    def mark_assembled(self) -> None:
        self._state = PackageState.ASSEMBLED

    # -- parts -------------------------------------------------------------

    def add_part(self, part: Part) -> Part:
        """Register a part and its content type.

        Raises:
            ValueError: A part with the same name already exists.
        """
        self._begin_mutation()
        self.adopt(part)
        ext = part.partname.ext.lower()
        if DEFAULT_CONTENT_TYPES.get(ext) == part.content_type:
            self.content_types.register_default(ext, part.content_type)
        else:
            self.content_types.register_override(part.partname, part.content_type)
        return part

    def new_part(self, partname: str, content_type: str, element: Element) -> Part:
        """Create and register an XML part of the class suited to ``content_type``."""
        part = part_class_for(content_type).from_element(partname, content_type, element)
        return self.add_part(part)

    def adopt(self, part: Part) -> None:
        """Register a part read from storage, leaving state and content types alone."""
        key = part.partname.key
        if key in self._parts:
            raise ValueError(f"Part '{part.partname}' already exists")
        self._parts[key] = part
        logger.debug("Registered part %s (%s)", part.partname, part.content_type)

    def remove_part(self, partname: str) -> Part:
        """Drop a part. Relationships that point at it are left in place.

        Raises:
            KeyError: No such part.
        """
        self._begin_mutation()
        part = self._parts.pop(PackURI(partname).key)
        self.content_types.remove_override(part.partname)
        logger.debug("Removed part %s", part.partname)
        return part

    def get_part(self, partname: str) -> Part | None:
        return self._parts.get(PackURI(partname).key)

    def require_part(self, partname: str) -> Part:
        part = self.get_part(partname)
        if part is None:
            raise KeyError(f"No part named '{partname}'")
        return part

    def has_part(self, partname: str) -> bool:
        return PackURI(partname).key in self._parts

    def iter_parts(self) -> Iterator[Part]:
        return iter(self._parts.values())

    def part_paths(self) -> list[PackURI]:
        return [part.partname for part in self._parts.values()]

    def __len__(self) -> int:
        return len(self._parts)

    def __contains__(self, partname: object) -> bool:
        return isinstance(partname, str) and partname.lower() in self._parts

    def next_partname(self, template: str) -> PackURI:
        """First unused part name for a ``%d`` template, counting from 1.

        Example: ``next_partname("/ppt/slides/slide%d.xml")``.
        """
        idx = 1
        while self.has_part(template % idx):
            idx += 1
        return PackURI(template % idx)

    # -- relationships -----------------------------------------------------

    def rels_of(self, source: str) -> Relationships:
        """Relationship collection of a part, or of the package for "/".

        Raises:
            KeyError: ``source`` names no part.
        """
        if source == PACKAGE_URI:
            return self._rels
        return self.require_part(source).rels

    def add_relationship(
        self,
        source: str,
        reltype: str,
        target: str,
        mode: TargetMode = TargetMode.INTERNAL,
    ) -> str:
        """Add an edge from ``source`` and return its newly allocated rId.

        Args:
            source: Part name of the source part, or "/" for the package.
            reltype: Relationship type URI.
            target: Absolute part name for internal edges, any URI for
                external ones.
            mode: Internal or external target.
        """
        self._begin_mutation()
        rels = self.rels_of(source)
        if mode is TargetMode.INTERNAL:
            base_uri = "/" if source == PACKAGE_URI else PackURI(source).base_uri
            target_ref = PackURI(target).relative_ref(base_uri)
        else:
            target_ref = target
        rel = rels.add(reltype, target_ref, mode)
        logger.debug("Added %s from %s to %s", rel.rId, source, target)
        return rel.rId

    def relate(self, source: str, target: str, reltype: str) -> str:
        """rId of an internal edge ``source`` -> ``target``, reusing an existing one."""
        self._begin_mutation()
        if source == PACKAGE_URI:
            return self._rels.get_or_add(reltype, PackURI(target).relative_ref("/")).rId
        return self.require_part(source).relate_to(target, reltype)

    def remove_relationship(self, source: str, rId: str) -> Relationship:
        self._begin_mutation()
        rel = self.rels_of(source).remove(rId)
        self._loaded_dangling.discard((PackURI(source).key, rId))
        return rel

    def resolve_relationship(self, source: str, rId: str) -> Relationship:
        """Relationship ``rId`` of ``source``.

        Raises:
            InvalidRelationshipId: ``source`` has no such relationship.
        """
        return self.rels_of(source).get(rId)

    def related_part(self, source: str, rId: str) -> Part:
        """Target part of an internal relationship.

        Raises:
            DanglingRelationship: The target part does not exist.
        """
        rel = self.resolve_relationship(source, rId)
        target = rel.resolve_target(source)
        part = self.get_part(target)
        if part is None:
            raise DanglingRelationship(source, rId, target)
        return part

    def related_parts_by_type(self, source: str, reltype: str) -> list[Part]:
        """Existing target parts of ``source``'s internal edges of ``reltype``."""
        parts = []
        for rel in self.rels_of(source).by_type(reltype):
            if rel.is_external:
                continue
            part = self.get_part(rel.resolve_target(source))
            if part is not None:
                parts.append(part)
        return parts

    def iter_relationships(self) -> Iterator[tuple[str, Relationship]]:
        """(source, relationship) for the package and then every part."""
        for rel in self._rels:
            yield PACKAGE_URI, rel
        for part in self._parts.values():
            for rel in part.rels:
                yield part.partname, rel

    def dangling_relationships(self) -> list[tuple[str, Relationship, str]]:
        """(source, relationship, target) for internal edges to missing parts."""
        dangling = []
        for source, rel in self.iter_relationships():
            if rel.is_external:
                continue
            target = rel.resolve_target(source)
            if not self.has_part(target):
                dangling.append((source, rel, target))
        return dangling

    def record_loaded_dangling(self, source: str, rId: str) -> None:
        self._loaded_dangling.add((PackURI(source).key, rId))

    def was_dangling_on_load(self, source: str, rId: str) -> bool:
        return (PackURI(source).key, rId) in self._loaded_dangling

    def reachable_parts(self) -> list[Part]:
        """Parts reachable from the package root, breadth first in relationship order."""
        seen: set[str] = set()
        order: list[Part] = []
        queue: deque[str] = deque([PACKAGE_URI])
        while queue:
            source = queue.popleft()
            for rel in self.rels_of(source):
                if rel.is_external:
                    continue
                part = self.get_part(rel.resolve_target(source))
                if part is None or part.partname.key in seen:
                    continue
                seen.add(part.partname.key)
                order.append(part)
                queue.append(part.partname)
        return order

    def orphan_parts(self) -> list[Part]:
        """Parts no relationship chain from the root leads to."""
        reachable = {part.partname.key for part in self.reachable_parts()}
        return [part for key, part in self._parts.items() if key not in reachable]

    # -- presentation ------------------------------------------------------

    @property
    def main_document_part(self) -> PresentationPart:
        """The part the package-level officeDocument relationship points at.

        Raises:
            MalformedPackage: The relationship or its target is missing, or
                the target is not a presentation.
        """
        rel = self._rels.first_by_type(RT_OFFICE_DOCUMENT)
        if rel is None:
            raise MalformedPackage("Missing officeDocument relationship in _rels/.rels")
        part = self.get_part(rel.resolve_target(PACKAGE_URI))
        if part is None:
            raise MalformedPackage(
                f"Main document part not found: {rel.resolve_target(PACKAGE_URI)}"
            )
        if part.content_type not in PRESENTATION_CONTENT_TYPES or not isinstance(
            part, PresentationPart
        ):
            raise MalformedPackage(
                f"Main document part {part.partname} is not a presentation "
                f"({part.content_type})"
            )
        return part

    def __repr__(self) -> str:
        return f"<Package {len(self._parts)} parts, {self._state.value}>"
