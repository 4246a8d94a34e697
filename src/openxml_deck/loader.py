"""Read path: container bytes to a :class:`~openxml_deck.package.Package`."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from openxml_deck.config import DeckConfig
from openxml_deck.container import ZipEntry, read_container
from openxml_deck.content_types import ContentTypeRegistry
from openxml_deck.errors import (
    InvalidRelationshipId,
    IssueKind,
    IssueSeverity,
    MalformedPackage,
    PackageIssue,
)
from openxml_deck.media import IMAGE_CONTENT_TYPES
from openxml_deck.namespaces import (
    CT_CHART,
    CT_CORE_PROPERTIES,
    CT_EXTENDED_PROPERTIES,
    CT_NOTES_MASTER,
    CT_NOTES_SLIDE,
    CT_PRES_PROPS,
    CT_SLIDE,
    CT_SLIDE_LAYOUT,
    CT_SLIDE_MASTER,
    CT_TABLE_STYLES,
    CT_THEME,
    CT_VIEW_PROPS,
    CT_XML,
    PRESENTATION_CONTENT_TYPES,
)
from openxml_deck.oxml import check_part_xml, findall, parse_xml, qn
from openxml_deck.package import Package, PackageState
from openxml_deck.packuri import (
    CONTENT_TYPES_URI,
    PACKAGE_URI,
    PackURI,
    is_rels_uri,
    source_uri_for_rels,
)
from openxml_deck.parts import Part, part_class_for
from openxml_deck.relationships import Relationships

if TYPE_CHECKING:
    from openxml_deck.parts import PresentationPart

logger = logging.getLogger(__name__)

KNOWN_CONTENT_TYPES = frozenset(
    {
        CT_CHART,
        CT_CORE_PROPERTIES,
        CT_EXTENDED_PROPERTIES,
        CT_NOTES_MASTER,
        CT_NOTES_SLIDE,
        CT_PRES_PROPS,
        CT_SLIDE,
        CT_SLIDE_LAYOUT,
        CT_SLIDE_MASTER,
        CT_TABLE_STYLES,
        CT_THEME,
        CT_VIEW_PROPS,
        CT_XML,
        *PRESENTATION_CONTENT_TYPES,
        *IMAGE_CONTENT_TYPES.values(),
    }
)

_PARSED_ON_LOAD = frozenset({CT_SLIDE, CT_SLIDE_LAYOUT, CT_SLIDE_MASTER})


class _Entries:
    """ZIP entries indexed by case-folded part name."""

    def __init__(self, entries: list[ZipEntry]):
        self.ordered: list[tuple[PackURI, bytes]] = []
        self._by_key: dict[str, tuple[PackURI, bytes]] = {}
        for entry in entries:
            uri = PackURI.from_member_name(entry.name)
            if uri.key in self._by_key:
                raise MalformedPackage(
                    f"Part names differ only in case: {self._by_key[uri.key][0]} and {uri}"
                )
            self._by_key[uri.key] = (uri, entry.data)
            self.ordered.append((uri, entry.data))

    def get(self, uri: str) -> tuple[PackURI, bytes] | None:
        return self._by_key.get(uri.lower())


def load(data: bytes, config: DeckConfig | None = None) -> Package:
    """Load a package from container bytes.

    Parts are read transitively from the package relationships, breadth
    first in relationship order; entries nothing leads to are added after
    that as orphans. Dangling relationships, orphans and parts of unknown
    content types are reported on ``Package.issues`` rather than raised.

    Raises:
        CorruptArchive: The bytes are not a readable ZIP archive.
        MalformedPackage: [Content_Types].xml, _rels/.rels, the
            officeDocument relationship, the presentation part, or a slide or
            slide master listed in presentation.xml is missing.
        NoContentType: An entry's content type cannot be resolved.
        XmlParseError: A content type, relationship, presentation, slide,
            slide layout or slide master part is not well-formed.
        InvalidRelationshipId: A .rels part repeats an id.
        SchemaViolation: presentation.xml lacks required structure.
    """
    entries = _Entries(read_container(data))

    ct_entry = entries.get(CONTENT_TYPES_URI)
    if ct_entry is None:
        raise MalformedPackage("Missing [Content_Types].xml")
    content_types = ContentTypeRegistry.from_xml(ct_entry[1])

    root_rels_entry = entries.get(PACKAGE_URI.rels_uri)
    if root_rels_entry is None:
        raise MalformedPackage("Missing _rels/.rels")

    package = Package(config, state=PackageState.LOADED)
    package.content_types = content_types
    package.rels = Relationships.from_xml(root_rels_entry[1], PACKAGE_URI)

    queue: deque[str] = deque([PACKAGE_URI])
    while queue:
        source = queue.popleft()
        for rel in package.rels_of(source):
            if rel.is_external:
                continue
            target = rel.resolve_target(source)
            if package.has_part(target):
                continue
            entry = entries.get(target)
            if entry is None or _is_package_metadata(entry[0]):
                continue
            part = _load_part(package, entries, *entry)
            queue.append(part.partname)

    for uri, blob in entries.ordered:
        if _is_package_metadata(uri) or package.has_part(uri):
            continue
        if is_rels_uri(uri) and _rels_source_exists(package, entries, uri):
            continue
        _load_part(package, entries, uri, blob)
        _report(
            package,
            PackageIssue(
                kind=IssueKind.ORPHAN_PART,
                description="Part is not reachable from the package relationships",
                part_uri=uri,
            ),
        )

    for source, rel, target in package.dangling_relationships():
        package.record_loaded_dangling(source, rel.rId)
        _report(
            package,
            PackageIssue(
                kind=IssueKind.DANGLING_RELATIONSHIP,
                description=f"Target '{target}' does not exist",
                part_uri=source,
                rId=rel.rId,
                target=target,
                severity=IssueSeverity.ERROR,
            ),
        )

    _check_presentation(package)
    _check_well_formed(package)
    logger.info("Loaded package: %d parts, %d issues", len(package), len(package.issues))
    return package


def _is_package_metadata(uri: PackURI) -> bool:
    return uri.key == CONTENT_TYPES_URI.key or uri.key == PACKAGE_URI.rels_uri.key


def _rels_source_exists(package: Package, entries: _Entries, rels_uri: PackURI) -> bool:
    source = source_uri_for_rels(rels_uri)
    return package.has_part(source) or entries.get(source) is not None


def _load_part(package: Package, entries: _Entries, uri: PackURI, blob: bytes) -> Part:
    content_type = package.content_types.resolve(uri)
    part = part_class_for(content_type).from_blob(uri, content_type, blob)
    rels_entry = entries.get(uri.rels_uri)
    if rels_entry is not None:
        part.rels = Relationships.from_xml(rels_entry[1], uri)
    package.adopt(part)
    if content_type not in KNOWN_CONTENT_TYPES:
        package.issues.append(
            PackageIssue(
                kind=IssueKind.FOREIGN_PART,
                description=f"Unrecognized content type '{content_type}', kept as is",
                part_uri=uri,
                severity=IssueSeverity.INFO,
            )
        )
    return part


def _report(package: Package, issue: PackageIssue) -> None:
    logger.warning("%s", issue)
    package.issues.append(issue)


def _check_presentation(package: Package) -> None:
    """The presentation part and the slides and masters it lists must exist."""
    presentation: PresentationPart = package.main_document_part
    # Parsed separately so the part itself keeps its original bytes
    xml = parse_xml(presentation.blob, part=presentation.partname)
    check_part_xml(presentation.content_type, xml, presentation.partname)

    listed = findall(xml, "p:sldMasterIdLst/p:sldMasterId") + findall(xml, "p:sldIdLst/p:sldId")
    for element in listed:
        rId = element.get(qn("r:id"))
        try:
            target = presentation.rels.target_uri(rId)
        except InvalidRelationshipId as exc:
            raise MalformedPackage(
                f"{presentation.partname} lists '{rId}', which has no relationship"
            ) from exc
        if not package.has_part(target):
            raise MalformedPackage(f"{presentation.partname} lists missing part {target}")


def _check_well_formed(package: Package) -> None:
    """Slides, layouts and masters must parse; their parts keep the loaded bytes."""
    for part in package.iter_parts():
        if part.content_type in _PARSED_ON_LOAD:
            parse_xml(part.blob, part=part.partname)
