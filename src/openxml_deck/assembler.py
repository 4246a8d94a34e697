"""Write path: a :class:`~openxml_deck.package.Package` to container bytes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from openxml_deck.config import AssemblyOptions
from openxml_deck.container import ZipEntry, write_container
from openxml_deck.content_types import ContentTypeRegistry
from openxml_deck.errors import DanglingRelationship
from openxml_deck.media import PRECOMPRESSED_EXTENSIONS
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
    PRESENTATION_CONTENT_TYPES,
)
from openxml_deck.oxml import check_part_xml
from openxml_deck.packuri import CONTENT_TYPES_URI, PACKAGE_URI, natural_key
from openxml_deck.parts import Part, Structured, is_xml_content_type

if TYPE_CHECKING:
    from openxml_deck.package import Package

logger = logging.getLogger(__name__)

# Entry groups, in the order they are written
_GROUPS: dict[str, int] = {
    **{ct: 0 for ct in PRESENTATION_CONTENT_TYPES},
    CT_PRES_PROPS: 1,
    CT_VIEW_PROPS: 1,
    CT_TABLE_STYLES: 1,
    CT_SLIDE_MASTER: 2,
    CT_SLIDE_LAYOUT: 3,
    CT_SLIDE: 4,
    CT_NOTES_MASTER: 5,
    CT_NOTES_SLIDE: 5,
    CT_CHART: 6,
    CT_THEME: 7,
    CT_CORE_PROPERTIES: 8,
    CT_EXTENDED_PROPERTIES: 8,
}
_MEDIA_GROUP = 6
_OTHER_GROUP = 9


def _group(part: Part) -> int:
    group = _GROUPS.get(part.content_type)
    if group is not None:
        return group
    if part.content_type.startswith("image/") or part.partname.key.startswith("/ppt/media/"):
        return _MEDIA_GROUP
    return _OTHER_GROUP


def ordered_parts(package: Package) -> list[Part]:
    """Parts in the order they are written: by group, then naturally by name."""
    return sorted(
        package.iter_parts(),
        key=lambda part: (_group(part), natural_key(part.partname)),
    )


def check_package(package: Package, options: AssemblyOptions | None = None) -> None:
    """Run every assembly-time check without producing any bytes.

    Raises:
        MalformedPackage: The officeDocument relationship or the presentation
            part is missing.
        DanglingRelationship: An internal relationship targets a missing part
            and was not already dangling when the package was loaded.
        SchemaViolation: A built or edited part lacks required structure.
    """
    options = options or AssemblyOptions()
    _ = package.main_document_part

    if options.strict:
        for source, rel, target in package.dangling_relationships():
            if not package.was_dangling_on_load(source, rel.rId):
                raise DanglingRelationship(source, rel.rId, target)

    for part in package.iter_parts():
        payload = part.payload
        # Untouched loaded parts are written back as they came
        if isinstance(payload, Structured) and payload.is_materialized:
            check_part_xml(part.content_type, payload.element, part.partname)


def _compress(part: Part, options: AssemblyOptions) -> bool:
    if is_xml_content_type(part.content_type):
        return options.compress_xml
    return options.compress_media and part.partname.ext.lower() not in PRECOMPRESSED_EXTENSIONS


def build_entries(package: Package, options: AssemblyOptions | None = None) -> list[ZipEntry]:
    """Container entries for ``package``, in write order."""
    options = options or AssemblyOptions()
    parts = ordered_parts(package)
    content_types = ContentTypeRegistry.for_parts(parts)

    entries = [
        ZipEntry(CONTENT_TYPES_URI.membername, content_types.to_xml(), options.compress_xml),
        ZipEntry(PACKAGE_URI.rels_uri.membername, package.rels.to_xml(), options.compress_xml),
    ]
    for part in parts:
        entries.append(ZipEntry(part.partname.membername, part.blob, _compress(part, options)))
        if len(part.rels):
            entries.append(
                ZipEntry(part.partname.rels_uri.membername, part.rels.to_xml(), options.compress_xml)
            )
    return entries


def assemble(package: Package, options: AssemblyOptions | None = None) -> bytes:
    """Check ``package`` and write it to ZIP bytes.

    Every check runs before the first entry is produced, so a failing
    package never yields a partial archive. The package is ASSEMBLED
    afterwards; assembling it again yields the same bytes.
    """
    options = options or AssemblyOptions()
    check_package(package, options)
    entries = build_entries(package, options)
    data = write_container(entries)
    package.mark_assembled()
    logger.info("Assembled %d entries, %d bytes", len(entries), len(data))
    return data
