"""High-level operations: build, open, edit and serialize presentations."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from openxml_deck.assembler import assemble, ordered_parts
from openxml_deck.builders.chart import ChartSpec, build_chart, build_chart_frame
from openxml_deck.builders.docprops import (
    PresentationMetadata,
    build_app_properties,
    build_core_properties,
    update_app_counts,
)
from openxml_deck.builders.image import ImageSpec, build_picture, media_partname_template
from openxml_deck.builders.masters import build_slide_layout, build_slide_master, build_theme
from openxml_deck.builders.notes import build_notes_master, build_notes_slide
from openxml_deck.builders.presentation import (
    build_presentation,
    build_presentation_properties,
    build_table_styles,
    build_view_properties,
)
from openxml_deck.builders.slide import LAYOUT_SPECS, SlideContent, SlideLayout, build_slide
from openxml_deck.builders.table import TableSpec, build_table_frame
from openxml_deck.config import AssemblyOptions, DeckConfig
from openxml_deck.container import read_file, write_file
from openxml_deck.content_types import ContentTypeRegistry
from openxml_deck.errors import BuilderError
from openxml_deck.loader import load
from openxml_deck.namespaces import (
    CT_CHART,
    CT_CORE_PROPERTIES,
    CT_EXTENDED_PROPERTIES,
    CT_NOTES_MASTER,
    CT_NOTES_SLIDE,
    CT_PRES_PROPS,
    CT_PRESENTATION,
    CT_SLIDE,
    CT_SLIDE_LAYOUT,
    CT_SLIDE_MASTER,
    CT_TABLE_STYLES,
    CT_THEME,
    CT_VIEW_PROPS,
    RT_CHART,
    RT_CORE_PROPERTIES,
    RT_EXTENDED_PROPERTIES,
    RT_IMAGE,
    RT_NOTES_MASTER,
    RT_NOTES_SLIDE,
    RT_OFFICE_DOCUMENT,
    RT_PRES_PROPS,
    RT_SLIDE,
    RT_SLIDE_LAYOUT,
    RT_SLIDE_MASTER,
    RT_TABLE_STYLES,
    RT_THEME,
    RT_VIEW_PROPS,
)
from openxml_deck.oxml import Element, find, qn, text_of
from openxml_deck.package import Package
from openxml_deck.packuri import (
    CONTENT_TYPES_URI,
    PACKAGE_URI,
    PackURI,
    is_rels_uri,
    source_uri_for_rels,
)
from openxml_deck.parts import Opaque, Part, PresentationPart, SlidePart
from openxml_deck.relationships import Relationships

if TYPE_CHECKING:
    from openxml_deck.builders.slide import LayoutSpec

logger = logging.getLogger(__name__)

PRESENTATION_URI = PackURI("/ppt/presentation.xml")
MASTER_URI = PackURI("/ppt/slideMasters/slideMaster1.xml")
CORE_PROPS_URI = PackURI("/docProps/core.xml")
APP_PROPS_URI = PackURI("/docProps/app.xml")


def _relationships_to(
    source: PackURI, targets: list[tuple[str, PackURI]]
) -> tuple[Relationships, list[str]]:
    """Relationships of a part that does not exist yet, plus their rIds."""
    rels = Relationships(source)
    rids = [
        rels.add(reltype, target.relative_ref(source.base_uri)).rId
        for reltype, target in targets
    ]
    return rels, rids


def create_package(
    metadata: PresentationMetadata | None = None,
    config: DeckConfig | None = None,
    **fields: Any,
) -> Package:
    """New package with a master, the built-in layouts, a theme and no slides.

    Keyword arguments are shorthand for :class:`PresentationMetadata` fields:
    ``create_package(title="Demo")``.
    """
    if metadata is None:
        metadata = PresentationMetadata(**fields)
    elif fields:
        raise TypeError("Pass either a PresentationMetadata or metadata keywords, not both")
    config = config or DeckConfig()
    package = Package(config)

    theme_uri = PackURI("/ppt/theme/theme1.xml")
    package.new_part(theme_uri, CT_THEME, build_theme(config.theme_name))

    layout_uris = []
    for idx, layout in enumerate(SlideLayout, start=1):
        layout_uri = PackURI(f"/ppt/slideLayouts/slideLayout{idx}.xml")
        package.new_part(layout_uri, CT_SLIDE_LAYOUT, build_slide_layout(layout, config))
        package.relate(layout_uri, MASTER_URI, RT_SLIDE_MASTER)
        layout_uris.append(layout_uri)

    master_rels, layout_rids = _relationships_to(
        MASTER_URI, [(RT_SLIDE_LAYOUT, uri) for uri in layout_uris]
    )
    master = package.new_part(MASTER_URI, CT_SLIDE_MASTER, build_slide_master(layout_rids, config))
    master.rels = master_rels
    package.relate(MASTER_URI, theme_uri, RT_THEME)

    pres_rels, (master_rid,) = _relationships_to(PRESENTATION_URI, [(RT_SLIDE_MASTER, MASTER_URI)])
    presentation = package.new_part(
        PRESENTATION_URI, CT_PRESENTATION, build_presentation(master_rid, config)
    )
    presentation.rels = pres_rels
    for name, content_type, reltype, element in (
        ("presProps", CT_PRES_PROPS, RT_PRES_PROPS, build_presentation_properties()),
        ("viewProps", CT_VIEW_PROPS, RT_VIEW_PROPS, build_view_properties()),
        ("tableStyles", CT_TABLE_STYLES, RT_TABLE_STYLES, build_table_styles()),
    ):
        uri = PackURI(f"/ppt/{name}.xml")
        package.new_part(uri, content_type, element)
        package.relate(PRESENTATION_URI, uri, reltype)
    package.relate(PRESENTATION_URI, theme_uri, RT_THEME)

    package.new_part(CORE_PROPS_URI, CT_CORE_PROPERTIES, build_core_properties(metadata))
    package.new_part(APP_PROPS_URI, CT_EXTENDED_PROPERTIES, build_app_properties(metadata, config))
    package.relate(PACKAGE_URI, PRESENTATION_URI, RT_OFFICE_DOCUMENT)
    package.relate(PACKAGE_URI, CORE_PROPS_URI, RT_CORE_PROPERTIES)
    package.relate(PACKAGE_URI, APP_PROPS_URI, RT_EXTENDED_PROPERTIES)

    logger.debug("Created package '%s' with %d parts", metadata.title, len(package))
    return package


def _find_layout(package: Package, presentation: PresentationPart, layout: SlideLayout) -> Part:
    """Layout part for ``layout``: matched by name first, then by layout type."""
    spec: LayoutSpec = LAYOUT_SPECS[layout]
    candidates: list[Part] = []
    for master in package.related_parts_by_type(presentation.partname, RT_SLIDE_MASTER):
        candidates.extend(package.related_parts_by_type(master.partname, RT_SLIDE_LAYOUT))
    for candidate in candidates:
        if isinstance(candidate, SlidePart) and candidate.name == spec.name:
            return candidate
    for candidate in candidates:
        if candidate.is_structured and candidate.xml.get("type") == spec.type:
            return candidate
    raise BuilderError(f"Package has no slide layout for {layout.name}")


def _slide_part(package: Package, slide_id: int) -> SlidePart:
    presentation = package.main_document_part
    for candidate_id, rId in presentation.slide_ids:
        if candidate_id == slide_id:
            part = package.related_part(presentation.partname, rId)
            if not isinstance(part, SlidePart):
                raise TypeError(f"Slide {slide_id} target {part.partname} is not a slide")
            return part
    raise KeyError(f"No slide with id {slide_id}")


def _ensure_notes_master(package: Package, presentation: PresentationPart) -> PackURI:
    rId = presentation.notes_master_rid
    if rId is not None:
        return package.related_part(presentation.partname, rId).partname

    theme_uri = package.next_partname("/ppt/theme/theme%d.xml")
    package.new_part(theme_uri, CT_THEME, build_theme(package.config.theme_name))
    master_uri = package.next_partname("/ppt/notesMasters/notesMaster%d.xml")
    package.new_part(master_uri, CT_NOTES_MASTER, build_notes_master(package.config))
    package.relate(master_uri, theme_uri, RT_THEME)
    rId = package.relate(presentation.partname, master_uri, RT_NOTES_MASTER)
    presentation.set_notes_master(rId)
    return master_uri


def _add_notes(
    package: Package, presentation: PresentationPart, slide: SlidePart, notes: Element
) -> None:
    master_uri = _ensure_notes_master(package, presentation)
    notes_uri = package.next_partname("/ppt/notesSlides/notesSlide%d.xml")
    package.new_part(notes_uri, CT_NOTES_SLIDE, notes)
    package.relate(notes_uri, master_uri, RT_NOTES_MASTER)
    package.relate(notes_uri, slide.partname, RT_SLIDE)
    package.relate(slide.partname, notes_uri, RT_NOTES_SLIDE)


def _refresh_app_counts(package: Package) -> None:
    app = package.related_parts_by_type(PACKAGE_URI, RT_EXTENDED_PROPERTIES)
    if not app or not app[0].is_structured:
        return
    slides = sum(1 for part in package.iter_parts() if part.content_type == CT_SLIDE)
    notes = sum(1 for part in package.iter_parts() if part.content_type == CT_NOTES_SLIDE)
    update_app_counts(app[0].xml, slides, notes)


def add_slide(package: Package, content: SlideContent | None = None, **fields: Any) -> int:
    """Append a slide and return its slide id.

    Keyword arguments are shorthand for :class:`SlideContent` fields:
    ``add_slide(package, layout=SlideLayout.TITLE_ONLY, title="Hi")``.

    Raises:
        InvalidStateError: The package has already been assembled.
        BuilderError: The content is inconsistent or the package has no
            matching slide layout.
    """
    if content is None:
        content = SlideContent(**fields)
    elif fields:
        raise TypeError("Pass either a SlideContent or slide keywords, not both")
    package.touch()
    presentation = package.main_document_part
    layout_part = _find_layout(package, presentation, content.layout)
    element = build_slide(content, package.config, presentation.slide_size[0])
    notes = build_notes_slide(content.notes, package.config) if content.notes else None

    slide_uri = package.next_partname("/ppt/slides/slide%d.xml")
    slide = package.new_part(slide_uri, CT_SLIDE, element)
    package.relate(slide_uri, layout_part.partname, RT_SLIDE_LAYOUT)
    rId = package.relate(presentation.partname, slide_uri, RT_SLIDE)
    slide_id = presentation.add_slide_id(rId)
    if notes is not None:
        _add_notes(package, presentation, slide, notes)
    _refresh_app_counts(package)
    logger.debug("Added slide %d (%s) as %s", slide_id, content.layout.name, slide_uri)
    return slide_id


def add_table(package: Package, slide_id: int, table: TableSpec) -> int:
    """Place a table on a slide and return the new shape id."""
    package.touch()
    slide = _slide_part(package, slide_id)
    shape_id = slide.next_shape_id
    slide.append_shape(build_table_frame(table, shape_id, lang=package.config.language))
    return shape_id


def add_chart(package: Package, slide_id: int, chart: ChartSpec) -> str:
    """Add a chart part, place it on a slide and return the slide's rId for it."""
    package.touch()
    slide = _slide_part(package, slide_id)
    chart_uri = package.next_partname("/ppt/charts/chart%d.xml")
    package.new_part(chart_uri, CT_CHART, build_chart(chart))
    rId = package.relate(slide.partname, chart_uri, RT_CHART)
    slide.append_shape(build_chart_frame(rId, chart.box, slide.next_shape_id))
    return rId


def _find_media(package: Package, sha1: str) -> Part | None:
    for part in package.iter_parts():
        if not isinstance(part.payload, Opaque):
            continue
        if not part.partname.key.startswith("/ppt/media/"):
            continue
        if hashlib.sha1(part.blob).hexdigest() == sha1:
            return part
    return None


def add_image(package: Package, slide_id: int, image: ImageSpec) -> str:
    """Place a picture on a slide and return the slide's rId for its media part.

    Identical image bytes share one media part across the package.
    """
    fmt = image.image_format()
    package.touch()
    slide = _slide_part(package, slide_id)
    pic = build_picture("", image.box, slide.next_shape_id, description=image.description)
    media = _find_media(package, image.sha1)
    if media is None:
        media_uri = package.next_partname(media_partname_template(fmt))
        media = package.add_part(Part(media_uri, fmt.content_type, Opaque(image.data)))
    rId = package.relate(slide.partname, media.partname, RT_IMAGE)
    find(pic, "p:blipFill/a:blip").set(qn("r:embed"), rId)
    slide.append_shape(pic)
    return rId


def serialize(package: Package, options: AssemblyOptions | None = None) -> bytes:
    """Assemble ``package`` into .pptx bytes."""
    return assemble(package, options)


def open(data: bytes, config: DeckConfig | None = None) -> Package:
    """Load a package from .pptx bytes."""
    return load(data, config)


def open_path(path: str | Path, config: DeckConfig | None = None) -> Package:
    return load(read_file(path), config)


def save(package: Package, path: str | Path, options: AssemblyOptions | None = None) -> None:
    write_file(path, serialize(package, options))


def get_part(package: Package, uri: str) -> bytes:
    """Bytes of a part as they would be written.

    Also answers for "/[Content_Types].xml" and for relationship parts.

    Raises:
        KeyError: No such part.
    """
    uri = PackURI(uri)
    if uri.key == CONTENT_TYPES_URI.key:
        return ContentTypeRegistry.for_parts(package.iter_parts()).to_xml()
    if is_rels_uri(uri):
        rels = package.rels_of(source_uri_for_rels(uri))
        if not len(rels):
            raise KeyError(f"No part named '{uri}'")
        return rels.to_xml()
    return package.require_part(uri).blob


def part_paths(package: Package) -> list[str]:
    """Part names in write order."""
    return [str(part.partname) for part in ordered_parts(package)]


def slide_ids(package: Package) -> list[int]:
    return [slide_id for slide_id, _ in package.main_document_part.slide_ids]


def slide_text(package: Package, slide_id: int) -> str:
    """Text of a slide's shapes, one line per paragraph."""
    return _slide_part(package, slide_id).text


def slide_title(package: Package, slide_id: int) -> str:
    slide = _slide_part(package, slide_id)
    for ph in slide.placeholders():
        if ph.get("type") in ("title", "ctrTitle"):
            sp = ph.getparent().getparent().getparent()
            txBody = find(sp, "p:txBody")
            return "" if txBody is None else text_of(txBody)
    return ""
