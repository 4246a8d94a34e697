"""Structural checks for known PresentationML part types.

Only the required children and attributes this package relies on are
checked; this is not a full schema validator.
"""

from __future__ import annotations

from typing import Callable

from openxml_deck.errors import SchemaViolation
from openxml_deck.namespaces import (
    CT_NOTES_SLIDE,
    CT_SLIDE,
    CT_SLIDE_LAYOUT,
    CT_SLIDE_MASTER,
    PRESENTATION_CONTENT_TYPES,
)
from openxml_deck.oxml.tree import Element, find, findall, local_name, qn

R_ID = qn("r:id")


def _require_root(xml: Element, nsptag: str, part: str) -> None:
    if xml.tag != qn(nsptag):
        raise SchemaViolation(
            f"Root element should be '{nsptag}', got '{local_name(xml)}'",
            part=part,
            node=local_name(xml),
        )


def _require_child(xml: Element, path: str, part: str) -> Element:
    child = find(xml, path)
    if child is None:
        raise SchemaViolation(
            f"Missing required element '{path}'", part=part, node=path
        )
    return child


def _require_attr(xml: Element, name: str, part: str) -> str:
    value = xml.get(qn(name))
    if value is None:
        raise SchemaViolation(
            f"'{local_name(xml)}' missing required '{name}' attribute",
            part=part,
            node=name,
        )
    return value


def _check_shape_tree(xml: Element, part: str) -> None:
    cSld = _require_child(xml, "p:cSld", part)
    spTree = _require_child(cSld, "p:spTree", part)
    nvGrpSpPr = _require_child(spTree, "p:nvGrpSpPr", part)
    cNvPr = _require_child(nvGrpSpPr, "p:cNvPr", part)
    _require_attr(cNvPr, "id", part)
    _require_attr(cNvPr, "name", part)
    _require_child(spTree, "p:grpSpPr", part)


def check_presentation(xml: Element, part: str = "/ppt/presentation.xml") -> None:
    """Validate presentation.xml: master list, slide list entries."""
    _require_root(xml, "p:presentation", part)

    master_list = _require_child(xml, "p:sldMasterIdLst", part)
    master_ids = findall(master_list, "p:sldMasterId")
    if not master_ids:
        raise SchemaViolation(
            "sldMasterIdLst is empty - at least one slide master required",
            part=part,
            node="sldMasterIdLst",
        )
    for master_id in master_ids:
        _require_attr(master_id, "r:id", part)

    seen_ids: set[str] = set()
    for sld_id in findall(xml, "p:sldIdLst/p:sldId"):
        id_val = _require_attr(sld_id, "id", part)
        _require_attr(sld_id, "r:id", part)
        if id_val in seen_ids:
            raise SchemaViolation(f"Duplicate slide ID: {id_val}", part=part, node="id")
        seen_ids.add(id_val)

    _require_child(xml, "p:notesSz", part)


def check_slide(xml: Element, part: str) -> None:
    _require_root(xml, "p:sld", part)
    _check_shape_tree(xml, part)


def check_slide_layout(xml: Element, part: str) -> None:
    _require_root(xml, "p:sldLayout", part)
    _check_shape_tree(xml, part)


def check_slide_master(xml: Element, part: str) -> None:
    _require_root(xml, "p:sldMaster", part)
    _check_shape_tree(xml, part)
    _require_child(xml, "p:clrMap", part)
    for layout_id in findall(xml, "p:sldLayoutIdLst/p:sldLayoutId"):
        _require_attr(layout_id, "r:id", part)


def check_notes_slide(xml: Element, part: str) -> None:
    _require_root(xml, "p:notes", part)
    _check_shape_tree(xml, part)


_CHECKS: dict[str, Callable[[Element, str], None]] = {
    CT_SLIDE: check_slide,
    CT_SLIDE_LAYOUT: check_slide_layout,
    CT_SLIDE_MASTER: check_slide_master,
    CT_NOTES_SLIDE: check_notes_slide,
    **{ct: check_presentation for ct in PRESENTATION_CONTENT_TYPES},
}


def check_part_xml(content_type: str, xml: Element, part: str) -> None:
    """Run the structural check registered for ``content_type``, if any."""
    check = _CHECKS.get(content_type)
    if check is not None:
        check(xml, part)
