"""OPC part handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from openxml_deck.namespaces import (
    CT_NOTES_MASTER,
    CT_NOTES_SLIDE,
    CT_SLIDE,
    CT_SLIDE_LAYOUT,
    CT_SLIDE_MASTER,
    PRESENTATION_CONTENT_TYPES,
)
from openxml_deck.oxml import (
    Element,
    SubElement,
    find,
    findall,
    iter_elements,
    parse_xml,
    qn,
    serialize_xml,
    text_of,
)
from openxml_deck.packuri import PackURI
from openxml_deck.relationships import Relationships

if TYPE_CHECKING:
    from collections.abc import Iterator

# First slide id PowerPoint assigns; ids below 256 are reserved
MIN_SLIDE_ID = 256


class Structured:
    """XML payload, parsed on first access.

    Until :attr:`element` is read the original bytes are kept and written
    back unchanged, so parts nobody looks at round-trip byte for byte.
    """

    def __init__(
        self,
        blob: bytes | None = None,
        element: Element | None = None,
        partname: str | None = None,
    ):
        if (blob is None) == (element is None):
            raise ValueError("Structured payload needs exactly one of blob or element")
        self._blob = blob
        self._element = element
        self._partname = partname

    @property
    def element(self) -> Element:
        if self._element is None:
            self._element = parse_xml(self._blob, part=self._partname)
            self._blob = None
        return self._element

    @property
    def is_materialized(self) -> bool:
        return self._element is not None

    @property
    def blob(self) -> bytes:
        if self._element is None:
            return self._blob
        return serialize_xml(self._element)


@dataclass
class Opaque:
    """Binary or foreign payload, carried byte for byte."""

    blob: bytes


Payload = Union[Structured, Opaque]


def is_xml_content_type(content_type: str) -> bool:
    return content_type.endswith("+xml") or content_type in (
        "application/xml",
        "text/xml",
    )


class Part:
    """A part within an OPC package."""

    def __init__(self, partname: str, content_type: str, payload: Payload):
        self._partname = PackURI(partname)
        self._content_type = content_type
        self._payload = payload
        self._rels = Relationships(self._partname)

    @classmethod
    def from_blob(cls, partname: str, content_type: str, blob: bytes) -> Part:
        """Part from serialized bytes: Structured for XML content types, Opaque otherwise."""
        if is_xml_content_type(content_type):
            payload: Payload = Structured(blob=blob, partname=partname)
        else:
            payload = Opaque(blob)
        return cls(partname, content_type, payload)

    @classmethod
    def from_element(cls, partname: str, content_type: str, element: Element) -> Part:
        return cls(partname, content_type, Structured(element=element))

    @property
    def partname(self) -> PackURI:
        return self._partname

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def payload(self) -> Payload:
        return self._payload

    @property
    def rels(self) -> Relationships:
        return self._rels

    @rels.setter
    def rels(self, rels: Relationships) -> None:
        self._rels = rels

    @property
    def is_structured(self) -> bool:
        return isinstance(self._payload, Structured)

    @property
    def xml(self) -> Element:
        """The part's XML tree.

        Raises:
            TypeError: The part carries opaque bytes.
        """
        if not isinstance(self._payload, Structured):
            raise TypeError(f"Part '{self._partname}' is not an XML part")
        return self._payload.element

    @property
    def blob(self) -> bytes:
        return self._payload.blob

    def relate_to(self, target: str, reltype: str) -> str:
        """rId of an internal relationship to ``target``, adding one if needed."""
        target_ref = PackURI(target).relative_ref(self._partname.base_uri)
        return self._rels.get_or_add(reltype, target_ref).rId

    def target_partnames(self) -> Iterator[PackURI]:
        for rel in self._rels:
            if not rel.is_external:
                yield rel.resolve_target(self._partname)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._partname} ({self._content_type})>"


class PresentationPart(Part):
    """The main presentation part (ppt/presentation.xml)."""

    @property
    def slide_ids(self) -> list[tuple[int, str]]:
        """(slide id, rId) pairs in presentation order."""
        slides = []
        for sld_id in findall(self.xml, "p:sldIdLst/p:sldId"):
            id_val = sld_id.get("id")
            rel_id = sld_id.get(qn("r:id"))
            if id_val and rel_id:
                slides.append((int(id_val), rel_id))
        return slides

    @property
    def slide_master_ids(self) -> list[tuple[str, str]]:
        """(id, rId) pairs for all slide masters; the id may be empty."""
        masters = []
        for master_id in findall(self.xml, "p:sldMasterIdLst/p:sldMasterId"):
            rel_id = master_id.get(qn("r:id"), "")
            if rel_id:
                masters.append((master_id.get("id", ""), rel_id))
        return masters

    @property
    def notes_master_rid(self) -> str | None:
        notes_master_id = find(self.xml, "p:notesMasterIdLst/p:notesMasterId")
        if notes_master_id is None:
            return None
        return notes_master_id.get(qn("r:id"))

    @property
    def slide_size(self) -> tuple[int, int]:
        sld_sz = find(self.xml, "p:sldSz")
        if sld_sz is None:
            return 9144000, 6858000
        return int(sld_sz.get("cx")), int(sld_sz.get("cy"))

    def add_slide_id(self, rId: str) -> int:
        """Append a slide to the slide list and return its new slide id."""
        sld_id_lst = find(self.xml, "p:sldIdLst")
        if sld_id_lst is None:
            sld_id_lst = self._insert_after(
                "p:sldIdLst", ("p:sldMasterIdLst", "p:notesMasterIdLst", "p:handoutMasterIdLst")
            )
        used = [slide_id for slide_id, _ in self.slide_ids]
        new_id = max([MIN_SLIDE_ID, *used]) + 1
        SubElement(sld_id_lst, "p:sldId", {"id": new_id, "r:id": rId})
        return new_id

    def set_notes_master(self, rId: str) -> None:
        if find(self.xml, "p:notesMasterIdLst") is not None:
            return
        lst = self._insert_after("p:notesMasterIdLst", ("p:sldMasterIdLst",))
        SubElement(lst, "p:notesMasterId", {"r:id": rId})

    def _insert_after(self, tag: str, predecessors: tuple[str, ...]) -> Element:
        new = SubElement(self.xml, tag)
        anchor = None
        for name in predecessors:
            candidate = find(self.xml, name)
            if candidate is not None:
                anchor = candidate
        if anchor is None:
            self.xml.insert(0, new)
        else:
            anchor.addnext(new)
        return new


class SlidePart(Part):
    """A slide, slide layout, slide master or notes part with a shape tree."""

    @property
    def shape_tree(self) -> Element:
        return find(self.xml, "p:cSld/p:spTree")

    @property
    def name(self) -> str:
        c_sld = find(self.xml, "p:cSld")
        return "" if c_sld is None else c_sld.get("name", "")

    @property
    def next_shape_id(self) -> int:
        """One more than the highest shape id on the slide."""
        ids = [
            int(c_nv_pr.get("id"))
            for c_nv_pr in iter_elements(self.xml, "p:cNvPr")
            if (c_nv_pr.get("id") or "").isdigit()
        ]
        return max(ids, default=0) + 1

    def append_shape(self, shape: Element) -> Element:
        """Add a shape to the end of the shape tree, ahead of any extension list."""
        tree = self.shape_tree
        ext_lst = find(tree, "p:extLst")
        if ext_lst is not None:
            ext_lst.addprevious(shape)
        else:
            tree.append(shape)
        return shape

    def placeholders(self) -> Iterator[Element]:
        """``p:ph`` elements of the shapes in the shape tree."""
        return iter(iter_elements(self.shape_tree, "p:ph"))

    @property
    def text(self) -> str:
        """Paragraph text of every shape, one line per paragraph."""
        lines = []
        for paragraph in iter_elements(self.shape_tree, "a:p"):
            lines.append(text_of(paragraph))
        return "\n".join(lines)


_PART_CLASSES: dict[str, type[Part]] = {
    CT_SLIDE: SlidePart,
    CT_SLIDE_LAYOUT: SlidePart,
    CT_SLIDE_MASTER: SlidePart,
    CT_NOTES_SLIDE: SlidePart,
    CT_NOTES_MASTER: SlidePart,
    **{ct: PresentationPart for ct in PRESENTATION_CONTENT_TYPES},
}


def part_class_for(content_type: str) -> type[Part]:
    """Part subclass that knows how to work with ``content_type``."""
    return _PART_CLASSES.get(content_type, Part)
