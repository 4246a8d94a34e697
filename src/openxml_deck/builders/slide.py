"""Slide XML for the built-in layouts.

Placeholder geometry is defined for a 4:3 slide (9144000 EMU wide) and
scaled horizontally for wider slides.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from openxml_deck.builders.text import TextStyle, add_text_body
from openxml_deck.config import DeckConfig
from openxml_deck.errors import BuilderError
from openxml_deck.oxml import OxmlElement, SubElement

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openxml_deck.oxml import Element

BASE_SLIDE_WIDTH = 9144000


class SlideLayout(Enum):
    """Built-in slide layouts, in slide layout part order."""

    CENTERED_TITLE = "centered_title"
    TITLE_AND_CONTENT = "title_and_content"
    TITLE_AND_BIG_CONTENT = "title_and_big_content"
    TWO_COLUMN = "two_column"
    TITLE_ONLY = "title_only"
    BLANK = "blank"


@dataclass(frozen=True)
class Box:
    """Shape position and extent in EMU."""

    x: int
    y: int
    cx: int
    cy: int

    def scaled(self, factor: float) -> Box:
        if factor == 1:
            return self
        return Box(round(self.x * factor), self.y, round(self.cx * factor), self.cy)


TITLE_BOX = Box(457200, 274638, 8230200, 1143000)
COMPACT_TITLE_BOX = Box(457200, 274638, 8230200, 914400)
CENTERED_TITLE_BOX = Box(457200, 2743200, 8230200, 1371600)
CONTENT_BOX = Box(457200, 1600200, 8230200, 4572000)
BIG_CONTENT_BOX = Box(457200, 1189200, 8230200, 5668800)
LEFT_COLUMN_BOX = Box(457200, 1189200, 4115100, 5668800)
RIGHT_COLUMN_BOX = Box(4572300, 1189200, 4115100, 5668800)


@dataclass(frozen=True)
class LayoutSpec:
    """Placeholders a layout defines and the names its layout part carries."""

    name: str  # cSld name of the slide layout part
    type: str  # sldLayout type attribute
    title_type: str | None  # ph type of the title, None for no title
    title_box: Box | None
    body_boxes: tuple[Box, ...] = ()  # ph idx 1, 2, ...
    title_size: float | None = None  # overrides the deck default
    body_size: float | None = None


LAYOUT_SPECS: dict[SlideLayout, LayoutSpec] = {
    SlideLayout.CENTERED_TITLE: LayoutSpec(
        "Title Slide", "title", "ctrTitle", CENTERED_TITLE_BOX, title_size=54
    ),
    SlideLayout.TITLE_AND_CONTENT: LayoutSpec(
        "Title and Content", "obj", "title", TITLE_BOX, (CONTENT_BOX,)
    ),
    SlideLayout.TITLE_AND_BIG_CONTENT: LayoutSpec(
        "Title and Big Content", "obj", "title", COMPACT_TITLE_BOX, (BIG_CONTENT_BOX,)
    ),
    SlideLayout.TWO_COLUMN: LayoutSpec(
        "Two Content",
        "twoObj",
        "title",
        COMPACT_TITLE_BOX,
        (LEFT_COLUMN_BOX, RIGHT_COLUMN_BOX),
        body_size=24,
    ),
    SlideLayout.TITLE_ONLY: LayoutSpec("Title Only", "titleOnly", "title", TITLE_BOX),
    SlideLayout.BLANK: LayoutSpec("Blank", "blank", None, None),
}


@dataclass(frozen=True)
class SlideContent:
    """What goes on one slide.

    Attributes:
        layout: Which built-in layout the slide uses.
        title: Title text; ignored for blank slides.
        bullets: Body paragraphs, split across both columns for
            ``SlideLayout.TWO_COLUMN``.
        title_style: Title run formatting; unset sizes fall back to the
            layout and then the deck defaults.
        body_style: Bullet run formatting.
        notes: Speaker notes text, one paragraph per line.
    """

    layout: SlideLayout = SlideLayout.TITLE_AND_CONTENT
    title: str = ""
    bullets: Sequence[str] = field(default_factory=tuple)
    title_style: TextStyle = field(default_factory=TextStyle)
    body_style: TextStyle = field(default_factory=TextStyle)
    notes: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.bullets, str):
            raise BuilderError("bullets must be a sequence of strings, not a string")
        object.__setattr__(self, "bullets", tuple(self.bullets))
        if self.layout in (SlideLayout.TITLE_ONLY, SlideLayout.CENTERED_TITLE, SlideLayout.BLANK):
            if self.bullets:
                raise BuilderError(f"Layout {self.layout.name} has no body placeholder")


def split_two_column(bullets: Sequence[str]) -> tuple[list[str], list[str]]:
    """Left column gets the first ceil(n/2) items, the right column the rest."""
    left_count = math.ceil(len(bullets) / 2)
    return list(bullets[:left_count]), list(bullets[left_count:])


def body_columns(content: SlideContent) -> list[list[str]]:
    """Bullet lists for each body placeholder of the content's layout."""
    spec = LAYOUT_SPECS[content.layout]
    if len(spec.body_boxes) == 2:
        left, right = split_two_column(content.bullets)
        return [left, right]
    if len(spec.body_boxes) == 1:
        return [list(content.bullets)]
    return []


def add_group_shape_properties(spTree: Element) -> None:
    """The ``p:nvGrpSpPr``/``p:grpSpPr`` pair every shape tree starts with."""
    nvGrpSpPr = SubElement(spTree, "p:nvGrpSpPr")
    SubElement(nvGrpSpPr, "p:cNvPr", {"id": "1", "name": ""})
    SubElement(nvGrpSpPr, "p:cNvGrpSpPr")
    SubElement(nvGrpSpPr, "p:nvPr")
    grpSpPr = SubElement(spTree, "p:grpSpPr")
    xfrm = SubElement(grpSpPr, "a:xfrm")
    SubElement(xfrm, "a:off", {"x": "0", "y": "0"})
    SubElement(xfrm, "a:ext", {"cx": "0", "cy": "0"})
    SubElement(xfrm, "a:chOff", {"x": "0", "y": "0"})
    SubElement(xfrm, "a:chExt", {"cx": "0", "cy": "0"})


def add_xfrm(parent: Element, box: Box, tag: str = "a:xfrm") -> Element:
    xfrm = SubElement(parent, tag)
    SubElement(xfrm, "a:off", {"x": box.x, "y": box.y})
    SubElement(xfrm, "a:ext", {"cx": box.cx, "cy": box.cy})
    return xfrm


def add_placeholder(
    spTree: Element,
    shape_id: int,
    name: str,
    ph_attrs: dict[str, object],
    box: Box | None,
) -> Element:
    """Append a ``p:sp`` placeholder shape without a text body."""
    sp = SubElement(spTree, "p:sp")
    nvSpPr = SubElement(sp, "p:nvSpPr")
    SubElement(nvSpPr, "p:cNvPr", {"id": shape_id, "name": name})
    cNvSpPr = SubElement(nvSpPr, "p:cNvSpPr")
    SubElement(cNvSpPr, "a:spLocks", {"noGrp": True})
    nvPr = SubElement(nvSpPr, "p:nvPr")
    SubElement(nvPr, "p:ph", ph_attrs)
    spPr = SubElement(sp, "p:spPr")
    if box is not None:
        add_xfrm(spPr, box)
    return sp


def title_ph_attrs(title_type: str) -> dict[str, object]:
    return {"type": title_type}


def body_ph_attrs(idx: int, column_count: int) -> dict[str, object]:
    return {"sz": "half" if column_count > 1 else None, "idx": idx}


def new_slide_element() -> tuple[Element, Element]:
    """Empty ``p:sld`` and its shape tree."""
    sld = OxmlElement("p:sld", nsdecls=("a", "r", "p"))
    cSld = SubElement(sld, "p:cSld")
    spTree = SubElement(cSld, "p:spTree")
    add_group_shape_properties(spTree)
    return sld, spTree


def build_slide(
    content: SlideContent,
    config: DeckConfig | None = None,
    slide_width: int | None = None,
) -> Element:
    """Slide XML for ``content``.

    Args:
        content: Slide text, layout and formatting.
        config: Deck defaults for font sizes and language.
        slide_width: Slide width in EMU; defaults to the configured size.
    """
    config = config or DeckConfig()
    spec = LAYOUT_SPECS[content.layout]
    factor = (slide_width or config.slide_size.cx) / BASE_SLIDE_WIDTH
    sld, spTree = new_slide_element()

    shape_id = 2
    if spec.title_type is not None:
        sp = add_placeholder(
            spTree,
            shape_id,
            f"Title {shape_id - 1}",
            title_ph_attrs(spec.title_type),
            spec.title_box.scaled(factor),
        )
        style = content.title_style.with_size(spec.title_size or config.title_font_size)
        add_text_body(
            sp,
            [content.title],
            style,
            config.language,
            align="ctr" if spec.title_type == "ctrTitle" else None,
        )
        shape_id += 1

    columns = body_columns(content)
    body_style = content.body_style.with_size(spec.body_size or config.body_font_size)
    for idx, (box, bullets) in enumerate(zip(spec.body_boxes, columns), start=1):
        sp = add_placeholder(
            spTree,
            shape_id,
            f"Content Placeholder {shape_id - 1}",
            body_ph_attrs(idx, len(columns)),
            box.scaled(factor),
        )
        add_text_body(sp, bullets, body_style, config.language)
        shape_id += 1

    clrMapOvr = SubElement(sld, "p:clrMapOvr")
    SubElement(clrMapOvr, "a:masterClrMapping")
    return sld
