"""Slide master, slide layouts and the Office theme every new deck starts with."""

from __future__ import annotations

from typing import TYPE_CHECKING

from openxml_deck.builders.slide import (
    BASE_SLIDE_WIDTH,
    CONTENT_BOX,
    LAYOUT_SPECS,
    TITLE_BOX,
    SlideLayout,
    add_group_shape_properties,
    add_placeholder,
    body_ph_attrs,
    title_ph_attrs,
)
from openxml_deck.builders.text import TextStyle, add_text_body
from openxml_deck.config import DeckConfig
from openxml_deck.oxml import OxmlElement, SubElement

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openxml_deck.oxml import Element

# Slide master and slide layout ids share one space starting here
MIN_MASTER_ID = 2147483648

_COLOR_MAP = {
    "bg1": "lt1",
    "tx1": "dk1",
    "bg2": "lt2",
    "tx2": "dk2",
    "accent1": "accent1",
    "accent2": "accent2",
    "accent3": "accent3",
    "accent4": "accent4",
    "accent5": "accent5",
    "accent6": "accent6",
    "hlink": "hlink",
    "folHlink": "folHlink",
}

# (name, srgbClr) in clrScheme order; dk1/lt1 use system colors
_THEME_COLORS = (
    ("dk2", "44546A"),
    ("lt2", "E7E6E6"),
    ("accent1", "4472C4"),
    ("accent2", "ED7D31"),
    ("accent3", "A5A5A5"),
    ("accent4", "FFC000"),
    ("accent5", "5B9BD5"),
    ("accent6", "70AD47"),
    ("hlink", "0563C1"),
    ("folHlink", "954F72"),
)


def add_color_map(parent: Element) -> Element:
    return SubElement(parent, "p:clrMap", _COLOR_MAP)


def _factor(config: DeckConfig) -> float:
    return config.slide_size.cx / BASE_SLIDE_WIDTH


def build_slide_master(layout_rids: Sequence[str], config: DeckConfig | None = None) -> Element:
    """``p:sldMaster`` listing the given layout relationships in order."""
    config = config or DeckConfig()
    factor = _factor(config)
    master = OxmlElement("p:sldMaster", nsdecls=("a", "r", "p"))
    cSld = SubElement(master, "p:cSld")
    bg = SubElement(cSld, "p:bg")
    bgRef = SubElement(bg, "p:bgRef", {"idx": "1001"})
    SubElement(bgRef, "a:schemeClr", {"val": "bg1"})
    spTree = SubElement(cSld, "p:spTree")
    add_group_shape_properties(spTree)
    title = add_placeholder(spTree, 2, "Title Placeholder 1", {"type": "title"}, TITLE_BOX.scaled(factor))
    add_text_body(title, ["Click to edit Master title style"], TextStyle(), config.language)
    body = add_placeholder(
        spTree, 3, "Text Placeholder 2", {"type": "body", "idx": 1}, CONTENT_BOX.scaled(factor)
    )
    add_text_body(body, ["Click to edit Master text styles"], TextStyle(), config.language)
    add_color_map(master)

    layout_id_lst = SubElement(master, "p:sldLayoutIdLst")
    for offset, rId in enumerate(layout_rids, start=1):
        SubElement(layout_id_lst, "p:sldLayoutId", {"id": MIN_MASTER_ID + offset, "r:id": rId})

    txStyles = SubElement(master, "p:txStyles")
    title_style = SubElement(txStyles, "p:titleStyle")
    lvl1 = SubElement(title_style, "a:lvl1pPr", {"algn": "l", "rtl": "0"})
    SubElement(lvl1, "a:defRPr", {"sz": config.title_font_size * 100, "kern": "1200"})
    body_style = SubElement(txStyles, "p:bodyStyle")
    lvl1 = SubElement(body_style, "a:lvl1pPr", {"marL": "342900", "indent": "-342900", "algn": "l"})
    SubElement(lvl1, "a:buFont", {"typeface": "Arial"})
    SubElement(lvl1, "a:buChar", {"char": "•"})
    SubElement(lvl1, "a:defRPr", {"sz": config.body_font_size * 100, "kern": "1200"})
    other_style = SubElement(txStyles, "p:otherStyle")
    lvl1 = SubElement(other_style, "a:lvl1pPr", {"marL": "0", "algn": "l"})
    SubElement(lvl1, "a:defRPr", {"sz": "1800", "kern": "1200"})
    return master


def build_slide_layout(layout: SlideLayout, config: DeckConfig | None = None) -> Element:
    """``p:sldLayout`` with the placeholders slides of ``layout`` fill in."""
    config = config or DeckConfig()
    factor = _factor(config)
    spec = LAYOUT_SPECS[layout]
    sld_layout = OxmlElement(
        "p:sldLayout", {"type": spec.type, "preserve": True}, nsdecls=("a", "r", "p")
    )
    cSld = SubElement(sld_layout, "p:cSld", {"name": spec.name})
    spTree = SubElement(cSld, "p:spTree")
    add_group_shape_properties(spTree)

    shape_id = 2
    if spec.title_type is not None:
        add_placeholder(
            spTree,
            shape_id,
            f"Title {shape_id - 1}",
            title_ph_attrs(spec.title_type),
            spec.title_box.scaled(factor),
        )
        shape_id += 1
    for idx, box in enumerate(spec.body_boxes, start=1):
        add_placeholder(
            spTree,
            shape_id,
            f"Content Placeholder {shape_id - 1}",
            body_ph_attrs(idx, len(spec.body_boxes)),
            box.scaled(factor),
        )
        shape_id += 1

    clrMapOvr = SubElement(sld_layout, "p:clrMapOvr")
    SubElement(clrMapOvr, "a:masterClrMapping")
    return sld_layout


def _add_fill_styles(parent: Element, tag: str) -> None:
    styles = SubElement(parent, tag)
    for _ in range(3):
        fill = SubElement(styles, "a:solidFill")
        SubElement(fill, "a:schemeClr", {"val": "phClr"})


def build_theme(name: str = "Office Theme") -> Element:
    """``a:theme`` with the Office color, font and format schemes."""
    theme = OxmlElement("a:theme", {"name": name}, nsdecls=("a",))
    elements = SubElement(theme, "a:themeElements")

    clr_scheme = SubElement(elements, "a:clrScheme", {"name": "Office"})
    dk1 = SubElement(clr_scheme, "a:dk1")
    SubElement(dk1, "a:sysClr", {"val": "windowText", "lastClr": "000000"})
    lt1 = SubElement(clr_scheme, "a:lt1")
    SubElement(lt1, "a:sysClr", {"val": "window", "lastClr": "FFFFFF"})
    for color_name, rgb in _THEME_COLORS:
        color = SubElement(clr_scheme, f"a:{color_name}")
        SubElement(color, "a:srgbClr", {"val": rgb})

    font_scheme = SubElement(elements, "a:fontScheme", {"name": "Office"})
    for tag, typeface in (("a:majorFont", "Calibri Light"), ("a:minorFont", "Calibri")):
        font = SubElement(font_scheme, tag)
        SubElement(font, "a:latin", {"typeface": typeface})
        SubElement(font, "a:ea", {"typeface": ""})
        SubElement(font, "a:cs", {"typeface": ""})

    fmt_scheme = SubElement(elements, "a:fmtScheme", {"name": "Office"})
    _add_fill_styles(fmt_scheme, "a:fillStyleLst")
    ln_styles = SubElement(fmt_scheme, "a:lnStyleLst")
    for width in (6350, 12700, 19050):
        ln = SubElement(ln_styles, "a:ln", {"w": width})
        fill = SubElement(ln, "a:solidFill")
        SubElement(fill, "a:schemeClr", {"val": "phClr"})
    effect_styles = SubElement(fmt_scheme, "a:effectStyleLst")
    for _ in range(3):
        effect = SubElement(effect_styles, "a:effectStyle")
        SubElement(effect, "a:effectLst")
    _add_fill_styles(fmt_scheme, "a:bgFillStyleLst")

    SubElement(theme, "a:objectDefaults")
    SubElement(theme, "a:extraClrSchemeLst")
    return theme

