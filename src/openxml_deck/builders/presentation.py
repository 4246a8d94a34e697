"""presentation.xml and the presentation-level property parts."""

from __future__ import annotations

from openxml_deck.builders.masters import MIN_MASTER_ID
from openxml_deck.builders.table import DEFAULT_TABLE_STYLE
from openxml_deck.config import DeckConfig
from openxml_deck.oxml import Element, OxmlElement, SubElement

NOTES_SIZE = (6858000, 9144000)


def build_presentation(master_rid: str, config: DeckConfig | None = None) -> Element:
    """``p:presentation`` with one slide master and no slides yet."""
    config = config or DeckConfig()
    size = config.slide_size
    presentation = OxmlElement(
        "p:presentation", {"saveSubsetFonts": True}, nsdecls=("a", "r", "p")
    )
    master_list = SubElement(presentation, "p:sldMasterIdLst")
    SubElement(master_list, "p:sldMasterId", {"id": MIN_MASTER_ID, "r:id": master_rid})
    SubElement(presentation, "p:sldSz", {"cx": size.cx, "cy": size.cy, "type": size.type})
    SubElement(presentation, "p:notesSz", {"cx": NOTES_SIZE[0], "cy": NOTES_SIZE[1]})

    text_style = SubElement(presentation, "p:defaultTextStyle")
    def_ppr = SubElement(text_style, "a:defPPr")
    SubElement(def_ppr, "a:defRPr", {"lang": config.language})
    lvl1 = SubElement(
        text_style,
        "a:lvl1pPr",
        {"marL": "0", "algn": "l", "defTabSz": "914400", "rtl": "0", "eaLnBrk": True},
    )
    SubElement(lvl1, "a:defRPr", {"sz": "1800", "kern": "1200"})
    return presentation


def build_presentation_properties() -> Element:
    return OxmlElement("p:presentationPr", nsdecls=("a", "r", "p"))


def build_view_properties() -> Element:
    view = OxmlElement("p:viewPr", nsdecls=("a", "r", "p"))
    normal = SubElement(view, "p:normalViewPr")
    SubElement(normal, "p:restoredLeft", {"sz": "15620"})
    SubElement(normal, "p:restoredTop", {"sz": "94660"})
    SubElement(view, "p:gridSpacing", {"cx": "76200", "cy": "76200"})
    return view


def build_table_styles() -> Element:
    return OxmlElement("a:tblStyleLst", {"def": DEFAULT_TABLE_STYLE}, nsdecls=("a",))
