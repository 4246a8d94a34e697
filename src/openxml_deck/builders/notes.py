"""Notes slides and the notes master."""

from __future__ import annotations

from openxml_deck.builders.masters import add_color_map
from openxml_deck.builders.slide import Box, add_group_shape_properties, add_placeholder
from openxml_deck.builders.text import TextStyle, add_text_body
from openxml_deck.config import DeckConfig
from openxml_deck.oxml import Element, OxmlElement, SubElement

NOTES_SLIDE_IMAGE_BOX = Box(1143000, 685800, 4572000, 3429000)
NOTES_BODY_BOX = Box(685800, 4343400, 5486400, 4114800)
NOTES_FONT_SIZE = 12


def _notes_root(tag: str) -> tuple[Element, Element]:
    root = OxmlElement(tag, nsdecls=("a", "r", "p"))
    cSld = SubElement(root, "p:cSld")
    spTree = SubElement(cSld, "p:spTree")
    add_group_shape_properties(spTree)
    return root, spTree


def build_notes_slide(text: str, config: DeckConfig | None = None) -> Element:
    """``p:notes`` with a slide image and one body paragraph per line of ``text``."""
    config = config or DeckConfig()
    notes, spTree = _notes_root("p:notes")
    add_placeholder(spTree, 2, "Slide Image Placeholder 1", {"type": "sldImg"}, None)
    body = add_placeholder(spTree, 3, "Notes Placeholder 2", {"type": "body", "idx": 1}, None)
    add_text_body(body, text.splitlines(), TextStyle(), config.language)
    clrMapOvr = SubElement(notes, "p:clrMapOvr")
    SubElement(clrMapOvr, "a:masterClrMapping")
    return notes


def build_notes_master(config: DeckConfig | None = None) -> Element:
    config = config or DeckConfig()
    master, spTree = _notes_root("p:notesMaster")
    add_placeholder(
        spTree, 2, "Slide Image Placeholder 1", {"type": "sldImg", "idx": 2}, NOTES_SLIDE_IMAGE_BOX
    )
    body = add_placeholder(
        spTree, 3, "Notes Placeholder 2", {"type": "body", "sz": "quarter", "idx": 3}, NOTES_BODY_BOX
    )
    add_text_body(body, [""], TextStyle(size=NOTES_FONT_SIZE), config.language)
    add_color_map(master)
    notesStyle = SubElement(master, "p:notesStyle")
    lvl1pPr = SubElement(notesStyle, "a:lvl1pPr", {"marL": "0", "algn": "l"})
    SubElement(lvl1pPr, "a:defRPr", {"sz": NOTES_FONT_SIZE * 100})
    return master
