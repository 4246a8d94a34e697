"""DrawingML text body helpers shared by the part builders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from openxml_deck.errors import BuilderError
from openxml_deck.oxml import SubElement

if TYPE_CHECKING:
    from collections.abc import Iterable

    from openxml_deck.oxml import Element

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")


def normalize_color(color: str | None) -> str | None:
    """Upper-case RRGGBB from "#rrggbb" or "rrggbb".

    Raises:
        BuilderError: Not a six-digit hex color.
    """
    if color is None:
        return None
    value = color.lstrip("#")
    if not _HEX_COLOR.match(value):
        raise BuilderError(f"Invalid hex color '{color}', expected RRGGBB")
    return value.upper()


@dataclass(frozen=True)
class TextStyle:
    """Character formatting for a run of text. ``size`` is in points."""

    size: float | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str | None = None

    def __post_init__(self) -> None:
        if self.size is not None and self.size <= 0:
            raise BuilderError(f"Font size must be positive, got {self.size}")
        object.__setattr__(self, "color", normalize_color(self.color))

    def with_size(self, size: float | None) -> TextStyle:
        """Copy with ``size`` filled in when this style leaves it unset."""
        if self.size is not None or size is None:
            return self
        return TextStyle(size, self.bold, self.italic, self.underline, self.color)


def hundredths(points: float) -> int:
    """Font size in the hundredths of a point ``sz`` attributes use."""
    return int(round(points * 100))


def add_solid_fill(parent: Element, color: str) -> Element:
    fill = SubElement(parent, "a:solidFill")
    SubElement(fill, "a:srgbClr", {"val": color})
    return fill


def add_run_properties(
    parent: Element, style: TextStyle, lang: str | None, tag: str = "a:rPr"
) -> Element:
    r_pr = SubElement(
        parent,
        tag,
        {
            "lang": lang,
            "sz": hundredths(style.size) if style.size is not None else None,
            "b": True if style.bold else None,
            "i": True if style.italic else None,
            "u": "sng" if style.underline else None,
            "dirty": "0",
        },
    )
    if style.color:
        add_solid_fill(r_pr, style.color)
    return r_pr


def add_paragraph(
    txBody: Element,
    text: str,
    style: TextStyle,
    lang: str | None,
    align: str | None = None,
) -> Element:
    """Append an ``a:p`` holding one run; empty text yields an empty paragraph."""
    p = SubElement(txBody, "a:p")
    if align:
        SubElement(p, "a:pPr", {"algn": align})
    if text:
        r = SubElement(p, "a:r")
        add_run_properties(r, style, lang)
        SubElement(r, "a:t", text=text)
    else:
        add_run_properties(p, style, lang, tag="a:endParaRPr")
    return p


def add_text_body(
    parent: Element,
    paragraphs: Iterable[str],
    style: TextStyle,
    lang: str | None,
    *,
    tag: str = "p:txBody",
    align: str | None = None,
) -> Element:
    """Append a text body with one paragraph per string (at least one)."""
    txBody = SubElement(parent, tag)
    SubElement(txBody, "a:bodyPr")
    SubElement(txBody, "a:lstStyle")
    texts = list(paragraphs) or [""]
    for text in texts:
        add_paragraph(txBody, text, style, lang, align)
    return txBody
