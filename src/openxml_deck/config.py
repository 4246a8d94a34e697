"""Deck and assembly settings, plus EMU length helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

EMU_PER_INCH = 914400
EMU_PER_CM = 360000
EMU_PER_PT = 12700


class Emu(int):
    """A length in English Metric Units."""

    @property
    def inches(self) -> float:
        return self / EMU_PER_INCH

    @property
    def pt(self) -> float:
        return self / EMU_PER_PT


def Inches(inches: float) -> Emu:
    return Emu(round(inches * EMU_PER_INCH))


def Cm(cm: float) -> Emu:
    return Emu(round(cm * EMU_PER_CM))


def Pt(points: float) -> Emu:
    return Emu(round(points * EMU_PER_PT))


class SlideSize(Enum):
    """Slide dimensions in EMU and their ``p:sldSz`` type."""

    STANDARD_4_3 = (9144000, 6858000, "screen4x3")
    WIDESCREEN_16_9 = (12192000, 6858000, None)

    @property
    def cx(self) -> int:
        return self.value[0]

    @property
    def cy(self) -> int:
        return self.value[1]

    @property
    def type(self) -> str | None:
        return self.value[2]

    @property
    def presentation_format(self) -> str:
        if self is SlideSize.WIDESCREEN_16_9:
            return "Widescreen"
        return "On-screen Show (4:3)"


@dataclass(frozen=True)
class DeckConfig:
    """Defaults applied to every slide a package builds.

    Font sizes are in points.
    """

    slide_size: SlideSize = SlideSize.STANDARD_4_3
    title_font_size: int = 44
    body_font_size: int = 28
    language: str = "en-US"
    theme_name: str = "Office Theme"


@dataclass(frozen=True)
class AssemblyOptions:
    """How a package is written to bytes.

    Attributes:
        compress_xml: Deflate XML and relationship entries.
        compress_media: Deflate binary parts too, except PNG, JPEG and GIF
            images.
        strict: Fail on internal relationships whose target is missing,
            except those already dangling when the package was loaded.
    """

    compress_xml: bool = True
    compress_media: bool = False
    strict: bool = True
