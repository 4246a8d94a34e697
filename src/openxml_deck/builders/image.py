"""Picture shapes (``p:pic``) and the media parts behind them."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from openxml_deck.builders.slide import Box, add_xfrm
from openxml_deck.config import Inches
from openxml_deck.errors import BuilderError
from openxml_deck.media import ImageFormat, detect_format, format_for_extension
from openxml_deck.oxml import Element, OxmlElement, SubElement

MEDIA_PARTNAME_TEMPLATE = "/ppt/media/image%d.{ext}"
DEFAULT_IMAGE_BOX = Box(Inches(1), Inches(1.5), Inches(4), Inches(3))


@dataclass(frozen=True)
class ImageSpec:
    """An image to place on a slide.

    Attributes:
        data: The encoded image bytes.
        filename: Original file name; its extension picks the format when
            recognized, otherwise the format is detected from the bytes.
        box: Position and size on the slide in EMU.
        description: Alternative text.
    """

    data: bytes
    filename: str | None = None
    box: Box = DEFAULT_IMAGE_BOX
    description: str = ""

    @property
    def sha1(self) -> str:
        return hashlib.sha1(self.data).hexdigest()

    def image_format(self) -> ImageFormat:
        """Format from the file extension, falling back to the leading bytes.

        Raises:
            BuilderError: Empty data, or a format outside PNG/JPEG/GIF/BMP/TIFF.
        """
        if not self.data:
            raise BuilderError("Image data is empty")
        if self.filename and "." in self.filename:
            fmt = format_for_extension(self.filename.rsplit(".", 1)[1])
            if fmt is not None:
                return fmt
        fmt = detect_format(self.data)
        if fmt is None:
            raise BuilderError(
                f"Unsupported image format{f' for {self.filename}' if self.filename else ''}"
            )
        return fmt


def media_partname_template(fmt: ImageFormat) -> str:
    return MEDIA_PARTNAME_TEMPLATE.format(ext=fmt.ext)


def build_picture(
    rId: str, box: Box, shape_id: int, name: str | None = None, description: str = ""
) -> Element:
    """``p:pic`` shape showing the image related through ``rId``."""
    if box.cx <= 0 or box.cy <= 0:
        raise BuilderError(f"Picture extent must be positive, got {box.cx}x{box.cy}")
    pic = OxmlElement("p:pic", nsdecls=("a", "r", "p"))
    nvPicPr = SubElement(pic, "p:nvPicPr")
    SubElement(
        nvPicPr,
        "p:cNvPr",
        {
            "id": shape_id,
            "name": name or f"Picture {shape_id - 1}",
            "descr": description or None,
        },
    )
    cNvPicPr = SubElement(nvPicPr, "p:cNvPicPr")
    SubElement(cNvPicPr, "a:picLocks", {"noChangeAspect": True})
    SubElement(nvPicPr, "p:nvPr")
    blipFill = SubElement(pic, "p:blipFill")
    SubElement(blipFill, "a:blip", {"r:embed": rId})
    stretch = SubElement(blipFill, "a:stretch")
    SubElement(stretch, "a:fillRect")
    spPr = SubElement(pic, "p:spPr")
    add_xfrm(spPr, box)
    prstGeom = SubElement(spPr, "a:prstGeom", {"prst": "rect"})
    SubElement(prstGeom, "a:avLst")
    return pic
