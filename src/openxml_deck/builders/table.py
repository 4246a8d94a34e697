"""Table graphic frames (``a:tbl``) from explicit column widths and rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from openxml_deck.builders.slide import Box, add_xfrm
from openxml_deck.builders.text import (
    TextStyle,
    add_run_properties,
    add_solid_fill,
    normalize_color,
)
from openxml_deck.errors import BuilderError
from openxml_deck.oxml import OxmlElement, SubElement

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openxml_deck.oxml import Element

DEFAULT_ROW_HEIGHT = 370840
TABLE_GRAPHIC_URI = "http://schemas.openxmlformats.org/drawingml/2006/table"
# "Medium Style 2 - Accent 1", the default PowerPoint table style
DEFAULT_TABLE_STYLE = "{5C22544A-7EE6-4342-B048-85BDC9FD1C3A}"
DEFAULT_TABLE_POSITION = (457200, 1600200)


@dataclass(frozen=True)
class TableCell:
    """One table cell. ``font_size`` is in points."""

    text: str = ""
    bold: bool = False
    italic: bool = False
    background: str | None = None
    color: str | None = None
    font_size: float | None = None

    @property
    def style(self) -> TextStyle:
        return TextStyle(self.font_size, self.bold, self.italic, False, self.color)


CellValue = Union[TableCell, str]


@dataclass(frozen=True)
class TableSpec:
    """A validated table: produced by :meth:`TableBuilder.build`."""

    column_widths: tuple[int, ...]
    rows: tuple[tuple[TableCell, ...], ...]
    row_heights: tuple[int, ...]
    x: int
    y: int
    first_row_header: bool = True

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, sum(self.column_widths), sum(self.row_heights))


@dataclass
class _TableConfig:
    column_widths: list[int]
    rows: list[list[CellValue]] = field(default_factory=list)
    row_heights: list[int | None] = field(default_factory=list)
    x: int = DEFAULT_TABLE_POSITION[0]
    y: int = DEFAULT_TABLE_POSITION[1]
    first_row_header: bool = True


class TableBuilder:
    """Fluent table description, validated once by :meth:`build`.

    Example:
        >>> spec = (
        ...     TableBuilder([2000000, 2000000])
        ...     .row(["Name", "Score"])
        ...     .row(["Ada", "10"], height=500000)
        ...     .build()
        ... )
    """

    def __init__(self, column_widths: Sequence[int]):
        self._config = _TableConfig(column_widths=list(column_widths))

    def row(self, cells: Sequence[CellValue], height: int | None = None) -> TableBuilder:
        self._config.rows.append(list(cells))
        self._config.row_heights.append(height)
        return self

    def rows(self, rows: Sequence[Sequence[CellValue]]) -> TableBuilder:
        for cells in rows:
            self.row(cells)
        return self

    def position(self, x: int, y: int) -> TableBuilder:
        self._config.x = x
        self._config.y = y
        return self

    def header(self, enabled: bool = True) -> TableBuilder:
        self._config.first_row_header = enabled
        return self

    def build(self) -> TableSpec:
        """Validate and freeze the table.

        Raises:
            BuilderError: No columns or rows, a non-positive width or height,
                a row whose cell count differs from the column count, or an
                invalid cell color.
        """
        config = self._config
        if not config.column_widths:
            raise BuilderError("Table needs at least one column")
        for width in config.column_widths:
            if width <= 0:
                raise BuilderError(f"Column width must be positive, got {width}")
        if not config.rows:
            raise BuilderError("Table needs at least one row")

        rows = []
        heights = []
        columns = len(config.column_widths)
        for row_idx, (cells, height) in enumerate(zip(config.rows, config.row_heights)):
            if len(cells) != columns:
                raise BuilderError(
                    f"Row {row_idx} has {len(cells)} cells, expected {columns}"
                )
            if height is not None and height <= 0:
                raise BuilderError(f"Row {row_idx} height must be positive, got {height}")
            rows.append(tuple(_as_cell(cell) for cell in cells))
            heights.append(DEFAULT_ROW_HEIGHT if height is None else height)

        return TableSpec(
            column_widths=tuple(config.column_widths),
            rows=tuple(rows),
            row_heights=tuple(heights),
            x=config.x,
            y=config.y,
            first_row_header=config.first_row_header,
        )


def _as_cell(value: CellValue) -> TableCell:
    if isinstance(value, TableCell):
        cell = value
    else:
        cell = TableCell(text=str(value))
    normalize_color(cell.background)
    normalize_color(cell.color)
    if cell.font_size is not None and cell.font_size <= 0:
        raise BuilderError(f"Font size must be positive, got {cell.font_size}")
    return cell


def _add_cell(tr: Element, cell: TableCell, lang: str | None) -> None:
    tc = SubElement(tr, "a:tc")
    txBody = SubElement(tc, "a:txBody")
    SubElement(txBody, "a:bodyPr")
    SubElement(txBody, "a:lstStyle")
    p = SubElement(txBody, "a:p")
    if cell.text:
        r = SubElement(p, "a:r")
        add_run_properties(r, cell.style, lang)
        SubElement(r, "a:t", text=cell.text)
    else:
        add_run_properties(p, cell.style, lang, tag="a:endParaRPr")
    tcPr = SubElement(tc, "a:tcPr")
    background = normalize_color(cell.background)
    if background:
        add_solid_fill(tcPr, background)


def build_table(spec: TableSpec, lang: str | None = None) -> Element:
    """The ``a:tbl`` element for ``spec``."""
    tbl = OxmlElement("a:tbl")
    tblPr = SubElement(
        tbl, "a:tblPr", {"firstRow": True if spec.first_row_header else None, "bandRow": True}
    )
    SubElement(tblPr, "a:tableStyleId", text=DEFAULT_TABLE_STYLE)
    tblGrid = SubElement(tbl, "a:tblGrid")
    for width in spec.column_widths:
        SubElement(tblGrid, "a:gridCol", {"w": width})
    for cells, height in zip(spec.rows, spec.row_heights):
        tr = SubElement(tbl, "a:tr", {"h": height})
        for cell in cells:
            _add_cell(tr, cell, lang)
    return tbl


def build_table_frame(
    spec: TableSpec, shape_id: int, name: str | None = None, lang: str | None = None
) -> Element:
    """``p:graphicFrame`` holding the table, ready to append to a shape tree."""
    frame = OxmlElement("p:graphicFrame", nsdecls=("a", "r", "p"))
    nvGraphicFramePr = SubElement(frame, "p:nvGraphicFramePr")
    SubElement(
        nvGraphicFramePr,
        "p:cNvPr",
        {"id": shape_id, "name": name or f"Table {shape_id - 1}"},
    )
    cNvGraphicFramePr = SubElement(nvGraphicFramePr, "p:cNvGraphicFramePr")
    SubElement(cNvGraphicFramePr, "a:graphicFrameLocks", {"noGrp": True})
    SubElement(nvGraphicFramePr, "p:nvPr")
    add_xfrm(frame, spec.box, tag="p:xfrm")
    graphic = SubElement(frame, "a:graphic")
    graphicData = SubElement(graphic, "a:graphicData", {"uri": TABLE_GRAPHIC_URI})
    graphicData.append(build_table(spec, lang))
    return frame
