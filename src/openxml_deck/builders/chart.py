"""Chart parts (``c:chartSpace``) with literal data caches.

Category labels and values are written as ``c:strLit``/``c:numLit``, so
charts carry no embedded workbook.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING, Union

from openxml_deck.builders.slide import Box, add_xfrm
from openxml_deck.errors import BuilderError
from openxml_deck.oxml import OxmlElement, SubElement

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openxml_deck.oxml import Element

CHART_GRAPHIC_URI = "http://schemas.openxmlformats.org/drawingml/2006/chart"
DEFAULT_CHART_BOX = Box(457200, 1600200, 8229600, 4572000)
CATEGORY_AXIS_ID = "500000001"
VALUE_AXIS_ID = "500000002"

Number = Union[int, float]


class ChartType(Enum):
    BAR = "bar"
    PIE = "pie"
    LINE = "line"
    SCATTER = "scatter"


@dataclass(frozen=True)
class ChartSeries:
    name: str
    values: tuple[Number, ...]


@dataclass(frozen=True)
class ChartSpec:
    """A validated chart: produced by :meth:`ChartBuilder.build`."""

    chart_type: ChartType
    categories: tuple[str | Number, ...]
    series: tuple[ChartSeries, ...]
    title: str | None = None
    box: Box = DEFAULT_CHART_BOX
    show_legend: bool = True


@dataclass
class _ChartConfig:
    chart_type: ChartType
    categories: list[str | Number] = field(default_factory=list)
    series: list[tuple[str, list[Number]]] = field(default_factory=list)
    title: str | None = None
    box: Box = DEFAULT_CHART_BOX
    show_legend: bool = True


class ChartBuilder:
    """Fluent chart description, validated once by :meth:`build`.

    Example:
        >>> spec = (
        ...     ChartBuilder(ChartType.BAR)
        ...     .title("Revenue")
        ...     .categories(["Q1", "Q2"])
        ...     .series("2024", [10, 12])
        ...     .build()
        ... )
    """

    def __init__(self, chart_type: ChartType):
        self._config = _ChartConfig(chart_type=chart_type)

    def title(self, title: str | None) -> ChartBuilder:
        self._config.title = title
        return self

    def categories(self, categories: Sequence[str | Number]) -> ChartBuilder:
        self._config.categories = list(categories)
        return self

    def series(self, name: str, values: Sequence[Number]) -> ChartBuilder:
        self._config.series.append((name, list(values)))
        return self

    def position(self, x: int, y: int, cx: int, cy: int) -> ChartBuilder:
        self._config.box = Box(x, y, cx, cy)
        return self

    def legend(self, show: bool = True) -> ChartBuilder:
        self._config.show_legend = show
        return self

    def build(self) -> ChartSpec:
        """Validate and freeze the chart.

        Raises:
            BuilderError: No categories or series, a series whose length
                differs from the category count, a non-numeric or non-finite
                value, a pie chart with other than one series, or a scatter
                chart with non-numeric categories.
        """
        config = self._config
        if not config.categories:
            raise BuilderError("Chart needs at least one category")
        if not config.series:
            raise BuilderError("Chart needs at least one series")
        if config.chart_type is ChartType.PIE and len(config.series) != 1:
            raise BuilderError(
                f"Pie chart takes exactly one series, got {len(config.series)}"
            )
        if config.chart_type is ChartType.SCATTER:
            for category in config.categories:
                if not _is_number(category):
                    raise BuilderError(
                        f"Scatter chart x values must be numeric, got {category!r}"
                    )
        if config.box.cx <= 0 or config.box.cy <= 0:
            raise BuilderError("Chart extent must be positive")

        series = []
        for name, values in config.series:
            if len(values) != len(config.categories):
                raise BuilderError(
                    f"Series '{name}' has {len(values)} values, "
                    f"expected {len(config.categories)}"
                )
            for value in values:
                if not _is_number(value) or not math.isfinite(value):
                    raise BuilderError(f"Series '{name}' has non-numeric value {value!r}")
            series.append(ChartSeries(name=name, values=tuple(values)))

        return ChartSpec(
            chart_type=config.chart_type,
            categories=tuple(config.categories),
            series=tuple(series),
            title=config.title,
            box=config.box,
            show_legend=config.show_legend,
        )


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def format_number(value: Number) -> str:
    """Numeric cache text: integers without a decimal point, floats via repr."""
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _add_str_lit(parent: Element, labels: Sequence[object]) -> None:
    lit = SubElement(parent, "c:strLit")
    SubElement(lit, "c:ptCount", {"val": len(labels)})
    for idx, label in enumerate(labels):
        pt = SubElement(lit, "c:pt", {"idx": idx})
        SubElement(pt, "c:v", text=str(label))


def _add_num_lit(parent: Element, values: Sequence[Number]) -> None:
    lit = SubElement(parent, "c:numLit")
    SubElement(lit, "c:formatCode", text="General")
    SubElement(lit, "c:ptCount", {"val": len(values)})
    for idx, value in enumerate(values):
        pt = SubElement(lit, "c:pt", {"idx": idx})
        SubElement(pt, "c:v", text=format_number(value))


def _add_series(chart: Element, spec: ChartSpec, idx: int, series: ChartSeries) -> None:
    ser = SubElement(chart, "c:ser")
    SubElement(ser, "c:idx", {"val": idx})
    SubElement(ser, "c:order", {"val": idx})
    tx = SubElement(ser, "c:tx")
    SubElement(tx, "c:v", text=series.name)

    if spec.chart_type is ChartType.LINE:
        marker = SubElement(ser, "c:marker")
        SubElement(marker, "c:symbol", {"val": "none"})
    elif spec.chart_type is ChartType.SCATTER:
        marker = SubElement(ser, "c:marker")
        SubElement(marker, "c:symbol", {"val": "circle"})

    if spec.chart_type is ChartType.SCATTER:
        _add_num_lit(SubElement(ser, "c:xVal"), spec.categories)
        _add_num_lit(SubElement(ser, "c:yVal"), series.values)
    else:
        _add_str_lit(SubElement(ser, "c:cat"), spec.categories)
        _add_num_lit(SubElement(ser, "c:val"), series.values)

    if spec.chart_type in (ChartType.LINE, ChartType.SCATTER):
        SubElement(ser, "c:smooth", {"val": "0"})


def _add_axis_ids(chart: Element) -> None:
    SubElement(chart, "c:axId", {"val": CATEGORY_AXIS_ID})
    SubElement(chart, "c:axId", {"val": VALUE_AXIS_ID})


def _add_plot(plotArea: Element, spec: ChartSpec) -> None:
    chart_type = spec.chart_type
    if chart_type is ChartType.BAR:
        chart = SubElement(plotArea, "c:barChart")
        SubElement(chart, "c:barDir", {"val": "col"})
        SubElement(chart, "c:grouping", {"val": "clustered"})
        SubElement(chart, "c:varyColors", {"val": "0"})
    elif chart_type is ChartType.LINE:
        chart = SubElement(plotArea, "c:lineChart")
        SubElement(chart, "c:grouping", {"val": "standard"})
        SubElement(chart, "c:varyColors", {"val": "0"})
    elif chart_type is ChartType.PIE:
        chart = SubElement(plotArea, "c:pieChart")
        SubElement(chart, "c:varyColors", {"val": "1"})
    else:
        chart = SubElement(plotArea, "c:scatterChart")
        SubElement(chart, "c:scatterStyle", {"val": "lineMarker"})
        SubElement(chart, "c:varyColors", {"val": "0"})

    for idx, series in enumerate(spec.series):
        _add_series(chart, spec, idx, series)

    if chart_type is ChartType.BAR:
        SubElement(chart, "c:gapWidth", {"val": "150"})
        _add_axis_ids(chart)
    elif chart_type is ChartType.LINE:
        SubElement(chart, "c:marker", {"val": "1"})
        _add_axis_ids(chart)
    elif chart_type is ChartType.PIE:
        SubElement(chart, "c:firstSliceAng", {"val": "0"})
    else:
        _add_axis_ids(chart)


def _add_axis(
    plotArea: Element, tag: str, ax_id: str, cross_ax: str, position: str, gridlines: bool
) -> Element:
    axis = SubElement(plotArea, tag)
    SubElement(axis, "c:axId", {"val": ax_id})
    scaling = SubElement(axis, "c:scaling")
    SubElement(scaling, "c:orientation", {"val": "minMax"})
    SubElement(axis, "c:delete", {"val": "0"})
    SubElement(axis, "c:axPos", {"val": position})
    if gridlines:
        SubElement(axis, "c:majorGridlines")
    SubElement(axis, "c:numFmt", {"formatCode": "General", "sourceLinked": "1"})
    SubElement(axis, "c:majorTickMark", {"val": "out"})
    SubElement(axis, "c:minorTickMark", {"val": "none"})
    SubElement(axis, "c:tickLblPos", {"val": "nextTo"})
    SubElement(axis, "c:crossAx", {"val": cross_ax})
    SubElement(axis, "c:crosses", {"val": "autoZero"})
    return axis


def _add_axes(plotArea: Element, spec: ChartSpec) -> None:
    if spec.chart_type is ChartType.PIE:
        return
    if spec.chart_type is ChartType.SCATTER:
        x_axis = _add_axis(plotArea, "c:valAx", CATEGORY_AXIS_ID, VALUE_AXIS_ID, "b", False)
        SubElement(x_axis, "c:crossBetween", {"val": "midCat"})
    else:
        cat_axis = _add_axis(plotArea, "c:catAx", CATEGORY_AXIS_ID, VALUE_AXIS_ID, "b", False)
        SubElement(cat_axis, "c:auto", {"val": "1"})
        SubElement(cat_axis, "c:lblAlgn", {"val": "ctr"})
        SubElement(cat_axis, "c:lblOffset", {"val": "100"})
        SubElement(cat_axis, "c:noMultiLvlLbl", {"val": "0"})
    val_axis = _add_axis(plotArea, "c:valAx", VALUE_AXIS_ID, CATEGORY_AXIS_ID, "l", True)
    SubElement(
        val_axis, "c:crossBetween", {"val": "midCat" if spec.chart_type is ChartType.SCATTER else "between"}
    )


def _add_title(chart: Element, title: str) -> None:
    title_el = SubElement(chart, "c:title")
    tx = SubElement(title_el, "c:tx")
    rich = SubElement(tx, "c:rich")
    SubElement(rich, "a:bodyPr")
    SubElement(rich, "a:lstStyle")
    p = SubElement(rich, "a:p")
    r = SubElement(p, "a:r")
    SubElement(r, "a:t", text=title)
    SubElement(title_el, "c:overlay", {"val": "0"})


def build_chart(spec: ChartSpec) -> Element:
    """The ``c:chartSpace`` root of a chart part."""
    chartSpace = OxmlElement("c:chartSpace", nsdecls=("c", "a", "r"))
    SubElement(chartSpace, "c:date1904", {"val": "0"})
    SubElement(chartSpace, "c:roundedCorners", {"val": "0"})
    chart = SubElement(chartSpace, "c:chart")
    if spec.title:
        _add_title(chart, spec.title)
    SubElement(chart, "c:autoTitleDeleted", {"val": "0" if spec.title else "1"})
    plotArea = SubElement(chart, "c:plotArea")
    SubElement(plotArea, "c:layout")
    _add_plot(plotArea, spec)
    _add_axes(plotArea, spec)
    if spec.show_legend:
        legend = SubElement(chart, "c:legend")
        SubElement(legend, "c:legendPos", {"val": "r"})
        SubElement(legend, "c:overlay", {"val": "0"})
    SubElement(chart, "c:plotVisOnly", {"val": "1"})
    SubElement(chart, "c:dispBlanksAs", {"val": "gap"})
    return chartSpace


def build_chart_frame(
    rId: str, box: Box, shape_id: int, name: str | None = None
) -> Element:
    """``p:graphicFrame`` referencing a chart part through ``rId``."""
    frame = OxmlElement("p:graphicFrame", nsdecls=("a", "r", "p", "c"))
    nvGraphicFramePr = SubElement(frame, "p:nvGraphicFramePr")
    SubElement(
        nvGraphicFramePr,
        "p:cNvPr",
        {"id": shape_id, "name": name or f"Chart {shape_id - 1}"},
    )
    cNvGraphicFramePr = SubElement(nvGraphicFramePr, "p:cNvGraphicFramePr")
    SubElement(cNvGraphicFramePr, "a:graphicFrameLocks", {"noGrp": True})
    SubElement(nvGraphicFramePr, "p:nvPr")
    add_xfrm(frame, box, tag="p:xfrm")
    graphic = SubElement(frame, "a:graphic")
    graphicData = SubElement(graphic, "a:graphicData", {"uri": CHART_GRAPHIC_URI})
    SubElement(graphicData, "c:chart", {"r:id": rId})
    return frame
