"""Part builders: content models in, XML trees out."""

from openxml_deck.builders.chart import ChartBuilder, ChartSeries, ChartSpec, ChartType
from openxml_deck.builders.docprops import PresentationMetadata
from openxml_deck.builders.image import ImageSpec
from openxml_deck.builders.slide import Box, SlideContent, SlideLayout, split_two_column
from openxml_deck.builders.table import TableBuilder, TableCell, TableSpec
from openxml_deck.builders.text import TextStyle

__all__ = [
    "Box",
    "ChartBuilder",
    "ChartSeries",
    "ChartSpec",
    "ChartType",
    "ImageSpec",
    "PresentationMetadata",
    "SlideContent",
    "SlideLayout",
    "TableBuilder",
    "TableCell",
    "TableSpec",
    "TextStyle",
    "split_two_column",
]
