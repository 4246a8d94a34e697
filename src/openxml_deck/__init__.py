"""openxml-deck - build, read and rewrite PowerPoint (.pptx) packages.

Example:
    import openxml_deck as deck

    # Build a presentation
    package = deck.create_package(title="Demo")
    slide_id = deck.add_slide(package, layout=deck.SlideLayout.TITLE_ONLY, title="Hi")
    table = deck.TableBuilder([2000000] * 3).rows([["a", "b", "c"]] * 3).build()
    deck.add_table(package, slide_id, table)
    data = deck.serialize(package)

    # Read one back
    package = deck.open(data)
    for partname in deck.part_paths(package):
        print(partname)
    for issue in package.issues:
        print(issue)
"""

from openxml_deck.api import (
    add_chart,
    add_image,
    add_slide,
    add_table,
    create_package,
    get_part,
    open,
    open_path,
    part_paths,
    save,
    serialize,
    slide_ids,
    slide_text,
    slide_title,
)
from openxml_deck.builders import (
    Box,
    ChartBuilder,
    ChartSeries,
    ChartSpec,
    ChartType,
    ImageSpec,
    PresentationMetadata,
    SlideContent,
    SlideLayout,
    TableBuilder,
    TableCell,
    TableSpec,
    TextStyle,
    split_two_column,
)
from openxml_deck.config import AssemblyOptions, Cm, DeckConfig, Emu, Inches, Pt, SlideSize
from openxml_deck.errors import (
    BuilderError,
    ContentTypeError,
    CorruptArchive,
    DanglingRelationship,
    DuplicateOverride,
    InvalidRelationshipId,
    InvalidStateError,
    IssueKind,
    IssueSeverity,
    MalformedPackage,
    NoContentType,
    OpenXmlDeckError,
    PackageIOError,
    PackageIssue,
    RelationshipError,
    SchemaViolation,
    XmlParseError,
)
from openxml_deck.package import Package, PackageState
from openxml_deck.parts import Opaque, Part, PresentationPart, SlidePart, Structured
from openxml_deck.relationships import Relationship, TargetMode

__version__ = "0.1.0"

__all__ = [
    # Main API
    "create_package",
    "add_slide",
    "add_table",
    "add_chart",
    "add_image",
    "serialize",
    "open",
    "open_path",
    "save",
    "get_part",
    "part_paths",
    "slide_ids",
    "slide_text",
    "slide_title",
    # Content models
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
    # Configuration and units
    "AssemblyOptions",
    "DeckConfig",
    "SlideSize",
    "Emu",
    "Inches",
    "Cm",
    "Pt",
    # Errors and load-time issues
    "OpenXmlDeckError",
    "PackageIOError",
    "CorruptArchive",
    "MalformedPackage",
    "ContentTypeError",
    "DuplicateOverride",
    "NoContentType",
    "RelationshipError",
    "DanglingRelationship",
    "InvalidRelationshipId",
    "XmlParseError",
    "SchemaViolation",
    "InvalidStateError",
    "BuilderError",
    "PackageIssue",
    "IssueKind",
    "IssueSeverity",
    # Package and parts (for advanced usage)
    "Package",
    "PackageState",
    "Part",
    "PresentationPart",
    "SlidePart",
    "Structured",
    "Opaque",
    "Relationship",
    "TargetMode",
]
