"""Exception types and load-time issue records."""

from dataclasses import dataclass
from enum import Enum


class OpenXmlDeckError(Exception):
    """Base class for all errors raised by openxml_deck."""


class PackageIOError(OpenXmlDeckError, OSError):
    """Reading or writing the underlying storage failed."""


class CorruptArchive(OpenXmlDeckError):
    """The ZIP central directory or local headers are malformed."""


class MalformedPackage(OpenXmlDeckError):
    """A mandatory OPC part or its required relationship chain is absent."""


class ContentTypeError(OpenXmlDeckError):
    """Content type registration or resolution failed."""


class DuplicateOverride(ContentTypeError):
    """A second Override was declared for the same part name."""

    def __init__(self, partname: str):
        super().__init__(f"Duplicate content type override for '{partname}'")
        self.partname = partname


class NoContentType(ContentTypeError):
    """Neither an Override nor a Default covers a part name."""

    def __init__(self, partname: str):
        super().__init__(f"No content type for part '{partname}'")
        self.partname = partname


class RelationshipError(OpenXmlDeckError):
    """Base class for relationship graph errors."""


class DanglingRelationship(RelationshipError):
    """An internal relationship points at a part that does not exist."""

    def __init__(self, source: str, rId: str, target: str):
        super().__init__(
            f"Relationship '{rId}' from '{source}' targets missing part '{target}'"
        )
        self.source = source
        self.rId = rId
        self.target = target


class InvalidRelationshipId(RelationshipError):
    """A relationship id is duplicated, unparseable or unknown."""


class XmlParseError(OpenXmlDeckError):
    """Malformed XML, with the position where parsing stopped."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        part: str | None = None,
    ):
        location = ""
        if part:
            location = f"{part}: "
        if line is not None:
            location += f"line {line}, column {column}: "
        super().__init__(f"{location}{message}")
        self.line = line
        self.column = column
        self.part = part


class SchemaViolation(OpenXmlDeckError):
    """A known part type is missing a required attribute or child."""

    def __init__(self, message: str, part: str = "", node: str | None = None):
        super().__init__(f"{part}: {message}" if part else message)
        self.part = part
        self.node = node


class InvalidStateError(OpenXmlDeckError):
    """The operation is not allowed in the package's current lifecycle state."""


class BuilderError(OpenXmlDeckError, ValueError):
    """A content model handed to a part builder is inconsistent."""


class IssueKind(Enum):
    """Kinds of recoverable findings recorded while loading a package."""

    DANGLING_RELATIONSHIP = "dangling_relationship"
    ORPHAN_PART = "orphan_part"
    FOREIGN_PART = "foreign_part"


class IssueSeverity(Enum):
    """Severity levels for load-time findings."""

    ERROR = "error"  # Office will likely repair or refuse the file
    WARNING = "warning"
    INFO = "info"


@dataclass
class PackageIssue:
    """A structural finding that did not abort loading."""

    kind: IssueKind
    description: str
    part_uri: str = ""  # e.g., "/ppt/slides/slide1.xml"
    rId: str | None = None
    target: str | None = None
    severity: IssueSeverity = IssueSeverity.WARNING

    def __str__(self) -> str:
        location = self.part_uri
        if self.rId:
            location = f"{location}#{self.rId}"
        return f"[{self.kind.value}] {location}: {self.description}"
