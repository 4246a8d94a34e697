"""Document property parts: docProps/core.xml and docProps/app.xml."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from openxml_deck.config import DeckConfig
from openxml_deck.namespaces import EXTENDED_PROPERTIES, NSMAP
from openxml_deck.oxml import Element, OxmlElement, SubElement, find

APPLICATION = "Microsoft Office PowerPoint"
APP_VERSION = "16.0000"


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True)
class PresentationMetadata:
    """Metadata rendered into the document property parts.

    ``created`` defaults to the time the metadata object is made, so a
    package built from one metadata value always carries the same stamps.
    """

    title: str = "Presentation"
    author: str = ""
    subject: str | None = None
    keywords: str | None = None
    description: str | None = None
    company: str | None = None
    revision: int = 1
    created: datetime = field(default_factory=_now)
    modified: datetime | None = None


def w3cdtf(value: datetime) -> str:
    """W3CDTF timestamp in UTC, e.g. "2024-01-31T12:00:00Z"."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def build_core_properties(meta: PresentationMetadata) -> Element:
    core = OxmlElement(
        "cp:coreProperties", nsdecls=("cp", "dc", "dcterms", "dcmitype", "xsi")
    )
    SubElement(core, "dc:title", text=meta.title)
    if meta.subject:
        SubElement(core, "dc:subject", text=meta.subject)
    SubElement(core, "dc:creator", text=meta.author)
    if meta.keywords:
        SubElement(core, "cp:keywords", text=meta.keywords)
    if meta.description:
        SubElement(core, "dc:description", text=meta.description)
    SubElement(core, "cp:lastModifiedBy", text=meta.author)
    SubElement(core, "cp:revision", text=str(meta.revision))
    SubElement(core, "dcterms:created", {"xsi:type": "dcterms:W3CDTF"}, text=w3cdtf(meta.created))
    SubElement(
        core,
        "dcterms:modified",
        {"xsi:type": "dcterms:W3CDTF"},
        text=w3cdtf(meta.modified or meta.created),
    )
    return core


def _ep(tag: str) -> str:
    return f"{{{EXTENDED_PROPERTIES}}}{tag}"


def build_app_properties(
    meta: PresentationMetadata,
    config: DeckConfig | None = None,
    slides: int = 0,
    notes: int = 0,
) -> Element:
    config = config or DeckConfig()
    props = OxmlElement(
        _ep("Properties"), nsmap={None: EXTENDED_PROPERTIES, "vt": NSMAP["vt"]}
    )
    SubElement(props, _ep("TotalTime"), text="0")
    SubElement(props, _ep("Words"), text="0")
    SubElement(props, _ep("Application"), text=APPLICATION)
    SubElement(props, _ep("PresentationFormat"), text=config.slide_size.presentation_format)
    SubElement(props, _ep("Paragraphs"), text="0")
    SubElement(props, _ep("Slides"), text=str(slides))
    SubElement(props, _ep("Notes"), text=str(notes))
    SubElement(props, _ep("HiddenSlides"), text="0")
    SubElement(props, _ep("MMClips"), text="0")
    SubElement(props, _ep("ScaleCrop"), text="false")
    if meta.company:
        SubElement(props, _ep("Company"), text=meta.company)
    SubElement(props, _ep("LinksUpToDate"), text="false")
    SubElement(props, _ep("SharedDoc"), text="false")
    SubElement(props, _ep("HyperlinksChanged"), text="false")
    SubElement(props, _ep("AppVersion"), text=APP_VERSION)
    return props


def update_app_counts(props: Element, slides: int, notes: int) -> None:
    """Rewrite the Slides and Notes counts of an existing app.xml tree."""
    for tag, count in (("Slides", slides), ("Notes", notes)):
        element = find(props, f"ep:{tag}")
        if element is None:
            element = SubElement(props, _ep(tag))
        element.text = str(count)
