"""Open XML namespace, relationship type and content type definitions.

Based on ECMA-376 Part 1 and Part 2.
"""

# Package-level namespaces
CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
RELATIONSHIPS = "http://schemas.openxmlformats.org/package/2006/relationships"
CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"

# Markup namespaces
PRESENTATIONML = "http://schemas.openxmlformats.org/presentationml/2006/main"
DRAWINGML = "http://schemas.openxmlformats.org/drawingml/2006/main"
DRAWINGML_CHART = "http://schemas.openxmlformats.org/drawingml/2006/chart"
DRAWINGML_PICTURE = "http://schemas.openxmlformats.org/drawingml/2006/picture"
OFFICE_DOC_RELATIONSHIPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
EXTENDED_PROPERTIES = (
    "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
)
DOC_PROPS_VTYPES = "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes"
DC = "http://purl.org/dc/elements/1.1/"
DCTERMS = "http://purl.org/dc/terms/"
DCMITYPE = "http://purl.org/dc/dcmitype/"
XSI = "http://www.w3.org/2001/XMLSchema-instance"
MC = "http://schemas.openxmlformats.org/markup-compatibility/2006"

# Relationship types
RT_OFFICE_DOCUMENT = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
)
RT_CORE_PROPERTIES = (
    "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
)
RT_EXTENDED_PROPERTIES = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/extended-properties"
)
RT_SLIDE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide"
RT_SLIDE_LAYOUT = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideLayout"
)
RT_SLIDE_MASTER = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideMaster"
)
RT_NOTES_SLIDE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/notesSlide"
)
RT_NOTES_MASTER = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/notesMaster"
)
RT_THEME = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/theme"
RT_PRES_PROPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/presProps"
RT_VIEW_PROPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/viewProps"
RT_TABLE_STYLES = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/tableStyles"
)
RT_CHART = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/chart"
RT_IMAGE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"

# Content types
CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"
CT_CORE_PROPERTIES = "application/vnd.openxmlformats-package.core-properties+xml"
CT_EXTENDED_PROPERTIES = (
    "application/vnd.openxmlformats-officedocument.extended-properties+xml"
)
CT_PRESENTATION = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
)
CT_PRESENTATION_MACRO = "application/vnd.ms-powerpoint.presentation.macroEnabled.main+xml"
CT_TEMPLATE = (
    "application/vnd.openxmlformats-officedocument.presentationml.template.main+xml"
)
CT_SLIDESHOW = (
    "application/vnd.openxmlformats-officedocument.presentationml.slideshow.main+xml"
)
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_SLIDE_LAYOUT = (
    "application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"
)
CT_SLIDE_MASTER = (
    "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
)
CT_NOTES_SLIDE = (
    "application/vnd.openxmlformats-officedocument.presentationml.notesSlide+xml"
)
CT_NOTES_MASTER = (
    "application/vnd.openxmlformats-officedocument.presentationml.notesMaster+xml"
)
CT_THEME = "application/vnd.openxmlformats-officedocument.theme+xml"
CT_PRES_PROPS = "application/vnd.openxmlformats-officedocument.presentationml.presProps+xml"
CT_VIEW_PROPS = "application/vnd.openxmlformats-officedocument.presentationml.viewProps+xml"
CT_TABLE_STYLES = (
    "application/vnd.openxmlformats-officedocument.presentationml.tableStyles+xml"
)
CT_CHART = "application/vnd.openxmlformats-officedocument.drawingml.chart+xml"

PRESENTATION_CONTENT_TYPES = frozenset(
    {CT_PRESENTATION, CT_PRESENTATION_MACRO, CT_TEMPLATE, CT_SLIDESHOW}
)

# Namespace prefix map used for construction and queries
NSMAP = {
    "a": DRAWINGML,
    "c": DRAWINGML_CHART,
    "cp": CORE_PROPERTIES,
    "ct": CONTENT_TYPES,
    "dc": DC,
    "dcmitype": DCMITYPE,
    "dcterms": DCTERMS,
    "ep": EXTENDED_PROPERTIES,
    "mc": MC,
    "p": PRESENTATIONML,
    "pic": DRAWINGML_PICTURE,
    "pr": RELATIONSHIPS,
    "r": OFFICE_DOC_RELATIONSHIPS,
    "vt": DOC_PROPS_VTYPES,
    "xsi": XSI,
}
