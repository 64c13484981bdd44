"""
Centralized constants for OOXML namespaces, element names and search tuning.

Import from here rather than repeating namespace URLs across modules.
"""

# =============================================================================
# Word Processing Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Word 2010 namespace (paraId on comment paragraphs)
W14_NAMESPACE = "http://schemas.microsoft.com/office/word/2010/wordml"

# Markup compatibility (mc:AlternateContent around text boxes and drawings)
MC_NAMESPACE = "http://schemas.openxmlformats.org/markup-compatibility/2006"


# =============================================================================
# Package and Relationship Namespaces
# =============================================================================

PACKAGE_RELATIONSHIPS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"

# XML namespace (xml:space)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


# =============================================================================
# Namespace Maps
# =============================================================================

NSMAP = {"w": WORD_NAMESPACE}

NSMAP_COMMENTS = {"w": WORD_NAMESPACE, "w14": W14_NAMESPACE}


# =============================================================================
# Package part names
# =============================================================================

DOCUMENT_PART = "word/document.xml"
COMMENTS_PART = "word/comments.xml"
SETTINGS_PART = "word/settings.xml"


# =============================================================================
# Search and annotation defaults
# =============================================================================

# Author stamped on comments and revisions when none is configured
DEFAULT_AUTHOR = "WordDocumentModifier"

# Prefix of revision ids stamped on w:ins / w:del
REVISION_ID_PREFIX = "rev_"

# Queries longer than this retry with only their first N characters
PARTIAL_PREFIX_LENGTH = 5

# Maximum span anchored inside the first non-blank text leaf
FIRST_TEXT_ANCHOR_LENGTH = 10

# Characters of the logical stream shown in log previews
LOG_PREVIEW_CHARS = 50

# ISO 8601 format used for w:date attributes
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


# =============================================================================
# w:settings child order (CT_Settings sequence)
# =============================================================================

# New settings children must be inserted at their schema position; Word rejects
# a settings part whose children are out of sequence.
SETTINGS_ELEMENT_ORDER = (
    "writeProtection",
    "view",
    "zoom",
    "removePersonalInformation",
    "removeDateAndTime",
    "doNotDisplayPageBoundaries",
    "displayBackgroundShape",
    "printPostScriptOverText",
    "printFractionalCharacterWidth",
    "printFormsData",
    "embedTrueTypeFonts",
    "embedSystemFonts",
    "saveSubsetFonts",
    "saveFormsData",
    "mirrorMargins",
    "alignBordersAndEdges",
    "bordersDoNotSurroundHeader",
    "bordersDoNotSurroundFooter",
    "gutterAtTop",
    "hideSpellingErrors",
    "hideGrammaticalErrors",
    "activeWritingStyle",
    "proofState",
    "formsDesign",
    "attachedTemplate",
    "linkStyles",
    "stylePaneFormatFilter",
    "stylePaneSortMethod",
    "documentType",
    "mailMerge",
    "revisionView",
    "trackRevisions",
    "doNotTrackMoves",
    "doNotTrackFormatting",
    "documentProtection",
    "autoFormatOverride",
    "styleLockTheme",
    "styleLockQFSet",
    "defaultTabStop",
    "autoHyphenation",
    "consecutiveHyphenLimit",
    "hyphenationZone",
    "doNotHyphenateCaps",
    "showEnvelope",
    "summaryLength",
    "clickAndTypeStyle",
    "defaultTableStyle",
    "evenAndOddHeaders",
    "bookFoldRevPrinting",
    "bookFoldPrinting",
    "bookFoldPrintingSheets",
    "drawingGridHorizontalSpacing",
    "drawingGridVerticalSpacing",
    "displayHorizontalDrawingGridEvery",
    "displayVerticalDrawingGridEvery",
    "doNotUseMarginsForDrawingGridOrigin",
    "drawingGridHorizontalOrigin",
    "drawingGridVerticalOrigin",
    "doNotShadeFormData",
    "noPunctuationKerning",
    "characterSpacingControl",
    "printTwoOnOne",
    "strictFirstAndLastChars",
    "noLineBreaksAfter",
    "noLineBreaksBefore",
    "savePreviewPicture",
    "doNotValidateAgainstSchema",
    "saveInvalidXml",
    "ignoreMixedContent",
    "alwaysShowPlaceholderText",
    "doNotDemarcateInvalidXml",
    "saveXmlDataOnly",
    "useXSLTWhenSaving",
    "saveThroughXslt",
    "showXMLTags",
    "alwaysMergeEmptyNamespace",
    "updateFields",
    "hdrShapeDefaults",
    "footnotePr",
    "endnotePr",
    "compat",
    "docVars",
    "rsids",
    "mathPr",
    "attachedSchema",
    "themeFontLang",
    "clrSchemeMapping",
    "doNotIncludeSubdocsInStats",
    "doNotAutoCompressPictures",
    "forceUpgrade",
    "captions",
    "readModeInkLockDown",
    "smartTagType",
    "schemaLibrary",
    "shapeDefaults",
    "doNotEmbedSmartTags",
    "decimalSymbol",
    "listSeparator",
)


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"


def w14(tag: str) -> str:
    """Create a fully qualified Word 2010 namespace tag."""
    return f"{{{W14_NAMESPACE}}}{tag}"


def xml(tag: str) -> str:
    """Create a fully qualified tag in the XML namespace (e.g. xml:space)."""
    return f"{{{XML_NAMESPACE}}}{tag}"
