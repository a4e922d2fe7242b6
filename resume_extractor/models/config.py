"""Configuration models and static lookup tables.

Configuration is immutable: a service captures one ``ExtractionConfig`` at
construction and derives per-call variants with ``ExtractionConfig.merged``.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from resume_extractor.models.extraction import SupportedFileType

MB = 1024 * 1024


class PDFBackendName(str, Enum):
    """Library used by the primary PDF strategy."""

    PYMUPDF = "pymupdf"
    PDFPLUMBER = "pdfplumber"


class PageRange(BaseModel):
    """1-based, inclusive page range."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(1, ge=1)
    end: int = Field(..., ge=1)

    @model_validator(mode="after")
    def validate_order(self) -> "PageRange":
        if self.end < self.start:
            raise ValueError("page_range.end must be >= page_range.start")
        return self


class PDFOptions(BaseModel):
    """PDF extraction settings"""

    model_config = ConfigDict(frozen=True)

    preserve_formatting: bool = Field(
        True, description="Keep line structure inside text blocks"
    )
    page_range: Optional[PageRange] = None
    backend: PDFBackendName = Field(
        PDFBackendName.PYMUPDF, description="Primary PDF parsing library"
    )
    max_file_size_mb: int = Field(50, ge=1, le=500)


class WordOptions(BaseModel):
    """Word document extraction settings"""

    model_config = ConfigDict(frozen=True)

    preserve_formatting: bool = Field(
        True, description="Separate paragraphs with line breaks"
    )
    include_headers: bool = True
    include_footers: bool = False
    max_file_size_mb: int = Field(100, ge=1, le=500)
    min_file_size_bytes: int = Field(1024, ge=0)


class TextProcessingSettings(BaseModel):
    """Post-processing applied by the extractors"""

    model_config = ConfigDict(frozen=True)

    remove_extra_whitespace: bool = True
    normalize_encoding: bool = True
    min_text_length: int = Field(100, ge=0)


class TextProcessingOptions(BaseModel):
    """Options for the standalone text processor pipeline"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    remove_extra_whitespace: bool = True
    remove_special_characters: bool = False
    normalize_line_breaks: bool = True
    trim_content: bool = True
    min_content_length: int = Field(50, ge=0)


ConfigOverrides = Union["ExtractionConfig", Mapping[str, Any], None]


class ExtractionConfig(BaseModel):
    """Complete extraction configuration."""

    model_config = ConfigDict(frozen=True)

    pdf: PDFOptions = Field(default_factory=PDFOptions)
    docx: WordOptions = Field(default_factory=WordOptions)
    text_processing: TextProcessingSettings = Field(
        default_factory=TextProcessingSettings
    )

    def merged(self, overrides: ConfigOverrides = None) -> "ExtractionConfig":
        """Return a new config with ``overrides`` deep-merged over this one.

        Args:
            overrides: A full ``ExtractionConfig``, a partial nested mapping
                (e.g. ``{"text_processing": {"min_text_length": 20}}``) or None

        Returns:
            The merged configuration (``self`` when there is nothing to merge)
        """
        if overrides is None:
            return self
        if isinstance(overrides, ExtractionConfig):
            return overrides

        data = _deep_merge(self.model_dump(), dict(overrides))
        return ExtractionConfig.model_validate(data)


def _deep_merge(base: Dict[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        elif isinstance(value, BaseModel):
            merged[key] = value.model_dump()
        else:
            merged[key] = value
    return merged


DEFAULT_EXTRACTION_CONFIG = ExtractionConfig()
DEFAULT_TEXT_PROCESSING = TextProcessingOptions()

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
DOC_MIME_TYPES: Tuple[str, ...] = ("application/msword", "application/vnd.ms-word")

FILE_TYPE_MAPPINGS: Dict[str, SupportedFileType] = {
    PDF_MIME_TYPE: SupportedFileType.PDF,
    DOCX_MIME_TYPE: SupportedFileType.DOCX,
    "application/msword": SupportedFileType.DOC,
    "application/vnd.ms-word": SupportedFileType.DOC,
}

FILE_EXTENSION_MAPPINGS: Dict[str, SupportedFileType] = {
    ".pdf": SupportedFileType.PDF,
    ".docx": SupportedFileType.DOCX,
    ".doc": SupportedFileType.DOC,
}

EXTRACTION_STEPS: Dict[SupportedFileType, Tuple[str, ...]] = {
    SupportedFileType.PDF: (
        "Validating PDF file",
        "Loading PDF document",
        "Extracting text content",
        "Processing extracted text",
        "Finalizing extraction",
    ),
    SupportedFileType.DOCX: (
        "Validating Word document",
        "Reading document structure",
        "Extracting text content",
        "Processing extracted text",
        "Finalizing extraction",
    ),
    SupportedFileType.DOC: (
        "Validating Word document",
        "Converting document format",
        "Extracting text content",
        "Processing extracted text",
        "Finalizing extraction",
    ),
}


class FileTypeInfo(BaseModel):
    """Human-facing description of a supported format."""

    model_config = ConfigDict(frozen=True)

    name: str
    extensions: Tuple[str, ...]
    mime_types: Tuple[str, ...]
    max_size: int
    description: str


FILE_TYPE_INFO: Dict[SupportedFileType, FileTypeInfo] = {
    SupportedFileType.PDF: FileTypeInfo(
        name="PDF Document",
        extensions=(".pdf",),
        mime_types=(PDF_MIME_TYPE,),
        max_size=50 * MB,
        description="Portable Document Format",
    ),
    SupportedFileType.DOCX: FileTypeInfo(
        name="Word Document (2007+)",
        extensions=(".docx",),
        mime_types=(DOCX_MIME_TYPE,),
        max_size=100 * MB,
        description="Microsoft Word Document (XML format)",
    ),
    SupportedFileType.DOC: FileTypeInfo(
        name="Word Document (Legacy)",
        extensions=(".doc",),
        mime_types=DOC_MIME_TYPES,
        max_size=100 * MB,
        description="Microsoft Word Document (Legacy format)",
    ),
}
