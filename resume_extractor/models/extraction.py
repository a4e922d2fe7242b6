"""Extraction data models.

Defines the value objects produced by one extraction call: the result,
its metadata, progress updates, and the analysis reports attached to
successful extractions. All models are frozen; the service builds new
instances with ``model_copy(update=...)`` instead of mutating.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SupportedFileType(str, Enum):
    """Document formats the pipeline can extract text from."""

    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"


class ExtractionStatus(str, Enum):
    """Lifecycle status reported through progress callbacks."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    SUCCESS = "success"
    ERROR = "error"


class ExtractionErrorCode(str, Enum):
    """Failure taxonomy attached to failed results."""

    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    FILE_CORRUPTED = "FILE_CORRUPTED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    TEXT_TOO_SHORT = "TEXT_TOO_SHORT"
    PARSING_FAILED = "PARSING_FAILED"
    ENCODING_ERROR = "ENCODING_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ExtractionErrorInfo(BaseModel):
    """Error details of a failed extraction."""

    model_config = ConfigDict(frozen=True)

    code: ExtractionErrorCode
    message: str
    details: Optional[str] = None


class ContactInfo(BaseModel):
    """Contact details found in the extracted text."""

    model_config = ConfigDict(frozen=True)

    emails: List[str] = Field(default_factory=list)
    phones: List[str] = Field(default_factory=list)
    urls: List[str] = Field(default_factory=list)


class TextStatistics(BaseModel):
    """Counts and averages computed over a block of text."""

    model_config = ConfigDict(frozen=True)

    character_count: int = Field(default=0, ge=0)
    word_count: int = Field(default=0, ge=0)
    sentence_count: int = Field(default=0, ge=0)
    paragraph_count: int = Field(default=0, ge=0)
    average_words_per_sentence: int = Field(default=0, ge=0)
    average_sentences_per_paragraph: int = Field(default=0, ge=0)


class TextQualityReport(BaseModel):
    """Outcome of the résumé text quality rubric."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    score: int = Field(ge=0, le=100)
    issues: List[str] = Field(default_factory=list)


class ResumeAnalysis(BaseModel):
    """Everything the text processor knows about an extracted résumé."""

    model_config = ConfigDict(frozen=True)

    statistics: TextStatistics
    quality: TextQualityReport
    sections: Dict[str, int] = Field(default_factory=dict)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)


class ExtractionMetadata(BaseModel):
    """Metadata about the extracted file and the extraction itself."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    file_size: int = Field(default=0, ge=0)
    page_count: Optional[int] = Field(default=None, ge=0)
    word_count: int = Field(default=0, ge=0)
    character_count: int = Field(default=0, ge=0)
    extraction_time: float = Field(default=0.0, ge=0.0, description="Milliseconds")
    extracted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    backend: Optional[str] = None

    # Attached by the extraction service after a successful extraction
    sentence_count: Optional[int] = None
    paragraph_count: Optional[int] = None
    average_words_per_sentence: Optional[int] = None
    average_sentences_per_paragraph: Optional[int] = None
    text_quality: Optional[TextQualityReport] = None
    detected_sections: List[str] = Field(default_factory=list)
    contact_info: Optional[ContactInfo] = None


class ExtractionResult(BaseModel):
    """Result of one extraction call."""

    model_config = ConfigDict(frozen=True)

    success: bool
    file_type: SupportedFileType
    extracted_text: str = ""
    metadata: ExtractionMetadata
    warnings: List[str] = Field(default_factory=list)
    error: Optional[ExtractionErrorInfo] = None

    @property
    def error_code(self) -> Optional[ExtractionErrorCode]:
        """Convenience accessor for the failure code."""
        return self.error.code if self.error else None


class ExtractionProgress(BaseModel):
    """A progress update emitted while a file is being extracted."""

    model_config = ConfigDict(frozen=True)

    status: ExtractionStatus
    progress: int = Field(ge=0, le=100)
    current_step: str
    current_step_index: int = Field(default=0, ge=0)
    total_steps: int = Field(default=5, ge=1)


class BatchProgress(ExtractionProgress):
    """Progress update tagged with its position inside a batch."""

    file_index: int = Field(ge=0)
    total_files: int = Field(ge=1)
    file_name: str


class ExtractionQualityReport(BaseModel):
    """Caller-facing verdict on an extraction result."""

    model_config = ConfigDict(frozen=True)

    is_good_quality: bool
    score: int = Field(ge=0, le=100)
    suggestions: List[str] = Field(default_factory=list)
