"""Abstract base class for document extractors.

All extractors must inherit from FileExtractor and implement
extract_text(), validate_file() and get_supported_formats().
"""

import re
import time
import traceback
import unicodedata
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import structlog

from resume_extractor.models.config import ConfigOverrides, ExtractionConfig
from resume_extractor.models.extraction import (
    ExtractionErrorInfo,
    ExtractionMetadata,
    ExtractionResult,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.utils.exceptions import (
    DEFAULT_CLASSIFICATION_RULES,
    ClassificationRule,
    TextTooShortError,
    classify_error,
)

logger = structlog.get_logger()

_RESIDUAL_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


class FileExtractor(ABC):
    """
    Abstract base class for format-specific extractors.

    All concrete extractors must implement:
    - extract_text(): Produce an ExtractionResult for an uploaded file
    - validate_file(): Raise a tagged error if the file is unacceptable
    - get_supported_formats(): Formats handled by this extractor

    Extractors keep only the configuration captured at construction.
    """

    # Ordered message-substring rules for untagged third-party errors
    classification_rules: Sequence[ClassificationRule] = DEFAULT_CLASSIFICATION_RULES

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    @abstractmethod
    async def extract_text(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> ExtractionResult:
        """
        Extract text from an uploaded file.

        Args:
            file: Uploaded file handle
            config: Per-call overrides merged over the extractor config

        Returns:
            ExtractionResult with success status and cleaned text

        Raises:
            Should NOT raise exceptions - catch and return error in result
        """
        raise NotImplementedError("Subclasses must implement extract_text()")

    @abstractmethod
    async def validate_file(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> bool:
        """
        Check that the file can be handled by this extractor.

        Returns:
            True when the file is acceptable

        Raises:
            ExtractionError: Describing why the file was rejected
        """
        raise NotImplementedError("Subclasses must implement validate_file()")

    @abstractmethod
    def get_supported_formats(self) -> List[SupportedFileType]:
        """Return the formats this extractor handles."""
        raise NotImplementedError("Subclasses must implement get_supported_formats()")

    def post_process(self, text: str, config: ExtractionConfig) -> str:
        """Normalize raw backend output and enforce the minimum length.

        Raises:
            TextTooShortError: If less than ``min_text_length`` characters remain
        """
        settings = config.text_processing
        processed = text

        if settings.remove_extra_whitespace:
            processed = re.sub(r"\s+", " ", processed)

        if settings.normalize_encoding:
            processed = unicodedata.normalize("NFC", processed)
            processed = _RESIDUAL_CONTROL_CHARS.sub("", processed)

        processed = processed.strip()

        if len(processed) < settings.min_text_length:
            raise TextTooShortError(
                f"Extracted text too short: {len(processed)} characters "
                f"(minimum: {settings.min_text_length})"
            )
        return processed

    @staticmethod
    def count_words(text: str) -> int:
        """Count whitespace-separated words."""
        return len([w for w in re.split(r"\s+", text) if w])

    def build_success(
        self,
        file: UploadedFile,
        file_type: SupportedFileType,
        text: str,
        start_time: float,
        page_count: Optional[int] = None,
        backend: Optional[str] = None,
        warnings: Optional[List[str]] = None,
    ) -> ExtractionResult:
        """Assemble a successful result."""
        return ExtractionResult(
            success=True,
            file_type=file_type,
            extracted_text=text,
            metadata=ExtractionMetadata(
                file_name=file.name,
                file_size=file.size,
                page_count=page_count,
                word_count=self.count_words(text),
                character_count=len(text),
                extraction_time=elapsed_ms(start_time),
                backend=backend,
            ),
            warnings=list(warnings or []),
        )

    def build_failure(
        self,
        file: UploadedFile,
        file_type: SupportedFileType,
        error: BaseException,
        start_time: float,
        warnings: Optional[List[str]] = None,
    ) -> ExtractionResult:
        """Convert an exception into a failed result."""
        code = classify_error(error, self.classification_rules)
        logger.warning(
            "extraction_failed",
            file_name=file.name,
            file_type=file_type.value,
            code=code.value,
            error=str(error),
        )
        return ExtractionResult(
            success=False,
            file_type=file_type,
            extracted_text="",
            metadata=ExtractionMetadata(
                file_name=file.name,
                file_size=file.size,
                extraction_time=elapsed_ms(start_time),
            ),
            warnings=list(warnings or []),
            error=ExtractionErrorInfo(
                code=code,
                message=str(error) or error.__class__.__name__,
                details=format_details(error),
            ),
        )


def elapsed_ms(start_time: float) -> float:
    """Milliseconds elapsed since a ``time.perf_counter()`` reading."""
    return (time.perf_counter() - start_time) * 1000.0


def format_details(error: BaseException) -> Optional[str]:
    """Traceback text of ``error`` if it carries one."""
    if error.__traceback__ is None:
        return None
    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )
