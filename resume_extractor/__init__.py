"""Text extraction pipeline for uploaded résumés (PDF, DOC, DOCX).

Usage:
    from resume_extractor import UploadedFile, extract_text_from_file

    result = await extract_text_from_file(UploadedFile.from_path(path))
    if result.success:
        print(result.metadata.word_count, result.metadata.detected_sections)
"""

from resume_extractor.models.config import (
    DEFAULT_EXTRACTION_CONFIG,
    DEFAULT_TEXT_PROCESSING,
    ExtractionConfig,
    TextProcessingOptions,
)
from resume_extractor.models.extraction import (
    BatchProgress,
    ExtractionErrorCode,
    ExtractionProgress,
    ExtractionQualityReport,
    ExtractionResult,
    ExtractionStatus,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.services.extraction_service import (
    FileExtractionService,
    create_extraction_service,
    detect_file_type,
    extract_text_from_file,
    extract_text_from_files,
)
from resume_extractor.services.quality import (
    format_file_size,
    is_file_supported,
    validate_extraction_quality,
)
from resume_extractor.services.text_processor import (
    TextProcessor,
    analyze_resume_text,
    process_text,
)
from resume_extractor.utils.exceptions import ExtractionError

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_EXTRACTION_CONFIG",
    "DEFAULT_TEXT_PROCESSING",
    "ExtractionConfig",
    "TextProcessingOptions",
    "BatchProgress",
    "ExtractionErrorCode",
    "ExtractionProgress",
    "ExtractionQualityReport",
    "ExtractionResult",
    "ExtractionStatus",
    "SupportedFileType",
    "UploadedFile",
    "FileExtractionService",
    "create_extraction_service",
    "detect_file_type",
    "extract_text_from_file",
    "extract_text_from_files",
    "format_file_size",
    "is_file_supported",
    "validate_extraction_quality",
    "TextProcessor",
    "analyze_resume_text",
    "process_text",
    "ExtractionError",
]
