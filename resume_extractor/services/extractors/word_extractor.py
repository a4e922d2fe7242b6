"""Word document (.doc / .docx) text extractor.

Word extraction is single-shot: the whole body is handed to the document
backend at once, there is no page iteration.
"""

import asyncio
import time
from typing import List, Optional

import structlog

from resume_extractor.models.config import (
    DOC_MIME_TYPES,
    DOCX_MIME_TYPE,
    MB,
    ConfigOverrides,
    ExtractionConfig,
)
from resume_extractor.models.extraction import (
    ExtractionErrorCode,
    ExtractionResult,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.services.extractors.base import FileExtractor
from resume_extractor.services.extractors.word_backends import (
    OLE_SIGNATURE,
    DocBackend,
    PythonDocxBackend,
)
from resume_extractor.utils.exceptions import (
    FileCorruptedError,
    FileTooLargeError,
    ParsingError,
    UnsupportedFormatError,
)

logger = structlog.get_logger()

WORD_MIME_TYPES = (DOCX_MIME_TYPE,) + DOC_MIME_TYPES
WORD_EXTENSIONS = (".doc", ".docx")

# Container errors ("zip", "ole") and the library name join the usual buckets
WORD_CLASSIFICATION_RULES = (
    (("corrupted", "invalid", "zip", "ole"), ExtractionErrorCode.FILE_CORRUPTED),
    (("too large", "size"), ExtractionErrorCode.FILE_TOO_LARGE),
    (("too short", "length"), ExtractionErrorCode.TEXT_TOO_SHORT),
    (("parsing", "parse", "docx"), ExtractionErrorCode.PARSING_FAILED),
    (("encoding", "decode"), ExtractionErrorCode.ENCODING_ERROR),
    (("format", "unsupported"), ExtractionErrorCode.UNSUPPORTED_FORMAT),
    (("permission", "access"), ExtractionErrorCode.PERMISSION_DENIED),
)


class WordExtractor(FileExtractor):
    """Extracts text from Word uploads."""

    classification_rules = WORD_CLASSIFICATION_RULES

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        backend: Optional[DocBackend] = None,
    ):
        super().__init__(config)
        self.backend = backend or PythonDocxBackend()

    def get_supported_formats(self) -> List[SupportedFileType]:
        return [SupportedFileType.DOC, SupportedFileType.DOCX]

    def detect_document_type(self, file: UploadedFile) -> Optional[SupportedFileType]:
        """Resolve .doc vs .docx from MIME type, then extension."""
        mime_type = file.type.lower()
        if "wordprocessingml" in mime_type:
            return SupportedFileType.DOCX
        if "msword" in mime_type or "vnd.ms-word" in mime_type:
            return SupportedFileType.DOC

        if file.extension == ".docx":
            return SupportedFileType.DOCX
        if file.extension == ".doc":
            return SupportedFileType.DOC
        return None

    def resolve_file_type(self, file: UploadedFile) -> SupportedFileType:
        """Best-guess type for the result; validation rejects non-Word files."""
        return self.detect_document_type(file) or SupportedFileType.DOCX

    async def validate_file(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> bool:
        """Validate declared type/extension and size.

        Raises:
            UnsupportedFormatError: Neither MIME type nor extension is Word
            FileTooLargeError: File exceeds ``docx.max_file_size_mb``
            FileCorruptedError: File is empty or implausibly small
        """
        options = self.config.merged(config).docx

        has_valid_mime = file.type.lower() in WORD_MIME_TYPES
        has_valid_extension = file.extension in WORD_EXTENSIONS
        if not has_valid_mime and not has_valid_extension:
            raise UnsupportedFormatError(
                "Invalid file type. Expected Word document (.doc or .docx), "
                f"but got type: {file.type or 'none'} and extension: "
                f"{file.extension or 'none'}"
            )

        if file.size > options.max_file_size_mb * MB:
            raise FileTooLargeError(
                f"File too large. Maximum size is {options.max_file_size_mb}MB"
            )

        if file.size == 0:
            raise FileCorruptedError("File is empty")

        if file.size < options.min_file_size_bytes:
            raise FileCorruptedError(
                "File appears to be too small to be a valid Word document"
            )

        return True

    async def extract_text(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> ExtractionResult:
        """Extract text from a Word upload."""
        start_time = time.perf_counter()
        merged = self.config.merged(config)
        file_type = self.resolve_file_type(file)
        warnings: List[str] = []

        try:
            await self.validate_file(file, merged)

            if not self.backend.validate_setup():
                raise ParsingError(f"{self.backend.name} backend is not installed")

            buffer = bytes(await file.read_bytes())
            if file_type == SupportedFileType.DOCX and buffer.startswith(OLE_SIGNATURE):
                warnings.append("File is labelled .docx but has a legacy .doc container")

            raw_text = await asyncio.to_thread(self.backend.extract, buffer, merged.docx)
            text = self.post_process(raw_text, merged)

            logger.info(
                "word_extraction_success",
                file_name=file.name,
                file_type=file_type.value,
                backend=self.backend.name,
                text_length=len(text),
            )
            return self.build_success(
                file,
                file_type,
                text,
                start_time,
                backend=self.backend.name,
                warnings=warnings,
            )

        except Exception as e:
            return self.build_failure(file, file_type, e, start_time, warnings)


def create_word_extractor(config: Optional[ExtractionConfig] = None) -> WordExtractor:
    """Create a Word extractor with the python-docx backend."""
    return WordExtractor(config)


async def extract_word_text(
    file: UploadedFile, config: ConfigOverrides = None
) -> ExtractionResult:
    """Extract text from a single Word document with a throwaway extractor."""
    extractor = create_word_extractor(ExtractionConfig().merged(config))
    return await extractor.extract_text(file)
