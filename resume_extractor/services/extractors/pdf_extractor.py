"""PDF text extractor.

Two-tier extraction: a library-backed primary backend (PyMuPDF by default)
and the dependency-free raw-stream backend, which is tried exactly once when
the primary backend fails for any reason, including the library not being
installed.
"""

import asyncio
import time
from typing import Callable, List, Optional

import structlog

from resume_extractor.models.config import (
    MB,
    PDF_MIME_TYPE,
    ConfigOverrides,
    ExtractionConfig,
    PDFOptions,
)
from resume_extractor.models.extraction import (
    ExtractionProgress,
    ExtractionResult,
    ExtractionStatus,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.observability.metrics import PDF_BACKEND_RUNS, PDF_FALLBACKS
from resume_extractor.services.extractors.base import FileExtractor
from resume_extractor.services.extractors.pdf_backends import (
    BackendOutput,
    PdfBackend,
    RawStreamBackend,
    create_primary_backend,
)
from resume_extractor.utils.exceptions import (
    FileCorruptedError,
    FileTooLargeError,
    ParsingError,
    UnsupportedFormatError,
)

logger = structlog.get_logger()


class PDFExtractor(FileExtractor):
    """Extracts text from PDF uploads."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        primary: Optional[PdfBackend] = None,
        fallback: Optional[PdfBackend] = None,
    ):
        """Initialize PDF extractor

        Args:
            config: Extraction configuration (defaults when None)
            primary: Primary backend; built from ``config.pdf.backend`` if None
            fallback: Fallback backend; the raw-stream scanner if None
        """
        super().__init__(config)
        self._custom_primary = primary is not None
        self.primary = primary or create_primary_backend(self.config.pdf.backend)
        self.fallback = fallback or RawStreamBackend()

    def get_supported_formats(self) -> List[SupportedFileType]:
        return [SupportedFileType.PDF]

    async def validate_file(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> bool:
        """Validate declared type and size.

        Raises:
            UnsupportedFormatError: Declared MIME type is not application/pdf
            FileTooLargeError: File exceeds ``pdf.max_file_size_mb``
            FileCorruptedError: File is empty
        """
        options = self.config.merged(config).pdf

        if file.type.lower() != PDF_MIME_TYPE:
            raise UnsupportedFormatError("Invalid file type. Expected PDF file.")

        if file.size > options.max_file_size_mb * MB:
            raise FileTooLargeError(
                f"File too large. Maximum size is {options.max_file_size_mb}MB"
            )

        if file.size == 0:
            raise FileCorruptedError("File is empty")

        return True

    async def extract_text(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> ExtractionResult:
        """
        Extract text from a PDF upload.

        Strategy:
        1. Validate the upload
        2. Read the body into an owned buffer
        3. Parse with the primary backend, falling back to the raw-stream scan
        4. Normalize and enforce the minimum text length
        """
        start_time = time.perf_counter()
        merged = self.config.merged(config)
        warnings: List[str] = []

        try:
            await self.validate_file(file, merged)

            buffer = await file.read_bytes()
            if not buffer.startswith(b"%PDF"):
                warnings.append("File does not start with a %PDF header")

            output = await self._parse(buffer, merged.pdf, warnings)
            warnings.extend(output.warnings)

            text = self.post_process(output.text, merged)

            logger.info(
                "pdf_extraction_success",
                file_name=file.name,
                backend=output.backend,
                page_count=output.page_count,
                text_length=len(text),
            )
            return self.build_success(
                file,
                SupportedFileType.PDF,
                text,
                start_time,
                page_count=output.page_count,
                backend=output.backend,
                warnings=warnings,
            )

        except Exception as e:
            return self.build_failure(
                file, SupportedFileType.PDF, e, start_time, warnings
            )

    async def _parse(
        self, buffer: bytearray, options: PDFOptions, warnings: List[str]
    ) -> BackendOutput:
        primary = self._primary_for(options)

        try:
            if not primary.validate_setup():
                raise ParsingError(f"{primary.name} backend is not installed")

            # The primary backend gets its own copy; the fallback needs the
            # original bytes intact if the primary consumes or corrupts them.
            output = await asyncio.to_thread(primary.extract, bytearray(buffer), options)
            PDF_BACKEND_RUNS.labels(backend=primary.name, status="success").inc()
            return output

        except Exception as e:
            PDF_BACKEND_RUNS.labels(backend=primary.name, status="failed").inc()
            logger.warning(
                "pdf_primary_failed",
                backend=primary.name,
                fallback=self.fallback.name,
                error=str(e),
            )
            warnings.append(
                f"Primary PDF parser ({primary.name}) failed: {e}. "
                f"Used {self.fallback.name} fallback."
            )

        try:
            output = await asyncio.to_thread(self.fallback.extract, buffer, options)
        except Exception:
            PDF_FALLBACKS.labels(outcome="failed").inc()
            raise

        PDF_FALLBACKS.labels(outcome="success").inc()
        return output

    def _primary_for(self, options: PDFOptions) -> PdfBackend:
        if self._custom_primary or self.primary.name == options.backend.value:
            return self.primary
        return create_primary_backend(options.backend)


def create_pdf_extractor(config: Optional[ExtractionConfig] = None) -> PDFExtractor:
    """Create a PDF extractor with default backends."""
    return PDFExtractor(config)


async def extract_pdf_text(
    file: UploadedFile,
    on_progress: Optional[Callable[[ExtractionProgress], None]] = None,
    config: ConfigOverrides = None,
) -> ExtractionResult:
    """Extract text from a single PDF with a throwaway extractor.

    ``on_progress`` receives one update at 50 before parsing and a final one
    at 100 once the result is known.
    """
    extractor = create_pdf_extractor(ExtractionConfig().merged(config))

    if on_progress is not None:
        on_progress(
            ExtractionProgress(
                status=ExtractionStatus.EXTRACTING,
                progress=50,
                current_step="Extracting PDF content",
                total_steps=1,
            )
        )

    result = await extractor.extract_text(file)

    if on_progress is not None:
        on_progress(
            ExtractionProgress(
                status=(
                    ExtractionStatus.SUCCESS if result.success else ExtractionStatus.ERROR
                ),
                progress=100,
                current_step=(
                    "PDF extraction completed"
                    if result.success
                    else "PDF extraction failed"
                ),
                total_steps=1,
            )
        )
    return result
