"""Extraction service: the single entry point for résumé uploads.

Detects the real file type, validates the upload, dispatches to the PDF or
Word extractor and enriches successful results with the text processor's
analysis (statistics, quality report, detected sections, contact details).

Usage:
    service = FileExtractionService()
    result = await service.extract_from_file(
        UploadedFile.from_path(Path("cv.pdf")),
        on_progress=lambda p: print(p.progress, p.current_step),
    )
"""

import time
from typing import Callable, List, Optional, Sequence

import structlog

from resume_extractor.models.config import (
    EXTRACTION_STEPS,
    FILE_EXTENSION_MAPPINGS,
    FILE_TYPE_INFO,
    FILE_TYPE_MAPPINGS,
    ConfigOverrides,
    ExtractionConfig,
    FileTypeInfo,
    TextProcessingOptions,
)
from resume_extractor.models.extraction import (
    BatchProgress,
    ExtractionErrorInfo,
    ExtractionMetadata,
    ExtractionProgress,
    ExtractionResult,
    ExtractionStatus,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.observability.context import correlation_id_context
from resume_extractor.observability.metrics import (
    EXTRACTION_DURATION,
    EXTRACTION_ERRORS,
    EXTRACTIONS_TOTAL,
    FILE_SIZE_BYTES,
)
from resume_extractor.services.extractors.base import (
    FileExtractor,
    elapsed_ms,
    format_details,
)
from resume_extractor.services.extractors.pdf_extractor import PDFExtractor
from resume_extractor.services.extractors.word_extractor import WordExtractor
from resume_extractor.services.text_processor import (
    TextProcessor,
    analyze_resume_text,
)
from resume_extractor.utils.exceptions import UnsupportedFormatError, classify_error

logger = structlog.get_logger()

ProgressCallback = Callable[[ExtractionProgress], None]
BatchProgressCallback = Callable[[int, BatchProgress], None]

TOTAL_STEPS = 5


class _ProgressReporter:
    """Emits progress updates that never move backwards."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self._callback = callback
        self.last_progress = 0

    def emit(
        self,
        status: ExtractionStatus,
        progress: int,
        step: str,
        step_index: int,
    ) -> None:
        self.last_progress = max(self.last_progress, progress)
        if self._callback is None:
            return
        self._callback(
            ExtractionProgress(
                status=status,
                progress=self.last_progress,
                current_step=step,
                current_step_index=step_index,
                total_steps=TOTAL_STEPS,
            )
        )


class FileExtractionService:
    """Orchestrates type detection, validation, extraction and analysis.

    Holds only the configuration and extractors built at construction, so
    one instance can serve any number of sequential or concurrent calls.
    """

    def __init__(
        self,
        config: ConfigOverrides = None,
        pdf_extractor: Optional[PDFExtractor] = None,
        word_extractor: Optional[WordExtractor] = None,
    ):
        """Initialize extraction service

        Args:
            config: Full config or partial overrides of the defaults
            pdf_extractor: Custom PDF extractor (built from config if None)
            word_extractor: Custom Word extractor (built from config if None)
        """
        self.config = ExtractionConfig().merged(config)
        self.pdf_extractor = pdf_extractor or PDFExtractor(self.config)
        self.word_extractor = word_extractor or WordExtractor(self.config)
        self.text_processor = TextProcessor()

    async def extract_from_file(
        self,
        file: UploadedFile,
        on_progress: Optional[ProgressCallback] = None,
        config: ConfigOverrides = None,
    ) -> ExtractionResult:
        """
        Extract text from one uploaded file.

        Never raises: every failure is returned as an unsuccessful result
        with a classified error code.

        Args:
            file: The upload to extract
            on_progress: Receives non-decreasing progress updates
            config: Per-call overrides merged over the service config

        Returns:
            ExtractionResult whose ``metadata.extraction_time`` covers the
            whole call
        """
        start_time = time.perf_counter()
        reporter = _ProgressReporter(on_progress)
        detected: Optional[SupportedFileType] = None

        with correlation_id_context():
            try:
                merged = self.config.merged(config)

                detected = self.detect_file_type(file)
                if detected is None:
                    raise UnsupportedFormatError(
                        f"Unsupported file type: {file.type or file.name}"
                    )
                steps = EXTRACTION_STEPS[detected]

                logger.info(
                    "extraction_started",
                    file_name=file.name,
                    file_size=file.size,
                    file_type=detected.value,
                )
                reporter.emit(
                    ExtractionStatus.EXTRACTING, 0, "Initializing extraction", 0
                )

                await self.validate_file(file, merged)
                reporter.emit(ExtractionStatus.EXTRACTING, 20, "File validated", 1)

                reporter.emit(ExtractionStatus.EXTRACTING, 40, steps[2], 2)
                result = await self._extractor_for(detected).extract_text(file, merged)
                reporter.emit(ExtractionStatus.EXTRACTING, 80, steps[3], 3)

                result = self._finalize(result, start_time)

                reporter.emit(
                    ExtractionStatus.SUCCESS if result.success else ExtractionStatus.ERROR,
                    100,
                    "Extraction completed" if result.success else "Extraction failed",
                    4,
                )

            except Exception as e:
                result = self._failure_result(file, detected, e, start_time)
                try:
                    reporter.emit(
                        ExtractionStatus.ERROR,
                        reporter.last_progress,
                        f"Error: {result.error.message}",
                        0,
                    )
                except Exception as callback_error:
                    logger.warning(
                        "progress_callback_failed",
                        file_name=file.name,
                        error=str(callback_error),
                    )

            self._record(file, result)
            return result

    async def extract_from_files(
        self,
        files: Sequence[UploadedFile],
        on_progress: Optional[BatchProgressCallback] = None,
        config: ConfigOverrides = None,
    ) -> List[ExtractionResult]:
        """
        Extract a batch of files one after another.

        A failing file never aborts the batch; results keep input order.

        Args:
            files: Uploads to extract
            on_progress: Called as ``on_progress(index, BatchProgress)``
            config: Per-call overrides applied to every file
        """
        results: List[ExtractionResult] = []
        total = len(files)

        for index, file in enumerate(files):
            callback = None
            if on_progress is not None:
                callback = self._batch_callback(on_progress, index, total, file)

            results.append(await self.extract_from_file(file, callback, config))

        logger.info(
            "batch_extraction_completed",
            total_files=total,
            succeeded=sum(1 for r in results if r.success),
        )
        return results

    def detect_file_type(self, file: UploadedFile) -> Optional[SupportedFileType]:
        """Detect the file type from MIME type, then extension.

        Returns:
            The detected type, or None when neither is recognised
        """
        mime_type = file.type.lower()
        for mime, file_type in FILE_TYPE_MAPPINGS.items():
            if mime_type == mime.lower():
                return file_type

        file_name = file.name.lower()
        for extension, file_type in FILE_EXTENSION_MAPPINGS.items():
            if file_name.endswith(extension):
                return file_type

        return None

    async def validate_file(
        self, file: UploadedFile, config: ConfigOverrides = None
    ) -> bool:
        """Run the format-specific validator.

        Raises:
            ExtractionError: Tagged error describing the rejection
        """
        file_type = self.detect_file_type(file)
        if file_type is None:
            raise UnsupportedFormatError("Unsupported file type")
        return await self._extractor_for(file_type).validate_file(file, config)

    def process_text(
        self, text: str, options: Optional[TextProcessingOptions] = None
    ) -> str:
        return self.text_processor.process(text, options)

    def get_supported_types(self) -> List[SupportedFileType]:
        return list(SupportedFileType)

    def get_file_type_info(self, file_type: SupportedFileType) -> FileTypeInfo:
        return FILE_TYPE_INFO[SupportedFileType(file_type)]

    def _extractor_for(self, file_type: SupportedFileType) -> FileExtractor:
        if file_type == SupportedFileType.PDF:
            return self.pdf_extractor
        return self.word_extractor

    def _finalize(self, result: ExtractionResult, start_time: float) -> ExtractionResult:
        """Attach text analysis on success and the end-to-end timing."""
        update = {"extraction_time": elapsed_ms(start_time)}

        if result.success and result.extracted_text:
            analysis = analyze_resume_text(result.extracted_text)
            update.update(
                sentence_count=analysis.statistics.sentence_count,
                paragraph_count=analysis.statistics.paragraph_count,
                average_words_per_sentence=analysis.statistics.average_words_per_sentence,
                average_sentences_per_paragraph=(
                    analysis.statistics.average_sentences_per_paragraph
                ),
                text_quality=analysis.quality,
                detected_sections=list(analysis.sections),
                contact_info=analysis.contact_info,
            )

        return result.model_copy(
            update={"metadata": result.metadata.model_copy(update=update)}
        )

    def _failure_result(
        self,
        file: UploadedFile,
        detected: Optional[SupportedFileType],
        error: Exception,
        start_time: float,
    ) -> ExtractionResult:
        code = classify_error(error)
        logger.warning(
            "extraction_aborted",
            file_name=file.name,
            code=code.value,
            error=str(error),
        )
        return ExtractionResult(
            success=False,
            file_type=detected or SupportedFileType.PDF,
            extracted_text="",
            metadata=ExtractionMetadata(
                file_name=file.name,
                file_size=file.size,
                extraction_time=elapsed_ms(start_time),
            ),
            error=ExtractionErrorInfo(
                code=code,
                message=str(error) or "Unknown error occurred",
                details=format_details(error),
            ),
        )

    def _record(self, file: UploadedFile, result: ExtractionResult) -> None:
        file_type = result.file_type.value
        status = "success" if result.success else "failed"

        EXTRACTIONS_TOTAL.labels(file_type=file_type, status=status).inc()
        EXTRACTION_DURATION.labels(file_type=file_type).observe(
            result.metadata.extraction_time / 1000.0
        )
        FILE_SIZE_BYTES.observe(file.size)
        if result.error is not None:
            EXTRACTION_ERRORS.labels(code=result.error.code.value).inc()

        logger.info(
            "extraction_completed",
            file_name=file.name,
            file_type=file_type,
            success=result.success,
            word_count=result.metadata.word_count,
            duration_ms=round(result.metadata.extraction_time, 2),
        )

    @staticmethod
    def _batch_callback(
        on_progress: BatchProgressCallback,
        index: int,
        total: int,
        file: UploadedFile,
    ) -> ProgressCallback:
        def callback(progress: ExtractionProgress) -> None:
            on_progress(
                index,
                BatchProgress(
                    **progress.model_dump(),
                    file_index=index,
                    total_files=total,
                    file_name=file.name,
                ),
            )

        return callback


def create_extraction_service(config: ConfigOverrides = None) -> FileExtractionService:
    """Create an extraction service with the given configuration."""
    return FileExtractionService(config)


async def extract_text_from_file(
    file: UploadedFile,
    on_progress: Optional[ProgressCallback] = None,
    config: ConfigOverrides = None,
) -> ExtractionResult:
    """Extract one file with a throwaway service."""
    service = create_extraction_service(config)
    return await service.extract_from_file(file, on_progress)


async def extract_text_from_files(
    files: Sequence[UploadedFile],
    on_progress: Optional[BatchProgressCallback] = None,
    config: ConfigOverrides = None,
) -> List[ExtractionResult]:
    """Extract a batch sequentially with one shared service."""
    service = create_extraction_service(config)
    return await service.extract_from_files(files, on_progress)


def detect_file_type(file: UploadedFile) -> Optional[SupportedFileType]:
    return FileExtractionService().detect_file_type(file)
