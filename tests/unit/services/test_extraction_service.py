"""Unit tests for FileExtractionService."""

from unittest.mock import AsyncMock, Mock

import pytest

from resume_extractor.models.config import FILE_TYPE_INFO
from resume_extractor.models.extraction import (
    ExtractionErrorCode,
    ExtractionErrorInfo,
    ExtractionMetadata,
    ExtractionResult,
    ExtractionStatus,
    SupportedFileType,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.observability.metrics import EXTRACTIONS_TOTAL
from resume_extractor.services.extraction_service import (
    FileExtractionService,
    detect_file_type,
    extract_text_from_files,
)
from resume_extractor.utils.exceptions import FileTooLargeError

RESUME_TEXT = (
    "Jane Doe jane@example.com (555) 123-4567. "
    "Experience: Senior Engineer at Acme Corp leading the payments project. "
    "Education: BS Computer Science, State University. "
    "Skills: Python, SQL, Kubernetes and distributed systems."
)


def success_result(file: UploadedFile, file_type=SupportedFileType.PDF, text=RESUME_TEXT):
    return ExtractionResult(
        success=True,
        file_type=file_type,
        extracted_text=text,
        metadata=ExtractionMetadata(
            file_name=file.name,
            file_size=file.size,
            word_count=len(text.split()),
            character_count=len(text),
            extraction_time=123456.0,
        ),
    )


def failure_result(file: UploadedFile, code=ExtractionErrorCode.PARSING_FAILED):
    return ExtractionResult(
        success=False,
        file_type=SupportedFileType.PDF,
        metadata=ExtractionMetadata(file_name=file.name, file_size=file.size),
        error=ExtractionErrorInfo(code=code, message="could not parse"),
    )


def mock_extractor(extract=None):
    extractor = Mock()
    extractor.validate_file = AsyncMock(return_value=True)
    extractor.extract_text = AsyncMock(side_effect=extract or success_result_for)
    return extractor


async def success_result_for(file, config=None):
    return success_result(file)


@pytest.fixture
def pdf_extractor():
    return mock_extractor()


@pytest.fixture
def word_extractor():
    async def extract(file, config=None):
        return success_result(file, SupportedFileType.DOCX)

    return mock_extractor(extract)


@pytest.fixture
def service(pdf_extractor, word_extractor):
    return FileExtractionService(
        pdf_extractor=pdf_extractor, word_extractor=word_extractor
    )


def pdf_file(name="resume.pdf"):
    return UploadedFile.from_bytes(name, b"%PDF-1.4 body", "application/pdf")


class TestDetectFileType:
    @pytest.mark.parametrize(
        "name, mime, expected",
        [
            ("resume.docx", "application/pdf", SupportedFileType.PDF),
            ("resume.pdf", "application/msword", SupportedFileType.DOC),
            ("resume.pdf", "APPLICATION/PDF", SupportedFileType.PDF),
            ("resume.docx", "", SupportedFileType.DOCX),
            ("resume.DOC", "application/octet-stream", SupportedFileType.DOC),
            ("resume.txt", "text/plain", None),
            ("resume", "", None),
        ],
    )
    def test_mime_takes_precedence(self, service, name, mime, expected):
        upload = UploadedFile(name=name, size=10, type=mime)

        assert service.detect_file_type(upload) == expected

    def test_module_helper(self):
        upload = UploadedFile(name="resume.docx", size=10, type="")

        assert detect_file_type(upload) == SupportedFileType.DOCX


class TestExtractFromFile:
    @pytest.mark.asyncio
    async def test_success_attaches_analysis(self, service, pdf_extractor):
        upload = pdf_file()

        result = await service.extract_from_file(upload)

        assert result.success is True
        meta = result.metadata
        assert "experience" in meta.detected_sections
        assert "education" in meta.detected_sections
        assert meta.text_quality is not None and meta.text_quality.is_valid
        assert meta.contact_info.emails == ["jane@example.com"]
        assert meta.sentence_count > 0
        assert meta.paragraph_count == 1
        assert meta.average_words_per_sentence > 0
        # Service time replaces the extractor's own timing
        assert meta.extraction_time != 123456.0
        pdf_extractor.extract_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatches_word_documents(self, service, word_extractor):
        upload = UploadedFile.from_bytes("cv.docx", b"x" * 2048)

        result = await service.extract_from_file(upload)

        assert result.file_type == SupportedFileType.DOCX
        word_extractor.extract_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_progress_sequence_on_success(self, service):
        updates = []

        await service.extract_from_file(pdf_file(), on_progress=updates.append)

        assert [u.progress for u in updates] == [0, 20, 40, 80, 100]
        assert [u.current_step_index for u in updates] == [0, 1, 2, 3, 4]
        assert updates[0].current_step == "Initializing extraction"
        assert updates[2].current_step == "Extracting text content"
        assert all(u.status == ExtractionStatus.EXTRACTING for u in updates[:-1])
        assert updates[-1].status == ExtractionStatus.SUCCESS
        assert all(u.total_steps == 5 for u in updates)

    @pytest.mark.asyncio
    async def test_extractor_failure_result_passes_through(self, pdf_extractor):
        async def extract(file, config=None):
            return failure_result(file)

        pdf_extractor.extract_text = AsyncMock(side_effect=extract)
        service = FileExtractionService(pdf_extractor=pdf_extractor)
        updates = []

        result = await service.extract_from_file(pdf_file(), updates.append)

        assert result.success is False
        assert result.error_code == ExtractionErrorCode.PARSING_FAILED
        assert result.metadata.text_quality is None
        assert updates[-1].status == ExtractionStatus.ERROR
        assert updates[-1].progress == 100

    @pytest.mark.asyncio
    async def test_validation_error_is_tagged(self, service, pdf_extractor):
        pdf_extractor.validate_file.side_effect = FileTooLargeError(
            "File too large. Maximum size is 50MB"
        )
        updates = []

        result = await service.extract_from_file(pdf_file(), updates.append)

        assert result.success is False
        assert result.error_code == ExtractionErrorCode.FILE_TOO_LARGE
        assert result.error.details
        assert [u.progress for u in updates] == [0, 0]
        assert updates[-1].status == ExtractionStatus.ERROR
        assert updates[-1].current_step.startswith("Error: File too large")
        pdf_extractor.extract_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_progress_never_decreases_on_late_error(self, service, pdf_extractor):
        pdf_extractor.extract_text = AsyncMock(side_effect=RuntimeError("boom"))
        updates = []

        result = await service.extract_from_file(pdf_file(), updates.append)

        progress = [u.progress for u in updates]
        assert progress == [0, 20, 40, 40]
        assert progress == sorted(progress)
        assert updates[-1].status == ExtractionStatus.ERROR
        assert result.error_code == ExtractionErrorCode.UNKNOWN_ERROR
        assert result.error.message == "boom"

    @pytest.mark.asyncio
    async def test_untagged_errors_classified_by_message(self, service, pdf_extractor):
        pdf_extractor.extract_text = AsyncMock(
            side_effect=ValueError("Failed to parse xref table")
        )

        result = await service.extract_from_file(pdf_file())

        assert result.error_code == ExtractionErrorCode.PARSING_FAILED

    @pytest.mark.asyncio
    async def test_unsupported_format(self, service):
        upload = UploadedFile.from_bytes("photo.png", b"\x89PNG" * 100, "image/png")

        result = await service.extract_from_file(upload)

        assert result.success is False
        assert result.error_code == ExtractionErrorCode.UNSUPPORTED_FORMAT
        assert result.file_type == SupportedFileType.PDF
        assert result.extracted_text == ""
        assert result.metadata.file_name == "photo.png"
        assert result.metadata.file_size == 400
        assert result.metadata.extraction_time >= 0

    @pytest.mark.asyncio
    async def test_failure_keeps_detected_type(self, service, word_extractor):
        word_extractor.validate_file.side_effect = RuntimeError("File corrupted")
        upload = UploadedFile.from_bytes("cv.doc", b"x" * 10)

        result = await service.extract_from_file(upload)

        assert result.file_type == SupportedFileType.DOC
        assert result.error_code == ExtractionErrorCode.FILE_CORRUPTED

    @pytest.mark.asyncio
    async def test_callback_errors_become_results(self, service):
        def explode(progress):
            raise RuntimeError("callback failed")

        result = await service.extract_from_file(pdf_file(), explode)

        assert result.success is False
        assert result.error.message == "callback failed"

    @pytest.mark.asyncio
    async def test_per_call_config_reaches_extractor(self, service, pdf_extractor):
        await service.extract_from_file(
            pdf_file(), config={"text_processing": {"min_text_length": 7}}
        )

        merged = pdf_extractor.extract_text.await_args.args[1]
        assert merged.text_processing.min_text_length == 7
        assert service.config.text_processing.min_text_length == 100

    @pytest.mark.asyncio
    async def test_records_metrics(self, service):
        counter = EXTRACTIONS_TOTAL.labels(file_type="pdf", status="success")
        before = counter._value.get()

        await service.extract_from_file(pdf_file())

        assert counter._value.get() == before + 1


class TestExtractFromFiles:
    @pytest.mark.asyncio
    async def test_batch_keeps_order_and_isolation(self, service):
        files = [
            pdf_file("a.pdf"),
            UploadedFile.from_bytes("b.png", b"png", "image/png"),
            pdf_file("c.pdf"),
        ]

        results = await service.extract_from_files(files)

        assert len(results) == 3
        assert [r.metadata.file_name for r in results] == ["a.pdf", "b.png", "c.pdf"]
        assert results[0].success is True
        assert results[1].success is False
        assert results[1].error_code == ExtractionErrorCode.UNSUPPORTED_FORMAT
        assert results[2].success is True
        assert results[0].extracted_text == results[2].extracted_text

    @pytest.mark.asyncio
    async def test_batch_progress_is_tagged(self, service):
        files = [pdf_file("a.pdf"), pdf_file("b.pdf")]
        updates = []

        await service.extract_from_files(
            files, on_progress=lambda index, progress: updates.append((index, progress))
        )

        assert {index for index, _ in updates} == {0, 1}
        for index, progress in updates:
            assert progress.file_index == index
            assert progress.total_files == 2
            assert progress.file_name == files[index].name
        assert updates[-1][1].progress == 100

    @pytest.mark.asyncio
    async def test_empty_batch(self, service):
        assert await service.extract_from_files([]) == []

    @pytest.mark.asyncio
    async def test_module_helper_runs_sequentially(self):
        files = [
            UploadedFile.from_bytes("a.txt", b"text", "text/plain"),
            UploadedFile.from_bytes("b.txt", b"text", "text/plain"),
        ]

        results = await extract_text_from_files(files)

        assert [r.metadata.file_name for r in results] == ["a.txt", "b.txt"]
        assert all(
            r.error_code == ExtractionErrorCode.UNSUPPORTED_FORMAT for r in results
        )


class TestServiceInfo:
    def test_supported_types(self, service):
        assert service.get_supported_types() == [
            SupportedFileType.PDF,
            SupportedFileType.DOCX,
            SupportedFileType.DOC,
        ]

    def test_file_type_info(self, service):
        info = service.get_file_type_info(SupportedFileType.DOCX)

        assert info == FILE_TYPE_INFO[SupportedFileType.DOCX]
        assert info.extensions == (".docx",)
        assert info.max_size == 100 * 1024 * 1024

    def test_file_type_info_accepts_value(self, service):
        assert service.get_file_type_info("pdf").name == "PDF Document"

    def test_process_text(self, service):
        text = "  Experience  at   Acme Corp\r\n\r\n\r\nEducation at State University  "

        result = service.process_text(text, {"min_content_length": 10})

        assert result == "Experience at Acme Corp\n\nEducation at State University"
