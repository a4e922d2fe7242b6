"""PDF parsing strategies.

Primary backends wrap a PDF library (PyMuPDF or pdfplumber). The raw-stream
backend has no dependency at all: it scans the undecoded bytes for literal
strings and is used when the primary backend fails or is not installed.

Backends are synchronous and CPU bound; the extractor runs them in a worker
thread. A backend may consume or mutate the buffer it is given, so callers
hand primary backends a copy.
"""

import io
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from resume_extractor.models.config import PageRange, PDFBackendName, PDFOptions
from resume_extractor.utils.exceptions import ParsingError, TextTooShortError

logger = structlog.get_logger()


@dataclass
class BackendOutput:
    """Raw text produced by a backend, before post-processing."""

    text: str
    backend: str
    page_count: Optional[int] = None
    warnings: List[str] = field(default_factory=list)


class PdfBackend(ABC):
    """
    Abstract base class for PDF parsing strategies.

    All concrete backends must implement:
    - extract(): Turn PDF bytes into raw text
    - validate_setup(): Check if the backend is available
    - name property: Return backend identifier
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend identifier."""
        raise NotImplementedError("Subclasses must implement name property")

    @abstractmethod
    def validate_setup(self) -> bool:
        """
        Check if this backend is properly configured and available.

        Returns:
            True if backend can be used, False otherwise
        """
        raise NotImplementedError("Subclasses must implement validate_setup()")

    @abstractmethod
    def extract(self, data: bytearray, options: PDFOptions) -> BackendOutput:
        """
        Extract raw text from PDF bytes.

        Raises:
            ExtractionError (or any library error) when no text can be produced
        """
        raise NotImplementedError("Subclasses must implement extract()")


def select_pages(
    page_count: int, page_range: Optional[PageRange]
) -> Tuple[List[int], List[str]]:
    """Resolve a 1-based page range into 0-based page indices.

    Ranges are clamped to the document. A range that misses the document
    entirely selects every page and reports a warning.
    """
    if page_range is None:
        return list(range(page_count)), []

    start = max(1, page_range.start)
    end = min(page_range.end, page_count)
    if start > end:
        return list(range(page_count)), [
            f"Page range {page_range.start}-{page_range.end} is outside the "
            f"document ({page_count} pages); extracted all pages"
        ]

    warnings = []
    if page_range.end > page_count:
        warnings.append(
            f"Page range end {page_range.end} exceeds page count {page_count}"
        )
    return list(range(start - 1, end)), warnings


class PyMuPDFBackend(PdfBackend):
    """Primary backend using PyMuPDF (fitz)."""

    @property
    def name(self) -> str:
        """Return the backend identifier."""
        return PDFBackendName.PYMUPDF.value

    def validate_setup(self) -> bool:
        """Check if PyMuPDF is installed."""
        try:
            import fitz  # noqa: F401

            return True
        except ImportError:
            logger.warning("pymupdf_not_installed")
            return False

    def extract(self, data: bytearray, options: PDFOptions) -> BackendOutput:
        """
        Extract text using PyMuPDF.

        Strategy:
        1. Open the document from memory
        2. Iterate selected pages in order
        3. Join text items of a page with spaces, pages with a blank line
        """
        import fitz

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ParsingError(f"PyMuPDF could not parse document: {e}") from e

        try:
            if doc.needs_pass:
                raise ParsingError("PDF is encrypted and cannot be parsed")

            page_count = len(doc)
            indices, warnings = select_pages(page_count, options.page_range)
            pages = [self._page_text(doc[i], options) for i in indices]
        finally:
            doc.close()

        text = "\n\n".join(pages)
        if not text.strip():
            raise ParsingError("PyMuPDF found no text layer in document")

        return BackendOutput(
            text=text, backend=self.name, page_count=page_count, warnings=warnings
        )

    def _page_text(self, page, options: PDFOptions) -> str:
        if options.preserve_formatting:
            # block format: (x0, y0, x1, y1, text, block_no, block_type)
            items = [
                block[4].strip()
                for block in page.get_text("blocks")
                if block[6] == 0 and block[4].strip()
            ]
        else:
            # word format: (x0, y0, x1, y1, word, block_no, line_no, word_no)
            items = [word[4] for word in page.get_text("words")]
        return " ".join(items)


class PDFPlumberBackend(PdfBackend):
    """Primary backend using pdfplumber.

    Slower than PyMuPDF but more tolerant of unusual text layouts.
    """

    @property
    def name(self) -> str:
        """Return the backend identifier."""
        return PDFBackendName.PDFPLUMBER.value

    def validate_setup(self) -> bool:
        """Check if pdfplumber is installed."""
        try:
            import pdfplumber  # noqa: F401

            return True
        except ImportError:
            logger.warning("pdfplumber_not_installed")
            return False

    def extract(self, data: bytearray, options: PDFOptions) -> BackendOutput:
        """Extract text page by page with pdfplumber."""
        import pdfplumber

        try:
            pdf = pdfplumber.open(io.BytesIO(bytes(data)))
        except Exception as e:
            raise ParsingError(f"pdfplumber could not parse document: {e}") from e

        with pdf:
            page_count = len(pdf.pages)
            indices, warnings = select_pages(page_count, options.page_range)
            pages = []
            for i in indices:
                page = pdf.pages[i]
                if options.preserve_formatting:
                    items = [
                        line.strip()
                        for line in (page.extract_text() or "").splitlines()
                        if line.strip()
                    ]
                else:
                    items = [word["text"] for word in page.extract_words()]
                pages.append(" ".join(items))

        text = "\n\n".join(pages)
        if not text.strip():
            raise ParsingError("pdfplumber found no text layer in document")

        return BackendOutput(
            text=text, backend=self.name, page_count=page_count, warnings=warnings
        )


class RawStreamBackend(PdfBackend):
    """Dependency-free fallback that scans PDF bytes for literal strings.

    Decodes the buffer as Latin-1 so every byte maps to exactly one
    character and offsets stay aligned with the file. Only uncompressed
    content streams yield text; hex strings and escaped parentheses are not
    interpreted. Scanned, compressed or encrypted PDFs end in
    ``TextTooShortError``.
    """

    MIN_TEXT_LENGTH = 50

    STREAM_PATTERN = re.compile(r"stream\s*\n(.*?)\nendstream", re.DOTALL)
    LITERAL_PATTERN = re.compile(r"\(([^)]+)\)")
    ARRAY_PATTERN = re.compile(r"\[([^\]]+)\]")
    PAGE_PATTERN = re.compile(r"/Type\s*/Page(?![A-Za-z])")
    ESCAPE_PATTERN = re.compile(r"\\[nrt]")

    @property
    def name(self) -> str:
        """Return the backend identifier."""
        return "raw_stream"

    def validate_setup(self) -> bool:
        """Always available."""
        return True

    def extract(self, data: bytearray, options: PDFOptions) -> BackendOutput:
        """Recover literal strings from content streams and the whole file."""
        document = bytes(data).decode("latin-1")
        candidates: List[str] = []

        for stream in self.STREAM_PATTERN.finditer(document):
            content = stream.group(1)

            for literal in self.LITERAL_PATTERN.finditer(content):
                if self._is_stream_text(literal.group(1)):
                    candidates.append(literal.group(1))

            # Text-showing arrays: [(Hel) -20 (lo)] TJ
            for array in self.ARRAY_PATTERN.finditer(content):
                for literal in self.LITERAL_PATTERN.finditer(array.group(1)):
                    if self._is_stream_text(literal.group(1)):
                        candidates.append(literal.group(1))

        # Last resort: literals anywhere in the file
        for literal in self.LITERAL_PATTERN.finditer(document):
            text = literal.group(1)
            if len(text) > 2 and re.search(r"[A-Za-z]", text):
                candidates.append(text)

        if not candidates:
            raise ParsingError(
                "Could not extract meaningful text from PDF using fallback method"
            )

        cleaned = []
        for text in dict.fromkeys(candidates):
            if not text.strip():
                continue
            text = self.ESCAPE_PATTERN.sub(" ", text)
            text = re.sub(r"\s+", " ", text).strip()
            if len(text) > 1:
                cleaned.append(text)

        extracted = " ".join(cleaned)
        if len(extracted) < self.MIN_TEXT_LENGTH:
            raise TextTooShortError(
                "Extracted text too short, PDF might be image-based or encrypted"
            )

        page_count = len(self.PAGE_PATTERN.findall(document)) or None
        logger.debug(
            "raw_stream_extracted",
            candidates=len(candidates),
            text_length=len(extracted),
            page_count=page_count,
        )
        return BackendOutput(text=extracted, backend=self.name, page_count=page_count)

    @staticmethod
    def _is_stream_text(text: str) -> bool:
        return len(text) > 1 and re.search(r"[A-Za-z0-9]", text) is not None


def create_primary_backend(name: PDFBackendName) -> PdfBackend:
    """Instantiate the primary backend configured by ``name``."""
    if name == PDFBackendName.PDFPLUMBER:
        return PDFPlumberBackend()
    return PyMuPDFBackend()
