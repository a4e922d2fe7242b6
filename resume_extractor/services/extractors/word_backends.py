"""Word document parsing strategies."""

import io
import zipfile
from abc import ABC, abstractmethod
from typing import Iterable, List

import structlog

from resume_extractor.models.config import WordOptions
from resume_extractor.utils.exceptions import FileCorruptedError, ParsingError

logger = structlog.get_logger()

# Compound File Binary signature used by legacy .doc files
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class DocBackend(ABC):
    """Abstract base class for Word parsing strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend identifier."""
        raise NotImplementedError("Subclasses must implement name property")

    @abstractmethod
    def validate_setup(self) -> bool:
        """Check if the backend's library is available."""
        raise NotImplementedError("Subclasses must implement validate_setup()")

    @abstractmethod
    def extract(self, data: bytes, options: WordOptions) -> str:
        """Return the raw text of the document in one shot."""
        raise NotImplementedError("Subclasses must implement extract()")


class PythonDocxBackend(DocBackend):
    """Extracts raw text from OOXML (.docx) packages with python-docx.

    Collects body paragraphs and table cells in document order, plus
    headers and footers when enabled.
    """

    @property
    def name(self) -> str:
        return "python-docx"

    def validate_setup(self) -> bool:
        try:
            import docx  # noqa: F401

            return True
        except ImportError:
            logger.warning("python_docx_not_installed")
            return False

    def extract(self, data: bytes, options: WordOptions) -> str:
        """
        Extract raw text from a Word package.

        Raises:
            FileCorruptedError: OLE (legacy .doc) or broken ZIP container
            ParsingError: python-docx failed or produced no text
        """
        if data.startswith(OLE_SIGNATURE):
            raise FileCorruptedError(
                "Legacy OLE Word container cannot be read as an OOXML package"
            )

        import docx
        from docx.opc.exceptions import PackageNotFoundError

        try:
            document = docx.Document(io.BytesIO(data))
        except (zipfile.BadZipFile, PackageNotFoundError, KeyError) as e:
            raise FileCorruptedError(f"Invalid Word document container (zip): {e}") from e
        except Exception as e:
            raise ParsingError(f"python-docx extraction failed: {e}") from e

        parts: List[str] = []
        if options.include_headers:
            parts.extend(self._header_footer_text(document, footers=False))

        for block in document.iter_inner_content():
            if hasattr(block, "rows"):
                parts.extend(self._table_rows(block))
            else:
                parts.append(block.text)

        if options.include_footers:
            parts.extend(self._header_footer_text(document, footers=True))

        separator = "\n" if options.preserve_formatting else " "
        text = separator.join(p for p in parts if p.strip())
        if not text:
            raise ParsingError("python-docx did not extract any text content")
        return text

    def _header_footer_text(self, document, footers: bool) -> List[str]:
        lines: List[str] = []
        for section in document.sections:
            part = section.footer if footers else section.header
            # Linked parts repeat the previous section's content
            if part.is_linked_to_previous:
                continue
            lines.extend(p.text for p in part.paragraphs)
        return list(dict.fromkeys(lines))

    def _table_rows(self, table) -> Iterable[str]:
        for row in table.rows:
            cells: List[str] = []
            previous = None
            for cell in row.cells:
                # A merged cell repeats the same <w:tc> once per grid column
                if cell._tc is previous:
                    continue
                previous = cell._tc
                text = cell.text.strip()
                if text:
                    cells.append(text)
            yield " | ".join(cells)
