"""Format-specific extractors and their parsing backends

- FileExtractor: Abstract base shared by all extractors
- PDFExtractor: Primary library backend with raw-stream fallback
- WordExtractor: python-docx based .docx extraction
"""

from resume_extractor.services.extractors.base import FileExtractor
from resume_extractor.services.extractors.pdf_extractor import (
    PDFExtractor,
    create_pdf_extractor,
    extract_pdf_text,
)
from resume_extractor.services.extractors.word_extractor import (
    WordExtractor,
    create_word_extractor,
    extract_word_text,
)

__all__ = [
    "FileExtractor",
    "PDFExtractor",
    "create_pdf_extractor",
    "extract_pdf_text",
    "WordExtractor",
    "create_word_extractor",
    "extract_word_text",
]
