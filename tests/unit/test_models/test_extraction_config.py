"""Unit tests for configuration models and lookup tables"""

import pytest
from pydantic import ValidationError

from resume_extractor.models.config import (
    DEFAULT_EXTRACTION_CONFIG,
    EXTRACTION_STEPS,
    FILE_EXTENSION_MAPPINGS,
    FILE_TYPE_INFO,
    FILE_TYPE_MAPPINGS,
    ExtractionConfig,
    PageRange,
    PDFBackendName,
    PDFOptions,
    TextProcessingOptions,
)
from resume_extractor.models.extraction import SupportedFileType


def test_defaults():
    """Test default extraction settings"""
    config = ExtractionConfig()

    assert config.pdf.preserve_formatting is True
    assert config.pdf.page_range is None
    assert config.pdf.backend == PDFBackendName.PYMUPDF
    assert config.pdf.max_file_size_mb == 50
    assert config.docx.include_headers is True
    assert config.docx.include_footers is False
    assert config.docx.max_file_size_mb == 100
    assert config.text_processing.min_text_length == 100
    assert config == DEFAULT_EXTRACTION_CONFIG


def test_text_processing_option_defaults():
    """Test standalone text processor defaults"""
    options = TextProcessingOptions()

    assert options.remove_special_characters is False
    assert options.min_content_length == 50


def test_merged_none_returns_self():
    """Test merging nothing keeps the same instance"""
    config = ExtractionConfig()

    assert config.merged(None) is config


def test_merged_partial_mapping_is_deep():
    """Test nested keys not mentioned keep their values"""
    base = ExtractionConfig(pdf=PDFOptions(backend="pdfplumber", max_file_size_mb=10))

    merged = base.merged({"pdf": {"preserve_formatting": False}})

    assert merged.pdf.preserve_formatting is False
    assert merged.pdf.backend == PDFBackendName.PDFPLUMBER
    assert merged.pdf.max_file_size_mb == 10
    assert base.pdf.preserve_formatting is True


def test_merged_accepts_model_values():
    """Test nested models can be passed inside override mappings"""
    merged = ExtractionConfig().merged(
        {"pdf": {"page_range": PageRange(start=2, end=4)}}
    )

    assert merged.pdf.page_range == PageRange(start=2, end=4)


def test_merged_full_config_replaces():
    """Test a complete config override wins outright"""
    override = ExtractionConfig(pdf=PDFOptions(max_file_size_mb=5))

    assert ExtractionConfig().merged(override) is override


def test_merged_validates_values():
    """Test invalid overrides are rejected"""
    with pytest.raises(ValidationError):
        ExtractionConfig().merged({"pdf": {"max_file_size_mb": 0}})


def test_config_is_frozen():
    """Test configuration cannot be mutated"""
    config = ExtractionConfig()

    with pytest.raises(ValidationError):
        config.pdf.backend = PDFBackendName.PDFPLUMBER


def test_page_range_defaults_start():
    """Test page ranges start at page 1 by default"""
    assert PageRange(end=3).start == 1

    with pytest.raises(ValidationError):
        PageRange(start=0, end=2)


def test_lookup_tables_cover_all_types():
    """Test every supported type has steps, info and mappings"""
    for file_type in SupportedFileType:
        assert len(EXTRACTION_STEPS[file_type]) == 5
        assert file_type in FILE_TYPE_INFO
        assert file_type in FILE_TYPE_MAPPINGS.values()
        assert file_type in FILE_EXTENSION_MAPPINGS.values()


def test_doc_mime_types():
    """Test both legacy Word MIME types map to DOC"""
    assert FILE_TYPE_MAPPINGS["application/msword"] == SupportedFileType.DOC
    assert FILE_TYPE_MAPPINGS["application/vnd.ms-word"] == SupportedFileType.DOC
    assert FILE_TYPE_INFO[SupportedFileType.DOC].mime_types == (
        "application/msword",
        "application/vnd.ms-word",
    )
