"""Caller-facing quality verdicts and small presentation helpers."""

import math
from typing import List

from resume_extractor.models.extraction import (
    ExtractionQualityReport,
    ExtractionResult,
)
from resume_extractor.models.file import UploadedFile
from resume_extractor.services.extraction_service import detect_file_type

MIN_TEXT_LENGTH = 200
MIN_WORD_COUNT = 50
MIN_UNIQUE_CHARACTERS = 20
MIN_KEYWORDS = 2
GOOD_QUALITY_SCORE = 70

RESUME_KEYWORDS = ("experience", "education", "skills", "work", "university", "company")

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def validate_extraction_quality(result: ExtractionResult) -> ExtractionQualityReport:
    """Score an extraction result and suggest what to do about a poor one.

    Penalties are fixed and cumulative: short text -30, few words -25, low
    character diversity -20, few résumé keywords -15. The score never goes
    below zero and a result is good quality at 70 or more.
    """
    if not result.success:
        return ExtractionQualityReport(
            is_good_quality=False,
            score=0,
            suggestions=["Extraction failed. Please try a different file."],
        )

    text = result.extracted_text
    lowered = text.lower()
    suggestions: List[str] = []
    score = 100

    if len(text) < MIN_TEXT_LENGTH:
        suggestions.append(
            "Extracted text is quite short. Ensure the document contains "
            "sufficient content."
        )
        score -= 30

    if result.metadata.word_count < MIN_WORD_COUNT:
        suggestions.append(
            "Very few words extracted. The document might be mostly images "
            "or poorly formatted."
        )
        score -= 25

    if len(set(lowered)) < MIN_UNIQUE_CHARACTERS:
        suggestions.append(
            "Low character diversity detected. The extraction might be incomplete."
        )
        score -= 20

    found_keywords = sum(1 for keyword in RESUME_KEYWORDS if keyword in lowered)
    if found_keywords < MIN_KEYWORDS:
        suggestions.append(
            "Few resume-related keywords found. Ensure this is a resume document."
        )
        score -= 15

    return ExtractionQualityReport(
        is_good_quality=score >= GOOD_QUALITY_SCORE,
        score=max(0, score),
        suggestions=suggestions,
    )


def format_file_size(size: int) -> str:
    """Human-readable size with one decimal, e.g. ``1.5 MB``.

    Raises:
        ValueError: If ``size`` is negative
    """
    if size < 0:
        raise ValueError(f"File size cannot be negative: {size}")
    if size == 0:
        return "0 Bytes"

    index = min(int(math.log(size, 1024)), len(SIZE_UNITS) - 1)
    # log() can land just below an exact power of 1024
    if index + 1 < len(SIZE_UNITS) and size >= 1024 ** (index + 1):
        index += 1
    return f"{size / 1024 ** index:.1f} {SIZE_UNITS[index]}"


def is_file_supported(file: UploadedFile) -> bool:
    """Whether the upload's MIME type or extension maps to a supported format."""
    return detect_file_type(file) is not None
