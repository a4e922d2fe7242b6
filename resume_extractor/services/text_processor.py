"""Text processor for extracted résumé text.

Stateless cleanup and analysis helpers:
- ``process``: cleanup pipeline (control characters, line breaks, typographic
  characters, whitespace) with a minimum-length gate
- contact extraction (emails, phone numbers, URLs)
- résumé section detection
- text statistics and a fixed-penalty quality rubric
"""

import math
import re
import unicodedata
from typing import Dict, List, Optional, Union

from resume_extractor.models.config import (
    DEFAULT_TEXT_PROCESSING,
    TextProcessingOptions,
)
from resume_extractor.models.extraction import (
    ContactInfo,
    ResumeAnalysis,
    TextQualityReport,
    TextStatistics,
)
from resume_extractor.utils.exceptions import TextTooShortError

OptionsArg = Union[TextProcessingOptions, Dict[str, object], None]

# \n, \t, \r and \f survive so line-break normalization can see them
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0E-\x1F\x7F]")
_BOM = "\uFEFF"

_SPECIAL_CHARACTER_MAP = (
    (re.compile("[\u00A0\u2000-\u200A\u202F\u205F\u3000]"), " "),
    (re.compile("[\u2013\u2014]"), "-"),
    (re.compile("[\u2018\u2019]"), "'"),
    (re.compile("[\u201C\u201D]"), '"'),
    (re.compile("\u2026"), "..."),
    # PDF glyph artefacts: Apple logo and symbol-font space
    (re.compile("\uf8ff"), ""),
    (re.compile("\uf020"), " "),
)

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(
    r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}"
)
URL_PATTERN = re.compile(
    r"https?://[-\w.]+(?::[0-9]+)?"
    r"(?:/[\w/_.]*(?:\?[\w&=%.]*)?(?:#[\w.]*)?)?"
)

SECTION_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    "contact": re.compile(r"contact|email|phone|address|linkedin|github"),
    "summary": re.compile(r"summary|objective|profile|about|overview"),
    "experience": re.compile(r"experience|employment|work|career|position|job"),
    "education": re.compile(
        r"education|degree|university|college|school|graduation"
    ),
    "skills": re.compile(r"skills|technical|proficiency|competenc|abilities"),
    "projects": re.compile(r"projects|portfolio|accomplishments|achievements"),
    "certifications": re.compile(r"certifications|certificates|licenses|awards"),
    "languages": re.compile(r"languages|fluent|native|proficient"),
}

QUALITY_KEYWORDS = (
    "experience",
    "education",
    "skills",
    "work",
    "degree",
    "university",
    "company",
    "project",
    "responsibility",
)

# Fixed deductions of the quality rubric
SHORT_TEXT_PENALTY = 30
FEW_WORDS_PENALTY = 25
LOW_DIVERSITY_PENALTY = 15
FEW_KEYWORDS_PENALTY = 20
SPECIAL_CHARACTERS_PENALTY = 10
MIN_VALID_SCORE = 60


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TextProcessor:
    """Cleans, normalizes and analyses extracted text.

    Holds only its default ``TextProcessingOptions``; every method is pure.
    """

    def __init__(self, options: Optional[TextProcessingOptions] = None):
        self.options = options or DEFAULT_TEXT_PROCESSING

    def _resolve_options(self, options: OptionsArg) -> TextProcessingOptions:
        if options is None:
            return self.options
        if isinstance(options, TextProcessingOptions):
            return options
        return TextProcessingOptions.model_validate(
            {**self.options.model_dump(), **dict(options)}
        )

    def process(self, text: str, options: OptionsArg = None) -> str:
        """Run the cleanup pipeline over ``text``.

        Args:
            text: Raw extracted text
            options: Options overriding the processor defaults (full model
                or a partial mapping)

        Returns:
            Cleaned text

        Raises:
            TextTooShortError: If the result is shorter than
                ``min_content_length``
        """
        opts = self._resolve_options(options)

        processed = self._basic_cleanup(text)

        if opts.normalize_line_breaks:
            processed = self._normalize_line_breaks(processed)

        if opts.remove_special_characters:
            processed = self._normalize_special_characters(processed)

        if opts.remove_extra_whitespace:
            processed = self._remove_extra_whitespace(processed)

        if opts.trim_content:
            processed = processed.strip()

        if len(processed) < opts.min_content_length:
            raise TextTooShortError(
                f"Processed text too short: {len(processed)} characters "
                f"(minimum: {opts.min_content_length})"
            )

        return processed

    def _basic_cleanup(self, text: str) -> str:
        # Only a leading byte order mark is dropped
        text = text.lstrip(_BOM)
        text = _CONTROL_CHARS.sub("", text)
        return unicodedata.normalize("NFC", text)

    def _normalize_line_breaks(self, text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        # Page separators become paragraph breaks
        return text.replace("\f", "\n\n")

    def _normalize_special_characters(self, text: str) -> str:
        for pattern, replacement in _SPECIAL_CHARACTER_MAP:
            text = pattern.sub(replacement, text)
        return text

    def _remove_extra_whitespace(self, text: str) -> str:
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r"^[ \t]+|[ \t]+$", "", text, flags=re.MULTILINE)
        return re.sub(r"\n{3,}", "\n\n", text)

    def extract_emails(self, text: str) -> List[str]:
        """Return all email addresses in order of appearance."""
        return EMAIL_PATTERN.findall(text)

    def extract_phone_numbers(self, text: str) -> List[str]:
        """Return all North-American style phone numbers."""
        return PHONE_PATTERN.findall(text)

    def extract_urls(self, text: str) -> List[str]:
        """Return all http(s) URLs."""
        return URL_PATTERN.findall(text)

    def detect_resume_sections(self, text: str) -> Dict[str, int]:
        """Locate résumé sections by keyword.

        Returns:
            Mapping of section name to the offset of its first keyword
            match. Sections without a match are left out.
        """
        lowered = text.lower()
        sections: Dict[str, int] = {}
        for section, pattern in SECTION_PATTERNS.items():
            match = pattern.search(lowered)
            if match:
                sections[section] = match.start()
        return sections

    def get_text_statistics(self, text: str) -> TextStatistics:
        """Count characters, words, sentences and paragraphs."""
        words = [w for w in re.split(r"\s+", text) if w]
        sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
        paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]

        return TextStatistics(
            character_count=len(text),
            word_count=len(words),
            sentence_count=len(sentences),
            paragraph_count=len(paragraphs),
            average_words_per_sentence=(
                _round_half_up(len(words) / len(sentences)) if sentences else 0
            ),
            average_sentences_per_paragraph=(
                _round_half_up(len(sentences) / len(paragraphs)) if paragraphs else 0
            ),
        )

    def validate_text_quality(self, text: str) -> TextQualityReport:
        """Score text against the résumé quality rubric.

        Starts at 100 and subtracts a fixed penalty per failed check. Text is
        valid when the score stays at or above 60.
        """
        issues: List[str] = []
        score = 100

        if len(text) < 100:
            issues.append("Text is too short")
            score -= SHORT_TEXT_PENALTY

        meaningful_words = [
            w for w in re.split(r"\s+", text) if re.search(r"[A-Za-z]{3,}", w)
        ]
        if len(meaningful_words) < 20:
            issues.append("Too few meaningful words found")
            score -= FEW_WORDS_PENALTY

        if len(set(text.lower())) < 15:
            issues.append("Low character diversity")
            score -= LOW_DIVERSITY_PENALTY

        lowered = text.lower()
        found_keywords = [k for k in QUALITY_KEYWORDS if k in lowered]
        if len(found_keywords) < 2:
            issues.append("Few resume-related keywords found")
            score -= FEW_KEYWORDS_PENALTY

        if text:
            special = len(re.findall(r"[^A-Za-z0-9\s]", text))
            if special / len(text) > 0.3:
                issues.append("High ratio of special characters")
                score -= SPECIAL_CHARACTERS_PENALTY

        return TextQualityReport(
            is_valid=score >= MIN_VALID_SCORE,
            score=max(0, score),
            issues=issues,
        )

    def extract_contact_info(self, text: str) -> ContactInfo:
        """Collect emails, phone numbers and URLs."""
        return ContactInfo(
            emails=self.extract_emails(text),
            phones=self.extract_phone_numbers(text),
            urls=self.extract_urls(text),
        )

    def analyze(self, text: str) -> ResumeAnalysis:
        """Run every analysis over ``text``."""
        return ResumeAnalysis(
            statistics=self.get_text_statistics(text),
            quality=self.validate_text_quality(text),
            sections=self.detect_resume_sections(text),
            contact_info=self.extract_contact_info(text),
        )


def create_text_processor(
    options: Optional[TextProcessingOptions] = None,
) -> TextProcessor:
    """Create a text processor with optional default options."""
    return TextProcessor(options)


def process_text(text: str, options: OptionsArg = None) -> str:
    """Run the cleanup pipeline with a throwaway processor."""
    return TextProcessor().process(text, options)


def analyze_resume_text(text: str) -> ResumeAnalysis:
    """Statistics, quality, sections and contact info of résumé text."""
    return TextProcessor().analyze(text)
