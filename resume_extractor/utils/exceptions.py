"""Exception hierarchy for the extraction pipeline.

Every failure point raises a tagged subclass of ``ExtractionError`` carrying
its ``ExtractionErrorCode``, so callers never need to re-infer the failure
kind from message text:

```python
try:
    await extractor.validate_file(upload)
except ExtractionError as e:
    logger.warning("validation_failed", code=e.code.value, error=str(e))
```

Exceptions raised by third-party code (parsing libraries, the OS) are not
tagged; ``classify_error`` maps those onto a code by inspecting the message.
"""

from typing import Iterable, Optional, Sequence, Tuple

from resume_extractor.models.extraction import ExtractionErrorCode

ClassificationRule = Tuple[Tuple[str, ...], ExtractionErrorCode]


class ExtractionError(Exception):
    """Base exception for all extraction errors

    Subclasses set ``code``; an explicit ``code`` argument overrides it.
    """

    code: ExtractionErrorCode = ExtractionErrorCode.UNKNOWN_ERROR

    def __init__(
        self, message: str, code: Optional[ExtractionErrorCode] = None
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class UnsupportedFormatError(ExtractionError):
    """File is not a PDF or Word document

    Raised when:
    - Neither MIME type nor extension maps to a supported format
    - A format-specific validator receives the wrong kind of file
    """

    code = ExtractionErrorCode.UNSUPPORTED_FORMAT


class FileCorruptedError(ExtractionError):
    """File is empty, truncated, or its container cannot be opened

    Raised when:
    - File is 0 bytes or implausibly small
    - ZIP (DOCX) or OLE (DOC) container is broken or of the wrong kind
    """

    code = ExtractionErrorCode.FILE_CORRUPTED


class FileTooLargeError(ExtractionError):
    """File exceeds the configured size limit

    Non-retryable: the file size won't change.
    """

    code = ExtractionErrorCode.FILE_TOO_LARGE


class TextTooShortError(ExtractionError):
    """Not enough text survived extraction and cleanup

    Typical for scanned, image-based or encrypted PDFs.
    """

    code = ExtractionErrorCode.TEXT_TOO_SHORT


class ParsingError(ExtractionError):
    """A parsing backend could not produce text"""

    code = ExtractionErrorCode.PARSING_FAILED


class EncodingError(ExtractionError):
    """Text could not be decoded"""

    code = ExtractionErrorCode.ENCODING_ERROR


class PermissionDeniedError(ExtractionError):
    """File could not be read due to missing permissions"""

    code = ExtractionErrorCode.PERMISSION_DENIED


class NetworkError(ExtractionError):
    """Remote file body could not be fetched"""

    code = ExtractionErrorCode.NETWORK_ERROR


class ConfigValidationError(Exception):
    """Configuration validation failed"""

    pass


# Ordered: the first rule with a matching substring wins.
DEFAULT_CLASSIFICATION_RULES: Sequence[ClassificationRule] = (
    (("unsupported", "invalid file type"), ExtractionErrorCode.UNSUPPORTED_FORMAT),
    (("corrupted", "invalid"), ExtractionErrorCode.FILE_CORRUPTED),
    (("too large", "size"), ExtractionErrorCode.FILE_TOO_LARGE),
    (("too short", "length"), ExtractionErrorCode.TEXT_TOO_SHORT),
    (("parsing", "parse"), ExtractionErrorCode.PARSING_FAILED),
    (("encoding", "decode"), ExtractionErrorCode.ENCODING_ERROR),
    (("permission", "access"), ExtractionErrorCode.PERMISSION_DENIED),
    (("network", "connection"), ExtractionErrorCode.NETWORK_ERROR),
)


def classify_message(
    message: str, rules: Iterable[ClassificationRule] = DEFAULT_CLASSIFICATION_RULES
) -> ExtractionErrorCode:
    """Map an error message onto an error code by substring matching.

    Args:
        message: Error message (matched case-insensitively)
        rules: Ordered ``(substrings, code)`` pairs

    Returns:
        Code of the first matching rule, UNKNOWN_ERROR otherwise
    """
    lowered = message.lower()
    for substrings, code in rules:
        if any(s in lowered for s in substrings):
            return code
    return ExtractionErrorCode.UNKNOWN_ERROR


def classify_error(
    error: BaseException,
    rules: Iterable[ClassificationRule] = DEFAULT_CLASSIFICATION_RULES,
) -> ExtractionErrorCode:
    """Return the error code for any exception.

    Tagged ``ExtractionError``s report their own code. Anything else is
    classified from its message against the ordered ``rules``.
    """
    if isinstance(error, ExtractionError):
        return error.code
    if isinstance(error, PermissionError):
        return ExtractionErrorCode.PERMISSION_DENIED
    if isinstance(error, UnicodeError):
        return ExtractionErrorCode.ENCODING_ERROR

    return classify_message(str(error), rules)
