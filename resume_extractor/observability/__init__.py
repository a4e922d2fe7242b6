"""Observability: correlation IDs, structured logging and Prometheus metrics."""

from resume_extractor.observability.context import (
    clear_correlation_id,
    correlation_id_context,
    get_correlation_id,
    set_correlation_id,
)
from resume_extractor.observability.logging import (
    add_correlation_id_processor,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from resume_extractor.observability.metrics import (
    EXTRACTION_DURATION,
    EXTRACTION_ERRORS,
    EXTRACTIONS_TOTAL,
    FILE_SIZE_BYTES,
    PDF_BACKEND_RUNS,
    PDF_FALLBACKS,
    REGISTRY,
    get_metrics_content_type,
    get_metrics_text,
)

__all__ = [
    # Context
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "add_correlation_id_processor",
    # Metrics
    "REGISTRY",
    "EXTRACTIONS_TOTAL",
    "EXTRACTION_ERRORS",
    "PDF_FALLBACKS",
    "PDF_BACKEND_RUNS",
    "EXTRACTION_DURATION",
    "FILE_SIZE_BYTES",
    "get_metrics_text",
    "get_metrics_content_type",
]
