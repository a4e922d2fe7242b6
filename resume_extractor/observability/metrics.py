"""Prometheus metrics for the extraction pipeline.

Usage:
    EXTRACTIONS_TOTAL.labels(file_type="pdf", status="success").inc()
    EXTRACTION_DURATION.labels(file_type="pdf").observe(0.42)

``get_metrics_text()`` renders the exposition format for an embedding
service's /metrics endpoint.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so embedding applications keep their own default registry
REGISTRY = CollectorRegistry(auto_describe=True)

EXTRACTIONS_TOTAL = Counter(
    name="resume_extractions_total",
    documentation="Total extraction calls by detected file type and outcome",
    labelnames=["file_type", "status"],  # pdf/docx/doc, success/failed
    registry=REGISTRY,
)

EXTRACTION_ERRORS = Counter(
    name="resume_extraction_errors_total",
    documentation="Failed extractions by error code",
    labelnames=["code"],
    registry=REGISTRY,
)

PDF_FALLBACKS = Counter(
    name="resume_pdf_fallback_total",
    documentation="Raw-stream fallback attempts after a primary PDF backend failed",
    labelnames=["outcome"],  # success, failed
    registry=REGISTRY,
)

PDF_BACKEND_RUNS = Counter(
    name="resume_pdf_backend_runs_total",
    documentation="Primary PDF backend runs",
    labelnames=["backend", "status"],  # pymupdf/pdfplumber, success/failed
    registry=REGISTRY,
)

EXTRACTION_DURATION = Histogram(
    name="resume_extraction_duration_seconds",
    documentation="End-to-end extraction duration in seconds",
    labelnames=["file_type"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30, float("inf")),
    registry=REGISTRY,
)

FILE_SIZE_BYTES = Histogram(
    name="resume_file_size_bytes",
    documentation="Uploaded file size distribution in bytes",
    buckets=(
        10_000,  # 10KB
        100_000,  # 100KB
        500_000,  # 500KB
        1_000_000,  # 1MB
        5_000_000,  # 5MB
        10_000_000,  # 10MB
        50_000_000,  # 50MB
        float("inf"),
    ),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Render all pipeline metrics in the Prometheus text format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
