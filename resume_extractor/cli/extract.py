"""Extract command.

Runs a batch extraction over files on disk and reports one line per file.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from resume_extractor.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
)
from resume_extractor.models.extraction import ExtractionResult
from resume_extractor.models.file import UploadedFile
from resume_extractor.observability import (
    bind_context,
    clear_context,
    clear_correlation_id,
    get_logger,
    set_correlation_id,
)
from resume_extractor.services.extraction_service import FileExtractionService
from resume_extractor.services.quality import validate_extraction_quality

logger = get_logger("cli")


@handle_errors
def extract_command(
    paths: List[Path] = typer.Argument(
        ..., help="Résumé files to extract", exists=True, dir_okay=False
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Extraction config YAML"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print results as JSON instead of a summary"
    ),
    min_length: Optional[int] = typer.Option(
        None, "--min-length", min=0, help="Override the minimum text length"
    ),
    quality: bool = typer.Option(
        False, "--quality", help="Show the quality verdict of each result"
    ),
):
    """Extract text from PDF and Word résumés."""
    config = load_config(config_path)
    if min_length is not None:
        config = config.merged({"text_processing": {"min_text_length": min_length}})

    uploads = [UploadedFile.from_path(path) for path in paths]
    service = FileExtractionService(config)

    # One run id for the command; each file nests its own id inside it
    run_id = set_correlation_id()
    bind_context(command="extract", run_id=run_id, file_count=len(uploads))
    try:
        results = asyncio.run(service.extract_from_files(uploads))
        logger.info(
            "cli_extract_finished",
            failed=sum(1 for result in results if not result.success),
        )
    finally:
        clear_context()
        clear_correlation_id()

    if json_output:
        payload = [result.model_dump(mode="json") for result in results]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for result in results:
            _print_summary(result, quality)

    if not all(result.success for result in results):
        raise typer.Exit(code=1)


def _print_summary(result: ExtractionResult, quality: bool) -> None:
    meta = result.metadata
    elapsed = f"{meta.extraction_time:.0f} ms"

    if not result.success:
        message = result.error.message if result.error else "unknown error"
        display_error(f"{meta.file_name} failed after {elapsed}: {message}")
        return

    display_success(f"{meta.file_name}: {meta.word_count} words in {elapsed}")
    for warning in result.warnings:
        display_warning(f"  warning: {warning}")

    if quality:
        report = validate_extraction_quality(result)
        verdict = "good" if report.is_good_quality else "poor"
        display_info(f"  quality: {verdict} ({report.score}/100)")
        for suggestion in report.suggestions:
            display_info(f"  - {suggestion}")
