"""Validate command for configuration files."""

from pathlib import Path

import typer

from resume_extractor.cli.utils import display_error, display_success, handle_errors
from resume_extractor.services.config_manager import ConfigManager
from resume_extractor.utils.exceptions import ConfigValidationError


@handle_errors
def validate_command(
    config_path: Path = typer.Argument(..., help="Config file to validate"),
):
    """Validate configuration file syntax and semantics."""
    try:
        config = ConfigManager(config_path=str(config_path)).load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)

    display_success("Configuration is valid!")
    typer.echo(f"PDF backend: {config.pdf.backend.value}")
    typer.echo(f"Minimum text length: {config.text_processing.min_text_length}")
