"""Shared CLI utilities."""

import functools
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer

from resume_extractor.models.config import ExtractionConfig
from resume_extractor.observability.logging import configure_logging, get_logger
from resume_extractor.services.config_manager import ConfigManager
from resume_extractor.utils.exceptions import ConfigValidationError

# Logs go to stderr; command output on stdout stays machine readable
configure_logging(level="WARNING", json_output=False, add_timestamp=False)
logger = get_logger("cli")

F = TypeVar("F", bound=Callable)


def load_config(config_path: Optional[Path]) -> ExtractionConfig:
    """Load extraction settings, or the defaults when no file is given.

    Raises:
        typer.Exit: If the configuration file is missing or invalid.
    """
    if config_path is None:
        return ExtractionConfig()

    config_manager = ConfigManager(config_path=str(config_path))
    try:
        return config_manager.load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def handle_errors(func: F) -> F:
    """Decorator turning unexpected exceptions into exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.exception("command_failed")
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
