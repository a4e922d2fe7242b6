"""Résumé extractor CLI.

Usage:
    resume-extract extract cv.pdf cover.docx --quality
    resume-extract extract cv.pdf --json
    resume-extract formats
    resume-extract validate config/extraction.yaml
"""

import typer

from resume_extractor.cli.extract import extract_command
from resume_extractor.cli.formats import formats_command
from resume_extractor.cli.validate import validate_command

app = typer.Typer(help="Extract plain text from PDF and Word résumés")

app.command(name="extract")(extract_command)
app.command(name="formats")(formats_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "extract_command",
    "formats_command",
    "validate_command",
]
