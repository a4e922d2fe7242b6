"""Formats command: lists the document types the extractor accepts."""

import typer

from resume_extractor.models.config import FILE_TYPE_INFO
from resume_extractor.services.quality import format_file_size


def formats_command():
    """List supported file types with extensions and size limits."""
    for file_type, info in FILE_TYPE_INFO.items():
        extensions = ", ".join(info.extensions)
        typer.echo(
            f"{file_type.value:<5} {info.name} ({extensions}), "
            f"max {format_file_size(info.max_size)}"
        )
