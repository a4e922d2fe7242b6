"""Uploaded file handle.

An ``UploadedFile`` mirrors what a web upload exposes: a name, a declared
size, a declared MIME type (possibly wrong or empty) and a readable body.
The body is either held in memory or read lazily from disk.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from resume_extractor.utils.exceptions import PermissionDeniedError


@dataclass(frozen=True)
class UploadedFile:
    """A file handed to the extraction pipeline."""

    name: str
    size: int
    type: str = ""
    content: Optional[bytes] = None
    path: Optional[Path] = None

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, mime_type: Optional[str] = None
    ) -> "UploadedFile":
        """Wrap an in-memory body.

        Args:
            name: Original filename
            data: File body
            mime_type: Declared MIME type; guessed from ``name`` when None
        """
        if mime_type is None:
            mime_type = mimetypes.guess_type(name)[0] or ""
        return cls(name=name, size=len(data), type=mime_type, content=bytes(data))

    @classmethod
    def from_path(
        cls, path: Path, mime_type: Optional[str] = None
    ) -> "UploadedFile":
        """Reference a file on disk without reading it yet."""
        path = Path(path)
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or ""
        return cls(
            name=path.name,
            size=path.stat().st_size,
            type=mime_type,
            path=path,
        )

    @property
    def extension(self) -> str:
        """Lower-case extension including the dot, or '' when absent."""
        return Path(self.name.lower()).suffix

    async def read_bytes(self) -> bytearray:
        """Read the whole body into a buffer owned by the caller.

        Raises:
            PermissionDeniedError: If the file on disk cannot be read
            ValueError: If the handle has no body at all
        """
        if self.content is not None:
            return bytearray(self.content)
        if self.path is None:
            raise ValueError(f"Uploaded file has no readable body: {self.name}")

        try:
            data = await asyncio.to_thread(self.path.read_bytes)
        except PermissionError as e:
            raise PermissionDeniedError(
                f"Permission denied reading {self.name}: {e}"
            ) from e
        return bytearray(data)
