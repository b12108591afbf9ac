"""In-memory upload files and the client-side checks applied before sending them."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .errors import ClientValidationError

# Types accepted by the upload widgets.
VALID_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/bmp",
    "image/gif",
    "image/webp",
)
# The enrollment endpoints are stricter than the upload widgets: no WebP.
ENROLL_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/bmp",
    "image/gif",
)
SHEET_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xls", ".csv")
DEFAULT_MAX_SIZE_MB = 10.0


@dataclass(frozen=True)
class UploadFile:
    """A file selected by the operator, held in memory until it is sent."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "UploadFile":
        resolved = Path(path)
        guessed = content_type or mimetypes.guess_type(resolved.name)[0] or "application/octet-stream"
        return cls(filename=resolved.name, content=resolved.read_bytes(), content_type=guessed)

    def as_multipart(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


def format_file_size(size_bytes: int) -> str:
    """Render a byte count as ``B``, ``KB`` or ``MB``."""

    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.2f} KB"
    return f"{size_bytes / (1024 * 1024):.2f} MB"


def is_valid_image_type(upload: UploadFile, allowed: Sequence[str] = VALID_IMAGE_TYPES) -> bool:
    return (upload.content_type or "").lower() in allowed


def validate_image_upload(upload: UploadFile | None, *, max_size_mb: float = DEFAULT_MAX_SIZE_MB) -> UploadFile:
    """Reject non-image or oversized uploads before any request is made."""

    if upload is None:
        raise ClientValidationError("Image file is required")
    if not is_valid_image_type(upload):
        raise ClientValidationError("Invalid file type. Please select a JPEG, PNG, BMP, GIF, or WebP image.")
    max_size_bytes = max_size_mb * 1024 * 1024
    if upload.size > max_size_bytes:
        raise ClientValidationError(
            f"File size must be less than {max_size_mb:g}MB. Current size: {format_file_size(upload.size)}"
        )
    return upload


def validate_sheet_upload(upload: UploadFile | None) -> UploadFile:
    """Bulk enrollment accepts Excel or CSV sheets only."""

    if upload is None:
        raise ClientValidationError("Excel/CSV file is required")
    if upload.extension not in SHEET_EXTENSIONS:
        raise ClientValidationError("Invalid file type. Supported: .xlsx, .xls, .csv")
    return upload


__all__ = [
    "DEFAULT_MAX_SIZE_MB",
    "ENROLL_IMAGE_TYPES",
    "SHEET_EXTENSIONS",
    "UploadFile",
    "VALID_IMAGE_TYPES",
    "format_file_size",
    "is_valid_image_type",
    "validate_image_upload",
    "validate_sheet_upload",
]
