"""Core models for request/response handling."""

import mimetypes
from dataclasses import dataclass, field
from enum import StrEnum


class BodyType(StrEnum):
    """Handler parameter classification for request parsing."""

    FORM = "form"
    MULTIPART = "multipart"


class SliceKind(StrEnum):
    """Element types a form slice can be converted to."""

    STRING = "string"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    BOOL = "bool"


@dataclass(frozen=True, slots=True)
class FileHeader:
    """Metadata of a file part from a multipart/form-data request."""

    filename: str
    size: int
    content_type: str | None = field(default=None)

    @classmethod
    def from_upload(cls, filename: str, data: bytes) -> "FileHeader":
        """Build a header from a raw uploaded file, guessing its content type."""
        content_type, _ = mimetypes.guess_type(filename)
        return cls(filename=filename, size=len(data), content_type=content_type)
