"""
multipart/form-data encoding for the image edit endpoint.

The whole body is assembled in memory. Parts are written in the order they were
added; the OpenAI API reads text fields and files by name, so callers control
ordering through call sequence.
"""

import secrets
import string
from dataclasses import dataclass
from pathlib import PurePath

BOUNDARY_LENGTH = 30
BOUNDARY_ALPHABET = string.ascii_letters + string.digits

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_MIME_BY_EXTENSION = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

_EXTENSION_BY_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def new_boundary() -> str:
    """Return a random 30-character alphanumeric boundary."""
    return "".join(secrets.choice(BOUNDARY_ALPHABET) for _ in range(BOUNDARY_LENGTH))


def mime_from_filename(filename: str | PurePath) -> str:
    """
    Infer a MIME type from a filename extension.

    Matching is case-sensitive: ``photo.PNG`` is not recognized and falls back
    to ``application/octet-stream``, as does a name with no extension.
    """
    suffix = PurePath(filename).suffix
    if not suffix:
        return DEFAULT_CONTENT_TYPE
    return _MIME_BY_EXTENSION.get(suffix[1:], DEFAULT_CONTENT_TYPE)


def mime_from_bytes(data: bytes) -> str:
    """Infer an image MIME type from leading magic bytes."""
    if data[:8] == _PNG_SIGNATURE:
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:2] == b"\xff\xd8":
        return "image/jpeg"
    return DEFAULT_CONTENT_TYPE


def ext_from_mime(content_type: str) -> str:
    """Return a file extension (without dot) for a MIME type; ``bin`` if unknown."""
    return _EXTENSION_BY_MIME.get(content_type, "bin")


@dataclass(frozen=True)
class TextPart:
    """A plain text form field."""

    name: str
    value: str


@dataclass(frozen=True)
class FilePart:
    """A file form field with its content already in memory."""

    name: str
    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class MultipartBody:
    """Encoded request body and the matching Content-Type header value."""

    body: bytes
    content_type: str


class MultipartBuilder:
    """Builds a multipart/form-data request body.

    The boundary can be passed in for reproducible output; otherwise a random
    one is generated with new_boundary(). A builder produces exactly one body.
    """

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary if boundary is not None else new_boundary()
        self._parts: list[TextPart | FilePart] = []
        self._built = False

    @property
    def parts(self) -> tuple[TextPart | FilePart, ...]:
        return tuple(self._parts)

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("MultipartBuilder has already been built")

    def add_text(self, name: str, value: str) -> None:
        """Append a text field. Name and value are written without escaping."""
        self._check_open()
        self._parts.append(TextPart(name=name, value=value))

    def add_file(self, name: str, filename: str, content_type: str, content: bytes) -> None:
        """Append a file field; content is written verbatim."""
        self._check_open()
        self._parts.append(
            FilePart(name=name, filename=filename, content_type=content_type, content=content)
        )

    def build(self) -> MultipartBody:
        """Serialize all parts and the closing boundary."""
        self._check_open()
        self._built = True

        delimiter = f"--{self.boundary}\r\n".encode()
        chunks: list[bytes] = []
        for part in self._parts:
            chunks.append(delimiter)
            if isinstance(part, TextPart):
                chunks.append(
                    f'Content-Disposition: form-data; name="{part.name}"\r\n\r\n'.encode()
                )
                chunks.append(part.value.encode())
            else:
                chunks.append(
                    f'Content-Disposition: form-data; name="{part.name}"; '
                    f'filename="{part.filename}"\r\n'.encode()
                )
                chunks.append(f"Content-Type: {part.content_type}\r\n\r\n".encode())
                chunks.append(part.content)
            chunks.append(b"\r\n")
        chunks.append(f"--{self.boundary}--\r\n".encode())

        return MultipartBody(
            body=b"".join(chunks),
            content_type=f"multipart/form-data; boundary={self.boundary}",
        )


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "FilePart",
    "MultipartBody",
    "MultipartBuilder",
    "TextPart",
    "ext_from_mime",
    "mime_from_bytes",
    "mime_from_filename",
    "new_boundary",
]
