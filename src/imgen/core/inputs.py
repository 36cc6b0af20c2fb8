"""
Prompt, image and output arguments.

Every prompt/image/mask token from the command line is classified as literal
text, a file path, or standard input ('-'):

1. ``-`` is stdin.
2. ``@path`` forces a file; a missing file is an error, never a literal.
3. Anything else is a file if it names an existing file, otherwise a literal
   prompt. Images and masks never accept literal text.

An existing file always wins over the literal reading of a prompt; use ``@`` to
be explicit about files. Classification only checks for existence. Contents are
read later by an explicit read() call, so argument validation never consumes
stdin or opens files.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, TextIO

from imgen.core.multipart import ext_from_mime, mime_from_bytes, mime_from_filename
from imgen.logging_config import get_logger
from imgen.utils.exceptions import InputReadError, ValidationError

logger = get_logger(__name__)

STDIN_TOKEN = "-"
FILE_PREFIX = "@"
STDIN_NAME = "<stdin>"

# Input kinds
LITERAL = "literal"
FILE = "file"
STDIN = "stdin"

# Output kinds
AUTO = "auto"
STDOUT = "stdout"


def _is_file(path: Path) -> bool:
    """Return True for a regular file; stat errors such as ENAMETOOLONG count as False."""
    try:
        return path.is_file()
    except OSError:
        return False


def _check_kind(owner: str, kind: str, path: Path | None, kinds: tuple[str, ...]) -> None:
    """Validate a kind tag; only the file kind carries a path."""
    if kind not in kinds:
        raise ValueError(f"{owner} kind must be one of {kinds}, got {kind!r}")
    if kind == FILE and path is None:
        raise ValueError(f"{owner} of kind {kind!r} needs a path")
    if kind != FILE and path is not None:
        raise ValueError(f"{owner} of kind {kind!r} cannot have a path")


def _classify(token: str, field_name: str) -> tuple[str, Path | None]:
    """Return (kind, path) for a raw token. Raises ValidationError for a missing @file."""
    if token == STDIN_TOKEN:
        return STDIN, None
    if token.startswith(FILE_PREFIX):
        raw_path = token[len(FILE_PREFIX) :]
        if not raw_path or not _is_file(Path(raw_path)):
            raise ValidationError(f"File not found: {raw_path}", field=field_name)
        return FILE, Path(raw_path)
    if token:
        path = Path(token)
        if _is_file(path):
            return FILE, path
    return LITERAL, None


@dataclass(frozen=True)
class PromptInput:
    """A prompt given literally, as a file path, or on stdin."""

    kind: str
    value: str = ""
    path: Path | None = None

    def __post_init__(self) -> None:
        _check_kind("PromptInput", self.kind, self.path, (LITERAL, FILE, STDIN))

    @property
    def is_stdin(self) -> bool:
        return self.kind == STDIN

    def read(self, stdin: TextIO | None = None) -> str:
        """
        Materialize the prompt text.

        Args:
            stdin: Text stream to drain for stdin prompts (default: sys.stdin)

        Raises:
            InputReadError: If the file or stdin cannot be read
        """
        if self.kind == LITERAL:
            return self.value
        if self.path is not None:
            logger.debug("Reading prompt from %s", self.path)
            try:
                return self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise InputReadError(
                    f"Failed to read prompt from file: {self.path}: {e}", path=str(self.path)
                ) from e
        logger.debug("Reading prompt from stdin")
        stream = stdin if stdin is not None else sys.stdin
        try:
            return stream.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"Failed to read prompt from stdin: {e}", path=STDIN_NAME) from e


@dataclass(frozen=True)
class ImageData:
    """Image bytes read into memory, with the filename and type sent to the API."""

    content: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class ImageInput:
    """A source image or mask given as a file path or on stdin."""

    kind: str
    path: Path | None = None

    def __post_init__(self) -> None:
        _check_kind("ImageInput", self.kind, self.path, (FILE, STDIN))

    @property
    def is_stdin(self) -> bool:
        return self.kind == STDIN

    def read(self, stdin: BinaryIO | None = None) -> ImageData:
        """
        Materialize the image bytes.

        File images take their content type from the extension. Stdin images are
        sniffed from their magic bytes and get a synthetic ``stdin.<ext>`` name.

        Raises:
            InputReadError: If the file or stdin cannot be read
        """
        if self.path is not None:
            logger.debug("Reading image from %s", self.path)
            try:
                content = self.path.read_bytes()
            except OSError as e:
                raise InputReadError(
                    f"Failed to read image from file: {self.path}: {e}", path=str(self.path)
                ) from e
            return ImageData(
                content=content,
                filename=self.path.name,
                content_type=mime_from_filename(self.path.name),
            )

        logger.debug("Reading image from stdin")
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            content = stream.read()
        except OSError as e:
            raise InputReadError(f"Failed to read image from stdin: {e}", path=STDIN_NAME) from e
        content_type = mime_from_bytes(content)
        return ImageData(
            content=content,
            filename=f"stdin.{ext_from_mime(content_type)}",
            content_type=content_type,
        )


def parse_prompt(token: str) -> PromptInput:
    """Classify a prompt token. Raises ValidationError for a missing @file."""
    kind, path = _classify(token, "prompt")
    if kind == LITERAL:
        return PromptInput(kind=LITERAL, value=token)
    return PromptInput(kind=kind, path=path)


def parse_image(token: str, field_name: str = "image") -> ImageInput:
    """Classify an image or mask token. Literal text is rejected."""
    kind, path = _classify(token, field_name)
    if kind == LITERAL:
        raise ValidationError(
            f"Expected a file path or '-' for stdin for --{field_name} input, got {token!r}",
            field=field_name,
        )
    return ImageInput(kind=kind, path=path)


@dataclass(frozen=True)
class Inputs:
    """Validated prompt, source images and mask for one invocation."""

    prompt: PromptInput
    images: tuple[ImageInput, ...] = field(default_factory=tuple)
    mask: ImageInput | None = None

    @classmethod
    def create(
        cls,
        prompt: PromptInput,
        images: list[ImageInput] | tuple[ImageInput, ...] | None = None,
        mask: ImageInput | None = None,
    ) -> "Inputs":
        """
        Check that at most one input reads stdin and return the input set.

        Standard input can only be drained once, so prompt, mask and all images
        together may bind '-' at most one time.

        Raises:
            ValidationError: If more than one input is '-'
        """
        images = tuple(images or ())
        stdin_count = int(prompt.is_stdin) + int(mask is not None and mask.is_stdin)
        stdin_count += sum(1 for image in images if image.is_stdin)
        if stdin_count > 1:
            raise ValidationError(
                "Only one of the prompt, --image or --mask can be '-' (stdin) at a time",
                field="stdin",
            )
        return cls(prompt=prompt, images=images, mask=mask)

    def read_prompt(self) -> str:
        return self.prompt.read()

    def read_images(self) -> list[ImageData]:
        return [image.read() for image in self.images]

    def read_mask(self) -> ImageData | None:
        return self.mask.read() if self.mask is not None else None


@dataclass(frozen=True)
class OutputTarget:
    """Where generated images go: automatic file names, one file, or stdout."""

    kind: str = AUTO
    path: Path | None = None

    def __post_init__(self) -> None:
        _check_kind("OutputTarget", self.kind, self.path, (AUTO, FILE, STDOUT))

    @classmethod
    def parse(cls, token: str | Path | None) -> "OutputTarget":
        """Parse --out: None is automatic naming, '-' is stdout, anything else a file."""
        if token is None:
            return cls(kind=AUTO)
        if str(token) == STDIN_TOKEN:
            return cls(kind=STDOUT)
        return cls(kind=FILE, path=Path(token))

    @property
    def is_explicit(self) -> bool:
        return self.kind != AUTO

    def validate(self, n: int) -> None:
        """
        Reject an explicit file or stdout target when more than one image is requested.

        Raises:
            ValidationError: If the target is explicit and n != 1
        """
        if self.is_explicit and n != 1:
            where = "stdout" if self.kind == STDOUT else f"file {self.path}"
            raise ValidationError(
                f"Cannot write {n} images to a single {where}; "
                "use -n 1 or omit --out to name files automatically",
                field="out",
            )


__all__ = [
    "AUTO",
    "FILE",
    "LITERAL",
    "STDIN",
    "STDOUT",
    "ImageData",
    "ImageInput",
    "Inputs",
    "OutputTarget",
    "PromptInput",
    "parse_image",
    "parse_prompt",
]
