"""
Saving generated images.

Automatic targets name each file ``<prompt prefix>.<created>.<index>.<ext>`` in
the output directory, e.g. ``a_cute_baby_otter.1713833628.1.png``.
"""

import sys
from pathlib import Path
from typing import BinaryIO

from imgen.core.api import ImagesResponse
from imgen.core.inputs import AUTO, STDOUT, OutputTarget
from imgen.logging_config import get_logger

logger = get_logger(__name__)

PREFIX_MAX_BYTES = 32
PREFIX_MAX_WORDS = 5
DEFAULT_PREFIX = "imgen"


def prompt_prefix(prompt: str) -> str:
    """
    Build a short filesystem-safe prefix from the start of a prompt.

    Only the first 32 bytes of the UTF-8 encoding are considered, cut back to
    a whole character. ASCII punctuation is dropped, non-ASCII characters are
    kept so non-English prompts still produce a name, and at most five
    lowercase words are joined with underscores.
    """
    words = []
    head = prompt.encode("utf-8")[:PREFIX_MAX_BYTES].decode("utf-8", errors="ignore")
    for word in head.split():
        cleaned = "".join(
            c.lower() for c in word if not c.isascii() or c.isalnum()
        )
        if cleaned:
            words.append(cleaned)
    return "_".join(words[:PREFIX_MAX_WORDS]) or DEFAULT_PREFIX


def auto_filename(prompt: str, created: int, index: int, ext: str) -> str:
    """Return the automatic file name for the image at 1-based index."""
    return f"{prompt_prefix(prompt)}.{created}.{index}.{ext}"


def save_images(
    response: ImagesResponse,
    prompt: str,
    target: OutputTarget,
    directory: Path | str = ".",
    stdout: BinaryIO | None = None,
) -> list[Path]:
    """
    Write the response images to their target.

    Args:
        response: Decoded API response
        prompt: Prompt used, for automatic file names
        target: Where to write; explicit targets must hold a single image
        directory: Directory for automatically named files
        stdout: Binary stream for the stdout target (default: sys.stdout.buffer)

    Returns:
        Paths written (empty for the stdout target)
    """
    if target.kind != AUTO:
        target.validate(len(response.images))

    if target.kind == STDOUT:
        stream = stdout if stdout is not None else sys.stdout.buffer
        stream.write(response.images[0].content)
        stream.flush()
        logger.info("Wrote %d bytes to stdout", len(response.images[0].content))
        return []

    if target.kind == AUTO:
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for index, image in enumerate(response.images, start=1):
            path = out_dir / auto_filename(prompt, response.created, index, image.extension)
            path.write_bytes(image.content)
            logger.info("Saved %s (%dx%d)", path, image.width, image.height)
            paths.append(path)
        return paths

    # OutputTarget only allows the file kind with a path
    target.path.parent.mkdir(parents=True, exist_ok=True)
    target.path.write_bytes(response.images[0].content)
    logger.info("Saved %s", target.path)
    return [target.path]


__all__ = ["auto_filename", "prompt_prefix", "save_images"]
