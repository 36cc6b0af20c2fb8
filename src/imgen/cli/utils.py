"""
Utility functions for the CLI.

Exit code constants and the Click parameter types that classify prompt and
image arguments at parse time.
"""

from typing import Any

import click

from imgen.core.inputs import ImageInput, PromptInput, parse_image, parse_prompt
from imgen.utils.exceptions import ValidationError

# Exit codes (130 = common for SIGINT)
EXIT_SUCCESS = 0
EXIT_API_OR_NETWORK = 1
EXIT_VALIDATION_OR_CONFIG = 2
EXIT_CANCELLED = 130


class PromptParamType(click.ParamType):
    """Prompt argument: literal text, a file path, '@path', or '-' for stdin."""

    name = "prompt"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> PromptInput:
        if isinstance(value, PromptInput):
            return value
        try:
            return parse_prompt(value)
        except ValidationError as e:
            self.fail(str(e), param, ctx)


class ImageParamType(click.ParamType):
    """Image or mask option: a file path, '@path', or '-' for stdin."""

    name = "image"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> ImageInput:
        if isinstance(value, ImageInput):
            return value
        # Name the option as typed (--image), not its destination (images)
        field_name = "image"
        if param is not None and param.opts:
            field_name = max(param.opts, key=len).lstrip("-")
        try:
            return parse_image(value, field_name=field_name)
        except ValidationError as e:
            self.fail(str(e), param, ctx)


PROMPT = PromptParamType()
IMAGE = ImageParamType()


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_API_OR_NETWORK",
    "EXIT_VALIDATION_OR_CONFIG",
    "EXIT_CANCELLED",
    "IMAGE",
    "PROMPT",
    "ImageParamType",
    "PromptParamType",
]
