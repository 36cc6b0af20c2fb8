"""
Prompt validation for imgen.
"""

from imgen.utils.exceptions import ValidationError

# gpt-image-1 accepts prompts up to 32000 characters
MAX_PROMPT_LENGTH = 32_000


def validate_prompt(prompt: str) -> None:
    """
    Validate a text prompt after it has been read.

    Args:
        prompt: The prompt to validate

    Raises:
        ValidationError: If prompt is empty or too long
    """
    if not prompt or not prompt.strip():
        raise ValidationError("Prompt cannot be empty", field="prompt")

    if len(prompt) > MAX_PROMPT_LENGTH:
        raise ValidationError(
            f"Prompt is too long ({len(prompt)} characters). "
            f"The maximum is {MAX_PROMPT_LENGTH}.",
            field="prompt",
        )
