"""
Request and response models for the OpenAI Images API.

Create requests are sent as JSON; edit requests carry image bytes and are
multipart-encoded. Both endpoints answer with the same response shape.
"""

import base64
import binascii
import io
from dataclasses import dataclass, field
from typing import Any

from PIL import Image, UnidentifiedImageError

from imgen.core.config import DEFAULT_IMAGE_MODEL
from imgen.core.inputs import ImageData
from imgen.core.multipart import MultipartBuilder
from imgen.utils.exceptions import APIError

# gpt-image-1 pricing, USD per 1M tokens
INPUT_COST_PER_MILLION = 10.0
OUTPUT_COST_PER_MILLION = 40.0

SIZES = ("1024x1024", "1536x1024", "1024x1536", "auto")
QUALITIES = ("low", "medium", "high", "auto")
BACKGROUNDS = ("transparent", "opaque", "auto")
MODERATIONS = ("low", "auto")
OUTPUT_FORMATS = ("png", "jpeg", "webp")
MAX_IMAGES = 10

_EXTENSION_BY_FORMAT = {"PNG": "png", "JPEG": "jpg", "WEBP": "webp"}


@dataclass
class CreateRequest:
    """Body of POST /images/generations."""

    prompt: str
    model: str = DEFAULT_IMAGE_MODEL
    n: int | None = None
    size: str | None = None
    quality: str | None = None
    background: str | None = None
    moderation: str | None = None
    output_compression: int | None = None
    output_format: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON payload; unset optional fields are omitted."""
        payload: dict[str, Any] = {"model": self.model, "prompt": self.prompt}
        optional = {
            "n": self.n,
            "size": self.size,
            "quality": self.quality,
            "background": self.background,
            "moderation": self.moderation,
            "output_compression": self.output_compression,
            "output_format": self.output_format,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload


@dataclass
class EditRequest:
    """Body of POST /images/edits (multipart/form-data)."""

    prompt: str
    images: list[ImageData]
    mask: ImageData | None = None
    model: str = DEFAULT_IMAGE_MODEL
    n: int | None = None
    quality: str | None = None
    size: str | None = None

    def to_multipart(self, builder: MultipartBuilder) -> None:
        """Add text fields, then one ``image[]`` part per source image, then the mask."""
        builder.add_text("prompt", self.prompt)
        builder.add_text("model", self.model)
        if self.n is not None:
            builder.add_text("n", str(self.n))
        if self.quality is not None:
            builder.add_text("quality", self.quality)
        if self.size is not None:
            builder.add_text("size", self.size)
        for image in self.images:
            builder.add_file("image[]", image.filename, image.content_type, image.content)
        if self.mask is not None:
            builder.add_file("mask", self.mask.filename, self.mask.content_type, self.mask.content)


@dataclass
class Usage:
    """Token usage reported by the API."""

    total_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    text_tokens: int = 0
    image_tokens: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Usage":
        details = data.get("input_tokens_details") or {}
        return cls(
            total_tokens=int(data.get("total_tokens", 0)),
            input_tokens=int(data.get("input_tokens", 0)),
            output_tokens=int(data.get("output_tokens", 0)),
            text_tokens=int(details.get("text_tokens", 0)),
            image_tokens=int(details.get("image_tokens", 0)),
        )

    def calculate_cost(self) -> float:
        """
        Estimated cost in USD.

        gpt-image-1 input tokens cost $10.00 and output tokens $40.00 per 1M.
        """
        input_cost = self.input_tokens / 1_000_000 * INPUT_COST_PER_MILLION
        output_cost = self.output_tokens / 1_000_000 * OUTPUT_COST_PER_MILLION
        return input_cost + output_cost


@dataclass
class GeneratedImage:
    """One decoded image from the response, with bytes kept exactly as returned."""

    content: bytes
    format: str  # Pillow format name, e.g. 'PNG'
    width: int
    height: int

    @classmethod
    def from_b64(cls, b64_json: str) -> "GeneratedImage":
        """
        Decode base64 image data and identify it with Pillow.

        Raises:
            APIError: If the data is not valid base64 or not a readable image
        """
        try:
            content = base64.b64decode(b64_json, validate=True)
        except (binascii.Error, ValueError) as e:
            raise APIError(f"Invalid base64 image data in API response: {e}") from e
        try:
            with Image.open(io.BytesIO(content)) as image:
                fmt = image.format or ""
                width, height = image.size
        except (UnidentifiedImageError, OSError) as e:
            raise APIError(f"API returned data that is not a readable image: {e}") from e
        return cls(content=content, format=fmt, width=width, height=height)

    @property
    def extension(self) -> str:
        """File extension (without dot) matching the image format."""
        return _EXTENSION_BY_FORMAT.get(self.format.upper(), "png")


@dataclass
class ImagesResponse:
    """Response from the generations and edits endpoints."""

    created: int
    images: list[GeneratedImage] = field(default_factory=list)
    usage: Usage | None = None

    @classmethod
    def from_json(cls, data: Any) -> "ImagesResponse":
        """
        Parse the JSON response body and decode every image.

        Raises:
            APIError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise APIError("Unexpected API response: expected a JSON object", response=str(data))
        try:
            created = int(data["created"])
            items = data["data"]
            if not isinstance(items, list):
                raise TypeError("'data' is not a list")
            b64_list = [item["b64_json"] for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise APIError(
                f"Failed to extract images from API response: {e}", response=str(data)[:2000]
            ) from e
        if not b64_list:
            raise APIError("No images in API response.", response=str(data)[:2000])

        usage_data = data.get("usage")
        usage = Usage.from_json(usage_data) if isinstance(usage_data, dict) else None
        return cls(
            created=created,
            images=[GeneratedImage.from_b64(b64) for b64 in b64_list],
            usage=usage,
        )


__all__ = [
    "BACKGROUNDS",
    "MAX_IMAGES",
    "MODERATIONS",
    "OUTPUT_FORMATS",
    "QUALITIES",
    "SIZES",
    "CreateRequest",
    "EditRequest",
    "GeneratedImage",
    "ImagesResponse",
    "Usage",
]
