"""
imgen - OpenAI image generation from the command line

A Python package for creating and editing images with the OpenAI Images API
(gpt-image-1).

Library usage:
- Build a CreateRequest or EditRequest and send it with ImagesClient(config).
- Prompt, image and mask arguments accept literal text (prompts only), file
  paths, '@path' to force a file, or '-' for stdin; see parse_prompt/parse_image.
- MultipartBuilder encodes multipart/form-data bodies; pass a boundary for
  reproducible output.
- Logging: control verbosity with set_verbosity(0|1|2) or configure_logging(verbose_level, quiet);
  IMGEN_VERBOSITY env (0/1/2) is read when the CLI runs.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("imgen")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

from imgen.core.api import (
    CreateRequest,
    EditRequest,
    GeneratedImage,
    ImagesResponse,
    Usage,
)
from imgen.core.client import ImagesClient
from imgen.core.config import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_OPENAI_BASE_URL,
    Config,
    StoredConfig,
    get_config,
    set_config,
)
from imgen.core.inputs import (
    ImageData,
    ImageInput,
    Inputs,
    OutputTarget,
    PromptInput,
    parse_image,
    parse_prompt,
)
from imgen.core.multipart import MultipartBody, MultipartBuilder, new_boundary
from imgen.core.output import prompt_prefix, save_images
from imgen.core.prompt import validate_prompt
from imgen.logging_config import configure_logging, set_verbosity
from imgen.utils.exceptions import (
    APIError,
    ConfigurationError,
    ImgenError,
    InputReadError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)

__all__ = [
    "APIError",
    "Config",
    "ConfigurationError",
    "CreateRequest",
    "DEFAULT_IMAGE_MODEL",
    "DEFAULT_OPENAI_BASE_URL",
    "EditRequest",
    "GeneratedImage",
    "ImageData",
    "ImageInput",
    "ImagesClient",
    "ImagesResponse",
    "ImgenError",
    "InputReadError",
    "Inputs",
    "MultipartBody",
    "MultipartBuilder",
    "NetworkError",
    "OutputTarget",
    "PromptInput",
    "RequestTimeoutError",
    "StoredConfig",
    "Usage",
    "ValidationError",
    "configure_logging",
    "get_config",
    "new_boundary",
    "parse_image",
    "parse_prompt",
    "prompt_prefix",
    "save_images",
    "set_config",
    "set_verbosity",
    "validate_prompt",
]
