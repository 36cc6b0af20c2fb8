"""
Configuration management for imgen.

Settings come from environment variables (a .env file is loaded first) and,
for the API key only, from a JSON file written by ``imgen setup`` at
``$XDG_CONFIG_HOME/imgen/config.json`` (``~/.config/imgen/config.json`` when
XDG_CONFIG_HOME is unset).
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from imgen.logging_config import get_logger
from imgen.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration constants
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_IMAGE_MODEL = "gpt-image-1"
DEFAULT_REQUEST_TIMEOUT = 300  # image generation regularly takes over a minute

APPLICATION = "imgen"
CONFIG_FILE_NAME = "config.json"


def config_dir() -> Path | None:
    """Return the imgen config directory, or None if no home can be determined."""
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APPLICATION
    home = os.environ.get("HOME")
    if home:
        return Path(home) / ".config" / APPLICATION
    return None


def config_path() -> Path | None:
    """Return the path of the stored config file, or None if it cannot be determined."""
    directory = config_dir()
    return directory / CONFIG_FILE_NAME if directory is not None else None


@dataclass
class StoredConfig:
    """Settings persisted on disk by ``imgen setup``."""

    openai_api_key: str | None = field(default=None, repr=False)

    @classmethod
    def load(cls) -> "StoredConfig":
        """
        Load the stored config from the default location.

        A missing file yields an empty config. An unreadable or invalid file is
        logged as a warning and also yields an empty config.
        """
        path = config_path()
        if path is None:
            return cls()
        try:
            config = cls.load_from_path(path)
        except ConfigurationError as e:
            logger.warning("Failed to load config from %s: %s", path, e)
            return cls()
        return config

    @classmethod
    def load_from_path(cls, path: Path) -> "StoredConfig":
        """
        Load the stored config from a specific path.

        Returns:
            StoredConfig (empty if the file does not exist)

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        logger.debug("Loading config from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()
        except OSError as e:
            raise ConfigurationError(f"I/O error reading config file {path}: {e}") from e
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        api_key = data.get("openai_api_key")
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigurationError(f"openai_api_key in {path} must be a string")
        return cls(openai_api_key=api_key)

    def save(self) -> Path:
        """Save to the default location and return the path written."""
        path = config_path()
        if path is None:
            raise ConfigurationError(
                "Could not determine configuration location (set HOME or XDG_CONFIG_HOME)."
            )
        self.save_to_path(path)
        return path

    def save_to_path(self, path: Path) -> None:
        """
        Save to a specific path, creating parent directories.

        The file holds a secret, so it is created with mode 0600.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        logger.debug("Saving config to %s", path)
        contents = json.dumps(asdict(self), indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
            os.chmod(path, 0o600)
        except OSError as e:
            raise ConfigurationError(f"I/O error writing config file {path}: {e}") from e
        logger.info("Config saved to %s", path)


@dataclass
class Config:
    """Configuration for imgen."""

    # API Configuration (openai_api_key excluded from repr to avoid leaking secrets)
    openai_api_key: str = field(default="", repr=False)
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL

    # Model Configuration
    image_model: str = DEFAULT_IMAGE_MODEL

    # Timeout Configuration (seconds)
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a Config instance from environment variables.

        Environment variables:
            OPENAI_API_KEY: API key (falls back to the stored config file)
            OPENAI_BASE_URL: Optional API base URL
            IMGEN_MODEL: Optional image model
            IMGEN_TIMEOUT: Optional request timeout in seconds
            IMGEN_DEBUG_API: Set to 1/true/yes to log raw requests and responses

        Raises:
            ConfigurationError: If IMGEN_TIMEOUT is not an integer
        """
        api_key = os.getenv("OPENAI_API_KEY", "")
        if not api_key:
            api_key = StoredConfig.load().openai_api_key or ""

        timeout_raw = os.getenv("IMGEN_TIMEOUT", "")
        try:
            timeout = int(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"IMGEN_TIMEOUT must be an integer number of seconds, got {timeout_raw!r}."
            ) from e

        debug_api = os.getenv("IMGEN_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            openai_api_key=api_key,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL,
            image_model=os.getenv("IMGEN_MODEL") or DEFAULT_IMAGE_MODEL,
            request_timeout=timeout,
            debug_api=debug_api,
        )

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger.debug("Validating config")

        if not self.openai_api_key:
            raise ConfigurationError(
                "OpenAI API key is required. Set OPENAI_API_KEY, pass --api-key, "
                "or run 'imgen setup'."
            )
        if not self.openai_api_key.startswith("sk-"):
            raise ConfigurationError(
                "OpenAI API key appears to be invalid. It should start with 'sk-'."
            )
        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"request_timeout must be positive, got {self.request_timeout}."
            )
        if not self.image_model:
            raise ConfigurationError("Image model cannot be empty.")

    def set_api_key(self, api_key: str) -> None:
        """
        Set the OpenAI API key.

        Raises:
            ConfigurationError: If API key is invalid
        """
        if not api_key:
            raise ConfigurationError("API key cannot be empty")

        if not api_key.startswith("sk-"):
            raise ConfigurationError(
                "OpenAI API key appears to be invalid. It should start with 'sk-'."
            )

        self.openai_api_key = api_key


# Global configuration instance
_global_config: Config | None = None


def get_config() -> Config:
    """Return the global configuration instance, creating it from the environment."""
    global _global_config
    if _global_config is None:
        _global_config = Config.from_env()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config
