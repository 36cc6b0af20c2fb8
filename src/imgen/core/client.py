"""
HTTP client for the OpenAI Images API.

Requests are synchronous and fully buffered: the request body (JSON, or the
multipart body for edits) is built in memory before sending and the whole
response is read before parsing. There are no retries.
"""

import json
import time
from typing import Any

import requests

from imgen.core.api import CreateRequest, EditRequest, ImagesResponse
from imgen.core.config import Config, get_config
from imgen.core.multipart import MultipartBuilder
from imgen.logging_config import get_logger, log_prompts
from imgen.utils.exceptions import (
    APIError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)

logger = get_logger(__name__)

_PROMPT_LOG_MAX = 50_000
_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"prompt", "message"})


def _truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64 strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: _truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        return f"<string, {len(obj)} chars>"
    return obj


def _error_message(response: requests.Response) -> str:
    """Return the API's error.message if the body carries one, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return str(message)
    return response.text


class ImagesClient:
    """Client for the OpenAI image generations and edits endpoints."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()
        if not self.config.openai_api_key:
            raise ValidationError(
                "OpenAI API key is required. Set it via config or environment variable.",
                field="api_key",
            )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.openai_api_key}"}

    def _url(self, path: str) -> str:
        return f"{self.config.openai_base_url.rstrip('/')}/{path}"

    def _log_prompt(self, prompt: str) -> None:
        if log_prompts():
            truncated = (
                prompt if len(prompt) <= _PROMPT_LOG_MAX else prompt[:_PROMPT_LOG_MAX] + "..."
            )
            logger.info("Prompt: %s", truncated)

    def _check_status(self, response: requests.Response, model: str) -> None:
        """Map non-200 status codes to APIError."""
        if response.status_code == 200:
            return
        if response.status_code == 401:
            raise APIError(
                "Authentication failed. Please check your OpenAI API key.",
                status_code=401,
                response=response.text,
            )
        if response.status_code == 404:
            raise APIError(
                f"Model not found or endpoint unavailable: {model}",
                status_code=404,
                response=response.text,
            )
        if response.status_code == 429:
            raise APIError(
                "Rate limit exceeded. Please wait before making more requests.",
                status_code=429,
                response=response.text,
            )
        if response.status_code >= 500:
            raise APIError(
                f"OpenAI service error: {response.status_code}",
                status_code=response.status_code,
                response=response.text,
            )
        raise APIError(
            f"API request failed with status {response.status_code}: {_error_message(response)}",
            status_code=response.status_code,
            response=response.text,
        )

    def _parse(self, response: requests.Response) -> ImagesResponse:
        try:
            result = response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse API response as JSON: {str(e)}",
                response=response.text,
            ) from e
        if self.config.debug_api:
            logger.info(
                "API response (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(result), indent=2, default=str),
            )
        return ImagesResponse.from_json(result)

    def _post(
        self, action: str, model: str, url: str, headers: dict[str, str], **body: Any
    ) -> ImagesResponse:
        """POST with transport errors mapped to imgen exceptions; logs timing and size."""
        timeout = self.config.request_timeout
        logger.debug("API request url=%s model=%s timeout=%s", url, model, timeout)
        start_time = time.time()
        try:
            response = requests.post(url, headers=headers, timeout=timeout, **body)
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out after {timeout} seconds. "
                "Image generation may be taking longer than expected."
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(
                "Failed to connect to the OpenAI API. Please check your internet connection.",
                original_error=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"Network error during API request: {str(e)}", original_error=e
            ) from e
        elapsed = time.time() - start_time
        logger.info(
            "%s: request completed in %.1fs with response size of %d bytes",
            action,
            elapsed,
            len(response.content),
        )
        self._check_status(response, model)
        return self._parse(response)

    def create_images(self, request: CreateRequest) -> ImagesResponse:
        """
        Generate images from a prompt.

        Raises:
            APIError: If the API rejects the request or returns an unusable body
            NetworkError: If the API cannot be reached
            RequestTimeoutError: If the request exceeds the configured timeout
        """
        payload = request.to_payload()
        logger.info("Creating images model=%s n=%s", request.model, request.n or 1)
        self._log_prompt(request.prompt)
        if self.config.debug_api:
            logger.info(
                "API request payload: %s",
                json.dumps(_truncate_image_data_for_log(payload), indent=2),
            )
        headers = {**self._headers(), "Content-Type": "application/json"}
        return self._post(
            "create_images",
            request.model,
            url=self._url("images/generations"),
            headers=headers,
            json=payload,
        )

    def edit_images(
        self, request: EditRequest, builder: MultipartBuilder | None = None
    ) -> ImagesResponse:
        """
        Edit or extend source images guided by a prompt (and optional mask).

        Args:
            request: The edit request with images already read into memory
            builder: Optional builder (e.g. with a fixed boundary); a fresh one by default

        Raises:
            APIError, NetworkError, RequestTimeoutError: As for create_images
        """
        builder = builder or MultipartBuilder()
        request.to_multipart(builder)
        multipart = builder.build()
        logger.info(
            "Editing images model=%s images=%d mask=%s n=%s",
            request.model,
            len(request.images),
            request.mask is not None,
            request.n or 1,
        )
        self._log_prompt(request.prompt)
        logger.debug("Multipart body size=%d bytes", len(multipart.body))
        if self.config.debug_api:
            logger.info(
                "API request fields: %s",
                json.dumps(
                    {
                        "prompt": request.prompt,
                        "model": request.model,
                        "n": request.n,
                        "quality": request.quality,
                        "size": request.size,
                        "image[]": [
                            f"<{i.filename}, {i.content_type}, {len(i.content)} bytes>"
                            for i in request.images
                        ],
                        "mask": (
                            f"<{request.mask.filename}, {request.mask.content_type}, "
                            f"{len(request.mask.content)} bytes>"
                            if request.mask is not None
                            else None
                        ),
                    },
                    indent=2,
                ),
            )
        headers = {**self._headers(), "Content-Type": multipart.content_type}
        return self._post(
            "edit_images",
            request.model,
            url=self._url("images/edits"),
            headers=headers,
            data=multipart.body,
        )


__all__ = ["ImagesClient"]
