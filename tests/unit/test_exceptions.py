"""Unit tests for imgen exceptions."""

import pytest

from imgen.utils.exceptions import (
    APIError,
    ConfigurationError,
    ImgenError,
    InputReadError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)


@pytest.mark.unit
class TestImgenError:
    def test_base_is_exception(self):
        assert issubclass(ImgenError, Exception)

    def test_subclasses_are_imgen_error(self):
        for cls in (
            ValidationError,
            InputReadError,
            APIError,
            NetworkError,
            RequestTimeoutError,
            ConfigurationError,
        ):
            assert issubclass(cls, ImgenError)


@pytest.mark.unit
class TestValidationError:
    def test_message_and_field(self):
        e = ValidationError("bad value", field="prompt")
        assert str(e) == "bad value"
        assert e.field == "prompt"

    def test_field_optional(self):
        e = ValidationError("invalid")
        assert e.field == ""


@pytest.mark.unit
class TestInputReadError:
    def test_path(self):
        e = InputReadError("cannot read", path="<stdin>")
        assert str(e) == "cannot read"
        assert e.path == "<stdin>"


@pytest.mark.unit
class TestAPIError:
    def test_message_status_response(self):
        e = APIError("failed", status_code=500, response="body")
        assert e.status_code == 500
        assert e.response == "body"

    def test_defaults(self):
        e = APIError("failed")
        assert e.status_code == 0
        assert e.response == ""


@pytest.mark.unit
class TestNetworkError:
    def test_original_error(self):
        inner = ConnectionError("refused")
        e = NetworkError("network failed", original_error=inner)
        assert e.original_error is inner


@pytest.mark.unit
class TestRequestTimeoutError:
    def test_inherits_imgen_error(self):
        e = RequestTimeoutError("timed out")
        assert isinstance(e, ImgenError)
