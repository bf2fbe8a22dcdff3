"""Unit tests for sensitive data sanitization."""

import pytest

from cityinfo.core.constants import REDACTED
from cityinfo.core.error_context import (
    is_sensitive_field,
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
    sanitize_sql_params,
    sanitize_value,
)
from cityinfo.core.exceptions import UnauthorizedError


@pytest.mark.unit
class TestSensitiveFields:
    @pytest.mark.parametrize(
        "field_name",
        [
            "password",
            "PASSWORD",
            "user_password",
            "secret_for_key",
            "api_key",
            "authorization",
            "database_url",
            "token",
        ],
    )
    def test_sensitive(self, field_name: str) -> None:
        assert is_sensitive_field(field_name) is True

    @pytest.mark.parametrize("field_name", ["name", "city_id", "description"])
    def test_not_sensitive(self, field_name: str) -> None:
        assert is_sensitive_field(field_name) is False


@pytest.mark.unit
class TestSanitization:
    def test_nested_values_are_redacted(self) -> None:
        data = {
            "user_name": "bogdan",
            "credentials": {"password": "hunter2"},
            "items": [{"token": "abc"}, {"name": "Paris"}],
        }

        assert sanitize_dict(data) == {
            "user_name": "bogdan",
            "credentials": REDACTED,
            "items": [{"token": REDACTED}, {"name": "Paris"}],
        }

    def test_depth_limit(self) -> None:
        nested: dict[str, object] = {"value": 1}
        for _ in range(15):
            nested = {"level": nested}

        result = sanitize_value(nested)

        current = result
        for _ in range(10):
            assert isinstance(current, dict)
            current = current["level"]
        assert REDACTED in str(current)

    def test_error_context_includes_exception_details(self) -> None:
        error = UnauthorizedError("Invalid bearer token")

        context = sanitize_error_context(
            error, {"request_path": "/api/cities", "authorization": "Bearer x"}
        )

        assert context["error_type"] == "UnauthorizedError"
        assert context["request_path"] == "/api/cities"
        assert context["authorization"] == REDACTED
        assert context["error_attributes"]["error_code"] == "UNAUTHORIZED"

    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            (None, None),
            (
                {"name": "Paris", "password": "x"},
                {"name": "Paris", "password": REDACTED},
            ),
            (("Paris", 1), ("Paris", 1)),
            ("raw", REDACTED),
        ],
    )
    def test_sql_params(self, params: object, expected: object) -> None:
        assert sanitize_sql_params(params) == expected

    def test_headers(self) -> None:
        headers = {"Authorization": "Bearer abc", "Accept": "application/json"}

        result = sanitize_headers(headers)

        assert result == {"Authorization": REDACTED, "Accept": "application/json"}
        assert headers["Authorization"] == "Bearer abc"
