import pytest
from unittest.mock import Mock

from calchub.security.error_handlers import SecureErrorHandler


@pytest.fixture
def handler():
    return SecureErrorHandler(debug_mode=False)


def make_request(headers=None, host="10.0.0.1"):
    request = Mock()
    request.headers = headers or {}
    request.client = Mock(host=host) if host else None
    return request


class TestSecureErrorHandler:
    """Test cases for error response sanitizing."""

    def test_filters_sensitive_messages(self, handler):
        """Test messages mentioning internals are replaced."""
        assert handler._filter_sensitive_info("sqlite error near SELECT") == "Error details filtered for security"
        assert handler._filter_sensitive_info("bad JWT token") == "Error details filtered for security"

    def test_strips_paths_and_lines(self, handler):
        """Test file paths and line numbers are masked."""
        message = handler._filter_sensitive_info("failed in /srv/app/calc.py at line 42")
        assert message == "failed in [file path] at [line number]"

    @pytest.mark.parametrize("error_type, expected", [
        ("missing", "This field is required"),
        ("string_too_short", "Invalid length"),
        ("enum", "Invalid option selected"),
        ("dict_type", "Invalid data type"),
        ("value_error", "Invalid value"),
    ])
    def test_validation_messages(self, handler, error_type, expected):
        """Test validation errors map to generic messages."""
        assert handler._get_safe_validation_message(error_type, "raw message") == expected

    def test_client_ip_forwarded(self, handler):
        """Test the first forwarded address wins."""
        request = make_request({"x-forwarded-for": "1.2.3.4, 5.6.7.8"})
        assert handler._get_client_ip(request) == "1.2.3.4"

    def test_client_ip_real_ip(self, handler):
        """Test the real ip header."""
        assert handler._get_client_ip(make_request({"x-real-ip": "9.9.9.9"})) == "9.9.9.9"

    def test_client_ip_fallbacks(self, handler):
        """Test the socket address and the unknown fallback."""
        assert handler._get_client_ip(make_request()) == "10.0.0.1"
        assert handler._get_client_ip(make_request(host=None)) == "unknown"

    async def test_internal_error_is_opaque(self, handler):
        """Test internal errors never expose the exception."""
        request = make_request()
        request.method = "GET"
        request.url.path = "/api/calculators"

        response = await handler.handle_internal_error(request, RuntimeError("secret detail"))

        assert response.status_code == 500
        assert b"secret detail" not in response.body
        assert b"internal_error" in response.body
