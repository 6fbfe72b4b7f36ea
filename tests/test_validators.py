"""
Tests for input validators
"""
import pytest
from datetime import datetime, timezone

from sdp_bridge.errors import ErrorCategory, InvalidInputError, UntrustedLocationError
from sdp_bridge.utils.validators import (
    MAX_ID_DIGITS,
    MAX_SUBJECT_LENGTH,
    encode_path_segment,
    sanitize_input,
    validate_choice,
    validate_content_url,
    validate_date,
    validate_email,
    validate_id,
    validate_range,
    validate_requester_email,
    validate_text,
)

BASE = "https://sdp.example.com"


class TestValidateId:
    """Test numeric identifier validation"""

    @pytest.mark.parametrize("value", ["0", "1", "12345", "9" * MAX_ID_DIGITS])
    def test_digit_strings_accepted(self, value):
        assert validate_id(value, "request_id") == value

    @pytest.mark.parametrize("value", [
        "12/34",
        "123?x=1",
        "12.5",
        "1 2",
        " 123",
        "123\n",
        "../1",
        "-1",
        "abc",
        "１２３",
        "²",
    ])
    def test_non_digits_rejected(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_id(value, "request_id")

        assert exc_info.value.category == ErrorCategory.INVALID_INPUT
        assert exc_info.value.field == "request_id"

    def test_empty_rejected(self):
        with pytest.raises(InvalidInputError, match="request_id: is required"):
            validate_id("", "request_id")

    def test_too_many_digits_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_id("9" * (MAX_ID_DIGITS + 1), "request_id")


class TestValidateText:
    """Test bounded string validation"""

    def test_exactly_at_ceiling(self):
        value = "x" * MAX_SUBJECT_LENGTH
        assert validate_text(value, "subject", MAX_SUBJECT_LENGTH) == value

    def test_one_over_ceiling(self):
        with pytest.raises(InvalidInputError, match="subject: exceeds maximum length"):
            validate_text("x" * (MAX_SUBJECT_LENGTH + 1), "subject", MAX_SUBJECT_LENGTH)

    def test_optional_absent(self):
        assert validate_text(None, "group") is None
        assert validate_text("", "group") is None

    def test_required_absent(self):
        with pytest.raises(InvalidInputError):
            validate_text("", "subject", required=True)


class TestSmallValidators:
    """Test email, choice, range and date checks"""

    def test_email(self):
        assert validate_email("sam.ortiz@example.com")
        assert not validate_email("not-an-email")

    def test_requester_email(self):
        assert validate_requester_email(None) is None
        with pytest.raises(InvalidInputError, match="requester_email"):
            validate_requester_email("sam@")

    def test_choice(self):
        assert validate_choice("asc", "sort_order", ("asc", "desc")) == "asc"
        with pytest.raises(InvalidInputError, match="must be one of"):
            validate_choice("sideways", "sort_order", ("asc", "desc"))

    def test_range_bounds(self):
        assert validate_range(1, "limit", 1, 100) == 1
        assert validate_range(100, "limit", 1, 100) == 100
        with pytest.raises(InvalidInputError):
            validate_range(0, "limit", 1, 100)
        with pytest.raises(InvalidInputError):
            validate_range(101, "limit", 1, 100)

    def test_date(self):
        assert validate_date("2024-03-01", "created_after") == datetime(2024, 3, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["2024-3-1", "01/03/2024", "2024-02-30", "yesterday"])
    def test_bad_dates(self, value):
        with pytest.raises(InvalidInputError):
            validate_date(value, "created_after")


class TestValidateContentUrl:
    """Test host validation of remote-supplied content URLs"""

    def test_relative_path_resolved(self):
        url = validate_content_url("/api/v3/requests/1/conversations/7/content", BASE)
        assert url == "https://sdp.example.com/api/v3/requests/1/conversations/7/content"

    def test_same_host_absolute(self):
        url = "https://sdp.example.com/api/v3/notifications/9"
        assert validate_content_url(url, BASE) == url

    def test_explicit_default_port_matches(self):
        assert validate_content_url("https://sdp.example.com:443/x", BASE)

    @pytest.mark.parametrize("url", [
        "https://evil.example.org/steal",
        "https://sdp.example.com:8443/x",
        "https://sdp.example.com.evil.org/x",
        "https://evil-sdp.example.com/x",
        "http://sdp.example.com/x",
        "//evil.example.org/x",
    ])
    def test_foreign_locations_rejected(self, url):
        with pytest.raises(UntrustedLocationError) as exc_info:
            validate_content_url(url, BASE)

        assert exc_info.value.category == ErrorCategory.UNTRUSTED_LOCATION

    def test_base_with_port(self):
        base = "https://sdp.internal:8080"
        assert validate_content_url("/x", base) == "https://sdp.internal:8080/x"
        with pytest.raises(UntrustedLocationError):
            validate_content_url("https://sdp.internal/x", base)


class TestHelpers:
    def test_encode_path_segment(self):
        assert encode_path_segment("12/3?a") == "12%2F3%3Fa"

    def test_sanitize_input(self):
        assert sanitize_input("  hello\x00 world \n") == "hello world"
