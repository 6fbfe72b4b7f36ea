"""
Tests for SDP envelope decoding and status code classification
"""
import json

import pytest

from sdp_bridge.errors import (
    AuthenticationError,
    ErrorCategory,
    MalformedResponseError,
    NotFoundError,
    RemoteError,
    RemoteValidationError,
)
from sdp_bridge.models.ticket import TicketListPayload, TicketPayload
from sdp_bridge.services.envelope import classify_error_body, decode
from tests.conftest import envelope


def body(**kwargs) -> str:
    return json.dumps(envelope(**kwargs))


class TestDecodeSuccess:
    """Test decoding of success envelopes"""

    def test_ticket(self, sample_ticket):
        payload = decode(body(payload={"request": sample_ticket}), TicketPayload)

        assert payload.request.id == "12345"
        assert payload.request.display_status() == "Open"
        assert payload.request.category_path() == "Network > VPN"

    def test_list_with_status_as_list(self, sample_ticket_list):
        raw = dict(sample_ticket_list)
        raw["response_status"] = [{"status_code": 2000, "status": "success"}]

        payload = decode(json.dumps(raw), TicketListPayload)

        assert [t.id for t in payload.requests] == ["101", "102"]
        assert payload.requests[1].display_subject() == "(No subject)"
        assert payload.list_info.has_more_rows is True

    def test_unknown_fields_ignored(self, sample_ticket):
        sample_ticket["udf_fields"] = {"udf_sline_1": "x"}
        payload = decode(body(payload={"request": sample_ticket}), TicketPayload)
        assert payload.request.subject == "VPN drops every 10 minutes"


class TestDecodeFailureCodes:
    """Test the status code table"""

    def test_auth(self):
        with pytest.raises(AuthenticationError):
            decode(body(status_code=4001, messages=[{"message": "Invalid authtoken"}]), TicketPayload)

    @pytest.mark.parametrize("code", [4005, 4007])
    def test_not_found(self, code):
        with pytest.raises(NotFoundError):
            decode(body(status_code=code), TicketPayload)

    def test_generic_failure_uses_message_code(self):
        raw = body(status_code=4000, messages=[{"status_code": 4007, "message": "Invalid URL"}])
        with pytest.raises(NotFoundError):
            decode(raw, TicketPayload)

    def test_validation_with_fields(self):
        raw = body(status_code=4000, messages=[
            {"status_code": 4012, "message": "Value is not valid", "field": "priority"},
        ])
        with pytest.raises(RemoteValidationError) as exc_info:
            decode(raw, TicketPayload)

        assert exc_info.value.category == ErrorCategory.VALIDATION
        assert exc_info.value.field_errors == [{"field": "priority", "message": "Value is not valid"}]

    def test_unknown_code_is_remote_error(self):
        raw = body(status_code=4999, messages=[{"message": "Something odd"}])
        with pytest.raises(RemoteError) as exc_info:
            decode(raw, TicketPayload)

        assert exc_info.value.code == 4999
        assert "Something odd" in str(exc_info.value)

    def test_unknown_code_never_success(self):
        """A code outside the success range never yields a payload"""
        with pytest.raises(RemoteError):
            decode(body(status_code=3001, payload={"request": {"id": "1"}}), TicketPayload)

    def test_long_message_kept_whole(self):
        raw = body(status_code=4999, messages=[{"message": "x" * 2000}])
        with pytest.raises(RemoteError) as exc_info:
            decode(raw, TicketPayload)
        assert exc_info.value.remote_message == "x" * 2000


class TestMalformed:
    """Test bodies that cannot be decoded"""

    @pytest.mark.parametrize("raw", [
        "<html>gateway</html>",
        "",
        "[1, 2]",
        json.dumps({"request": {"id": "1"}}),
        json.dumps({"response_status": {"status": "success"}}),
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedResponseError):
            decode(raw, TicketPayload)

    def test_payload_shape_mismatch(self):
        with pytest.raises(MalformedResponseError, match="TicketPayload"):
            decode(body(payload={"request": {"subject": "no id"}}), TicketPayload)


class TestClassifyErrorBody:
    def test_failed_envelope(self):
        assert isinstance(classify_error_body(body(status_code=4001)), AuthenticationError)

    def test_not_an_envelope(self):
        assert classify_error_body("Bad Request") is None

    def test_success_envelope(self):
        assert classify_error_body(body()) is None
