"""
Tests for tool result rendering
"""
from sdp_bridge.models.inputs import AssignRequestInput
from sdp_bridge.models.note import Note
from sdp_bridge.models.technician import Technician
from sdp_bridge.models.ticket import Ticket, TicketListPayload
from sdp_bridge.tools.formatting import (
    DISPLAY_TRUNCATION_MARKER,
    format_add_note_result,
    format_assign_result,
    format_close_result,
    format_error,
    format_technician_list,
    format_ticket_details,
    format_ticket_list,
    truncate_text,
)


class TestTruncateText:
    """Test display truncation"""

    def test_short_text_untouched(self):
        assert truncate_text("hello world", 50) == "hello world"

    def test_cuts_on_word_boundary(self):
        result = truncate_text("alpha beta gamma delta epsilon", 25)
        assert result == "alpha" + DISPLAY_TRUNCATION_MARKER
        assert len(result) <= 25

    def test_no_space_hard_cut(self):
        result = truncate_text("x" * 3000)
        assert len(result) == 2000
        assert result.endswith(DISPLAY_TRUNCATION_MARKER)


class TestTicketRendering:
    """Test ticket list and detail blocks"""

    def test_empty_list(self):
        assert format_ticket_list(TicketListPayload()) == "No tickets found matching the criteria."

    def test_list(self, sample_ticket_list):
        text = format_ticket_list(TicketListPayload.model_validate(sample_ticket_list), offset=10)

        assert "Found 2 ticket(s):" in text
        assert "Requester: Ana Diaz" in text
        assert "Assignee: Unassigned" in text
        assert "use offset=12" in text

    def test_details(self, sample_ticket):
        ticket = Ticket.model_validate(sample_ticket).model_copy(update={
            "notes": [Note(id="1", description="Checked logs", created_by={"name": "Dana Lee"})],
        })

        text = format_ticket_details(ticket, "https://sdp.example.com/WorkOrder.do?woMode=viewWO&woID=12345")

        assert text.startswith("Ticket #12345: VPN drops every 10 minutes")
        assert "Status: Open" in text
        assert "Priority: High" in text
        assert "Category: Network > VPN" in text
        assert "Created: Nov 14, 2023 10:13 PM" in text
        assert "--- Notes (1) ---" in text
        assert "[Internal] Note #1 by Dana Lee" in text
        assert "View in ServiceDesk Plus: https://sdp.example.com/WorkOrder.do" in text

    def test_details_long_description_truncated(self, sample_ticket):
        sample_ticket["description"] = "word " * 1000
        text = format_ticket_details(Ticket.model_validate(sample_ticket))
        assert DISPLAY_TRUNCATION_MARKER in text

    def test_minimal_ticket(self):
        text = format_ticket_details(Ticket(id="7"))
        assert "Ticket #7: (No subject)" in text
        assert "Status: Unknown" in text
        assert "Assigned to: Unassigned" in text


class TestOtherRendering:
    def test_technicians(self):
        techs = [
            Technician(id="1", name="Dana Lee", email_id="dana@example.com", groups=[{"name": "Network"}]),
            Technician(id="2", email_id="kim@example.com", is_active=False),
        ]
        text = format_technician_list(techs)

        assert "ID: 1 | Name: Dana Lee | Email: dana@example.com | Groups: Network" in text
        assert "ID: 2 | Name: kim@example.com" in text
        assert "[INACTIVE]" in text

    def test_no_technicians(self):
        assert format_technician_list([]) == "No technicians found."

    def test_close(self, sample_ticket):
        sample_ticket["status"] = {"name": "Closed"}
        sample_ticket["closure_info"] = {"closure_code": {"name": "Success"}, "closure_comments": "Fixed"}

        text = format_close_result(Ticket.model_validate(sample_ticket))

        assert "Successfully closed ticket #12345" in text
        assert "Closure Code: Success" in text

    def test_public_note(self):
        text = format_add_note_result("12345", Note(id="4", show_to_requester=True))
        assert "Visible to requester" in text

    def test_assign(self, sample_ticket):
        data = AssignRequestInput(request_id="12345", technician_id="301")
        text = format_assign_result(Ticket.model_validate(sample_ticket), data)
        assert "Technician: Dana Lee" in text
        assert "Group:" not in text

    def test_error(self):
        assert format_error("NotFound", "get request 1", "request not found: 1") == (
            "Error [NotFound]: Failed to get request 1: request not found: 1"
        )
