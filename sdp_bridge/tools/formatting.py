"""
Text rendering for tool results

Turns decoded SDP records into the plain-text blocks returned to the
agent. HTML from SDP is passed through as text; long bodies are cut on a
word boundary.
"""
from typing import List, Optional

from sdp_bridge.models.conversation import Conversation
from sdp_bridge.models.inputs import AssignRequestInput
from sdp_bridge.models.note import Note
from sdp_bridge.models.technician import Technician
from sdp_bridge.models.ticket import Ticket, TicketListPayload

MAX_DISPLAY_LENGTH = 2000
DISPLAY_TRUNCATION_MARKER = "... [truncated]"
RULE = "=" * 60


def truncate_text(text: str, max_length: int = MAX_DISPLAY_LENGTH) -> str:
    """
    Shorten text for display, preferring a word boundary

    The result, marker included, is never longer than max_length.
    """
    if len(text) <= max_length:
        return text
    end = max(max_length - len(DISPLAY_TRUNCATION_MARKER), 0)
    space = max(text.rfind(" ", 0, end), text.rfind("\n", 0, end))
    if space > 0:
        end = space
    return f"{text[:end]}{DISPLAY_TRUNCATION_MARKER}"


def _when(timestamp) -> Optional[str]:
    return timestamp.display() if timestamp else None


def format_ticket_list(page: TicketListPayload, offset: int = 0) -> str:
    tickets = page.requests
    if not tickets:
        return "No tickets found matching the criteria."

    lines = [f"Found {len(tickets)} ticket(s):", ""]
    for ticket in tickets:
        lines.append(f"#{ticket.id} - {ticket.display_subject()}")
        lines.append(
            f"   Status: {ticket.display_status()} | Priority: {ticket.display_priority()}"
            f" | Assignee: {ticket.display_technician()}"
        )
        lines.append(f"   Requester: {ticket.display_requester()}")
        created = _when(ticket.created_time)
        if created:
            lines.append(f"   Created: {created}")
        lines.append("")

    info = page.list_info
    if info is not None:
        if info.total_count is not None:
            lines.append(f"Total matching: {info.total_count}")
        if info.has_more_rows:
            lines.append(f"More results available: use offset={offset + len(tickets)}")
    return "\n".join(lines).rstrip() + "\n"


def _format_note(note: Note) -> List[str]:
    visibility = "Internal" if note.is_internal() else "Public"
    header = f"[{visibility}] Note #{note.id} by {note.display_created_by()}"
    created = _when(note.created_time)
    if created:
        header += f" at {created}"
    return [header, truncate_text(note.display_content()), ""]


def _format_history_entry(entry: Conversation) -> List[str]:
    header = f"#{entry.id} {entry.conversation_type or 'Message'} from {entry.display_from()}"
    sent = _when(entry.sent_time)
    if sent:
        header += f" at {sent}"
    lines = [header]
    if entry.subject:
        lines.append(f"Subject: {entry.subject}")
    lines.append(truncate_text(entry.display_content()))
    lines.append("")
    return lines


def format_ticket_details(ticket: Ticket, web_url: Optional[str] = None) -> str:
    lines = [f"Ticket #{ticket.id}: {ticket.display_subject()}", RULE, ""]

    lines.append(f"Status: {ticket.display_status()}")
    lines.append(f"Priority: {ticket.display_priority()}")
    if ticket.urgency and ticket.urgency.name:
        lines.append(f"Urgency: {ticket.urgency.name}")
    if ticket.impact and ticket.impact.name:
        lines.append(f"Impact: {ticket.impact.name}")
    category_path = ticket.category_path()
    if category_path != "Uncategorized":
        lines.append(f"Category: {category_path}")

    lines.append("")
    lines.append(f"Requester: {ticket.display_requester()}")
    lines.append(f"Assigned to: {ticket.display_technician()}")
    if ticket.display_group():
        lines.append(f"Group: {ticket.display_group()}")

    lines.append("")
    lines.append("--- Timestamps ---")
    for label, timestamp in (
        ("Created", ticket.created_time),
        ("Last Updated", ticket.last_updated_time),
        ("Due By", ticket.due_by_time),
    ):
        value = _when(timestamp)
        if value:
            lines.append(f"{label}: {value}")

    if ticket.is_overdue:
        lines.extend(["", "[OVERDUE]"])

    if ticket.description:
        lines.extend(["", "--- Description ---", truncate_text(ticket.description)])

    resolution = ticket.resolution
    if resolution and resolution.content:
        lines.extend(["", "--- Resolution ---", truncate_text(resolution.content)])
        if resolution.submitted_by and resolution.submitted_by.name:
            lines.append(f"Submitted by: {resolution.submitted_by.name}")
        submitted_on = _when(resolution.submitted_on)
        if submitted_on:
            lines.append(f"Submitted on: {submitted_on}")

    closure = ticket.closure_info
    if closure:
        lines.extend(["", "--- Closure Info ---"])
        if closure.closure_code and closure.closure_code.name:
            lines.append(f"Closure Code: {closure.closure_code.name}")
        if closure.closure_comments:
            lines.append(f"Comments: {closure.closure_comments}")
        if closure.closed_by and closure.closed_by.name:
            lines.append(f"Closed by: {closure.closed_by.name}")
        closed_time = _when(closure.closed_time)
        if closed_time:
            lines.append(f"Closed at: {closed_time}")

    if ticket.notes:
        lines.extend(["", f"--- Notes ({len(ticket.notes)}) ---"])
        for note in ticket.notes:
            lines.extend(_format_note(note))

    if ticket.history:
        lines.extend(["", f"--- History ({len(ticket.history)}) ---"])
        for entry in ticket.history:
            lines.extend(_format_history_entry(entry))

    if web_url:
        lines.extend(["", f"View in ServiceDesk Plus: {web_url}"])

    return "\n".join(lines).rstrip() + "\n"


def format_technician_list(technicians: List[Technician]) -> str:
    if not technicians:
        return "No technicians found."

    lines = [f"Found {len(technicians)} technician(s):", ""]
    for tech in technicians:
        line = f"ID: {tech.id} | Name: {tech.display_name()}"
        if tech.email_id:
            line += f" | Email: {tech.email_id}"
        if tech.groups:
            line += f" | Groups: {', '.join(g.display_name() for g in tech.groups)}"
        if tech.is_active is False:
            line += " [INACTIVE]"
        lines.append(line)
    return "\n".join(lines) + "\n"


def format_create_result(ticket: Ticket, web_url: Optional[str] = None) -> str:
    lines = [f"Successfully created ticket #{ticket.id}: {ticket.display_subject()}", ""]
    lines.append(f"Status: {ticket.display_status()}")
    lines.append(f"Priority: {ticket.display_priority()}")
    lines.append(f"Assigned to: {ticket.display_technician()}")
    if ticket.display_group():
        lines.append(f"Group: {ticket.display_group()}")
    lines.append("")
    lines.append(f"Requester: {ticket.display_requester()}")
    created = _when(ticket.created_time)
    if created:
        lines.append(f"Created: {created}")
    if web_url:
        lines.append(f"View: {web_url}")
    lines.extend([
        "",
        "Next steps:",
        f"  - View details: use get_request with request_id=\"{ticket.id}\"",
        f"  - Add notes: use add_note with request_id=\"{ticket.id}\"",
    ])
    return "\n".join(lines) + "\n"


def format_update_result(ticket: Ticket) -> str:
    lines = [f"Successfully updated ticket #{ticket.id}: {ticket.display_subject()}", ""]
    lines.append("Current state:")
    lines.append(f"  Status: {ticket.display_status()}")
    lines.append(f"  Priority: {ticket.display_priority()}")
    lines.append(f"  Assigned to: {ticket.display_technician()}")
    if ticket.display_group():
        lines.append(f"  Group: {ticket.display_group()}")
    category_path = ticket.category_path()
    if category_path != "Uncategorized":
        lines.append(f"  Category: {category_path}")
    updated = _when(ticket.last_updated_time)
    if updated:
        lines.extend(["", f"Last updated: {updated}"])
    return "\n".join(lines) + "\n"


def format_close_result(ticket: Ticket) -> str:
    lines = [f"Successfully closed ticket #{ticket.id}: {ticket.display_subject()}", ""]
    lines.append(f"Status: {ticket.display_status()}")
    closure = ticket.closure_info
    if closure:
        if closure.closure_code and closure.closure_code.name:
            lines.append(f"Closure Code: {closure.closure_code.name}")
        if closure.closure_comments:
            lines.append(f"Closure Comments: {closure.closure_comments}")
        closed_time = _when(closure.closed_time)
        if closed_time:
            lines.append(f"Closed at: {closed_time}")
    return "\n".join(lines) + "\n"


def format_add_note_result(request_id: str, note: Note) -> str:
    lines = [f"Successfully added note #{note.id} to ticket #{request_id}.", ""]
    if note.is_internal():
        lines.append("Visibility: Internal (technicians only)")
    else:
        lines.append("Visibility: Visible to requester")
    created = _when(note.created_time)
    if created:
        lines.append(f"Created: {created}")
    if note.notify_technician:
        lines.append("Technician notification: Sent")
    return "\n".join(lines) + "\n"


def format_assign_result(ticket: Ticket, data: AssignRequestInput) -> str:
    lines = [f"Successfully assigned ticket #{ticket.id}: {ticket.display_subject()}", ""]
    if data.technician_id is not None:
        lines.append(f"Technician: {ticket.display_technician()}")
    if data.group is not None and ticket.display_group():
        lines.append(f"Group: {ticket.display_group()}")
    updated = _when(ticket.last_updated_time)
    if updated:
        lines.extend(["", f"Updated: {updated}"])
    return "\n".join(lines) + "\n"


def format_error(category: str, action: str, message: str) -> str:
    return f"Error [{category}]: Failed to {action}: {message}"
