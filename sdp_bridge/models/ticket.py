"""
Ticket data models
"""
from typing import List, Optional

from pydantic import Field

from sdp_bridge.models.common import ListInfoResponse, NamedEntity, SdpModel, SdpTimestamp
from sdp_bridge.models.conversation import Conversation
from sdp_bridge.models.note import Note


def _name(entity: Optional[NamedEntity]) -> Optional[str]:
    return entity.name if entity else None


class TicketSummary(SdpModel):
    """Row returned by the list endpoint"""
    id: str
    subject: Optional[str] = None
    status: Optional[NamedEntity] = None
    priority: Optional[NamedEntity] = None
    technician: Optional[NamedEntity] = None
    requester: Optional[NamedEntity] = None
    group: Optional[NamedEntity] = None
    category: Optional[NamedEntity] = None
    subcategory: Optional[NamedEntity] = None
    site: Optional[NamedEntity] = None
    request_type: Optional[NamedEntity] = None
    created_time: Optional[SdpTimestamp] = None
    last_updated_time: Optional[SdpTimestamp] = None
    due_by_time: Optional[SdpTimestamp] = None

    def display_subject(self) -> str:
        return self.subject or "(No subject)"

    def display_status(self) -> str:
        return _name(self.status) or "Unknown"

    def display_priority(self) -> str:
        return _name(self.priority) or "Unknown"

    def display_technician(self) -> str:
        return _name(self.technician) or "Unassigned"

    def display_requester(self) -> str:
        return _name(self.requester) or "Unknown"

    def display_group(self) -> Optional[str]:
        return _name(self.group)


class Resolution(SdpModel):
    content: Optional[str] = None
    submitted_by: Optional[NamedEntity] = None
    submitted_on: Optional[SdpTimestamp] = None


class ClosureInfo(SdpModel):
    closure_code: Optional[NamedEntity] = None
    closure_comments: Optional[str] = None
    closed_by: Optional[NamedEntity] = None
    closed_time: Optional[SdpTimestamp] = None


class Ticket(TicketSummary):
    """
    Full ticket as returned by the detail endpoint.

    description and resolution content are HTML from SDP and are only
    ever displayed. notes and history are attached by the client after
    the ticket itself has been decoded.
    """
    description: Optional[str] = None
    urgency: Optional[NamedEntity] = None
    impact: Optional[NamedEntity] = None
    item: Optional[NamedEntity] = None
    level: Optional[NamedEntity] = None
    mode: Optional[NamedEntity] = None
    service: Optional[NamedEntity] = None
    approval_status: Optional[NamedEntity] = None
    first_response_due_by_time: Optional[SdpTimestamp] = None
    resolution_due_by_time: Optional[SdpTimestamp] = None
    completed_time: Optional[SdpTimestamp] = None
    resolution: Optional[Resolution] = None
    closure_info: Optional[ClosureInfo] = None
    is_overdue: Optional[bool] = None
    is_fcr: Optional[bool] = None
    has_attachments: Optional[bool] = None
    has_notes: Optional[bool] = None
    email_ids_to_notify: Optional[List[str]] = None
    notes: List[Note] = Field(default_factory=list)
    history: List[Conversation] = Field(default_factory=list)

    def category_path(self) -> str:
        """Category > Subcategory > Item, or Uncategorized"""
        parts = [
            name for name in (
                _name(self.category),
                _name(self.subcategory),
                _name(self.item),
            ) if name
        ]
        return " > ".join(parts) if parts else "Uncategorized"


class TicketPayload(SdpModel):
    request: Ticket


class TicketListPayload(SdpModel):
    requests: List[TicketSummary] = Field(default_factory=list)
    list_info: Optional[ListInfoResponse] = None
