"""
Tool input models

One model per tool. These handle shape only (types, required keys,
whitespace); value constraints are enforced by the operation client.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from sdp_bridge.utils.validators import sanitize_input


class ToolInput(BaseModel):
    """
    Base for tool inputs.

    Strings are stripped of NUL bytes and surrounding whitespace; a blank
    optional string counts as absent. Unknown keys are rejected.
    """
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def clean_strings(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, str):
            return v
        cleaned = sanitize_input(v)
        field = cls.model_fields.get(info.field_name)
        if cleaned == "" and field is not None and not field.is_required():
            return None
        return cleaned


class PingInput(ToolInput):
    pass


class ListRequestsInput(ToolInput):
    status: Optional[str] = Field(None, description="Filter by ticket status (e.g. 'Open', 'On Hold')")
    priority: Optional[str] = Field(None, description="Filter by priority (e.g. 'Low', 'High')")
    technician: Optional[str] = Field(None, description="Filter by assigned technician name")
    requester: Optional[str] = Field(None, description="Filter by requester name")
    subject_contains: Optional[str] = Field(None, description="Only tickets whose subject contains this text")
    open_only: Optional[bool] = Field(None, description="Exclude closed, cancelled and resolved tickets")
    created_after: Optional[str] = Field(None, description="Created after this date (YYYY-MM-DD)")
    created_before: Optional[str] = Field(None, description="Created before this date (YYYY-MM-DD)")
    limit: Optional[int] = Field(None, description="Maximum tickets to return (1-100, default 20)")
    offset: Optional[int] = Field(None, description="Tickets to skip, 0-based (default 0)")
    sort_field: Optional[str] = Field(None, description="Sort by: created_time, last_updated_time, due_by_time, subject, id, priority.name, status.name")
    sort_order: Optional[str] = Field(None, description="asc or desc (default desc); requires sort_field")


class GetRequestInput(ToolInput):
    request_id: str = Field(..., description="Numeric ID of the ticket")


class ListTechniciansInput(ToolInput):
    group: Optional[str] = Field(None, description="Only technicians in this support group")
    limit: Optional[int] = Field(None, description="Maximum technicians to return (1-100, default 50)")


class CreateRequestInput(ToolInput):
    subject: str = Field(..., description="Ticket subject (max 250 characters)")
    description: Optional[str] = Field(None, description="Detailed description (HTML allowed)")
    requester_email: Optional[str] = Field(None, description="Email of the person reporting the issue")
    priority: Optional[str] = Field(None, description="Priority name, e.g. 'Low', 'Medium', 'High'")
    category: Optional[str] = None
    subcategory: Optional[str] = None
    item: Optional[str] = None
    group: Optional[str] = Field(None, description="Support group to assign")
    technician_id: Optional[str] = Field(None, description="Technician ID (see list_technicians)")


class UpdateRequestInput(ToolInput):
    request_id: str = Field(..., description="Numeric ID of the ticket to update")
    subject: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    item: Optional[str] = None
    group: Optional[str] = None
    technician_id: Optional[str] = None

    def has_updates(self) -> bool:
        return any(
            value is not None
            for name, value in self
            if name != "request_id"
        )


class CloseRequestInput(ToolInput):
    request_id: str = Field(..., description="Numeric ID of the ticket to close")
    closure_code: Optional[str] = Field(None, description="Closure reason, e.g. 'Success', 'Cancelled'")
    closure_comments: Optional[str] = Field(None, description="How the issue was resolved or why it is closed")

    def has_updates(self) -> bool:
        return self.closure_code is not None or self.closure_comments is not None


class AddNoteInput(ToolInput):
    request_id: str = Field(..., description="Numeric ID of the ticket")
    content: str = Field(..., description="Note content (HTML allowed)")
    show_to_requester: Optional[bool] = Field(None, description="Visible to the requester (default: internal)")
    notify_technician: Optional[bool] = Field(None, description="Notify the assigned technician")


class AssignRequestInput(ToolInput):
    request_id: str = Field(..., description="Numeric ID of the ticket")
    technician_id: Optional[str] = Field(None, description="Technician ID (see list_technicians)")
    group: Optional[str] = Field(None, description="Support group name")

    def has_updates(self) -> bool:
        return self.technician_id is not None or self.group is not None
