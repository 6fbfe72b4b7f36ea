"""
Note data models
"""
from typing import List, Optional

from pydantic import Field

from sdp_bridge.models.common import NamedEntity, SdpModel, SdpTimestamp


class Note(SdpModel):
    """
    Note attached to a ticket.

    The description is HTML supplied by SDP; it is shown to the caller
    as text and never interpreted.
    """
    id: str
    description: Optional[str] = None
    created_by: Optional[NamedEntity] = None
    created_time: Optional[SdpTimestamp] = None
    show_to_requester: Optional[bool] = None
    notify_technician: Optional[bool] = None

    def display_content(self) -> str:
        return self.description or "(No content)"

    def display_created_by(self) -> str:
        if self.created_by and self.created_by.name:
            return self.created_by.name
        return "Unknown"

    def is_internal(self) -> bool:
        return self.show_to_requester is not True


class NotePayload(SdpModel):
    note: Note


class NotesPayload(SdpModel):
    notes: List[Note] = Field(default_factory=list)
