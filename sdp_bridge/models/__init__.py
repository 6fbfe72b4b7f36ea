"""
Data models
"""
from sdp_bridge.models.common import (
    ListInfoResponse,
    NamedEntity,
    ResponseMessage,
    ResponseStatus,
    SdpTimestamp,
    SearchCriterion,
)
from sdp_bridge.models.conversation import Conversation, ConversationsPayload
from sdp_bridge.models.note import Note, NotePayload, NotesPayload
from sdp_bridge.models.technician import Technician, TechniciansPayload
from sdp_bridge.models.ticket import (
    ClosureInfo,
    Resolution,
    Ticket,
    TicketListPayload,
    TicketPayload,
    TicketSummary,
)

__all__ = [
    "ListInfoResponse",
    "NamedEntity",
    "ResponseMessage",
    "ResponseStatus",
    "SdpTimestamp",
    "SearchCriterion",
    "Conversation",
    "ConversationsPayload",
    "Note",
    "NotePayload",
    "NotesPayload",
    "Technician",
    "TechniciansPayload",
    "ClosureInfo",
    "Resolution",
    "Ticket",
    "TicketListPayload",
    "TicketPayload",
    "TicketSummary",
]
