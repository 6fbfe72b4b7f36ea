"""
Conversation (ticket history) data models
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, Field

from sdp_bridge.models.common import NamedEntity, SdpModel, SdpTimestamp


class Conversation(SdpModel):
    """
    Email exchange or notification recorded against a ticket.

    SDP often omits the body from list responses and provides a
    content_url instead; see SdpClient.list_conversations_with_content.
    """
    id: str
    description: Optional[str] = Field(
        None, validation_alias=AliasChoices("description", "content", "body")
    )
    from_user: Optional[NamedEntity] = Field(
        None, validation_alias=AliasChoices("from", "from_user")
    )
    to: Optional[List[Any]] = None
    sent_time: Optional[SdpTimestamp] = Field(
        None, validation_alias=AliasChoices("sent_time", "created_time", "created_date")
    )
    conversation_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("type", "conversation_type")
    )
    is_incoming: Optional[bool] = None
    subject: Optional[str] = None
    content_url: Optional[str] = None
    has_attachments: Optional[bool] = None
    show_to_requester: Optional[bool] = None

    def display_content(self) -> str:
        if self.description:
            return self.description
        if self.content_url:
            return "(Content could not be fetched)"
        if self.subject:
            return f"[Subject: {self.subject}]"
        return "(No content)"

    def display_from(self) -> str:
        if self.from_user and self.from_user.name:
            return self.from_user.name
        return "Unknown"


class ConversationsPayload(SdpModel):
    conversations: List[Conversation] = Field(default_factory=list)
