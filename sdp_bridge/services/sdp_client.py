"""
ServiceDesk Plus API Client

Provides one method per ticketing operation:
- Ticket listing, detail (with notes and history), create, update, close
- Notes (list, fetch, add) and conversation content
- Technician listing and ticket assignment
- Connectivity check

Every method validates caller-supplied values before any network call,
then delegates to the Transport (retries) and the envelope decoder.
"""
import json
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, SecretStr

from sdp_bridge.config import Settings
from sdp_bridge.errors import BridgeError, InvalidInputError, NotFoundError
from sdp_bridge.models.conversation import Conversation, ConversationsPayload
from sdp_bridge.models.inputs import (
    AddNoteInput,
    AssignRequestInput,
    CloseRequestInput,
    CreateRequestInput,
    UpdateRequestInput,
)
from sdp_bridge.models.note import Note, NotePayload, NotesPayload
from sdp_bridge.models.technician import Technician, TechniciansPayload
from sdp_bridge.models.ticket import Ticket, TicketListPayload, TicketPayload
from sdp_bridge.services.envelope import decode
from sdp_bridge.services.list_params import ListParams
from sdp_bridge.services.transport import Transport, web_base
from sdp_bridge.utils.logger import get_logger
from sdp_bridge.utils.validators import (
    MAX_DESCRIPTION_LENGTH,
    MAX_METADATA_LENGTH,
    MAX_NOTE_LENGTH,
    MAX_SUBJECT_LENGTH,
    encode_path_segment,
    validate_content_url,
    validate_id,
    validate_range,
    validate_requester_email,
    validate_text,
)

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_TECHNICIAN_LIMIT = 50
MAX_TECHNICIAN_LIMIT = 100

# Wrappers SDP uses around fetched content, tried in order
CONTENT_PATHS = (
    ("notification", "description"),
    ("notification", "content"),
    ("conversation", "description"),
    ("note", "description"),
    ("note", "content"),
)


def _named(value: str) -> Dict[str, str]:
    return {"name": value}


class SdpClient:
    """
    ServiceDesk Plus API integration with validation and error classification
    """

    def __init__(self, settings: Settings, transport: Optional[Transport] = None):
        self.settings = settings
        self.transport = transport or Transport(
            settings.sdp_base_url,
            settings.sdp_api_key,
            timeout=settings.sdp_timeout_seconds,
        )
        self.web_base_url = web_base(settings.sdp_base_url)

    @property
    def credential(self) -> SecretStr:
        """Credential, still wrapped; only the sanitizer should unwrap it"""
        return self.settings.sdp_api_key

    async def _call(
        self,
        method: str,
        path: str,
        model: Type[T],
        input_data: Optional[Dict[str, Any]] = None,
        resource: Optional[str] = None,
        identifier: Optional[str] = None,
    ) -> T:
        """
        Execute a request and decode its envelope

        A generic NotFound from the transport or the envelope is re-raised
        naming the resource and identifier that were asked for.
        """
        try:
            raw = await self.transport.execute(method, path, input_data)
            return decode(raw.text, model)
        except NotFoundError as e:
            if resource and e.identifier is None:
                raise NotFoundError(resource, identifier)
            raise

    # ========================================================================
    # Read operations
    # ========================================================================

    async def list_requests(self, params: ListParams) -> TicketListPayload:
        """
        List tickets with filtering and pagination

        Args:
            params: Filters, pagination and sort (validated here)

        Returns:
            Ticket summaries plus the pagination info SDP returned
        """
        params.validate()
        input_data = params.to_input_data(self.settings.sdp_list_start_index)
        logger.info(f"Listing tickets (limit={params.limit}, offset={params.offset})")
        return await self._call("GET", "/requests", TicketListPayload, input_data)

    async def get_request(
        self,
        request_id: str,
        include_notes: bool = True,
        include_history: bool = True
    ) -> Ticket:
        """
        Get ticket details by ID, with notes and conversation history

        Args:
            request_id: Numeric ticket ID
            include_notes: Attach notes (with content)
            include_history: Attach conversations (with content)

        Returns:
            Ticket record

        Raises:
            NotFoundError: If the ticket does not exist
        """
        validate_id(request_id, "request_id")
        logger.info(f"Fetching ticket {request_id}")
        payload = await self._call(
            "GET", f"/requests/{request_id}", TicketPayload,
            resource="request", identifier=request_id,
        )
        ticket = payload.request

        extra: Dict[str, Any] = {}
        if include_notes:
            try:
                extra["notes"] = await self.list_notes_with_content(request_id)
            except BridgeError as e:
                logger.warning(f"Failed to fetch notes for ticket {request_id}: {e}")
        if include_history:
            try:
                extra["history"] = await self.list_conversations_with_content(request_id)
            except BridgeError as e:
                logger.warning(f"Failed to fetch history for ticket {request_id}: {e}")

        return ticket.model_copy(update=extra) if extra else ticket

    async def list_notes(self, request_id: str) -> List[Note]:
        validate_id(request_id, "request_id")
        payload = await self._call(
            "GET", f"/requests/{request_id}/notes", NotesPayload,
            resource="request", identifier=request_id,
        )
        return payload.notes

    async def get_note(self, request_id: str, note_id: str) -> Note:
        validate_id(request_id, "request_id")
        validate_id(note_id, "note_id")
        payload = await self._call(
            "GET", f"/requests/{request_id}/notes/{note_id}", NotePayload,
            resource="note", identifier=f"{note_id} on request {request_id}",
        )
        return payload.note

    async def list_notes_with_content(self, request_id: str) -> List[Note]:
        """
        List notes, fetching each one whose list row lacks content

        The SDP list endpoint omits note bodies. A note that cannot be
        fetched individually is kept in its partial form.
        """
        notes = await self.list_notes(request_id)

        full_notes = []
        for note in notes:
            if note.description is not None:
                full_notes.append(note)
                continue
            try:
                full_notes.append(await self.get_note(request_id, note.id))
            except BridgeError as e:
                logger.warning(
                    f"Failed to fetch note {note.id} on ticket {request_id}, using partial note: {e}"
                )
                full_notes.append(note)

        logger.info(f"Fetched {len(full_notes)} notes for ticket {request_id}")
        return full_notes

    async def list_conversations(self, request_id: str) -> List[Conversation]:
        validate_id(request_id, "request_id")
        payload = await self._call(
            "GET", f"/requests/{request_id}/conversations", ConversationsPayload,
            resource="request", identifier=request_id,
        )
        return payload.conversations

    async def get_content_from_url(self, content_url: str) -> str:
        """
        Fetch the body behind a content_url returned by SDP

        Args:
            content_url: Server-relative path or absolute URL from SDP

        Returns:
            Extracted content (HTML), or the raw body if no known wrapper

        Raises:
            UntrustedLocationError: If the URL leaves the configured host
        """
        url = validate_content_url(content_url, self.web_base_url)
        raw = await self.transport.fetch(url)

        try:
            document = json.loads(raw.text)
        except ValueError:
            return raw.text

        if isinstance(document, dict):
            for wrapper, field in CONTENT_PATHS:
                section = document.get(wrapper)
                if isinstance(section, dict) and isinstance(section.get(field), str):
                    return section[field]
        return raw.text

    async def list_conversations_with_content(self, request_id: str) -> List[Conversation]:
        conversations = await self.list_conversations(request_id)

        populated = []
        for conversation in conversations:
            if conversation.description is None and conversation.content_url:
                try:
                    content = await self.get_content_from_url(conversation.content_url)
                    conversation = conversation.model_copy(update={"description": content})
                except BridgeError as e:
                    logger.warning(
                        f"Failed to fetch content for conversation {conversation.id}: {e}"
                    )
            populated.append(conversation)
        return populated

    async def list_technicians(
        self,
        group: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Technician]:
        """
        List technicians, optionally limited to one support group

        Args:
            group: Support group name to filter by
            limit: Maximum technicians to return (1-100, default 50)
        """
        validate_text(group, "group", MAX_METADATA_LENGTH)
        validate_range(limit, "limit", 1, MAX_TECHNICIAN_LIMIT)

        list_info: Dict[str, Any] = {"row_count": limit or DEFAULT_TECHNICIAN_LIMIT}
        if group:
            list_info["search_criteria"] = [
                {"field": "group.name", "condition": "is", "value": group}
            ]

        logger.info("Fetching technicians")
        payload = await self._call("GET", "/technicians", TechniciansPayload, {"list_info": list_info})
        return payload.technicians

    # ========================================================================
    # Write operations
    # ========================================================================

    async def create_request(self, data: CreateRequestInput) -> Ticket:
        """
        Create a new ticket

        Args:
            data: Subject (required) and optional classification/assignment

        Returns:
            The created ticket with its assigned ID
        """
        validate_text(data.subject, "subject", MAX_SUBJECT_LENGTH, required=True)
        validate_text(data.description, "description", MAX_DESCRIPTION_LENGTH)
        validate_requester_email(data.requester_email)
        for name in ("priority", "category", "subcategory", "item", "group"):
            validate_text(getattr(data, name), name, MAX_METADATA_LENGTH)
        if data.technician_id is not None:
            validate_id(data.technician_id, "technician_id")

        request: Dict[str, Any] = {"subject": data.subject}
        if data.description is not None:
            request["description"] = data.description
        if data.requester_email is not None:
            request["requester"] = {"email_id": data.requester_email}
        for name in ("priority", "category", "subcategory", "item", "group"):
            value = getattr(data, name)
            if value is not None:
                request[name] = _named(value)
        if data.technician_id is not None:
            request["technician"] = {"id": data.technician_id}

        logger.info("Creating ticket")
        payload = await self._call("POST", "/requests", TicketPayload, {"request": request})
        return payload.request

    async def update_request(self, data: UpdateRequestInput) -> Ticket:
        """
        Update ticket fields

        Only the provided fields are sent; SDP applies them to the stored
        ticket. At least one field besides request_id is required.
        """
        validate_id(data.request_id, "request_id")
        if not data.has_updates():
            raise InvalidInputError(
                "request_id",
                "at least one field must be provided for update (subject, description, "
                "priority, status, category, subcategory, item, group, or technician_id)"
            )
        if data.subject is not None:
            validate_text(data.subject, "subject", MAX_SUBJECT_LENGTH, required=True)
        validate_text(data.description, "description", MAX_DESCRIPTION_LENGTH)
        for name in ("priority", "status", "category", "subcategory", "item", "group"):
            validate_text(getattr(data, name), name, MAX_METADATA_LENGTH)
        if data.technician_id is not None:
            validate_id(data.technician_id, "technician_id")

        request: Dict[str, Any] = {}
        for name in ("subject", "description"):
            value = getattr(data, name)
            if value is not None:
                request[name] = value
        for name in ("priority", "status", "category", "subcategory", "item", "group"):
            value = getattr(data, name)
            if value is not None:
                request[name] = _named(value)
        if data.technician_id is not None:
            request["technician"] = {"id": data.technician_id}

        logger.info(f"Updating ticket {data.request_id} with {len(request)} fields")
        payload = await self._call(
            "PUT", f"/requests/{data.request_id}", TicketPayload, {"request": request},
            resource="request", identifier=data.request_id,
        )
        return payload.request

    async def close_request(self, data: CloseRequestInput) -> Ticket:
        """Close a ticket with a closure code and/or comments"""
        validate_id(data.request_id, "request_id")
        if not data.has_updates():
            raise InvalidInputError(
                "request_id", "closure_code or closure_comments must be provided to close a ticket"
            )
        validate_text(data.closure_code, "closure_code", MAX_METADATA_LENGTH)
        validate_text(data.closure_comments, "closure_comments", MAX_NOTE_LENGTH)

        closure_info: Dict[str, Any] = {}
        if data.closure_code is not None:
            closure_info["closure_code"] = _named(data.closure_code)
        if data.closure_comments is not None:
            closure_info["closure_comments"] = data.closure_comments

        logger.info(f"Closing ticket {data.request_id}")
        payload = await self._call(
            "PUT", f"/requests/{data.request_id}/close", TicketPayload,
            {"request": {"closure_info": closure_info}},
            resource="request", identifier=data.request_id,
        )
        return payload.request

    async def add_note(self, data: AddNoteInput) -> Note:
        """
        Add a note to a ticket

        Notes are internal (technicians only) unless show_to_requester is set.
        """
        validate_id(data.request_id, "request_id")
        validate_text(data.content, "content", MAX_NOTE_LENGTH, required=True)

        note: Dict[str, Any] = {"description": data.content}
        if data.show_to_requester is not None:
            note["show_to_requester"] = data.show_to_requester
        if data.notify_technician is not None:
            note["notify_technician"] = data.notify_technician

        logger.info(
            f"Adding {'public' if data.show_to_requester else 'internal'} note to ticket {data.request_id}"
        )
        payload = await self._call(
            "POST", f"/requests/{data.request_id}/notes", NotePayload, {"note": note},
            resource="request", identifier=data.request_id,
        )
        return payload.note

    async def assign_request(self, data: AssignRequestInput) -> Ticket:
        """Assign a ticket to a technician and/or a support group"""
        validate_id(data.request_id, "request_id")
        if not data.has_updates():
            raise InvalidInputError(
                "request_id", "at least one of technician_id or group must be provided for assignment"
            )
        if data.technician_id is not None:
            validate_id(data.technician_id, "technician_id")
        validate_text(data.group, "group", MAX_METADATA_LENGTH)

        request: Dict[str, Any] = {}
        if data.technician_id is not None:
            request["technician"] = {"id": data.technician_id}
        if data.group is not None:
            request["group"] = _named(data.group)

        logger.info(f"Assigning ticket {data.request_id}")
        payload = await self._call(
            "PUT", f"/requests/{data.request_id}", TicketPayload, {"request": request},
            resource="request", identifier=data.request_id,
        )
        return payload.request

    # ========================================================================
    # Misc
    # ========================================================================

    async def test_connection(self) -> bool:
        """
        Liveness check: one authenticated list call with limit 1

        Returns:
            True if SDP answered with a success envelope
        """
        try:
            await self.list_requests(ListParams(limit=1))
        except BridgeError as e:
            logger.error(f"Connection test failed ({e.category.value}): {e}")
            return False
        logger.info("Connection test successful")
        return True

    def request_web_url(self, request_id: str) -> str:
        """URL for viewing a ticket in the SDP web UI"""
        validate_id(request_id, "request_id")
        return (
            f"{self.web_base_url}/WorkOrder.do?woMode=viewWO"
            f"&woID={encode_path_segment(request_id)}"
        )

    async def aclose(self) -> None:
        await self.transport.aclose()
