"""
Tool Bridge

Maps an inbound {tool name, argument map} onto the SdpClient and renders
the result as text. This is the only place where a classified error
becomes caller-facing prose, and the only place that redacts it.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sdp_bridge.errors import BridgeError, InvalidInputError
from sdp_bridge.models.inputs import (
    AddNoteInput,
    AssignRequestInput,
    CloseRequestInput,
    CreateRequestInput,
    GetRequestInput,
    ListRequestsInput,
    ListTechniciansInput,
    PingInput,
    ToolInput,
    UpdateRequestInput,
)
from sdp_bridge.services.list_params import DEFAULT_LIMIT, ListParams
from sdp_bridge.services.sdp_client import SdpClient
from sdp_bridge.tools.formatting import (
    format_add_note_result,
    format_assign_result,
    format_close_result,
    format_create_result,
    format_error,
    format_technician_list,
    format_ticket_details,
    format_ticket_list,
    format_update_result,
)
from sdp_bridge.utils.logger import get_logger
from sdp_bridge.utils.sanitizer import MAX_ERROR_BODY_LENGTH, redact, truncate

logger = get_logger(__name__)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result returned to the caller for every invocation"""
    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(False, alias="isError")

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=False)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[ToolInput]
    action: str


TOOLS: Dict[str, ToolSpec] = {
    tool.name: tool
    for tool in (
        ToolSpec(
            "ping",
            "Check that the bridge is running.",
            PingInput,
            "ping",
        ),
        ToolSpec(
            "list_requests",
            "List service desk tickets with optional filters for status, priority, "
            "technician, requester, subject text and creation date. Supports "
            "pagination (limit, offset) and sorting.",
            ListRequestsInput,
            "list requests",
        ),
        ToolSpec(
            "get_request",
            "Get full details of a ticket, including description, resolution, "
            "notes and conversation history.",
            GetRequestInput,
            "get request",
        ),
        ToolSpec(
            "list_technicians",
            "List technicians available for assignment, optionally filtered by support group.",
            ListTechniciansInput,
            "list technicians",
        ),
        ToolSpec(
            "create_request",
            "Create a new ticket. Subject is required; requester, priority, "
            "category and assignment are optional.",
            CreateRequestInput,
            "create request",
        ),
        ToolSpec(
            "update_request",
            "Update fields of an existing ticket. Only the provided fields change; "
            "at least one field besides request_id is required.",
            UpdateRequestInput,
            "update request",
        ),
        ToolSpec(
            "close_request",
            "Close a ticket with a closure code and/or closure comments.",
            CloseRequestInput,
            "close request",
        ),
        ToolSpec(
            "add_note",
            "Add a note to a ticket. Notes are internal unless show_to_requester is true.",
            AddNoteInput,
            "add note to request",
        ),
        ToolSpec(
            "assign_request",
            "Assign a ticket to a technician and/or a support group.",
            AssignRequestInput,
            "assign request",
        ),
    )
}


def _input_error(error: ValidationError) -> InvalidInputError:
    """First pydantic error as InvalidInput naming the offending field"""
    first = error.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else "arguments"
    kind = first.get("type")
    if kind == "missing":
        message = "is required"
    elif kind == "extra_forbidden":
        message = "is not a recognised parameter"
    else:
        message = first.get("msg", "invalid value")
    return InvalidInputError(field, message)


class ToolBridge:
    """
    Dispatches tool invocations to the SdpClient

    invoke() never raises for a domain failure; it returns a ToolResult
    with isError set instead.
    """

    def __init__(self, client: SdpClient):
        self.client = client
        self._handlers: Dict[str, Callable[[Any], Awaitable[str]]] = {
            "ping": self._ping,
            "list_requests": self._list_requests,
            "get_request": self._get_request,
            "list_technicians": self._list_technicians,
            "create_request": self._create_request,
            "update_request": self._update_request,
            "close_request": self._close_request,
            "add_note": self._add_note,
            "assign_request": self._assign_request,
        }

    @staticmethod
    def tool_definitions() -> List[Dict[str, Any]]:
        """Name, description and JSON schema of every supported tool"""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_model.model_json_schema(),
            }
            for tool in TOOLS.values()
        ]

    async def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Run one tool

        Args:
            name: Tool name
            arguments: JSON object of tool arguments (None means empty)

        Returns:
            ToolResult with the rendered success text or a redacted error
        """
        tool = TOOLS.get(name)
        if tool is None:
            error = InvalidInputError(
                "name", f"unknown tool {name!r}; supported tools: {', '.join(TOOLS)}"
            )
            return self._failure("run tool", error)

        try:
            data = tool.input_model.model_validate(arguments if arguments is not None else {})
        except ValidationError as e:
            return self._failure(tool.action, _input_error(e))

        action = tool.action
        request_id = getattr(data, "request_id", None)
        if request_id:
            action = f"{action} {request_id}"

        logger.info(f"Tool call: {name}")
        try:
            text = await self._handlers[name](data)
        except BridgeError as e:
            return self._failure(action, e)
        except Exception as e:
            # Unclassified bug: report it without taking the process down
            logger.error(f"Unexpected error in tool {name}: {e.__class__.__name__}: {e}")
            return self._failure(action, BridgeError(f"internal error ({e.__class__.__name__})"))

        return ToolResult.success(text)

    def _failure(self, action: str, error: BridgeError) -> ToolResult:
        message = str(error)
        rendered = format_error(error.category.value, action, message)
        # Redact the whole text before capping the message; a cut secret no longer matches
        text = redact(rendered, self.client.credential.get_secret_value())
        text = truncate(text, len(rendered) - len(message) + MAX_ERROR_BODY_LENGTH)
        logger.error(text)
        return ToolResult.error(text)

    def _web_url(self, request_id: Optional[str]) -> Optional[str]:
        # Only link IDs that are well formed
        if request_id and request_id.isascii() and request_id.isdigit():
            return self.client.request_web_url(request_id)
        return None

    # ========================================================================
    # Handlers
    # ========================================================================

    async def _ping(self, data: PingInput) -> str:
        return "pong"

    async def _list_requests(self, data: ListRequestsInput) -> str:
        params = ListParams(
            status=data.status,
            priority=data.priority,
            technician=data.technician,
            requester=data.requester,
            subject_contains=data.subject_contains,
            open_only=bool(data.open_only),
            created_after=data.created_after,
            created_before=data.created_before,
            limit=data.limit if data.limit is not None else DEFAULT_LIMIT,
            offset=data.offset or 0,
            sort_field=data.sort_field,
            sort_order=data.sort_order,
        )
        page = await self.client.list_requests(params)
        return format_ticket_list(page, params.offset)

    async def _get_request(self, data: GetRequestInput) -> str:
        ticket = await self.client.get_request(data.request_id)
        return format_ticket_details(ticket, self._web_url(data.request_id))

    async def _list_technicians(self, data: ListTechniciansInput) -> str:
        technicians = await self.client.list_technicians(data.group, data.limit)
        return format_technician_list(technicians)

    async def _create_request(self, data: CreateRequestInput) -> str:
        ticket = await self.client.create_request(data)
        return format_create_result(ticket, self._web_url(ticket.id))

    async def _update_request(self, data: UpdateRequestInput) -> str:
        ticket = await self.client.update_request(data)
        return format_update_result(ticket)

    async def _close_request(self, data: CloseRequestInput) -> str:
        ticket = await self.client.close_request(data)
        return format_close_result(ticket)

    async def _add_note(self, data: AddNoteInput) -> str:
        note = await self.client.add_note(data)
        return format_add_note_result(data.request_id, note)

    async def _assign_request(self, data: AssignRequestInput) -> str:
        ticket = await self.client.assign_request(data)
        return format_assign_result(ticket, data)
