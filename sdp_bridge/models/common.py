"""
Shared SDP record types

Pagination, search criteria, the response status block and the small
entity/timestamp shapes that most SDP records reuse.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SdpModel(BaseModel):
    """
    Base for records decoded from SDP responses.

    SDP returns identifiers as strings or integers depending on the
    endpoint, and adds fields between versions; both are tolerated.
    Records are immutable once decoded.
    """
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        frozen=True,
        populate_by_name=True,
    )


class NamedEntity(SdpModel):
    """Reference to another SDP entity by id and name"""
    id: Optional[str] = None
    name: Optional[str] = None

    def display_name(self) -> str:
        return self.name or "Unknown"


class SdpTimestamp(SdpModel):
    """Epoch milliseconds plus SDP's human-readable rendering"""
    value: Optional[str] = None
    display_value: Optional[str] = None

    def display(self) -> Optional[str]:
        return self.display_value or self.value


class ResponseMessage(SdpModel):
    """A single message in the response status block"""
    message: str = ""
    status_code: Optional[int] = None
    type: Optional[str] = None
    field: Optional[str] = None


class ResponseStatus(SdpModel):
    """
    Status block present in every SDP response.

    Attributes:
        status_code: 2000 on success, 4000+ on failure
        status: "success" or "failed"
        messages: Error details, possibly per field
    """
    status_code: int
    status: str = ""
    messages: List[ResponseMessage] = Field(default_factory=list)


class ListInfoResponse(SdpModel):
    """Pagination info returned alongside list payloads"""
    has_more_rows: bool = False
    total_count: Optional[int] = None
    start_index: Optional[int] = None
    row_count: Optional[int] = None


class SearchCriterion(BaseModel):
    """One filter expression inside list_info.search_criteria"""
    field: str
    condition: str
    value: Any
    logical_operator: Optional[str] = None

    @classmethod
    def is_(cls, field: str, value: str) -> "SearchCriterion":
        return cls(field=field, condition="is", value=value)

    @classmethod
    def is_not(cls, field: str, value: str) -> "SearchCriterion":
        return cls(field=field, condition="is not", value=value)

    @classmethod
    def contains(cls, field: str, value: str) -> "SearchCriterion":
        return cls(field=field, condition="contains", value=value)
