"""
Filter, pagination and sort parameters for listing tickets
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sdp_bridge.errors import InvalidInputError
from sdp_bridge.models.common import SearchCriterion
from sdp_bridge.utils.validators import (
    MAX_METADATA_LENGTH,
    validate_choice,
    validate_date,
    validate_range,
    validate_text,
)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MAX_OFFSET = 100_000

SORTABLE_FIELDS = (
    "created_time",
    "last_updated_time",
    "due_by_time",
    "subject",
    "id",
    "priority.name",
    "status.name",
)
SORT_ORDERS = ("asc", "desc")

# Statuses excluded by open_only
CLOSED_STATUSES = ("Closed", "Cancelled", "Resolved")


def _epoch_millis(value: datetime) -> str:
    return str(int(value.timestamp() * 1000))


@dataclass
class ListParams:
    """
    Parameters for SdpClient.list_requests.

    Offsets are 0-based here; to_input_data translates them to the
    remote service's start_index base.
    """
    status: Optional[str] = None
    priority: Optional[str] = None
    technician: Optional[str] = None
    requester: Optional[str] = None
    subject_contains: Optional[str] = None
    open_only: bool = False
    created_after: Optional[str] = None
    created_before: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_field: Optional[str] = None
    sort_order: Optional[str] = None
    include_total_count: bool = False
    extra_criteria: List[SearchCriterion] = field(default_factory=list)

    def validate(self) -> "ListParams":
        """
        Check every field before anything is sent

        Raises:
            InvalidInputError: On the first violation found
        """
        for name in ("status", "priority", "technician", "requester", "subject_contains"):
            validate_text(getattr(self, name), name, MAX_METADATA_LENGTH)
        validate_range(self.limit, "limit", 1, MAX_LIMIT)
        validate_range(self.offset, "offset", 0, MAX_OFFSET)
        validate_choice(self.sort_field, "sort_field", SORTABLE_FIELDS)
        validate_choice(self.sort_order, "sort_order", SORT_ORDERS)
        if self.sort_order and not self.sort_field:
            raise InvalidInputError("sort_order", "requires sort_field")
        validate_date(self.created_after, "created_after")
        validate_date(self.created_before, "created_before")
        return self

    def criteria(self) -> List[SearchCriterion]:
        items: List[SearchCriterion] = []
        if self.status:
            items.append(SearchCriterion.is_("status.name", self.status))
        if self.open_only:
            items.extend(SearchCriterion.is_not("status.name", s) for s in CLOSED_STATUSES)
        if self.priority:
            items.append(SearchCriterion.is_("priority.name", self.priority))
        if self.technician:
            items.append(SearchCriterion.is_("technician.name", self.technician))
        if self.requester:
            items.append(SearchCriterion.is_("requester.name", self.requester))
        if self.subject_contains:
            items.append(SearchCriterion.contains("subject", self.subject_contains))
        if self.created_after:
            after = validate_date(self.created_after, "created_after")
            items.append(SearchCriterion(
                field="created_time", condition="greater than", value=_epoch_millis(after)
            ))
        if self.created_before:
            before = validate_date(self.created_before, "created_before")
            items.append(SearchCriterion(
                field="created_time", condition="less than", value=_epoch_millis(before)
            ))
        items.extend(self.extra_criteria)
        return items

    def to_input_data(self, start_index_base: int = 1) -> Dict[str, Any]:
        """
        Build the structured input_data document

        SDP expects search_criteria inside list_info. Every criterion except
        the last is chained with AND; the last carries no operator.
        """
        list_info: Dict[str, Any] = {
            "row_count": self.limit,
            "start_index": self.offset + start_index_base,
        }
        if self.sort_field:
            list_info["sort_field"] = self.sort_field
            list_info["sort_order"] = self.sort_order or "desc"
        if self.include_total_count:
            list_info["get_total_count"] = True

        criteria = self.criteria()
        if criteria:
            chained = []
            for index, criterion in enumerate(criteria):
                is_last = index == len(criteria) - 1
                operator = None if is_last else (criterion.logical_operator or "AND")
                chained.append(
                    criterion.model_copy(update={"logical_operator": operator})
                    .model_dump(exclude_none=True)
                )
            list_info["search_criteria"] = chained

        return {"list_info": list_info}
