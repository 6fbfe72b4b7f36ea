"""
Technician data models
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, Field

from sdp_bridge.models.common import NamedEntity, SdpModel


class Technician(SdpModel):
    """Technician who can be assigned to tickets (read-only)"""
    id: str
    name: Optional[str] = None
    email_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    job_title: Optional[str] = Field(
        None, validation_alias=AliasChoices("job_title", "jobtitle")
    )
    department: Optional[Any] = None
    is_active: Optional[bool] = None
    groups: List[NamedEntity] = Field(default_factory=list)

    def display_name(self) -> str:
        """Name, falling back to email, then to the ID"""
        return self.name or self.email_id or self.id


class TechniciansPayload(SdpModel):
    technicians: List[Technician] = Field(default_factory=list)
