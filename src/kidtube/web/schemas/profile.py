"""Child profile schemas for API request/response DTOs."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from kidtube.core.db.models import ChildProfile


class ChildProfileSave(BaseModel):
    """Schema for creating or updating the owner's child profile."""

    child_name: Optional[str] = Field(
        default=None, max_length=100, description="Child's display name", examples=["Maya"]
    )
    date_of_birth: Optional[str] = Field(
        default=None,
        max_length=10,
        description="ISO date (YYYY-MM-DD)",
        examples=["2019-04-12"],
    )


class ChildProfileResponse(BaseModel):
    """The owner's child profile."""

    user_id: Optional[str] = Field(description="Owner of the profile")
    child_name: str
    date_of_birth: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: ChildProfile) -> "ChildProfileResponse":
        return cls(
            user_id=profile.owner_id,
            child_name=profile.child_name,
            date_of_birth=profile.date_of_birth,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class PublicChildProfileResponse(BaseModel):
    """What a shared player page may see of a child profile."""

    child_name: str
