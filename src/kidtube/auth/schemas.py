"""Pydantic schemas for verified identities."""

from pydantic import BaseModel, Field


class OwnerInfo(BaseModel):
    """Identity of the collection owner taken from a verified bearer token."""

    owner_id: str = Field(..., min_length=1, description="Token subject (the owner's user id)")
