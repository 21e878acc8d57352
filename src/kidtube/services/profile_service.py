"""Child profile service: the name and birth date shown on a child's player page."""

from typing import Optional

import structlog

from kidtube.core.db.exceptions import DuplicateRecordError
from kidtube.core.db.models import ChildProfile

from .base import BaseService, ConflictError, ValidationError

logger = structlog.get_logger(__name__)


class ChildProfileService(BaseService):
    """Reads and saves the single child profile each owner may have."""

    async def get(self, owner_id: Optional[str]) -> Optional[ChildProfile]:
        async with self._store_call("get_profile"):
            return await self.repository.get_child_profile(owner_id)

    async def get_public_name(self, owner_id: Optional[str]) -> Optional[str]:
        """Return only the child's name, for pages shared without authentication."""
        profile = await self.get(owner_id)
        return profile.child_name if profile else None

    async def save(
        self,
        owner_id: Optional[str],
        child_name: Optional[str],
        date_of_birth: Optional[str] = None,
    ) -> ChildProfile:
        """
        Create the owner's child profile or update the existing one.

        Raises:
            ValidationError: If child_name is empty
            ConflictError: If another request created the profile concurrently
            UpstreamUnavailableError: If the store fails
        """
        if not child_name or not child_name.strip():
            raise ValidationError("Child name is required", field="child_name")

        try:
            async with self._store_call("save_profile"):
                profile = await self.repository.upsert_child_profile(
                    owner_id, child_name, date_of_birth or None
                )
        except DuplicateRecordError as e:
            raise ConflictError(
                "Child profile was modified concurrently", conflicting_id=owner_id
            ) from e

        self.logger.info("child_profile_saved", owner_id=owner_id)
        return profile
