"""
services/breeder_service.py
----------------------------
Business logic for breeders and their owners.
Thin wrapper over the repository: builds records, bounds each call with a
QueryContext and skips writes that would not change anything.
"""

from typing import Optional

from config import DB_STATEMENT_TIMEOUT_SECONDS
from db.context import QueryContext
from models.breeder import Breeder, Owner
from repositories.base import BreederRepositoryBase
from repositories.errors import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class BreederService:
    """Manages breeder registrations and their owners."""

    def __init__(self, repo: BreederRepositoryBase, timeout: Optional[float] = DB_STATEMENT_TIMEOUT_SECONDS):
        self.repo = repo
        self.timeout = timeout or None

    def _context(self) -> QueryContext:
        return QueryContext(timeout=self.timeout)

    def create_breeder(self, affix: str, short_affix: str, website: str, owners: list[Owner]) -> Breeder:
        """Register a breeder together with its initial owners."""
        breeder = Breeder(affix=affix, short_affix=short_affix, website=website, owners=list(owners))
        return self.repo.create_breeder(breeder, self._context())

    def get_breeder(self, breeder_id: int) -> Breeder:
        return self.repo.get_breeder(breeder_id, self._context())

    def update_breeder(
        self, breeder_id: int, affix: str, short_affix: str, website: str, owners: list[Owner]
    ) -> Breeder:
        """
        Update a breeder and its owners, only if something actually changed.

        Returns:
            The breeder as it is stored after the call.
        """
        ctx = self._context()
        candidate = Breeder(
            id=breeder_id, affix=affix, short_affix=short_affix, website=website, owners=list(owners)
        )
        if not self.repo.breeder_needs_update(candidate, ctx):
            logger.info(f"Breeder #{breeder_id} unchanged, skipping update")
            return candidate
        return self.repo.update_breeder(candidate, ctx)

    def update_owner(self, breeder_id: int, owner: Owner) -> Owner:
        """
        Update an owner on behalf of a breeder.

        Raises:
            NotFoundError: If the owner is not associated with the breeder.
        """
        ctx = self._context()
        if not self.repo.is_associated(breeder_id, owner.id, ctx):
            logger.warning(f"Owner #{owner.id} is not associated with breeder #{breeder_id}")
            raise NotFoundError("owner", owner.id)
        if not self.repo.owner_needs_update(owner, ctx):
            logger.info(f"Owner #{owner.id} unchanged, skipping update")
            return owner
        return self.repo.update_owner(owner, ctx)

    def delete_breeder(self, breeder_id: int) -> None:
        self.repo.delete_breeder(breeder_id, self._context())
