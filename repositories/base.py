"""
repositories/base.py
--------------------
Repository interface for breeders and owners.

The service layer depends only on this contract so the storage backend can
be swapped: `BreederStore` talks to PostgreSQL, `InMemoryBreederStore`
keeps everything in process for tests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from db.context import QueryContext
from models.breeder import Breeder, Owner
from repositories.change_detector import breeder_differs, owner_differs
from utils.logger import get_logger

logger = get_logger(__name__)


class BreederRepositoryBase(ABC):
    """Base class for all breeder repository implementations.

    Every method takes an optional QueryContext that bounds how long the
    call may block and lets the caller cancel it.

    Errors:
        ValidationError: a required field is empty (raised before any write).
        NotFoundError: the referenced id has no active row.
        ConflictError: the breeder/owner pair is already associated.
        StoreError: the backend failed, timed out or was cancelled.
    """

    # ── Breeders ──────────────────────────────────────────

    @abstractmethod
    def create_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        """Persist a breeder with all its owners and links, atomically.

        Assigns ``breeder.id`` and every ``owner.id``.
        """

    @abstractmethod
    def update_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        """Overwrite the breeder row and every owner in ``breeder.owners``."""

    @abstractmethod
    def delete_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> None:
        """Soft-delete a breeder. Deleting an inactive breeder is a no-op."""

    @abstractmethod
    def get_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> Breeder:
        """Fetch an active breeder together with its active owners."""

    # ── Owners ────────────────────────────────────────────

    @abstractmethod
    def create_owner(self, breeder_id: int, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        """Persist an owner on behalf of an active breeder.

        The owner is NOT linked to the breeder; use
        ``associate_breeder_owner`` for that.
        """

    @abstractmethod
    def update_owner(self, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        """Overwrite the fields of an active owner."""

    @abstractmethod
    def delete_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> None:
        """Soft-delete an owner. Deleting an inactive owner is a no-op."""

    @abstractmethod
    def get_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> Owner:
        """Fetch an active owner."""

    @abstractmethod
    def get_owners_by_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> list[Owner]:
        """Active owners linked to an active breeder, ordered by owner id."""

    # ── Associations ──────────────────────────────────────

    @abstractmethod
    def associate_breeder_owner(self, breeder_id: int, owner_id: int,
                                ctx: Optional[QueryContext] = None) -> None:
        """Link an owner to a breeder. Raises ConflictError if already linked."""

    @abstractmethod
    def unassociate_breeder_owner(self, breeder_id: int, owner_id: int,
                                  ctx: Optional[QueryContext] = None) -> None:
        """Remove a link if present. Never touches the breeder or owner rows."""

    @abstractmethod
    def is_associated(self, breeder_id: int, owner_id: int, ctx: Optional[QueryContext] = None) -> bool:
        """True if the pair is linked."""

    # ── Change detection ──────────────────────────────────

    def breeder_needs_update(self, candidate: Breeder, ctx: Optional[QueryContext] = None) -> bool:
        """
        Compare a candidate against the persisted breeder.

        Returns:
            True if any field or owner differs, False if identical.

        Raises:
            NotFoundError: If ``candidate.id`` has no active row.
        """
        persisted = self.get_breeder(candidate.id, ctx)
        changed = breeder_differs(candidate, persisted)
        logger.debug(f"Breeder #{candidate.id} needs update: {changed}")
        return changed

    def owner_needs_update(self, candidate: Owner, ctx: Optional[QueryContext] = None) -> bool:
        """Same as `breeder_needs_update`, for a single owner."""
        persisted = self.get_owner(candidate.id, ctx)
        changed = owner_differs(candidate, persisted)
        logger.debug(f"Owner #{candidate.id} needs update: {changed}")
        return changed
