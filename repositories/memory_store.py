"""
repositories/memory_store.py
-----------------------------
In-memory implementation of the breeder repository.

Used by tests and local development. It follows the same contract as the
PostgreSQL store: soft deletion, unique links, all-or-nothing writes, and
fresh copies on every read so callers never share state with the store.
"""

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from db.context import ContextExpiredError, QueryContext
from models.breeder import Breeder, Owner
from repositories.base import BreederRepositoryBase
from repositories.errors import ConflictError, NotFoundError, StoreError
from repositories.validation import validate_breeder, validate_owner
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _Row:
    record: object
    active: bool = True


class InMemoryBreederStore(BreederRepositoryBase):
    """Thread-safe, process-local breeder repository."""

    def __init__(self):
        self._lock = threading.RLock()
        self._breeders: dict[int, _Row] = {}
        self._owners: dict[int, _Row] = {}
        self._links: set[tuple[int, int]] = set()
        self._next_breeder_id = 1
        self._next_owner_id = 1

    @contextmanager
    def _atomic(self, operation: str, entity_id: Optional[int],
                ctx: Optional[QueryContext]) -> Iterator[None]:
        """Serialize access and restore the previous state if the block fails."""
        try:
            if ctx is not None:
                ctx.raise_if_done()
        except ContextExpiredError as e:
            logger.error(f"Failed to {operation} #{entity_id}: {e}")
            raise StoreError(operation, entity_id, e) from e
        with self._lock:
            snapshot = copy.deepcopy(
                (self._breeders, self._owners, self._links, self._next_breeder_id, self._next_owner_id)
            )
            try:
                yield
            except Exception:
                (self._breeders, self._owners, self._links,
                 self._next_breeder_id, self._next_owner_id) = snapshot
                raise

    # ── row helpers ───────────────────────────────────────

    def _insert_breeder(self, breeder: Breeder) -> None:
        breeder.id = self._next_breeder_id
        self._next_breeder_id += 1
        stored = copy.deepcopy(breeder)
        stored.owners = []
        self._breeders[breeder.id] = _Row(stored)

    def _insert_owner(self, owner: Owner) -> None:
        owner.id = self._next_owner_id
        self._next_owner_id += 1
        self._owners[owner.id] = _Row(copy.deepcopy(owner))

    def _active_breeder(self, breeder_id: int) -> Optional[Breeder]:
        row = self._breeders.get(breeder_id)
        return row.record if row and row.active else None

    def _active_owner(self, owner_id: int) -> Optional[Owner]:
        row = self._owners.get(owner_id)
        return row.record if row and row.active else None

    def _linked_owners(self, breeder_id: int) -> list[Owner]:
        owner_ids = sorted(o for b, o in self._links if b == breeder_id)
        owners = [self._active_owner(owner_id) for owner_id in owner_ids]
        return [copy.deepcopy(owner) for owner in owners if owner is not None]

    # ── CREATE ────────────────────────────────────────────

    def create_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        validate_breeder(breeder)
        owner_ids = [owner.id for owner in breeder.owners]
        try:
            with self._atomic("create breeder", breeder.id, ctx):
                self._insert_breeder(breeder)
                for owner in breeder.owners:
                    self._insert_owner(owner)
                    self._links.add((breeder.id, owner.id))
        except Exception:
            breeder.id = None
            for owner, owner_id in zip(breeder.owners, owner_ids):
                owner.id = owner_id
            raise
        logger.info(f"Created breeder #{breeder.id} with {len(breeder.owners)} owner(s)")
        return breeder

    def create_owner(self, breeder_id: int, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        validate_owner(owner)
        with self._atomic("create owner", breeder_id, ctx):
            if self._active_breeder(breeder_id) is None:
                raise NotFoundError("breeder", breeder_id)
            self._insert_owner(owner)
        return owner

    def associate_breeder_owner(self, breeder_id: int, owner_id: int,
                                ctx: Optional[QueryContext] = None) -> None:
        with self._atomic("associate breeder", breeder_id, ctx):
            if self._active_breeder(breeder_id) is None:
                raise NotFoundError("breeder", breeder_id)
            if self._active_owner(owner_id) is None:
                raise NotFoundError("owner", owner_id)
            if (breeder_id, owner_id) in self._links:
                raise ConflictError(breeder_id, owner_id)
            self._links.add((breeder_id, owner_id))

    # ── READ ──────────────────────────────────────────────

    def get_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> Breeder:
        with self._atomic("get breeder", breeder_id, ctx):
            breeder = self._active_breeder(breeder_id)
            if breeder is None:
                raise NotFoundError("breeder", breeder_id)
            result = copy.deepcopy(breeder)
            result.owners = self._linked_owners(breeder_id)
        return result

    def get_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> Owner:
        with self._atomic("get owner", owner_id, ctx):
            owner = self._active_owner(owner_id)
            if owner is None:
                raise NotFoundError("owner", owner_id)
            return copy.deepcopy(owner)

    def get_owners_by_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> list[Owner]:
        with self._atomic("get owners by breeder", breeder_id, ctx):
            if self._active_breeder(breeder_id) is None:
                raise NotFoundError("breeder", breeder_id)
            return self._linked_owners(breeder_id)

    def is_associated(self, breeder_id: int, owner_id: int, ctx: Optional[QueryContext] = None) -> bool:
        with self._atomic("check association", breeder_id, ctx):
            return (
                (breeder_id, owner_id) in self._links
                and self._active_breeder(breeder_id) is not None
                and self._active_owner(owner_id) is not None
            )

    # ── UPDATE ────────────────────────────────────────────

    def update_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        validate_breeder(breeder, require_owners=False)
        with self._atomic("update breeder", breeder.id, ctx):
            stored = self._active_breeder(breeder.id)
            if stored is None:
                raise NotFoundError("breeder", breeder.id)
            stored.affix = breeder.affix
            stored.short_affix = breeder.short_affix
            stored.website = breeder.website
            for owner in breeder.owners:
                self._overwrite_owner(owner)
        return breeder

    def update_owner(self, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        validate_owner(owner)
        with self._atomic("update owner", owner.id, ctx):
            self._overwrite_owner(owner)
        return owner

    def _overwrite_owner(self, owner: Owner) -> None:
        stored = self._active_owner(owner.id)
        if stored is None:
            raise NotFoundError("owner", owner.id)
        stored.forename = owner.forename
        stored.surname = owner.surname
        stored.address = owner.address
        stored.email = owner.email

    # ── DELETE ────────────────────────────────────────────

    def delete_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> None:
        with self._atomic("delete breeder", breeder_id, ctx):
            row = self._breeders.get(breeder_id)
            if row is not None:
                row.active = False

    def delete_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> None:
        with self._atomic("delete owner", owner_id, ctx):
            row = self._owners.get(owner_id)
            if row is not None:
                row.active = False

    def unassociate_breeder_owner(self, breeder_id: int, owner_id: int,
                                  ctx: Optional[QueryContext] = None) -> None:
        with self._atomic("unassociate breeder", breeder_id, ctx):
            self._links.discard((breeder_id, owner_id))
