"""
repositories/breeder_store.py
------------------------------
PostgreSQL implementation of the breeder repository.

Each public method is one transaction: the row mappers run on the same
cursor, so a compound write (breeder + owners + links) either commits as a
whole or leaves nothing behind. Driver failures, timeouts and cancellations
surface as StoreError.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import errors as pg_errors

from db.connection import transaction
from db.context import ContextExpiredError, QueryContext
from models.breeder import Breeder, Owner
from repositories.association_repo import AssociationRepository
from repositories.base import BreederRepositoryBase
from repositories.breeder_repo import BreederRepository
from repositories.errors import ConflictError, NotFoundError, StoreError
from repositories.owner_repo import OwnerRepository
from repositories.validation import validate_breeder, validate_owner
from utils.logger import get_logger

logger = get_logger(__name__)


class BreederStore(BreederRepositoryBase):
    """Breeder repository backed by the pooled PostgreSQL connection."""

    def __init__(self):
        self.breeder_repo = BreederRepository()
        self.owner_repo = OwnerRepository()
        self.association_repo = AssociationRepository()

    @contextmanager
    def _unit_of_work(self, operation: str, entity_id: Optional[int],
                      ctx: Optional[QueryContext]) -> Iterator:
        """Open a transaction and translate store failures into StoreError."""
        try:
            with transaction(ctx) as cur:
                yield cur
        except (psycopg2.Error, ContextExpiredError) as e:
            logger.error(f"Failed to {operation} #{entity_id}: {e}")
            raise StoreError(operation, entity_id, e) from e

    # ── CREATE ────────────────────────────────────────────

    def create_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        validate_breeder(breeder)
        owner_ids = [owner.id for owner in breeder.owners]
        try:
            with self._unit_of_work("create breeder", breeder.id, ctx) as cur:
                self.breeder_repo.add(cur, breeder)
                for owner in breeder.owners:
                    self.owner_repo.add(cur, owner)
                    self.association_repo.add(cur, breeder.id, owner.id)
        except Exception:
            # the rows were rolled back, so the ids they got are meaningless
            breeder.id = None
            for owner, owner_id in zip(breeder.owners, owner_ids):
                owner.id = owner_id
            raise
        logger.info(f"Created breeder #{breeder.id} with {len(breeder.owners)} owner(s)")
        return breeder

    def create_owner(self, breeder_id: int, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        validate_owner(owner)
        previous_id = owner.id
        try:
            with self._unit_of_work("create owner", breeder_id, ctx) as cur:
                if not self.breeder_repo.exists(cur, breeder_id):
                    raise NotFoundError("breeder", breeder_id)
                self.owner_repo.add(cur, owner)
        except Exception:
            owner.id = previous_id
            raise
        return owner

    def associate_breeder_owner(self, breeder_id: int, owner_id: int,
                                ctx: Optional[QueryContext] = None) -> None:
        try:
            with self._unit_of_work("associate breeder", breeder_id, ctx) as cur:
                if not self.breeder_repo.exists(cur, breeder_id):
                    raise NotFoundError("breeder", breeder_id)
                if not self.owner_repo.exists(cur, owner_id):
                    raise NotFoundError("owner", owner_id)
                if self.association_repo.exists(cur, breeder_id, owner_id):
                    raise ConflictError(breeder_id, owner_id)
                self.association_repo.add(cur, breeder_id, owner_id)
        except StoreError as e:
            # a concurrent insert of the same pair won the race
            if isinstance(e.cause, pg_errors.UniqueViolation):
                raise ConflictError(breeder_id, owner_id) from e.cause
            raise

    # ── READ ──────────────────────────────────────────────

    def get_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> Breeder:
        with self._unit_of_work("get breeder", breeder_id, ctx) as cur:
            breeder = self.breeder_repo.get_by_id(cur, breeder_id)
            if breeder is None:
                raise NotFoundError("breeder", breeder_id)
            breeder.owners = self.owner_repo.get_by_breeder(cur, breeder_id)
        return breeder

    def get_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> Owner:
        with self._unit_of_work("get owner", owner_id, ctx) as cur:
            owner = self.owner_repo.get_by_id(cur, owner_id)
        if owner is None:
            raise NotFoundError("owner", owner_id)
        return owner

    def get_owners_by_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> list[Owner]:
        with self._unit_of_work("get owners by breeder", breeder_id, ctx) as cur:
            if not self.breeder_repo.exists(cur, breeder_id):
                raise NotFoundError("breeder", breeder_id)
            return self.owner_repo.get_by_breeder(cur, breeder_id)

    def is_associated(self, breeder_id: int, owner_id: int, ctx: Optional[QueryContext] = None) -> bool:
        with self._unit_of_work("check association", breeder_id, ctx) as cur:
            return self.association_repo.exists(cur, breeder_id, owner_id)

    # ── UPDATE ────────────────────────────────────────────

    def update_breeder(self, breeder: Breeder, ctx: Optional[QueryContext] = None) -> Breeder:
        validate_breeder(breeder, require_owners=False)
        with self._unit_of_work("update breeder", breeder.id, ctx) as cur:
            if not self.breeder_repo.update(cur, breeder):
                raise NotFoundError("breeder", breeder.id)
            for owner in breeder.owners:
                if not self.owner_repo.update(cur, owner):
                    raise NotFoundError("owner", owner.id)
        logger.info(f"Updated breeder #{breeder.id}")
        return breeder

    def update_owner(self, owner: Owner, ctx: Optional[QueryContext] = None) -> Owner:
        validate_owner(owner)
        with self._unit_of_work("update owner", owner.id, ctx) as cur:
            if not self.owner_repo.update(cur, owner):
                raise NotFoundError("owner", owner.id)
        logger.info(f"Updated owner #{owner.id}")
        return owner

    # ── DELETE ────────────────────────────────────────────

    def delete_breeder(self, breeder_id: int, ctx: Optional[QueryContext] = None) -> None:
        with self._unit_of_work("delete breeder", breeder_id, ctx) as cur:
            deleted = self.breeder_repo.deactivate(cur, breeder_id)
        if deleted:
            logger.info(f"Deleted breeder #{breeder_id}")
        else:
            logger.warning(f"Breeder #{breeder_id} already inactive, nothing deleted")

    def delete_owner(self, owner_id: int, ctx: Optional[QueryContext] = None) -> None:
        with self._unit_of_work("delete owner", owner_id, ctx) as cur:
            deleted = self.owner_repo.deactivate(cur, owner_id)
        if deleted:
            logger.info(f"Deleted owner #{owner_id}")
        else:
            logger.warning(f"Owner #{owner_id} already inactive, nothing deleted")

    def unassociate_breeder_owner(self, breeder_id: int, owner_id: int,
                                  ctx: Optional[QueryContext] = None) -> None:
        with self._unit_of_work("unassociate breeder", breeder_id, ctx) as cur:
            removed = self.association_repo.remove(cur, breeder_id, owner_id)
        if not removed:
            logger.warning(f"Breeder #{breeder_id} and owner #{owner_id} were not associated")
