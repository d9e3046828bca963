"""
repositories/owner_repo.py
--------------------------
Data access layer for owner records.
All SQL queries related to the `owners` table live here.

Methods run on a cursor owned by the caller, so several of them can share
one transaction (see `db.connection.transaction`).
"""

from typing import Optional

from models.breeder import Owner
from utils.logger import get_logger

logger = get_logger(__name__)


class OwnerRepository:
    """Row-level operations on the owners table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, cur, owner: Owner) -> Owner:
        """
        Insert a new owner row.

        Args:
            cur: Open cursor of the current transaction.
            owner: The Owner to persist.

        Returns:
            The same Owner with its `id` populated.
        """
        sql = """
            INSERT INTO owners (forename, surname, address, email)
            VALUES (%s, %s, %s, %s)
            RETURNING id;
        """
        cur.execute(sql, (owner.forename, owner.surname, owner.address, owner.email))
        owner.id = cur.fetchone()[0]
        logger.info(f"Added owner #{owner.id}")
        return owner

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, cur, owner_id: int) -> Optional[Owner]:
        """Fetch a single active owner, or None."""
        sql = """
            SELECT id, forename, surname, address, email
            FROM owners WHERE id = %s AND active = TRUE;
        """
        cur.execute(sql, (owner_id,))
        row = cur.fetchone()
        return self._row_to_owner(row) if row else None

    def get_by_breeder(self, cur, breeder_id: int) -> list[Owner]:
        """
        Fetch the active owners linked to a breeder.

        Returns:
            List of Owner objects ordered by id.
        """
        sql = """
            SELECT o.id, o.forename, o.surname, o.address, o.email
            FROM owners o
            JOIN breeder_owners bo ON bo.owner_id = o.id
            WHERE bo.breeder_id = %s AND o.active = TRUE
            ORDER BY o.id ASC;
        """
        cur.execute(sql, (breeder_id,))
        return [self._row_to_owner(r) for r in cur.fetchall()]

    def exists(self, cur, owner_id: int) -> bool:
        """True if an active owner row has this id."""
        cur.execute("SELECT 1 FROM owners WHERE id = %s AND active = TRUE;", (owner_id,))
        return cur.fetchone() is not None

    # ── UPDATE ────────────────────────────────────────────

    def update(self, cur, owner: Owner) -> bool:
        """
        Overwrite the fields of an active owner.

        Returns:
            True if a row was updated, False if no active row matched.
        """
        sql = """
            UPDATE owners
            SET forename = %s, surname = %s, address = %s, email = %s
            WHERE id = %s AND active = TRUE;
        """
        cur.execute(sql, (owner.forename, owner.surname, owner.address, owner.email, owner.id))
        return cur.rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def deactivate(self, cur, owner_id: int) -> bool:
        """
        Soft-delete an owner by clearing its active flag.

        Returns:
            True if an active row was deactivated, False if it was already
            inactive or unknown.
        """
        cur.execute("UPDATE owners SET active = FALSE WHERE id = %s AND active = TRUE;", (owner_id,))
        return cur.rowcount > 0

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_owner(row: tuple) -> Owner:
        """Convert a database row tuple to an Owner domain object."""
        return Owner(
            id=row[0],
            forename=row[1],
            surname=row[2],
            address=row[3],
            email=row[4],
        )
