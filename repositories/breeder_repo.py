"""
repositories/breeder_repo.py
-----------------------------
Data access layer for breeder records.
All SQL queries related to the `breeders` table live here.
"""

from typing import Optional

from models.breeder import Breeder
from utils.logger import get_logger

logger = get_logger(__name__)


class BreederRepository:
    """Row-level operations on the breeders table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, cur, breeder: Breeder) -> Breeder:
        """
        Insert a new breeder row. Owners are not touched.

        Args:
            cur: Open cursor of the current transaction.
            breeder: The Breeder to persist.

        Returns:
            The same Breeder with its `id` populated.
        """
        sql = """
            INSERT INTO breeders (affix, short_affix, website)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        cur.execute(sql, (breeder.affix, breeder.short_affix, breeder.website))
        breeder.id = cur.fetchone()[0]
        logger.info(f"Added breeder '{breeder.affix}' #{breeder.id}")
        return breeder

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, cur, breeder_id: int) -> Optional[Breeder]:
        """Fetch a single active breeder without its owners, or None."""
        sql = """
            SELECT id, affix, short_affix, website
            FROM breeders WHERE id = %s AND active = TRUE;
        """
        cur.execute(sql, (breeder_id,))
        row = cur.fetchone()
        return self._row_to_breeder(row) if row else None

    def exists(self, cur, breeder_id: int) -> bool:
        """True if an active breeder row has this id."""
        cur.execute("SELECT 1 FROM breeders WHERE id = %s AND active = TRUE;", (breeder_id,))
        return cur.fetchone() is not None

    # ── UPDATE ────────────────────────────────────────────

    def update(self, cur, breeder: Breeder) -> bool:
        """
        Overwrite affix, short affix and website of an active breeder.

        Returns:
            True if a row was updated, False if no active row matched.
        """
        sql = """
            UPDATE breeders
            SET affix = %s, short_affix = %s, website = %s
            WHERE id = %s AND active = TRUE;
        """
        cur.execute(sql, (breeder.affix, breeder.short_affix, breeder.website, breeder.id))
        return cur.rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def deactivate(self, cur, breeder_id: int) -> bool:
        """Soft-delete a breeder. Returns False if it was already inactive or unknown."""
        cur.execute("UPDATE breeders SET active = FALSE WHERE id = %s AND active = TRUE;", (breeder_id,))
        return cur.rowcount > 0

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_breeder(row: tuple) -> Breeder:
        """Convert a database row tuple to a Breeder domain object."""
        return Breeder(
            id=row[0],
            affix=row[1],
            short_affix=row[2],
            website=row[3],
        )
