"""
repositories/association_repo.py
---------------------------------
Data access layer for the breeder <-> owner join table.
"""

from utils.logger import get_logger

logger = get_logger(__name__)


class AssociationRepository:
    """Operations on the breeder_owners table."""

    def add(self, cur, breeder_id: int, owner_id: int) -> None:
        """Insert a link row. The UNIQUE(breeder_id, owner_id) constraint rejects duplicates."""
        sql = "INSERT INTO breeder_owners (breeder_id, owner_id) VALUES (%s, %s);"
        cur.execute(sql, (breeder_id, owner_id))
        logger.info(f"Associated breeder #{breeder_id} with owner #{owner_id}")

    def remove(self, cur, breeder_id: int, owner_id: int) -> bool:
        """
        Delete a link row.

        Returns:
            True if a row was deleted, False if the pair was not linked.
        """
        sql = "DELETE FROM breeder_owners WHERE breeder_id = %s AND owner_id = %s;"
        cur.execute(sql, (breeder_id, owner_id))
        removed = cur.rowcount > 0
        if removed:
            logger.info(f"Unassociated breeder #{breeder_id} from owner #{owner_id}")
        return removed

    def exists(self, cur, breeder_id: int, owner_id: int) -> bool:
        """True if the pair is linked and both sides are still active."""
        sql = """
            SELECT 1 FROM breeder_owners bo
            JOIN breeders b ON b.id = bo.breeder_id AND b.active = TRUE
            JOIN owners o ON o.id = bo.owner_id AND o.active = TRUE
            WHERE bo.breeder_id = %s AND bo.owner_id = %s;
        """
        cur.execute(sql, (breeder_id, owner_id))
        return cur.fetchone() is not None
