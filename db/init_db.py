"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Breeders table: registered kennel / affix identities
CREATE TABLE IF NOT EXISTS breeders (
    id              SERIAL PRIMARY KEY,
    affix           VARCHAR(255) NOT NULL,
    short_affix     VARCHAR(50) NOT NULL,
    website         VARCHAR(255) NOT NULL,
    active          BOOLEAN NOT NULL DEFAULT TRUE
);

-- Owners table: people that can be linked to one or more breeders
CREATE TABLE IF NOT EXISTS owners (
    id              SERIAL PRIMARY KEY,
    forename        VARCHAR(100) NOT NULL,
    surname         VARCHAR(100) NOT NULL,
    address         TEXT NOT NULL,
    email           VARCHAR(255) NOT NULL,
    active          BOOLEAN NOT NULL DEFAULT TRUE
);

-- Breeder <-> owner links; rows are deleted on unassociation
CREATE TABLE IF NOT EXISTS breeder_owners (
    breeder_id      INT NOT NULL REFERENCES breeders(id),
    owner_id        INT NOT NULL REFERENCES owners(id),
    UNIQUE(breeder_id, owner_id)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_breeder_owners_owner ON breeder_owners(owner_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
