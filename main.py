"""
main.py
-------
Entry point for the breeder registry service.

Responsibilities:
    - Initialize the database connection pool (and schema in development).
    - Build the repository and the service layer on top of it.
    - Release the pool on shutdown.
"""

from config import ENVIRONMENT
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from repositories.breeder_store import BreederStore
from services.breeder_service import BreederService
from utils.logger import get_logger

logger = get_logger(__name__)


def build_service() -> BreederService:
    """Initialize the database layer and return a ready BreederService."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    if ENVIRONMENT == "development":
        create_tables()

    # ── 2. Repository + service ───────────────────────────
    return BreederService(BreederStore())


def main() -> None:
    """Start the service, verify the store is reachable, then shut down cleanly."""
    logger.info(f"Breeder service started ({ENVIRONMENT})")
    try:
        build_service()
        logger.info("Breeder service is ready.")
    finally:
        close_pool()
        logger.info("Breeder service ended.")


if __name__ == "__main__":
    main()
