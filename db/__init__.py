"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, per-call query contexts,
transactions and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
