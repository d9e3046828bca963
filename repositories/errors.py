"""
repositories/errors.py
----------------------
Typed errors raised by the repository layer.
"""

from typing import Optional


class RepositoryError(Exception):
    """Base class for all repository failures."""


class ValidationError(RepositoryError):
    """A required field is missing or empty."""

    def __init__(self, entity: str, fields: list[str]):
        self.entity = entity
        self.fields = fields
        super().__init__(f"Invalid {entity}: empty required field(s) {', '.join(fields)}")


class NotFoundError(RepositoryError):
    """The referenced identity has no active row."""

    def __init__(self, entity: str, entity_id: Optional[int]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} #{entity_id} not found")


class ConflictError(RepositoryError):
    """The breeder/owner pair is already associated."""

    def __init__(self, breeder_id: int, owner_id: int):
        self.breeder_id = breeder_id
        self.owner_id = owner_id
        super().__init__(f"Owner #{owner_id} is already associated with breeder #{breeder_id}")


class StoreError(RepositoryError):
    """
    The underlying store failed (connectivity, statement error, timeout or
    cancellation). The original exception is kept as ``cause`` and chained.
    """

    def __init__(self, operation: str, entity_id: Optional[int], cause: Exception):
        self.operation = operation
        self.entity_id = entity_id
        self.cause = cause
        target = f" for #{entity_id}" if entity_id is not None else ""
        super().__init__(f"{operation} failed{target}: {cause}")
