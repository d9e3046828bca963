"""
repositories/change_detector.py
-------------------------------
Decides whether an in-memory entity differs from its persisted state,
so callers can skip no-op writes.

Comparison is the models' dataclass equality: every field is compared
exactly (strings case-sensitively) and the owner list element by element,
in order.
"""

from models.breeder import Breeder, Owner


def owner_differs(candidate: Owner, persisted: Owner) -> bool:
    return candidate != persisted


def breeder_differs(candidate: Breeder, persisted: Breeder) -> bool:
    """True when any breeder field or any owner (by position) differs."""
    return candidate != persisted
