"""
repositories/validation.py
--------------------------
Required-field checks run before any write is issued.
"""

from models.breeder import Breeder, Owner
from repositories.errors import ValidationError

_OWNER_FIELDS = ("forename", "surname", "address", "email")
_BREEDER_FIELDS = ("affix", "short_affix", "website")


def _empty_fields(obj, names: tuple[str, ...]) -> list[str]:
    return [name for name in names if not getattr(obj, name)]


def validate_owner(owner: Owner) -> None:
    """Raise ValidationError if any owner field is empty."""
    missing = _empty_fields(owner, _OWNER_FIELDS)
    if missing:
        raise ValidationError("owner", missing)


def validate_breeder(breeder: Breeder, require_owners: bool = True) -> None:
    """
    Raise ValidationError if a breeder field is empty, if the breeder has
    no owners (when ``require_owners``), or if any of its owners is invalid.
    """
    missing = _empty_fields(breeder, _BREEDER_FIELDS)
    if require_owners and not breeder.owners:
        missing.append("owners")
    if missing:
        raise ValidationError("breeder", missing)
    for owner in breeder.owners:
        validate_owner(owner)
