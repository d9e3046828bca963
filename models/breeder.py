"""
models/breeder.py
-----------------
Domain models for breeders (kennel / affix identities) and their owners.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Owner:
    """
    A person linked to one or more breeders.

    Attributes:
        forename: Given name.
        surname: Family name.
        address: Postal address.
        email: Contact email.
        id: Database primary key (None for new records).
    """
    forename: str
    surname: str
    address: str
    email: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.forename} {self.surname} <{self.email}>"


@dataclass
class Breeder:
    """
    A registered kennel identity.

    Attributes:
        affix: Primary registered name.
        short_affix: Abbreviated form of the affix.
        website: Breeder website URL.
        owners: Linked owners, in fetch order.
        id: Database primary key (None for new records).
    """
    affix: str
    short_affix: str
    website: str
    owners: list[Owner] = field(default_factory=list)
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.affix} ({self.short_affix}) - {len(self.owners)} owner(s)"
