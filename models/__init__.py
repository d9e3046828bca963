"""
models/ - Domain Models
=======================
Plain dataclasses for breeders and owners. Equality is structural,
which the change detector relies on.
"""
