"""
repositories/ - Data Access Layer
==================================
Row mappers (`breeder_repo`, `owner_repo`, `association_repo`) own the SQL
for one table each and run on a caller-supplied cursor. The stores
(`breeder_store` for PostgreSQL, `memory_store` for tests) implement the
`BreederRepositoryBase` contract and decide the transaction boundaries.
"""
