from unittest.mock import MagicMock

import psycopg2
import pytest
from psycopg2 import errors as pg_errors

from db.context import QueryContext
from repositories.errors import ConflictError, NotFoundError, StoreError, ValidationError

from tests.conftest import make_breeder, make_owner


def _executed(cursor) -> list[str]:
    return [" ".join(c.args[0].split()) for c in cursor.execute.call_args_list]


class TestCreate:

    def test_create_breeder_inserts_breeder_owners_and_links(self, sql_store, cursor):
        cursor.fetchone.side_effect = [(7,), (11,), (12,)]
        breeder = make_breeder(owners=[make_owner(), make_owner(forename="John")])

        result = sql_store.create_breeder(breeder)

        assert result is breeder
        assert breeder.id == 7
        assert [o.id for o in breeder.owners] == [11, 12]
        statements = _executed(cursor)
        assert statements[0].startswith("INSERT INTO breeders")
        assert statements[1].startswith("INSERT INTO owners")
        assert statements[2].startswith("INSERT INTO breeder_owners")
        assert statements[3].startswith("INSERT INTO owners")
        assert statements[4].startswith("INSERT INTO breeder_owners")
        assert cursor.execute.call_args_list[2].args[1] == (7, 11)
        assert cursor.execute.call_args_list[4].args[1] == (7, 12)

    def test_invalid_breeder_issues_no_statement(self, sql_store, cursor):
        with pytest.raises(ValidationError):
            sql_store.create_breeder(make_breeder(website=""))
        cursor.execute.assert_not_called()

    def test_failed_owner_insert_clears_assigned_ids(self, sql_store, cursor):
        def execute(sql, params=None):
            if "INSERT INTO owners" in sql:
                raise psycopg2.OperationalError("connection lost")

        cursor.execute.side_effect = execute
        cursor.fetchone.return_value = (7,)
        breeder = make_breeder()

        with pytest.raises(StoreError) as exc:
            sql_store.create_breeder(breeder)

        assert isinstance(exc.value.cause, psycopg2.OperationalError)
        assert exc.value.operation == "create breeder"
        assert breeder.id is None
        assert breeder.owners[0].id is None

    def test_create_owner_requires_active_breeder(self, sql_store, cursor):
        cursor.fetchone.return_value = None
        owner = make_owner()

        with pytest.raises(NotFoundError):
            sql_store.create_owner(5, owner)

        assert owner.id is None
        assert not any(s.startswith("INSERT") for s in _executed(cursor))

    def test_create_owner_does_not_link(self, sql_store, cursor):
        cursor.fetchone.side_effect = [(1,), (21,)]
        owner = sql_store.create_owner(5, make_owner())

        assert owner.id == 21
        assert not any("breeder_owners" in s for s in _executed(cursor))

    def test_create_owner_validates_first(self, sql_store, cursor):
        with pytest.raises(ValidationError):
            sql_store.create_owner(5, make_owner(surname=""))
        cursor.execute.assert_not_called()


class TestAssociations:

    def test_associate(self, sql_store, cursor):
        cursor.fetchone.side_effect = [(1,), (1,), None]
        sql_store.associate_breeder_owner(3, 4)
        assert _executed(cursor)[-1].startswith("INSERT INTO breeder_owners")

    def test_duplicate_associate_conflicts(self, sql_store, cursor):
        cursor.fetchone.side_effect = [(1,), (1,), (1,)]
        with pytest.raises(ConflictError):
            sql_store.associate_breeder_owner(3, 4)
        assert not any(s.startswith("INSERT") for s in _executed(cursor))

    def test_unique_violation_race_maps_to_conflict(self, sql_store, cursor):
        def execute(sql, params=None):
            if sql.startswith("INSERT INTO breeder_owners"):
                raise pg_errors.UniqueViolation("duplicate key")

        cursor.execute.side_effect = execute
        cursor.fetchone.side_effect = [(1,), (1,), None]
        with pytest.raises(ConflictError):
            sql_store.associate_breeder_owner(3, 4)

    def test_associate_unknown_owner(self, sql_store, cursor):
        cursor.fetchone.side_effect = [(1,), None]
        with pytest.raises(NotFoundError) as exc:
            sql_store.associate_breeder_owner(3, 4)
        assert exc.value.entity == "owner"

    def test_unassociate_missing_link_is_noop(self, sql_store, cursor):
        cursor.rowcount = 0
        sql_store.unassociate_breeder_owner(3, 4)
        sql_store.unassociate_breeder_owner(3, 4)
        assert _executed(cursor) == [
            "DELETE FROM breeder_owners WHERE breeder_id = %s AND owner_id = %s;",
        ] * 2

    def test_is_associated(self, sql_store, cursor):
        cursor.fetchone.return_value = (1,)
        assert sql_store.is_associated(3, 4)
        cursor.fetchone.return_value = None
        assert not sql_store.is_associated(3, 5)

    def test_is_associated_ignores_inactive_rows(self, sql_store, cursor):
        cursor.fetchone.return_value = None
        assert not sql_store.is_associated(3, 4)
        sql = _executed(cursor)[0]
        assert "b.active = TRUE" in sql
        assert "o.active = TRUE" in sql


class TestRead:

    def test_get_breeder_includes_owners(self, sql_store, cursor):
        cursor.fetchone.return_value = (7, "Ashworth", "ASH", "ashworth.example")
        cursor.fetchall.return_value = [(11, "Jane", "Doe", "1 Elm St", "jane@example.com")]

        breeder = sql_store.get_breeder(7)

        assert breeder == make_breeder(id=7, owners=[make_owner(id=11)])
        assert all("active = TRUE" in s for s in _executed(cursor))

    def test_get_missing_breeder(self, sql_store, cursor):
        with pytest.raises(NotFoundError):
            sql_store.get_breeder(99)

    def test_get_owner(self, sql_store, cursor):
        cursor.fetchone.return_value = (11, "Jane", "Doe", "1 Elm St", "jane@example.com")
        assert sql_store.get_owner(11) == make_owner(id=11)

    def test_get_missing_owner(self, sql_store, cursor):
        with pytest.raises(NotFoundError):
            sql_store.get_owner(99)

    def test_get_owners_by_unknown_breeder(self, sql_store, cursor):
        with pytest.raises(NotFoundError):
            sql_store.get_owners_by_breeder(99)


class TestUpdate:

    def test_update_owner_missing(self, sql_store, cursor):
        cursor.rowcount = 0
        with pytest.raises(NotFoundError):
            sql_store.update_owner(make_owner(id=99))

    def test_update_owner(self, sql_store, cursor):
        cursor.rowcount = 1
        owner = make_owner(id=11, email="new@example.com")
        assert sql_store.update_owner(owner) is owner
        assert cursor.execute.call_args.args[1] == ("Jane", "Doe", "1 Elm St", "new@example.com", 11)

    def test_update_breeder_updates_each_owner(self, sql_store, cursor):
        cursor.rowcount = 1
        breeder = make_breeder(id=7, owners=[make_owner(id=11), make_owner(id=12)])

        sql_store.update_breeder(breeder)

        statements = _executed(cursor)
        assert statements[0].startswith("UPDATE breeders")
        assert [s.startswith("UPDATE owners") for s in statements[1:]] == [True, True]

    def test_update_missing_breeder_skips_owners(self, sql_store, cursor):
        cursor.rowcount = 0
        with pytest.raises(NotFoundError):
            sql_store.update_breeder(make_breeder(id=7, owners=[make_owner(id=11)]))
        assert len(_executed(cursor)) == 1


class TestDelete:

    def test_delete_breeder_is_soft(self, sql_store, cursor):
        cursor.rowcount = 1
        sql_store.delete_breeder(7)
        assert _executed(cursor)[0].startswith("UPDATE breeders SET active = FALSE")

    def test_delete_twice_is_idempotent(self, sql_store, cursor):
        cursor.rowcount = 0
        sql_store.delete_owner(7)
        sql_store.delete_owner(7)
        assert all(s.startswith("UPDATE owners SET active = FALSE") for s in _executed(cursor))


class TestChangeDetection:

    def test_unchanged_breeder(self, sql_store, cursor):
        cursor.fetchone.return_value = (7, "Ashworth", "ASH", "ashworth.example")
        cursor.fetchall.return_value = [(11, "Jane", "Doe", "1 Elm St", "jane@example.com")]
        candidate = make_breeder(id=7, owners=[make_owner(id=11)])
        assert sql_store.breeder_needs_update(candidate) is False

    def test_changed_owner(self, sql_store, cursor):
        cursor.fetchone.return_value = (11, "Jane", "Doe", "1 Elm St", "jane@example.com")
        assert sql_store.owner_needs_update(make_owner(id=11, surname="Smith")) is True

    def test_needs_update_on_missing_row(self, sql_store, cursor):
        with pytest.raises(NotFoundError):
            sql_store.owner_needs_update(make_owner(id=99))


class TestStoreFailures:

    def test_driver_error_is_wrapped(self, sql_store, cursor):
        cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")
        with pytest.raises(StoreError) as exc:
            sql_store.get_owner(11)
        assert exc.value.entity_id == 11
        assert exc.value.__cause__ is exc.value.cause

    def test_cancelled_context_is_store_error(self, sql_store, cursor):
        ctx = QueryContext()
        ctx.cancel()
        with pytest.raises(StoreError, match="cancelled"):
            sql_store.delete_breeder(7, ctx)
        cursor.execute.assert_not_called()


class TestCancellationMidTransaction:

    @pytest.fixture
    def pooled_store(self, monkeypatch):
        """BreederStore running real transactions on a mocked pool."""
        import db.connection as connection
        from repositories.breeder_store import BreederStore

        mock_pool = MagicMock()
        cur = mock_pool.getconn.return_value.cursor.return_value.__enter__.return_value
        cur.fetchone.return_value = (7,)
        monkeypatch.setattr(connection, "_pool", mock_pool)
        return BreederStore(), mock_pool

    def test_cancel_during_create_breeder_rolls_back(self, pooled_store):
        store, mock_pool = pooled_store
        conn = mock_pool.getconn.return_value
        cur = conn.cursor.return_value.__enter__.return_value
        ctx = QueryContext()

        def execute(sql, params=None):
            if sql.lstrip().startswith("INSERT INTO breeders"):
                ctx.cancel()

        cur.execute.side_effect = execute
        breeder = make_breeder(owners=[make_owner(), make_owner(forename="John")])

        with pytest.raises(StoreError, match="cancelled"):
            store.create_breeder(breeder, ctx)

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        assert not any("INSERT INTO owners" in c.args[0] for c in cur.execute.call_args_list)
        assert breeder.id is None
        mock_pool.putconn.assert_called_once_with(conn)
