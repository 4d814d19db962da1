"""Tests for DatabaseManager migrations."""

from db.manager import DatabaseManager


class TestDatabaseManager:
    """Tests for DatabaseManager."""

    def test_available_migrations(self, test_config):
        """Test that migration files are listed in apply order."""
        manager = DatabaseManager(test_config)

        assert manager.available_migrations() == [
            "001_create_documents.sql",
            "002_create_users.sql",
        ]

    def test_apply_migrations(self, test_config):
        """Test applying migrations to a fresh database file."""
        manager = DatabaseManager(test_config)

        applied = manager.apply_migrations()

        assert applied == manager.available_migrations()
        assert test_config.db_path.exists()
        with manager.connect() as conn:
            assert manager.applied_migrations(conn) == set(applied)
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {"documents", "users", "schema_migrations"} <= tables

    def test_apply_twice(self, test_config):
        """Test that applied migrations are not run again."""
        manager = DatabaseManager(test_config)
        manager.apply_migrations()

        assert manager.apply_migrations() == []
