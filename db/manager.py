"""Database manager for SQLite connections, paths and schema migrations."""

import sqlite3
from contextlib import contextmanager
from typing import List, Set

from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger()


class DatabaseManager:
    """Manages database connections, paths and migrations.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Changes not committed before the block ends are discarded on close.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        return self.config.db_path

    def get_migrations_dir(self):
        return get_migrations_dir()

    def available_migrations(self) -> List[str]:
        """List migration file names in apply order."""
        migrations_dir = self.get_migrations_dir()
        if not migrations_dir.exists():
            return []
        return sorted(path.name for path in migrations_dir.glob("*.sql"))

    def applied_migrations(self, conn) -> Set[str]:
        """Get the names of migrations recorded as applied.

        Creates the bookkeeping table on first use.
        """
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_migrations (
                migration_file TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        cursor = conn.execute("SELECT migration_file FROM schema_migrations")
        return {row[0] for row in cursor.fetchall()}

    def apply_migrations(self) -> List[str]:
        """Apply every pending migration.

        Returns:
            Names of the migrations applied by this call.

        Raises:
            sqlite3.Error: If a migration fails; it is rolled back and later
                migrations are not attempted.
        """
        applied_now = []
        with self.connect() as conn:
            applied = self.applied_migrations(conn)
            pending = [m for m in self.available_migrations() if m not in applied]

            for migration in pending:
                sql = (self.get_migrations_dir() / migration).read_text()
                try:
                    conn.executescript(sql)
                    conn.execute(
                        "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                        (migration,),
                    )
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    logger.error(f"Error applying migration {migration}: {e}")
                    raise
                logger.info(f"Applied migration: {migration}")
                applied_now.append(migration)

        return applied_now
