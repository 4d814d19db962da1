"""Document store service backed by SQLite.

Records are stored as JSON documents keyed by entity type and owner. The
service knows nothing about the shape of a record beyond its owner_id.
"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from errors import PersistenceError
from logger import get_logger

logger = get_logger()

EXPENSES = "expenses"
UNSORTED_EXPENSES = "unsorted_expenses"
CARTS = "carts"
SALARY_PERIODS = "salary_periods"
USER_SETTINGS = "user_settings"

ENTITY_TYPES = (EXPENSES, UNSORTED_EXPENSES, CARTS, SALARY_PERIODS, USER_SETTINGS)


class DocumentService:
    """Service for reading and writing documents.

    Each call runs in its own connection and commits on its own, unless it is
    made inside ``atomic()``, in which case all calls share one connection and
    commit or roll back together.
    """

    def __init__(self, db_manager):
        """Initialize the document service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager
        self._conn = None

    @contextmanager
    def atomic(self):
        """Group several writes into one transaction.

        Nested use joins the outer transaction.

        Raises:
            Exception: Whatever the block raised, after rolling back.
        """
        if self._conn is not None:
            yield
            return

        with self.db_manager.connect() as conn:
            self._conn = conn
            try:
                yield
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._conn = None

    @contextmanager
    def _connection(self):
        if self._conn is not None:
            yield self._conn
            return

        with self.db_manager.connect() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def list(self, entity_type: str, owner_id: str) -> List[dict]:
        """Get all documents of a type owned by a user.

        Args:
            entity_type: One of ENTITY_TYPES.
            owner_id: ID of the owning user.

        Returns:
            List of records with their "id" key set, in insertion order.
        """
        _check_entity_type(entity_type)
        with self._connection() as conn:
            cursor = conn.execute(
                """
                SELECT id, data FROM documents
                WHERE entity_type = ? AND owner_id = ?
                ORDER BY rowid
                """,
                (entity_type, owner_id),
            )
            return [_to_record(row[0], row[1]) for row in cursor.fetchall()]

    def find(self, entity_type: str, doc_id: str) -> Optional[dict]:
        """Get a single document by ID.

        Returns:
            The record with its "id" key set, or None if not found.
        """
        _check_entity_type(entity_type)
        with self._connection() as conn:
            cursor = conn.execute(
                "SELECT id, data FROM documents WHERE entity_type = ? AND id = ?",
                (entity_type, doc_id),
            )
            row = cursor.fetchone()
            if row:
                return _to_record(row[0], row[1])
            return None

    def create(self, entity_type: str, record: dict, doc_id: Optional[str] = None) -> str:
        """Store a new document.

        Args:
            entity_type: One of ENTITY_TYPES.
            record: Document body; must contain "owner_id". An "id" key is ignored.
            doc_id: Explicit document ID. A random one is assigned if omitted.

        Returns:
            The document ID.

        Raises:
            sqlite3.IntegrityError: If doc_id is already taken.
        """
        _check_entity_type(entity_type)
        doc_id = doc_id or uuid.uuid4().hex
        body = {key: value for key, value in record.items() if key != "id"}

        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO documents (id, entity_type, owner_id, data)
                VALUES (?, ?, ?, ?)
                """,
                (doc_id, entity_type, body["owner_id"], json.dumps(body)),
            )
        return doc_id

    def update(self, entity_type: str, doc_id: str, partial: dict) -> bool:
        """Merge fields into an existing document.

        Top-level keys of partial replace the stored ones; nested values are
        replaced whole.

        Returns:
            True if the document was updated, False if not found.
        """
        _check_entity_type(entity_type)
        with self._connection() as conn:
            cursor = conn.execute(
                "SELECT data FROM documents WHERE entity_type = ? AND id = ?",
                (entity_type, doc_id),
            )
            row = cursor.fetchone()
            if row is None:
                return False

            body = json.loads(row[0])
            body.update({key: value for key, value in partial.items() if key != "id"})
            conn.execute(
                """
                UPDATE documents SET data = ?, updated_at = ?
                WHERE entity_type = ? AND id = ?
                """,
                (json.dumps(body), datetime.now().isoformat(), entity_type, doc_id),
            )
            return True

    def delete(self, entity_type: str, doc_id: str) -> bool:
        """Delete a document by ID.

        Returns:
            True if the document was deleted, False if not found.
        """
        _check_entity_type(entity_type)
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE entity_type = ? AND id = ?",
                (entity_type, doc_id),
            )
            return cursor.rowcount > 0


@contextmanager
def persistence_errors(action: str):
    """Translate database failures into PersistenceError.

    Args:
        action: What was attempted, e.g. "sort expense".

    Raises:
        PersistenceError: If the block raised sqlite3.Error.
    """
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Failed to {action}: {e}")
        raise PersistenceError(f"Failed to {action}. Please try again.") from e


def _check_entity_type(entity_type: str) -> None:
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity type: {entity_type}")


def _to_record(doc_id: str, data: str) -> dict:
    record = json.loads(data)
    record["id"] = doc_id
    return record
