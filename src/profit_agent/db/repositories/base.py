"""Base repository classes.

Every repository owns a SQLite file path and opens a short-lived connection
per operation, so each call is independently committed. There is no
cross-call transaction: a logical operation that spans several calls is a
chain of separate commits.
"""

from abc import ABC
from contextlib import contextmanager
from pathlib import Path
from typing import Generic, Iterator, Optional, TypeVar, Union
import logging
import sqlite3

from ..schema import SCHEMA
from ...exceptions import DatabaseError

# Type variable for the entity type stored in the repository
T = TypeVar("T")

logger = logging.getLogger(__name__)


class SQLiteRepository(ABC, Generic[T]):
    """
    Abstract base for SQLite-backed repositories.

    Type Parameters:
        T: The type of entity stored in this repository
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize the repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._ensure_schema()

    @contextmanager
    def _get_connection(self, operation: str = "query") -> Iterator[sqlite3.Connection]:
        """
        Get database connection with context manager.

        sqlite errors are wrapped in DatabaseError tagged with ``operation``.
        """
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise DatabaseError(
                message=f"Could not open database: {e}",
                operation=operation,
            ) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"{self.__class__.__name__}.{operation} failed: {e}")
            raise DatabaseError(
                message=f"{operation} failed: {e}",
                operation=f"{self.__class__.__name__}.{operation}",
            ) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        """Create tables if they do not exist yet."""
        with self._get_connection("ensure_schema") as conn:
            conn.executescript(SCHEMA)


def as_bool(value: Optional[int]) -> bool:
    return bool(value) if value is not None else False
