"""SQLite persistence layer."""

from .schema import SCHEMA
from .store import TrainingStore

__all__ = ["SCHEMA", "TrainingStore"]
