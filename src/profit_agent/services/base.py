"""
Base service classes.

Services hold a TrainingStore and a logger. Business rules live in the
services; repositories only persist.
"""

from abc import ABC
from typing import Optional
import logging

from ..db.store import TrainingStore
from ..exceptions import ProfileNotFoundError, SessionNotFoundError
from ..models.plans import PlannedSession
from ..models.profile import AthleteProfile


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging setup
    - Lookups that raise domain NotFound errors
    """

    def __init__(
        self,
        store: TrainingStore,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def store(self) -> TrainingStore:
        return self._store

    def _require_profile(self, athlete_id: str) -> AthleteProfile:
        profile = self._store.profiles.get(athlete_id)
        if profile is None:
            raise ProfileNotFoundError(athlete_id)
        return profile

    def _require_session(self, athlete_id: str, session_id: str) -> PlannedSession:
        session = self._store.sessions.get(session_id)
        if session is None or session.athlete_id != athlete_id:
            raise SessionNotFoundError(session_id)
        return session
