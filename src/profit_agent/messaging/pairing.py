"""One-time pairing codes linking a chat identity to an athlete."""

from datetime import datetime, timedelta
from typing import Optional
import logging
import secrets

from ..db.store import TrainingStore
from ..exceptions import PairingCodeError
from ..models.messaging import ChannelLink, PairingCode
from ..services.base import BaseService

DEFAULT_CODE_TTL_MINUTES = 10


def generate_code() -> str:
    """Random six-digit code without a leading zero."""
    return str(100000 + secrets.randbelow(900000))


class PairingService(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        ttl_minutes: int = DEFAULT_CODE_TTL_MINUTES,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._ttl = timedelta(minutes=ttl_minutes)

    def issue_code(self, athlete_id: str, now: Optional[datetime] = None) -> PairingCode:
        """Invalidate the athlete's outstanding codes and issue a fresh one."""
        now = now or datetime.now()
        revoked = self._store.pairing.consume_unused(athlete_id, now)
        code = PairingCode(
            athlete_id=athlete_id,
            code=generate_code(),
            expires_at=now + self._ttl,
            created_at=now,
        )
        self._store.pairing.add_code(code)
        self.logger.info(f"Issued pairing code for athlete {athlete_id} ({revoked} revoked)")
        return code

    def redeem(
        self,
        code: str,
        channel_type: str,
        channel_identifier: str,
        now: Optional[datetime] = None,
    ) -> ChannelLink:
        """
        Consume a code and link the chat identity to the code's athlete.

        Raises:
            PairingCodeError: If the code is unknown, consumed or expired.
                Nothing is written in that case.
        """
        now = now or datetime.now()
        pairing = self._store.pairing.find_code(code)
        if pairing is None or pairing.consumed_at is not None:
            raise PairingCodeError()
        if pairing.expires_at <= now:
            raise PairingCodeError(expired=True)
        if not self._store.pairing.consume(pairing.id, now):
            raise PairingCodeError()

        link = ChannelLink(
            athlete_id=pairing.athlete_id,
            channel_type=channel_type,
            channel_identifier=channel_identifier,
            verified=True,
        )
        self._store.pairing.upsert_link(link)
        self.logger.info(f"Linked {channel_type} identity to athlete {pairing.athlete_id}")
        return link

    def resolve(self, channel_type: str, channel_identifier: str) -> Optional[str]:
        """Athlete id for a verified chat identity, if paired."""
        link = self._store.pairing.find_link(channel_type, channel_identifier)
        return link.athlete_id if link else None
