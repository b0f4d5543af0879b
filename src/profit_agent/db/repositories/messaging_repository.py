"""Repositories for coach chat history, pairing codes and channel links."""

from datetime import datetime
from typing import List, Optional

from .base import SQLiteRepository, as_bool
from ...models.messaging import ChannelLink, ChatTurn, PairingCode


class ChatRepository(SQLiteRepository[ChatTurn]):
    """Append-only conversation log per athlete."""

    def append(self, turn: ChatTurn) -> ChatTurn:
        with self._get_connection("append_chat_turn") as conn:
            conn.execute(
                """
                INSERT INTO chat_turns (athlete_id, role, content, timestamp)
                VALUES (?, ?, ?, ?)
                """,
                (turn.athlete_id, turn.role.value, turn.content, turn.timestamp.isoformat()),
            )
        return turn

    def recent(self, athlete_id: str, limit: int = 20) -> List[ChatTurn]:
        """Last ``limit`` turns in chronological order."""
        with self._get_connection("recent_chat_turns") as conn:
            rows = conn.execute(
                """
                SELECT athlete_id, role, content, timestamp FROM chat_turns
                WHERE athlete_id = ? ORDER BY id DESC LIMIT ?
                """,
                (athlete_id, limit),
            ).fetchall()
        return [ChatTurn(**dict(r)) for r in reversed(rows)]


class PairingRepository(SQLiteRepository[PairingCode]):
    """Pairing codes and the channel links they produce."""

    def add_code(self, code: PairingCode) -> PairingCode:
        with self._get_connection("add_pairing_code") as conn:
            conn.execute(
                """
                INSERT INTO pairing_codes (id, athlete_id, code, expires_at, consumed_at, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    code.id,
                    code.athlete_id,
                    code.code,
                    code.expires_at.isoformat(),
                    code.consumed_at.isoformat() if code.consumed_at else None,
                    code.created_at.isoformat(),
                ),
            )
        return code

    def consume_unused(self, athlete_id: str, now: datetime) -> int:
        """Mark every unconsumed code of the athlete as consumed."""
        with self._get_connection("consume_unused_codes") as conn:
            cursor = conn.execute(
                """
                UPDATE pairing_codes SET consumed_at = ?
                WHERE athlete_id = ? AND consumed_at IS NULL
                """,
                (now.isoformat(), athlete_id),
            )
            return cursor.rowcount

    def find_code(self, code: str) -> Optional[PairingCode]:
        """Newest code row with this value, consumed or not."""
        with self._get_connection("find_pairing_code") as conn:
            row = conn.execute(
                """
                SELECT * FROM pairing_codes WHERE code = ?
                ORDER BY consumed_at IS NOT NULL, created_at DESC LIMIT 1
                """,
                (code,),
            ).fetchone()
        return PairingCode(**dict(row)) if row else None

    def consume(self, code_id: str, now: datetime) -> bool:
        """Consume a still-unused code. False if someone else got there first."""
        with self._get_connection("consume_pairing_code") as conn:
            cursor = conn.execute(
                "UPDATE pairing_codes SET consumed_at = ? WHERE id = ? AND consumed_at IS NULL",
                (now.isoformat(), code_id),
            )
            return cursor.rowcount == 1

    def upsert_link(self, link: ChannelLink) -> ChannelLink:
        """Link the identity to the athlete, replacing any previous mapping of either side."""
        with self._get_connection("upsert_channel_link") as conn:
            conn.execute(
                "DELETE FROM channel_links WHERE channel_type = ? AND channel_identifier = ?",
                (link.channel_type, link.channel_identifier),
            )
            conn.execute(
                """
                INSERT INTO channel_links (athlete_id, channel_type, channel_identifier, verified)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(athlete_id, channel_type) DO UPDATE SET
                    channel_identifier = excluded.channel_identifier,
                    verified = excluded.verified
                """,
                (link.athlete_id, link.channel_type, link.channel_identifier, int(link.verified)),
            )
        return link

    def find_link(self, channel_type: str, channel_identifier: str) -> Optional[ChannelLink]:
        with self._get_connection("find_channel_link") as conn:
            row = conn.execute(
                """
                SELECT * FROM channel_links
                WHERE channel_type = ? AND channel_identifier = ? AND verified = 1
                """,
                (channel_type, channel_identifier),
            ).fetchone()
        if not row:
            return None
        data = dict(row)
        data["verified"] = as_bool(data["verified"])
        return ChannelLink(**data)
