"""Coach conversation turns and messaging-channel pairing records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    """One append-only turn of the coach conversation."""
    athlete_id: str
    role: ChatRole
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.role, str):
            object.__setattr__(self, "role", ChatRole(self.role))
        if isinstance(self.timestamp, str):
            object.__setattr__(self, "timestamp", datetime.fromisoformat(self.timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PairingCode:
    """One-time code linking a chat channel identity to an athlete."""
    athlete_id: str
    code: str
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        for name in ("expires_at", "consumed_at", "created_at"):
            value = getattr(self, name)
            if isinstance(value, str):
                setattr(self, name, datetime.fromisoformat(value))

    def is_usable(self, now: datetime) -> bool:
        return self.consumed_at is None and self.expires_at > now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "expires_at": self.expires_at.isoformat(),
        }


@dataclass
class ChannelLink:
    """Verified mapping from a chat identity (e.g. telegram chat id) to an athlete."""
    athlete_id: str
    channel_type: str
    channel_identifier: str
    verified: bool = True
