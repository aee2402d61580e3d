"""Voice session models."""
from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SessionState(str, Enum):
    """Lifecycle of one voice session."""

    IDLE = "idle"  # No session, or connecting until the provider confirms
    ACTIVE = "active"  # Connected, nobody speaking yet
    SPEAKING = "speaking"  # Agent is speaking
    LISTENING = "listening"  # Agent finished speaking, waiting for the user
    ENDED = "ended"  # Call over, reverts to IDLE after a short delay

    @property
    def is_active(self) -> bool:
        return self in (SessionState.ACTIVE, SessionState.SPEAKING, SessionState.LISTENING)

    def __str__(self) -> str:
        """Return the string value of the state."""
        return self.value


class TranscriptEntry(BaseModel):
    """One transcribed utterance."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "agent"]
    text: str
    timestamp: int  # Milliseconds since the epoch


class SessionSnapshot(BaseModel):
    """Read-only view of a voice session for the presentation layer."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    transcript: Tuple[TranscriptEntry, ...] = ()
    error: Optional[str] = None

    @property
    def speaking(self) -> bool:
        return self.state == SessionState.SPEAKING

    @property
    def listening(self) -> bool:
        return self.state == SessionState.LISTENING

    @property
    def is_connected(self) -> bool:
        return self.state.is_active
