"""Voice session capability interface."""
from abc import ABC, abstractmethod
from typing import Any, Callable

EventHandler = Callable[..., None]

CALL_START = "call-start"
CALL_END = "call-end"
SPEECH_START = "speech-start"
SPEECH_END = "speech-end"
MESSAGE = "message"
ERROR = "error"

SESSION_EVENTS = (CALL_START, CALL_END, SPEECH_START, SPEECH_END, MESSAGE, ERROR)


class VoiceSessionCapability(ABC):
    """
    Real-time voice session provided by the voice platform SDK.

    Implementations emit, in order, "call-start", any number of
    "speech-start"/"speech-end" pairs interleaved with "message" events,
    and one terminal "call-end". "error" may be emitted at any time.
    """

    @abstractmethod
    async def start(self, target: str) -> Any:
        """Open a session with the given assistant. Returns once accepted."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Close the current session."""
        pass

    @abstractmethod
    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a session event."""
        pass


# Builds a capability from an access token
CapabilityFactory = Callable[[str], VoiceSessionCapability]
