"""Voice session manager."""
import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Set

from app.core.config import settings
from app.services.call_session.capability import (
    CALL_END,
    CALL_START,
    ERROR,
    MESSAGE,
    SESSION_EVENTS,
    SPEECH_END,
    SPEECH_START,
    CapabilityFactory,
    VoiceSessionCapability,
)
from app.services.call_session.models import (
    SessionSnapshot,
    SessionState,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

INIT_ERROR = "Failed to initialize voice assistant."
START_ERROR = "Failed to start voice call. Please check your permissions."
END_ERROR = "Failed to end voice call."
CONNECTION_ERROR = "Error connecting to voice assistant. Please try again."

# Provider transcript roles mapped onto transcript entry roles
ROLE_MAP = {
    "user": "user",
    "assistant": "agent",
    "agent": "agent",
}

SnapshotListener = Callable[[SessionSnapshot], None]


class VoiceSessionManager:
    """
    Owns one live voice session and its transcript.

    State changes are driven only by events from the voice session
    capability; start() and end() merely ask the capability to act.
    Events delivered from another thread are handed over to the event loop
    the manager was started on.
    """

    def __init__(
        self,
        access_token: str,
        assistant_id: str,
        capability_factory: CapabilityFactory,
        reset_delay: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.assistant_id = assistant_id
        self.reset_delay = (
            settings.session_reset_delay_seconds if reset_delay is None else reset_delay
        )
        self._clock = clock

        self._state = SessionState.IDLE
        self._transcript: List[TranscriptEntry] = []
        self._seen: Set[str] = set()
        self._error: Optional[str] = None
        self._reset_handle: Optional[asyncio.TimerHandle] = None
        self._listeners: List[SnapshotListener] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None

        self.capability: Optional[VoiceSessionCapability] = None
        try:
            capability = capability_factory(access_token)
            self._subscribe(capability)
        except Exception as e:
            logger.error(
                f"[VOICE SESSION] Failed to initialize capability - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self._error = INIT_ERROR
            return
        self.capability = capability

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def has_pending_reset(self) -> bool:
        return self._reset_handle is not None

    def snapshot(self) -> SessionSnapshot:
        """Get an immutable view of the current session."""
        return SessionSnapshot(
            state=self._state,
            transcript=tuple(self._transcript),
            error=self._error,
        )

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback invoked with a fresh snapshot after every change."""
        self._listeners.append(listener)

    async def start(self) -> None:
        """Ask the capability to open a session with the assistant."""
        if self.capability is None:
            logger.warning("[VOICE SESSION] Start ignored - no capability available")
            return

        self._loop = asyncio.get_running_loop()

        if self._state.is_active:
            logger.info(
                f"[VOICE SESSION] Start ignored - session already {self._state}"
            )
            return

        if self._state == SessionState.ENDED:
            # Supersede the pending auto reset so it cannot clear the new session
            self._cancel_reset()
            self._reset_to_idle()

        self._error = None
        self._notify()

        logger.info(f"[VOICE SESSION] Starting session - assistant: {self.assistant_id}")
        try:
            await self.capability.start(self.assistant_id)
        except Exception as e:
            logger.error(
                f"[VOICE SESSION] Failed to start call - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self._error = START_ERROR
            self._notify()

    async def end(self) -> None:
        """Ask the capability to close the active session."""
        if self.capability is None:
            return

        if not self._state.is_active:
            logger.debug(f"[VOICE SESSION] End ignored - session is {self._state}")
            return

        logger.info("[VOICE SESSION] Ending session")
        try:
            await self.capability.stop()
        except Exception as e:
            logger.error(
                f"[VOICE SESSION] Failed to end call - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self._error = END_ERROR
            self._notify()

    async def close(self) -> None:
        """Tear down the manager, always asking the capability to stop."""
        self._cancel_reset()
        if self.capability is None:
            return

        try:
            await self.capability.stop()
        except Exception as e:
            logger.error(
                f"[VOICE SESSION] Failed to stop capability on close - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )

    async def __aenter__(self) -> "VoiceSessionManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _subscribe(self, capability: VoiceSessionCapability) -> None:
        handlers: Dict[str, Callable[[Any], None]] = {
            CALL_START: self._on_call_start,
            CALL_END: self._on_call_end,
            SPEECH_START: self._on_speech_start,
            SPEECH_END: self._on_speech_end,
            MESSAGE: self._on_message,
            ERROR: self._on_error,
        }
        for event in SESSION_EVENTS:
            capability.on(event, self._guarded(event, handlers[event]))

    def _guarded(
        self, event: str, handler: Callable[[Any], None]
    ) -> Callable[..., None]:
        """Wrap an event handler so failures become session errors."""

        def deliver(*args: Any) -> None:
            try:
                handler(args[0] if args else None)
            except Exception as e:
                logger.error(
                    f"[VOICE SESSION] Error handling '{event}' event - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                self._error = CONNECTION_ERROR
            self._notify()

        def dispatch(*args: Any) -> None:
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None

            if running is None and self._loop is not None:
                self._loop.call_soon_threadsafe(deliver, *args)
                return
            if running is not None:
                self._loop = running
            deliver(*args)

        return dispatch

    def _on_call_start(self, payload: Any = None) -> None:
        logger.info("[VOICE SESSION] Call started")
        self._cancel_reset()
        self._state = SessionState.ACTIVE
        self._transcript = []
        self._seen.clear()
        self._error = None

    def _on_call_end(self, payload: Any = None) -> None:
        logger.info("[VOICE SESSION] Call ended")
        loop = self._loop or asyncio.get_running_loop()
        self._cancel_reset()
        self._reset_handle = loop.call_later(self.reset_delay, self._on_reset_timer)
        self._state = SessionState.ENDED
        self._seen.clear()

    def _on_speech_start(self, payload: Any = None) -> None:
        if not self._state.is_active:
            logger.debug(f"[VOICE SESSION] speech-start ignored while {self._state}")
            return
        self._state = SessionState.SPEAKING

    def _on_speech_end(self, payload: Any = None) -> None:
        if not self._state.is_active:
            logger.debug(f"[VOICE SESSION] speech-end ignored while {self._state}")
            return
        self._state = SessionState.LISTENING

    def _on_message(self, message: Any = None) -> None:
        if not self._state.is_active:
            return
        if not isinstance(message, dict) or message.get("type") != "transcript":
            return

        role = ROLE_MAP.get(str(message.get("role", "")).lower())
        if role is None:
            logger.debug(
                f"[VOICE SESSION] Transcript with unknown role ignored: {message.get('role')}"
            )
            return

        text = (message.get("transcript") or "").strip()
        if not text:
            return

        key = f"{role}|{text}"
        if key in self._seen:
            return

        self._seen.add(key)
        self._transcript.append(
            TranscriptEntry(role=role, text=text, timestamp=int(self._clock() * 1000))
        )

    def _on_error(self, payload: Any = None) -> None:
        logger.error(f"[VOICE SESSION] Voice platform error: {payload}")
        self._error = CONNECTION_ERROR

    def _on_reset_timer(self) -> None:
        self._reset_handle = None
        self._reset_to_idle()
        self._notify()

    def _reset_to_idle(self) -> None:
        if self._state != SessionState.ENDED:
            return
        self._state = SessionState.IDLE
        self._transcript = []
        self._seen.clear()

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(
                    f"[VOICE SESSION] Snapshot listener failed - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
