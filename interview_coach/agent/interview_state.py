import logging
from enum import Enum
from typing import Dict, Optional, Set

from interview_coach.core.errors import StateTransitionError

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    IDLE = 'idle'
    LISTENING = 'listening'
    PROCESSING = 'processing'
    SPEAKING = 'speaking'
    PAUSED = 'paused'
    READY_TO_LISTEN = 'ready_to_listen'


# Ending a session is always allowed and is handled by reset()
TRANSITIONS: Dict[SessionPhase, Set[SessionPhase]] = {
    SessionPhase.IDLE: {SessionPhase.PROCESSING},
    SessionPhase.LISTENING: {SessionPhase.PROCESSING, SessionPhase.READY_TO_LISTEN},
    SessionPhase.PROCESSING: {SessionPhase.SPEAKING, SessionPhase.READY_TO_LISTEN, SessionPhase.IDLE},
    SessionPhase.SPEAKING: {SessionPhase.PAUSED, SessionPhase.READY_TO_LISTEN},
    SessionPhase.PAUSED: {SessionPhase.SPEAKING, SessionPhase.READY_TO_LISTEN},
    SessionPhase.READY_TO_LISTEN: {SessionPhase.LISTENING, SessionPhase.PROCESSING},
}


class InterviewState:
    """Phase tracking for one speaking-practice session."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id
        self.phase = SessionPhase.IDLE
        self.is_recording = False

    @property
    def is_busy(self) -> bool:
        return self.phase == SessionPhase.PROCESSING

    def can_transition(self, target: SessionPhase) -> bool:
        return target in TRANSITIONS[self.phase]

    def transition(self, target: SessionPhase) -> SessionPhase:
        if not self.can_transition(target):
            raise StateTransitionError(
                f"Cannot move from '{self.phase.value}' to '{target.value}'",
                phase=self.phase.value,
            )
        logger.debug(f"Session {self.session_id}: {self.phase.value} -> {target.value}")
        self.phase = target
        return self.phase

    def begin_processing(self):
        if self.is_busy:
            raise StateTransitionError("A response is already being generated", phase=self.phase.value)
        self.transition(SessionPhase.PROCESSING)
        self.is_recording = False

    def start_listening(self):
        """Only one recorder may be open at a time."""
        if self.is_recording:
            raise StateTransitionError("Already listening", phase=self.phase.value)
        self.transition(SessionPhase.LISTENING)
        self.is_recording = True

    def stop_listening(self):
        if not self.is_recording:
            raise StateTransitionError("Not listening", phase=self.phase.value)
        self.is_recording = False
        self.transition(SessionPhase.READY_TO_LISTEN)

    def reset(self):
        self.is_recording = False
        self.phase = SessionPhase.IDLE
