import logging
import threading
import uuid
from typing import Dict, Optional

from interview_coach.agent.conversation import ConversationEngine, TurnRequest, TurnResult
from interview_coach.agent.practice_session import PracticeSession
from interview_coach.core.errors import SessionError

logger = logging.getLogger(__name__)


class PracticeService:
    """In-memory registry of speaking-practice sessions. Nothing here is persisted."""

    def __init__(self, engine: ConversationEngine):
        self.engine = engine
        self._sessions: Dict[str, PracticeSession] = {}
        self._lock = threading.Lock()

    def create_session(self, scenario: str, voice: str, topic: str = '', setting: str = 'Formal') -> PracticeSession:
        session = PracticeSession(str(uuid.uuid4()), scenario, voice, topic=topic, setting=setting)
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Created practice session {session.id} ({scenario}, voice {voice})")
        return session

    def get_session(self, session_id: str) -> PracticeSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionError("Practice session not found", session_id=session_id)
        return session

    async def start_session(self, session_id: str) -> TurnResult:
        return await self.get_session(session_id).start(self.engine)

    async def send_audio(self, session_id: str, user_audio: str) -> TurnResult:
        return await self.get_session(session_id).send_audio(self.engine, user_audio)

    def end_session(self, session_id: str) -> Optional[PracticeSession]:
        session = self.get_session(session_id)
        session.end()
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.info(f"Ended practice session {session_id}")
        return session

    async def respond(self, request: TurnRequest) -> TurnResult:
        """Run one turn with the full conversation supplied by the caller."""
        return await self.engine.generate_response(request)
