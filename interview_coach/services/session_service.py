import logging
from typing import Any, Dict, List, Optional

from interview_coach.models import InterviewSession
from interview_coach.services.storage import LocalStorage

logger = logging.getLogger(__name__)

FEEDBACK_UNAVAILABLE = 'Feedback not available.'


class InterviewSessionService:
    """Interview history kept as one JSON array under a fixed storage key."""

    def __init__(self, storage: LocalStorage, key: str = "interviewHistory"):
        self.storage = storage
        self.key = key

    async def load_sessions(self) -> List[InterviewSession]:
        raw = await self.storage.get_item(self.key, [])
        if not isinstance(raw, list):
            logger.warning(f"Storage key '{self.key}' does not hold a list, ignoring it")
            return []

        sessions = []
        for entry in raw:
            try:
                sessions.append(InterviewSession.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed session record: {e}")
        return sessions

    async def get_session(self, session_id: str) -> Optional[InterviewSession]:
        for session in await self.load_sessions():
            if session.id == session_id:
                return session
        return None

    async def upsert_session(self, session: InterviewSession) -> InterviewSession:
        """Replace the stored record with the same id, or append it."""
        record = session.to_dict()

        def apply(history):
            if not isinstance(history, list):
                history = []
            for index, existing in enumerate(history):
                if isinstance(existing, dict) and existing.get('id') == session.id:
                    history[index] = record
                    return history
            history.append(record)
            return history

        await self.storage.update(self.key, apply, [])
        logger.debug(f"Saved interview session {session.id} ({len(session.messages)} messages)")
        return session

    async def list_sessions(self) -> List[InterviewSession]:
        """Newest interviews first."""
        sessions = await self.load_sessions()
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)

    async def list_summaries(self) -> List[Dict[str, Any]]:
        summaries = []
        for session in await self.list_sessions():
            summaries.append({
                'id': session.id,
                'jobRole': session.job_role,
                'startTime': session.start_time,
                'endTime': session.end_time,
                'questionCount': session.question_count,
                'feedbackExcerpt': session.feedback.overall_feedback
                if session.feedback and session.feedback.overall_feedback else FEEDBACK_UNAVAILABLE,
            })
        return summaries
