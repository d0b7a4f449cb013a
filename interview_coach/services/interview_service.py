import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict

from interview_coach.agent.audio import wav_data_uri_from_pcm_uri
from interview_coach.agent.prompts import (
    EXPRESSIVE_TEXT_SCHEMA,
    FIRST_QUESTION_SCHEMA,
    FOLLOW_UP_SCHEMA,
    INTERVIEW_FEEDBACK_SCHEMA,
    build_expressive_text_prompt,
    build_feedback_prompt,
    build_first_question_prompt,
    build_follow_up_prompt,
    format_transcript,
)
from interview_coach.core.errors import (
    AIResponseError,
    SessionBusyError,
    SessionError,
    StateTransitionError,
    ValidationError,
    get_ai_error_message,
)
from interview_coach.models import AI_ROLE, USER_ROLE, ChatMessage, InterviewFeedback, InterviewSession
from interview_coach.services.session_service import InterviewSessionService

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class InterviewService:
    """Question-and-answer mock interview: opening question, follow-ups, feedback and spoken audio."""

    def __init__(self, client, session_service: InterviewSessionService, max_questions: int = 5,
                 default_voice: str = "Algenib"):
        self.client = client
        self.session_service = session_service
        self.max_questions = max_questions
        self.default_voice = default_voice
        self._busy = set()
        self._busy_lock = threading.Lock()

    @contextmanager
    def _busy_guard(self, session_id: str):
        with self._busy_lock:
            if session_id in self._busy:
                raise SessionBusyError(session_id)
            self._busy.add(session_id)
        try:
            yield
        finally:
            with self._busy_lock:
                self._busy.discard(session_id)

    # Model calls. These raise; the action wrappers below turn failures into results.

    async def _first_question(self, job_role: str) -> str:
        payload = await self.client.generate_json(
            build_first_question_prompt(job_role), FIRST_QUESTION_SCHEMA, operation="first_question"
        )
        question = payload.get('question')
        if not isinstance(question, str) or not question.strip():
            raise AIResponseError("The AI model did not return a valid response.", operation="first_question")
        return question.strip()

    async def _follow_up(self, job_role: str, previous_question: str, user_response: str,
                         interview_transcript: str) -> str:
        prompt = build_follow_up_prompt(job_role, previous_question, user_response, interview_transcript)
        payload = await self.client.generate_json(prompt, FOLLOW_UP_SCHEMA, operation="follow_up")
        question = payload.get('followUpQuestion')
        if not isinstance(question, str) or not question.strip():
            raise AIResponseError("The AI model did not return a valid response.", operation="follow_up")
        return question.strip()

    async def _feedback(self, interview_transcript: str, job_description: str) -> InterviewFeedback:
        prompt = build_feedback_prompt(interview_transcript, job_description)
        payload = await self.client.generate_json(prompt, INTERVIEW_FEEDBACK_SCHEMA, operation="feedback")
        return InterviewFeedback.from_dict(payload)

    async def _expressive_audio(self, text: str) -> str:
        try:
            payload = await self.client.generate_json(
                build_expressive_text_prompt(text), EXPRESSIVE_TEXT_SCHEMA, operation="expressive_text"
            )
            expressive_text = payload.get('expressiveText') or text
        except AIResponseError as e:
            logger.warning(f"Expressive rewrite unusable, speaking the original text: {e}")
            expressive_text = text

        return await self._plain_audio(expressive_text)

    async def _plain_audio(self, text: str) -> str:
        pcm_uri = await self.client.synthesize_speech(text, self.default_voice)
        return wav_data_uri_from_pcm_uri(pcm_uri)

    # Action-style entry points: {'success': True, ...} or {'success': False, 'error': ...}

    async def generate_first_question(self, job_role: str) -> Dict[str, Any]:
        try:
            return {'success': True, 'question': await self._first_question(job_role)}
        except Exception as e:
            logger.error(f"Error generating first question: {e}")
            return {'success': False, 'error': get_ai_error_message(e)}

    async def generate_follow_up(self, job_role: str, previous_question: str, user_response: str,
                                 interview_transcript: str) -> Dict[str, Any]:
        try:
            question = await self._follow_up(job_role, previous_question, user_response, interview_transcript)
            return {'success': True, 'followUpQuestion': question}
        except Exception as e:
            logger.error(f"Error generating follow-up question: {e}")
            return {'success': False, 'error': get_ai_error_message(e)}

    async def get_feedback(self, interview_transcript: str, job_description: str) -> Dict[str, Any]:
        try:
            feedback = await self._feedback(interview_transcript, job_description)
            return {'success': True, 'feedback': feedback.to_dict()}
        except Exception as e:
            logger.error(f"Error getting feedback: {e}")
            return {'success': False, 'error': get_ai_error_message(e)}

    async def get_audio(self, text: str) -> Dict[str, Any]:
        try:
            return {'success': True, 'audioDataUri': await self._expressive_audio(text)}
        except Exception as e:
            logger.error(f"Error generating audio: {e}")
            return {'success': False, 'error': get_ai_error_message(e)}

    async def voice_interaction(self, text: str) -> Dict[str, Any]:
        try:
            return {'success': True, 'audioDataUri': await self._plain_audio(text)}
        except Exception as e:
            logger.error(f"Error in voice interaction: {e}")
            return {'success': False, 'error': get_ai_error_message(e)}

    # Session flow

    async def _ai_message(self, text: str, speak: bool) -> ChatMessage:
        message = ChatMessage(role=AI_ROLE, text=text)
        if speak:
            audio = await self.get_audio(text)
            if audio['success']:
                message.audio_url = audio['audioDataUri']
            else:
                logger.warning(f"Continuing without audio: {audio['error']}")
        return message

    async def load_session(self, interview_id: str) -> InterviewSession:
        session = await self.session_service.get_session(interview_id)
        if session is None:
            raise SessionError("Interview session not found", session_id=interview_id)
        return session

    async def start_interview(self, interview_id: str, job_role: str, speak: bool = False) -> InterviewSession:
        """Resume a known interview or open a new one with its first question."""
        existing = await self.session_service.get_session(interview_id)
        if existing is not None:
            logger.info(f"Resuming interview {interview_id}")
            return existing

        with self._busy_guard(interview_id):
            question = await self._first_question(job_role)
            session = InterviewSession(
                id=interview_id,
                job_role=job_role,
                messages=[await self._ai_message(question, speak)],
                start_time=now_ms(),
            )
            await self.session_service.upsert_session(session)

        logger.info(f"Started interview {interview_id} for role '{job_role}'")
        return session

    async def submit_answer(self, interview_id: str, answer: str, speak: bool = False) -> InterviewSession:
        if not answer or not answer.strip():
            raise ValidationError("Answer must not be empty", field="answer")

        with self._busy_guard(interview_id):
            session = await self.load_session(interview_id)
            if session.is_finished:
                raise StateTransitionError("Interview is already finished", phase="finished")

            session.messages.append(ChatMessage(role=USER_ROLE, text=answer.strip()))

            if session.question_count >= self.max_questions:
                return await self._finalize(session)

            previous_question = next(
                (m.text for m in reversed(session.messages) if m.role == AI_ROLE), ''
            )
            question = await self._follow_up(
                session.job_role, previous_question, answer.strip(), format_transcript(session.messages)
            )
            session.messages.append(await self._ai_message(question, speak))
            await self.session_service.upsert_session(session)

        logger.info(f"Interview {interview_id}: question {session.question_count}/{self.max_questions}")
        return session

    async def finish_interview(self, interview_id: str) -> InterviewSession:
        with self._busy_guard(interview_id):
            session = await self.load_session(interview_id)
            if session.is_finished:
                return session
            return await self._finalize(session)

    async def _finalize(self, session: InterviewSession) -> InterviewSession:
        """End the interview; a feedback failure still records the end time."""
        try:
            session.feedback = await self._feedback(format_transcript(session.messages), session.job_role)
        except Exception as e:
            logger.error(f"Feedback generation failed for interview {session.id}: {e}")
            session.feedback = None

        session.end_time = now_ms()
        await self.session_service.upsert_session(session)
        logger.info(f"Finished interview {session.id} (feedback: {session.feedback is not None})")
        return session

    def progress(self, session: InterviewSession) -> int:
        if self.max_questions <= 0:
            return 100
        return min(100, round(session.question_count / self.max_questions * 100))

    def session_payload(self, session: InterviewSession) -> Dict[str, Any]:
        data = session.to_dict()
        data['questionCount'] = session.question_count
        data['maxQuestions'] = self.max_questions
        data['progress'] = self.progress(session)
        data['isFinished'] = session.is_finished
        return data
