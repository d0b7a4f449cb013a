import logging
import threading
from typing import Any, Dict, List, Optional

from interview_coach.agent.conversation import ConversationEngine, TurnRequest, TurnResult
from interview_coach.agent.interview_state import InterviewState, SessionPhase
from interview_coach.agent.scenarios import RANDOM_SCENARIO, get_scenario
from interview_coach.core.errors import AIResponseError, SessionBusyError, StateTransitionError
from interview_coach.models import ASSISTANT_ROLE, USER_ROLE, ChatMessage, PracticeFeedback

logger = logging.getLogger(__name__)

PLAYBACK_ACTIONS = ('pause', 'resume', 'finished')


class PracticeSession:
    """
    A live speaking-practice conversation.

    Holds the chat transcript, the current phase and the closing feedback.
    Phase checks happen under a lock so that two overlapping requests cannot
    both start generating a reply.
    """

    def __init__(self, session_id: str, scenario: str, voice: str, topic: str = '', setting: str = 'Formal'):
        self.id = session_id
        self.scenario_key = scenario
        self.voice = voice
        self.topic = topic
        self.setting = setting
        self.messages: List[ChatMessage] = []
        self.feedback: Optional[PracticeFeedback] = None
        self.ended = False
        self.state = InterviewState(session_id)
        self._lock = threading.Lock()

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def is_random_topic(self) -> bool:
        return self.scenario_key == RANDOM_SCENARIO

    def _build_request(self, user_audio: Optional[str] = None) -> TurnRequest:
        return TurnRequest(
            scenario=get_scenario(self.scenario_key).persona,
            voice=self.voice,
            chat_history=[message.to_history_entry() for message in self.messages],
            user_audio=user_audio,
            topic=self.topic or None,
            setting=self.setting,
            is_random_topic=self.is_random_topic,
        )

    def _enter_processing(self, allowed):
        with self._lock:
            if self.ended:
                raise StateTransitionError("Session has ended", phase=self.phase.value)
            if self.state.is_busy:
                raise SessionBusyError(self.id)
            if self.phase not in allowed:
                raise StateTransitionError(
                    f"Cannot send a request while '{self.phase.value}'", phase=self.phase.value
                )
            self.state.begin_processing()

    def _apply_result(self, result: TurnResult):
        with self._lock:
            if self.ended:
                logger.info(f"Practice session {self.id} ended while a reply was generated, discarding it")
                return
            if result.is_complete:
                self.feedback = result.feedback
                self.state.reset()
                logger.info(f"Practice session {self.id} finished with feedback")
                return
            self.messages.append(ChatMessage(
                role=ASSISTANT_ROLE,
                text=result.display_response,
                audio_url=result.audio_data_uri,
            ))
            self.state.transition(SessionPhase.SPEAKING)

    async def start(self, engine: ConversationEngine) -> TurnResult:
        """Ask the partner for its opening line."""
        if self.messages or self.feedback is not None:
            raise StateTransitionError("Session has already started", phase=self.phase.value)
        self._enter_processing((SessionPhase.IDLE,))

        try:
            result = await engine.generate_response(self._build_request())
        except Exception:
            with self._lock:
                if not self.ended:
                    self.state.transition(SessionPhase.IDLE)
            raise

        self._apply_result(result)
        return result

    async def send_audio(self, engine: ConversationEngine, user_audio: str) -> TurnResult:
        """Submit a recorded answer and get the partner's reply."""
        if self.feedback is not None:
            raise StateTransitionError("Session is already complete", phase=self.phase.value)
        self._enter_processing((SessionPhase.LISTENING, SessionPhase.READY_TO_LISTEN))
        snapshot = list(self.messages)

        try:
            result = await engine.generate_response(self._build_request(user_audio))
            if not result.is_complete and not result.transcribed_user_text:
                raise AIResponseError("The AI model did not return a valid response.", operation="transcribe")
            with self._lock:
                if result.transcribed_user_text and not self.ended:
                    self.messages.append(ChatMessage(role=USER_ROLE, text=result.transcribed_user_text))
        except Exception:
            with self._lock:
                if not self.ended:
                    self.messages = snapshot
                    self.state.transition(SessionPhase.READY_TO_LISTEN)
            raise

        self._apply_result(result)
        return result

    def start_listening(self):
        with self._lock:
            self.state.start_listening()

    def stop_listening(self):
        with self._lock:
            self.state.stop_listening()

    def interrupt(self):
        """Cut the partner off so the user can answer right away."""
        with self._lock:
            if self.phase not in (SessionPhase.SPEAKING, SessionPhase.PAUSED):
                raise StateTransitionError("Nothing is playing", phase=self.phase.value)
            self.state.transition(SessionPhase.READY_TO_LISTEN)

    def playback(self, action: str):
        with self._lock:
            if action == 'pause':
                if self.phase != SessionPhase.SPEAKING:
                    raise StateTransitionError("Nothing is playing", phase=self.phase.value)
                self.state.transition(SessionPhase.PAUSED)
            elif action == 'resume':
                if self.phase != SessionPhase.PAUSED:
                    raise StateTransitionError("Playback is not paused", phase=self.phase.value)
                self.state.transition(SessionPhase.SPEAKING)
            elif action == 'finished':
                if self.phase not in (SessionPhase.SPEAKING, SessionPhase.PAUSED):
                    raise StateTransitionError("Nothing is playing", phase=self.phase.value)
                self.state.transition(SessionPhase.READY_TO_LISTEN)
            else:
                raise ValueError(f"Unknown playback action: {action}")

    def end(self):
        """Replies still in flight are discarded when they arrive."""
        with self._lock:
            self.ended = True
            self.state.reset()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'scenario': self.scenario_key,
            'topic': self.topic,
            'setting': self.setting,
            'voice': self.voice,
            'phase': self.phase.value,
            'messages': [message.to_dict() for message in self.messages],
        }
        if self.feedback is not None:
            data['feedback'] = self.feedback.to_dict()
        return data
