"""
Turn sequencing for speaking practice.

One turn runs strictly in order: transcribe the recorded answer, build the
prompt, ask the text model for a structured reply, and either hand back the
closing feedback or synthesize the reply into a playable WAV. Nothing is
retried and nothing runs in parallel; the first failure propagates.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from interview_coach.agent.audio import wav_data_uri_from_pcm_uri
from interview_coach.agent.prompts import PRACTICE_RESPONSE_SCHEMA, build_practice_prompt
from interview_coach.agent.response_parser import parse_practice_response, strip_cues
from interview_coach.models import PracticeFeedback

logger = logging.getLogger(__name__)


@dataclass
class TurnRequest:
    scenario: str
    voice: str
    chat_history: List[Dict[str, str]] = field(default_factory=list)
    user_audio: Optional[str] = None
    topic: Optional[str] = None
    setting: Optional[str] = None
    is_random_topic: bool = False

    @classmethod
    def from_validated(cls, data: Dict[str, Any]) -> 'TurnRequest':
        return cls(
            scenario=data['scenario'],
            voice=data['voice'],
            chat_history=data.get('chat_history') or [],
            user_audio=data.get('user_audio'),
            topic=data.get('topic'),
            setting=data.get('setting'),
            is_random_topic=data.get('is_random_topic', False),
        )


@dataclass
class TurnResult:
    spoken_response: Optional[str] = None
    display_response: Optional[str] = None
    audio_data_uri: Optional[str] = None
    transcribed_user_text: Optional[str] = None
    feedback: Optional[PracticeFeedback] = None

    @property
    def is_complete(self) -> bool:
        return self.feedback is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.feedback is not None:
            return {'feedback': self.feedback.to_dict()}

        data = {
            'spokenResponse': self.spoken_response,
            'displayResponse': self.display_response,
            'audioDataUri': self.audio_data_uri,
        }
        if self.transcribed_user_text is not None:
            data['transcribedUserText'] = self.transcribed_user_text
        return data


class ConversationEngine:
    """Runs one speaking-practice turn against an AI client."""

    def __init__(self, client):
        self.client = client

    async def generate_response(self, request: TurnRequest) -> TurnResult:
        transcribed_user_text = None
        if request.user_audio:
            transcribed_user_text = await self.client.transcribe(request.user_audio)
            logger.info(f"User said: {transcribed_user_text[:80]}")

        prompt = build_practice_prompt(
            scenario=request.scenario,
            chat_history=request.chat_history,
            transcribed_user_text=transcribed_user_text,
            topic=request.topic,
            setting=request.setting,
            is_random_topic=request.is_random_topic,
        )

        payload = await self.client.generate_json(prompt, PRACTICE_RESPONSE_SCHEMA, operation="practice")
        reply = parse_practice_response(payload)

        if reply.is_session_complete:
            if reply.feedback is not None:
                logger.info("Practice session complete, returning feedback")
                return TurnResult(feedback=reply.feedback)
            logger.warning("Model marked the session complete without feedback, continuing the conversation")

        display_response = strip_cues(reply.response)
        pcm_uri = await self.client.synthesize_speech(reply.response, request.voice)
        audio_data_uri = wav_data_uri_from_pcm_uri(pcm_uri)

        return TurnResult(
            spoken_response=reply.response,
            display_response=display_response,
            audio_data_uri=audio_data_uri,
            transcribed_user_text=transcribed_user_text,
        )
