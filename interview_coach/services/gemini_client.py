import logging
from typing import Any, Callable, Dict, Optional

from google import genai
from google.genai import types

from interview_coach.agent.audio import parse_data_uri, to_data_uri
from interview_coach.agent.prompts import TRANSCRIPTION_INSTRUCTION
from interview_coach.agent.response_parser import parse_json_response
from interview_coach.core.errors import AIServiceError, AIResponseError

logger = logging.getLogger(__name__)

DEFAULT_PCM_MIME = 'audio/L16;codec=pcm;rate=24000'


class GeminiClient:
    """Thin async wrapper around the Gemini text, transcription and speech endpoints."""

    def __init__(self, api_key: str, text_model: str = "gemini-2.5-flash",
                 tts_model: str = "gemini-2.5-flash-preview-tts",
                 client_factory: Optional[Callable[[], genai.Client]] = None):
        self.text_model = text_model
        self.tts_model = tts_model
        self.client_factory = client_factory or (lambda: genai.Client(api_key=api_key))

    async def _generate(self, operation: str, **kwargs):
        try:
            # Every request runs on its own event loop, so the async transport lives for one call only
            async with self.client_factory().aio as aclient:
                return await aclient.models.generate_content(**kwargs)
        except Exception as e:
            logger.error(f"Gemini {operation} request failed: {e}")
            raise AIServiceError(str(e), operation=operation) from e

    async def generate_json(self, prompt: str, schema: Dict[str, Any], operation: str = "generate") -> Dict[str, Any]:
        """Run a prompt in structured-output mode and return the parsed object."""
        response = await self._generate(
            operation,
            model=self.text_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return parse_json_response(response.text)

    async def transcribe(self, audio_data_uri: str) -> str:
        """Transcribe a recorded answer posted as a data URI."""
        mime_type, audio = parse_data_uri(audio_data_uri)
        response = await self._generate(
            "transcribe",
            model=self.text_model,
            contents=[
                types.Part.from_bytes(data=audio, mime_type=mime_type.split(';')[0]),
                TRANSCRIPTION_INSTRUCTION,
            ],
        )
        transcript = (response.text or '').strip()
        logger.info(f"Transcribed {len(audio)} bytes of audio into {len(transcript)} characters")
        return transcript

    async def synthesize_speech(self, text: str, voice: str) -> str:
        """Synthesize speech and return the raw PCM as a data URI."""
        response = await self._generate(
            "synthesize",
            model=self.tts_model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                    ),
                ),
            ),
        )

        inline_data = _first_inline_data(response)
        if inline_data is None or not inline_data.data:
            raise AIResponseError("TTS model did not return audio media.", operation="synthesize")

        logger.info(f"Synthesized {len(inline_data.data)} bytes of audio with voice '{voice}'")
        return to_data_uri(inline_data.mime_type or DEFAULT_PCM_MIME, inline_data.data)


def _first_inline_data(response) -> Optional[types.Blob]:
    for candidate in response.candidates or []:
        content = candidate.content
        if not content or not content.parts:
            continue
        for part in content.parts:
            if part.inline_data is not None:
                return part.inline_data
    return None


def create_gemini_client(config) -> GeminiClient:
    if not config.GEMINI_API_KEY:
        raise AIServiceError("GEMINI_API_KEY is not configured", operation="configure")
    return GeminiClient(
        api_key=config.GEMINI_API_KEY,
        text_model=config.TEXT_MODEL,
        tts_model=config.TTS_MODEL,
    )
