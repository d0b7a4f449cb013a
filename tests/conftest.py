import base64

import pytest

from interview_coach.agent.audio import to_data_uri
from interview_coach.core.errors import AIResponseError
from interview_coach.services.session_service import InterviewSessionService
from interview_coach.services.storage import LocalStorage

PCM_MIME = 'audio/L16;codec=pcm;rate=24000'
SAMPLE_PCM = b'\x01\x00\xff\xff' * 240
USER_AUDIO = 'data:audio/webm;codecs=opus;base64,' + base64.b64encode(b'fake recording').decode('ascii')


class FakeAIClient:
    """Stands in for GeminiClient: queued structured replies, canned transcript and PCM."""

    def __init__(self, responses=None, transcript="I led the migration to the new billing system.",
                 pcm=SAMPLE_PCM, pcm_mime=PCM_MIME):
        self.responses = list(responses or [])
        self.transcript = transcript
        self.pcm = pcm
        self.pcm_mime = pcm_mime
        self.json_calls = []
        self.transcribe_calls = []
        self.speech_calls = []
        self.speech_error = None

    def queue(self, *responses):
        self.responses.extend(responses)

    async def generate_json(self, prompt, schema, operation="generate"):
        self.json_calls.append((operation, prompt, schema))
        if not self.responses:
            raise AIResponseError("The AI model did not return a valid response.", operation=operation)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def transcribe(self, audio_data_uri):
        self.transcribe_calls.append(audio_data_uri)
        return self.transcript

    async def synthesize_speech(self, text, voice):
        self.speech_calls.append((text, voice))
        if self.speech_error is not None:
            raise self.speech_error
        return to_data_uri(self.pcm_mime, self.pcm)


@pytest.fixture
def fake_client():
    return FakeAIClient()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage"))


@pytest.fixture
def session_service(storage):
    return InterviewSessionService(storage, key="interviewHistory")


@pytest.fixture
def app(tmp_path, monkeypatch, fake_client):
    monkeypatch.setenv('STORAGE_DIR', str(tmp_path / "storage"))
    monkeypatch.setenv('FLASK_ENV', 'testing')
    monkeypatch.setenv('AI_TIMEOUT', '5')

    from interview_coach import create_app
    from interview_coach.core.config import Config

    app = create_app(config=Config(), ai_client=fake_client)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
