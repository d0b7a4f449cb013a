"""
Unit tests for speaking-practice turn sequencing
"""

import pytest

from interview_coach.agent.conversation import ConversationEngine, TurnRequest
from interview_coach.core.errors import AIResponseError, AIServiceError
from tests.conftest import FakeAIClient, USER_AUDIO

FEEDBACK = {
    "overallSummary": "Confident and structured.",
    "clarity": "Concise answers.",
    "relevance": "Stayed on topic.",
    "problemSolving": "Broke problems down well.",
}


def make_request(**overrides):
    data = dict(scenario="You are 'Sam', a senior engineer.", voice="Kore")
    data.update(overrides)
    return TurnRequest(**data)


class TestGenerateResponse:

    @pytest.mark.asyncio
    async def test_opening_turn_synthesizes_cue_bearing_text(self):
        client = FakeAIClient([{"response": "[short pause] Hi there, [uhm] welcome!", "isSessionComplete": False}])
        result = await ConversationEngine(client).generate_response(make_request())

        assert client.transcribe_calls == []
        assert client.speech_calls == [("[short pause] Hi there, [uhm] welcome!", "Kore")]
        assert result.spoken_response == "[short pause] Hi there, [uhm] welcome!"
        assert result.display_response == "Hi there, welcome!"
        assert "[" not in result.display_response
        assert result.audio_data_uri.startswith("data:audio/wav;base64,")
        assert result.transcribed_user_text is None
        assert result.feedback is None

    @pytest.mark.asyncio
    async def test_turn_with_audio_transcribes_first(self):
        client = FakeAIClient([{"response": "Interesting. [medium pause] Why?", "isSessionComplete": False}])
        request = make_request(
            user_audio=USER_AUDIO,
            chat_history=[{"role": "assistant", "content": "Tell me about yourself."}],
        )
        result = await ConversationEngine(client).generate_response(request)

        assert client.transcribe_calls == [USER_AUDIO]
        operation, prompt, _ = client.json_calls[0]
        assert operation == "practice"
        assert "user: I led the migration to the new billing system." in prompt
        assert "assistant: Tell me about yourself." in prompt
        assert result.transcribed_user_text == "I led the migration to the new billing system."
        assert result.display_response == "Interesting. Why?"

    @pytest.mark.asyncio
    async def test_complete_session_returns_feedback_without_synthesis(self):
        client = FakeAIClient([{
            "response": "That's all I need. [short pause] Thanks!",
            "isSessionComplete": True,
            "feedback": FEEDBACK,
        }])
        result = await ConversationEngine(client).generate_response(make_request(user_audio=USER_AUDIO))

        assert client.speech_calls == []
        assert result.is_complete
        assert result.feedback.overall_summary == "Confident and structured."
        assert result.to_dict() == {"feedback": FEEDBACK}

    @pytest.mark.asyncio
    async def test_complete_without_feedback_keeps_talking(self):
        client = FakeAIClient([{"response": "[sigh] One more thing.", "isSessionComplete": True}])
        result = await ConversationEngine(client).generate_response(make_request())

        assert len(client.speech_calls) == 1
        assert result.feedback is None
        assert result.display_response == "One more thing."

    @pytest.mark.asyncio
    async def test_empty_model_output_raises(self):
        client = FakeAIClient([])
        with pytest.raises(AIResponseError):
            await ConversationEngine(client).generate_response(make_request())
        assert client.speech_calls == []

    @pytest.mark.asyncio
    async def test_synthesis_failure_propagates(self):
        client = FakeAIClient([{"response": "Hello.", "isSessionComplete": False}])
        client.speech_error = AIServiceError("429 RESOURCE_EXHAUSTED", operation="synthesize")
        with pytest.raises(AIServiceError):
            await ConversationEngine(client).generate_response(make_request())

    @pytest.mark.asyncio
    async def test_result_to_dict_uses_camel_case(self):
        client = FakeAIClient([{"response": "Hi.", "isSessionComplete": False}])
        data = (await ConversationEngine(client).generate_response(make_request(user_audio=USER_AUDIO))).to_dict()
        assert set(data) == {"spokenResponse", "displayResponse", "audioDataUri", "transcribedUserText"}
