import re
from typing import Dict, Any, List
from interview_coach.core.errors import ValidationError
from interview_coach.agent.scenarios import SCENARIOS, VOICE_NAMES, SETTINGS

PRACTICE_ROLES = ('user', 'assistant')

class InputValidator:
    """Input validation and sanitization utilities."""

    @staticmethod
    def sanitize_string(value: str, max_length: int = 1000) -> str:
        """Strip null bytes and surrounding whitespace; text is kept verbatim otherwise."""
        if not isinstance(value, str):
            raise ValidationError("Value must be a string")

        value = value.replace('\x00', '').strip()

        if len(value) > max_length:
            raise ValidationError(f"Value exceeds maximum length of {max_length} characters")

        return value

    @staticmethod
    def validate_job_role(job_role: Any) -> str:
        """Validate the job role typed on the setup form."""
        if not isinstance(job_role, str):
            raise ValidationError("Job role must be a string", field="jobRole")
        job_role = InputValidator.sanitize_string(job_role, max_length=200)
        if len(job_role) < 2:
            raise ValidationError("Job role must be at least 2 characters.", field="jobRole")
        return job_role

    @staticmethod
    def validate_session_id(session_id: str) -> str:
        """Validate session ID format."""
        if not isinstance(session_id, str):
            raise ValidationError("Session ID must be a string")

        uuid_pattern = r'^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$'
        if not re.match(uuid_pattern, session_id):
            raise ValidationError("Invalid session ID format")

        return session_id

    @staticmethod
    def validate_interview_id(interview_id: Any) -> str:
        """Interview ids are chosen by the client, e.g. a timestamp or a UUID."""
        if not isinstance(interview_id, str) or not re.match(r'^[A-Za-z0-9_-]{1,64}$', interview_id):
            raise ValidationError("Invalid interview ID format", field="id")
        return interview_id

    @staticmethod
    def validate_answer(answer: Any) -> str:
        if not isinstance(answer, str) or not answer.strip():
            raise ValidationError("Answer must not be empty", field="answer")
        return InputValidator.sanitize_string(answer, max_length=20000)

    @staticmethod
    def validate_text(text: Any, field: str = "text") -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(f"Missing or invalid required field: {field}", field=field)
        return InputValidator.sanitize_string(text, max_length=20000)

    @staticmethod
    def validate_voice(voice: Any) -> str:
        if voice not in VOICE_NAMES:
            raise ValidationError(f"Voice must be one of: {', '.join(VOICE_NAMES)}", field="voice")
        return voice

    @staticmethod
    def validate_setting(setting: Any) -> str:
        if setting not in SETTINGS:
            raise ValidationError(f"Setting must be one of: {', '.join(SETTINGS)}", field="setting")
        return setting

    @staticmethod
    def validate_scenario(scenario: Any) -> str:
        if scenario not in SCENARIOS:
            raise ValidationError(f"Unknown scenario: {scenario}", field="scenario")
        return scenario

    @staticmethod
    def validate_audio_data_uri(audio: Any) -> str:
        """The recorder posts its blob as a base64 data URI."""
        if not isinstance(audio, str) or not re.match(r'^data:audio/[\w.+-]+(;[^,]*)?;base64,', audio):
            raise ValidationError("Audio must be a base64 data URI", field="userAudio")
        return audio

    @staticmethod
    def validate_chat_history(history: Any) -> List[Dict[str, str]]:
        if history is None:
            return []
        if not isinstance(history, list):
            raise ValidationError("Chat history must be a list", field="chatHistory")

        validated = []
        for item in history:
            if not isinstance(item, dict):
                raise ValidationError("Chat history entries must be objects", field="chatHistory")
            role = item.get('role')
            content = item.get('content', '')
            if role not in PRACTICE_ROLES:
                raise ValidationError(f"Invalid chat role: {role}", field="chatHistory")
            if not isinstance(content, str):
                raise ValidationError("Chat content must be a string", field="chatHistory")
            validated.append({'role': role, 'content': content})
        return validated

    @staticmethod
    def validate_practice_config(data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the scenario setup submitted before a practice session starts."""
        if not isinstance(data, dict):
            raise ValidationError("Data must be a dictionary")

        scenario = InputValidator.validate_scenario(data.get('scenario'))
        topic = data.get('topic') or ''
        if not isinstance(topic, str):
            raise ValidationError("Topic must be a string", field="topic")
        topic = InputValidator.sanitize_string(topic, max_length=500)
        if SCENARIOS[scenario].needs_topic and not topic:
            raise ValidationError("A topic is required for this scenario", field="topic")

        return {
            'scenario': scenario,
            'topic': topic,
            'setting': InputValidator.validate_setting(data.get('setting', 'Formal')),
            'voice': InputValidator.validate_voice(data.get('voice', 'Algenib')),
        }

    @staticmethod
    def validate_practice_request(data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate a self-contained speaking practice turn request."""
        if not isinstance(data, dict):
            raise ValidationError("Data must be a dictionary")

        scenario = data.get('scenario')
        if not isinstance(scenario, str) or not scenario.strip():
            raise ValidationError("Missing or invalid required field: scenario", field="scenario")

        validated = {
            'scenario': InputValidator.sanitize_string(scenario, max_length=5000),
            'chat_history': InputValidator.validate_chat_history(data.get('chatHistory')),
            'voice': InputValidator.validate_voice(data.get('voice')),
            'user_audio': None,
            'topic': None,
            'setting': None,
            'is_random_topic': bool(data.get('isRandomTopic', False)),
        }

        if data.get('userAudio'):
            validated['user_audio'] = InputValidator.validate_audio_data_uri(data['userAudio'])
        if data.get('topic'):
            validated['topic'] = InputValidator.sanitize_string(data['topic'], max_length=500)
        if data.get('setting'):
            validated['setting'] = InputValidator.sanitize_string(data['setting'], max_length=50)

        return validated
