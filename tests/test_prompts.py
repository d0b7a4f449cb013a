from interview_coach.agent.prompts import (
    NEW_SESSION_INSTRUCTION,
    RANDOM_TOPIC_INSTRUCTION,
    build_feedback_prompt,
    build_first_question_prompt,
    build_follow_up_prompt,
    build_practice_prompt,
    format_history,
    format_transcript,
)
from interview_coach.models import ChatMessage

PERSONA = "You are 'Alex', a friendly HR manager."


class TestPracticePrompt:

    def test_new_session_prompt(self):
        prompt = build_practice_prompt(PERSONA, [], topic="Teamwork", setting="Formal")

        assert PERSONA in prompt
        assert "**Conversation Topic:** Teamwork" in prompt
        assert "**Setting:** Formal" in prompt
        assert NEW_SESSION_INSTRUCTION in prompt
        assert "LATEST USER RESPONSE" not in prompt

    def test_prompt_with_transcription_and_history(self):
        history = [
            {"role": "assistant", "content": "Tell me about a conflict."},
            {"role": "user", "content": ""},
            {"role": "user", "content": "I mediated between two leads."},
        ]
        prompt = build_practice_prompt(PERSONA, history, transcribed_user_text="It went well.")

        assert "assistant: Tell me about a conflict." in prompt
        assert "user: I mediated between two leads." in prompt
        assert "user: \n" not in prompt
        assert "user: It went well." in prompt
        assert NEW_SESSION_INSTRUCTION not in prompt

    def test_random_topic_wins_over_explicit_topic(self):
        prompt = build_practice_prompt(PERSONA, [], topic="Mars", is_random_topic=True)
        assert RANDOM_TOPIC_INSTRUCTION in prompt
        assert "**Conversation Topic:** Mars" not in prompt

    def test_format_history_skips_empty_turns(self):
        assert format_history([{"role": "user", "content": ""}]) == ""


class TestInterviewPrompts:

    def test_first_question_mentions_role(self):
        assert "Data Engineer position" in build_first_question_prompt("Data Engineer")

    def test_follow_up_prompt_carries_context(self):
        prompt = build_follow_up_prompt("Designer", "Why design?", "I love craft.", "ai: Why design?\nuser: I love craft.")
        assert "Previous Question: Why design?" in prompt
        assert "Candidate's Answer: I love craft." in prompt
        assert "role of Designer" in prompt

    def test_feedback_prompt(self):
        prompt = build_feedback_prompt("ai: Hi\nuser: Hello", "Product Manager")
        assert "Job Description: Product Manager" in prompt
        assert "Interview Transcript: ai: Hi\nuser: Hello" in prompt

    def test_format_transcript_accepts_messages_and_dicts(self):
        messages = [ChatMessage(role="ai", text="Hi"), {"role": "user", "text": "Hello"}]
        assert format_transcript(messages) == "ai: Hi\nuser: Hello"
