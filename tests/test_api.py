"""
Integration tests for the HTTP API with a fake AI client
"""

from interview_coach.core.errors import AIServiceError, HIGH_DEMAND_MESSAGE
from tests.conftest import USER_AUDIO

FEEDBACK = {
    "communicationSkills": "Clear.",
    "technicalKnowledge": "Good.",
    "areasForImprovement": "More examples.",
    "overallFeedback": "Well done.",
}


class TestHealth:

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()["ai_configured"] is True

    def test_unknown_endpoint(self, client):
        response = client.get('/api/nope')
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestPracticeApi:

    def test_options(self, client):
        data = client.get('/api/practice/options').get_json()["data"]
        assert [s["key"] for s in data["scenarios"]] == ["behavioral-interview", "technical-interview", "random"]
        assert [v["name"] for v in data["voices"]] == ["Algenib", "Charon", "Kore", "Zephyr"]

    def test_session_flow(self, client, fake_client):
        fake_client.queue(
            {"response": "[uhm] Hello there!", "isSessionComplete": False},
            {"response": "Thanks!", "isSessionComplete": True, "feedback": {
                "overallSummary": "Nice", "clarity": "Clear", "relevance": "Yes", "problemSolving": "Good",
            }},
        )

        created = client.post('/api/practice/sessions', json={"scenario": "random", "voice": "Kore"})
        assert created.status_code == 201
        body = created.get_json()["data"]
        session_id = body["session"]["id"]
        assert body["session"]["phase"] == "speaking"
        assert body["turn"]["displayResponse"] == "Hello there!"

        interrupted = client.post(f'/api/practice/sessions/{session_id}/interrupt')
        assert interrupted.get_json()["data"]["session"]["phase"] == "ready_to_listen"

        listening = client.post(f'/api/practice/sessions/{session_id}/listen', json={"action": "start"})
        assert listening.get_json()["data"]["session"]["phase"] == "listening"

        turn = client.post(f'/api/practice/sessions/{session_id}/turn', json={"userAudio": USER_AUDIO})
        assert turn.status_code == 200
        data = turn.get_json()["data"]
        assert data["turn"] == {"feedback": {
            "overallSummary": "Nice", "clarity": "Clear", "relevance": "Yes", "problemSolving": "Good",
        }}
        assert data["session"]["phase"] == "idle"

        ended = client.delete(f'/api/practice/sessions/{session_id}')
        assert ended.status_code == 200
        assert client.get(f'/api/practice/sessions/{session_id}').status_code == 404

    def test_turn_while_speaking_is_conflict(self, client, fake_client):
        fake_client.queue({"response": "Hi", "isSessionComplete": False})
        session_id = client.post('/api/practice/sessions', json={"scenario": "random", "voice": "Kore"}) \
            .get_json()["data"]["session"]["id"]

        response = client.post(f'/api/practice/sessions/{session_id}/turn', json={"userAudio": USER_AUDIO})
        assert response.status_code == 409

    def test_missing_topic_rejected(self, client):
        response = client.post('/api/practice/sessions', json={"scenario": "behavioral-interview", "voice": "Kore"})
        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "topic"}

    def test_failed_start_reports_high_demand(self, client, fake_client):
        fake_client.queue(AIServiceError("429 quota"))
        response = client.post('/api/practice/sessions', json={"scenario": "random", "voice": "Kore"})
        assert response.status_code == 502
        assert response.get_json()["error"] == HIGH_DEMAND_MESSAGE

    def test_stateless_respond(self, client, fake_client):
        fake_client.queue({"response": "[short pause] Go on.", "isSessionComplete": False})
        response = client.post('/api/practice/respond', json={
            "scenario": "You are a curious conversationalist.",
            "chatHistory": [{"role": "assistant", "content": "Hi!"}],
            "voice": "Zephyr",
            "userAudio": USER_AUDIO,
        })
        data = response.get_json()["data"]
        assert data["displayResponse"] == "Go on."
        assert data["spokenResponse"] == "[short pause] Go on."
        assert data["transcribedUserText"] == fake_client.transcript
        assert data["audioDataUri"].startswith("data:audio/wav;base64,")


class TestInterviewApi:

    def test_interview_lifecycle_and_history(self, client, fake_client, app):
        app.extensions['interview_coach']['interview_service'].max_questions = 2
        fake_client.queue({"question": "Why QA?"}, {"followUpQuestion": "Favourite bug?"}, FEEDBACK)

        created = client.post('/api/interviews', json={"id": "1700000000000", "jobRole": "QA Engineer"})
        assert created.status_code == 201
        assert created.get_json()["data"]["messages"][0]["text"] == "Why QA?"

        answered = client.post('/api/interviews/1700000000000/answer', json={"answer": "I like breaking things."})
        assert answered.get_json()["data"]["questionCount"] == 2

        finished = client.post('/api/interviews/1700000000000/answer', json={"answer": "An off-by-one."})
        data = finished.get_json()["data"]
        assert data["isFinished"] is True
        assert data["feedback"] == FEEDBACK

        history = client.get('/api/history').get_json()["data"]
        assert history["count"] == 1
        assert history["sessions"][0]["feedbackExcerpt"] == "Well done."

        report = client.get('/api/reports/1700000000000')
        assert report.status_code == 200
        assert report.mimetype == 'application/pdf'
        assert report.data.startswith(b'%PDF')

    def test_answer_text_stored_verbatim(self, client, fake_client):
        fake_client.queue({"question": "Explain generics."}, {"followUpQuestion": "Why erase types?"})
        client.post('/api/interviews', json={"id": "generics", "jobRole": "Java Developer"})

        answer = "I return List<String> and check if a < b and c > d."
        data = client.post('/api/interviews/generics/answer', json={"answer": answer}).get_json()["data"]

        assert data["messages"][1]["text"] == answer
        _, prompt, _ = fake_client.json_calls[1]
        assert f"Candidate's Answer: {answer}" in prompt
        stored = client.get('/api/interviews/generics').get_json()["data"]
        assert stored["messages"][1]["text"] == answer

    def test_short_job_role_rejected(self, client):
        response = client.post('/api/interviews', json={"jobRole": "x"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Job role must be at least 2 characters."

    def test_unknown_interview(self, client):
        assert client.get('/api/interviews/unknown-id').status_code == 404
        assert client.get('/api/reports/unknown-id').status_code == 404

    def test_blank_answer(self, client):
        response = client.post('/api/interviews/abc/answer', json={"answer": " "})
        assert response.status_code == 400


class TestActionsApi:

    def test_audio(self, client, fake_client):
        fake_client.queue({"expressiveText": "[laughing] Hello!"})
        response = client.post('/api/audio', json={"text": "Hello!"})
        assert response.status_code == 200
        assert response.get_json()["data"]["audioDataUri"].startswith("data:audio/wav;base64,")
        assert fake_client.speech_calls == [("[laughing] Hello!", "Algenib")]

    def test_plain_audio_failure(self, client, fake_client):
        fake_client.speech_error = AIServiceError("quota exceeded")
        response = client.post('/api/audio/plain', json={"text": "Hello!"})
        assert response.status_code == 502
        assert response.get_json()["error"] == HIGH_DEMAND_MESSAGE

    def test_first_question(self, client, fake_client):
        fake_client.queue({"question": "Tell me about a project."})
        response = client.post('/api/actions/first-question', json={"jobRole": "Developer"})
        assert response.get_json()["data"] == {"question": "Tell me about a project."}

    def test_feedback(self, client, fake_client):
        fake_client.queue(FEEDBACK)
        response = client.post('/api/actions/feedback', json={
            "interviewTranscript": "ai: Hi\nuser: Hello",
            "jobDescription": "Developer",
        })
        assert response.get_json()["data"]["feedback"] == FEEDBACK
