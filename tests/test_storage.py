import asyncio
import json
import os

import pytest

from interview_coach.models import ChatMessage, InterviewFeedback, InterviewSession
from interview_coach.services.session_service import FEEDBACK_UNAVAILABLE


def make_session(session_id="1700000000000", start_time=1700000000000, **kwargs):
    return InterviewSession(
        id=session_id,
        job_role="Backend Engineer",
        messages=[
            ChatMessage(role="ai", text="What drew you to backend work?", audio_url="data:audio/wav;base64,AAAA"),
            ChatMessage(role="user", text="I enjoy designing APIs."),
        ],
        start_time=start_time,
        **kwargs
    )


class TestLocalStorage:

    @pytest.mark.asyncio
    async def test_missing_key_returns_default(self, storage):
        assert await storage.get_item("interviewHistory", []) == []

    @pytest.mark.asyncio
    async def test_set_and_get(self, storage):
        await storage.set_item("interviewHistory", [{"id": "a"}])
        assert await storage.get_item("interviewHistory") == [{"id": "a"}]

    @pytest.mark.asyncio
    async def test_unchanged_value_is_not_rewritten(self, storage):
        await storage.set_item("prefs", {"voice": "Kore"})
        path = storage._path("prefs")
        os.utime(path, (0, 0))

        await storage.set_item("prefs", {"voice": "Kore"})
        assert os.path.getmtime(path) == 0

    @pytest.mark.asyncio
    async def test_corrupt_file_falls_back_to_default(self, storage):
        with open(storage._path("interviewHistory"), "w", encoding="utf-8") as f:
            f.write("{not json")
        assert await storage.get_item("interviewHistory", []) == []

    @pytest.mark.asyncio
    async def test_unserializable_write_is_ignored(self, storage):
        await storage.set_item("bad", {"value": object()})
        assert await storage.get_item("bad", "default") == "default"

    @pytest.mark.asyncio
    async def test_update_passes_a_copy(self, storage):
        await storage.set_item("items", [1])

        def append(items):
            items.append(2)
            return items

        assert await storage.update("items", append, []) == [1, 2]
        assert await storage.get_item("items") == [1, 2]

    @pytest.mark.asyncio
    async def test_timed_out_waiter_does_not_keep_lock(self, storage):
        storage._lock.acquire()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(storage.get_item("items", "default"), 0.05)
        storage._lock.release()

        await asyncio.sleep(0.05)
        assert not storage._lock.locked()
        assert await storage.get_item("items", "default") == "default"
        assert not storage._lock.locked()


class TestInterviewSessionService:

    @pytest.mark.asyncio
    async def test_round_trip_is_field_for_field_equal(self, session_service):
        session = make_session(
            end_time=1700000600000,
            feedback=InterviewFeedback("Clear", "Strong", "Depth on caching", "Good interview"),
        )
        await session_service.upsert_session(session)

        loaded = await session_service.get_session(session.id)
        assert loaded == session

    @pytest.mark.asyncio
    async def test_round_trip_without_optional_fields(self, session_service, storage):
        session = make_session()
        await session_service.upsert_session(session)

        raw = await storage.get_item("interviewHistory")
        assert "endTime" not in raw[0]
        assert "feedback" not in raw[0]
        assert await session_service.get_session(session.id) == session

    @pytest.mark.asyncio
    async def test_upsert_replaces_in_place(self, session_service):
        first = make_session("a", 1)
        second = make_session("b", 2)
        await session_service.upsert_session(first)
        await session_service.upsert_session(second)

        first.messages.append(ChatMessage(role="ai", text="Next question?"))
        await session_service.upsert_session(first)

        sessions = await session_service.load_sessions()
        assert [s.id for s in sessions] == ["a", "b"]
        assert len(sessions[0].messages) == 3

    @pytest.mark.asyncio
    async def test_unknown_session(self, session_service):
        assert await session_service.get_session("missing") is None

    @pytest.mark.asyncio
    async def test_list_sorted_newest_first(self, session_service):
        for session_id, start in (("old", 100), ("new", 300), ("mid", 200)):
            await session_service.upsert_session(make_session(session_id, start))

        assert [s.id for s in await session_service.list_sessions()] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_summaries_expose_feedback_excerpt(self, session_service):
        await session_service.upsert_session(make_session("done", 2, end_time=3,
                                                          feedback=InterviewFeedback("a", "b", "c", "Great job")))
        await session_service.upsert_session(make_session("open", 1))

        summaries = await session_service.list_summaries()
        assert summaries[0]["feedbackExcerpt"] == "Great job"
        assert summaries[1]["feedbackExcerpt"] == FEEDBACK_UNAVAILABLE
        assert summaries[0]["questionCount"] == 1

    @pytest.mark.asyncio
    async def test_non_list_history_is_ignored(self, session_service, storage):
        with open(storage._path("interviewHistory"), "w", encoding="utf-8") as f:
            json.dump({"not": "a list"}, f)
        assert await session_service.load_sessions() == []
