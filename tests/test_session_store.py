from datetime import timedelta

import pytest

from quizi.db.mongodb import StoreError
from quizi.models.quiz_sessions import QuizSession, SubmissionRecord, TriviaQuestion
from tests.conftest import FIXED_NOW


def make_session(session_id="s-1"):
    return QuizSession(
        sessionId=session_id,
        email="a@b.com",
        questions=[TriviaQuestion(question="Q", correct_answer="A", incorrect_answers=["B"])],
        createdAt=FIXED_NOW,
        startedAt=FIXED_NOW,
        expiresAt=FIXED_NOW + timedelta(minutes=30),
    )


async def test_insert_and_get(store):
    await store.insert_session(make_session())
    loaded = await store.get_session("s-1")

    assert loaded is not None
    assert loaded.email == "a@b.com"
    assert loaded.questions[0].correct_answer == "A"
    assert loaded.finishedAt is None
    assert loaded.score is None


async def test_get_missing_returns_none(store):
    assert await store.get_session("nope") is None


async def test_duplicate_session_id(store):
    await store.insert_session(make_session())
    with pytest.raises(StoreError):
        await store.insert_session(make_session())


async def test_record_submission(store, sessions):
    await store.insert_session(make_session())
    record = SubmissionRecord(
        userAnswers={"0": "A"},
        finishedAt=FIXED_NOW + timedelta(minutes=5),
        score=1,
        perQuestionCorrect=[True],
        expiredAtSubmission=False,
        updatedAt=FIXED_NOW + timedelta(minutes=5),
    )

    assert await store.record_submission("s-1", record) is True
    loaded = await store.get_session("s-1")
    assert loaded.userAnswers == {"0": "A"}
    assert loaded.score == 1
    assert loaded.perQuestionCorrect == [True]
    assert sessions.writes == 2


async def test_record_submission_unknown_session(store, sessions):
    record = SubmissionRecord(
        userAnswers={}, finishedAt=FIXED_NOW, score=0,
        perQuestionCorrect=[], expiredAtSubmission=False, updatedAt=FIXED_NOW,
    )
    assert await store.record_submission("missing", record) is False
    assert sessions.writes == 0


async def test_database_failure_becomes_store_error(store, sessions, store_failure):
    sessions.error = store_failure
    with pytest.raises(StoreError):
        await store.get_session("s-1")
    with pytest.raises(StoreError):
        await store.insert_session(make_session())


async def test_malformed_document(store, sessions):
    sessions.documents["broken"] = {"sessionId": "broken", "email": "x"}
    with pytest.raises(StoreError, match="malformed"):
        await store.get_session("broken")
