import copy
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from quizi.db.session_store import SessionStore
from quizi.main import app
from quizi.services.quiz_session_service import QuizSessionService
from quizi.services.trivia_client import TriviaClient

FIXED_NOW = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)
DIFFICULTIES = ["easy", "medium", "hard"]


def make_provider_question(i):
    difficulty = DIFFICULTIES[i % 3]
    if i % 3 == 0:
        return {
            "type": "boolean",
            "difficulty": difficulty,
            "category": "Science &amp; Nature",
            "question": f"Statement number {i} is &quot;true&quot;.",
            "correct_answer": "True",
            "incorrect_answers": ["False"],
        }
    return {
        "type": "multiple",
        "difficulty": difficulty,
        "category": "Entertainment: Video Games",
        "question": f"Which is answer #{i}? It&#039;s tricky",
        "correct_answer": f"Answer {i} &amp; co",
        "incorrect_answers": [f"Wrong {i}a", f"Wrong {i}b", f"Wrong &lt;{i}c&gt;"],
    }


def make_provider_payload(count=15):
    return {
        "response_code": 0,
        "results": [make_provider_question(i) for i in range(count)],
    }


class FakeProvider:
    """Stands in for Open Trivia DB behind httpx.MockTransport"""

    def __init__(self):
        self.payload = make_provider_payload()
        self.status_code = 200
        self.error = None
        self.requests = []

    def handler(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)


class FakeUpdateResult:
    def __init__(self, matched_count, modified_count):
        self.matched_count = matched_count
        self.modified_count = modified_count


class FakeCollection:
    """In-memory subset of the motor collection API keyed by sessionId"""

    def __init__(self):
        self.documents = {}
        self.writes = 0
        self.error = None

    def _check(self):
        if self.error is not None:
            raise self.error

    async def create_index(self, *args, **kwargs):
        return "sessionId_1"

    async def insert_one(self, doc):
        self._check()
        key = doc["sessionId"]
        if key in self.documents:
            raise DuplicateKeyError(f"E11000 duplicate key: {key}")
        stored = copy.deepcopy(doc)
        stored["_id"] = f"oid-{len(self.documents)}"
        self.documents[key] = stored
        self.writes += 1

    async def find_one(self, query):
        self._check()
        doc = self.documents.get(query.get("sessionId"))
        return copy.deepcopy(doc) if doc else None

    async def update_one(self, query, update):
        self._check()
        doc = self.documents.get(query.get("sessionId"))
        if doc is None:
            return FakeUpdateResult(0, 0)
        doc.update(copy.deepcopy(update["$set"]))
        self.writes += 1
        return FakeUpdateResult(1, 1)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeMongoDB:
    def __init__(self, db):
        self.db = db
        self.healthy = True

    def get_database(self):
        return self.db

    async def ping(self):
        return self.healthy


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def sessions(fake_db):
    return fake_db["sessions"]


@pytest.fixture
def store(fake_db):
    return SessionStore(fake_db)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
async def trivia_client(provider):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
    yield TriviaClient(http_client, api_url="https://opentdb.test/api.php")
    await http_client.aclose()


@pytest.fixture
def service(store, trivia_client):
    return QuizSessionService(store=store, trivia_client=trivia_client, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(fake_db, trivia_client):
    app.state.mongodb = FakeMongoDB(fake_db)
    app.state.trivia_client = trivia_client
    yield TestClient(app)
    for name in ("mongodb", "trivia_client"):
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
def store_failure():
    return PyMongoError("connection reset")
