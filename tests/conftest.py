"""Shared fixtures for the Pramanta test-suite.

Settings are loaded at import time and require ``GEMINI_API_KEY``, so a
dummy key is placed in the environment before any project module is
imported.  No test talks to Gemini or the network.
"""

import os

os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("ENV", "dev")

import pytest  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402

from pramanta.src.core.generation import GenerationClient  # noqa: E402
from pramanta.src.core.rag_engine import RAGManager  # noqa: E402
from pramanta.src.database.category_store import CategoryCache, CategoryDataStore  # noqa: E402

FOOD_CSV = "Name;Website;Εύρος_Τιμών\nTaverna X;https://tavernax.example;EE (Μεσαίο)\n"

FOOD_TEMPLATE = "Use only this data:\n{CSV_DATA_GOES_HERE}\n\nQuestion: {USER_QUERY_GOES_HERE}\n"

OVERLOAD_ERROR = "503 UNAVAILABLE. The model is overloaded. Please try again later."


class FakeChatModel:
    """Scripted stand-in for ``ChatGoogleGenerativeAI``.

    Each call to ``ainvoke`` consumes the next outcome: a string is
    returned as an ``AIMessage``, an exception instance is raised.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.prompts = []

    async def ainvoke(self, input):
        self.prompts.append(input[0].content)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return AIMessage(content=outcome)

    @property
    def calls(self):
        return len(self.prompts)


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def data_dir(tmp_path):
    """Temporary data directory with a single ``food`` category."""
    (tmp_path / "food.csv").write_text(FOOD_CSV, encoding="utf-8")
    (tmp_path / "food.txt").write_text(FOOD_TEMPLATE, encoding="utf-8")
    return tmp_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def store(data_dir, clock):
    return CategoryDataStore(data_dir=data_dir, cache=CategoryCache(ttl_seconds=300, clock=clock))


@pytest.fixture
def make_rag(store, recording_sleep):
    """Factory: ``make_rag(outcomes)`` → (RAGManager, FakeChatModel)."""

    def _make(outcomes, timeout_seconds=None):
        llm = FakeChatModel(outcomes)
        generator = GenerationClient(llm, max_attempts=3, initial_delay=1.0, backoff_factor=2.0, sleep=recording_sleep)
        return RAGManager(store, generator, timeout_seconds=timeout_seconds), llm

    return _make
