"""Tests for the ``RAGManager`` request pipeline."""

import asyncio

import pytest

from pramanta.src.core.generation import GenerationClient
from pramanta.src.core.rag_engine import RAGManager
from pramanta.src.core.schemas import Source

from conftest import OVERLOAD_ERROR


class TestRAGManager:
    """Test suite for ``RAGManager.handle``."""

    @pytest.mark.asyncio
    async def test_successful_request(self, make_rag):
        rag, llm = make_rag(["Taverna X is great for dinner."])

        result = await rag.handle("food", "Where can I eat?")

        assert result.status_code == 200
        assert result.response.text == "Taverna X is great for dinner."
        assert result.response.sources == [Source(title="Taverna X - Website", uri="https://tavernax.example")]

        prompt = llm.prompts[0]
        assert "Question: Where can I eat?" in prompt
        assert '"Name": "Taverna X"' in prompt
        assert '"Εύρος_Τιμών": "€€ (Μεσαίο)"' in prompt

    @pytest.mark.asyncio
    async def test_invalid_input_halts_before_io(self, make_rag, store):
        rag, llm = make_rag(["unused"])

        result = await rag.handle("../etc", "Where can I eat?")

        assert result.status_code == 400
        assert result.response.text == "Invalid input. Please refine your request."
        assert result.response.sources == []
        assert llm.calls == 0
        assert len(store.cache) == 0

    @pytest.mark.asyncio
    async def test_missing_category_is_server_error(self, make_rag):
        rag, llm = make_rag(["unused"])

        result = await rag.handle("drinks", "Any bars?")

        assert result.status_code == 500
        assert result.response.text.startswith("I'm sorry, I had a problem processing that request. (Error: ")
        assert "drinks.csv" in result.response.text
        assert result.response.sources == []
        assert llm.calls == 0

    @pytest.mark.asyncio
    async def test_missing_template_is_server_error(self, make_rag, data_dir):
        (data_dir / "food.txt").unlink()
        rag, llm = make_rag(["unused"])

        result = await rag.handle("food", "Where can I eat?")

        assert result.status_code == 500
        assert "food.txt" in result.response.text
        assert llm.calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_overload_is_server_error(self, make_rag, recording_sleep):
        rag, llm = make_rag([Exception(OVERLOAD_ERROR)] * 3)

        result = await rag.handle("food", "Where can I eat?")

        assert result.status_code == 500
        assert "overloaded" in result.response.text
        assert llm.calls == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_records_are_cached_between_requests(self, make_rag, data_dir):
        rag, llm = make_rag(["Taverna X", "Taverna X again"])

        first = await rag.handle("food", "Where can I eat?")
        (data_dir / "food.csv").unlink()
        second = await rag.handle("food", "And tomorrow?")

        assert first.status_code == second.status_code == 200
        assert second.response.sources == first.response.sources

    @pytest.mark.asyncio
    async def test_outer_timeout(self, store):
        class SlowModel:
            async def ainvoke(self, input):
                await asyncio.sleep(5)

        rag = RAGManager(store, GenerationClient(SlowModel()), timeout_seconds=0.05)

        result = await rag.handle("food", "Where can I eat?")

        assert result.status_code == 500
        assert "0.05s" in result.response.text

    @pytest.mark.asyncio
    async def test_unexpected_exception_still_yields_error_body(self, store):
        class BrokenModel:
            async def ainvoke(self, input):
                return None

        class BrokenGenerator(GenerationClient):
            async def generate(self, prompt):
                raise KeyError("boom")

        rag = RAGManager(store, BrokenGenerator(BrokenModel()))

        result = await rag.handle("food", "Where can I eat?")

        assert result.status_code == 500
        assert "boom" in result.response.text
