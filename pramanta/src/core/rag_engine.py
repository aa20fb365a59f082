"""
Pramanta - RAG Engine
======================
Orchestrates one chat request end to end.

Flow
----
    1. Validate      → reject bad input before any I/O (HTTP 400).
    2. Retrieve      → category records via ``CategoryDataStore``.
    3. Augment       → category template + records + query.
    4. Generate      → Gemini via ``GenerationClient`` (retrying).
    5. Post-process  → attach source links for mentioned records.
    6. Respond       → ``ChatResult`` (status code + body).

Steps 2–5 run under an outer timeout.  Every failure after validation
becomes the same HTTP 500 body with a readable cause; nothing escapes
as a raw traceback.

``RAGManager`` holds no request-scoped state, so a single instance is
shared by all concurrent requests.

Usage:
    rag = RAGManager(store, GenerationClient(build_llm()))
    result = await rag.handle("food", "Where can I eat?")
"""

from __future__ import annotations

import asyncio
import time

from pramanta.config.prompt_templates import ERROR_RESPONSE_TEMPLATE, INVALID_INPUT_RESPONSE, TIMEOUT_MESSAGE
from pramanta.config.settings import settings
from pramanta.src.core.exceptions import PramantaError, RequestTimeoutError
from pramanta.src.core.generation import GenerationClient
from pramanta.src.core.prompt_builder import build_prompt
from pramanta.src.core.schemas import ChatResponse, ChatResult
from pramanta.src.core.sources import find_sources
from pramanta.src.core.validator import validate_basic_input
from pramanta.src.database.category_store import CategoryDataStore
from pramanta.src.utils.logger import get_logger

logger = get_logger(__name__)


class RAGManager:
    """
    Retrieve → augment → generate → link pipeline.

    Parameters
    ----------
    data_store
        Shared ``CategoryDataStore`` (owns the category cache).
    generator
        ``GenerationClient`` wrapping the chat model.
    timeout_seconds
        Outer bound for steps 2–5.  Defaults to
        ``settings.REQUEST_TIMEOUT_SECONDS``.
    """

    __slots__ = ("_store", "_generator", "_timeout")

    def __init__(self, data_store: CategoryDataStore, generator: GenerationClient, timeout_seconds: float | None = None) -> None:
        self._store = data_store
        self._generator = generator
        self._timeout = timeout_seconds or settings.REQUEST_TIMEOUT_SECONDS


    @property
    def data_store(self) -> CategoryDataStore:
        return self._store


    async def handle(self, category: object, query: object) -> ChatResult:
        """Run the full pipeline and return the HTTP outcome; never raises."""
        if not validate_basic_input(category, query):
            logger.warning("[RAG] Rejected invalid input (category=%r).", category if isinstance(category, str) else type(category).__name__)
            return ChatResult(status_code=400, response=ChatResponse(text=INVALID_INPUT_RESPONSE))

        logger.info("[RAG] Received message about '%s': %s", category, query[:80])  # type: ignore[index]

        try:
            response = await asyncio.wait_for(self.generate_response(category, query), timeout=self._timeout)  # type: ignore[arg-type]
        except asyncio.TimeoutError:
            error = RequestTimeoutError(TIMEOUT_MESSAGE.format(seconds=self._timeout))
            logger.error("[RAG] %s", error.message)
            return self._error_result(error.message)
        except PramantaError as exc:
            logger.error("[RAG] Pipeline failed (%s): %s", type(exc).__name__, exc.message)
            return self._error_result(exc.message)
        except Exception as exc:
            logger.exception("[RAG] Unexpected pipeline failure.")
            return self._error_result(str(exc) or type(exc).__name__)

        return ChatResult(status_code=200, response=response)


    async def generate_response(self, category: str, query: str) -> ChatResponse:
        """
        Steps 2–5 for an already validated request.

        Raises
        ------
        PramantaError
            Any retrieval, template or generation failure.
        """
        t_start = time.perf_counter()

        # ── 2. Retrieve (cached) ──────────────────────────────────────
        records = await self._store.load(category)
        load_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] %d record(s) ready for '%s' in %.1fms", len(records), category, load_ms)

        # ── 3. Augment ────────────────────────────────────────────────
        prompt = await asyncio.to_thread(build_prompt, self._store.template_path(category), records, query, category)
        logger.debug("[RAG] Final prompt (%d chars):\n%s", len(prompt), prompt)

        # ── 4. Generate (with retry) ──────────────────────────────────
        t_llm = time.perf_counter()
        text = await self._generator.generate(prompt)
        llm_ms = (time.perf_counter() - t_llm) * 1000

        # ── 5. Post-process (find links) ──────────────────────────────
        sources = find_sources(text, records)

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] Pipeline total: %.1fms (load=%.1f, llm=%.1f, sources=%d)", total_ms, load_ms, llm_ms, len(sources))
        return ChatResponse(text=text, sources=sources)


    @staticmethod
    def _error_result(message: str) -> ChatResult:
        return ChatResult(status_code=500, response=ChatResponse(text=ERROR_RESPONSE_TEMPLATE.format(message=message)))
