"""
Pramanta - Generation Client
=============================
Calls Gemini (through LangChain's ``ChatGoogleGenerativeAI``) with a
bounded retry on transient overload.

Retry policy
------------
Gemini answers ``503 UNAVAILABLE`` / "model is overloaded" under load.
Those failures are retried with exponential backoff (1s, 2s by default,
3 attempts in total).  Any other failure propagates after the first
attempt.  LangChain's own retries are disabled so this is the only
retry layer.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol, runtime_checkable

from langchain_core.messages import HumanMessage

from pramanta.config.settings import settings
from pramanta.src.core.exceptions import GenerationError, GenerationOverloadError
from pramanta.src.utils.logger import get_logger
from pramanta.src.utils.retry import Sleeper, retry_async

logger = get_logger(__name__)

_OVERLOAD_MARKERS: tuple[str, ...] = ("503", "unavailable", "overloaded")


@runtime_checkable
class ChatModel(Protocol):
    """Anything exposing LangChain's async ``ainvoke`` over messages."""

    async def ainvoke(self, input: list[HumanMessage]) -> object: ...


def is_transient_overload(error: BaseException) -> bool:
    """True when the error text carries a "temporarily unavailable" marker."""
    text = str(error).lower()
    return any(marker in text for marker in _OVERLOAD_MARKERS)


def extract_text(response: object) -> str:
    """Pull plain text out of a chat-model response (string or content parts)."""
    content = response.content if hasattr(response, "content") else response

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)

    return str(content)


def build_llm() -> ChatModel:
    """Initialise the Gemini LLM via LangChain."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, google_api_key=settings.GEMINI_API_KEY.get_secret_value(), max_retries=0)
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
    return llm


class GenerationClient:
    """
    Retrying wrapper around a chat model.

    Parameters
    ----------
    llm
        A ``ChatModel`` (``ChatGoogleGenerativeAI`` in production).
    max_attempts, initial_delay, backoff_factor
        Retry schedule.  Default to the ``GENERATION_*`` settings.
    sleep
        Injected for tests; defaults to ``asyncio.sleep``.
    """

    __slots__ = ("_llm", "_max_attempts", "_initial_delay", "_backoff_factor", "_sleep")

    def __init__(self, llm: ChatModel, max_attempts: int | None = None, initial_delay: float | None = None, backoff_factor: float | None = None, sleep: Sleeper = asyncio.sleep) -> None:
        self._llm = llm
        self._max_attempts = max_attempts or settings.GENERATION_MAX_ATTEMPTS
        self._initial_delay = settings.GENERATION_INITIAL_DELAY if initial_delay is None else initial_delay
        self._backoff_factor = backoff_factor or settings.GENERATION_BACKOFF_FACTOR
        self._sleep = sleep


    async def generate(self, prompt: str) -> str:
        """
        Return Gemini's text for *prompt*.

        Raises
        ------
        GenerationOverloadError
            Every attempt failed with a transient overload.
        GenerationError
            A non-transient failure (raised on the first attempt).
        """
        t_llm = time.perf_counter()
        try:
            response = await retry_async(lambda: self._llm.ainvoke([HumanMessage(content=prompt)]), should_retry=is_transient_overload, max_attempts=self._max_attempts, initial_delay=self._initial_delay, backoff_factor=self._backoff_factor, sleep=self._sleep, label="Gemini call")
        except Exception as exc:
            if is_transient_overload(exc):
                raise GenerationOverloadError(str(exc)) from exc
            logger.error("[LLM] Generation failed: %s", exc)
            raise GenerationError(str(exc)) from exc

        text = extract_text(response)
        llm_ms = (time.perf_counter() - t_llm) * 1000
        logger.info("[LLM] Response received: %.1fms (%d chars)", llm_ms, len(text))
        return text
