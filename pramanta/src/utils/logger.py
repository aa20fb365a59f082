"""
Pramanta - Logging
===================
Pre-configured logger factory shared by every Pramanta module.

Messages carry a bracketed stage tag so one request can be followed
through the pipeline:
  • ``[CACHE]`` category sheet hits, misses, reloads and parse timings
  • ``[LLM]``   Gemini calls and latency
  • ``[RETRY]`` overload retries and their backoff delays
  • ``[SOURCES]`` links attached to an answer
  • ``[RAG]``   request outcome and total time
  • ``[API]``   rejected bodies and unhandled errors

Logging verbosity is driven by ``settings.ENV``:
  • ``"dev"``  → DEBUG level  (prompts, cache hits, retry detail)
  • ``"prod"`` → WARNING level (errors & warnings only)

Usage:
    from pramanta.src.utils.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from pramanta.config.settings import settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}
_DEFAULT_LEVEL = _ENV_LEVEL_MAP.get(settings.ENV, logging.INFO)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Create and return a named logger with a standardised formatter.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit logging level override.
               If *None*, the level is derived from ``settings.ENV``.
    """
    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(logging.Formatter(fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(console_handler)

        # Handlers live here only; the root logger stays untouched (uvicorn owns it)
        logger.propagate = False

    return logger
