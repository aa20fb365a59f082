"""
Pramanta - Server Launcher
===========================
CLI entry point that:
    1. Loads settings and refuses to start without ``GEMINI_API_KEY``.
    2. Builds the FastAPI app (Gemini client, category store).
    3. Serves it with uvicorn.

Usage:
    python -m pramanta.scripts.serve
    python -m pramanta.scripts.serve --port 8080 --reload
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="serve", description="Pramanta — run the chat API server.")
    parser.add_argument("--host", default=None, help="Bind address (default: settings.HOST).")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: settings.PORT).")
    parser.add_argument("--reload", action="store_true", default=False, help="Auto-reload on code changes (development only).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    # ── 0. Load settings + .env (fail fast) ────────────────────────────
    t_settings = time.perf_counter()
    try:
        from pramanta.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — GEMINI_API_KEY must be set in the environment or pramanta/.env:\n")
        print(f"  {exc}")
        print()
        sys.exit(1)
    settings_ms = (time.perf_counter() - t_settings) * 1000

    from pramanta.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Settings loaded in %.1fms (env=%s, model=%s).", settings_ms, settings.ENV, settings.LLM_MODEL)

    import uvicorn

    host = args.host or settings.HOST
    port = args.port or settings.PORT
    logger.info("Starting server on http://%s:%d", host, port)
    uvicorn.run("pramanta.src.main:app", host=host, port=port, reload=args.reload)


if __name__ == "__main__":
    main()
