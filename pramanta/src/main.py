"""
Pramanta - Application Entry Point
===================================
FastAPI application factory.  Registers the chat routes, opens CORS to
every origin, and builds the shared pipeline objects once at startup:

    CategoryCache → CategoryDataStore ┐
    ChatGoogleGenerativeAI → GenerationClient ┴→ RAGManager (app.state)

Request bodies that FastAPI cannot parse are answered with the same
400 body as a failed validation, so clients only ever see the
``{"text", "sources"}`` shape.

Run:
    uvicorn pramanta.src.main:app --port 3000
    python -m pramanta.scripts.serve
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pramanta.config.prompt_templates import ERROR_RESPONSE_TEMPLATE, INVALID_INPUT_RESPONSE
from pramanta.config.settings import settings
from pramanta.src.api.routes import router
from pramanta.src.core.generation import GenerationClient, build_llm
from pramanta.src.core.rag_engine import RAGManager
from pramanta.src.core.schemas import ChatResponse
from pramanta.src.database.category_store import CategoryCache, CategoryDataStore
from pramanta.src.utils.logger import get_logger

logger = get_logger(__name__)


def build_rag_manager() -> RAGManager:
    """Wire the production pipeline from ``settings``."""
    store = CategoryDataStore(data_dir=settings.DATA_DIR, cache=CategoryCache(settings.CACHE_TTL_SECONDS))
    generator = GenerationClient(build_llm())
    logger.info("Pipeline ready — data dir %s, cache ttl %.0fs, %d categories.", store.data_dir, store.cache.ttl, len(store.list_categories()))
    return RAGManager(store, generator)


def create_app(rag_manager: RAGManager | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Parameters
    ----------
    rag_manager
        Pre-built pipeline (tests inject one with a fake model).  When
        omitted, ``build_rag_manager`` runs during startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "rag_manager", None) is None:
            app.state.rag_manager = build_rag_manager()
        logger.info("Server is running on port %d (model: %s).", settings.PORT, settings.LLM_MODEL)
        yield
        logger.info("Server shutting down.")

    app = FastAPI(title="Pramanta Chat", lifespan=lifespan)
    app.state.rag_manager = rag_manager

    app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ALLOW_ORIGINS, allow_credentials=False, allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("[API] Unparseable request body on %s.", request.url.path)
        return JSONResponse(status_code=400, content=ChatResponse(text=INVALID_INPUT_RESPONSE).model_dump())

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[API] Unhandled error on %s.", request.url.path)
        return JSONResponse(status_code=500, content=ChatResponse(text=ERROR_RESPONSE_TEMPLATE.format(message=str(exc) or type(exc).__name__)).model_dump())

    app.include_router(router)
    return app


app = create_app()
