"""
Pramanta - API Routes
======================
Thin controllers over ``RAGManager``:

  - POST /chat    → answer a category-scoped question with source links
  - GET  /health  → liveness probe

Wire contract for ``POST /chat``::

    request : {"category": str, "query": str}
    response: {"text": str, "sources": [{"title": str, "uri": str}]}

The query field is ``query``.  Older clients that post ``userQuery``
get the invalid-input 400; there is no alias.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pramanta.config.settings import settings
from pramanta.src.core.rag_engine import RAGManager
from pramanta.src.core.schemas import ChatRequest, ChatResponse

router = APIRouter(tags=["Chat"])


def get_rag_manager(request: Request) -> RAGManager:
    """Return the ``RAGManager`` built at startup (see ``main.lifespan``)."""
    return request.app.state.rag_manager


@router.post("/chat", response_model=ChatResponse, responses={400: {"model": ChatResponse}, 500: {"model": ChatResponse}})
async def chat(payload: ChatRequest, rag: Annotated[RAGManager, Depends(get_rag_manager)]) -> JSONResponse:
    result = await rag.handle(payload.category, payload.query)
    return JSONResponse(status_code=result.status_code, content=result.response.model_dump())


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "model": settings.LLM_MODEL}
