"""Schemas and record field names shared by the chat pipeline."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ── Type aliases ───────────────────────────────────────────────────────
Record = dict[str, str]

# ── Record field names (header row of every category sheet) ────────────
NAME_FIELD = "Name"
WEBSITE_FIELD = "Website"
SOCIAL_MEDIA_FIELD = "Social_Media"
PRICE_FIELD = "Εύρος_Τιμών"


class Source(BaseModel):
    """A titled link surfaced alongside the generated answer."""

    title: str
    uri: str


class ChatRequest(BaseModel):
    """Inbound ``POST /chat`` body.

    Fields are typed loosely on purpose: shape checks belong to
    ``validate_basic_input`` so that every bad request gets the same 400.
    """

    model_config = ConfigDict(extra="ignore")

    category: Any = None
    query: Any = None


class ChatResponse(BaseModel):
    """Outbound chat body, identical for success and failure."""

    text: str
    sources: list[Source] = Field(default_factory=list)


class ChatResult(BaseModel):
    """Orchestrator outcome: HTTP status plus the body to send."""

    status_code: int
    response: ChatResponse
