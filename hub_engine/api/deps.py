from __future__ import annotations

from fastapi import HTTPException, Request

from hub_engine.models.conversation import ConversationTurn, user_texts
from hub_engine.services.service_context import ServiceContext


def get_services(request: Request) -> ServiceContext:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Service context not initialised")
    return services


def require_user_texts(turns: list[ConversationTurn]) -> list[str]:
    """User texts for the pipeline; the newest turn must be the user's question."""
    if not turns or not turns[-1].is_user or not turns[-1].text.strip():
        raise HTTPException(status_code=400, detail="Last message must be a non-empty user message")
    return user_texts(turns)


def get_available_models() -> list[dict[str, str]]:
    """Return the generation models offered to the chat UI."""
    return [
        {
            "id": "google/gemini-2.0-flash-001",
            "name": "Gemini 2.0 Flash",
            "description": "Fast default. Good for short answers grounded in fetched pages.",
        },
        {
            "id": "openai/gpt-4o-mini",
            "name": "GPT-4o mini",
            "description": "Low-cost alternative with solid instruction following.",
        },
        {
            "id": "openai/gpt-4.1",
            "name": "GPT-4.1",
            "description": "Most capable option. Slower, better for nuanced questions.",
        },
    ]
