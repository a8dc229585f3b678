from __future__ import annotations

from fastapi import APIRouter

from hub_engine.api.deps import get_available_models
from hub_engine.models.schemas import ModelInfo, ModelsResponse

router = APIRouter(prefix="/api/models", tags=["models"])


@router.get("", response_model=ModelsResponse)
async def list_models():
    """List generation models selectable for answers."""
    return ModelsResponse(models=[ModelInfo(**m) for m in get_available_models()])
