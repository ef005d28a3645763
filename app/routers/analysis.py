"""AI analysis routes: analyze standups, suggest follow-up prompts."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.db.storage import Storage, get_storage
from app.models.user import User
from app.routers.auth import get_current_user
from app.schemas.analysis import AnalyzeRequestSchema, AnalyzeResponseSchema, PromptSuggestionsSchema
from app.services.analysis import AnalysisError, analyze_standups, suggest_prompts
from app.services.providers import TextProvider, get_text_provider

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeResponseSchema)
@router.post("/analyze-standups", response_model=AnalyzeResponseSchema)
async def analyze(
    body: AnalyzeRequestSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    provider: Annotated[TextProvider, Depends(get_text_provider)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Analyze the given standups (or every stored one) against the user's prompt."""
    if not body.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")

    standups = body.standups if body.standups is not None else await storage.list_standups()
    if not standups:
        raise HTTPException(status_code=400, detail="No standup data to analyze")

    try:
        analysis = await analyze_standups(provider, standups, body.prompt)
    except AnalysisError as exc:
        raise HTTPException(status_code=500, detail=f"Error analyzing standups: {exc}") from exc
    return AnalyzeResponseSchema(analysis=analysis)


@router.get("/prompt-suggestions", response_model=PromptSuggestionsSchema)
async def prompt_suggestions(
    storage: Annotated[Storage, Depends(get_storage)],
    provider: Annotated[TextProvider, Depends(get_text_provider)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Suggested analysis prompts; falls back to a fixed list when the provider fails."""
    standups = await storage.list_standups()
    return PromptSuggestionsSchema(suggestions=await suggest_prompts(provider, standups))
