"""Pydantic schemas for the AI analysis endpoints."""
from datetime import date

from app.schemas.base import ApiModel


class AnalysisStandupSchema(ApiModel):
    """A standup as the client holds it; only the text fields matter here."""

    standup_date: date | None = None
    yesterday: str = ""
    today: str = ""
    blockers: str | None = None
    highlights: str | None = None


class AnalyzeRequestSchema(ApiModel):
    prompt: str = ""
    standups: list[AnalysisStandupSchema] | None = None


class AnalyzeResponseSchema(ApiModel):
    analysis: str


class PromptSuggestionsSchema(ApiModel):
    suggestions: list[str]
