"""Standup analysis: prompt building, provider call, suggestion parsing."""
import json
import logging
import re
from datetime import date
from typing import Any, Iterable

from app.services.providers import ProviderResult, TextProvider

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in analyzing standup data to provide insights "
    "and help teams work more effectively. "
    "Respond in a friendly, professional tone with actionable insights."
)

SUGGESTIONS_SYSTEM_PROMPT = (
    "You are an AI assistant that generates helpful prompt suggestions for analyzing standup data. "
    "Generate 5 useful prompts that would provide valuable insights about the standup data."
)

ANALYSIS_TEMPLATE = """You are analyzing daily standup data for a software development team.
I'll provide you with standup entries, each with information about:
- What was completed yesterday
- What is planned for today
- Any blockers
- Any highlights or wins

Here's the standup data:

{standups}

User's question/request: {prompt}

Please provide a detailed and insightful analysis based on the user's request."""

SUGGESTIONS_TEMPLATE = """Here's my standup data:

{standups}

Please generate 5 useful prompt suggestions as a JSON object with the following format: \
{{ "prompts": ["prompt1", "prompt2", "prompt3", "prompt4", "prompt5"] }}"""

STANDUP_SEPARATOR = "\n\n---\n\n"

DEFAULT_PROMPT_SUGGESTIONS = (
    "What are the recurring blockers in my team's standups?",
    "What trends do you see in our daily work?",
    "Summarize the main achievements from the past week",
    "What areas should our team focus on based on recent standups?",
    "Identify any potential risks or issues from our recent standups",
)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AnalysisError(Exception):
    def __init__(self, result: ProviderResult):
        super().__init__(result.message or "Error analyzing standups")
        self.result = result


def _field(standup: Any, name: str):
    if isinstance(standup, dict):
        return standup.get(name)
    return getattr(standup, name, None)


def format_standup(standup: Any) -> str:
    """One standup as a fixed five-line block (works for ORM rows, schemas and dicts)."""
    standup_date = _field(standup, "standup_date")
    if isinstance(standup_date, date):
        standup_date = standup_date.isoformat()
    return "\n".join(
        [
            f"Date: {standup_date or 'No date'}",
            f"Yesterday: {_field(standup, 'yesterday') or ''}",
            f"Today: {_field(standup, 'today') or ''}",
            f"Blockers: {_field(standup, 'blockers') or 'None'}",
            f"Highlights: {_field(standup, 'highlights') or 'None'}",
        ]
    )


def format_standups(standups: Iterable[Any]) -> str:
    return STANDUP_SEPARATOR.join(format_standup(s) for s in standups)


def build_analysis_prompt(standups: Iterable[Any], prompt: str) -> str:
    return ANALYSIS_TEMPLATE.format(standups=format_standups(standups), prompt=prompt.strip())


def parse_prompt_suggestions(text: str | None) -> list[str] | None:
    """Pull {"prompts": [...]} out of a completion; None when it isn't there."""
    if not text:
        return None
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        return None
    prompts = parsed.get("prompts") if isinstance(parsed, dict) else None
    if not isinstance(prompts, list):
        return None
    prompts = [p.strip() for p in prompts if isinstance(p, str) and p.strip()]
    return prompts or None


async def analyze_standups(provider: TextProvider, standups: list[Any], prompt: str) -> str:
    """Return the provider's completion verbatim; AnalysisError on any provider error."""
    result = await provider.generate_text(ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt(standups, prompt))
    if not result.ok:
        logger.error("Analysis failed via %s: %s (%s)", provider.name, result.message, result.error.value)
        raise AnalysisError(result)
    return result.text


async def suggest_prompts(provider: TextProvider, standups: list[Any]) -> list[str]:
    """Ask the provider for follow-up prompts; any failure yields the default five."""
    if not standups:
        return list(DEFAULT_PROMPT_SUGGESTIONS)
    result = await provider.generate_text(
        SUGGESTIONS_SYSTEM_PROMPT, SUGGESTIONS_TEMPLATE.format(standups=format_standups(standups))
    )
    if not result.ok:
        logger.warning("Prompt suggestions defaulted (%s): %s", result.error.value, result.message)
        return list(DEFAULT_PROMPT_SUGGESTIONS)
    suggestions = parse_prompt_suggestions(result.text)
    if suggestions is None:
        logger.warning("Prompt suggestions defaulted: no prompts list in completion")
        return list(DEFAULT_PROMPT_SUGGESTIONS)
    return suggestions
