from app.services.analysis import analyze_standups, suggest_prompts
from app.services.ownership import ensure_owner, owns
from app.services.providers import build_text_provider

__all__ = ["analyze_standups", "suggest_prompts", "ensure_owner", "owns", "build_text_provider"]
