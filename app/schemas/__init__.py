from app.schemas.analysis import (
    AnalysisStandupSchema,
    AnalyzeRequestSchema,
    AnalyzeResponseSchema,
    PromptSuggestionsSchema,
)
from app.schemas.standup import StandupInSchema, StandupOutSchema, StandupWithUsernameSchema
from app.schemas.user import AvatarUploadSchema, LoginSchema, RegisterSchema, UserOutSchema, UserUpdateSchema
from app.schemas.weekend_story import (
    WeekendStoryInSchema,
    WeekendStoryOutSchema,
    WeekendStoryWithUsernameSchema,
)

__all__ = [
    "AnalysisStandupSchema",
    "AnalyzeRequestSchema",
    "AnalyzeResponseSchema",
    "PromptSuggestionsSchema",
    "StandupInSchema",
    "StandupOutSchema",
    "StandupWithUsernameSchema",
    "AvatarUploadSchema",
    "LoginSchema",
    "RegisterSchema",
    "UserOutSchema",
    "UserUpdateSchema",
    "WeekendStoryInSchema",
    "WeekendStoryOutSchema",
    "WeekendStoryWithUsernameSchema",
]
