"""
User settings schemas.

Settings are stored as one document per user. Every section has defaults
so a partially-populated document still validates into a full UserSettings.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import Field, StrictBool

from src.validations.base import ApiModel

Theme = Literal["light", "dark", "system"]
AIProvider = Literal["anthropic", "openai"]
AIModel = Literal[
    "claude-sonnet-4-5-20250929",
    "claude-3-5-haiku-20241022",
    "gpt-4o",
    "gpt-4o-mini",
]
ExportFormat = Literal["pdf", "docx"]


class AppearanceSettings(ApiModel):
    theme: Theme = "dark"
    reduced_motion: StrictBool = False
    compact_mode: StrictBool = False


class AISettings(ApiModel):
    provider: AIProvider = "anthropic"
    model: AIModel = "claude-sonnet-4-5-20250929"
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(default=4000, ge=100, le=8000)
    enable_tailoring: StrictBool = True
    enable_summary_generation: StrictBool = True
    enable_skill_extraction: StrictBool = True
    enable_bullet_optimization: StrictBool = True
    api_key: Optional[str] = None


class ResumePreferences(ApiModel):
    default_template: Optional[str] = None
    export_format: ExportFormat = "pdf"
    include_contact_info: StrictBool = True
    ats_optimization: StrictBool = True


class NotificationSettings(ApiModel):
    email_notifications: StrictBool = True
    application_updates: StrictBool = True
    weekly_digest: StrictBool = False


class UserSettings(ApiModel):
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)
    ai: AISettings = Field(default_factory=AISettings)
    resume: ResumePreferences = Field(default_factory=ResumePreferences)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


class AppearanceUpdate(ApiModel):
    theme: Optional[Theme] = None
    reduced_motion: Optional[StrictBool] = None
    compact_mode: Optional[StrictBool] = None


class AISettingsUpdate(ApiModel):
    provider: Optional[AIProvider] = None
    model: Optional[AIModel] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=100, le=8000)
    enable_tailoring: Optional[StrictBool] = None
    enable_summary_generation: Optional[StrictBool] = None
    enable_skill_extraction: Optional[StrictBool] = None
    enable_bullet_optimization: Optional[StrictBool] = None
    api_key: Optional[str] = None


class ResumePreferencesUpdate(ApiModel):
    default_template: Optional[str] = None
    export_format: Optional[ExportFormat] = None
    include_contact_info: Optional[StrictBool] = None
    ats_optimization: Optional[StrictBool] = None


class NotificationSettingsUpdate(ApiModel):
    email_notifications: Optional[StrictBool] = None
    application_updates: Optional[StrictBool] = None
    weekly_digest: Optional[StrictBool] = None


class UserSettingsUpdate(ApiModel):
    """Partial settings update; only provided fields are changed."""

    appearance: Optional[AppearanceUpdate] = None
    ai: Optional[AISettingsUpdate] = None
    resume: Optional[ResumePreferencesUpdate] = None
    notifications: Optional[NotificationSettingsUpdate] = None


def merge_settings(current: Dict[str, Any], update: UserSettingsUpdate) -> Dict[str, Any]:
    """
    Apply a partial update to stored settings.

    Args:
        current: Stored settings in API (camelCase) shape, possibly partial
        update: Validated partial update

    Returns:
        Full settings in API shape
    """
    merged = UserSettings.model_validate(current or {}).to_api()
    changes = update.model_dump(by_alias=True, exclude_none=True)
    for section, values in changes.items():
        merged.setdefault(section, {}).update(values)
    return UserSettings.model_validate(merged).to_api()
