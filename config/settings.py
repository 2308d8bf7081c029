"""
Settings Configuration
Pydantic-validated settings, overridable from the environment
"""
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class LabelSettings(BaseSettings):
    """Shortcut label budgets"""
    # Launchers truncate long labels on their own, but not all of them agree on where
    short_max_length: int = Field(default=12, ge=0, description="Short label max length")
    long_max_length: int = Field(default=30, ge=0, description="Long label max length")
    
    class Config:
        env_prefix = "LABEL_"


class IconSettings(BaseSettings):
    """Shortcut icon geometry"""
    # 44dp @ xxxhdpi
    recommended_pixel_length: int = Field(default=176, ge=1, description="Target icon edge in pixels")
    mask_shape: Literal["circle", "rounded", "square"] = Field(default="circle", description="Mask applied to photo icons")
    corner_radius_ratio: float = Field(default=0.25, ge=0.0, le=0.5, description="Corner radius for the rounded mask")
    fallback_background: str = Field(default="#FFFFFF", description="Opaque canvas colour behind fallback avatars")
    
    class Config:
        env_prefix = "ICON_"


class ScheduleSettings(BaseSettings):
    """Content-change debounce window"""
    min_update_delay_millis: int = Field(default=10_000, ge=0, description="Delay after a change before refreshing")
    max_update_delay_millis: int = Field(default=24 * 60 * 60 * 1000, ge=0, description="Upper bound on the refresh delay")
    
    class Config:
        env_prefix = "SCHEDULE_"

    @model_validator(mode="after")
    def _ordered_window(self) -> "ScheduleSettings":
        if self.max_update_delay_millis < self.min_update_delay_millis:
            raise ValueError("max_update_delay_millis must be >= min_update_delay_millis")
        return self


class SyncSettings(BaseSettings):
    """Reconciliation behaviour"""
    max_shortcuts: int = Field(default=3, ge=0, description="Dynamic shortcuts published per refresh")
    feature_flag: str = Field(default="dynamic_shortcuts", description="Feature gate guarding the refresh")
    disabled_message: str = Field(default="Shortcut has been disabled", description="Message for disabled shortcuts")
    removed_message: str = Field(default="Contact was removed", description="Message for shortcuts whose contact is gone")
    query_retries: int = Field(default=3, ge=1, description="Attempts for each contact query")
    retry_wait_max_seconds: float = Field(default=2.0, ge=0.0, description="Backoff ceiling between query attempts")
    
    class Config:
        env_prefix = "SHORTCUTS_"

    @field_validator("feature_flag", "disabled_message", "removed_message", mode="before")
    @classmethod
    def _non_empty_text(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("value is required")
        return text


class Settings(BaseSettings):
    """Top-level settings aggregating every section"""
    
    labels: LabelSettings = Field(default_factory=LabelSettings)
    icons: IconSettings = Field(default_factory=IconSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
    
    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings after applying an optional .env file"""
        if env_path is None:
            # config/.env by default
            env_path = Path(__file__).parent / ".env"
        
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
        
        return cls(
            labels=LabelSettings(),
            icons=IconSettings(),
            schedule=ScheduleSettings(),
            sync=SyncSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()

