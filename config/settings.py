"""
Configuration settings for the application
"""
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,  # Allow both field name and alias
        extra="ignore",
    )

    # Client credential check
    api_key: str = Field(default="Bearer change-me", alias="API_KEY")
    user_agent: str = Field(default="CustomClient/1.0", alias="USER_AGENT")
    app_version: str = Field(default="1.0", alias="APP_VERSION")

    # Entitlements
    default_entitlement_type: str = Field(default="Standard", alias="DEFAULT_ENTITLEMENT_TYPE")
    default_subscription_days: int = Field(default=30, alias="DEFAULT_SUBSCRIPTION_DAYS")

    # Infrastructure configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./database.db", alias="DATABASE_URL")
    seed_demo_user: bool = Field(default=False, alias="SEED_DEMO_USER")

    # Update distribution
    updates_dir: Path = Field(default=Path("./updates"), alias="UPDATES_DIR")
    update_filename_template: str = Field(
        default="UpdateAssistant_v{version}.exe",
        alias="UPDATE_FILENAME_TEMPLATE"
    )
    update_download_url: Optional[str] = Field(default=None, alias="UPDATE_DOWNLOAD_URL")
    public_base_url: str = Field(default="http://localhost:3000", alias="PUBLIC_BASE_URL")

    # HTTP server
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Logging
    log_dir: Path = Field(default=Path("./logs"), alias="LOG_DIR")


# Instantiate settings object
settings = Settings()
