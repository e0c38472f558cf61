"""Application configuration"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # Platform API consumed by the widget (config, message, capture-lead)
    api_base_url: str = "http://localhost:5000"

    # Session storage backend: "memory" (tab scoped) or "supabase"
    storage_backend: str = "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Widget UX
    prechat_submit_delay: float = 0.3  # seconds

    # Idle widget sessions (no request for this long) are unmounted
    session_idle_timeout: int = 1800  # seconds
    session_sweep_interval: int = 60  # seconds

    # Application
    environment: str = "development"
    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
