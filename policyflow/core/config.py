"""
Configuration for the policy workflow service
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Service
    app_name: str = "Policy Workflow Engine"
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Execution
    max_steps: int = 1000  # Upper bound on visited steps per run (cycle guard)
    entry_label: str = "Start"  # Reserved label used when no node is flagged as entry
    custom_code_enabled: bool = True

    model_config = SettingsConfigDict(
        env_prefix="POLICYFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
