"""
Configuration management for toolturn.

This module provides a Settings class that loads configuration from environment
variables (prefix ``TOOLTURN_``) and an optional ``.env`` file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant called Troll. Follow these instructions:\n"
    "- Use the available tools when they help answer the user.\n"
    "- Do not use celebrity names in image generation prompts; describe the "
    "style or subject instead.\n"
    "- When a tool result is present in the conversation, answer from it."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Model invoker settings
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str | None = None  # None = fall back to OPENAI_API_KEY
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.1
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Tool settings
    image_model: str = "dall-e-3"
    reddit_subreddit: str = "nba"
    http_timeout: float = 10.0

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8765

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TOOLTURN_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


def get_settings() -> Settings:
    """Get the application settings instance."""
    return Settings()
