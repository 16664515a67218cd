"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here and handed to adapters and
use cases at the composition root; nothing else reads the environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Toggle slowapi rate limiting.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_chat: Rate limit for the advisor endpoint.
        cors_allow_origin: Value of Access-Control-Allow-Origin.
        supabase_url: Base URL of the hosted REST datastore.
        supabase_service_role_key: Service-role key for the datastore.
        openrouter_api_key: OpenRouter key. Empty disables LLM mode.
        http_timeout_seconds: Per-call timeout for datastore and LLM calls.
        history_limit: Turns loaded from the datastore per chat.
        history_window: Turns forwarded to the LLM per chat.
        context_position_limit: Open positions loaded into the context.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "Kalshorb Advisor"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_chat: str = "20/minute"
    cors_allow_origin: str = "*"

    # --- Datastore ---
    supabase_url: str = "http://localhost:54321"
    supabase_service_role_key: str = ""

    # --- OpenRouter ---
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "mistralai/mistral-7b-instruct"
    openrouter_temperature: float = 0.7
    openrouter_max_tokens: int = 1024
    openrouter_top_p: float = 0.95
    openrouter_quick_max_tokens: int = 512
    openrouter_referer: str = "https://kalshorb.space.minimax.io"
    openrouter_title: str = "Kalshorb AI Advisor"

    # --- Advisor ---
    http_timeout_seconds: float = 30.0
    history_limit: int = 10
    history_window: int = 8
    context_position_limit: int = 5


settings = Settings()
