from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """
    Settings for the narrator's Large Language Model.
    Loads from environment variables (prefixed with LLM_).
    """
    model_config = SettingsConfigDict(env_prefix='LLM_', env_file='.env', extra='ignore')

    api_key: str = ""
    api_base: Optional[str] = None  # Base URL for local models or custom endpoints

    # It's recommended to set a specific, provider-supported model in your .env file.
    model_name: str = "gemini/gemini-2.5-flash"
    temperature: float = 0.7
    max_tokens: int = 1500
    max_retries: int = 3

    # Local models (e.g. Ollama) usually run without a key.
    require_api_key: bool = True


class GameSettings(BaseSettings):
    """
    Settings for turn pacing and the engine's own diagnostics.
    Loads from environment variables (prefixed with GAME_).
    """
    model_config = SettingsConfigDict(env_prefix='GAME_', env_file='.env', extra='ignore')

    # Quiet period after each turn, sized for ~10 narrator requests per minute.
    cooldown_seconds: float = Field(default=6.0, ge=0.0)
    history_window: int = Field(default=5, ge=0)
    log_file: str = "game.log"
    use_mock_narrator: bool = False
    offline: bool = False


class Settings(BaseSettings):
    """
    Main application settings.
    """
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    llm: LLMSettings = Field(default_factory=LLMSettings)
    game: GameSettings = Field(default_factory=GameSettings)

# Export a single instance of settings for easy access throughout the app.
settings = Settings()
