from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Startup configuration, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    together_api_key: str = Field(default="")
    together_base_url: str = Field(default="https://api.together.xyz/v1")
    llm_model: str = Field(default="meta-llama/Llama-3.3-70B-Instruct-Turbo-Free")
    llm_temperature: float = Field(default=0.7, ge=0)
    llm_max_tokens: int = Field(default=800, gt=0)
    llm_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    use_mock_llm: bool = Field(default=False)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
    cors_origins: str = Field(default="*")


def get_settings() -> Settings:
    return Settings()
