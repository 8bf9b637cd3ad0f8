from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # LLM APIs
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # AI collaborators
    # "mock": fixed zones + built-in copy pool, no network calls
    # "live": Anthropic vision for safe zones, OpenAI for the copy pool
    ai_backend: Literal["mock", "live"] = "mock"
    zone_model: str = "claude-haiku-4-5-20251001"
    copy_model: str = "gpt-4o-mini"

    # Storage / persistence
    storage_dir: str = "storage"
    database_path: str = "storage/app.db"
    fonts_dir: str = "assets/fonts"

    # Generation defaults
    default_language: Literal["en", "de", "fr", "es"] = "en"
    default_format: Literal["4:5", "1:1", "9:16"] = "4:5"

    # SSL / Proxy Configuration
    # Set to false when a corporate proxy breaks certificate verification
    ssl_verify: bool = True
    # Custom CA bundle path (empty → certifi default)
    ca_bundle_path: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
