"""
Configuration for the Judicial Suite
====================================

Environment variables:
- GENERATOR_MODE: scripted|openrouter (default: scripted)
- GENERATOR_TIMEOUT: Seconds before a generator call is abandoned (default: 10)
- OPENROUTER_API_KEY: API key for OpenRouter (openrouter mode only)
- OPENROUTER_MODEL: Model to use (default: anthropic/claude-3-haiku)
- CASE_ID_PREFIX / CASE_ID_WIDTH: Case id format (default: CASE- / 3)
- SEED_DEMO_DATA: Preload Judge Judy and the two sample cases (default: true)
- LOG_LEVEL: Root log level (default: INFO)
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas import GeneratorMode


class Settings(BaseSettings):
    """Application settings from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Response generator
    generator_mode: GeneratorMode = GeneratorMode.SCRIPTED
    generator_timeout: float = 10.0

    # OpenRouter (networked generator)
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "anthropic/claude-3-haiku"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # Case store
    case_id_prefix: str = "CASE-"
    case_id_width: int = 3
    short_facts_chars: int = 120

    # Startup data
    seed_demo_data: bool = True

    # HTTP surface
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    log_level: str = "INFO"

    # Service info
    service_version: str = "1.0.0"

    def cors_origins(self) -> List[str]:
        origins: List[str] = []
        for item in self.cors_allow_origins.split(","):
            origin = item.strip().strip('"').strip("'").rstrip("/")
            if origin:
                origins.append(origin)
        return origins

    def validate_generator_config(self) -> List[str]:
        """Validate generator configuration, return list of warnings"""
        warnings = []

        if self.generator_mode == GeneratorMode.OPENROUTER and not self.openrouter_api_key:
            warnings.append("GENERATOR_MODE=openrouter but OPENROUTER_API_KEY not set")

        if self.generator_timeout <= 0:
            warnings.append("GENERATOR_TIMEOUT must be positive; generator calls will time out immediately")

        return warnings


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
