"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from smlogic.engine.config import CompileConfig
from smlogic.engine.constants import MAX_CONNECTIONS


class Settings(BaseSettings):
    smlogic_env: str = "development"
    smlogic_log_level: str = "info"

    # Game blueprint folder; empty disables saving into it
    smlogic_blueprints_dir: str = ""

    # Compiler checks
    smlogic_max_connections: int = MAX_CONNECTIONS
    smlogic_check_overflow: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def compile_config(self) -> CompileConfig:
        return CompileConfig(
            max_connections=self.smlogic_max_connections,
            check_connections_overflow=self.smlogic_check_overflow,
        )


settings = Settings()
