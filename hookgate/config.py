"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """hookgate configuration. All values come from environment variables.

    Built once at startup and passed by reference; instances are frozen.
    """

    # Server
    webhook_host: str = Field(default="0.0.0.0")
    webhook_port: int = Field(default=8443)

    # Whole request bodies are buffered in memory before validation, so this
    # is also the largest payload a webhook function can receive.
    max_body_bytes: int = Field(default=1024 * 1024)

    # Receivers
    require_https: bool = Field(default=False)
    secrets_path: Path = Field(default=Path("data/secrets"))
    # "<provider>.<function>" -> key. "" disables the receiver's secret check.
    receiver_secret_overrides: dict[str, str] = Field(default_factory=dict)

    # Functions
    function_modules: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_function_modules(self) -> list[str]:
        """Parse FUNCTION_MODULES into a list of importable module names."""
        if not self.function_modules.strip():
            return []
        return [name.strip() for name in self.function_modules.split(",") if name.strip()]


settings = Settings()
