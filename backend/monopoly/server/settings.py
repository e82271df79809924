"""Service configuration via environment variables.

MONOPOLY_DATABASE_PATH is required; the service refuses to start without it.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from shared.validators import StringListEnvSettingsSource, parse_string_list


class ServiceSettings(BaseSettings):
    model_config = {"env_prefix": "MONOPOLY_"}

    # SQLite database file -- required, no default.
    database_path: str = Field(min_length=1)
    pool_size: int = Field(default=5, ge=1)

    host: str = Field(default="0.0.0.0", min_length=1)  # noqa: S104
    port: int = Field(default=3000, ge=1, le=65535)

    log_dir: str = Field(default="backend/logs/monopoly", min_length=1)
    cors_origins: list[str] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            StringListEnvSettingsSource(settings_cls, frozenset({"cors_origins"})),
            dotenv_settings,
            file_secret_settings,
        )
