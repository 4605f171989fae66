from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from jmeter_aggregator.schemas import AggregationConfig

__all__ = [
    "LoggingSettings",
    "Settings",
    "print_config",
]


class LoggingSettings(BaseModel):
    """
    Logging settings for the application
    """

    disabled: bool = False
    clear_loggers: bool = True
    console_log_level: str = "WARNING"
    log_file: str | None = None
    log_file_level: str | None = None


class Settings(BaseSettings):
    """
    All the settings are powered by pydantic_settings and could be
    populated from the .env file.

    Settings are read when instantiated; the aggregation defaults are handed to
    parsers as an explicit AggregationConfig value.

    The format to populate the settings is next

    ```sh
    export JMETER_AGGREGATOR__LOGGING__DISABLED=true
    export JMETER_AGGREGATOR__AGGREGATION__MAX_SAMPLES=10000
    ```
    """

    model_config = SettingsConfigDict(
        env_prefix="JMETER_AGGREGATOR__",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
        env_file=".env",
        env_ignore_empty=True,
    )

    logging: LoggingSettings = LoggingSettings()
    aggregation: AggregationConfig = AggregationConfig()

    def generate_env_file(self) -> str:
        """
        Generate the .env file from the current settings
        """
        return Settings._recursive_generate_env(
            self,
            self.model_config["env_prefix"],  # type: ignore  # noqa: PGH003
            self.model_config["env_nested_delimiter"],  # type: ignore  # noqa: PGH003
        )

    @staticmethod
    def _recursive_generate_env(model: BaseModel, prefix: str, delimiter: str) -> str:
        env_file = ""
        add_models = []
        for key in type(model).model_fields:
            value = getattr(model, key)
            if isinstance(value, BaseModel):
                # add nested properties to be processed after the current level
                add_models.append((key, value))
                continue

            value = model.model_dump(mode="json", include={key})[key]
            tag = f"{prefix}{key.upper()}"

            if isinstance(value, Sequence) and not isinstance(value, str):
                env_file += f"{tag}={json.dumps(value)}\n"
            elif isinstance(value, dict):
                env_file += f"{tag}={json.dumps(value)}\n"
            elif value is None or value == "":
                env_file += f"{tag}=\n"
            else:
                env_file += f'{tag}="{value}"\n'

        for key, value in add_models:
            env_file += Settings._recursive_generate_env(
                value, f"{prefix}{key.upper()}{delimiter}", delimiter
            )
        return env_file


def print_config(settings: Settings | None = None):
    """
    Print the current configuration settings
    """
    settings = settings if settings is not None else Settings()
    print(f"Settings: \n{settings.generate_env_file()}")  # noqa: T201
