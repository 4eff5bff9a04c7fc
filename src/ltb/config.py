# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Pipeline configuration loading."""

import json
import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ltb.errors import ConfigurationError

logger = logging.getLogger(__name__)

Provider = Literal["bedrock", "openai", "ollama"]

PROVIDERS: tuple[Provider, ...] = ("bedrock", "openai", "ollama")
DEFAULT_SETTINGS_FILE = "appsettings.json"
DEFAULT_MODEL_PROMPT = "Analyze this code and provide a detailed report:"
DEFAULT_MODEL_ID = "anthropic.claude-3-5-sonnet-20240620-v1:0"


class PipelineConfig(BaseSettings):
    """Describe all values needed to run one batch.

    Values resolve from init arguments, then environment variables, then the
    JSON settings file, then defaults. Settings file keys and environment
    variable names are the PascalCase aliases (``SourceFolderPath``,
    ``MaxTokens`` ...).

    Attributes:
        source_dir: Folder holding input documents.
        output_dir: Folder receiving documentation records.
        archive_dir: Folder receiving processed input documents.
        enterprise_domains_path: JSON file with the enterprise domain taxonomy.
        model_prompt: Instruction text placed before each request payload.
        model_id: Provider model identifier.
        provider: Model provider name.
        provider_url: Endpoint URL for ``openai`` and ``ollama`` providers.
        aws_profile: Named AWS credentials profile; ``None`` uses the default chain.
        aws_region: AWS region for the Bedrock runtime.
        max_tokens: Maximum tokens generated per reply.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        populate_by_name=True,
        json_file=DEFAULT_SETTINGS_FILE,
        json_file_encoding="utf-8",
    )

    source_dir: Path = Field(default=Path("./source"), alias="SourceFolderPath")
    output_dir: Path = Field(default=Path("./output"), alias="OutputFolderPath")
    archive_dir: Path = Field(default=Path("./archive"), alias="ArchiveFolderPath")
    enterprise_domains_path: Path = Field(
        default=Path("enterpriseDomains.json"), alias="EnterpriseDomainsJSON"
    )
    model_prompt: str = Field(default=DEFAULT_MODEL_PROMPT, alias="ModelPrompt")
    model_id: str = Field(default=DEFAULT_MODEL_ID, alias="ModelId")
    provider: Provider = Field(default="bedrock", alias="Provider")
    provider_url: str = Field(default="", alias="ProviderUrl")
    aws_profile: str | None = Field(default=None, alias="AwsProfile")
    aws_region: str = Field(default="us-east-1", alias="AwsRegion")
    max_tokens: int = Field(default=4000, alias="MaxTokens")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, JsonConfigSettingsSource(settings_cls))

    @field_validator("provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("max_tokens")
    @classmethod
    def _check_max_tokens(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"MaxTokens must be > 0, got {value}")
        return value

    @field_validator("model_id")
    @classmethod
    def _check_model_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("ModelId must not be empty")
        return value

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with non-``None`` overrides applied and validated.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        fields = type(self).model_fields
        values = self.model_dump(by_alias=True)
        for name, value in overrides.items():
            if value is not None:
                values[fields[name].alias or name] = value
        try:
            return type(self)(**values)
        except (ValueError, TypeError) as exc:
            raise ConfigurationError(f"Invalid configuration override: {exc}") from exc


def load_config(settings_path: Path | None = None) -> PipelineConfig:
    """Load configuration from defaults, a settings file and the environment.

    A missing settings file is ignored unless it was requested explicitly.

    Args:
        settings_path: Settings JSON file; defaults to ``appsettings.json`` in
            the working directory.

    Returns:
        Resolved configuration.

    Raises:
        ConfigurationError: If the settings file is unreadable or a value is
            invalid.
    """
    settings_cls: type[PipelineConfig] = PipelineConfig
    if settings_path is not None:
        if not settings_path.is_file():
            raise ConfigurationError(f"Settings file does not exist: {settings_path}")
        settings_cls = _settings_file_class(settings_path)

    try:
        config = settings_cls()
    except (ValueError, TypeError, OSError) as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    logger.info(
        f"Configuration resolved (source={config.source_dir} output={config.output_dir} "
        f"archive={config.archive_dir} provider={config.provider} model={config.model_id})"
    )
    return config


def _settings_file_class(path: Path) -> type[PipelineConfig]:
    """Bind ``PipelineConfig`` to a specific JSON settings file."""

    class FileBackedPipelineConfig(PipelineConfig):
        model_config = SettingsConfigDict(json_file=path)

    return FileBackedPipelineConfig


def load_enterprise_domains(path: Path) -> str:
    """Read the enterprise domain taxonomy once for a whole run.

    The text is injected verbatim into every prompt; it only has to be
    valid JSON.

    Raises:
        ConfigurationError: If the file is unreadable or not JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
        json.loads(text)
    except (OSError, ValueError, RecursionError) as exc:
        raise ConfigurationError(
            f"Failed to load enterprise domains file {path}: {exc}"
        ) from exc
    logger.info(f"Loaded enterprise domains (path={path} length={len(text)})")
    return text
