"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (LEADSIFT_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    YamlConfigSettingsSource,
)

DEFAULT_INDEXES = ["leads", "merged_index_v1", "alaska_joined_data"]


def _split_csv(v: Any) -> list[str]:
    """Split a comma-separated string (or list) into trimmed, non-empty names."""
    if v is None:
        return []
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    return [str(part).strip() for part in v if str(part).strip()]


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=4, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class OpenSearchSettings(BaseModel):
    """OpenSearch connection and index selection.

    The index actually queried is the first existing one among
    ``leads_index``, ``fallback_indexes`` and ``default_indexes``, in that order.
    """

    hosts: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:9200"],
        description="OpenSearch node URLs (JSON list or comma-separated in env)",
    )
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    leads_index: str | None = Field(default=None, description="Primary leads index name")
    fallback_indexes: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Fallback index names (comma-separated in env)",
    )
    default_indexes: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_INDEXES),
        description="Built-in index names tried after the configured ones",
    )
    request_timeout: float = Field(default=30.0, description="Per-call timeout in seconds")
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra AsyncOpenSearch options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return _split_csv(v)
        return list(v)

    @field_validator("fallback_indexes", "default_indexes", mode="before")
    @classmethod
    def _parse_index_list(cls, v: Any) -> list[str]:
        return _split_csv(v)

    @field_validator("leads_index", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    def index_candidates(self) -> list[str]:
        """Ordered, de-duplicated list of index names to probe."""
        ordered: list[str] = []
        if self.leads_index:
            ordered.append(self.leads_index)
        ordered.extend(self.fallback_indexes)
        ordered.extend(self.default_indexes)
        return list(dict.fromkeys(ordered))


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the LEADSIFT_ prefix.
    Nested settings use double underscores: LEADSIFT_SERVER__PORT=9090

    Example:
        LEADSIFT_OPENSEARCH__HOSTS=https://search.internal:9200
        LEADSIFT_OPENSEARCH__LEADS_INDEX=leads_v3
        LEADSIFT_OPENSEARCH__FALLBACK_INDEXES=leads_v2,leads
    """

    model_config = {
        "env_prefix": "LEADSIFT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "yaml_file": None,
    }

    # Application metadata
    app_name: str = Field(default="LeadSift", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    # Component settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # The YAML file ranks below the environment.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        class _FileSettings(cls):  # type: ignore[valid-type,misc]
            model_config = {"yaml_file": config_path}

        return _FileSettings()
