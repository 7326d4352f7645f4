"""Configuration — Pydantic settings loaded from env vars and YAML."""

from leadsift.config.settings import Settings

__all__ = ["Settings"]
