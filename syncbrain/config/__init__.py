"""Configuration package: environment-driven application settings."""

from syncbrain.config.settings import Settings

__all__ = ["Settings"]
