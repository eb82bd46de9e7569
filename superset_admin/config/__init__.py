"""Configuration module for the Superset admin provider."""
from .settings import ProviderConfig, load_settings

__all__ = ["ProviderConfig", "load_settings"]
