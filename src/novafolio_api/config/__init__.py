"""Configuration module for NovaFolio API."""

from .settings import get_settings, Settings

__all__ = ["get_settings", "Settings"]
