"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from schema_drift.config import load_config, DatabaseProfile, DriftConfig
"""

from schema_drift.config.loader import load_config, load_metadata_from_modules
from schema_drift.config.models import DatabaseProfile, DriftConfig

__all__ = ["load_config", "load_metadata_from_modules", "DatabaseProfile", "DriftConfig"]
