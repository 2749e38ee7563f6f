"""Configuration loading: TOML file and SQLAlchemy metadata modules."""

import tomllib
from importlib import import_module
from pathlib import Path

from sqlalchemy import MetaData

from schema_drift.config.models import DriftConfig

DEFAULT_CONFIG_FILE = "schema-drift.toml"


def load_config(config_path: Path | None = None) -> DriftConfig:
    """Load drift-check configuration from a TOML file.

    Args:
        config_path: Path to the TOML file (default: ``schema-drift.toml``
            in the current working directory).

    Returns:
        DriftConfig with profiles and model declarations.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_FILE} with a [profiles.<name>] section."
        )

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    # Parse model settings
    model_settings = data.get("models", {})

    return DriftConfig(
        profiles=data.get("profiles", {}),
        metadata_modules=model_settings.get("metadata_modules", []),
        tables=data.get("tables", []),
    )


def load_metadata_from_modules(modules: list[str]) -> list[MetaData]:
    """Import SQLAlchemy ``MetaData`` objects from dotted module paths.

    Each entry is ``package.module`` (uses its ``metadata`` attribute) or
    ``package.module:attr``.  The attribute may be a ``MetaData``, a
    declarative base exposing ``.metadata``, or an iterable of ``MetaData``.

    Raises:
        AttributeError: If the module has no such attribute.
        TypeError: If the attribute is not MetaData.
    """
    metadata_objects: list[MetaData] = []
    for dotted_path in modules:
        module_path, _, attr = dotted_path.partition(":")
        module = import_module(module_path)
        candidate = getattr(module, attr or "metadata", None)
        if candidate is None:
            raise AttributeError(
                f"Module {module_path} has no MetaData attribute: {attr or 'metadata'}"
            )

        # Declarative base classes carry their MetaData
        if not isinstance(candidate, MetaData) and isinstance(
            getattr(candidate, "metadata", None), MetaData
        ):
            candidate = candidate.metadata

        if isinstance(candidate, MetaData):
            metadata_objects.append(candidate)
        elif isinstance(candidate, (list, tuple)) and all(
            isinstance(item, MetaData) for item in candidate
        ):
            metadata_objects.extend(candidate)
        else:
            raise TypeError(f"{dotted_path} is not a SQLAlchemy MetaData object")
    return metadata_objects
