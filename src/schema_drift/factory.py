"""Catalog factory and one-call drift check.

Resolves a profile from ``schema-drift.toml``, builds the matching catalog,
and audits every configured model against it.

Profile selection order:
1. Explicit ``profile_name`` argument
2. ``{env_prefix}DB_PROFILE`` environment variable
3. ``ProfileNotFoundError``
"""

import logging
import os
from pathlib import Path
from urllib.parse import quote

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from schema_drift.catalog.engine import EngineCatalog
from schema_drift.catalog.postgres import PostgresCatalog
from schema_drift.config.loader import load_config, load_metadata_from_modules
from schema_drift.config.models import DatabaseProfile, DriftConfig
from schema_drift.schema.auditor import audit_models
from schema_drift.schema.model import ModelSchema, SqlAlchemyModel
from schema_drift.schema.models import DriftReport
from schema_drift.schema.syntax import Syntax

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when no database profile is configured."""

    pass


class CheckResult(BaseModel):
    """Result of check_profile().

    Example:
        >>> result = CheckResult(success=True, profile_name="dev")
        >>> result.has_drift
        False
    """

    success: bool
    profile_name: str | None = None
    report: DriftReport | None = None
    error: str | None = None

    @property
    def has_drift(self) -> bool:
        return self.report is not None and self.report.has_drift


# ============================================================================
# Profile resolution
# ============================================================================


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from the ``{env_prefix}DB_PROFILE`` env var.

    Raises:
        ProfileNotFoundError: If the variable is not set
    """
    env_var = f"{env_prefix}DB_PROFILE"
    env_profile = os.environ.get(env_var)
    if env_profile:
        return env_profile

    raise ProfileNotFoundError(
        "No database profile selected.\n"
        f"Set {env_var}=<name> or pass --profile <name>."
    )


def get_profile(config: DriftConfig, profile_name: str) -> DatabaseProfile:
    """Look up *profile_name* in *config*.

    Raises:
        ProfileNotFoundError: If the profile is not configured
    """
    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found. Available: {available}"
        )
    return config.profiles[profile_name]


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


# ============================================================================
# Catalog and model construction
# ============================================================================


def get_catalog(profile: DatabaseProfile) -> PostgresCatalog | EngineCatalog:
    """Build the catalog for *profile*.

    PostgreSQL profiles use ``PostgresCatalog`` (psycopg, information_schema);
    every other dialect uses ``EngineCatalog`` (SQLAlchemy reflection).  The
    caller must enter the returned catalog with ``async with``.
    """
    url = resolve_url(profile)
    syntax = profile.syntax
    if syntax is Syntax.POSTGRES:
        return PostgresCatalog(url)
    return EngineCatalog(url, syntax=syntax)


def collect_models(config: DriftConfig) -> list[ModelSchema]:
    """Models declared in *config*: TOML tables first, then metadata modules."""
    models: list[ModelSchema] = list(config.tables)
    for metadata in load_metadata_from_modules(config.metadata_modules):
        models.extend(SqlAlchemyModel.from_metadata(metadata))
    return models


# ============================================================================
# Drift check
# ============================================================================


async def check_profile(
    profile_name: str | None = None,
    models: list[ModelSchema] | None = None,
    config_path: Path | None = None,
    env_prefix: str = "",
) -> CheckResult:
    """Audit models against the database of a profile.

    Expected failures (no profile, missing config, a URL without an async
    driver, connection failure) are returned as
    ``CheckResult(success=False, error=...)``, not raised.

    Args:
        profile_name: Profile from the config file.  If None, uses the
            ``{env_prefix}DB_PROFILE`` environment variable.
        models: Models to audit.  If None, uses the models declared in the
            config file.
        config_path: Config file (default: ``schema-drift.toml``).
        env_prefix: Prefix for environment variable lookup.

    Returns:
        CheckResult; ``success`` is False when drift was found.

    Example:
        >>> result = await check_profile("dev")
        >>> if not result.success:
        ...     print(result.error)
    """
    try:
        if profile_name is None:
            profile_name = get_active_profile_name(env_prefix=env_prefix)
        config = load_config(config_path)
        profile = get_profile(config, profile_name)
        if models is None:
            models = collect_models(config)
        if not models:
            raise ValueError(
                "No models to check. Declare [[tables]] or [models] metadata_modules."
            )
        catalog = get_catalog(profile)
    except (
        ProfileNotFoundError,
        FileNotFoundError,
        ValueError,
        ImportError,
        AttributeError,
        TypeError,
        SQLAlchemyError,
    ) as e:
        return CheckResult(success=False, profile_name=profile_name, error=str(e))

    try:
        async with catalog:
            report = await audit_models(models, catalog)
    except Exception as e:
        logger.debug(f"Catalog failure for profile {profile_name}", exc_info=True)
        return CheckResult(
            success=False,
            profile_name=profile_name,
            error=f"Failed to query database: {e}",
        )

    if report.has_drift:
        logger.warning(
            f"Schema drift in profile {profile_name}: {report.issue_count} issues"
        )
        return CheckResult(
            success=False,
            profile_name=profile_name,
            report=report,
            error=f"Schema drift detected: {report.issue_count} issues",
        )

    return CheckResult(success=True, profile_name=profile_name, report=report)
