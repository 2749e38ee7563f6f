"""Pydantic models for drift-check configuration."""

from pydantic import BaseModel, Field

from schema_drift.schema.model import TableModel
from schema_drift.schema.syntax import Syntax


class DatabaseProfile(BaseModel):
    """Database connection profile from schema-drift.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    dialect: Syntax | None = None  # Inferred from url when omitted

    @property
    def syntax(self) -> Syntax:
        return self.dialect or Syntax.from_url(self.url)


class DriftConfig(BaseModel):
    """Complete configuration from schema-drift.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    metadata_modules: list[str] = Field(default_factory=list)
    tables: list[TableModel] = Field(default_factory=list)
