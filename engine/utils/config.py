"""
CodeAtlas Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Nested BaseSettings classes read os.environ, so the .env file is loaded up front
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()


DEFAULT_DENYLIST: list[str] = [
    "Promise",
    "Array",
    "Object",
    "String",
    "Number",
    "Boolean",
    "Date",
    "Function",
    "RegExp",
    "Error",
    "JSON",
    "Math",
    "console",
    "window",
    "document",
    "undefined",
    "null",
    "true",
    "false",
    "NaN",
    "Infinity",
]


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


class ScannerSettings(BaseSettings):
    """Project discovery and parsing settings."""

    model_config = SettingsConfigDict(env_prefix="SCANNER_")

    extensions: Annotated[list[str], NoDecode] = Field(
        default=[".ts", ".tsx"],
        description="Source file extensions to catalog",
    )
    ignore_patterns: Annotated[list[str], NoDecode] = Field(
        default=[
            "node_modules",
            ".git",
            "dist",
            "build",
            "coverage",
            ".d.ts",
            ".test.",
            ".spec.",
        ],
        description="Path fragments to ignore during discovery",
    )
    skip_syntax_errors: bool = Field(
        default=True,
        description="Treat files whose tree contains syntax errors as unparseable",
    )
    max_file_size_mb: float = Field(default=5.0, ge=0.1, description="Max file size to parse")

    @field_validator("extensions", "ignore_patterns", mode="before")
    @classmethod
    def parse_lists(cls, v: str | list[str]) -> list[str]:
        """Parse list settings from comma-separated string or list."""
        return _split_csv(v)


class CandidateSettings(BaseSettings):
    """Name-candidacy settings for the heuristic reference scanner."""

    model_config = SettingsConfigDict(env_prefix="CANDIDATE_")

    denylist: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DENYLIST),
        description="Ambient and global names never treated as catalog references",
    )
    min_length: int = Field(default=2, ge=1, description="Shortest candidate name")

    @field_validator("denylist", mode="before")
    @classmethod
    def parse_denylist(cls, v: str | list[str]) -> list[str]:
        """Parse denylist from comma-separated string or list."""
        return _split_csv(v)


class ResolverSettings(BaseSettings):
    """Exact reference resolution settings."""

    model_config = SettingsConfigDict(env_prefix="RESOLVER_")

    include_unresolved_receivers: bool = Field(
        default=False,
        description="Count member accesses whose receiver type cannot be inferred",
    )
    max_inference_depth: int = Field(default=8, ge=1, le=32)


class TrackerSettings(BaseSettings):
    """Member reference tracker settings."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_")

    bucket_by_owner: bool = Field(
        default=False,
        description="Partition member buckets by owning type instead of bare member name",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="CodeAtlas")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    candidates: CandidateSettings = Field(default_factory=CandidateSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings. Pass an explicit Settings
    to scan_project() to override it per scan.
    """
    return Settings()
