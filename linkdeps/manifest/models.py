"""Data models for consumer manifests."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DependencyLink(BaseModel):
    """A dependency name bound to its local source directory.

    Immutable for the duration of a run.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    source_path: Path
    declared_path: str = ""

    @field_validator("source_path")
    @classmethod
    def validate_absolute(cls, v: Path) -> Path:
        if not v.is_absolute():
            raise ValueError(f"source_path must be absolute, got {v}")
        return v


class LibraryInfo(BaseModel):
    """Name and version read from a library's own manifest."""

    rel_path: str
    name: str
    version: str | None = None
