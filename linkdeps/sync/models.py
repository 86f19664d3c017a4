"""Outcome models for synchronization passes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SyncStatus(str, Enum):
    """What happened to one dependency during a pass."""

    unchanged = "unchanged"
    synced = "synced"
    skipped = "skipped"
    failed = "failed"


class DependencyResult(BaseModel):
    name: str
    status: SyncStatus
    changed_file: str | None = None
    built: bool = False
    detail: str | None = None


class SyncReport(BaseModel):
    """Per-dependency results of one pass, in processing order.

    ``halted`` is set when a failure stopped the pass before every declared
    dependency was processed.
    """

    results: list[DependencyResult] = Field(default_factory=list)
    halted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed and not self.halted

    @property
    def failed(self) -> list[DependencyResult]:
        return [r for r in self.results if r.status is SyncStatus.failed]
