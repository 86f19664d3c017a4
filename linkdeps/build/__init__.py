"""Build orchestration for linked dependencies."""

from linkdeps.build.orchestrator import BuildOrchestrator

__all__ = ["BuildOrchestrator"]
