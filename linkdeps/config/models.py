import hashlib
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class FingerprintConfig(BaseModel):
    algorithm: str = "sha1"
    workers: int = Field(default=8, gt=0)
    marker_file: str = ".link-deps-hash"
    always_exclude: list[str] = Field(default_factory=lambda: [".git"])
    package_cache_dir: str = "node_modules"

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        name = value.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm '{value}'")
        # shake_* digests need a length argument that hexdigest() is not given.
        if name.startswith("shake_"):
            raise ValueError(f"Variable-length hash algorithm '{value}' is not supported")
        return name


class PackageManagerConfig(BaseModel):
    name: Literal["auto", "npm", "yarn", "pnpm"] = "auto"


class SyncConfig(BaseModel):
    manifest_file: str = "package.json"
    link_key: str = "linkDependencies"
    install_dir: str = "node_modules"
    continue_on_error: bool = False


class WatchConfig(BaseModel):
    debounce_seconds: float = Field(default=0.5, gt=0)
    ignore_parts: list[str] = Field(default_factory=lambda: [".git", "node_modules"])


class LinkDepsConfig(BaseModel):
    fingerprint: FingerprintConfig = Field(default_factory=FingerprintConfig)
    package_manager: PackageManagerConfig = Field(default_factory=PackageManagerConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
