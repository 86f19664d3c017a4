from .loader import load_config
from .models import (
    FingerprintConfig,
    LinkDepsConfig,
    PackageManagerConfig,
    SyncConfig,
    WatchConfig,
)

__all__ = [
    "FingerprintConfig",
    "LinkDepsConfig",
    "PackageManagerConfig",
    "SyncConfig",
    "WatchConfig",
    "load_config",
]
