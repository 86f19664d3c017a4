"""Change detection: file enumeration, composite fingerprints, and the record store."""

from linkdeps.fingerprint.engine import (
    compute_file_hash,
    compute_fingerprint,
    compute_hash,
    find_files,
)
from linkdeps.fingerprint.models import CompositeFingerprint, FileFingerprint
from linkdeps.fingerprint.store import FingerprintStore

__all__ = [
    "CompositeFingerprint",
    "FileFingerprint",
    "FingerprintStore",
    "compute_file_hash",
    "compute_fingerprint",
    "compute_hash",
    "find_files",
]
