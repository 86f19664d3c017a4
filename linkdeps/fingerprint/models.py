"""Data models for dependency fingerprints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileFingerprint:
    """Content hash of one eligible file, keyed by its POSIX relative path."""

    relative_path: str
    content_hash: str

    @property
    def line(self) -> str:
        return f"{self.content_hash} {self.relative_path}"


@dataclass(frozen=True)
class CompositeFingerprint:
    """Ordered file fingerprints of a whole dependency tree.

    The text form (``"<hash> <path>"`` lines joined by newlines) is both the
    persisted record and the comparison key, so two composites are equal
    exactly when their text is equal.
    """

    files: tuple[FileFingerprint, ...] = ()

    def __post_init__(self) -> None:
        paths = [f.relative_path for f in self.files]
        if paths != sorted(paths):
            raise ValueError("file fingerprints must be sorted by relative path")

    @property
    def text(self) -> str:
        return "\n".join(f.line for f in self.files)

    @property
    def paths(self) -> list[str]:
        return [f.relative_path for f in self.files]

    @classmethod
    def from_text(cls, text: str) -> CompositeFingerprint:
        """Parse a persisted record. Paths may contain spaces; hashes never do."""
        files = []
        for line in text.splitlines():
            if not line:
                continue
            content_hash, _, rel = line.partition(" ")
            files.append(FileFingerprint(relative_path=rel, content_hash=content_hash))
        return cls(files=tuple(sorted(files, key=lambda f: f.relative_path)))

    def first_changed_path(self, previous: CompositeFingerprint | None) -> str | None:
        """Return the path on the first line that differs from *previous*.

        Returns None when both are identical or there is no previous record.
        A removal past the end of this composite reports the removed path.
        """
        if previous is None:
            return None
        current = self.files
        old = previous.files
        for i in range(max(len(current), len(old))):
            if i >= len(current):
                return old[i].relative_path
            if i >= len(old) or current[i] != old[i]:
                return current[i].relative_path
        return None
