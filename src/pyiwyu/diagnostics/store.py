# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-file diagnostic store acting as the publishing surface."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from threading import RLock

from ..constants import COLLECTION_NAME
from ..core.models import Diagnostic


class CollectionDisposedError(RuntimeError):
    """Raised when a disposed :class:`DiagnosticCollection` is written to."""


class DiagnosticCollection:
    """Thread-safe mapping from file identity to its current diagnostics.

    ``set`` replaces the whole set for one file; an empty set is a delete so
    that a cleared file disappears from the collection entirely.
    """

    def __init__(self, name: str = COLLECTION_NAME) -> None:
        self.name = name
        self._entries: dict[Path, tuple[Diagnostic, ...]] = {}
        self._lock = RLock()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def set(self, path: Path, diagnostics: Iterable[Diagnostic]) -> None:
        """Replace the diagnostics of ``path``."""
        frozen = tuple(diagnostics)
        with self._lock:
            self._ensure_open()
            if frozen:
                self._entries[path] = frozen
            else:
                self._entries.pop(path, None)

    def delete(self, path: Path) -> None:
        with self._lock:
            self._ensure_open()
            self._entries.pop(path, None)

    def get(self, path: Path) -> tuple[Diagnostic, ...]:
        with self._lock:
            return self._entries.get(path, ())

    def has(self, path: Path) -> bool:
        with self._lock:
            return path in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def dispose(self) -> None:
        """Drop every entry; later writes raise :class:`CollectionDisposedError`."""
        with self._lock:
            self._entries.clear()
            self._disposed = True

    def snapshot(self) -> dict[Path, tuple[Diagnostic, ...]]:
        with self._lock:
            return dict(self._entries)

    def __iter__(self) -> Iterator[tuple[Path, tuple[Diagnostic, ...]]]:
        return iter(self.snapshot().items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _ensure_open(self) -> None:
        if self._disposed:
            raise CollectionDisposedError(f"diagnostic collection '{self.name}' has been disposed")


def publish(collection: DiagnosticCollection, diagnostics_by_file: Mapping[Path, Iterable[Diagnostic]]) -> list[Path]:
    """Reconcile ``diagnostics_by_file`` into ``collection``, one call per file.

    Files absent from ``diagnostics_by_file`` are left untouched.

    Returns:
        list[Path]: Files whose diagnostics were replaced or cleared.
    """

    touched: list[Path] = []
    for path, diagnostics in diagnostics_by_file.items():
        collection.set(path, diagnostics)
        touched.append(path)
    return touched


__all__ = ["CollectionDisposedError", "DiagnosticCollection", "publish"]
