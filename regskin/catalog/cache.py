"""Shared holder of the current catalog snapshot."""

import threading
from typing import Optional

from regskin.catalog.snapshot import CatalogSnapshot


class CatalogCache:
    """Single slot holding the current CatalogSnapshot.

    Many readers, one writer (the refresher). Reads take no lock and never
    block each other; a reference read is atomic and snapshots are
    immutable. The lock only serializes writers.
    """

    def __init__(self, snapshot: Optional[CatalogSnapshot] = None):
        if snapshot is None:
            snapshot = CatalogSnapshot.empty()
        self._snapshot = snapshot
        self._write_lock = threading.Lock()

    def current_snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def replace(self, snapshot: CatalogSnapshot) -> CatalogSnapshot:
        """Install a new snapshot and return the one it superseded."""
        with self._write_lock:
            previous, self._snapshot = self._snapshot, snapshot
        return previous

    def is_ready(self) -> bool:
        """True once a non-empty catalog has been installed."""
        return not self.current_snapshot().is_empty()
