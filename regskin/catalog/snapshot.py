"""Immutable point-in-time view of the registry catalog."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import FrozenSet, Iterable, Optional, Tuple

from regskin.catalog.tree import PathIndex


@dataclass(frozen=True)
class CatalogSnapshot:
    """Repository list and the index built from it.

    Built in full before it is published and never mutated afterwards, so
    readers may hold on to one while a newer snapshot replaces it.
    """

    repositories: Tuple[str, ...]
    index: PathIndex
    fetched_at: Optional[datetime] = None
    _names: FrozenSet[str] = field(default=frozenset(), repr=False, compare=False)

    @classmethod
    def from_repositories(
        cls, repositories: Iterable[str], fetched_at: Optional[datetime] = None
    ) -> "CatalogSnapshot":
        repositories = tuple(repositories)
        return cls(
            repositories=repositories,
            index=PathIndex.from_paths(repositories),
            fetched_at=fetched_at or datetime.now(timezone.utc),
            _names=frozenset(repositories),
        )

    @classmethod
    def empty(cls) -> "CatalogSnapshot":
        return cls(repositories=(), index=PathIndex())

    @property
    def repository_names(self) -> FrozenSet[str]:
        return self._names

    def is_empty(self) -> bool:
        return not self.repositories

    def __len__(self) -> int:
        return len(self.repositories)
