"""Read access to the catalog for the presentation layer."""

from typing import Optional

from regskin.catalog.cache import CatalogCache
from regskin.catalog.snapshot import CatalogSnapshot
from regskin.registry.client import Registry
from regskin.registry.models import Directory, ImageMetadata


class CatalogService:
    """Combines the cached catalog with live registry lookups."""

    def __init__(self, cache: CatalogCache, registry: Registry):
        self.cache = cache
        self.registry = registry

    def current_snapshot(self) -> CatalogSnapshot:
        return self.cache.current_snapshot()

    def lookup_directory(self, path: str) -> Optional[Directory]:
        """
        Describe one level of the catalog tree

        Args:
            path: Slash-delimited path, "" for the root

        Returns:
            Directory with child names and the tags of the repository at
            that path (none for pure directories), or None if the path is
            not in the catalog
        """
        snapshot = self.cache.current_snapshot()
        node = snapshot.index.lookup(path)
        if node is None:
            return None

        tags = self.registry.fetch_tags(path, snapshot.repository_names)
        return Directory(dirs=node.child_names(), tags=tags.tags)

    def lookup_image(self, path: str, tag: str) -> ImageMetadata:
        """Image metadata for ``path:tag``; registry errors propagate."""
        return self.registry.fetch_manifest(path, tag)
