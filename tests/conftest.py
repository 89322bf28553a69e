"""Shared fixtures for tests."""

import pytest

from regskin.catalog.cache import CatalogCache
from regskin.catalog.snapshot import CatalogSnapshot
from regskin.registry.client import Registry
from regskin.registry.models import RegistryConfig
from tests.fixtures.sample_data import REGISTRY_CATALOG, REGISTRY_URL


@pytest.fixture
def registry():
    """Registry client pointed at a fake registry."""
    client = Registry(RegistryConfig(url=REGISTRY_URL, timeout=5))
    yield client
    client.close()


@pytest.fixture
def catalog_snapshot() -> CatalogSnapshot:
    return CatalogSnapshot.from_repositories(REGISTRY_CATALOG["repositories"])


@pytest.fixture
def catalog_cache(catalog_snapshot) -> CatalogCache:
    return CatalogCache(catalog_snapshot)


def pytest_collection_modifyitems(items):
    """Mark tests by directory so ``-m unit`` and ``-m api`` select them."""
    for item in items:
        parts = item.path.parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        elif "api" in parts:
            item.add_marker(pytest.mark.api)
