"""Background catalog refresh.

The refresher fetches the full catalog, builds a new snapshot and installs
it into the cache, once at startup and then on a fixed interval. A failed
fetch is logged and the previous snapshot stays in place.
"""

import asyncio
import contextlib
import threading
from enum import Enum
from typing import Optional

from regskin.catalog.cache import CatalogCache
from regskin.catalog.snapshot import CatalogSnapshot
from regskin.logging_config import configure_module_logging
from regskin.registry.client import Registry
from regskin.registry.exceptions import (
    CatalogNotReadyError,
    RefreshError,
    RegistryError,
)

logger = configure_module_logging("catalog.refresher")

DEFAULT_INTERVAL = 10 * 60.0


class RefresherState(str, Enum):
    """Refresher lifecycle states."""

    IDLE = "idle"
    FETCHING = "fetching"


class Refresher:
    """Periodically republishes the registry catalog into a CatalogCache."""

    def __init__(
        self,
        registry: Registry,
        cache: CatalogCache,
        interval: float = DEFAULT_INTERVAL,
    ):
        """Initialize the refresher.

        Args:
            registry: Client used to fetch the catalog
            cache: Cache receiving each new snapshot
            interval: Seconds between fetches
        """
        self.registry = registry
        self.cache = cache
        self.interval = interval
        self.state = RefresherState.IDLE
        self.last_error: Optional[RefreshError] = None
        self._fetch_lock = threading.Lock()
        self._stop: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    def refresh_once(self) -> bool:
        """Fetch the catalog and install it.

        Returns False without doing anything if a fetch is already in
        flight, and False after logging if the fetch fails.
        """
        if not self._fetch_lock.acquire(blocking=False):
            logger.debug("Catalog fetch already in flight, skipping")
            return False

        self.state = RefresherState.FETCHING
        try:
            logger.info("Updating catalog...")
            try:
                repositories = self.registry.fetch_catalog()
            except RegistryError as e:
                self.last_error = RefreshError(f"Catalog refresh failed: {e}")
                logger.error(f"Catalog refresh failed, keeping previous catalog: {e}")
                return False

            snapshot = CatalogSnapshot.from_repositories(repositories)
            self.cache.replace(snapshot)
            self.last_error = None
            logger.info(f"Catalog fetched: {len(snapshot)} repositories")
            return True
        finally:
            self.state = RefresherState.IDLE
            self._fetch_lock.release()

    async def _tick(self):
        try:
            await asyncio.to_thread(self.refresh_once)
        except Exception:
            logger.exception("Unexpected error during catalog refresh")

    async def run(self, stop_event: asyncio.Event):
        """Refresh now, then every ``interval`` seconds until stopped."""
        while not stop_event.is_set():
            await self._tick()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    def start(self) -> asyncio.Task:
        """Start the refresh loop as a task on the running event loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop), name="catalog-refresher")
        return self._task

    async def stop(self):
        """Stop the refresh loop; an in-flight fetch is abandoned."""
        if self._task is None:
            return
        self._stop.set()
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait_until_ready(self, timeout: float, poll_interval: float = 2.0):
        """Wait until the cache holds a non-empty catalog.

        Raises:
            CatalogNotReadyError: If no catalog was loaded within ``timeout``
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not self.cache.is_ready():
            remaining = deadline - loop.time()
            if remaining <= 0:
                reason = f": {self.last_error}" if self.last_error else ""
                raise CatalogNotReadyError(
                    f"No catalog loaded within {timeout:.0f}s{reason}"
                )
            await asyncio.sleep(min(poll_interval, remaining))
        logger.debug(
            f"Catalog ready with {len(self.cache.current_snapshot())} repositories"
        )
