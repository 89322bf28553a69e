"""FastAPI server exposing the catalog to the web front end"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from regskin.catalog.cache import CatalogCache
from regskin.catalog.refresher import Refresher
from regskin.catalog.service import CatalogService
from regskin.config import Settings
from regskin.registry.client import Registry
from regskin.registry.exceptions import (
    CatalogNotReadyError,
    RegistryError,
    RegistryNotFoundError,
)
from regskin.registry.models import Directory, ImageMetadata
from regskin.version import SERVER_BANNER, VERSION

logger = logging.getLogger(__name__)


class CatalogSummary(BaseModel):
    registry: str
    note: str
    repositories: List[str]
    fetched_at: Optional[datetime] = None


def split_reference(reference: str):
    """Split "team/app:1.0" into ("team/app", "1.0")."""
    path, sep, tag = reference.rpartition(":")
    if not sep or not path.strip("/") or not tag:
        return None
    return path, tag


def create_app(
    settings: Settings,
    registry: Optional[Registry] = None,
    cache: Optional[CatalogCache] = None,
) -> FastAPI:
    """
    Build the application and its catalog machinery

    The lifespan starts the refresher and holds off serving until the
    first catalog is loaded, failing startup after settings.startup_timeout.
    """
    registry = registry or Registry(settings.registry_config())
    cache = cache or CatalogCache()
    refresher = Refresher(registry, cache, interval=settings.refresh_interval)
    service = CatalogService(cache, registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        refresher.start()
        try:
            await refresher.wait_until_ready(settings.startup_timeout)
        except CatalogNotReadyError as e:
            logger.error(f"Registry catalog unavailable, giving up: {e}")
            await refresher.stop()
            registry.close()
            raise
        logger.info(f"Serving catalog of {settings.display_registry}")
        yield
        await refresher.stop()
        registry.close()

    app = FastAPI(title="regskin", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.cache = cache
    app.state.refresher = refresher
    app.state.service = service

    @app.middleware("http")
    async def server_header(request: Request, call_next):
        response = await call_next(request)
        response.headers["Server"] = SERVER_BANNER
        return response

    @app.get("/healthz", response_class=PlainTextResponse)
    async def healthz():
        """Liveness probe"""
        return "Ok"

    @app.get("/api/catalog", response_model=CatalogSummary)
    async def catalog():
        """Repositories of the cached catalog"""
        snapshot = service.current_snapshot()
        return CatalogSummary(
            registry=settings.display_registry,
            note=settings.registry_note,
            repositories=list(snapshot.repositories),
            fetched_at=snapshot.fetched_at,
        )

    @app.get("/api/dirs/", response_model=Directory)
    @app.get("/api/dirs/{path:path}", response_model=Directory)
    def directory(path: str = ""):
        """Child directories and tags at a catalog path"""
        try:
            listing = service.lookup_directory(path)
        except RegistryError as e:
            logger.error(f"Registry error listing {path!r}: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        if listing is None:
            raise HTTPException(status_code=404, detail="Not found")
        return listing

    @app.get("/api/images/{reference:path}", response_model=ImageMetadata)
    def image(reference: str):
        """Image metadata for a "path:tag" reference"""
        parts = split_reference(reference)
        if parts is None:
            raise HTTPException(status_code=404, detail="Not found")
        path, tag = parts
        try:
            return service.lookup_image(path, tag)
        except RegistryNotFoundError:
            raise HTTPException(status_code=404, detail="Not found")
        except RegistryError as e:
            logger.error(f"Registry error for {path}:{tag}: {e}")
            raise HTTPException(status_code=502, detail=str(e))

    return app
