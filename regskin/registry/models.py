from pydantic import BaseModel, Field, HttpUrl, field_validator
from typing import Any, Dict, List, Optional


class CatalogResponse(BaseModel):
    """Registry catalog response"""
    repositories: List[str] = Field(default_factory=list)

    @field_validator('repositories', mode='before')
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class TagList(BaseModel):
    """Registry tags list response"""
    name: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator('tags', mode='before')
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    def sorted_descending(self) -> "TagList":
        """Plain string order, newest-looking first. Not semver aware."""
        return self.model_copy(update={"tags": sorted(self.tags, reverse=True)})


class BearerToken(BaseModel):
    """Token endpoint response"""
    token: str


class ManifestResponse(BaseModel):
    """Schema 1 image manifest, reduced to the fields we read"""
    name: str = ""
    history: List[Dict[str, Any]] = Field(default_factory=list)


class V1Compatibility(BaseModel):
    """Decoded v1Compatibility blob of a manifest history entry"""
    architecture: str = ""
    config: Optional[Dict[str, Any]] = None
    created: str
    docker_version: str = ""
    os: str

    def labels(self) -> Dict[str, Any]:
        if not self.config:
            return {}
        return self.config.get("Labels") or {}


class ImageMetadata(BaseModel):
    """Image details shown for one tag"""
    path: str
    tag: str
    architecture: str = ""
    os: str
    created: str
    docker_version: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)


class Directory(BaseModel):
    """One level of the catalog tree"""
    dirs: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class RegistryConfig(BaseModel):
    """Registry client configuration"""
    url: HttpUrl = Field(default="http://localhost:5000")
    timeout: float = Field(default=300.0, gt=0)
    catalog_limit: int = Field(default=10000, gt=0)
    verify_tls: bool = Field(default=True)
    token_cache_ttl: float = Field(default=0.0, ge=0)

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return str(v).rstrip('/')
