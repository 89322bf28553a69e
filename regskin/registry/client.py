import requests
from requests.exceptions import RequestException
from typing import Collection, Dict, List, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError
from .auth import RegistryAuthenticator
from .models import (
    CatalogResponse,
    ImageMetadata,
    ManifestResponse,
    RegistryConfig,
    TagList,
    V1Compatibility,
)
from .exceptions import (
    MalformedManifestError,
    RegistryConnectionError,
    RegistryNotFoundError,
    RegistryStatusError,
    RegistryValidationError,
)
from regskin.logging_config import configure_module_logging
from regskin.version import SERVER_BANNER

logger = configure_module_logging("registry.client")

MANIFEST_V2_MEDIA_TYPE = "application/vnd.docker.distribution.manifest.v2+json"

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalize_repository(path: str) -> str:
    """Repository name for a browse path ("team/app/" -> "team/app")"""
    return path.strip("/")


class Registry:
    """Registry HTTP API v2 client with bearer token challenge support"""

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self.url = str(self.config.url)
        self._session = self._create_session()
        self._auth = RegistryAuthenticator(
            self._session,
            self.url,
            timeout=self.config.timeout,
            token_cache_ttl=self.config.token_cache_ttl,
        )

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.session()
        session.headers.update({"User-Agent": SERVER_BANNER.replace(" ", "/")})
        session.verify = self.config.verify_tls
        return session

    @property
    def authenticator(self) -> RegistryAuthenticator:
        return self._auth

    def _send(
        self, url: str, headers: Dict[str, str], params: Optional[Dict] = None
    ) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            return self._session.get(
                url, headers=headers, params=params, timeout=self.config.timeout
            )
        except RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise RegistryConnectionError(f"Request to {url} failed: {e}") from e

    def _get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict] = None,
    ) -> requests.Response:
        """
        GET with a single bearer-token retry on 401

        Raises:
            RegistryConnectionError: If the registry cannot be reached
            RegistryNotFoundError: If the registry answers 404
            RegistryStatusError: For any other non-success status,
                including a 401 after the retry
            AuthError: If the token exchange fails
        """
        headers = dict(headers or {})
        response = self._send(url, headers, params)

        challenge = self._auth.challenge_from(response)
        if challenge is not None:
            token = self._auth.token_for(challenge)
            logger.debug(f"Retrying {url} with token for scope {challenge.scope}")
            response = self._send(
                url, {**headers, "Authorization": f"Bearer {token.token}"}, params
            )
            if response.status_code == 401:
                self._auth.invalidate(challenge)

        if response.status_code == 404:
            raise RegistryNotFoundError(f"Not found: {url}")
        if not 200 <= response.status_code < 300:
            raise RegistryStatusError(
                f"Registry answered {response.status_code} for {url}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def _decode(
        self, response: requests.Response, model: Type[ModelT], what: str
    ) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid {what} response: {e}")
            raise RegistryValidationError(f"Invalid {what} format: {e}") from e

    def fetch_catalog(self) -> List[str]:
        """
        Fetch the full repository catalog

        Returns:
            Repository names in registry order

        Raises:
            RegistryError: If the request fails or the response doesn't
                match the catalog schema
        """
        catalog = self._decode(
            self._get(
                f"{self.url}/v2/_catalog", params={"n": self.config.catalog_limit}
            ),
            CatalogResponse,
            "catalog",
        )
        logger.debug(f"Catalog lists {len(catalog.repositories)} repositories")
        return catalog.repositories

    def fetch_tags(self, path: str, known_repositories: Collection[str]) -> TagList:
        """
        List tags of a repository known to the catalog

        Args:
            path: Repository path, a trailing slash is allowed (e.g., "team/app/")
            known_repositories: Repository names of the current catalog;
                paths outside it are answered with no tags and no request

        Returns:
            TagList sorted by descending string order, empty when the
            repository is unknown or the registry answers 404
        """
        repo = normalize_repository(path)
        if repo not in known_repositories:
            logger.debug(f"Skipping tag lookup for {repo!r}: not in catalog")
            return TagList(name=repo)

        try:
            response = self._get(
                f"{self.url}/v2/{repo}/tags/list",
                headers={"Accept": MANIFEST_V2_MEDIA_TYPE},
            )
        except RegistryNotFoundError:
            logger.debug(f"No tag list for {repo}")
            return TagList(name=repo)

        return self._decode(response, TagList, f"tags for {repo}").sorted_descending()

    def fetch_manifest(self, path: str, tag: str) -> ImageMetadata:
        """
        Get image metadata for a tag from its schema 1 manifest

        Args:
            path: Repository name
            tag: Tag identifier

        Returns:
            ImageMetadata from the most recent history entry

        Raises:
            RegistryNotFoundError: If the repository or tag doesn't exist
            MalformedManifestError: If the history carries no v1Compatibility
            RegistryError: For any other failure
        """
        repo = normalize_repository(path)
        manifest = self._decode(
            self._get(f"{self.url}/v2/{repo}/manifests/{tag}"),
            ManifestResponse,
            f"manifest {repo}:{tag}",
        )

        if not manifest.history or "v1Compatibility" not in manifest.history[0]:
            logger.error(f"Manifest {repo}:{tag} has no v1Compatibility entry")
            raise MalformedManifestError(
                f"Manifest {repo}:{tag} has no v1Compatibility history entry"
            )

        try:
            details = V1Compatibility.model_validate_json(
                manifest.history[0]["v1Compatibility"]
            )
            return ImageMetadata(
                path=repo,
                tag=tag,
                architecture=details.architecture,
                os=details.os,
                created=details.created,
                docker_version=details.docker_version,
                labels=details.labels(),
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid v1Compatibility for {repo}:{tag}: {e}")
            raise MalformedManifestError(
                f"Invalid v1Compatibility for {repo}:{tag}: {e}"
            ) from e

    def close(self):
        """Close the underlying session"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exec_type, exec_val, exec_tb):
        self.close()
