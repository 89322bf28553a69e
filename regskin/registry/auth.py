"""Bearer token challenge handling for the Registry HTTP API.

A registry that requires authentication answers ``401`` with a header like::

    WWW-Authenticate: Bearer realm="https://reg/v2/token",service="reg",scope="repository:foo:pull"

The client exchanges the ``service``/``scope`` pair for a token at the
registry's token endpoint and retries the original request with
``Authorization: Bearer <token>``.
"""

import re
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import requests
from pydantic import ValidationError
from requests.exceptions import RequestException

from regskin.logging_config import configure_module_logging
from regskin.registry.exceptions import (
    MalformedTokenResponseError,
    TokenEndpointUnreachableError,
)
from regskin.registry.models import BearerToken

logger = configure_module_logging("registry.auth")

CHALLENGE_PATTERN = re.compile(r'service="([^"]+)",\s*scope="([^"]+)"', re.IGNORECASE)
REALM_PATTERN = re.compile(r'realm="([^"]*)"', re.IGNORECASE)


@dataclass(frozen=True)
class AuthChallenge:
    """Parameters of a Bearer challenge from a 401 response."""

    service: str
    scope: str
    realm: Optional[str] = None


class RegistryAuthenticator:
    """Turns 401 challenges into bearer tokens."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        timeout: float = 300.0,
        token_cache_ttl: float = 0.0,
    ):
        """Initialize the authenticator.

        Args:
            session: Session shared with the registry client
            base_url: Registry base URL, the token endpoint lives under it
            timeout: Token request timeout in seconds
            token_cache_ttl: Seconds a token is reused for the same
                service/scope pair, 0 to fetch a fresh one on every 401
        """
        self._session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_cache_ttl = token_cache_ttl
        self._tokens: Dict[Tuple[str, str], Tuple[BearerToken, float]] = {}
        self._lock = threading.Lock()

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/v2/token"

    def challenge_from(self, response: requests.Response) -> Optional[AuthChallenge]:
        """Extract a Bearer challenge from a rejected response.

        Returns None unless the response is a 401 carrying a parseable
        Bearer ``WWW-Authenticate`` header.
        """
        if response.status_code != 401:
            return None

        header = response.headers.get("WWW-Authenticate")
        if not header or not header.strip().lower().startswith("bearer"):
            logger.debug(f"401 without a Bearer challenge: {header!r}")
            return None

        match = CHALLENGE_PATTERN.search(header)
        if not match:
            logger.debug(f"Unparseable WWW-Authenticate header: {header!r}")
            return None

        realm = REALM_PATTERN.search(header)
        return AuthChallenge(
            service=match.group(1),
            scope=match.group(2),
            realm=realm.group(1) if realm else None,
        )

    def exchange(self, challenge: AuthChallenge) -> BearerToken:
        """Exchange a challenge for a token at the registry token endpoint.

        Raises:
            TokenEndpointUnreachableError: Request failed or was refused
            MalformedTokenResponseError: Body carried no usable token
        """
        logger.debug(
            f"Requesting token for service={challenge.service} scope={challenge.scope}"
        )
        try:
            response = self._session.get(
                self.token_url,
                params={"service": challenge.service, "scope": challenge.scope},
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"Token endpoint unreachable: {e}")
            raise TokenEndpointUnreachableError(f"Token request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TokenEndpointUnreachableError(
                f"Token endpoint answered {response.status_code} for scope {challenge.scope}"
            )

        try:
            return BearerToken.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid token response: {e}")
            raise MalformedTokenResponseError(f"Invalid token format: {e}") from e

    def token_for(self, challenge: AuthChallenge) -> BearerToken:
        """Return a token for the challenge, reusing a cached one if allowed."""
        if self.token_cache_ttl <= 0:
            return self.exchange(challenge)

        key = (challenge.service, challenge.scope)
        now = time.monotonic()
        with self._lock:
            cached = self._tokens.get(key)
            if cached and cached[1] > now:
                return cached[0]

        token = self.exchange(challenge)
        with self._lock:
            self._tokens[key] = (token, now + self.token_cache_ttl)
        return token

    def invalidate(self, challenge: AuthChallenge):
        """Drop a cached token that the registry rejected."""
        with self._lock:
            self._tokens.pop((challenge.service, challenge.scope), None)
