"""
Registry-related exceptions

Provides a hierarchy of exceptions for the failure modes of talking to a
container registry, so request handlers can map each one to a response
and the background refresher can contain them.
"""

from typing import Optional


class RegistryError(Exception):
    """Base exception for registry operations"""

    pass


class RegistryConnectionError(RegistryError):
    """Registry could not be reached (network, DNS, TLS or timeout)"""

    pass


class RegistryValidationError(RegistryError):
    """Response did not have the expected shape"""

    pass


class MalformedManifestError(RegistryValidationError):
    """Manifest is missing its v1Compatibility history entry"""

    pass


class RegistryNotFoundError(RegistryError):
    """Registry answered 404 for the requested resource"""

    pass


class RegistryStatusError(RegistryError):
    """Registry answered with an unexpected status code"""

    def __init__(self, message: str, status_code: int, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AuthError(RegistryError):
    """Bearer token exchange failed"""

    pass


class TokenEndpointUnreachableError(AuthError):
    """Token endpoint could not be reached or refused the exchange"""

    pass


class MalformedTokenResponseError(AuthError):
    """Token endpoint answered without a usable token"""

    pass


class RefreshError(RegistryError):
    """Periodic catalog refresh failed"""

    pass


class CatalogNotReadyError(RefreshError):
    """No catalog was loaded before the startup deadline"""

    pass
