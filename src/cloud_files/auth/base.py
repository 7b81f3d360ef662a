"""Define base authentication provider interfaces.

Providers perform the login against the identity endpoint and return
:class:`~cloud_files.models.AuthCredentials`: the session token plus the
service base URLs announced by the identity service. Session caching and
renewal live in :mod:`cloud_files.auth.session`; providers are stateless
with respect to tokens.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models import AuthCredentials, RequestOptions


class BaseAuthProvider(ABC):
    """Provide the core authentication interface."""

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Return the provider type identifier.

        :return: Provider type (e.g., "legacy", "static").
        """
        pass

    @abstractmethod
    def authenticate(self, options: Optional[RequestOptions] = None) -> AuthCredentials:
        """Log in and return fresh credentials.

        :param options: Optional extra headers/query vars for the login request.
        :return: Credentials with token and service endpoints.
        :raises AuthenticationError: If the identity service rejects the login.
        """
        pass

    def close(self) -> None:
        """Clean up provider resources."""


class ProviderConfig:
    """Hold provider configuration values.

    Store arbitrary configuration for providers with both mapping-style and
    attribute-style access for convenience.
    """

    def __init__(self, **kwargs):
        """Initialize configuration from keyword arguments.

        :param kwargs: Provider-specific configuration parameters.
        """
        self._config = kwargs

    def get(self, key: str, default: Any = None) -> Any:
        """Return configuration value by key.

        :param key: Configuration key to retrieve.
        :param default: Default value if key not present.
        :return: The configuration value or the default.
        """
        return self._config.get(key, default)

    def __getattr__(self, name: str) -> Any:
        """Provide attribute-style access to configuration values.

        :param name: Attribute name to access.
        :return: The configuration value.
        :raises AttributeError: If the attribute is not defined.
        """
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._config:
            return self._config[name]
        raise AttributeError(f"Config has no attribute '{name}'")
