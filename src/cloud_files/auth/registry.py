"""Auth method lookup.

Interfaces pick their identity provider by name (``settings.auth_method``
or the ``auth_method`` argument). Built-in providers register themselves
with :func:`register_provider` when :mod:`cloud_files.auth.providers` is
imported; applications may register their own the same way::

    @register_provider("keystone")
    class KeystoneProvider(BaseAuthProvider):
        ...

    CloudFilesInterface(auth_method="keystone")
"""

import logging
from typing import Callable, Dict, List, Type

from ..exceptions import ConfigurationError
from .base import BaseAuthProvider, ProviderConfig

logger = logging.getLogger(__name__)

_providers: Dict[str, Type[BaseAuthProvider]] = {}


def register_provider(
    auth_method: str,
) -> Callable[[Type[BaseAuthProvider]], Type[BaseAuthProvider]]:
    """Class decorator binding ``auth_method`` (case-insensitive) to a provider.

    Registering the same class twice is a no-op, so reloading a module
    does not fail.

    :raises ValueError: If the name is already bound to another class
    """
    name = auth_method.lower()

    def decorator(provider_class: Type[BaseAuthProvider]) -> Type[BaseAuthProvider]:
        bound = _providers.get(name)
        if bound is not None and bound is not provider_class:
            raise ValueError(
                f"Auth method '{name}' is already bound to {bound.__name__}"
            )
        _providers[name] = provider_class
        logger.debug("Auth method %s -> %s", name, provider_class.__name__)
        return provider_class

    return decorator


def unregister_provider(auth_method: str) -> None:
    _providers.pop(auth_method.lower(), None)


def available_providers() -> List[str]:
    return sorted(_providers)


def create_provider(auth_method: str, config: ProviderConfig) -> BaseAuthProvider:
    """Instantiate the provider registered for ``auth_method``.

    :raises ConfigurationError: If no provider answers to that name
    """
    provider_class = _providers.get(auth_method.lower())
    if provider_class is None:
        raise ConfigurationError(
            f"Unknown auth method '{auth_method}' "
            f"(available: {', '.join(available_providers()) or 'none'})",
            setting="auth_method",
        )
    return provider_class(config)
