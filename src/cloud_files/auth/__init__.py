"""Authentication module for the Cloud Files SDK.

This module provides the pluggable provider architecture used to log in
against the identity endpoint, and the per-interface :class:`Session`
that caches the resulting token and service URLs.

:var __all__: List of public exports from this module
:type __all__: List[str]
"""

# Import providers to trigger registration
from . import (  # noqa: F401  # imported for side effects (provider registration)
    providers,
)
from .base import BaseAuthProvider, ProviderConfig
from .registry import (
    available_providers,
    create_provider,
    register_provider,
    unregister_provider,
)
from .session import Session

__all__ = [
    "BaseAuthProvider",
    "ProviderConfig",
    "available_providers",
    "create_provider",
    "register_provider",
    "unregister_provider",
    "Session",
]
