"""Authentication providers for the Cloud Files SDK.

Importing this package registers the built-in providers.
"""

from .legacy import LegacyAuthProvider
from .static import StaticTokenProvider

__all__ = [
    "LegacyAuthProvider",
    "StaticTokenProvider",
]
