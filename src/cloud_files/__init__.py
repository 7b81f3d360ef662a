"""Cloud Files SDK package.

This package provides a synchronous client for a Cloud Files style
object-storage service and its CDN control plane: login against the
identity endpoint, container and object management, metadata, and
marker-based incremental listings.

:var __version__: Current package version
:type __version__: str
"""

from .exceptions import (
    AuthenticationError,
    CloudFilesError,
    ConfigurationError,
    MalformedResponse,
    NotFound,
    RequestFailed,
)
from .interfaces import CdnInterface, CloudFilesInterface
from .models import RequestOptions
from .utils.security import setup_secure_logging

__version__ = "0.2.0"

__all__ = [
    "CloudFilesInterface",
    "CdnInterface",
    "RequestOptions",
    "CloudFilesError",
    "AuthenticationError",
    "ConfigurationError",
    "RequestFailed",
    "NotFound",
    "MalformedResponse",
    "setup_secure_logging",
]
