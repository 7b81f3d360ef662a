"""Cloud Files SDK models package.

This package contains the Pydantic models used by the SDK, split into
authentication/request models and storage/CDN resource models.
"""

from .base_models import AuthCredentials, RequestOptions
from .storage import (
    AccountSummary,
    CdnContainerInfo,
    CdnContainerSummary,
    ContainerInfo,
    ContainerSummary,
    ObjectSummary,
)

__all__ = [
    "AuthCredentials",
    "RequestOptions",
    "AccountSummary",
    "ContainerSummary",
    "ContainerInfo",
    "ObjectSummary",
    "CdnContainerSummary",
    "CdnContainerInfo",
]
