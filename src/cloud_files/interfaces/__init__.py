"""Service interfaces: object storage and CDN management."""

from .base import BaseInterface
from .cdn import CdnInterface
from .cloud_files import CloudFilesInterface

__all__ = [
    "BaseInterface",
    "CloudFilesInterface",
    "CdnInterface",
]
