"""HTTP utilities public API (barrel module).

This package provides:
- Timeout defaults and the login client factory
- Response wrapper and status-to-error mapping

Recommended import pattern for consumers:
    from cloud_files.utils.http import create_login_client, HTTPResponse

The authenticated transport lives in :mod:`cloud_files.utils.http_client`.
"""

from .client_manager import create_login_client, create_timeout
from .request import HTTPResponse, raise_for_status

__all__ = [
    "create_login_client",
    "create_timeout",
    "HTTPResponse",
    "raise_for_status",
]
