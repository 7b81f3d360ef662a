"""Pre-issued token provider.

Useful when a token and service URLs were obtained out of band (or in
tests). The provider cannot renew anything: a 401 from the service
re-authenticates to the same token and the second 401 surfaces as an
:class:`~cloud_files.exceptions.AuthenticationError`.
"""

import logging
from typing import Dict, Optional

from ...exceptions import ConfigurationError
from ...models import AuthCredentials, RequestOptions
from ..base import BaseAuthProvider, ProviderConfig
from ..registry import register_provider

logger = logging.getLogger(__name__)


@register_provider("static")
class StaticTokenProvider(BaseAuthProvider):
    """Serve a fixed token and fixed service URLs."""

    def __init__(self, config: ProviderConfig):
        self.auth_token = config.get("auth_token")
        if not self.auth_token:
            raise ConfigurationError(
                "Static auth requires an auth_token", setting="auth_token"
            )
        endpoints: Dict[str, Optional[str]] = config.get("endpoints") or {}
        self.endpoints = {k.lower(): v for k, v in endpoints.items() if v}

    @property
    def provider_type(self) -> str:
        return "static"

    def authenticate(self, options: Optional[RequestOptions] = None) -> AuthCredentials:
        logger.debug("Using pre-issued token for %s", sorted(self.endpoints))
        return AuthCredentials(auth_token=self.auth_token, endpoints=dict(self.endpoints))
