"""Session state for an interface: the cached token and service URLs.

Each interface owns one :class:`Session`. Every call invokes
:meth:`Session.ensure_valid` once before it is sent; a 401 from the
service calls :meth:`Session.invalidate` with the credentials that were
rejected, and the next :meth:`ensure_valid` logs in again. Login and
invalidation happen under a lock so one session can be shared between
threads.
"""

import logging
import threading
from typing import Optional

from ..models import AuthCredentials, RequestOptions
from .base import BaseAuthProvider

logger = logging.getLogger(__name__)


class Session:
    """Cache credentials produced by an auth provider."""

    def __init__(self, provider: BaseAuthProvider):
        self.provider = provider
        self._credentials: Optional[AuthCredentials] = None
        self._lock = threading.Lock()

    @property
    def credentials(self) -> Optional[AuthCredentials]:
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None

    def login(self, options: Optional[RequestOptions] = None) -> AuthCredentials:
        """Log in unconditionally, replacing any cached credentials.

        :param options: Optional extra headers/query vars for the login request
        :return: The new credentials
        """
        with self._lock:
            self._credentials = self.provider.authenticate(options)
            return self._credentials

    def ensure_valid(self) -> AuthCredentials:
        """Return cached credentials, logging in first if there are none."""
        with self._lock:
            if self._credentials is None:
                logger.debug("No session credentials, authenticating")
                self._credentials = self.provider.authenticate()
            return self._credentials

    def invalidate(self, rejected: Optional[AuthCredentials] = None) -> None:
        """Drop cached credentials.

        When ``rejected`` is given, the cache is only cleared if it still
        holds those credentials; another thread may already have renewed it.
        """
        with self._lock:
            if rejected is None or self._credentials is rejected:
                logger.info("Session credentials invalidated")
                self._credentials = None

    def close(self) -> None:
        self.provider.close()
