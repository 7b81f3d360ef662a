"""Timeouts and the plain client used for login requests.

Login calls carry no session state, so they go through an ordinary
``httpx.Client``. Authenticated service calls use
:class:`cloud_files.utils.http_client.AuthenticatedClient` instead.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def create_timeout(
    connect: float = 5.0,
    read: float = 60.0,
    write: float = 60.0,
    pool: float = 5.0,
) -> httpx.Timeout:
    """Create a timeout configuration object.

    Object uploads and downloads can be large, so read and write default
    to a minute.

    :param connect: Connection timeout in seconds
    :type connect: float
    :param read: Read timeout in seconds
    :type read: float
    :param write: Write timeout in seconds
    :type write: float
    :param pool: Pool timeout in seconds
    :type pool: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(connect=connect, read=read, write=write, pool=pool)


def create_login_client(
    timeout: Optional[httpx.Timeout] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Build the client that talks to the identity endpoint.

    Redirects are followed since identity services commonly sit behind
    a versioned redirect. The caller owns the client and must close it.
    """
    logger.debug("Creating login client (custom transport: %s)", transport is not None)
    return httpx.Client(
        timeout=timeout or create_timeout(),
        transport=transport,
        follow_redirects=True,
    )
