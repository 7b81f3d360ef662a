"""Authenticated HTTP client for the storage and CDN services.

This module provides the transport every interface call goes through.
The client resolves the service base URL from the session credentials
(by endpoint key), injects the session token, and maps the response
status to the SDK's typed errors.

Key Features:

- Lazy login through :meth:`Session.ensure_valid`
- Base URL discovery per endpoint key (``x-storage-url``,
  ``x-cdn-management-url``)
- ``X-Auth-Token`` injection at a single interception point (``send``)
- One transparent re-login and retry when the service answers 401
- Streamed downloads delivered chunk by chunk to a callback

Examples:
    >>> client = AuthenticatedClient(session=session, endpoint_key="x-storage-url")
    >>> response = client.call("GET", "/photos", RequestOptions(vars={"format": "json"}))
"""

import logging
from typing import Callable, Optional

import httpx

from ..auth.session import Session
from ..exceptions import AuthenticationError
from ..models import AuthCredentials, RequestOptions
from .http.request import HTTPResponse, raise_for_status
from .security import sanitize_headers

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], object]

AUTH_TOKEN_HEADER = "X-Auth-Token"


class AuthenticatedClient(httpx.Client):
    """HTTP client that authenticates every request from a :class:`Session`.

    :param session: Session holding (or able to obtain) credentials
    :type session: Session
    :param endpoint_key: Header name under which the identity service
        announced this client's base URL
    :type endpoint_key: str
    """

    def __init__(self, *args, session: Session, endpoint_key: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.session = session
        self.endpoint_key = endpoint_key.lower()

    def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        """Single interception point for all HTTP requests.

        Injects the session token unless the request already carries one,
        and logs the request with sensitive headers redacted.

        :param request: The HTTP request to send
        :type request: httpx.Request
        :return: The HTTP response
        :rtype: httpx.Response
        """
        if AUTH_TOKEN_HEADER not in request.headers:
            credentials = self.session.ensure_valid()
            request.headers[AUTH_TOKEN_HEADER] = credentials.auth_token

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "=== SEND: %s %s headers=%s",
                request.method,
                request.url,
                sanitize_headers(dict(request.headers)),
            )

        response = super().send(request, **kwargs)
        logger.debug(
            "=== RECV: %s %s -> %d", request.method, request.url.path, response.status_code
        )
        return response

    def base_url_for(self, credentials: AuthCredentials) -> str:
        """Return the service base URL for this client's endpoint key.

        :raises AuthenticationError: If the identity service did not announce it
        """
        url = credentials.endpoint(self.endpoint_key)
        if not url:
            raise AuthenticationError(
                f"Identity service did not return '{self.endpoint_key}'",
                details={"endpoint_key": self.endpoint_key},
            )
        return url.rstrip("/")

    def _build(
        self, method: str, path: str, options: RequestOptions, credentials: AuthCredentials
    ) -> httpx.Request:
        url = self.base_url_for(credentials) + path
        kwargs = {
            "headers": {
                **options.headers,
                AUTH_TOKEN_HEADER: credentials.auth_token,
            },
            "params": options.vars or None,
        }
        if options.content is not None:
            kwargs["content"] = options.content
        elif options.body:
            kwargs["data"] = options.body
        return self.build_request(method, url, **kwargs)

    def call(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
        chunk_callback: Optional[ChunkCallback] = None,
    ) -> HTTPResponse:
        """Issue an authenticated request against the service.

        ``path`` must already be percent-encoded. With ``chunk_callback``
        the body is streamed to the callback and never buffered.

        :param method: HTTP verb
        :param path: Path below the service base URL, starting with ``/``
        :param options: Headers, query vars and body for the request
        :param chunk_callback: Optional callable receiving body chunks
        :return: Wrapped response for a 2xx status
        :raises AuthenticationError: If the service still answers 401 after
            one re-login
        :raises NotFound: On 404
        :raises RequestFailed: On any other non-2xx status
        """
        options = options or RequestOptions()

        for attempt in (1, 2):
            credentials = self.session.ensure_valid()
            request = self._build(method, path, options, credentials)
            response = self.send(request, stream=chunk_callback is not None)

            if response.status_code == 401 and attempt == 1:
                response.close()
                logger.info(
                    "%s %s answered 401, re-authenticating", method, request.url.path
                )
                self.session.invalidate(credentials)
                continue

            if chunk_callback is None:
                raise_for_status(response)
                return HTTPResponse(response)

            try:
                if not response.is_success:
                    response.read()
                    raise_for_status(response)
                for chunk in response.iter_bytes():
                    chunk_callback(chunk)
            finally:
                response.close()
            return HTTPResponse(response, streamed=True)

        # unreachable: the second attempt always returns or raises
        raise AuthenticationError("Re-authentication loop exhausted")
