"""HTTP response wrapper and status-to-error mapping.

Every call made by the interfaces returns an :class:`HTTPResponse`,
which gives convenient access to status, headers and body and knows how
to parse listing/metadata JSON into the expected shape.
:func:`raise_for_status` turns non-success statuses into the SDK's
typed errors.
"""

import json
from typing import Any, Optional, Type

import httpx

from ...exceptions import AuthenticationError, MalformedResponse, NotFound, RequestFailed

_BODY_PREVIEW = 2048


class HTTPResponse:
    """Wrapper for HTTP responses with convenient access methods.

    JSON parsing is cached so repeated access does not re-decode the
    body. For streamed downloads the body has already been handed to the
    caller's chunk callback and :attr:`content` is empty.
    """

    def __init__(self, response: httpx.Response, streamed: bool = False):
        """Initialize the response wrapper.

        :param response: The underlying httpx.Response object
        :type response: httpx.Response
        :param streamed: Whether the body was consumed chunk by chunk
        :type streamed: bool
        """
        self.response = response
        self.streamed = streamed
        self._json_cache: Any = None
        self._json_loaded = False

    @property
    def status_code(self) -> int:
        """Get the HTTP status code of the response.

        :return: HTTP status code
        :rtype: int
        """
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        """Get the response headers.

        :return: Response headers (multi-valued, case-insensitive)
        :rtype: httpx.Headers
        """
        return self.response.headers

    @property
    def content(self) -> bytes:
        """Get the raw response body.

        :return: Body bytes, empty for streamed responses
        :rtype: bytes
        """
        if self.streamed:
            return b""
        return self.response.content

    @property
    def text(self) -> str:
        if self.streamed:
            return ""
        return self.response.text

    @property
    def is_json(self) -> bool:
        """Whether the body is declared as JSON (``application/json`` or ``+json``)."""
        media_type = self.headers.get("content-type", "").split(";", 1)[0].strip().lower()
        return media_type == "application/json" or media_type.endswith("+json")

    def json(self, expected: Optional[Type] = None) -> Any:
        """Get the response body as parsed JSON.

        An empty body (e.g. ``204 No Content`` for an empty listing)
        parses to ``None``.

        :param expected: Optional type the document must be (``list``/``dict``)
        :return: Parsed JSON document
        :raises MalformedResponse: If the body is not JSON or has the wrong shape
        """
        if not self._json_loaded:
            body = self.content
            if not body.strip():
                self._json_cache = None
            else:
                try:
                    self._json_cache = json.loads(body)
                except ValueError as e:
                    raise MalformedResponse(
                        f"Response body is not valid JSON: {e}",
                        expected=expected.__name__ if expected else None,
                        response_body=_preview(body),
                    ) from e
            self._json_loaded = True

        data = self._json_cache
        if expected is not None and data is not None and not isinstance(data, expected):
            raise MalformedResponse(
                f"Expected a JSON {expected.__name__}, got {type(data).__name__}",
                expected=expected.__name__,
                response_body=_preview(self.content),
            )
        return data

    def is_success(self) -> bool:
        """Check if the response indicates success (2xx status code).

        :return: True if status code is in 200-299 range
        :rtype: bool
        """
        return 200 <= self.status_code < 300


def _preview(body: bytes) -> str:
    return body[:_BODY_PREVIEW].decode("utf-8", errors="replace")


def raise_for_status(response: httpx.Response) -> None:
    """Raise the typed error matching a non-success response.

    The body must already be read (or the response closed) by the caller.

    :param response: Response to check
    :raises AuthenticationError: On 401
    :raises NotFound: On 404
    :raises RequestFailed: On any other non-2xx status
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    try:
        body = _preview(response.content)
    except httpx.ResponseNotRead:
        body = ""
    request = response.request
    where = f"{request.method} {request.url.path}"

    if status == 401:
        raise AuthenticationError(
            f"Authentication rejected for {where}",
            details={"status_code": status, "response_body": body},
        )
    if status == 404:
        raise NotFound(f"Resource not found: {where}", response_body=body)
    raise RequestFailed(
        f"{where} failed with HTTP {status}",
        status_code=status,
        response_body=body,
    )
