"""Shared plumbing for the storage and CDN interfaces.

:class:`BaseInterface` wires settings, the auth provider, the session
and the authenticated transport together, and implements the generic
``api()`` dispatch plus the paging glue used by every listing.
"""

import logging
from typing import Any, Callable, Iterator, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ..auth import ProviderConfig, Session, create_provider
from ..config.settings import Settings
from ..exceptions import MalformedResponse
from ..models import AuthCredentials, RequestOptions
from ..utils.http import HTTPResponse, create_login_client, create_timeout
from ..utils.http_client import AuthenticatedClient, ChunkCallback
from ..utils.pagination import incrementally_list, iter_pages
from ..utils.params import add_fields, copy_options

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def escape(name: str, keep_slashes: bool = False) -> str:
    """Percent-encode a container or object name for use in a path."""
    return quote(name, safe="/" if keep_slashes else "")


class BaseInterface:
    """Base class for service interfaces.

    Subclasses set :attr:`service_endpoint_key`, the identity response
    header that announces their base URL.

    :param username: Account user name (defaults to settings)
    :param api_key: Account API key (defaults to settings)
    :param settings: Optional preloaded :class:`Settings`
    :param auth_url: Optional identity endpoint override
    :param auth_method: Optional registered provider name override
    :param transport: Optional httpx transport (used for both login and
        service calls; handy for tests and proxies)
    :param provider_config: Extra provider configuration values
    """

    service_endpoint_key: str = ""

    def __init__(
        self,
        username: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        auth_url: Optional[str] = None,
        auth_method: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **provider_config: Any,
    ):
        self.settings = settings or Settings()
        timeout = create_timeout(
            connect=self.settings.connect_timeout, read=self.settings.read_timeout
        )

        login_client = create_login_client(timeout, transport)

        config = ProviderConfig(
            username=username or self.settings.username,
            api_key=api_key or self.settings.api_key,
            auth_url=auth_url or self.settings.auth_url,
            http_client=login_client,
            **provider_config,
        )
        method = (auth_method or self.settings.auth_method).lower()
        self.session = Session(create_provider(method, config))
        self._login_client = login_client

        self.client = AuthenticatedClient(
            session=self.session,
            endpoint_key=self.service_endpoint_key,
            transport=transport,
            timeout=timeout,
        )
        self.last_response: Optional[HTTPResponse] = None

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP clients owned by this interface."""
        self.client.close()
        self._login_client.close()
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # auth
    # ------------------------------------------------------------------

    def login(self, options: Optional[RequestOptions] = None) -> AuthCredentials:
        """Authenticate now.

        Every call logs in on demand, so this is only needed to pass
        custom headers or query vars to the login request, or to fail
        early on bad credentials.
        """
        return self.session.login(options)

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------

    def api(
        self,
        verb: str,
        path: str,
        options: Optional[RequestOptions] = None,
        chunk_callback: Optional[ChunkCallback] = None,
    ) -> Any:
        """Issue a call and return its result.

        Writes (``PUT``, ``POST``, ``DELETE``) and ``HEAD`` return ``True``
        on success; the service answers them with an HTML status page
        (``<h1>Created</h1>``...) that is discarded. A ``GET`` returns
        parsed JSON when the response is declared ``application/json``,
        the raw bytes otherwise or when ``options.do_not_parse_response``
        is set, and ``True`` for an empty body. The wrapped response is
        kept in :attr:`last_response`.
        """
        options = options or RequestOptions()
        verb = verb.upper()
        response = self.client.call(verb, path, options, chunk_callback)
        self.last_response = response

        if chunk_callback is not None:
            return None
        if options.do_not_parse_response:
            return response.content
        if verb != "GET" or not response.content.strip():
            return True
        if response.is_json:
            return response.json()
        return response.content

    # ------------------------------------------------------------------
    # listings
    # ------------------------------------------------------------------

    def _list_resources(
        self, path: str, options: RequestOptions, model: Type[M]
    ) -> List[M]:
        add_fields(options, "vars", {"format": "json"}, "override")
        response = self.client.call("GET", path, options)
        self.last_response = response
        return self._parse_listing(response, model)

    @staticmethod
    def _parse_listing(response: HTTPResponse, model: Type[M]) -> List[M]:
        data = response.json(expected=list)
        if not data:
            return []
        try:
            return [model.model_validate(entry) for entry in data]
        except ValidationError as e:
            raise MalformedResponse(
                f"Listing entry does not look like a {model.__name__}: {e}",
                expected="array",
            ) from e

    def _page_fetcher(
        self, path: str, options: RequestOptions, model: Type[M]
    ) -> Callable[[Optional[str], int], List[M]]:
        def fetch(marker: Optional[str], limit: int) -> List[M]:
            page_options = options.model_copy(deep=True)
            cursor = {"limit": limit}
            if marker is not None:
                cursor["marker"] = marker
            add_fields(page_options, "vars", cursor, "override")
            return self._list_resources(path, page_options, model)

        return fetch

    def _paging_bounds(self, options: RequestOptions):
        limit = options.vars.pop("limit", None)
        if limit is None:
            limit = self.settings.default_page_size
        limit = int(limit)
        # a page never comes back shorter than a zero limit
        if limit <= 0:
            raise ValueError(f"Listing page size must be a positive integer, got {limit}")
        marker = options.vars.pop("marker", None)
        return limit, marker

    def incrementally_list_storage_resources(
        self,
        path: str,
        callback: Callable[[List[M]], Any],
        options: RequestOptions,
        model: Type[M],
    ) -> None:
        """Feed listing pages to ``callback`` until it returns a falsy value.

        ``limit`` and ``marker`` in ``options.vars`` seed the cursor; the
        page size defaults to ``settings.default_page_size``.

        :raises ValueError: If ``limit`` is zero or negative
        """
        limit, marker = self._paging_bounds(options)
        incrementally_list(self._page_fetcher(path, options, model), callback, limit, marker)

    def iter_storage_resource_pages(
        self, path: str, options: RequestOptions, model: Type[M]
    ) -> Iterator[List[M]]:
        """Pull-style counterpart of :meth:`incrementally_list_storage_resources`."""
        limit, marker = self._paging_bounds(options)
        return iter_pages(self._page_fetcher(path, options, model), limit, marker)

    @staticmethod
    def _options(
        options: Optional[RequestOptions], **query: Any
    ) -> RequestOptions:
        """Copy caller options and override query vars with the non-None ``query``."""
        opts = copy_options(options)
        add_fields(
            opts, "vars", {k: v for k, v in query.items() if v is not None}, "override"
        )
        return opts
