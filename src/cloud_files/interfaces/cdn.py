"""CDN management interface.

Shares storage containers through the CDN and tunes their TTL and log
retention::

    with CdnInterface("user", "key") as cdn:
        uri = cdn.share_container("photos", ttl=3600)
        cdn.update_container("photos", cdn_enabled=False)
"""

import logging
import re
from typing import Any, Callable, Iterator, List, Optional

from ..models import CdnContainerInfo, CdnContainerSummary, RequestOptions
from ..utils.header_resolver import (
    format_header_value,
    normalize_response_headers,
    underscorize_keys,
)
from ..utils.params import add_fields, copy_options
from .base import BaseInterface, escape

logger = logging.getLogger(__name__)

_CDN_HEADERS = re.compile(r"x-(.*)", re.I)


class CdnInterface(BaseInterface):
    """Client for the CDN management service."""

    service_endpoint_key = "x-cdn-management-url"

    def list_containers(
        self,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        enabled_only: Optional[bool] = None,
        options: Optional[RequestOptions] = None,
    ) -> List[CdnContainerSummary]:
        """List CDN-enabled containers (at most one service page).

        :param enabled_only: Only return containers currently CDN-enabled
        """
        opts = self._options(
            options, limit=limit, marker=marker, enabled_only=enabled_only
        )
        return self._list_resources("/", opts, CdnContainerSummary)

    def incrementally_list_containers(
        self,
        callback: Callable[[List[CdnContainerSummary]], Any],
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        enabled_only: Optional[bool] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        """Feed CDN container pages to ``callback``; return truthy to continue."""
        opts = self._options(
            options, limit=limit, marker=marker, enabled_only=enabled_only
        )
        self.incrementally_list_storage_resources("/", callback, opts, CdnContainerSummary)

    def iter_container_pages(
        self,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        enabled_only: Optional[bool] = None,
        options: Optional[RequestOptions] = None,
    ) -> Iterator[List[CdnContainerSummary]]:
        opts = self._options(
            options, limit=limit, marker=marker, enabled_only=enabled_only
        )
        return self.iter_storage_resource_pages("/", opts, CdnContainerSummary)

    def share_container(
        self,
        container_name: str,
        ttl: Optional[int] = None,
        cdn_enabled: Optional[bool] = None,
        log_retention: Optional[bool] = None,
        options: Optional[RequestOptions] = None,
    ) -> Optional[str]:
        """CDN-enable a container.

        :return: The container's CDN URI (``X-CDN-URI``)
        """
        return self._share_or_update_container(
            "PUT", container_name, options,
            ttl=ttl, cdn_enabled=cdn_enabled, log_retention=log_retention,
        )

    def describe_container(
        self, container_name: str, options: Optional[RequestOptions] = None
    ) -> CdnContainerInfo:
        """Return the CDN attributes of a container.

        :raises NotFound: If the container was never CDN-enabled
        """
        self.api("HEAD", f"/{escape(container_name)}", copy_options(options))
        return CdnContainerInfo.model_validate(
            normalize_response_headers(self.last_response.headers, _CDN_HEADERS)
        )

    def update_container(
        self,
        container_name: str,
        ttl: Optional[int] = None,
        cdn_enabled: Optional[bool] = None,
        log_retention: Optional[bool] = None,
        options: Optional[RequestOptions] = None,
    ) -> Optional[str]:
        """Change the CDN attributes of an already shared container.

        :return: The container's CDN URI (``X-CDN-URI``)
        """
        return self._share_or_update_container(
            "POST", container_name, options,
            ttl=ttl, cdn_enabled=cdn_enabled, log_retention=log_retention,
        )

    def _share_or_update_container(
        self,
        verb: str,
        container_name: str,
        options: Optional[RequestOptions],
        **params: Any,
    ) -> Optional[str]:
        opts = copy_options(options)
        headers = underscorize_keys(
            {k: format_header_value(v) for k, v in params.items() if v is not None},
            reverse=True,
        )
        add_fields(opts, "headers", headers, "override", "x-")
        self.api(verb, f"/{escape(container_name)}", opts)
        cdn_uri = self.last_response.headers.get("X-CDN-URI")
        logger.debug("Container %r served from %s", container_name, cdn_uri)
        return cdn_uri
