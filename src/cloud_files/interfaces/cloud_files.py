"""Object storage interface.

Maps container and object operations onto the storage service's
HTTP verbs and paths::

    with CloudFilesInterface("user", "key") as storage:
        storage.create_container("photos")
        storage.create_object("photos", "2009/kd1.txt", b"Hello world",
                              {"tag1": "woo-hoo"})
        storage.describe_object("photos", "2009/kd1.txt")  # {'tag1': 'woo-hoo'}
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..models import (
    AccountSummary,
    ContainerInfo,
    ContainerSummary,
    ObjectSummary,
    RequestOptions,
)
from ..utils.header_resolver import (
    extract_response_keys,
    format_header_value,
    normalize_response_headers,
    underscorize_keys,
)
from ..utils.http_client import ChunkCallback
from ..utils.params import add_fields, copy_options
from .base import BaseInterface, escape

logger = logging.getLogger(__name__)

OBJECT_META_PREFIX = "x-object-meta-"

_ACCOUNT_HEADERS = re.compile(r"x-account-(.*)", re.I)
_CONTAINER_HEADERS = re.compile(r"x-container-(.*)", re.I)
_OBJECT_META_HEADERS = re.compile(r"x-object-meta-(.*)", re.I)
# N-M, N- or -M
_BYTE_RANGE = re.compile(r"^(\d+-\d*|-\d+)$")

DateLike = Union[datetime, str]


class CloudFilesInterface(BaseInterface):
    """Client for the object storage service."""

    service_endpoint_key = "x-storage-url"

    # ------------------------------------------------------------------
    # account
    # ------------------------------------------------------------------

    def describe_storage(self, options: Optional[RequestOptions] = None) -> AccountSummary:
        """Return the number of containers and total bytes stored.

        :return: Account summary rebuilt from ``x-account-*`` headers
        """
        self.api("HEAD", "/", copy_options(options))
        return AccountSummary.model_validate(
            normalize_response_headers(self.last_response.headers, _ACCOUNT_HEADERS)
        )

    # ------------------------------------------------------------------
    # containers
    # ------------------------------------------------------------------

    def list_containers(
        self,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        prefix: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> List[ContainerSummary]:
        """List containers (at most one service page).

        :param limit: Maximum number of containers to return
        :param marker: Only return containers after this name
        :param prefix: Only return containers starting with this prefix
        """
        opts = self._options(options, limit=limit, marker=marker, prefix=prefix)
        return self._list_resources("/", opts, ContainerSummary)

    def incrementally_list_containers(
        self,
        callback: Callable[[List[ContainerSummary]], Any],
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        prefix: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        """Feed container pages to ``callback``; return truthy to continue.

        >>> storage.incrementally_list_containers(print_and_continue, limit=1)
        """
        opts = self._options(options, limit=limit, marker=marker, prefix=prefix)
        self.incrementally_list_storage_resources("/", callback, opts, ContainerSummary)

    def iter_container_pages(
        self,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        prefix: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Iterator[List[ContainerSummary]]:
        """Lazily yield container pages; stop iterating to stop listing."""
        opts = self._options(options, limit=limit, marker=marker, prefix=prefix)
        return self.iter_storage_resource_pages("/", opts, ContainerSummary)

    def create_container(
        self, container_name: str, options: Optional[RequestOptions] = None
    ) -> bool:
        return self.api("PUT", f"/{escape(container_name)}", copy_options(options))

    def describe_container(
        self, container_name: str, options: Optional[RequestOptions] = None
    ) -> ContainerInfo:
        """Return the object count and bytes used by a container.

        :raises NotFound: If the container does not exist
        """
        self.api("HEAD", f"/{escape(container_name)}", copy_options(options))
        return ContainerInfo.model_validate(
            normalize_response_headers(self.last_response.headers, _CONTAINER_HEADERS)
        )

    def delete_container(
        self, container_name: str, options: Optional[RequestOptions] = None
    ) -> bool:
        """Delete an empty container.

        :raises RequestFailed: With status 409 if the container is not empty
        """
        return self.api("DELETE", f"/{escape(container_name)}", copy_options(options))

    # ------------------------------------------------------------------
    # objects
    # ------------------------------------------------------------------

    def list_objects(
        self,
        container_name: str,
        prefix: Optional[str] = None,
        path: Optional[str] = None,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> List[ObjectSummary]:
        """List objects of a container (at most one service page).

        :param prefix: Only return objects whose names start with this prefix
        :param path: Only return objects nested directly in this pseudo path
        :param limit: Maximum number of objects to return
        :param marker: Only return objects after this name
        """
        opts = self._options(
            options, prefix=prefix, path=path, limit=limit, marker=marker
        )
        return self._list_resources(f"/{escape(container_name)}", opts, ObjectSummary)

    def incrementally_list_objects(
        self,
        container_name: str,
        callback: Callable[[List[ObjectSummary]], Any],
        prefix: Optional[str] = None,
        path: Optional[str] = None,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        """Feed object pages to ``callback``; return truthy to continue."""
        opts = self._options(
            options, prefix=prefix, path=path, limit=limit, marker=marker
        )
        self.incrementally_list_storage_resources(
            f"/{escape(container_name)}", callback, opts, ObjectSummary
        )

    def iter_object_pages(
        self,
        container_name: str,
        prefix: Optional[str] = None,
        path: Optional[str] = None,
        limit: Optional[int] = None,
        marker: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Iterator[List[ObjectSummary]]:
        opts = self._options(
            options, prefix=prefix, path=path, limit=limit, marker=marker
        )
        return self.iter_storage_resource_pages(
            f"/{escape(container_name)}", opts, ObjectSummary
        )

    def create_object(
        self,
        container_name: str,
        object_name: str,
        object_data: Union[bytes, str],
        meta_data: Optional[Mapping[str, Any]] = None,
        content_type: str = "text/plain",
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Upload an object with optional metadata.

        A ``content-type`` already present in ``options`` wins over the
        ``content_type`` argument; metadata always overrides.
        """
        opts = copy_options(options)
        add_fields(opts, "headers", {"content-type": content_type})
        add_fields(opts, "headers", _meta_headers(meta_data), "override", OBJECT_META_PREFIX)
        opts.content = (
            object_data.encode("utf-8") if isinstance(object_data, str) else bytes(object_data)
        )
        return self.api("PUT", self._object_path(container_name, object_name), opts)

    def describe_object(
        self,
        container_name: str,
        object_name: str,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, str]:
        """Return the object's metadata.

        :raises NotFound: If the object does not exist
        """
        self.api("HEAD", self._object_path(container_name, object_name), copy_options(options))
        return extract_response_keys(self.last_response.headers, _OBJECT_META_HEADERS)

    def update_metadata(
        self,
        container_name: str,
        object_name: str,
        meta_data: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Replace the object's metadata."""
        opts = copy_options(options)
        add_fields(opts, "headers", _meta_headers(meta_data), "override", OBJECT_META_PREFIX)
        return self.api("POST", self._object_path(container_name, object_name), opts)

    def get_object(
        self,
        container_name: str,
        object_name: str,
        range: Optional[str] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
        if_modified_since: Optional[DateLike] = None,
        if_unmodified_since: Optional[DateLike] = None,
        chunk_callback: Optional[ChunkCallback] = None,
        options: Optional[RequestOptions] = None,
    ) -> Optional[bytes]:
        """Download an object.

        With ``chunk_callback`` the body is streamed to the callback (for
        huge objects) and ``None`` is returned::

            with open("/tmp/photo.jpg", "wb") as f:
                storage.get_object("photos", "photo1.jpg", chunk_callback=f.write)

        :param range: Byte range such as ``"0-499"``, ``"500-"`` or ``"-500"``
        :return: Object bytes, or None when streamed
        """
        opts = self._get_object_options(
            options,
            range=range,
            if_match=if_match,
            if_none_match=if_none_match,
            if_modified_since=if_modified_since,
            if_unmodified_since=if_unmodified_since,
        )
        return self.api(
            "GET", self._object_path(container_name, object_name), opts, chunk_callback
        )

    def get_object_with_meta_data(
        self,
        container_name: str,
        object_name: str,
        range: Optional[str] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
        if_modified_since: Optional[DateLike] = None,
        if_unmodified_since: Optional[DateLike] = None,
        options: Optional[RequestOptions] = None,
    ) -> Tuple[bytes, Dict[str, str]]:
        """Download an object together with its metadata."""
        data = self.get_object(
            container_name,
            object_name,
            range=range,
            if_match=if_match,
            if_none_match=if_none_match,
            if_modified_since=if_modified_since,
            if_unmodified_since=if_unmodified_since,
            options=options,
        )
        meta_data = extract_response_keys(self.last_response.headers, _OBJECT_META_HEADERS)
        return data, meta_data

    def delete_object(
        self,
        container_name: str,
        object_name: str,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        return self.api(
            "DELETE", self._object_path(container_name, object_name), copy_options(options)
        )

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _object_path(container_name: str, object_name: str) -> str:
        return f"/{escape(container_name)}/{escape(object_name, keep_slashes=True)}"

    @staticmethod
    def _get_object_options(
        options: Optional[RequestOptions], **params: Any
    ) -> RequestOptions:
        opts = copy_options(options)
        opts.do_not_parse_response = True

        headers = underscorize_keys(
            {k: v for k, v in params.items() if v is not None}, reverse=True
        )
        headers["accept"] = "*/*"
        if "range" in headers:
            headers["range"] = rewrite_range(str(headers["range"]))
        add_fields(
            opts, "headers", {k: format_header_value(v) for k, v in headers.items()}
        )
        return opts


def rewrite_range(value: str) -> str:
    """Return ``bytes=<value>`` for numeric ranges, ``value`` otherwise."""
    if _BYTE_RANGE.match(value):
        return f"bytes={value}"
    return value


def _meta_headers(meta_data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {k: format_header_value(v) for k, v in (meta_data or {}).items()}
