"""Pydantic models for storage and CDN resources.

Listing models are validated from the JSON arrays returned by ``GET``
listings; ``*Info`` models are built from the headers of ``HEAD``
requests after they have been normalized by
:mod:`cloud_files.utils.header_resolver`. Unknown fields are kept so
that newer service headers are not silently dropped.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AccountSummary(BaseModel):
    """Aggregate account usage, rebuilt from ``x-account-*`` headers.

    :param container_count: Number of containers in the account
    :type container_count: int
    :param bytes_used: Total bytes stored in the account
    :type bytes_used: int
    """

    model_config = ConfigDict(extra="allow")

    container_count: int = 0
    bytes_used: int = 0


class ContainerSummary(BaseModel):
    """One entry of a container listing."""

    model_config = ConfigDict(extra="allow")

    name: str
    count: int = 0
    bytes: int = 0


class ContainerInfo(BaseModel):
    """Container usage, rebuilt from ``x-container-*`` headers.

    :param object_count: Number of objects in the container
    :type object_count: int
    :param bytes_used: Total bytes of all objects in the container
    :type bytes_used: int
    """

    model_config = ConfigDict(extra="allow")

    object_count: int = 0
    bytes_used: int = 0


class ObjectSummary(BaseModel):
    """One entry of an object listing.

    ``last_modified`` is parsed from the service's ISO-8601-like string,
    which carries no timezone.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    bytes: int = 0
    content_type: Optional[str] = None
    hash: Optional[str] = None
    last_modified: Optional[datetime] = None


class CdnContainerSummary(BaseModel):
    """One entry of a CDN container listing."""

    model_config = ConfigDict(extra="allow")

    name: str
    ttl: Optional[int] = None
    cdn_enabled: bool = False
    cdn_uri: Optional[str] = None
    log_retention: bool = False
    referrer_acl: Optional[str] = None
    useragent_acl: Optional[str] = None


class CdnContainerInfo(BaseModel):
    """CDN attributes of a container, rebuilt from its ``x-*`` headers."""

    model_config = ConfigDict(extra="allow")

    ttl: Optional[int] = None
    cdn_enabled: bool = False
    cdn_uri: Optional[str] = None
    log_retention: bool = False
    referrer_acl: Optional[str] = None
    useragent_acl: Optional[str] = Field(
        None, validation_alias=AliasChoices("user_agent_acl", "useragent_acl")
    )
