"""Shared Pydantic models for authentication and request composition.

The models provide type safety and validation for:
- Session credentials returned by the identity endpoint
- Per-call request options (headers, query vars, body, raw payload)
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# Auth Models
class AuthCredentials(BaseModel):
    """Credentials for API access.

    Holds everything learned from a successful login: the token injected
    as ``X-Auth-Token`` on every call, and the service base URLs keyed by
    the (lower-cased) response header that announced them.

    :param auth_token: Session token for API authentication
    :type auth_token: str
    :param endpoints: Service base URLs keyed by endpoint key
    :type endpoints: Dict[str, str]
    :param authenticated_at: When the login happened
    :type authenticated_at: datetime
    """

    auth_token: str
    endpoints: Dict[str, str] = Field(default_factory=dict)
    authenticated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def endpoint(self, endpoint_key: str) -> Optional[str]:
        """Return the base URL announced under ``endpoint_key``.

        :param endpoint_key: Header name, e.g. ``x-storage-url``
        :return: Base URL or None if the identity service did not send it
        """
        return self.endpoints.get(endpoint_key.lower())


# Request Models
class RequestOptions(BaseModel):
    """Per-call request configuration.

    Every interface operation accepts an instance of this model as an
    escape hatch for extra headers or query variables. Operations compose
    their own fields into it with :func:`cloud_files.utils.params.add_fields`.

    :param headers: Request headers (keys are lower-cased on composition)
    :type headers: Dict[str, str]
    :param vars: Query-string variables
    :type vars: Dict[str, Any]
    :param body: Form fields sent as the request body
    :type body: Dict[str, Any]
    :param content: Raw request payload (takes precedence over ``body``)
    :type content: Optional[bytes]
    :param do_not_parse_response: Return the raw body instead of parsed JSON
    :type do_not_parse_response: bool
    """

    headers: Dict[str, str] = Field(default_factory=dict)
    vars: Dict[str, Any] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)
    content: Optional[bytes] = None
    do_not_parse_response: bool = False
