"""Secure logging helpers.

Auth tokens and API keys travel in plain request/response headers
(``X-Auth-Key``, ``X-Auth-Token``, ``X-Storage-Token``). Everything the
SDK logs about a request goes through :func:`sanitize_headers`, and
applications can install :class:`SanitizingFormatter` with
:func:`setup_secure_logging` to scrub their own log lines as well.
"""

import logging
import re
import sys
from typing import Any, Dict, Mapping, Optional

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "auth_token_header": re.compile(
        r"(x-(?:auth|storage)-(?:token|key))(\s*[:=]\s*)\S+", re.IGNORECASE
    ),
    "bearer_token": re.compile(r"(Bearer)(\s+)[A-Za-z0-9._-]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "x-auth-key",
    "x-auth-token",
    "x-storage-token",
    "x-auth-user",
    "cookie",
    "set-cookie",
}


def sanitize_string(value: str) -> str:
    """Redact credentials embedded in a free-form string.

    :param value: String to sanitize
    :type value: str
    :return: String with token values replaced by ``<REDACTED>``
    :rtype: str
    """
    if not value:
        return value
    for pattern in SENSITIVE_PATTERNS.values():
        value = pattern.sub(r"\1\2<REDACTED>", value)
    return value


def sanitize_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Mapping of HTTP headers
    :type headers: Mapping[str, Any]
    :return: New dictionary with sensitive values redacted
    :rtype: Dict[str, Any]
    """
    if not headers:
        return {}
    sanitized: Dict[str, Any] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and value:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        else:
            sanitized[key] = value
    return sanitized


class SanitizingFormatter(logging.Formatter):
    """Formatter that scrubs credentials from the final message."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then redact anything that looks like a token.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log line
        :rtype: str
        """
        return sanitize_string(super().format(record))


_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up root logging with automatic sanitization.

    Safe to call more than once; only the first call installs the
    handler.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        SanitizingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )
    # httpx logs full request lines at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
