"""
Header normalization for Cloud Files responses and requests.

Metadata and usage counters travel exclusively as HTTP headers. This
module selects headers by pattern, converts their names between the
hyphenated wire form and the underscored Python form, and coerces the
string values the service sends into canonical Python values.
"""

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Iterable, Mapping, Pattern, Tuple, Union

import httpx

HeaderSource = Union[httpx.Headers, Mapping[str, Any], Iterable[Tuple[str, str]]]

_DIGITS = re.compile(r"^-?\d+$")
_BOOLEANS = {"true": True, "false": False}


def _header_items(headers: HeaderSource) -> Iterable[Tuple[str, str]]:
    if isinstance(headers, httpx.Headers):
        return headers.multi_items()
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def extract_response_keys(
    headers: HeaderSource, pattern: Union[str, Pattern[str]]
) -> Dict[str, str]:
    """Select headers whose name matches ``pattern``.

    The pattern is matched case-insensitively against the full header
    name and must contain exactly one capture group; the captured text
    (lower-cased) becomes the key of the result. When a header occurs
    more than once, the first value wins.

    :param headers: Response headers (``httpx.Headers``, mapping or pairs)
    :param pattern: Regular expression with one capture group
    :return: Mapping of captured names to header values
    :raises ValueError: If the pattern does not have exactly one group
    """
    regex = re.compile(pattern, re.I) if isinstance(pattern, str) else pattern
    if regex.groups != 1:
        raise ValueError(
            f"Header pattern must have exactly one capture group: {regex.pattern!r}"
        )
    if not regex.flags & re.I:
        regex = re.compile(regex.pattern, regex.flags | re.I)

    result: Dict[str, str] = {}
    for key, value in _header_items(headers):
        match = regex.fullmatch(key)
        if not match:
            continue
        name = match.group(1).lower()
        if name not in result:
            result[name] = value
    return result


def underscorize_key(key: str, reverse: bool = False) -> str:
    """Convert one key between wire and Python form.

    ``Cdn-Enabled`` -> ``cdn_enabled``; with ``reverse`` ``cdn_enabled``
    -> ``cdn-enabled``.
    """
    key = key.lower()
    if reverse:
        return key.replace("_", "-")
    return key.replace("-", "_")


def underscorize_keys(mapping: Mapping[str, Any], reverse: bool = False) -> Dict[str, Any]:
    """Convert every key of ``mapping`` with :func:`underscorize_key`."""
    return {underscorize_key(k, reverse): v for k, v in mapping.items()}


def coerce_header_value(value: Any) -> Any:
    """Turn a header string into its canonical Python value.

    Integer strings become ``int`` and ``"true"``/``"false"`` in any
    case become ``bool``; everything else is returned unchanged.
    """
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if _DIGITS.match(stripped):
        return int(stripped)
    lowered = stripped.lower()
    if lowered in _BOOLEANS:
        return _BOOLEANS[lowered]
    return value


def coerce_header_values(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: coerce_header_value(v) for k, v in mapping.items()}


def format_header_value(value: Any) -> str:
    """Render an outgoing header value.

    Booleans go out as ``"true"``/``"false"`` and datetimes as HTTP-dates
    (naive datetimes are taken as UTC).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return format_datetime(value.astimezone(timezone.utc), usegmt=True)
    return str(value)


def normalize_response_headers(
    headers: HeaderSource, pattern: Union[str, Pattern[str]]
) -> Dict[str, Any]:
    """Extract, underscorize and coerce headers in one step.

    This is what the ``describe_*`` operations return to their models.
    """
    return coerce_header_values(underscorize_keys(extract_response_keys(headers, pattern)))
