"""Request option composition.

Operations build their request by layering fields into a
:class:`~cloud_files.models.RequestOptions`. ``merge`` keeps whatever the
caller already put there; ``override`` lets the operation win. A key
prefix turns a plain metadata mapping into namespaced headers::

    add_fields(opts, "headers", {"tag1": "x"}, "override", "x-object-meta-")
    # opts.headers == {"x-object-meta-tag1": "x"}
"""

from typing import Any, Dict, Literal, Mapping, Optional

from ..models import RequestOptions

Category = Literal["headers", "vars", "body"]
Mode = Literal["merge", "override"]


def add_fields(
    options: RequestOptions,
    category: Category,
    data: Optional[Mapping[str, Any]],
    mode: Mode = "merge",
    prefix: Optional[str] = None,
) -> RequestOptions:
    """Compose ``data`` into ``options.<category>`` in place.

    :param options: Options to mutate
    :param category: One of ``headers``, ``vars`` or ``body``
    :param data: Fields to add; ``None`` or empty is a no-op
    :param mode: ``merge`` keeps existing keys, ``override`` replaces them
    :param prefix: Optional string prepended to every key of ``data``
    :return: The same ``options`` instance
    """
    if not data:
        return options

    target: Dict[str, Any] = getattr(options, category)
    for key, value in data.items():
        name = f"{prefix or ''}{key}"
        # header names are case-insensitive on the wire
        if category == "headers":
            name = name.lower()
        if mode == "override" or name not in target:
            target[name] = value
    return options


def copy_options(options: Optional[RequestOptions]) -> RequestOptions:
    """Return a private deep copy of caller options (or fresh ones).

    Header names are lower-cased so later merges see caller headers.
    """
    if options is None:
        return RequestOptions()
    copied = options.model_copy(deep=True)
    copied.headers = {k.lower(): v for k, v in copied.headers.items()}
    return copied
