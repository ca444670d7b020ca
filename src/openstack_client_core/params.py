"""Build query strings, request bodies and headers from options dataclasses.

Options are plain dataclasses whose fields describe how they map onto the
wire through ``opt()`` metadata:

```python
from dataclasses import dataclass

from openstack_client_core.params import build_query_string, opt


@dataclass
class ListOpts:
    limit: int = opt(q="limit")
    marker: str = opt(q="marker")
    tags: list[str] = opt(q="tags", format="comma-separated", default_factory=list)


str(build_query_string(ListOpts(limit=1, marker="abc")))  # "limit=1&marker=abc"
```

Zero values (``None``, ``""``, ``0``, ``False`` and empty containers) count as
unset. A required numeric field set to ``0`` is therefore reported as missing;
declare it with ``keep_zero=True`` when zero is a meaningful value.
"""

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx

from openstack_client_core.errors.exceptions import (
    InvalidInputError,
    InvalidOptionsTypeError,
    MissingInputError,
)
from openstack_client_core.util import TimeFormat, format_time

COMMA_SEPARATED = "comma-separated"

# Field metadata keys
QUERY = "q"
JSON = "json"
HEADER = "h"
REQUIRED = "required"
OR = "or"
XOR = "xor"
FORMAT = "format"
OMITEMPTY = "omitempty"
KEEP_ZERO = "keep_zero"
INLINE = "inline"

SKIP = "-"


@runtime_checkable
class QueryEncodable(Protocol):
    def to_query(self) -> httpx.QueryParams: ...


@runtime_checkable
class BodyEncodable(Protocol):
    def to_body(self) -> dict[str, Any]: ...


@runtime_checkable
class HeaderEncodable(Protocol):
    def to_headers(self) -> dict[str, str]: ...


def opt(
    *,
    q: str | None = None,
    json: str | None = None,
    h: str | None = None,
    required: bool = False,
    or_: str | None = None,
    xor: str | None = None,
    format: str | TimeFormat | None = None,
    omitempty: bool = True,
    keep_zero: bool = False,
    inline: bool = False,
    default: Any = None,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare an options field and how it maps onto the wire.

    Args:
        q: Query parameter name
        json: Body key; defaults to the attribute name, ``"-"`` skips the field
        h: Header name
        required: Reject zero values
        or_: Attribute name of a partner field; at least one must be set
        xor: Attribute name of a partner field; exactly one must be set
        format: ``"comma-separated"`` for list query values, or a TimeFormat
        omitempty: Drop zero values from request bodies
        keep_zero: Only ``None`` counts as unset for this field
        inline: Merge a nested dataclass into the parent body
        default: Field default (``None`` unless given)
        default_factory: Factory for mutable defaults
    """
    metadata = {
        QUERY: q,
        JSON: json,
        HEADER: h,
        REQUIRED: required,
        OR: or_,
        XOR: xor,
        FORMAT: format,
        OMITEMPTY: omitempty,
        KEEP_ZERO: keep_zero,
        INLINE: inline,
    }
    if default_factory is not dataclasses.MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


def json_key(f: dataclasses.Field) -> str:
    """Return the body key for a dataclass field."""
    return f.metadata.get(JSON) or f.name


def is_zero(value: Any, keep_zero: bool = False) -> bool:
    """Report whether a value counts as unset."""
    if value is None:
        return True
    if keep_zero:
        return False
    if isinstance(value, Enum):
        return is_zero(value.value)
    if isinstance(value, bool | int | float):
        return value == 0
    if isinstance(value, str | bytes | list | tuple | dict | set | frozenset):
        return len(value) == 0
    if _is_options(value):
        return all(is_zero(getattr(value, f.name), f.metadata.get(KEEP_ZERO, False)) for f in dataclasses.fields(value))
    return False


def build_query_string(opts: Any) -> httpx.QueryParams:
    """Build URL query parameters from the ``q`` fields of an options dataclass.

    Fields are emitted in declaration order. Lists produce one parameter per
    element unless declared ``format="comma-separated"``. Mappings use the
    literal ``{'key':'value'}`` encoding some services expect.

    Args:
        opts: An options dataclass instance, or None

    Returns:
        Query parameters; ``str()`` gives the escaped query string

    Raises:
        InvalidOptionsTypeError: if opts is not a dataclass instance
        MissingInputError: if a required field is unset
        InvalidInputError: if a field holds a value that cannot be encoded
    """
    if opts is None:
        return httpx.QueryParams()
    _check_options(opts)

    items: list[tuple[str, str]] = []
    for f in dataclasses.fields(opts):
        name = f.metadata.get(QUERY)
        if not name:
            continue

        value = getattr(opts, f.name)
        if is_zero(value, f.metadata.get(KEEP_ZERO, False)):
            if f.metadata.get(REQUIRED):
                raise MissingInputError(f.name, f"Required query parameter [{name}] not set")
            continue

        fmt = f.metadata.get(FORMAT)
        if isinstance(value, list | tuple | set | frozenset):
            values = [_scalar_to_str(f.name, element, fmt) for element in value]
            if isinstance(value, set | frozenset):
                # Sets have no order of their own
                values.sort()
            if fmt == COMMA_SEPARATED:
                items.append((name, ",".join(values)))
            else:
                items.extend((name, v) for v in values)
        elif isinstance(value, Mapping):
            pairs = ", ".join(
                f"'{_scalar_to_str(f.name, k, None)}':'{_scalar_to_str(f.name, v, None)}'" for k, v in value.items()
            )
            items.append((name, "{" + pairs + "}"))
        else:
            items.append((name, _scalar_to_str(f.name, value, fmt)))

    return httpx.QueryParams(items)


def build_headers(opts: Any) -> dict[str, str]:
    """Build a header map from the ``h`` fields of an options dataclass.

    Raises:
        InvalidOptionsTypeError: if opts is not a dataclass instance
        MissingInputError: if a required header field is unset
        InvalidInputError: if a field holds a value that cannot be encoded
    """
    _check_options(opts)

    headers: dict[str, str] = {}
    for f in dataclasses.fields(opts):
        name = f.metadata.get(HEADER)
        if not name:
            continue

        value = getattr(opts, f.name)
        if is_zero(value, f.metadata.get(KEEP_ZERO, False)):
            if f.metadata.get(REQUIRED):
                raise MissingInputError(f.name, f"Required header [{name}] not set")
            continue

        headers[name] = _scalar_to_str(f.name, value, f.metadata.get(FORMAT) or TimeFormat.RFC1123)

    return headers


def build_request_body(opts: Any, root_key: str = "") -> dict[str, Any]:
    """Build a JSON-serializable request body from an options dataclass.

    Validation runs over every field in declaration order and the first
    violation aborts the build:

    - ``required`` fields must be non-zero
    - ``xor`` pairs must have exactly one member set
    - ``or_`` pairs must have at least one member set
    - nested options, directly or inside lists, are validated recursively

    Args:
        opts: An options dataclass instance
        root_key: Wrap the result as ``{root_key: {...}}`` when non-empty

    Returns:
        The request body

    Raises:
        InvalidOptionsTypeError: if opts is not a dataclass instance
        MissingInputError: on the first failed field constraint
    """
    _check_options(opts)

    body = _body_of(opts)
    if root_key:
        return {root_key: body}
    return body


def maybe_string(value: str | None) -> str | None:
    """Return None for an empty string, the value otherwise."""
    return value if value else None


def maybe_int(value: int | None) -> int | None:
    """Return None for zero, the value otherwise."""
    return value if value else None


def id_slice_to_query_string(name: str, ids: list[int]) -> str:
    """Build ``?name=1&name=2`` for a list of numeric IDs."""
    params = httpx.QueryParams([(name, str(i)) for i in ids])
    return f"?{params}"


def _body_of(opts: Any) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for f in dataclasses.fields(opts):
        value = getattr(opts, f.name)
        keep_zero = f.metadata.get(KEEP_ZERO, False)
        zero = is_zero(value, keep_zero)

        if f.metadata.get(REQUIRED) and zero:
            raise MissingInputError(f.name)

        xor = f.metadata.get(XOR)
        if xor:
            if zero == _partner_is_zero(opts, xor):
                raise MissingInputError(f"{f.name}/{xor}", f"Exactly one of {f.name} and {xor} must be provided")

        or_ = f.metadata.get(OR)
        if or_ and zero and _partner_is_zero(opts, or_):
            raise MissingInputError(f"{f.name}/{or_}", f"At least one of {f.name} and {or_} must be provided")

        key = json_key(f)
        if zero and f.metadata.get(OMITEMPTY, True):
            # Zero-valued nested options are not validated
            continue

        encoded = _to_json(value, f.metadata.get(FORMAT))
        if key == SKIP:
            continue

        if f.metadata.get(INLINE) and isinstance(encoded, dict):
            body.update(encoded)
        else:
            body[key] = encoded

    return body


def _to_json(value: Any, fmt: Any) -> Any:
    if _is_options(value):
        return _body_of(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_time(value, fmt or TimeFormat.RFC3339)
    if isinstance(value, set | frozenset):
        return sorted((_to_json(element, fmt) for element in value), key=str)
    if isinstance(value, list | tuple):
        return [_to_json(element, fmt) for element in value]
    if isinstance(value, Mapping):
        return {str(k): _to_json(v, fmt) for k, v in value.items()}
    return value


def _scalar_to_str(field_name: str, value: Any, fmt: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, datetime):
        time_format = fmt if fmt and fmt != COMMA_SEPARATED else TimeFormat.RFC3339
        return format_time(value, time_format)
    raise InvalidInputError(field_name, value, f"cannot encode {type(value).__name__}")


def _partner_is_zero(opts: Any, name: str) -> bool:
    try:
        partner = next(f for f in dataclasses.fields(opts) if f.name == name)
    except StopIteration:
        raise InvalidInputError(name, None, f"{type(opts).__name__} has no field {name}") from None
    return is_zero(getattr(opts, name), partner.metadata.get(KEEP_ZERO, False))


def _is_options(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _check_options(opts: Any) -> None:
    if not _is_options(opts):
        raise InvalidOptionsTypeError(opts)
