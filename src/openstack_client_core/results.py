"""Decode OpenStack responses into dataclasses."""

import dataclasses
import types
import typing
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

import httpx

from openstack_client_core.errors.exceptions import UnexpectedTypeError
from openstack_client_core.params import FORMAT, HEADER, json_key
from openstack_client_core.util import TimeFormat, parse_time

T = TypeVar("T")


@dataclass
class Result:
    """The decoded body and headers of a single response."""

    body: Any = None
    status_code: int = 0
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @classmethod
    def from_response(cls, response: httpx.Response, **kwargs) -> "Result":
        return cls(
            body=decode_body(response),
            status_code=response.status_code,
            headers=response.headers,
            **kwargs,
        )

    def extract(self, label: str | None = None) -> Any:
        """Return the body, or the value under ``label``."""
        if label is None:
            return self.body
        if not isinstance(self.body, dict):
            raise UnexpectedTypeError("dict", type(self.body).__name__)
        if label not in self.body:
            raise UnexpectedTypeError(f"body with key {label!r}", f"keys {sorted(self.body)}")
        return self.body[label]

    def extract_into(self, cls: type[T], label: str | None = None) -> T:
        return decode_into(cls, self.extract(label))

    def extract_list_into(self, cls: type[T], label: str | None = None) -> list[T]:
        data = self.extract(label)
        if not isinstance(data, list):
            raise UnexpectedTypeError("list", type(data).__name__)
        return [decode_into(cls, item) for item in data]

    def extract_headers_into(self, cls: type[T]) -> T:
        """Decode the ``h`` fields of a dataclass from the response headers."""
        hints = typing.get_type_hints(cls)
        values = {}
        for f in dataclasses.fields(cls):
            name = f.metadata.get(HEADER)
            if not name or name not in self.headers:
                continue
            values[f.name] = _convert(hints.get(f.name), self.headers[name], f.metadata.get(FORMAT) or TimeFormat.RFC1123)
        return cls(**values)


@dataclass
class Link:
    """A link object as found in ``*_links`` collections."""

    href: str = ""
    rel: str = ""


def extract_next_url(links: list[Any]) -> str | None:
    """Return the href of the ``rel == "next"`` link, if any."""
    for link in links:
        if isinstance(link, Link):
            rel, href = link.rel, link.href
        elif isinstance(link, dict):
            rel, href = link.get("rel"), link.get("href")
        else:
            raise UnexpectedTypeError("link object", type(link).__name__)
        if rel == "next":
            return href or None
    return None


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body by content type.

    JSON is parsed, ``text/plain`` becomes a list of non-empty lines, anything
    else is returned as bytes. Empty bodies decode to None.
    """
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        return response.json()
    if content_type.startswith("text/plain"):
        return [line for line in response.text.splitlines() if line]
    return response.content


def decode_into(cls: type[T], data: Any) -> T:
    """Build a dataclass from a JSON mapping using its ``opt()`` metadata.

    Keys missing from ``data`` keep the field default; unknown keys are ignored.

    Raises:
        UnexpectedTypeError: if data is not a mapping or a value has the wrong shape
    """
    if not isinstance(data, dict):
        raise UnexpectedTypeError(f"dict for {cls.__name__}", type(data).__name__)

    hints = typing.get_type_hints(cls)
    values = {}
    for f in dataclasses.fields(cls):
        key = json_key(f)
        if key not in data:
            continue
        values[f.name] = _convert(hints.get(f.name), data[key], f.metadata.get(FORMAT))
    return cls(**values)


def _convert(hint: Any, value: Any, fmt: Any) -> Any:
    if value is None or hint is None:
        return value

    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return _convert(args[0], value, fmt) if len(args) == 1 else value

    if origin in (list, tuple):
        if not isinstance(value, list):
            raise UnexpectedTypeError("list", type(value).__name__)
        args = typing.get_args(hint)
        element = args[0] if args else None
        converted = [_convert(element, v, fmt) for v in value]
        return converted if origin is list else tuple(converted)

    if origin is dict:
        args = typing.get_args(hint)
        element = args[1] if len(args) == 2 else None
        return {k: _convert(element, v, fmt) for k, v in value.items()}

    if isinstance(hint, type):
        if dataclasses.is_dataclass(hint):
            return decode_into(hint, value)
        if issubclass(hint, datetime):
            try:
                return parse_time(value, fmt or TimeFormat.RFC3339)
            except ValueError as e:
                raise UnexpectedTypeError(f"time in {TimeFormat(fmt or TimeFormat.RFC3339).value} format", repr(value)) from e
        if issubclass(hint, Enum):
            return hint(value)
        if hint in (int, float) and isinstance(value, str):
            # Header values arrive as text
            return hint(value)
        if hint is bool and isinstance(value, str):
            return value.lower() == "true"

    return value
