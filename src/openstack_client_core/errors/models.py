"""Models for the fault bodies returned by OpenStack services."""

import json
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class FaultDetail:
    """A service fault decoded from an error response body.

    OpenStack services disagree on the shape of their error bodies. The common
    ones are:

    - nova, cinder, manila: ``{"itemNotFound": {"message": "...", "code": 404}}``
    - neutron: ``{"NeutronError": {"type": "...", "message": "...", "detail": ""}}``
    - keystone: ``{"error": {"code": 401, "title": "...", "message": "..."}}``
    - ironic, magnum: ``{"error_message": "{\\"faultstring\\": \\"...\\"}"}``
    """

    kind: str | None = None  # Wrapping key or neutron "type"
    message: str | None = None
    code: int | None = None
    title: str | None = None
    detail: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "FaultDetail | None":
        """Parse a fault from an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            FaultDetail object or None if the body is not a recognised fault
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            # Not JSON (HTML error pages from proxies, plain text from swift)
            return None

        return cls.from_body(data)

    @classmethod
    def from_body(cls, data: Any) -> "FaultDetail | None":
        if not isinstance(data, dict) or not data:
            return None

        # ironic wraps a JSON document in a string
        if "error_message" in data:
            inner = data["error_message"]
            if isinstance(inner, str):
                try:
                    inner = json.loads(inner)
                except ValueError:
                    return cls(message=inner)
            if isinstance(inner, dict):
                return cls(
                    message=inner.get("faultstring"),
                    detail=inner.get("debuginfo"),
                )
            return None

        if "faultstring" in data:
            return cls(message=data.get("faultstring"), detail=data.get("debuginfo"))

        if len(data) != 1:
            return None

        kind, inner = next(iter(data.items()))
        if not isinstance(inner, dict):
            return None

        if "message" not in inner and "title" not in inner:
            return None

        code = inner.get("code")
        return cls(
            kind=inner.get("type") or kind,
            message=inner.get("message"),
            code=code if isinstance(code, int) else None,
            title=inner.get("title"),
            detail=inner.get("detail") or None,
        )

    def to_exception_message(self) -> str:
        """Convert the fault to the tail of an exception message."""
        lines = []

        if self.message:
            lines.append(self.message)
        elif self.title:
            lines.append(self.title)

        if self.detail and self.detail != self.message:
            lines.append(self.detail)

        if self.kind:
            lines.append(f"Fault: {self.kind}")

        return "\n".join(lines) if lines else "Unknown OpenStack fault"
