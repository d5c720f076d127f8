"""Request and response envelopes for the DSIOT multireq endpoint.

Request body:
    {"requests": [{"op": 2, "to": "<path>"}, {"op": 3, "pc": <tree>, "to": "<path>"}]}

Response body:
    {"responses": [{"fr": "<path>", "pc": <tree>, "rsc": 2000}, ...]}
"""

from collections.abc import Iterator, Sequence
from typing import Any

from dsiot_gateway.protocol.constants import RSC_OK_PREFIX, OpCode
from dsiot_gateway.protocol.property import Property, Tree


def is_success(status_code: int) -> bool:
    """Whether a response status code is accepted (2000-2009)."""
    return status_code // 10 == RSC_OK_PREFIX


class Request:
    """One request entry."""

    def __init__(self, op: int, to: str, content: Property | None = None):
        self.op = op
        self.to = to
        self.content = content

    @classmethod
    def read(cls, to: str) -> "Request":
        return cls(OpCode.READ, to)

    @classmethod
    def write(cls, to: str, content: Property) -> "Request":
        return cls(OpCode.WRITE, to, content)

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {"op": int(self.op)}
        if self.content is not None:
            entry["pc"] = self.content.to_dict()
        entry["to"] = self.to
        return entry

    def __repr__(self) -> str:
        return f"Request(op={int(self.op)}, to={self.to!r})"


class RequestEnvelope:
    """Ordered list of request entries."""

    def __init__(self, requests: Sequence[Request] | None = None):
        self.requests: list[Request] = list(requests or [])

    def find(self, to: str) -> Request | None:
        """First request addressed to ``to``."""
        for request in self.requests:
            if request.to == to:
                return request
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"requests": [request.to_dict() for request in self.requests]}

    def __len__(self) -> int:
        return len(self.requests)

    def __iter__(self) -> Iterator[Request]:
        return iter(self.requests)

    def __repr__(self) -> str:
        return f"RequestEnvelope({self.requests!r})"


class Response:
    """One response entry."""

    def __init__(self, source: str, status_code: int, content: Property | None = None):
        self.source = source
        self.status_code = status_code
        self.content = content

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Response":
        """
        Parse a response entry (without status validation).

        Raises:
            ValueError: If ``fr`` or ``rsc`` is missing or mistyped
        """
        if not isinstance(data, dict):
            raise ValueError(f"Response entry is not an object: {data!r}")
        source = data.get("fr")
        status_code = data.get("rsc")
        if not isinstance(source, str):
            raise ValueError(f"Response entry without 'fr': {data!r}")
        if isinstance(status_code, bool) or not isinstance(status_code, int):
            raise ValueError(f"Response entry without integer 'rsc': {data!r}")

        content = data.get("pc")
        return cls(source, status_code, Property.from_dict(content) if content is not None else None)

    @property
    def ok(self) -> bool:
        return is_success(self.status_code)

    def get(self, path: Sequence[str]) -> Property | None:
        """Node at ``path`` below the payload root, if any."""
        if not isinstance(self.content, Tree):
            return None
        return self.content.get_path(path)

    def __repr__(self) -> str:
        return f"Response(fr={self.source!r}, rsc={self.status_code})"


class EnvelopeRejectedError(ValueError):
    """Raised when any entry of a response carries a failure status code."""

    def __init__(self, failures: list[Response]):
        self.failures = failures
        summary = ", ".join(f"{r.source}={r.status_code}" for r in failures)
        super().__init__(f"Response rejected: {summary}")


class ResponseEnvelope:
    """Validated, ordered list of response entries."""

    def __init__(self, responses: Sequence[Response] | None = None):
        self.responses: list[Response] = list(responses or [])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseEnvelope":
        """
        Parse and validate a response body.

        The envelope is accepted only if every entry succeeded; otherwise
        none of it is.

        Raises:
            ValueError: If the body is not a response envelope
            EnvelopeRejectedError: If any entry has a failure status code
        """
        if not isinstance(data, dict) or not isinstance(data.get("responses"), list):
            raise ValueError("Body is not a response envelope")

        responses = [Response.from_dict(entry) for entry in data["responses"]]
        failures = [response for response in responses if not response.ok]
        if failures:
            raise EnvelopeRejectedError(failures)
        return cls(responses)

    def find(self, source: str) -> Response | None:
        """First response from ``source``."""
        for response in self.responses:
            if response.source == source:
                return response
        return None

    def get(self, source: str, path: Sequence[str]) -> Property | None:
        """Node at ``path`` in the response from ``source``, if any."""
        response = self.find(source)
        if response is None:
            return None
        return response.get(path)

    def __len__(self) -> int:
        return len(self.responses)

    def __iter__(self) -> Iterator[Response]:
        return iter(self.responses)
