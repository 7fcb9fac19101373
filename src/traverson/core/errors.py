from __future__ import annotations

from typing import Any, Optional


class TraversonError(Exception):
    """Base error for traversal failures."""

    def __init__(
        self,
        message: str,
        *,
        hop_index: Optional[int] = None,
        relation: Optional[str] = None,
        uri: Optional[str] = None,
    ):
        super().__init__(message)
        self.hop_index = hop_index
        self.relation = relation
        self.uri = uri


class TransportError(TraversonError):
    """Network, timeout or protocol failure raised by a transport."""


class TraversonHTTPError(TransportError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}", uri=url)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_text = response_text


class UnsupportedMediaTypeError(TraversonError):
    def __init__(self, content_type: Any, **context: Any):
        super().__init__(
            f"No link discoverer registered for content type {content_type or '<none>'}",
            **context,
        )
        self.content_type = content_type


class RelationNotFoundError(TraversonError):
    def __init__(self, relation: str, snippet: str = "", **context: Any):
        context.setdefault("relation", relation)
        super().__init__(
            f"Expected to find link with rel '{relation}' in response {snippet!r}",
            **context,
        )
        self.snippet = snippet


class MissingParameterError(TraversonError):
    def __init__(self, template: str, missing: list[str], **context: Any):
        names = ", ".join(missing)
        super().__init__(
            f"Template variable(s) {names} required by {template!r} have no value",
            **context,
        )
        self.template = template
        self.missing = missing


class DeserializationError(TraversonError):
    pass


class PathError(TraversonError):
    def __init__(self, message: str, expression: str, **context: Any):
        super().__init__(message, **context)
        self.expression = expression


class PathNotFoundError(PathError):
    pass


class InvalidPathExpressionError(PathError):
    pass


class NoHopsConfiguredError(TraversonError):
    pass


__all__ = [
    "TraversonError",
    "TransportError",
    "TraversonHTTPError",
    "UnsupportedMediaTypeError",
    "RelationNotFoundError",
    "MissingParameterError",
    "DeserializationError",
    "PathError",
    "PathNotFoundError",
    "InvalidPathExpressionError",
    "NoHopsConfiguredError",
]
