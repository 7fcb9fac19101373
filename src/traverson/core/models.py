from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

from . import templates
from .media import MediaType

T = TypeVar("T")


class Link(BaseModel):
    """A hypermedia link; ``href`` may be a URI template."""

    href: str
    rel: str
    title: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_templated(self) -> bool:
        return templates.is_templated(self.href)

    @property
    def variable_names(self) -> List[str]:
        return templates.variable_names(self.href)

    def expand(self, parameters: Optional[Mapping[str, Any]] = None) -> "Link":
        return self.model_copy(update={"href": templates.expand(self.href, parameters)})


def _header_values(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def normalize_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """Lowercase names; accept either a single string or a list per header."""
    out: Dict[str, List[str]] = {}
    for name, value in (headers or {}).items():
        out.setdefault(name.lower(), []).extend(_header_values(value))
    return out


def merge_headers(
    defaults: Mapping[str, Sequence[str]], overrides: Mapping[str, Sequence[str]]
) -> Dict[str, List[str]]:
    """Header names present in ``overrides`` replace the default values."""
    merged = {name: list(values) for name, values in defaults.items()}
    for name, values in overrides.items():
        merged[name] = list(values)
    return merged


@dataclass(frozen=True)
class Hop:
    """
    One traversal step. Builder methods return a new Hop.

    ``parameters`` expand the link discovered for ``relation``;
    ``headers`` are sent with the request that follows that link.
    """

    relation: str
    parameters: Dict[str, Any] = field(default_factory=dict, hash=False)
    headers: Dict[str, List[str]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.relation or not self.relation.strip():
            raise ValueError("Relation must not be empty")

    @classmethod
    def rel(cls, relation: str) -> "Hop":
        return cls(relation=relation)

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters)

    def with_parameter(self, name: str, value: Any) -> "Hop":
        return replace(self, parameters={**self.parameters, name: value})

    def with_parameters(self, parameters: Mapping[str, Any]) -> "Hop":
        return replace(self, parameters=dict(parameters))

    def header(self, name: str, value: Any) -> "Hop":
        headers = {k: list(v) for k, v in self.headers.items()}
        headers.setdefault(name.lower(), []).extend(_header_values(value))
        return replace(self, headers=headers)

    def with_headers(self, headers: Mapping[str, Any]) -> "Hop":
        return replace(self, headers=normalize_headers(headers))

    def merged_parameters(self, global_parameters: Mapping[str, Any]) -> Dict[str, Any]:
        """Traversal-wide parameters overlaid with this hop's (hop wins)."""
        return {**global_parameters, **self.parameters}


@dataclass(frozen=True)
class TraversalRequestContext:
    uri: str
    headers: Dict[str, List[str]] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ResponseEntity(Generic[T]):
    status_code: int
    headers: Dict[str, List[str]]
    body: T
    content_type: Optional[MediaType] = None


__all__ = [
    "Link",
    "Hop",
    "TraversalRequestContext",
    "ResponseEntity",
    "normalize_headers",
    "merge_headers",
]
