"""
Content-type aware link discovery.

A LinkDiscoverer knows how to find a link for a relation inside a response
body of one hypermedia format. LinkDiscoverers holds an ordered list of
them and consults exactly one per lookup: the first that supports the
response's content type.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Union

from . import hal
from .errors import RelationNotFoundError, UnsupportedMediaTypeError
from .media import COLLECTION_JSON, HAL_FORMS_JSON, HAL_JSON, MediaType
from .models import Link

log = logging.getLogger("traverson.core.discovery")

Body = Union[str, bytes]

SNIPPET_LENGTH = 500


class LinkDiscoverer(Protocol):
    def supports(self, content_type: Optional[MediaType]) -> bool:
        ...

    def find_link(self, body: Body, relation: str) -> Optional[Link]:
        ...


def _load_json(body: Body) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        log.debug("Response body is not valid JSON; no links discoverable")
        return None


def snippet(body: Body, length: int = SNIPPET_LENGTH) -> str:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return (body or "")[:length]


class JsonLinkDiscoverer(ABC):
    """Shared plumbing for JSON based hypermedia formats."""

    def __init__(self, *media_types: MediaType):
        if not media_types:
            raise ValueError("At least one media type must be given")
        self.media_types = tuple(media_types)

    def supports(self, content_type: Optional[MediaType]) -> bool:
        if content_type is None:
            return False
        return any(mt.is_compatible_with(content_type) for mt in self.media_types)

    def find_link(self, body: Body, relation: str) -> Optional[Link]:
        document = _load_json(body)
        if not isinstance(document, dict):
            return None
        return self.find_link_in(document, relation)

    @abstractmethod
    def find_link_in(self, document: dict, relation: str) -> Optional[Link]:
        ...

    def __repr__(self) -> str:
        types = ", ".join(str(mt) for mt in self.media_types)
        return f"{type(self).__name__}({types})"


class HalLinkDiscoverer(JsonLinkDiscoverer):
    """Finds links in ``_links`` of HAL documents, honouring CURIEs."""

    def __init__(self, *media_types: MediaType):
        super().__init__(*(media_types or (HAL_JSON, HAL_FORMS_JSON)))

    def find_link_in(self, document: dict, relation: str) -> Optional[Link]:
        raw = hal.find_link(document, relation)
        if raw is None or not isinstance(raw.get("href"), str):
            return None
        return Link(
            href=raw["href"],
            rel=relation,
            title=raw.get("title"),
            name=raw.get("name"),
            type=raw.get("type"),
        )


class CollectionJsonLinkDiscoverer(JsonLinkDiscoverer):
    """
    Collection+JSON: ``self`` maps to ``collection.href``; other relations
    are looked up in ``collection.links``.
    """

    def __init__(self, *media_types: MediaType):
        super().__init__(*(media_types or (COLLECTION_JSON,)))

    def find_link_in(self, document: dict, relation: str) -> Optional[Link]:
        collection = document.get("collection")
        if not isinstance(collection, dict):
            return None

        if relation == "self" and isinstance(collection.get("href"), str):
            return Link(href=collection["href"], rel=relation)

        for item in collection.get("links") or []:
            if not isinstance(item, dict) or item.get("rel") != relation:
                continue
            if isinstance(item.get("href"), str):
                return Link(
                    href=item["href"],
                    rel=relation,
                    name=item.get("name"),
                    title=item.get("prompt"),
                )
        return None


class LinkDiscoverers:
    """Ordered, read-only registry of link discoverers."""

    def __init__(self, discoverers: Iterable[LinkDiscoverer]):
        self._discoverers: tuple = tuple(discoverers)
        if not self._discoverers:
            raise ValueError("At least one link discoverer must be registered")

    @classmethod
    def default(cls) -> "LinkDiscoverers":
        return cls([HalLinkDiscoverer()])

    @property
    def discoverers(self) -> Sequence[LinkDiscoverer]:
        return self._discoverers

    def discoverer_for(
        self, content_type: Optional[MediaType]
    ) -> Optional[LinkDiscoverer]:
        for discoverer in self._discoverers:
            if discoverer.supports(content_type):
                return discoverer
        return None

    def find_link(
        self, body: Body, content_type: Optional[MediaType], relation: str
    ) -> Link:
        discoverer = self.discoverer_for(content_type)
        if discoverer is None:
            raise UnsupportedMediaTypeError(content_type, relation=relation)

        link = discoverer.find_link(body, relation)
        if link is None:
            raise RelationNotFoundError(relation, snippet(body))
        return link

    def __len__(self) -> int:
        return len(self._discoverers)

    def __repr__(self) -> str:
        return f"LinkDiscoverers({list(self._discoverers)!r})"


def as_registry(
    discoverers: Union[LinkDiscoverers, Iterable[LinkDiscoverer], None],
) -> LinkDiscoverers:
    if discoverers is None:
        return LinkDiscoverers.default()
    if isinstance(discoverers, LinkDiscoverers):
        return discoverers
    return LinkDiscoverers(list(discoverers))


__all__ = [
    "LinkDiscoverer",
    "JsonLinkDiscoverer",
    "HalLinkDiscoverer",
    "CollectionJsonLinkDiscoverer",
    "LinkDiscoverers",
    "as_registry",
    "snippet",
]
