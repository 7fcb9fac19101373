"""
Hypermedia traversal.

    traverson = Traverson("http://api.example/", HAL_JSON)
    link = await traverson.follow("items", Hop.rel("first")).as_link()

Each hop fetches the current resource, finds the link for the hop's
relation in the response and moves on to it. Only the final link is left
for the terminal operation to expand (and fetch, for to_object/to_entity).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)
from urllib.parse import urljoin, urlsplit

from pydantic import TypeAdapter, ValidationError

from . import templates
from .client import HttpxTransport, Transport, TransportResponse
from .discovery import LinkDiscoverer, LinkDiscoverers, as_registry, snippet
from .errors import (
    DeserializationError,
    NoHopsConfiguredError,
    PathNotFoundError,
    RelationNotFoundError,
    TraversonError,
)
from .media import MediaType
from .models import (
    Hop,
    Link,
    ResponseEntity,
    TraversalRequestContext,
    merge_headers,
    normalize_headers,
)
from .observability import log_event
from .paths import JsonPathEvaluator, PathEvaluator, is_path_expression

Step = Union[str, Hop]


def _annotate(
    exc: TraversonError,
    *,
    hop_index: Optional[int],
    relation: Optional[str],
    uri: Optional[str],
) -> None:
    if exc.hop_index is None:
        exc.hop_index = hop_index
    if exc.relation is None:
        exc.relation = relation
    if exc.uri is None:
        exc.uri = uri


def _resolve(href: str, base: str) -> str:
    if urlsplit(href).scheme or href.startswith("{"):
        return href
    return urljoin(base, href)


@dataclass(frozen=True)
class _Traversal:
    """Outcome of walking all hops: the final context and the link behind it."""

    context: TraversalRequestContext
    link: Optional[Link]
    last_hop: Optional[Hop]


class Traverson:
    """
    Entry point for traversals starting at ``base_uri``.
    - ``media_types`` are sent as Accept unless a request sets its own
    - Link discovery is delegated to the registered LinkDiscoverers
    - Owns (and closes) the transport only when it created it
    """

    def __init__(
        self,
        base_uri: str,
        *media_types: Union[str, MediaType],
        transport: Optional[Transport] = None,
        discoverers: Union[LinkDiscoverers, Iterable[LinkDiscoverer], None] = None,
        path_evaluator: Optional[PathEvaluator] = None,
        logger: Optional[logging.Logger] = None,
        owns_transport: Optional[bool] = None,
    ):
        base_uri = (base_uri or "").strip()
        if not base_uri:
            raise ValueError("base_uri must be provided.")
        if not media_types:
            raise ValueError("At least one media type must be given.")

        self.base_uri = base_uri
        self.media_types = tuple(
            mt if isinstance(mt, MediaType) else MediaType.parse(mt)
            for mt in media_types
        )
        self.discoverers = as_registry(discoverers)
        self.path_evaluator = path_evaluator or JsonPathEvaluator()
        self.log = logger or logging.getLogger("traverson.core.traversal")

        self._owns_transport = (
            transport is None if owns_transport is None else owns_transport
        )
        self.transport: Transport = transport or HttpxTransport()

    def with_link_discoverers(
        self, discoverers: Union[LinkDiscoverers, Iterable[LinkDiscoverer], None]
    ) -> "Traverson":
        """Replace the discoverer registry; None restores the default."""
        self.discoverers = as_registry(discoverers)
        return self

    def follow(self, *steps: Step) -> "TraversalBuilder":
        return TraversalBuilder(self).follow(*steps)

    def prepare_headers(
        self, headers: Mapping[str, Sequence[str]]
    ) -> Dict[str, List[str]]:
        to_send = {name: list(values) for name, values in headers.items()}
        if not to_send.get("accept"):
            to_send["accept"] = [", ".join(str(mt) for mt in self.media_types)]
        return to_send

    async def aclose(self) -> None:
        if self._owns_transport and hasattr(self.transport, "aclose"):
            await self.transport.aclose()

    async def __aenter__(self) -> "Traverson":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class TraversalBuilder:
    """
    Collects hops, template parameters and headers for one traversal.
    Terminal operations never modify the builder, so they can be awaited
    repeatedly.
    """

    def __init__(self, traverson: Traverson):
        self._traverson = traverson
        self._hops: List[Hop] = []
        self._parameters: Dict[str, Any] = {}
        self._headers: Dict[str, List[str]] = {}

    @property
    def hops(self) -> Sequence[Hop]:
        return tuple(self._hops)

    def follow(self, *steps: Step) -> "TraversalBuilder":
        for step in steps:
            if isinstance(step, Hop):
                self._hops.append(step)
            elif isinstance(step, str):
                self._hops.append(Hop.rel(step))
            else:
                raise TypeError(
                    f"Expected a relation name or Hop, got {type(step).__name__}"
                )
        return self

    def with_template_parameters(
        self, parameters: Mapping[str, Any]
    ) -> "TraversalBuilder":
        if parameters is None:
            raise ValueError("Parameters must not be None.")
        self._parameters = dict(parameters)
        return self

    def with_headers(self, headers: Mapping[str, Any]) -> "TraversalBuilder":
        if headers is None:
            raise ValueError("Headers must not be None.")
        self._headers = normalize_headers(headers)
        return self

    # --- Terminal operations ------------------------------------------------ #

    async def to_object(self, target: Any) -> Any:
        """
        Fetch the final resource and return it as ``target``.

        ``target`` is either a type pydantic can validate into (models,
        ``List[Model]``, ``dict``...), ``str``/``bytes`` for the raw body,
        or a JSON path expression whose match is returned.
        """
        if target is None:
            raise ValueError("Target type must not be None.")
        if isinstance(target, str):
            if not target.strip():
                raise ValueError("JSON path must not be empty.")
            response = await self._fetch_final()
            return self._evaluate(response, target)

        response = await self._fetch_final()
        return self._deserialize(response, target)

    async def to_entity(self, target: Any) -> ResponseEntity:
        if target is None:
            raise ValueError("Target type must not be None.")
        response = await self._fetch_final()
        return ResponseEntity(
            status_code=response.status_code,
            headers=response.headers,
            body=self._deserialize(response, target),
            content_type=response.content_type,
        )

    async def as_link(self) -> Link:
        """The final link, expanded with the merged template parameters."""
        self._require_hops()
        traversal = await self._traverse()
        href = self._expand_final(traversal)
        link = traversal.link.model_copy(update={"href": href})
        self._log_complete("as_link", href)
        return link

    async def as_templated_link(self) -> Link:
        """The final link exactly as discovered, templates left in place."""
        self._require_hops()
        traversal = await self._traverse()
        self._log_complete("as_templated_link", traversal.link.href)
        return traversal.link

    # --- Internals ---------------------------------------------------------- #

    def _require_hops(self) -> None:
        if not self._hops:
            raise NoHopsConfiguredError("At least one relation needs to be followed.")

    async def _traverse(self) -> _Traversal:
        context = TraversalRequestContext(uri=self._traverson.base_uri)
        link: Optional[Link] = None
        last = len(self._hops) - 1
        previous: Optional[Hop] = None

        for index, hop in enumerate(self._hops):
            uri = context.uri
            try:
                uri = templates.expand(context.uri)
            except TraversonError as exc:
                # the unexpanded link was discovered by the previous hop
                _annotate(
                    exc,
                    hop_index=index - 1 if previous is not None else None,
                    relation=previous.relation if previous is not None else None,
                    uri=context.uri,
                )
                raise

            try:
                response = await self._get(uri, context.headers)
                link = self._discover(response, hop)

                self._traverson.log.debug(
                    "traversal.hop",
                    extra={
                        "hop": index,
                        "relation": hop.relation,
                        "url": uri,
                        "status": response.status_code,
                        "content_type": str(response.content_type),
                    },
                )

                href = link.href
                if hop.has_parameters and index < last:
                    href = templates.expand(
                        href, hop.merged_parameters(self._parameters)
                    )
            except TraversonError as exc:
                _annotate(exc, hop_index=index, relation=hop.relation, uri=uri)
                raise

            context = TraversalRequestContext(uri=href, headers=hop.headers)
            previous = hop

        return _Traversal(
            context=context,
            link=link,
            last_hop=self._hops[-1] if self._hops else None,
        )

    def _discover(self, response: TransportResponse, hop: Hop) -> Link:
        if is_path_expression(hop.relation):
            try:
                value = self._traverson.path_evaluator.evaluate(
                    response.body, hop.relation
                )
            except PathNotFoundError as exc:
                raise RelationNotFoundError(
                    hop.relation, snippet(response.body)
                ) from exc
            if not isinstance(value, str):
                raise RelationNotFoundError(hop.relation, snippet(response.body))
            link = Link(href=value, rel=hop.relation)
        else:
            link = self._traverson.discoverers.find_link(
                response.body, response.content_type, hop.relation
            )

        return link.model_copy(update={"href": _resolve(link.href, response.url)})

    async def _get(
        self, uri: str, extra_headers: Mapping[str, Sequence[str]]
    ) -> TransportResponse:
        headers = self._traverson.prepare_headers(
            merge_headers(self._headers, extra_headers)
        )
        return await self._traverson.transport.get(uri, headers)

    def _final_parameters(self, traversal: _Traversal) -> Dict[str, Any]:
        if traversal.last_hop is None:
            return dict(self._parameters)
        return traversal.last_hop.merged_parameters(self._parameters)

    def _expand_final(self, traversal: _Traversal) -> str:
        try:
            return templates.expand(
                traversal.context.uri, self._final_parameters(traversal)
            )
        except TraversonError as exc:
            last = traversal.last_hop
            _annotate(
                exc,
                hop_index=len(self._hops) - 1 if last else None,
                relation=last.relation if last else None,
                uri=traversal.context.uri,
            )
            raise

    async def _fetch_final(self) -> TransportResponse:
        traversal = await self._traverse()
        uri = self._expand_final(traversal)
        try:
            response = await self._get(uri, traversal.context.headers)
        except TraversonError as exc:
            _annotate(exc, hop_index=len(self._hops), relation=None, uri=uri)
            raise
        self._log_complete("fetch", uri)
        return response

    def _evaluate(self, response: TransportResponse, expression: str) -> Any:
        try:
            return self._traverson.path_evaluator.evaluate(response.body, expression)
        except TraversonError as exc:
            _annotate(exc, hop_index=None, relation=None, uri=response.url)
            raise

    def _deserialize(self, response: TransportResponse, target: Any) -> Any:
        if target is bytes:
            return response.body
        if target is str:
            return response.text

        content_type = response.content_type
        if content_type is not None and not content_type.is_json:
            raise DeserializationError(
                f"Cannot read {content_type} response from {response.url} "
                f"as {getattr(target, '__name__', target)}",
                uri=response.url,
            )
        try:
            return TypeAdapter(target).validate_json(response.body)
        except ValidationError as exc:
            raise DeserializationError(
                f"Response from {response.url} did not match "
                f"{getattr(target, '__name__', target)}: {exc}",
                uri=response.url,
            ) from exc

    def _log_complete(self, operation: str, url: str) -> None:
        log_event(
            "traversal.complete",
            logger=self._traverson.log,
            operation=operation,
            hop=len(self._hops),
            url=url,
        )


__all__ = ["Traverson", "TraversalBuilder", "Step"]
