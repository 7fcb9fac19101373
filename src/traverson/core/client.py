import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import httpx

from .errors import TransportError, TraversonHTTPError
from .media import MediaType

Headers = Dict[str, List[str]]


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...
    retry_statuses: frozenset[int] = frozenset({502, 503, 504})
    retry_on_429: bool = False


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes
    url: str
    content_type: Optional[MediaType] = None
    headers: Headers = field(default_factory=dict)

    @property
    def text(self) -> str:
        charset = "utf-8"
        if self.content_type is not None:
            charset = self.content_type.parameters.get("charset", charset)
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """
    What the traversal engine needs from HTTP: a single GET.

    Implementations raise TransportError (or a subclass) for network
    failures and non-2xx statuses, and own any retry policy.
    """

    async def get(self, uri: str, headers: Mapping[str, Sequence[str]]) -> TransportResponse:
        ...


def to_header_pairs(headers: Mapping[str, Sequence[str]]) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for name, values in headers.items():
        for value in values:
            pairs.append((name, value))
    return pairs


def from_httpx_headers(headers: httpx.Headers) -> Headers:
    out: Headers = {}
    for name, value in headers.multi_items():
        out.setdefault(name.lower(), []).append(value)
    return out


class HttpxTransport:
    """
    Default transport over httpx.AsyncClient.
    - Handles timeouts and retries (network errors + 502/503/504; optionally 429)
    - Raises TraversonHTTPError on non-2xx responses
    - Returns the raw body; parsing belongs to the caller
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        retry: Optional[RetryConfig] = None,
        auth: Optional[httpx.Auth] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("traverson.core.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            auth=auth,
            timeout=timeout_seconds,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def get(
        self, uri: str, headers: Mapping[str, Sequence[str]]
    ) -> TransportResponse:
        start = time.perf_counter()
        request_headers = httpx.Headers(to_header_pairs(headers))
        attempt = 0

        while True:
            try:
                resp = await self.http.get(uri, headers=request_headers)
                duration_ms = int((time.perf_counter() - start) * 1000)

                self.log.debug(
                    "http.request",
                    extra={
                        "method": "GET",
                        "url": str(resp.request.url),
                        "status": resp.status_code,
                        "duration_ms": duration_ms,
                        "attempt": attempt,
                    },
                )

                if resp.status_code in self.retry.retry_statuses or (
                    self.retry.retry_on_429 and resp.status_code == 429
                ):
                    if attempt < self.retry.max_retries:
                        await asyncio.sleep(
                            self.retry.backoff_base_seconds * (2**attempt)
                        )
                        attempt += 1
                        continue

                if resp.status_code < 200 or resp.status_code >= 300:
                    raise self._to_http_error(resp)

                return TransportResponse(
                    status_code=resp.status_code,
                    body=resp.content,
                    url=str(resp.url),
                    content_type=MediaType.parse_optional(
                        resp.headers.get("content-type")
                    ),
                    headers=from_httpx_headers(resp.headers),
                )

            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if attempt < self.retry.max_retries:
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                raise TransportError(
                    f"Network/timeout error calling GET {uri}: {exc}", uri=uri
                ) from exc

            except httpx.HTTPError as exc:
                # Other httpx exceptions (rare) - do not blindly retry
                raise TransportError(
                    f"HTTPX error calling GET {uri}: {exc}", uri=uri
                ) from exc

    @staticmethod
    def _to_http_error(resp: httpx.Response) -> TraversonHTTPError:
        message = resp.reason_phrase or "request failed"
        response_text = (resp.text or "")[:500]
        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                message = parsed.get("message") or parsed.get("error") or message
        except ValueError:
            pass

        return TraversonHTTPError(
            status_code=resp.status_code,
            method="GET",
            url=str(resp.request.url),
            message=message,
            response_text=response_text,
        )


__all__ = [
    "Headers",
    "RetryConfig",
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    "to_header_pairs",
    "from_httpx_headers",
]
