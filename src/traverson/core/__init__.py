"""Core traversal surface for hal-traverson (transport-agnostic)."""

from .client import (
    HttpxTransport,
    RetryConfig,
    Transport,
    TransportResponse,
)
from .config import TraversonSettings, create_traverson_from_env, load_env_config
from .discovery import (
    CollectionJsonLinkDiscoverer,
    HalLinkDiscoverer,
    LinkDiscoverer,
    LinkDiscoverers,
)
from .errors import (
    DeserializationError,
    InvalidPathExpressionError,
    MissingParameterError,
    NoHopsConfiguredError,
    PathError,
    PathNotFoundError,
    RelationNotFoundError,
    TransportError,
    TraversonError,
    TraversonHTTPError,
    UnsupportedMediaTypeError,
)
from .logging import setup_logging
from .media import (
    APPLICATION_JSON,
    COLLECTION_JSON,
    HAL_FORMS_JSON,
    HAL_JSON,
    MediaType,
)
from .models import Hop, Link, ResponseEntity, TraversalRequestContext
from .paths import JsonPathEvaluator, PathEvaluator
from .templates import expand
from .traversal import TraversalBuilder, Traverson

__all__ = [
    # Engine
    "Traverson",
    "TraversalBuilder",
    "Hop",
    "Link",
    "ResponseEntity",
    "TraversalRequestContext",
    # Transport
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    "RetryConfig",
    # Discovery
    "LinkDiscoverer",
    "LinkDiscoverers",
    "HalLinkDiscoverer",
    "CollectionJsonLinkDiscoverer",
    # Media types
    "MediaType",
    "HAL_JSON",
    "HAL_FORMS_JSON",
    "COLLECTION_JSON",
    "APPLICATION_JSON",
    # Templates / paths
    "expand",
    "PathEvaluator",
    "JsonPathEvaluator",
    # Exceptions
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
    # Config / logging
    "TraversonSettings",
    "load_env_config",
    "create_traverson_from_env",
    "setup_logging",
]
