"""hal-traverson package exports."""

from .core import (
    APPLICATION_JSON,
    COLLECTION_JSON,
    HAL_FORMS_JSON,
    HAL_JSON,
    CollectionJsonLinkDiscoverer,
    DeserializationError,
    HalLinkDiscoverer,
    Hop,
    HttpxTransport,
    InvalidPathExpressionError,
    JsonPathEvaluator,
    Link,
    LinkDiscoverer,
    LinkDiscoverers,
    MediaType,
    MissingParameterError,
    NoHopsConfiguredError,
    PathError,
    PathNotFoundError,
    RelationNotFoundError,
    ResponseEntity,
    RetryConfig,
    Transport,
    TransportError,
    TransportResponse,
    TraversalBuilder,
    Traverson,
    TraversonError,
    TraversonHTTPError,
    UnsupportedMediaTypeError,
    create_traverson_from_env,
    setup_logging,
)
from .models import HALResource

__all__ = [
    # Engine
    "Traverson",
    "TraversalBuilder",
    "Hop",
    "Link",
    "ResponseEntity",
    "HALResource",
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
    "JsonPathEvaluator",
    # Media types
    "MediaType",
    "HAL_JSON",
    "HAL_FORMS_JSON",
    "COLLECTION_JSON",
    "APPLICATION_JSON",
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
    # Setup
    "create_traverson_from_env",
    "setup_logging",
]
