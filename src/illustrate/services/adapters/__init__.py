"""Provider adapters and the registry that dispatches to them."""

from illustrate.services.adapters.base import (
    BodyEncoding,
    CompletionStrategy,
    ProviderAdapter,
    SubmitThenPoll,
    Synchronous,
    WireRequest,
    combine_responses,
)
from illustrate.services.adapters.registry import (
    ADAPTER_CLASSES,
    AdapterRegistry,
    build_default_registry,
)

__all__ = [
    "ADAPTER_CLASSES",
    "AdapterRegistry",
    "BodyEncoding",
    "CompletionStrategy",
    "ProviderAdapter",
    "SubmitThenPoll",
    "Synchronous",
    "WireRequest",
    "build_default_registry",
    "combine_responses",
]
