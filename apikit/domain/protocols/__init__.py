"""Domain protocols (ports).

Usage:
    from apikit.domain.protocols import LoggerProtocol, RateLimitStorageProtocol
"""

from apikit.domain.protocols.auth_provider_protocol import AuthProviderProtocol
from apikit.domain.protocols.logger_protocol import LoggerProtocol
from apikit.domain.protocols.paginator_protocol import (
    EagerLoadableProtocol,
    PaginatorProtocol,
)
from apikit.domain.protocols.rate_limit_storage_protocol import (
    RateLimitStorageProtocol,
)
from apikit.domain.protocols.router_adapter_protocol import RouterAdapterProtocol
from apikit.domain.protocols.transformer_adapter_protocol import (
    TransformerAdapterProtocol,
)

__all__ = [
    "AuthProviderProtocol",
    "EagerLoadableProtocol",
    "LoggerProtocol",
    "PaginatorProtocol",
    "RateLimitStorageProtocol",
    "RouterAdapterProtocol",
    "TransformerAdapterProtocol",
]
