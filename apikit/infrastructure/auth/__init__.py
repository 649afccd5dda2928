"""Authentication providers.

Usage:
    from apikit.infrastructure.auth import BasicProvider, JWTProvider
"""

from apikit.infrastructure.auth.basic_provider import BasicProvider
from apikit.infrastructure.auth.jwt_provider import JWTProvider

__all__ = ["BasicProvider", "JWTProvider"]
