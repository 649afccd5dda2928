"""Authentication service and route middleware.

Usage:
    from apikit.presentation.auth import Auth, AuthMiddleware
"""

from apikit.presentation.auth.auth import Auth
from apikit.presentation.auth.middleware import AuthMiddleware

__all__ = ["Auth", "AuthMiddleware"]
