from .factory import AuthProviderFactory
from .manager import AuthManager
from .providers import (
    API_TOKEN_AUTH_STRATEGY,
    USERS_PERMISSIONS_AUTH_STRATEGY,
    ApiTokenAuthProvider,
    AuthProvider,
    UsersPermissionsAuthProvider,
)

__all__ = [
    "API_TOKEN_AUTH_STRATEGY",
    "USERS_PERMISSIONS_AUTH_STRATEGY",
    "ApiTokenAuthProvider",
    "AuthManager",
    "AuthProvider",
    "AuthProviderFactory",
    "UsersPermissionsAuthProvider",
]
