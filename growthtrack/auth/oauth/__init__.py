"""OAuth 2.0 helpers for third-party integrations."""

from growthtrack.auth.oauth.webflow import (
    AuthorizationInputError,
    ConfigurationError,
    TokenExchangeError,
    TokenResponse,
    WebflowOAuthError,
    exchange_code,
)

__all__ = [
    "AuthorizationInputError",
    "ConfigurationError",
    "TokenExchangeError",
    "TokenResponse",
    "WebflowOAuthError",
    "exchange_code",
]
