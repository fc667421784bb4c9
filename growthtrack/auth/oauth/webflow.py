"""Interactive Webflow OAuth2 authorization-code exchange.

Walks an operator through one authorization-code grant:

1. Print the Webflow authorize URL for WEBFLOW_CLIENT_ID.
2. Read the ``code`` parameter the operator copies from the redirect URL.
3. POST the code to the token endpoint and print the access token.

The token is printed only; copy it into ``.env`` as WEBFLOW_ACCESS_TOKEN.

Usage:
    webflow-oauth
    python scripts/webflow_oauth.py
"""

from __future__ import annotations

import os
import sys
import urllib.parse
from typing import Callable, Mapping, Optional

import httpx
from pydantic import BaseModel, ValidationError

AUTHORIZE_URL = "https://webflow.com/oauth/authorize"
TOKEN_URL = "https://api.webflow.com/oauth/access_token"
SCOPES = ("sites:read", "forms:read")
TOKEN_TIMEOUT_SECONDS = 30.0


class WebflowOAuthError(Exception):
    """Base class for fatal errors in the OAuth helper."""


class ConfigurationError(WebflowOAuthError):
    """Client credentials are missing."""


class AuthorizationInputError(WebflowOAuthError):
    """The operator did not provide an authorization code."""


class TokenExchangeError(WebflowOAuthError):
    """The token endpoint refused the code or answered with an error."""


class WebflowCredentials(BaseModel):
    client_id: str
    client_secret: str


class TokenResponse(BaseModel):
    """Successful token endpoint payload."""

    access_token: str
    token_type: str = "bearer"
    scope: Optional[str] = None


def load_credentials(env: Optional[Mapping[str, str]] = None) -> WebflowCredentials:
    """Read WEBFLOW_CLIENT_ID / WEBFLOW_CLIENT_SECRET; empty values count as missing."""
    env = os.environ if env is None else env
    client_id = (env.get("WEBFLOW_CLIENT_ID") or "").strip()
    client_secret = (env.get("WEBFLOW_CLIENT_SECRET") or "").strip()

    if not client_id or not client_secret:
        raise ConfigurationError("WEBFLOW_CLIENT_ID and WEBFLOW_CLIENT_SECRET are required in .env file")

    return WebflowCredentials(client_id=client_id, client_secret=client_secret)


def build_authorize_url(client_id: str, scopes: tuple[str, ...] = SCOPES) -> str:
    params = {"response_type": "code", "client_id": client_id, "scope": " ".join(scopes)}
    return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params, quote_via=urllib.parse.quote)}"


def prompt_for_code(input_fn: Callable[[str], str] = input) -> str:
    """Ask the operator for the authorization code (one line, stripped)."""
    try:
        code = input_fn(
            'Step 2: After authorization, copy the "code" parameter from the redirect URL and paste it here: '
        ).strip()
    except EOFError:
        code = ""

    if not code:
        raise AuthorizationInputError("No authorization code provided")
    return code


def _error_message(payload: dict) -> str:
    return str(payload.get("error_description") or payload.get("error"))


def exchange_code(
    credentials: WebflowCredentials,
    code: str,
    client: Optional[httpx.Client] = None,
) -> TokenResponse:
    """Exchange an authorization code for an access token.

    Args:
        credentials: Client id and secret
        code: Authorization code copied from the redirect URL
        client: Optional httpx client (default: a new client with a 30s timeout)

    Returns:
        Parsed token response

    Raises:
        TokenExchangeError: Non-2xx status, malformed or wrongly shaped body, or an ``error`` field in the body
        httpx.HTTPError: Connection-level failures
    """
    form = {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "code": code,
        "grant_type": "authorization_code",
    }

    owns_client = client is None
    client = client or httpx.Client(timeout=TOKEN_TIMEOUT_SECONDS)
    try:
        response = client.post(TOKEN_URL, data=form)
    finally:
        if owns_client:
            client.close()

    if not response.is_success:
        raise TokenExchangeError(f"HTTP {response.status_code}: {response.text}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise TokenExchangeError(f"Malformed token response: {response.text[:200]}") from exc

    if not isinstance(payload, dict):
        raise TokenExchangeError(f"Malformed token response: {response.text[:200]}")

    if "error" in payload:
        raise TokenExchangeError(_error_message(payload))

    if not payload.get("access_token"):
        raise TokenExchangeError("No access token in response")

    try:
        return TokenResponse.model_validate(payload)
    except ValidationError as exc:
        raise TokenExchangeError(f"Malformed token response: {response.text[:200]}") from exc


def _fail(message: str) -> int:
    print(f"[ERROR] {message}", file=sys.stderr)
    return 1


def main(
    env: Optional[Mapping[str, str]] = None,
    input_fn: Callable[[str], str] = input,
    client: Optional[httpx.Client] = None,
) -> int:
    """Run the interactive flow; returns the process exit code."""
    try:
        credentials = load_credentials(env)
    except ConfigurationError as exc:
        return _fail(str(exc))

    print("Webflow OAuth2 Helper")
    print("=" * 24)
    print()

    print("Step 1: Visit this URL to authorize the application:")
    print(build_authorize_url(credentials.client_id))
    print()

    try:
        code = prompt_for_code(input_fn)
    except AuthorizationInputError as exc:
        return _fail(str(exc))

    print()
    print("[INFO] Exchanging authorization code for access token...")

    try:
        token = exchange_code(credentials, code, client=client)
    except TokenExchangeError as exc:
        return _fail(f"Token exchange failed: {exc}")
    except httpx.HTTPError as exc:
        return _fail(f"Error during token exchange: {exc}")

    print("[OK] Success! Access token obtained")
    print()
    print("Add this to your .env file:")
    print(f'WEBFLOW_ACCESS_TOKEN="{token.access_token}"')
    print()
    print("Token details:")
    print(f"- Access Token: {token.access_token}")
    print(f"- Token Type: {token.token_type}")
    print(f"- Scope: {token.scope or 'N/A'}")
    return 0


def cli() -> None:
    """Console-script entry point: load .env, run the flow, exit with its status."""
    from dotenv import load_dotenv

    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    cli()
