"""Tests for the Webflow OAuth helper, with the token endpoint mocked by httpx.MockTransport."""

import urllib.parse

import httpx
import pytest

from growthtrack.auth.oauth.webflow import (
    TOKEN_URL,
    AuthorizationInputError,
    ConfigurationError,
    TokenExchangeError,
    WebflowCredentials,
    build_authorize_url,
    exchange_code,
    load_credentials,
    main,
    prompt_for_code,
)

ENV = {"WEBFLOW_CLIENT_ID": "cid", "WEBFLOW_CLIENT_SECRET": "csecret"}


def _client(handler, requests=None):
    def record(request):
        if requests is not None:
            requests.append(request)
        return handler(request)

    return httpx.Client(transport=httpx.MockTransport(record))


def _never_called(request):
    raise AssertionError("token endpoint must not be called")


class TestCredentials:
    def test_loaded_from_env(self):
        assert load_credentials(ENV) == WebflowCredentials(client_id="cid", client_secret="csecret")

    @pytest.mark.parametrize(
        "env",
        [{}, {"WEBFLOW_CLIENT_ID": "cid"}, {"WEBFLOW_CLIENT_ID": "", "WEBFLOW_CLIENT_SECRET": "csecret"}],
    )
    def test_missing_or_empty(self, env):
        with pytest.raises(ConfigurationError):
            load_credentials(env)


def test_authorize_url():
    url = build_authorize_url("cid")
    parsed = urllib.parse.urlparse(url)
    query = urllib.parse.parse_qs(parsed.query)

    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://webflow.com/oauth/authorize"
    assert query == {"response_type": ["code"], "client_id": ["cid"], "scope": ["sites:read forms:read"]}


class TestPrompt:
    def test_strips_whitespace(self):
        assert prompt_for_code(lambda _: "  abc123\n") == "abc123"

    def test_empty_code(self):
        with pytest.raises(AuthorizationInputError):
            prompt_for_code(lambda _: "   ")

    def test_eof(self):
        def eof(_):
            raise EOFError

        with pytest.raises(AuthorizationInputError):
            prompt_for_code(eof)


class TestExchange:
    def test_posts_form_and_parses_token(self):
        requests = []
        client = _client(lambda r: httpx.Response(200, json={"access_token": "T", "token_type": "bearer"}), requests)

        token = exchange_code(WebflowCredentials(client_id="cid", client_secret="csecret"), "C", client=client)

        assert token.access_token == "T"
        assert str(requests[0].url) == TOKEN_URL
        assert requests[0].method == "POST"
        assert urllib.parse.parse_qs(requests[0].content.decode()) == {
            "client_id": ["cid"],
            "client_secret": ["csecret"],
            "code": ["C"],
            "grant_type": ["authorization_code"],
        }

    def test_error_field_prefers_description(self):
        client = _client(
            lambda r: httpx.Response(200, json={"error": "invalid_grant", "error_description": "Code expired"})
        )

        with pytest.raises(TokenExchangeError, match="Code expired"):
            exchange_code(WebflowCredentials(client_id="cid", client_secret="csecret"), "C", client=client)

    def test_non_2xx(self):
        client = _client(lambda r: httpx.Response(401, text="unauthorized"))

        with pytest.raises(TokenExchangeError, match="HTTP 401: unauthorized"):
            exchange_code(WebflowCredentials(client_id="cid", client_secret="csecret"), "C", client=client)

    def test_malformed_body(self):
        client = _client(lambda r: httpx.Response(200, text="<html>"))

        with pytest.raises(TokenExchangeError, match="Malformed token response"):
            exchange_code(WebflowCredentials(client_id="cid", client_secret="csecret"), "C", client=client)

    @pytest.mark.parametrize(
        "payload",
        [
            {"access_token": "T", "token_type": None},
            {"access_token": "T", "scope": ["sites:read", "forms:read"]},
            {"access_token": 12345},
        ],
    )
    def test_wrongly_shaped_body(self, payload):
        client = _client(lambda r: httpx.Response(200, json=payload))

        with pytest.raises(TokenExchangeError, match="Malformed token response"):
            exchange_code(WebflowCredentials(client_id="cid", client_secret="csecret"), "C", client=client)


class TestMain:
    def test_wrongly_shaped_token_exits_nonzero(self, capsys):
        client = _client(lambda r: httpx.Response(200, json={"access_token": "T", "token_type": None}))

        code = main(env=ENV, input_fn=lambda _: "C", client=client)

        captured = capsys.readouterr()
        assert code != 0
        assert "[ERROR] Token exchange failed: Malformed token response" in captured.err
        assert "[OK]" not in captured.out

    def test_success_prints_token(self, capsys):
        client = _client(lambda r: httpx.Response(200, json={"access_token": "T", "scope": "sites:read"}))

        code = main(env=ENV, input_fn=lambda _: "C", client=client)

        out = capsys.readouterr().out
        assert code == 0
        assert "https://webflow.com/oauth/authorize?" in out
        assert "[OK] Success! Access token obtained" in out
        assert 'WEBFLOW_ACCESS_TOKEN="T"' in out
        assert "- Access Token: T" in out
        assert "- Scope: sites:read" in out

    def test_error_response_exits_nonzero(self, capsys):
        client = _client(lambda r: httpx.Response(200, json={"error": "invalid_grant"}))

        code = main(env=ENV, input_fn=lambda _: "C", client=client)

        captured = capsys.readouterr()
        assert code != 0
        assert "invalid_grant" in captured.err
        assert "Access Token" not in captured.out

    def test_missing_credentials_makes_no_request(self, capsys):
        code = main(env={}, input_fn=lambda _: "C", client=_client(_never_called))

        assert code != 0
        assert "WEBFLOW_CLIENT_ID and WEBFLOW_CLIENT_SECRET are required" in capsys.readouterr().err

    def test_empty_code_makes_no_request(self, capsys):
        code = main(env=ENV, input_fn=lambda _: "", client=_client(_never_called))

        assert code != 0
        assert "No authorization code provided" in capsys.readouterr().err

    def test_connection_error(self, capsys):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        code = main(env=ENV, input_fn=lambda _: "C", client=_client(unreachable))

        assert code != 0
        assert "Error during token exchange: connection refused" in capsys.readouterr().err

    def test_reads_process_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("WEBFLOW_CLIENT_ID", "env-id")
        monkeypatch.setenv("WEBFLOW_CLIENT_SECRET", "env-secret")
        requests = []
        client = _client(lambda r: httpx.Response(200, json={"access_token": "T"}), requests)

        assert main(input_fn=lambda _: "C", client=client) == 0
        assert "client_id=env-id" in requests[0].content.decode()
