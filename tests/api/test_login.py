from __future__ import annotations

import html
import re
from urllib.parse import parse_qsl, urlsplit

from fastapi.testclient import TestClient

from app.core.config import Settings
from tests.conftest import StubAuthorizationServer

_HREF = re.compile(r'<a href="([^"]+)">Login</a>')


def _login_href(client: TestClient) -> str:
    resp = client.get("/")
    assert resp.status_code == 200
    match = _HREF.search(resp.text)
    assert match is not None, resp.text
    return html.unescape(match.group(1))


def test_index_renders_login_link(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert ">Login</a>" in resp.text


def test_login_link_points_at_authorize_endpoint(
    client: TestClient, settings: Settings
) -> None:
    parts = urlsplit(_login_href(client))
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == settings.authorize_endpoint


def test_login_link_carries_configured_params(
    client: TestClient, settings: Settings
) -> None:
    query = dict(parse_qsl(urlsplit(_login_href(client)).query))
    assert query == {
        "redirect_uri": settings.redirect_uri,
        "client_id": settings.client_id,
        "scope": settings.scopes,
        "response_type": "code",
    }


def test_index_makes_no_outbound_request(
    client: TestClient, auth_server: StubAuthorizationServer
) -> None:
    client.get("/")
    assert auth_server.requests == []
