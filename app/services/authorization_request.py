from __future__ import annotations

import html
from urllib.parse import urlencode

from app.core.config import RESPONSE_TYPE, Settings

# Builds the front-channel half of the Authorization Code flow: the URL the
# user agent is sent to at the authorization server's /authorize endpoint.
# Nothing here touches the network; the browser makes that request.


def authorize_params(settings: Settings) -> dict[str, str]:
    # Order matches what the authorization server documents; dicts keep it.
    return {
        "redirect_uri": settings.redirect_uri,
        "client_id": settings.client_id,
        "scope": settings.scopes,
        "response_type": RESPONSE_TYPE,
    }


def build_authorize_url(settings: Settings) -> str:
    """Return the authorize endpoint URL with the authorization request query.

    e.g. https://auth.pingone.com/<env-id>/as/authorize
         ?redirect_uri=http%3A%2F%2Flocalhost%3A3000%2Fcallback
         &client_id=<client-id>&scope=openid&response_type=code
    """
    return f"{settings.authorize_endpoint}?{urlencode(authorize_params(settings))}"


def render_login_link(authorize_url: str) -> str:
    return f'<a href="{html.escape(authorize_url, quote=True)}">Login</a>'
