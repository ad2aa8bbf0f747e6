from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import GRANT_TYPE, Settings
from app.core.metrics import TOKEN_EXCHANGE_DURATION, TOKEN_EXCHANGES

# ---------------------------------------------------------------------------
# Token Exchanger: back-channel half of the Authorization Code flow.
#
#   POST {auth_base_url}/{environment_id}/as/token
#     Content-Type: application/x-www-form-urlencoded
#     Authorization: Basic base64(client_id:client_secret)
#     grant_type=authorization_code&code=<code>&redirect_uri=<redirect_uri>
#
# The token response is passed through untouched; this client does not
# validate id_token signatures or inspect claims.
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class TokenExchangeError(Exception):
    """The token endpoint could not be reached, redirected, or returned an
    unreadable 2xx body."""


@dataclass(frozen=True, slots=True)
class TokenExchangeResult:
    ok: bool
    status_code: int
    # Parsed JSON on success. On an upstream error: parsed JSON when the
    # body is JSON, otherwise the raw text.
    payload: Any


def basic_auth_header(client_id: str, client_secret: str) -> str:
    credentials = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def build_token_request_body(code: str, redirect_uri: str) -> dict[str, str]:
    return {
        "grant_type": GRANT_TYPE,
        "code": code,
        # Must be byte-identical to the redirect_uri sent to /authorize.
        "redirect_uri": redirect_uri,
    }


def _read_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


async def exchange_code(
    http_client: httpx.AsyncClient, settings: Settings, code: str
) -> TokenExchangeResult:
    """Exchange an authorization code for tokens. Sends exactly one request.

    Raises:
        TokenExchangeError: transport failure (connection refused, timeout,
            ...), a 3xx, or a 2xx response whose body is not JSON.
    """
    headers = {
        "Content-Type": FORM_CONTENT_TYPE,
        "Authorization": basic_auth_header(settings.client_id, settings.client_secret),
    }
    body = build_token_request_body(code, settings.redirect_uri)

    logger.info("token request → %s", settings.token_endpoint)
    start = time.monotonic()
    try:
        response = await http_client.post(
            settings.token_endpoint, headers=headers, data=body
        )
    except httpx.HTTPError as exc:
        TOKEN_EXCHANGES.labels(outcome="transport_error").inc()
        raise TokenExchangeError(
            f"token request to {settings.token_endpoint} failed: {exc!r}"
        ) from exc
    finally:
        TOKEN_EXCHANGE_DURATION.observe(time.monotonic() - start)

    if response.is_success:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            TOKEN_EXCHANGES.labels(outcome="transport_error").inc()
            raise TokenExchangeError(
                f"token endpoint returned {response.status_code} "
                "with a body that is not JSON"
            ) from exc
        TOKEN_EXCHANGES.labels(outcome="success").inc()
        logger.info(
            "token response ← %d  (fields: %s)",
            response.status_code,
            ", ".join(sorted(payload)) if isinstance(payload, dict) else "-",
            extra={"upstream_status": response.status_code, "outcome": "success"},
        )
        return TokenExchangeResult(ok=True, status_code=200, payload=payload)

    # Redirects are not followed, and passing a 3xx through would send the
    # browser a redirect with no Location.
    if 300 <= response.status_code < 400:
        TOKEN_EXCHANGES.labels(outcome="transport_error").inc()
        raise TokenExchangeError(
            f"token endpoint answered with redirect {response.status_code}"
        )

    TOKEN_EXCHANGES.labels(outcome="upstream_error").inc()
    logger.warning(
        "token endpoint rejected the exchange  status=%d",
        response.status_code,
        extra={"upstream_status": response.status_code, "outcome": "upstream_error"},
    )
    return TokenExchangeResult(
        ok=False, status_code=response.status_code, payload=_read_body(response)
    )
