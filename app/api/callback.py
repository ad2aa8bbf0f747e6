from __future__ import annotations

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel

from app.api.dependencies import get_http_client, get_settings
from app.core.config import CALLBACK_PATH, Settings
from app.core.metrics import MISSING_AUTHORIZATION_CODE
from app.services.token_exchange import TokenExchangeError, exchange_code

# ---------------------------------------------------------------------------
# GET /callback: the redirect_uri registered with the authorization server.
#
# Not meant to be navigated to by hand. After the user authenticates, the
# authorization server redirects here with ?code=<random-chars>; we trade the
# code for tokens on the back channel and echo the token response as JSON.
# Every failure is terminal for the request: the user restarts from "/".
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

router = APIRouter(tags=["callback"])

RETURN_HOME_HTML = "<a href='/'>Return home</a>"


class ExchangeFailure(BaseModel):
    error: str  # exception type, e.g. "ConnectError"
    message: str


@router.get(CALLBACK_PATH)
async def callback(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    code: str | None = Query(None),
    error: str | None = Query(None),
    error_description: str | None = Query(None),
) -> Response:
    # --- Guard: authorization code must be present ---------------------------
    # Nothing below runs without a code; the exchange is never attempted.
    if not code:
        MISSING_AUTHORIZATION_CODE.inc()
        if error:
            # Authorization server reported a failure (RFC 6749 §4.1.2.1)
            logger.error(
                "authorization server returned error=%s description=%s",
                error,
                error_description or "-",
            )
        # Full URL is safe to log here: there is no code in it.
        logger.error(
            "Expected authorization code in query parameters.  url=%s",
            request.url,
        )
        return HTMLResponse(RETURN_HOME_HTML, status_code=status.HTTP_404_NOT_FOUND)

    # --- Back-channel exchange -----------------------------------------------
    try:
        result = await exchange_code(http_client, settings, code)
    except TokenExchangeError as exc:
        logger.exception("token exchange failed")
        failure = ExchangeFailure(
            error=type(exc.__cause__ or exc).__name__, message=str(exc)
        )
        return JSONResponse(
            failure.model_dump(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if result.ok:
        # Demo behaviour: forward the token endpoint's JSON as-is.
        return JSONResponse(result.payload, status_code=status.HTTP_200_OK)

    # Upstream rejected the exchange: pass its status through with the
    # already-read body.
    if isinstance(result.payload, str):
        return PlainTextResponse(result.payload, status_code=result.status_code)
    return JSONResponse(result.payload, status_code=result.status_code)
