from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from app.api.dependencies import get_settings
from app.core.config import Settings
from app.services.authorization_request import build_authorize_url, render_login_link

logger = logging.getLogger(__name__)

router = APIRouter(tags=["login"])


# ============================== GET / =====================================
# Renders the authorization request as a plain "Login" link. Following it
# takes the user agent to the authorization server, which authenticates the
# user and redirects back to /callback with ?code=...


@router.get("/", response_class=HTMLResponse)
def index(settings: Annotated[Settings, Depends(get_settings)]) -> HTMLResponse:
    authorize_url = build_authorize_url(settings)
    logger.debug("login link rendered  authorize_endpoint=%s", settings.authorize_endpoint)
    return HTMLResponse(render_login_link(authorize_url), status_code=200)
