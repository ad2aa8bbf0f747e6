from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

# Fixed parts of the authorization server's URL layout:
#   {auth_base_url}/{environment_id}/as/authorize
#   {auth_base_url}/{environment_id}/as/token
AUTHORIZE_PATH = "/as/authorize"
TOKEN_PATH = "/as/token"
CALLBACK_PATH = "/callback"

GRANT_TYPE = "authorization_code"
RESPONSE_TYPE = "code"


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _require(name: str) -> str:
    value = _getenv(name, "")
    if not value:
        raise ValueError(f"{name} is required")
    return value


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    auth_base_url: str
    environment_id: str
    client_id: str
    client_secret: str = field(repr=False)
    app_base_url: str = "http://localhost"
    scopes: str = "openid"
    token_request_timeout: float = 10.0

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def app_base_origin(self) -> str:
        return f"{self.app_base_url}:{self.port}"

    @property
    def redirect_uri(self) -> str:
        # Sent in both the authorize and the token request; the authorization
        # server rejects the exchange unless the two match byte for byte.
        return self.app_base_origin + CALLBACK_PATH

    @property
    def authorize_endpoint(self) -> str:
        return f"{self.auth_base_url}/{self.environment_id}{AUTHORIZE_PATH}"

    @property
    def token_endpoint(self) -> str:
        return f"{self.auth_base_url}/{self.environment_id}{TOKEN_PATH}"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("LOG_JSON", "false").lower()
    port_raw = _getenv("PORT", "3000")
    timeout_raw = _getenv("TOKEN_REQUEST_TIMEOUT", "10")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        token_request_timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"TOKEN_REQUEST_TIMEOUT must be a number of seconds (got {timeout_raw!r})"
        ) from None
    if token_request_timeout <= 0:
        raise ValueError(
            f"TOKEN_REQUEST_TIMEOUT must be positive (got {timeout_raw!r})"
        )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json_raw in ("1", "true", "yes"),
        port=port,
        auth_base_url=_require("PINGONE_AUTH_BASE_URL").rstrip("/"),
        environment_id=_require("PINGONE_ENVIRONMENT_ID").strip("/"),
        client_id=_require("PINGONE_CLIENT_ID"),
        client_secret=_require("PINGONE_CLIENT_SECRET"),
        app_base_url=_getenv("APP_BASE_URL", "http://localhost").rstrip("/"),
        scopes=_getenv("OAUTH_SCOPES", "openid") or "openid",
        token_request_timeout=token_request_timeout,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
