"""
Client configuration — backend location, request timeout and identity provider settings.
"""

import json
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_ISSUER = "http://localhost:8181/realms/fitness-oauth2"
CONFIG_FILE = Path.home() / ".fitness" / "config.json"


def _log_in_again(provider: Any) -> None:
    provider.log_out()
    provider.log_in()


class AuthConfig(BaseModel):
    """OAuth2 authorization-code + PKCE client settings."""
    client_id: str = "oauth2-pkce-client"
    authorization_endpoint: str = f"{DEFAULT_ISSUER}/protocol/openid-connect/auth"
    token_endpoint: str = f"{DEFAULT_ISSUER}/protocol/openid-connect/token"
    logout_endpoint: Optional[str] = f"{DEFAULT_ISSUER}/protocol/openid-connect/logout"
    redirect_uri: str = "http://localhost:5173"
    scope: str = "openid profile email offline_access"
    # Invoked with the provider when the refresh token is rejected;
    # the default drops the tokens and starts a new login
    on_refresh_token_expire: Callable[[Any], None] = _log_in_again

    model_config = {"arbitrary_types_allowed": True}


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    auth: AuthConfig = AuthConfig()


def load_config(path: Path = CONFIG_FILE) -> dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def save_config(cfg: dict[str, Any], path: Path = CONFIG_FILE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


def client_config_from(cfg: dict[str, Any]) -> ClientConfig:
    """Build a ClientConfig from a saved CLI config, ignoring token fields."""
    auth_fields = {k: v for k, v in cfg.get("auth", {}).items() if k in AuthConfig.model_fields and k != "on_refresh_token_expire"}
    return ClientConfig(
        base_url=cfg.get("base_url", DEFAULT_BASE_URL),
        timeout_s=cfg.get("timeout_s", DEFAULT_TIMEOUT_S),
        auth=AuthConfig(**auth_fields),
    )
