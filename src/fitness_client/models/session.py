"""
Session model — the client's current authentication state.
"""

from typing import Any, Optional

from pydantic import BaseModel, model_validator


class Session(BaseModel):
    token: Optional[str] = None
    user: Optional[dict[str, Any]] = None
    auth_ready: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> "Session":
        if (self.user is None) != (self.token is None):
            raise ValueError("user must be present exactly when token is present")
        if self.auth_ready and self.token is None:
            raise ValueError("auth_ready requires a token")
        return self

    @property
    def authenticated(self) -> bool:
        return self.auth_ready and self.token is not None

    @property
    def user_id(self) -> Optional[str]:
        if self.user is None:
            return None
        return self.user.get("sub")

    @property
    def display_name(self) -> str:
        if self.user is None:
            return "anonymous"
        for claim in ("preferred_username", "email", "name", "sub"):
            if self.user.get(claim):
                return str(self.user[claim])
        return "unknown"
