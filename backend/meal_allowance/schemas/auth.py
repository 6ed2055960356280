from __future__ import annotations

from pydantic import BaseModel


class AuthContext(BaseModel):
    """Caller capabilities supplied by the fronting auth layer via request headers."""

    user_id: str | None = None
    role: str = "staff"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
