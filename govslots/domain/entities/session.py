from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    access_token: str
    user_id: int  # gov node (office) id of the logged-in staff account
    token_type: str = "bearer"
    username: str | None = None
    role: str | None = None

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"
