"""Verified caller identity."""

from pydantic import BaseModel


class TenantContext(BaseModel):
    """Identity of an authenticated caller and the company it acts for."""

    user_id: str
    company_id: str
    privilege: str = "user"
    user_name: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.user_name or self.email or "Unknown User"
