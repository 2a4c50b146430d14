from pydantic import BaseModel
from typing import Optional


class CurrentUser(BaseModel):
    """Caller identity resolved from the bearer token and the user profile"""
    uid: str
    username: str
    email: Optional[str] = None
    role: str = "member"  # global role: admin | member

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
