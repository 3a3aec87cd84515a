# lawbook/schemas.py
from typing import Optional

from pydantic import BaseModel

from lawbook.models.user import UserRole


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    email_verified: bool

    class Config:
        from_attributes = True


class CurrentUserResponse(BaseModel):
    authenticated: bool
    user: Optional[UserResponse] = None
