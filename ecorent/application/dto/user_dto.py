from typing import Optional

from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """DTO for the caller identity carried by the bearer token"""
    id: str
    name: Optional[str] = None
    surname: Optional[str] = None
