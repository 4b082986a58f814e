"""Admin authentication schemas"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Admin login request"""
    password: str


class SessionResponse(BaseModel):
    authenticated: bool
