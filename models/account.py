"""
Account data models returned by the auth service.

The storefront never stores passwords; it keeps the issued token and the
user record in the Flask session after a successful login.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any


ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthUser:
    """The signed-in user as described by the auth service."""

    id: str
    name: str
    email: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        """Admins are routed to the upload area after login."""
        return self.role == ADMIN_ROLE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthUser":
        """Create from an API record or session dictionary."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a user object, got {type(data).__name__}")
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or "user",
        )


@dataclass(frozen=True)
class LoginResult:
    """Successful response of POST /api/auth/login."""

    token: str
    user: AuthUser
    message: str = ""

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> "LoginResult":
        """
        Create from the login response body.

        Raises:
            ValueError: If the token or user record is missing
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a login response object, got {type(data).__name__}")
        token = data.get("token")
        if not token:
            raise ValueError("Login response has no token")
        if "user" not in data:
            raise ValueError("Login response has no user")
        return cls(
            token=str(token),
            user=AuthUser.from_dict(data["user"]),
            message=data.get("message") or "",
        )
