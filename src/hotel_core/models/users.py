from enum import Enum
from dataclasses import dataclass
from typing import Optional


class UserRole(str, Enum):
    GUEST = "guest"
    ADMIN = "admin"
    SUPERUSER = "superuser"


@dataclass
class User:
    user_id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.GUEST
    phone: Optional[str] = None
    password: Optional[str] = None

    def profile(self) -> "UserProfile":
        return UserProfile(
            user_id=self.user_id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            role=self.role,
            phone=self.phone,
        )


@dataclass
class UserProfile:
    """A user as admins see it, without the password hash."""

    user_id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    phone: Optional[str] = None
