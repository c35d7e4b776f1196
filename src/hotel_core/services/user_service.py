import logging
from typing import List, Optional
from hotel_core.models.users import User, UserProfile, UserRole
from hotel_core.repository.user_repo import UserRepository
from hotel_core.utils.custom_exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    NotFoundException,
)
from hotel_core.utils.jwt_service import create_jwt
import bcrypt
import uuid

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    def get_user_by_id(self, user_id: str) -> User:
        user = self.user_repo.get_by_id(user_id=user_id)
        if user is None:
            raise NotFoundException(
                resource="user", identifier=user_id, status_code=404
            )
        return user

    def list_users(self) -> List[UserProfile]:
        users = self.user_repo.list_users()
        return [u.profile() for u in sorted(users, key=lambda u: u.email.lower())]

    def update_user_role(self, user_id: str, role: UserRole) -> UserProfile:
        user = self.user_repo.update_role(user_id, role)
        logger.info(f"User {user_id} is now {role.value}")
        return user.profile()

    def login(self, email: str, password: str) -> str:
        user = self.user_repo.get_by_mail(mail=email)
        # same error for unknown email and wrong password
        if user is None or not user.password:
            raise InvalidCredentials("Invalid email or password")

        if not bcrypt.checkpw(
            password.encode("utf-8"),
            user.password.encode("utf-8"),
        ):
            raise InvalidCredentials("Invalid email or password")

        return create_jwt(user.user_id, user.email, user.role.value)

    def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
    ) -> str:
        if self.user_repo.get_by_mail(mail=email):
            raise DuplicateEmail("email is already in use")

        user_id = str(uuid.uuid4())
        self.user_repo.add_user(
            User(
                user_id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                password=self._hash_password(password),
                role=UserRole.GUEST,
            )
        )
        return create_jwt(user_id, email, UserRole.GUEST.value)

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
