from datetime import timedelta
from jose import jwt

from hotel_core.utils.config import get_settings
from hotel_core.utils.dates import utc_now

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


def create_jwt(user_id: str, email: str, role: str):
    settings = get_settings()
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET environment variable is not set")

    payload = {
        "user_id": user_id,
        "email": email,
        "role": role,
        "exp": utc_now() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
