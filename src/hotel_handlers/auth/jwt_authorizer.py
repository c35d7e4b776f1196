import logging
from typing import Dict, List
import jwt

from hotel_core.models.users import UserRole
from hotel_core.utils.auth_context import ADMIN_ROLES
from hotel_core.utils.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()
if not settings.jwt_secret:
    raise RuntimeError("JWT_SECRET environment variable is not set")


class AuthorizationFailed(Exception):
    pass


def _stage_arn(method_arn: str) -> str:
    # arn:aws:execute-api:<region>:<account>:<api>/<stage>/<method>/<path>
    api, stage = method_arn.split("/")[:2]
    return f"{api}/{stage}"


def _statements(stage_arn: str, role: UserRole) -> List[Dict[str, str]]:
    # the policy is cached per token, so it covers the whole stage
    statements = [{"Action": "execute-api:Invoke", "Effect": "Allow", "Resource": f"{stage_arn}/*/*"}]
    if role not in ADMIN_ROLES:
        statements.append(
            {"Action": "execute-api:Invoke", "Effect": "Deny", "Resource": f"{stage_arn}/*/admin/*"}
        )
    return statements


def _deny(stage_arn: str):
    return {
        "principalId": "unauthorized",
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [{"Action": "execute-api:Invoke", "Effect": "Deny", "Resource": f"{stage_arn}/*/*"}],
        },
    }


def _bearer_token(headers: Dict[str, str]) -> str:
    header = headers.get("Authorization") or headers.get("authorization")
    if not header:
        raise AuthorizationFailed("missing Authorization header")
    scheme, _, token = header.strip().partition(" ")
    if not token:
        # bare token without a scheme
        return scheme
    if scheme.lower() != "bearer":
        raise AuthorizationFailed(f"unsupported authorization scheme {scheme}")
    return token.strip()


def _caller(token: str) -> Dict[str, str]:
    """Decode the token and return the authorizer context handed to handlers."""
    decoded = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["exp"]},
    )

    user_id = decoded.get("user_id")
    if not user_id:
        raise AuthorizationFailed("token has no user_id")

    try:
        role = UserRole(str(decoded.get("role", UserRole.GUEST.value)).lower())
    except ValueError:
        raise AuthorizationFailed(f"unknown role {decoded.get('role')!r}")

    # API Gateway only passes string values through the authorizer context
    return {"user_id": str(user_id), "email": str(decoded.get("email", "")), "role": role.value}


def lambda_handler(event, context):
    stage_arn = _stage_arn(event["methodArn"])
    try:
        caller = _caller(_bearer_token(event.get("headers") or {}))
    except jwt.ExpiredSignatureError:
        logger.warning("Authorization failed: token expired")
        return _deny(stage_arn)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Authorization failed: invalid token: {e}")
        return _deny(stage_arn)
    except AuthorizationFailed as e:
        logger.warning(f"Authorization failed: {e}")
        return _deny(stage_arn)
    except Exception:
        logger.exception("Authorization failed: unexpected error")
        return _deny(stage_arn)

    return {
        "principalId": caller["user_id"],
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": _statements(stage_arn, UserRole(caller["role"])),
        },
        "context": caller,
    }
