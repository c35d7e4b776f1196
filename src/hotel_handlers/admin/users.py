import logging
from pydantic import ValidationError

from hotel_core.models.users import UserRole
from hotel_core.schemas.users import UpdateUserRoleRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_user_service

logger = logging.getLogger(__name__)

table = get_table()
user_service = build_user_service(table)


def list_users(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    try:
        users = user_service.list_users()
        return send_custom_response(
            200,
            "Users retrieved successfully",
            {"count": len(users), "users": users},
        )
    except Exception:
        logger.exception("Unhandled error listing users")
        return send_custom_response(500, "Internal server error")


def update_user_role(event, context):
    """Change a user's role. The new role applies from their next login.

    Only a superuser may grant the superuser role or change a superuser.
    """
    try:
        caller_id, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    user_id = (event.get("pathParameters") or {}).get("user_id")
    if not user_id:
        return send_custom_response(400, "user_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateUserRoleRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        if role != UserRole.SUPERUSER:
            target = user_service.get_user_by_id(user_id)
            if UserRole.SUPERUSER in (request_body.role, target.role):
                return send_custom_response(403, "Only a superuser can manage superusers")

        user = user_service.update_user_role(user_id, request_body.role)
        logger.info(f"{caller_id} set role of {user_id} to {request_body.role.value}")
        return send_custom_response(200, "User role updated successfully", user)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error updating role of user {user_id}")
        return send_custom_response(500, "Internal server error")
