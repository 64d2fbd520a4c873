from http import HTTPStatus

from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt_identity

from common.response import success_response, error_response
from models.user import User


def login_user(data):
    """Login a dashboard user with email and password."""
    user = User.get_by_email(data['email'])
    if not user:
        return error_response("Invalid credentials", HTTPStatus.UNAUTHORIZED)
    if user.password_hash is None:
        current_app.logger.error(f"Login attempt for user {user.id} without a password hash")
        return error_response("Password not set for user", HTTPStatus.INTERNAL_SERVER_ERROR)
    if not user.check_password(data['password']):
        return error_response("Invalid credentials", HTTPStatus.UNAUTHORIZED)
    if not user.is_active:
        return error_response("Account is disabled", HTTPStatus.FORBIDDEN)

    user.update_last_login()
    additional_claims = {"role": user.role.value, "email": user.email}
    token = create_access_token(identity=str(user.id), additional_claims=additional_claims)
    return success_response({
        "token": token,
        "user": {"id": user.id, "email": user.email, "role": user.role.value},
    })


def get_current_user():
    """Get the user behind the current access token."""
    user = User.get_by_id(get_jwt_identity())
    if not user:
        return error_response("User not found", HTTPStatus.NOT_FOUND)
    return success_response(user.serialize())
