"""User self-service and administration endpoints."""

from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import current_user

from waqf.api.deps import get_account_service, json_body, json_response, require_auth, require_roles, timing
from waqf.models.user import UserRole
from waqf.schemas import ChangePasswordSchema, MessageSchema, ProfileUpdateSchema, UserSchema
from waqf.services.accounts import ChangePasswordIn, ProfileUpdateIn

bp = Blueprint("users", __name__)

profile_schema = ProfileUpdateSchema()
change_password_schema = ChangePasswordSchema()
user_schema = UserSchema()
message_schema = MessageSchema()


@bp.patch("/me")
@require_auth
@timing
def update_me():
    """Partially update the caller's profile."""

    changes = profile_schema.load(json_body())
    result = get_account_service().update_profile(ProfileUpdateIn(user_id=current_user.id, changes=changes))
    return json_response(user_schema.dump(result))


@bp.post("/me/change-password")
@require_auth
@timing
def change_password():
    """Replace the caller's password; other sessions are closed."""

    data = change_password_schema.load(json_body())
    result = get_account_service().change_password(ChangePasswordIn(user_id=current_user.id, **data))
    return json_response(message_schema.dump(result))


@bp.delete("/<string:user_id>")
@require_roles(UserRole.ADMIN)
@timing
def deactivate(user_id: str):
    """Deactivate an account (ADMIN only)."""

    result = get_account_service().deactivate_user(user_id)
    return json_response(message_schema.dump(result))
