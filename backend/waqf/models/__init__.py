from waqf.models.password_reset_token import PasswordResetToken
from waqf.models.refresh_token import RefreshToken
from waqf.models.user import User, UserRole

__all__ = [
    "PasswordResetToken",
    "RefreshToken",
    "User",
    "UserRole",
]
