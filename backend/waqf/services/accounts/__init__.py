"""Account self-service and administration use cases."""

from .dto import ChangePasswordIn, ForgotPasswordIn, ProfileUpdateIn, ResetPasswordIn
from .service import AccountService

__all__ = [
    "AccountService",
    "ChangePasswordIn",
    "ForgotPasswordIn",
    "ProfileUpdateIn",
    "ResetPasswordIn",
]
