from .dto import AuthSessionOut, LoginIn, LogoutIn, RefreshIn, RegisterIn, TokenPairOut
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthSessionOut",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "RegisterIn",
    "TokenPairOut",
]
