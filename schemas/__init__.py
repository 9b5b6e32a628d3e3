"""Request schemas validated at the HTTP boundary."""

from .auth import (  # noqa: F401
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
    check_password_strength,
)
