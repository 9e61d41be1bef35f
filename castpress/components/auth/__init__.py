"""
Auth component - Admin authentication and administration.

Handles login, admin registration, password changes and bootstrap.
"""

from .component import (
    run_bootstrap_admin,
    run_change_password,
    run_delete_admin,
    run_login,
    run_register,
)
from .models import (
    AdminOutput,
    AuthError,
    AuthOutput,
    BootstrapAdminInput,
    ChangePasswordInput,
    DeleteAdminInput,
    LoginInput,
    RegisterAdminInput,
)
from .ports import AdminRepoPort, AuthAdapterPort, TimePort

__all__ = [
    # Entry points
    "run_bootstrap_admin",
    "run_change_password",
    "run_delete_admin",
    "run_login",
    "run_register",
    # Models
    "AdminOutput",
    "AuthError",
    "AuthOutput",
    "BootstrapAdminInput",
    "ChangePasswordInput",
    "DeleteAdminInput",
    "LoginInput",
    "RegisterAdminInput",
    # Ports
    "AdminRepoPort",
    "AuthAdapterPort",
    "TimePort",
]
