import logging

from castpress.domain.entities import Admin
from castpress.domain.errors import DuplicateValueError

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

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_MINUTES = 240
DEFAULT_PASSWORD_MIN_LENGTH = 8

_INVALID_CREDENTIALS = AuthError(code="invalid_credentials", message="Invalid credentials")
_FORBIDDEN = AuthError(code="forbidden", message="Forbidden")
_NOT_FOUND = AuthError(code="not_found", message="Admin not found")
_USERNAME_TAKEN = AuthError(code="username_taken", message="Admin already exists")


def _password_errors(password: str, min_length: int) -> list[AuthError]:
    if len(password) < min_length:
        return [
            AuthError(
                code="password_too_short",
                message=f"Password must be at least {min_length} characters",
            )
        ]
    return []


def run_login(
    inp: LoginInput,
    admin_repo: AdminRepoPort,
    auth_adapter: AuthAdapterPort,
    ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
) -> AuthOutput:
    admin = admin_repo.get_by_username(inp.username.strip())
    if not admin or not auth_adapter.verify_password(inp.password, admin.password_hash):
        return AuthOutput(errors=[_INVALID_CREDENTIALS])

    token = auth_adapter.create_token(
        {
            "sub": str(admin.id),
            "username": admin.username,
            "is_super_admin": admin.is_super_admin,
        },
        ttl_minutes,
    )
    logger.info("Admin %s logged in", admin.username)
    return AuthOutput(admin=admin, token=token, success=True)


def run_register(
    inp: RegisterAdminInput,
    admin_repo: AdminRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> AdminOutput:
    if not inp.actor.is_super_admin:
        return AdminOutput(errors=[_FORBIDDEN])

    username = inp.username.strip()
    if not username:
        return AdminOutput(
            errors=[AuthError(code="username_required", message="Username is required")]
        )
    if admin_repo.get_by_username(username):
        return AdminOutput(errors=[_USERNAME_TAKEN])

    errors = _password_errors(inp.password, password_min_length)
    if errors:
        return AdminOutput(errors=errors)

    admin = Admin(
        username=username,
        password_hash=auth_adapter.hash_password(inp.password),
        is_super_admin=inp.is_super_admin,
        created_at=time.now_utc(),
    )
    try:
        admin_repo.save(admin)
    except DuplicateValueError:
        return AdminOutput(errors=[_USERNAME_TAKEN])
    logger.info("Admin %s registered by %s", admin.username, inp.actor.username)
    return AdminOutput(admin=admin, success=True)


def run_change_password(
    inp: ChangePasswordInput,
    admin_repo: AdminRepoPort,
    auth_adapter: AuthAdapterPort,
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> AdminOutput:
    admin = admin_repo.get_by_id(inp.actor.id)
    if not admin:
        return AdminOutput(errors=[_NOT_FOUND])

    if not auth_adapter.verify_password(inp.old_password, admin.password_hash):
        return AdminOutput(
            errors=[AuthError(code="wrong_password", message="Old password is incorrect")]
        )

    errors = _password_errors(inp.new_password, password_min_length)
    if errors:
        return AdminOutput(errors=errors)

    updated = admin.model_copy(
        update={"password_hash": auth_adapter.hash_password(inp.new_password)}
    )
    admin_repo.save(updated)
    return AdminOutput(admin=updated, success=True)


def run_delete_admin(inp: DeleteAdminInput, admin_repo: AdminRepoPort) -> AdminOutput:
    if not inp.actor.is_super_admin:
        return AdminOutput(errors=[_FORBIDDEN])

    if inp.target_id == inp.actor.id:
        return AdminOutput(
            errors=[AuthError(code="cannot_delete_self", message="Cannot delete yourself")]
        )

    target = admin_repo.get_by_id(inp.target_id)
    if not target:
        return AdminOutput(errors=[_NOT_FOUND])

    admin_repo.delete(target.id)
    logger.info("Admin %s deleted by %s", target.username, inp.actor.username)
    return AdminOutput(admin=target, success=True)


def run_bootstrap_admin(
    inp: BootstrapAdminInput,
    admin_repo: AdminRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
) -> AdminOutput:
    """
    Create the first super admin from configured credentials.

    No-op (success=False, no errors) when admins already exist or
    credentials are not configured.
    """
    if admin_repo.count() > 0:
        return AdminOutput()

    if not inp.username or not inp.password:
        logger.warning("No admins exist and no bootstrap credentials are configured")
        return AdminOutput()

    admin = Admin(
        username=inp.username.strip(),
        password_hash=auth_adapter.hash_password(inp.password),
        is_super_admin=True,
        created_at=time.now_utc(),
    )
    admin_repo.save(admin)
    logger.info("Bootstrapped super admin %s", admin.username)
    return AdminOutput(admin=admin, success=True)
