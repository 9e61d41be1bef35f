from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.adapters.clock import SystemClock
from castpress.adapters.sqlite.repos import SQLiteAdminRepo
from castpress.api.deps import (
    get_admin_repo,
    get_auth_adapter,
    get_clock,
    get_current_admin,
    get_rate_limiter,
    get_rules,
    get_transitioner,
    require_super_admin,
)
from castpress.api.errors import raise_for_errors
from castpress.api.schemas import (
    AdminResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TickResponse,
    Token,
)
from castpress.app_shell.rate_limit import RateLimiter
from castpress.components.auth import (
    ChangePasswordInput,
    DeleteAdminInput,
    LoginInput,
    RegisterAdminInput,
    run_change_password,
    run_delete_admin,
    run_login,
    run_register,
)
from castpress.components.scheduler import PublicationTransitioner, run_tick
from castpress.domain.entities import Admin
from castpress.rules.models import Rules

router = APIRouter()


async def _read_credentials(request: Request) -> LoginRequest:
    """Credentials from a JSON body or an OAuth2 password form."""
    try:
        if request.headers.get("content-type", "").startswith("application/json"):
            body: Any = await request.json()
        else:
            body = dict(await request.form())
        return LoginRequest.model_validate(body)
    except (ValidationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required",
        ) from None


@router.post("/login", response_model=Token)
async def login_for_access_token(
    request: Request,
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    limiter: RateLimiter = Depends(get_rate_limiter),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate an admin and return a bearer token."""
    client_ip = request.client.host if request.client else "unknown"
    if not limiter.check_login(client_ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts, try again later",
        )

    creds = await _read_credentials(request)
    result = run_login(
        LoginInput(username=creds.username, password=creds.password),
        admin_repo,
        auth_adapter,
        ttl_minutes=rules.auth.token_ttl_minutes,
    )
    if not result.success or result.token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error or "Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(token=result.token, access_token=result.token)


@router.get("/me", response_model=AdminResponse)
def read_admin_me(current_admin: Admin = Depends(get_current_admin)) -> AdminResponse:
    return AdminResponse.model_validate(current_admin)


@router.post("/register", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def register_admin(
    req: RegisterRequest,
    current_admin: Admin = Depends(require_super_admin),
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> AdminResponse:
    """Register another admin (super admins only)."""
    inp = RegisterAdminInput(
        actor=current_admin,
        username=req.username,
        password=req.password,
        is_super_admin=req.is_super_admin,
    )
    result = run_register(
        inp, admin_repo, auth_adapter, clock, password_min_length=rules.auth.password_min_length
    )
    if not result.success or result.admin is None:
        raise_for_errors(result.errors)
    return AdminResponse.model_validate(result.admin)


@router.patch("/change-password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    current_admin: Admin = Depends(get_current_admin),
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
) -> MessageResponse:
    inp = ChangePasswordInput(
        actor=current_admin, old_password=req.old_password, new_password=req.new_password
    )
    result = run_change_password(
        inp, admin_repo, auth_adapter, password_min_length=rules.auth.password_min_length
    )
    if not result.success:
        raise_for_errors(result.errors)
    return MessageResponse(message="Password changed successfully")


@router.delete("/delete/{admin_id}", response_model=MessageResponse)
def delete_admin(
    admin_id: UUID,
    current_admin: Admin = Depends(require_super_admin),
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
) -> MessageResponse:
    result = run_delete_admin(DeleteAdminInput(actor=current_admin, target_id=admin_id), admin_repo)
    if not result.success:
        raise_for_errors(result.errors)
    return MessageResponse(message="Admin deleted successfully")


@router.post("/scheduler/run", response_model=TickResponse)
def run_scheduler_tick(
    current_admin: Admin = Depends(get_current_admin),
    transitioner: PublicationTransitioner = Depends(get_transitioner),
) -> TickResponse:
    """Run one publication tick now instead of waiting for the next interval."""
    return TickResponse(**run_tick(transitioner).to_dict())
