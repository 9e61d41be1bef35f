from dataclasses import dataclass, field
from uuid import UUID

from castpress.domain.entities import Admin


@dataclass(frozen=True)
class AuthError:
    code: str
    message: str


@dataclass
class LoginInput:
    username: str
    password: str


@dataclass
class RegisterAdminInput:
    actor: Admin
    username: str
    password: str
    is_super_admin: bool = False


@dataclass
class ChangePasswordInput:
    actor: Admin
    old_password: str
    new_password: str


@dataclass
class DeleteAdminInput:
    actor: Admin
    target_id: UUID


@dataclass
class BootstrapAdminInput:
    username: str | None
    password: str | None


@dataclass
class AuthOutput:
    admin: Admin | None = None
    token: str | None = None
    success: bool = False
    errors: list[AuthError] = field(default_factory=list)

    @property
    def error(self) -> str | None:
        return self.errors[0].message if self.errors else None


@dataclass
class AdminOutput:
    admin: Admin | None = None
    success: bool = False
    errors: list[AuthError] = field(default_factory=list)

    @property
    def error(self) -> str | None:
        return self.errors[0].message if self.errors else None
