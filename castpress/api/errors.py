from collections.abc import Sequence
from typing import Any, NoReturn, Protocol

from fastapi import HTTPException, status


class _CodedError(Protocol):
    @property
    def code(self) -> str: ...

    @property
    def message(self) -> str: ...


STATUS_BY_CODE = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "file_too_large": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    "storage_failed": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_errors(errors: Sequence[_CodedError]) -> NoReturn:
    """Raise the HTTPException matching the first component error; anything unmapped is a 400."""
    first = errors[0] if errors else None
    if first is None:
        raise HTTPException(status_code=400, detail="Request failed")

    code = STATUS_BY_CODE.get(first.code, status.HTTP_400_BAD_REQUEST)
    detail: Any = first.message
    if code == status.HTTP_400_BAD_REQUEST and len(errors) > 1:
        detail = [
            {"code": e.code, "message": e.message, "field": getattr(e, "field", None)}
            for e in errors
        ]
    raise HTTPException(status_code=code, detail=detail)
