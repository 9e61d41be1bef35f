from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from castpress.adapters.clock import SystemClock
from castpress.adapters.sqlite.repos import SQLiteCategoryRepo
from castpress.api.deps import get_category_repo, get_clock, get_current_admin
from castpress.api.errors import raise_for_errors
from castpress.api.schemas import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    MessageResponse,
)
from castpress.components.categories import (
    CreateCategoryInput,
    ListCategoriesInput,
    UpdateCategoryInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from castpress.domain.entities import Admin

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    category_type: str | None = Query(None, alias="type"),
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
) -> list[CategoryResponse]:
    """List categories, optionally only those usable for one content type."""
    result = run_list(ListCategoriesInput(type=category_type), repo=repo)
    return [CategoryResponse.model_validate(c) for c in result.categories]


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: UUID,
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
) -> CategoryResponse:
    result = run_get(category_id, repo=repo)
    if not result.success or result.category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryResponse.model_validate(result.category)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    req: CategoryCreateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
    clock: SystemClock = Depends(get_clock),
) -> CategoryResponse:
    inp = CreateCategoryInput(name=req.name, description=req.description, type=req.type)
    result = run_create(inp, repo=repo, time=clock)
    if not result.success or result.category is None:
        raise_for_errors(result.errors)
    return CategoryResponse.model_validate(result.category)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: UUID,
    req: CategoryUpdateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
    clock: SystemClock = Depends(get_clock),
) -> CategoryResponse:
    inp = UpdateCategoryInput(
        category_id=category_id, name=req.name, description=req.description, type=req.type
    )
    result = run_update(inp, repo=repo, time=clock)
    if not result.success or result.category is None:
        raise_for_errors(result.errors)
    return CategoryResponse.model_validate(result.category)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: UUID,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
) -> MessageResponse:
    result = run_delete(category_id, repo=repo)
    if not result.success:
        raise_for_errors(result.errors)
    return MessageResponse(message="Category deleted successfully")
