"""
Categories component - podcast/article categories.

Slugs derive from the name. Deleting a category does not touch content
that references it; readers treat unknown category ids as plain strings.
"""

from __future__ import annotations

import logging
from uuid import UUID

from castpress.adapters.clock import SystemClock
from castpress.domain.entities import CATEGORY_TYPES, Category
from castpress.domain.errors import DuplicateValueError
from castpress.domain.sanitize import slugify

from .models import (
    CategoryListOutput,
    CategoryOutput,
    CategoryValidationError,
    CreateCategoryInput,
    ListCategoriesInput,
    UpdateCategoryInput,
)
from .ports import CategoryRepoPort, TimePort

logger = logging.getLogger(__name__)

_NOT_FOUND = CategoryValidationError(code="not_found", message="Category not found")
_NAME_TAKEN = CategoryValidationError(
    code="name_taken", message="Category already exists", field="name"
)


def _validate(
    name: str,
    category_type: str,
    repo: CategoryRepoPort,
    current: Category | None = None,
) -> list[CategoryValidationError]:
    errors: list[CategoryValidationError] = []
    if not name:
        errors.append(
            CategoryValidationError(code="name_required", message="Name is required", field="name")
        )
    elif not slugify(name):
        errors.append(
            CategoryValidationError(
                code="name_invalid", message="Name must contain letters or digits", field="name"
            )
        )
    else:
        existing = repo.get_by_name(name)
        if existing is not None and (current is None or existing.id != current.id):
            errors.append(_NAME_TAKEN)

    if category_type not in CATEGORY_TYPES:
        errors.append(
            CategoryValidationError(
                code="invalid_type",
                message=f"Type must be one of: {', '.join(CATEGORY_TYPES)}",
                field="type",
            )
        )
    return errors


def run_create(
    inp: CreateCategoryInput,
    *,
    repo: CategoryRepoPort,
    time: TimePort | None = None,
) -> CategoryOutput:
    name = (inp.name or "").strip()
    errors = _validate(name, inp.type, repo)
    if errors:
        return CategoryOutput(category=None, errors=errors, success=False)

    now = (time or SystemClock()).now_utc()
    category = Category(
        name=name,
        slug=slugify(name),
        description=(inp.description or "").strip() or None,
        type=inp.type,  # type: ignore[arg-type]
        created_at=now,
        updated_at=now,
    )
    try:
        saved = repo.save(category)
    except DuplicateValueError:
        return CategoryOutput(category=None, errors=[_NAME_TAKEN], success=False)
    logger.info("Created category %s (%s)", saved.slug, saved.id)
    return CategoryOutput(category=saved)


def run_list(inp: ListCategoriesInput, *, repo: CategoryRepoPort) -> CategoryListOutput:
    category_type = inp.type if inp.type in ("podcast", "article", "both") else None
    return CategoryListOutput(categories=repo.list_by_type(category_type))


def run_get(category_id: UUID, *, repo: CategoryRepoPort) -> CategoryOutput:
    category = repo.get_by_id(category_id)
    if category is None:
        return CategoryOutput(category=None, errors=[_NOT_FOUND], success=False)
    return CategoryOutput(category=category)


def run_update(
    inp: UpdateCategoryInput,
    *,
    repo: CategoryRepoPort,
    time: TimePort | None = None,
) -> CategoryOutput:
    """Update name/description/type; a new name re-derives the slug."""
    current = repo.get_by_id(inp.category_id)
    if current is None:
        return CategoryOutput(category=None, errors=[_NOT_FOUND], success=False)

    name = inp.name.strip() if inp.name is not None else current.name
    category_type = inp.type if inp.type is not None else current.type
    errors = _validate(name, category_type, repo, current)
    if errors:
        return CategoryOutput(category=None, errors=errors, success=False)

    description = current.description
    if inp.description is not None:
        description = inp.description.strip() or None

    updated = current.model_copy(
        update={
            "name": name,
            "slug": slugify(name),
            "description": description,
            "type": category_type,
            "updated_at": (time or SystemClock()).now_utc(),
        }
    )
    try:
        return CategoryOutput(category=repo.save(updated))
    except DuplicateValueError:
        return CategoryOutput(category=None, errors=[_NAME_TAKEN], success=False)


def run_delete(category_id: UUID, *, repo: CategoryRepoPort) -> CategoryOutput:
    """Delete without cascading to content."""
    category = repo.get_by_id(category_id)
    if category is None:
        return CategoryOutput(category=None, errors=[_NOT_FOUND], success=False)
    repo.delete(category_id)
    logger.info("Deleted category %s", category_id)
    return CategoryOutput(category=category)
