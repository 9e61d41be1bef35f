"""
Categories component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from castpress.domain.entities import Category


@dataclass(frozen=True)
class CategoryValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class CreateCategoryInput:
    name: str
    description: str | None = None
    type: str = "both"


@dataclass(frozen=True)
class UpdateCategoryInput:
    category_id: UUID
    name: str | None = None
    description: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class ListCategoriesInput:
    """type filter: podcast and article also match 'both'; None or 'all' lists everything."""

    type: str | None = None


@dataclass(frozen=True)
class CategoryOutput:
    category: Category | None
    errors: list[CategoryValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CategoryListOutput:
    categories: list[Category]
    errors: list[CategoryValidationError] = field(default_factory=list)
    success: bool = True
