"""
Categories component - category CRUD with derived slugs.
"""

from .component import run_create, run_delete, run_get, run_list, run_update
from .models import (
    CategoryListOutput,
    CategoryOutput,
    CategoryValidationError,
    CreateCategoryInput,
    ListCategoriesInput,
    UpdateCategoryInput,
)
from .ports import CategoryRepoPort, TimePort

__all__ = [
    # Entry points
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    "run_update",
    # Models
    "CategoryListOutput",
    "CategoryOutput",
    "CategoryValidationError",
    "CreateCategoryInput",
    "ListCategoriesInput",
    "UpdateCategoryInput",
    # Ports
    "CategoryRepoPort",
    "TimePort",
]
