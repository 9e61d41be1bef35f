"""
Content component - article and podcast lifecycle.
"""

from .component import (
    WRITABLE_FIELDS,
    normalize_tags,
    run_create,
    run_delete,
    run_get,
    run_get_published_by_slug,
    run_list,
    run_list_published,
    run_set_status,
    run_stats,
    run_update,
    validate_item,
)
from .models import (
    ContentConfig,
    ContentListOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    DeleteOutput,
    GetContentInput,
    ListContentInput,
    SetStatusInput,
    StatsOutput,
    UpdateContentInput,
)
from .ports import ContentRepoPort, MediaCleanupPort, TimePort

__all__ = [
    # Entry points
    "run_create",
    "run_delete",
    "run_get",
    "run_get_published_by_slug",
    "run_list",
    "run_list_published",
    "run_set_status",
    "run_stats",
    "run_update",
    # Helpers
    "WRITABLE_FIELDS",
    "normalize_tags",
    "validate_item",
    # Input models
    "ContentConfig",
    "CreateContentInput",
    "DeleteContentInput",
    "GetContentInput",
    "ListContentInput",
    "SetStatusInput",
    "UpdateContentInput",
    # Output models
    "ContentListOutput",
    "ContentOutput",
    "ContentValidationError",
    "DeleteOutput",
    "StatsOutput",
    # Ports
    "ContentRepoPort",
    "MediaCleanupPort",
    "TimePort",
]
