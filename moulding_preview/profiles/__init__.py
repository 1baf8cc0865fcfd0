"""Profile records: model, schema validation, directory store, contour adapter."""

from moulding_preview.profiles.model import (
    ArcCommand,
    ContourCommand,
    Dimensions,
    LineCommand,
    ProfileDefinition,
)
from moulding_preview.profiles.store import (
    ProfileNotFoundError,
    get_profile,
    list_profiles,
    load_profile,
    save_profile,
)
from moulding_preview.profiles.validator import (
    ProfileValidationError,
    ValidationIssue,
    ValidationReport,
    validate_profile_data,
)

__all__ = [
    "ArcCommand",
    "ContourCommand",
    "Dimensions",
    "LineCommand",
    "ProfileDefinition",
    "ProfileNotFoundError",
    "get_profile",
    "list_profiles",
    "load_profile",
    "save_profile",
    "ProfileValidationError",
    "ValidationIssue",
    "ValidationReport",
    "validate_profile_data",
]
