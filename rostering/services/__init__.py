"""Services for scheduling logic."""

from .conflicts import find_conflicts, time_to_minutes, windows_overlap
from .eligibility import (
    ValidationResult,
    duplicate_fixed_roles,
    find_fixed_role,
    has_capability,
    has_restriction,
    require_active_worker,
    validate_assignment,
)
from .lifecycle import ScheduleLifecycleManager
from .substitutions import SubstitutionWorkflow

__all__ = [
    "find_conflicts",
    "time_to_minutes",
    "windows_overlap",
    "ValidationResult",
    "duplicate_fixed_roles",
    "find_fixed_role",
    "has_capability",
    "has_restriction",
    "require_active_worker",
    "validate_assignment",
    "ScheduleLifecycleManager",
    "SubstitutionWorkflow",
]
