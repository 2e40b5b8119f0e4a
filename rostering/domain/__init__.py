"""Domain models and data access layer."""

from .models import (
    Base,
    Capability,
    DateRestriction,
    FixedRole,
    ScheduleBatch,
    ScheduleLineItem,
    ServiceType,
    SubstitutionRequest,
    Worker,
)
from .repositories import (
    CapabilityRepository,
    DateRestrictionRepository,
    FixedRoleRepository,
    ScheduleRepository,
    ServiceTypeRepository,
    SubstitutionRepository,
    WorkerRepository,
)

__all__ = [
    "Base",
    "Worker",
    "ServiceType",
    "Capability",
    "FixedRole",
    "DateRestriction",
    "ScheduleBatch",
    "ScheduleLineItem",
    "SubstitutionRequest",
    "WorkerRepository",
    "ServiceTypeRepository",
    "CapabilityRepository",
    "FixedRoleRepository",
    "DateRestrictionRepository",
    "ScheduleRepository",
    "SubstitutionRepository",
]
