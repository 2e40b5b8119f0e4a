"""Eligibility checks shared by generation, draft review and substitutions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from rostering.domain.models import Capability, DateRestriction, FixedRole, ServiceType, Worker

from .conflicts import find_conflicts


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def has_capability(worker_id: int, service_type_id: int, capabilities: Iterable[Capability]) -> bool:
    """True if an active capability grants the worker this service type."""
    return any(
        cap.worker_id == worker_id and cap.service_type_id == service_type_id and cap.active
        for cap in capabilities
    )


def has_restriction(worker_id: int, service_date: date, restrictions: Iterable[DateRestriction]) -> bool:
    """True if the worker has an active restriction on this date."""
    return any(
        rest.worker_id == worker_id and rest.restriction_date == service_date and rest.active
        for rest in restrictions
    )


def find_fixed_role(
    worker_id: int,
    service_type_id: int,
    fixed_roles: Iterable[FixedRole],
) -> Optional[FixedRole]:
    """First active fixed role pinning this worker to this service type."""
    for role in fixed_roles:
        if role.worker_id == worker_id and role.service_type_id == service_type_id and role.active:
            return role
    return None


def fixed_role_sort_key(role: FixedRole):
    """Oldest pin first; unsaved rows without a timestamp sort ahead of saved ones."""
    return (role.created_at or datetime.min, role.id or 0)


def duplicate_fixed_roles(fixed_roles: Iterable[FixedRole]) -> Dict[int, List[FixedRole]]:
    """
    Find service types pinned by more than one active fixed role.

    Returns:
        Dict of service_type_id -> active fixed roles (oldest first) for every
        service type with two or more pins. Only the first one is honoured by
        the allocation engine.
    """
    by_type: Dict[int, List[FixedRole]] = defaultdict(list)
    for role in fixed_roles:
        if role.active:
            by_type[role.service_type_id].append(role)
    return {
        type_id: sorted(roles, key=fixed_role_sort_key)
        for type_id, roles in by_type.items()
        if len(roles) > 1
    }


def validate_assignment(
    worker_id: int,
    service_type: ServiceType,
    service_date: date,
    existing_items: Iterable,
    capabilities: Iterable[Capability],
    restrictions: Iterable[DateRestriction],
) -> ValidationResult:
    """
    Check whether a worker may take a service slot.

    All checks run; every failing reason is reported.

    Args:
        worker_id: Candidate worker
        service_type: Service type of the slot
        service_date: Date of the slot
        existing_items: Other line-items of the batch (the slot itself excluded)
        capabilities: Capability rows
        restrictions: Date restriction rows

    Returns:
        ValidationResult with ``valid`` and the list of reasons
    """
    errors: List[str] = []

    if not has_capability(worker_id, service_type.id, capabilities):
        errors.append(f"Worker has no capability for service type '{service_type.name}'")

    if has_restriction(worker_id, service_date, restrictions):
        errors.append(f"Worker has a date restriction on {service_date.isoformat()}")

    report = find_conflicts(
        worker_id,
        service_date,
        service_type.start_time,
        service_type.end_time,
        existing_items,
    )
    if report.has_conflict:
        names = ", ".join(
            f"{c.service_type_name} ({c.window})" for c in report.conflicts
        )
        errors.append(f"Time conflict: already assigned to {names} on {service_date.isoformat()}")

    return ValidationResult(valid=not errors, errors=errors)


def require_active_worker(
    result: ValidationResult,
    worker_id: int,
    worker: Optional[Worker],
) -> ValidationResult:
    """Fail the result when the worker does not exist or is not active; the reason goes first."""
    if worker is None:
        reason = f"Worker {worker_id} not found"
    elif not worker.is_active:
        reason = f"Worker '{worker.name}' is not active (status '{worker.status}')"
    else:
        return result
    return ValidationResult(valid=False, errors=[reason] + result.errors)
