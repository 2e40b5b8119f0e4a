"""Orchestrator - loads the roster snapshot, runs allocation and stores the draft."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from rostering.config import SchedulerConfig
from rostering.domain.models import Capability, DateRestriction, FixedRole, ScheduleBatch, ServiceType, Worker
from rostering.domain.repositories import (
    CapabilityRepository,
    DateRestrictionRepository,
    FixedRoleRepository,
    ServiceTypeRepository,
    WorkerRepository,
)
from rostering.services.eligibility import duplicate_fixed_roles
from rostering.services.lifecycle import ScheduleLifecycleManager

from .allocation import AllocationResult, generate_allocation


@dataclass
class RosterSnapshot:
    """Everything the allocation engine reads, fetched up front."""

    workers: List[Worker]
    service_types: List[ServiceType]
    capabilities: List[Capability]
    fixed_roles: List[FixedRole]
    restrictions: List[DateRestriction]


def load_snapshot(session: Session) -> RosterSnapshot:
    """Read the active roster and configuration tables."""
    return RosterSnapshot(
        workers=WorkerRepository.list_active(session),
        service_types=ServiceTypeRepository.list(session, active_only=True),
        capabilities=CapabilityRepository.get_all(session),
        fixed_roles=FixedRoleRepository.get_all(session),
        restrictions=DateRestrictionRepository.get_all(session),
    )


def build_month_schedule(
    session: Session,
    year: int,
    month: int,
    cfg: SchedulerConfig,
    created_by: str | None = None,
    persist: bool = True,
) -> Tuple[AllocationResult, Optional[ScheduleBatch]]:
    """
    Generate a month and optionally store it as a draft batch.

    Errors in the result block persistence; warnings do not.

    Args:
        session: Database session
        year: Target year
        month: Target month
        cfg: SchedulerConfig (scheduled weekdays, default actor)
        created_by: Actor for the batch audit field (default: cfg.default_actor)
        persist: If True, save a draft when the run has no errors

    Returns:
        (AllocationResult, created batch or None)

    Raises:
        DuplicateBatchError: If persisting and a batch already exists for the period
    """
    print(f"[INFO] Orchestrator: Building schedule for {year:04d}-{month:02d}")
    print(f"[INFO] Scheduled weekdays: {list(cfg.schedule_weekdays)}")

    snapshot = load_snapshot(session)
    for type_id, roles in duplicate_fixed_roles(snapshot.fixed_roles).items():
        print(
            f"[WARN] Service type {type_id} has {len(roles)} active fixed roles; "
            f"only worker {roles[0].worker_id} is used"
        )

    result = generate_allocation(
        year,
        month,
        snapshot.service_types,
        snapshot.workers,
        snapshot.capabilities,
        snapshot.fixed_roles,
        snapshot.restrictions,
        weekdays=cfg.schedule_weekdays,
    )

    for warning in result.warnings:
        print(f"[WARN] {warning}")
    for error in result.errors:
        print(f"[ERROR] {error}")
    print(f"[OK] Orchestrator: Generated {len(result.line_items)} line-items")

    batch = None
    if persist:
        if result.errors:
            print(f"[ERROR] {len(result.errors)} error(s); draft not persisted")
        elif not result.line_items:
            print("[WARN] Nothing generated; draft not persisted")
        else:
            manager = ScheduleLifecycleManager(session)
            batch = manager.create_draft(
                year, month, result.line_items, created_by or cfg.default_actor
            )
    return result, batch
