"""Allocation engine and store orchestration."""

from .allocation import (
    AllocationResult,
    AllocationRun,
    AllocationStats,
    ProposedLineItem,
    ScheduleDate,
    enumerate_schedule_dates,
    generate_allocation,
    group_by_date,
)
from .orchestrator import build_month_schedule, load_snapshot

__all__ = [
    "AllocationResult",
    "AllocationRun",
    "AllocationStats",
    "ProposedLineItem",
    "ScheduleDate",
    "enumerate_schedule_dates",
    "generate_allocation",
    "group_by_date",
    "build_month_schedule",
    "load_snapshot",
]
