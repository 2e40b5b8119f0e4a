"""Time-window conflict detection for line-items on the same date."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Conflict:
    line_item_id: Optional[int]
    service_type_name: Optional[str]
    window: str
    service_date: date


@dataclass
class ConflictReport:
    has_conflict: bool = False
    conflicts: List[Conflict] = field(default_factory=list)


def time_to_minutes(hhmm: str | None) -> int:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    A trailing ``:SS`` part is ignored. Missing or malformed input returns 0.
    """
    if not hhmm:
        return 0
    parts = str(hhmm).strip().split(":")
    if len(parts) < 2:
        return 0
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return 0
    total = hours * 60 + minutes
    if hours < 0 or not 0 <= minutes < 60 or total > 24 * 60:
        return 0
    return total


def windows_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """True if [start_a, end_a) and [start_b, end_b) share at least one minute."""
    a0, a1 = time_to_minutes(start_a), time_to_minutes(end_a)
    b0, b1 = time_to_minutes(start_b), time_to_minutes(end_b)
    return a0 < b1 and a1 > b0


def find_conflicts(
    worker_id: int,
    service_date: date,
    start: str,
    end: str,
    existing_items: Iterable,
    exclude_item_id: Optional[int] = None,
) -> ConflictReport:
    """
    Report every existing item that would collide with a proposed assignment.

    Args:
        worker_id: Worker being placed
        service_date: Date of the proposed assignment
        start: Proposed window start (HH:MM)
        end: Proposed window end (HH:MM)
        existing_items: Line-items (persisted or proposed) exposing ``id``,
            ``worker_id``, ``service_date``, ``start_time``, ``end_time`` and
            ``service_type_name``
        exclude_item_id: Item to ignore, used when re-validating an edit in place

    Returns:
        ConflictReport listing all overlapping items
    """
    conflicts: List[Conflict] = []
    for item in existing_items:
        if item.worker_id != worker_id or item.service_date != service_date:
            continue
        if exclude_item_id is not None and item.id == exclude_item_id:
            continue
        if windows_overlap(start, end, item.start_time, item.end_time):
            conflicts.append(
                Conflict(
                    line_item_id=item.id,
                    service_type_name=item.service_type_name,
                    window=f"{item.start_time} - {item.end_time}",
                    service_date=item.service_date,
                )
            )
    return ConflictReport(has_conflict=bool(conflicts), conflicts=conflicts)
