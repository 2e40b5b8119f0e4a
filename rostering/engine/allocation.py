"""Greedy load-balanced allocation of workers to monthly service slots."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from rostering.config import WEEKDAY_NAMES, normalize_weekday
from rostering.domain.models import Capability, DateRestriction, FixedRole, ServiceType, Worker
from rostering.services.conflicts import find_conflicts
from rostering.services.eligibility import fixed_role_sort_key, has_capability, has_restriction


DEFAULT_WEEKDAYS: Tuple[str, ...] = ("monday", "friday")


@dataclass(frozen=True)
class ScheduleDate:
    service_date: date
    weekday: str


@dataclass
class ProposedLineItem:
    """Line-item produced by a run, not yet persisted."""

    worker_id: int
    worker_name: str
    service_type_id: int
    service_type_name: str
    service_date: date
    weekday: str
    start_time: str
    end_time: str
    function_label: str | None = None
    from_fixed_role: bool = False
    id: int | None = None


@dataclass
class AllocationStats:
    total_dates: int = 0
    total_line_items: int = 0
    total_service_types: int = 0
    load_distribution: Dict[int, int] = field(default_factory=dict)


@dataclass
class AllocationResult:
    line_items: List[ProposedLineItem] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    stats: AllocationStats = field(default_factory=AllocationStats)

    @property
    def ok(self) -> bool:
        """True when nothing blocks persisting or publishing the run."""
        return not self.errors


@dataclass
class DateGroup:
    service_date: date
    weekday: str
    line_items: List[ProposedLineItem] = field(default_factory=list)


def enumerate_schedule_dates(
    year: int,
    month: int,
    weekdays: Iterable[str] = DEFAULT_WEEKDAYS,
) -> List[ScheduleDate]:
    """Every date of the month whose weekday is in ``weekdays``, ascending."""
    wanted = {normalize_weekday(d) for d in weekdays}
    _, days_in_month = calendar.monthrange(year, month)
    dates: List[ScheduleDate] = []
    for day in range(1, days_in_month + 1):
        current = date(year, month, day)
        name = WEEKDAY_NAMES[current.weekday()]
        if name in wanted:
            dates.append(ScheduleDate(current, name))
    return dates


class AllocationRun:
    """
    Mutable state of a single allocation pass.

    Load counters, committed items and diagnostics live here so that two runs
    never share state. Workers are iterated in ascending id order; among
    candidates tied on load the lowest id wins.
    """

    def __init__(
        self,
        workers: Iterable[Worker],
        capabilities: Iterable[Capability],
        fixed_roles: Iterable[FixedRole],
        restrictions: Iterable[DateRestriction],
    ):
        self.workers: List[Worker] = sorted(
            (w for w in workers if w.status == "active"), key=lambda w: w.id
        )
        self.workers_by_id: Dict[int, Worker] = {w.id: w for w in self.workers}
        self.capabilities = list(capabilities)
        self.restrictions = list(restrictions)

        # First active pin per service type, oldest first
        self.fixed_by_type: Dict[int, FixedRole] = {}
        for role in sorted((r for r in fixed_roles if r.active), key=fixed_role_sort_key):
            self.fixed_by_type.setdefault(role.service_type_id, role)

        self.load: Dict[int, int] = {w.id: 0 for w in self.workers}
        self.line_items: List[ProposedLineItem] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []

    def allocate_slot(self, service_type: ServiceType, day: ScheduleDate) -> Optional[ProposedLineItem]:
        """Fill one (date, service type) cell. Returns the committed item, if any."""
        fixed = self.fixed_by_type.get(service_type.id)
        if fixed is not None:
            return self._allocate_fixed(service_type, day, fixed)
        return self._allocate_balanced(service_type, day)

    def _allocate_fixed(
        self,
        service_type: ServiceType,
        day: ScheduleDate,
        fixed: FixedRole,
    ) -> Optional[ProposedLineItem]:
        when = day.service_date.isoformat()
        worker = self.workers_by_id.get(fixed.worker_id)
        if worker is None:
            self.errors.append(
                f"Fixed role configured but worker not found: {service_type.name} on {when}"
            )
            return None

        # Restrictions override pinning
        if has_restriction(worker.id, day.service_date, self.restrictions):
            self.warnings.append(
                f"{worker.name} has a fixed role in {service_type.name} but is restricted on {when}"
            )
            return None

        report = find_conflicts(
            worker.id,
            day.service_date,
            service_type.start_time,
            service_type.end_time,
            self.line_items,
        )
        if report.has_conflict:
            self.errors.append(
                f"CONFLICT: {worker.name} has a fixed role in {service_type.name} but is already "
                f"assigned to {report.conflicts[0].service_type_name} at the same time ({when})"
            )
            return None

        return self._commit(worker, service_type, day, fixed.function_label, from_fixed_role=True)

    def _allocate_balanced(self, service_type: ServiceType, day: ScheduleDate) -> Optional[ProposedLineItem]:
        when = day.service_date.isoformat()
        candidates = [
            w for w in self.workers if has_capability(w.id, service_type.id, self.capabilities)
        ]
        if not candidates:
            self.errors.append(f"No capable worker for {service_type.name} on {when}")
            return None

        eligible = [
            w
            for w in candidates
            if not has_restriction(w.id, day.service_date, self.restrictions)
            and not find_conflicts(
                w.id,
                day.service_date,
                service_type.start_time,
                service_type.end_time,
                self.line_items,
            ).has_conflict
        ]
        if not eligible:
            self.warnings.append(
                f"Could not allocate anyone to {service_type.name} on {when} "
                f"(all candidates conflicted or restricted)"
            )
            return None

        # min() keeps the first of equally loaded candidates
        chosen = min(eligible, key=lambda w: self.load[w.id])
        return self._commit(chosen, service_type, day, None, from_fixed_role=False)

    def _commit(
        self,
        worker: Worker,
        service_type: ServiceType,
        day: ScheduleDate,
        function_label: str | None,
        from_fixed_role: bool,
    ) -> ProposedLineItem:
        item = ProposedLineItem(
            worker_id=worker.id,
            worker_name=worker.name,
            service_type_id=service_type.id,
            service_type_name=service_type.name,
            service_date=day.service_date,
            weekday=day.weekday,
            start_time=service_type.start_time,
            end_time=service_type.end_time,
            function_label=function_label,
            from_fixed_role=from_fixed_role,
        )
        self.line_items.append(item)
        self.load[worker.id] = self.load.get(worker.id, 0) + 1
        return item


def generate_allocation(
    year: int,
    month: int,
    service_types: Sequence[ServiceType],
    workers: Sequence[Worker],
    capabilities: Sequence[Capability],
    fixed_roles: Sequence[FixedRole],
    restrictions: Sequence[DateRestriction],
    weekdays: Iterable[str] = DEFAULT_WEEKDAYS,
) -> AllocationResult:
    """
    Build the proposed line-items for one month.

    Business-rule failures never raise: they end up as ``warnings`` (slot
    skipped, schedule still usable) or ``errors`` (configuration problem that
    should block persistence). An out-of-range year or month returns an error
    result with no line-items.

    Args:
        year: Target year
        month: Target month (1-12)
        service_types: Service types in iteration order; inactive ones are skipped
        workers: Roster; only ``status == "active"`` workers take part
        capabilities: Capability rows
        fixed_roles: Fixed-role rows
        restrictions: Date restriction rows
        weekdays: Weekday names on which slots are scheduled

    Returns:
        AllocationResult with items ordered by date, then service-type order

    Raises:
        ValueError: If ``weekdays`` names an unknown weekday
    """
    weekdays = tuple(normalize_weekday(d) for d in weekdays)
    result = AllocationResult()

    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        result.errors.append(f"Invalid month: {month!r} (expected 1-12)")
        return result
    if isinstance(year, bool) or not isinstance(year, int) or not MINYEAR <= year <= MAXYEAR:
        result.errors.append(f"Invalid year: {year!r}")
        return result

    dates = enumerate_schedule_dates(year, month, weekdays)
    if not dates:
        result.errors.append(
            f"No {'/'.join(weekdays) or 'scheduled weekday'} found in {year:04d}-{month:02d}"
        )
        return result

    active_types = [st for st in service_types if st.active]
    run = AllocationRun(workers, capabilities, fixed_roles, restrictions)

    for day in dates:
        for service_type in active_types:
            if not service_type.runs_on(day.weekday):
                continue
            run.allocate_slot(service_type, day)

    result.line_items = run.line_items
    result.warnings = run.warnings
    result.errors = run.errors
    result.stats = AllocationStats(
        total_dates=len(dates),
        total_line_items=len(run.line_items),
        total_service_types=len(active_types),
        load_distribution=dict(run.load),
    )
    return result


def group_by_date(line_items: Iterable) -> List[DateGroup]:
    """Bucket line-items per date, ascending, keeping their relative order."""
    groups: Dict[date, DateGroup] = {}
    for item in line_items:
        group = groups.get(item.service_date)
        if group is None:
            weekday = getattr(item, "weekday", None) or WEEKDAY_NAMES[item.service_date.weekday()]
            group = groups[item.service_date] = DateGroup(item.service_date, weekday)
        group.line_items.append(item)
    return [groups[d] for d in sorted(groups)]
