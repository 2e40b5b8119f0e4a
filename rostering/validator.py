from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from .domain.models import Capability, DateRestriction
from .services.conflicts import windows_overlap
from .services.eligibility import has_capability, has_restriction


def validate_batch(
    line_items: Sequence,
    capabilities: Iterable[Capability],
    restrictions: Iterable[DateRestriction],
) -> List[str]:
    """Return every consistency problem found in a batch (empty list means clean)."""
    capabilities = list(capabilities)
    restrictions = list(restrictions)
    problems: List[str] = []

    by_worker_date: Dict[Tuple[int, date], list] = defaultdict(list)
    for item in line_items:
        when = item.service_date.isoformat()
        label = f"{item.service_type_name} on {when} (worker {item.worker_id})"

        # Fixed-role items bypass the capability grant
        if not item.from_fixed_role and not has_capability(item.worker_id, item.service_type_id, capabilities):
            problems.append(f"Missing capability: {label}")
        if has_restriction(item.worker_id, item.service_date, restrictions):
            problems.append(f"Worker restricted: {label}")

        by_worker_date[(item.worker_id, item.service_date)].append(item)

    for (worker_id, service_date), day_items in by_worker_date.items():
        for i, a in enumerate(day_items):
            for b in day_items[i + 1:]:
                if windows_overlap(a.start_time, a.end_time, b.start_time, b.end_time):
                    problems.append(
                        f"Overlap: worker {worker_id} on {service_date.isoformat()} holds "
                        f"{a.service_type_name} ({a.start_time} - {a.end_time}) and "
                        f"{b.service_type_name} ({b.start_time} - {b.end_time})"
                    )

    return problems


def line_items_frame(line_items: Iterable) -> pd.DataFrame:
    rows = [
        {
            "date": item.service_date.isoformat(),
            "service_type": item.service_type_name,
            "worker_id": item.worker_id,
            "worker": item.worker_name,
            "start_time": item.start_time,
            "end_time": item.end_time,
            "fixed": bool(item.from_fixed_role),
        }
        for item in line_items
    ]
    return pd.DataFrame(
        rows, columns=["date", "service_type", "worker_id", "worker", "start_time", "end_time", "fixed"]
    )


def summarize_line_items(line_items: Iterable) -> str:
    df = line_items_frame(line_items)
    if df.empty:
        return "No line-items."

    roster = df.pivot_table(
        index="date", columns="service_type", values="worker", aggfunc="first", fill_value="-"
    )
    load = df.groupby("worker").size().sort_values(ascending=False)

    lines = ["Assignments per date per service type:"]
    lines.append(roster.to_string())
    lines.append("")
    lines.append("Assignments per worker (month):")
    lines.append(load.to_string())
    return "\n".join(lines)
