"""CSV import utilities to load roster data into database."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from rostering.config import normalize_weekday
from rostering.domain.models import Capability, DateRestriction, FixedRole, ServiceType, Worker


TRUE_VALUES = {"TRUE", "T", "1", "YES", "Y"}


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    return df


def _flag(value, default: bool = True) -> bool:
    text = str(value).strip().upper()
    if not text:
        return default
    return text in TRUE_VALUES


def _optional(value) -> str | None:
    text = str(value).strip()
    return text or None


def import_workers_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import workers from CSV into database.

    Columns: id, name, status (optional, defaults to active)

    Returns:
        Number of workers imported
    """
    df = _read(csv_path)
    workers = []
    for _, row in df.iterrows():
        status = str(row.get("status", "")).strip().lower() or "active"
        workers.append(Worker(id=int(row["id"]), name=str(row["name"]).strip(), status=status))

    session.add_all(workers)
    session.commit()

    print(f"[INFO] Imported {len(workers)} workers from {csv_path}")
    return len(workers)


def import_service_types_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import service types from CSV into database.

    Columns: id, name, start_time, end_time, weekdays (separated by ';'),
    headcount (optional), active (optional)
    """
    df = _read(csv_path)
    service_types = []
    for _, row in df.iterrows():
        raw_days = str(row.get("weekdays", "")).replace(",", ";")
        weekdays = [normalize_weekday(d) for d in raw_days.split(";") if d.strip()]
        headcount = str(row.get("headcount", "")).strip()
        service_types.append(
            ServiceType(
                id=int(row["id"]),
                name=str(row["name"]).strip(),
                start_time=str(row["start_time"]).strip(),
                end_time=str(row["end_time"]).strip(),
                headcount=int(headcount) if headcount else 1,
                active=_flag(row.get("active", "")),
                weekday_set=weekdays,
            )
        )

    session.add_all(service_types)
    session.commit()

    print(f"[INFO] Imported {len(service_types)} service types from {csv_path}")
    return len(service_types)


def import_capabilities_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import capability grants from CSV into database.

    Columns: worker_id, service_type_id, experience_level (optional),
    priority (optional), active (optional)
    """
    df = _read(csv_path)
    capabilities = []
    for _, row in df.iterrows():
        priority = str(row.get("priority", "")).strip()
        capabilities.append(
            Capability(
                worker_id=int(row["worker_id"]),
                service_type_id=int(row["service_type_id"]),
                experience_level=str(row.get("experience_level", "")).strip().lower() or "beginner",
                priority=int(priority) if priority else 0,
                active=_flag(row.get("active", "")),
            )
        )

    session.add_all(capabilities)
    session.commit()

    print(f"[INFO] Imported {len(capabilities)} capabilities from {csv_path}")
    return len(capabilities)


def import_fixed_roles_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import fixed roles from CSV into database.

    Columns: worker_id, service_type_id, function_label (optional), active (optional)
    """
    df = _read(csv_path)
    fixed_roles = [
        FixedRole(
            worker_id=int(row["worker_id"]),
            service_type_id=int(row["service_type_id"]),
            function_label=_optional(row.get("function_label", "")),
            active=_flag(row.get("active", "")),
        )
        for _, row in df.iterrows()
    ]

    session.add_all(fixed_roles)
    session.commit()

    print(f"[INFO] Imported {len(fixed_roles)} fixed roles from {csv_path}")
    return len(fixed_roles)


def import_restrictions_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import date restrictions from CSV into database.

    Columns: worker_id, date (YYYY-MM-DD), reason (optional), active (optional)
    """
    df = _read(csv_path)
    if "date" in df.columns:
        df["date"] = pd.to_datetime(df["date"]).dt.date

    restrictions = [
        DateRestriction(
            worker_id=int(row["worker_id"]),
            restriction_date=row["date"],
            reason=_optional(row.get("reason", "")),
            active=_flag(row.get("active", "")),
        )
        for _, row in df.iterrows()
    ]

    session.add_all(restrictions)
    session.commit()

    print(f"[INFO] Imported {len(restrictions)} date restrictions from {csv_path}")
    return len(restrictions)
