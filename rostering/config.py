"""Configuration loading for the rostering engine."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml


WEEKDAY_NAMES: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_DB_URL = "sqlite:///rostering.db"


def normalize_weekday(name: str) -> str:
    """Return the canonical lowercase weekday name, or raise ValueError."""
    value = str(name).strip().lower()
    if value not in WEEKDAY_NAMES:
        raise ValueError(f"Unknown weekday: {name!r}")
    return value


@dataclass
class SchedulerConfig:
    """Business settings shared by the CLI and orchestration layer."""

    db_url: str = DEFAULT_DB_URL
    schedule_weekdays: Tuple[str, ...] = ("monday", "friday")
    default_actor: str = "system"
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.schedule_weekdays = tuple(normalize_weekday(d) for d in self.schedule_weekdays)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulerConfig":
        data = dict(data or {})
        known = {}
        for key in ("db_url", "schedule_weekdays", "default_actor"):
            if key in data:
                known[key] = data.pop(key)
        if "schedule_weekdays" in known:
            weekdays = known["schedule_weekdays"]
            if isinstance(weekdays, str):
                weekdays = [w for w in weekdays.split(",") if w.strip()]
            known["schedule_weekdays"] = tuple(weekdays)
        return cls(**known, extra=data)


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file path. ``None`` returns the defaults.

    Returns:
        SchedulerConfig

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: If the file content is not a mapping or names an unknown weekday
    """
    if path is None:
        return SchedulerConfig()

    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return SchedulerConfig.from_dict(data)
