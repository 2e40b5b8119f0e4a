"""Rostering package for monthly service-slot schedules.

Modules:
- config: load and validate configuration (YAML or JSON)
- domain: SQLAlchemy models, repositories and named errors
- services: conflict detection, eligibility, draft lifecycle, substitutions
- engine: greedy load-balanced allocation and store orchestration
- validator: whole-batch consistency checks and text summaries
- io: CSV import of roster and configuration tables
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "engine",
    "validator",
    "io",
    "cli",
]
