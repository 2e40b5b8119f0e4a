"""I/O utilities for CSV import."""

from .import_csv import (
    import_capabilities_csv,
    import_fixed_roles_csv,
    import_restrictions_csv,
    import_service_types_csv,
    import_workers_csv,
)

__all__ = [
    "import_workers_csv",
    "import_service_types_csv",
    "import_capabilities_csv",
    "import_fixed_roles_csv",
    "import_restrictions_csv",
]
