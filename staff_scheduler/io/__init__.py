"""I/O utilities for CSV import/export."""

from .export_csv import export_roster_csv, roster_dataframe
from .import_csv import import_coverage_rules_csv, import_staff_csv, import_time_off_csv

__all__ = [
    "import_staff_csv",
    "import_coverage_rules_csv",
    "import_time_off_csv",
    "export_roster_csv",
    "roster_dataframe",
]
