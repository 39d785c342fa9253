"""Project aggregate operations, persistence boundary and backup interchange."""

from .backup import BACKUP_VERSION, export_backup, read_backup, restore_backup, write_backup
from .service import (
    add_finance_event,
    add_revision,
    add_suspension,
    create_report,
    delete_last_finance_event,
    delete_report,
    find_report,
    import_budget,
    import_planned,
    new_project,
    normalize_budget_quantities,
    remove_suspension,
    set_report_quantity,
    set_revision_change,
)
from .store import InMemoryProjectStore, JsonProjectStore, ProjectStore

__all__ = [
    "BACKUP_VERSION",
    "export_backup",
    "read_backup",
    "restore_backup",
    "write_backup",
    "new_project",
    "import_budget",
    "import_planned",
    "add_revision",
    "set_revision_change",
    "create_report",
    "find_report",
    "delete_report",
    "set_report_quantity",
    "add_suspension",
    "remove_suspension",
    "add_finance_event",
    "delete_last_finance_event",
    "normalize_budget_quantities",
    "ProjectStore",
    "InMemoryProjectStore",
    "JsonProjectStore",
]
