import argparse
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import colorlog

from obra_control import __version__ as _PACKAGE_VERSION
from obra_control.core.enums import FinanceEventType
from obra_control.core.models import Project
from obra_control.core.settings import DEFAULT_SETTINGS_PATH, Settings, load_settings, save_settings
from obra_control.ingestion.vocabulary import Vocabulary, load_vocabulary
from obra_control.ingestion.workbook import read_sheet_rows, sheet_names
from obra_control.projects import backup, service
from obra_control.projects.store import JsonProjectStore
from obra_control.valuation.engine import contract_value, executed_values
from obra_control.valuation.series import (
    finance_vs_executed_series,
    planned_vs_executed_series,
    project_kpis,
    series_frame,
)

DEFAULT_STORE_ROOT = Path("data/projects")
DEFAULT_VOCABULARY_PATH = Path("config/vocabulary.yaml")
FINANCE_TYPE_CHOICES = list(FinanceEventType.__members__.keys())


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


# ===================== MARK: Helpers ======================================


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Expected a YYYY-MM-DD date, got {value!r}") from e


def _store(args: argparse.Namespace) -> JsonProjectStore:
    root = getattr(args, "store_root", None)
    return JsonProjectStore(Path(root) if root else DEFAULT_STORE_ROOT)


def _settings_path(args: argparse.Namespace) -> Path:
    path = getattr(args, "settings", None)
    return Path(path) if path else DEFAULT_SETTINGS_PATH


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(_settings_path(args))


def _vocabulary(args: argparse.Namespace) -> Vocabulary:
    path = getattr(args, "vocabulary", None)
    return load_vocabulary(Path(path) if path else DEFAULT_VOCABULARY_PATH)


def _load_project(store: JsonProjectStore, project_id: str) -> Optional[Project]:
    try:
        return store.get(project_id)
    except KeyError:
        logging.error("Project not found: %s (see 'obra-control list')", project_id)
    except ValueError as e:
        logging.error("%s", e)
    return None


def _read_rows(args: argparse.Namespace) -> Optional[list]:
    path = Path(args.path)
    sheet = getattr(args, "sheet", None)
    try:
        if sheet is None:
            names = sheet_names(path) if path.exists() else []
            if len(names) > 1:
                logging.info("Sheets in %s: %s (reading the first)", path.name, ", ".join(names))
            return read_sheet_rows(path)
        return read_sheet_rows(path, sheet)
    except FileNotFoundError as e:
        logging.error("%s", e)
    except ValueError as e:
        logging.error("%s", e)
    return None


def _format_money(value: float, settings: Settings, currency: str) -> str:
    decimals = max(settings.money_decimals, 0)
    return f"{value:,.{decimals}f} {currency}"


def _format_percent(value: Optional[float]) -> str:
    return "-" if value is None else f"{value * 100:.1f}%"


# ===================== MARK: Project commands =============================


def cmd_init(args: argparse.Namespace) -> int:
    """Create a project and print its id."""
    project = service.new_project(getattr(args, "name", None))
    if getattr(args, "currency", None):
        project.contract.currency = args.currency
    if getattr(args, "start", None):
        project.contract.start_date = args.start
    if getattr(args, "end", None):
        project.contract.initial_end_date = args.end
    _store(args).put(project)
    print(project.id)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    try:
        projects = _store(args).list_all()
    except ValueError as e:
        logging.error("%s", e)
        return 2
    if not projects:
        logging.info("No projects found.")
        return 1
    for p in sorted(projects, key=lambda p: p.name):
        print(
            f"{p.id}  {p.name}  ({p.currency}, {len(p.budget.items)} items, "
            f"{len(p.reports)} reports)"
        )
    return 0


def cmd_import_budget(args: argparse.Namespace) -> int:
    """Import a budget sheet, replacing the project's items.

    Returns:
        0 if items were loaded
        1 if the sheet produced no items
        2 on missing project or unreadable file
    """
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    rows = _read_rows(args)
    if rows is None:
        return 2
    count, warnings = service.import_budget(
        project, rows, _settings(args), _vocabulary(args), show_progress=True
    )
    for w in warnings:
        print(f"⚠️  {w}")
    if count == 0:
        logging.error("No budget items found in %s", args.path)
        return 1
    store.put(project)
    logging.info("Loaded %d budget item(s) into %s", count, project.id)
    return 0


def cmd_import_planned(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    rows = _read_rows(args)
    if rows is None:
        return 2
    count, warnings = service.import_planned(project, rows, _vocabulary(args), show_progress=True)
    for w in warnings:
        print(f"⚠️  {w}")
    if count == 0:
        logging.error("No planned curve found in %s", args.path)
        return 1
    store.put(project)
    logging.info("Loaded %d planned curve point(s) into %s", count, project.id)
    return 0


def cmd_add_revision(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    revision = service.add_revision(project, getattr(args, "name", None), getattr(args, "date", None))
    store.put(project)
    print(revision.id)
    return 0


def cmd_set_change(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    try:
        service.set_revision_change(
            project,
            args.revision,
            args.code,
            quantity=getattr(args, "quantity", None),
            unit_price=getattr(args, "unit_price", None),
        )
    except (KeyError, ValueError) as e:
        logging.error("%s", e.args[0] if e.args else e)
        return 2
    store.put(project)
    return 0


def cmd_add_report(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    try:
        report = service.create_report(
            project,
            args.cutoff,
            label=getattr(args, "label", None) or "",
            period_start=getattr(args, "start", None),
            notes=getattr(args, "notes", None) or "",
        )
    except ValueError as e:
        logging.error("%s", e)
        return 2
    store.put(project)
    print(report.id)
    return 0


def cmd_set_quantity(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    try:
        service.set_report_quantity(project, args.report_id, args.code, args.quantity)
    except KeyError as e:
        logging.error("%s", e.args[0])
        return 2
    store.put(project)
    return 0


def cmd_delete_report(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    try:
        report = service.delete_report(project, args.report_id)
    except KeyError as e:
        logging.error("%s", e.args[0])
        return 2
    store.put(project)
    logging.info("Deleted report %s (%s)", report.id, report.label)
    return 0


def cmd_add_suspension(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    if args.end < args.start:
        logging.error("Suspension ends before it starts: %s < %s", args.end, args.start)
        return 2
    service.add_suspension(project, args.start, args.end, getattr(args, "reason", None) or "")
    store.put(project)
    return 0


def cmd_remove_suspension(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    try:
        service.remove_suspension(project, args.index)
    except IndexError as e:
        logging.error("%s", e)
        return 2
    store.put(project)
    return 0


def cmd_add_finance(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    service.add_finance_event(
        project,
        args.date,
        args.amount,
        FinanceEventType[getattr(args, "type", None) or "PAYMENT"],
        getattr(args, "note", None) or "",
    )
    store.put(project)
    return 0


def cmd_delete_finance(args: argparse.Namespace) -> int:
    """Delete the most recent finance event (1 when there is none)."""
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    if service.delete_last_finance_event(project) is None:
        logging.info("No finance events.")
        return 1
    store.put(project)
    return 0


def cmd_normalize_quantities(args: argparse.Namespace) -> int:
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    service.normalize_budget_quantities(project, _settings(args))
    store.put(project)
    return 0


# ===================== MARK: Reporting commands ===========================


def cmd_status(args: argparse.Namespace) -> int:
    """Print headline figures and one line per report."""
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    settings = _settings(args)
    kpis = project_kpis(project, settings)
    print(f"Project: {project.name} ({project.id})")
    print(f"  Contract value: {_format_money(kpis['contract_value'], settings, project.currency)}")
    print(f"  Last report:    {kpis['last_report'] or '-'}")
    print(f"  Executed:       {_format_percent(kpis['executed_percent'])}")
    print(f"  Financial:      {_format_percent(kpis['finance_percent'])}")

    if project.reports:
        contract = contract_value(project, settings).value
        print()
        print("Reports:")
        for report in project.sorted_reports():
            values = executed_values(project, report, settings)
            pct = values.accumulated_value / contract if contract > 0 else None
            print(
                f"  {report.cutoff_date.isoformat()}  {report.label:<20} "
                f"period {_format_money(values.period_value, settings, values.currency)}  "
                f"accumulated {_format_money(values.accumulated_value, settings, values.currency)}  "
                f"({_format_percent(pct)})"
            )
    return 0


def cmd_curves(args: argparse.Namespace) -> int:
    """Write comparison series as CSV files.

    Returns:
        0 if at least one series set was written
        1 if there is nothing to compare yet
        2 on missing project
    """
    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    settings = _settings(args)
    out_dir = Path(getattr(args, "output", None) or ".")
    out_dir.mkdir(parents=True, exist_ok=True)

    written = 0
    for name, series in (
        ("planned_vs_executed", planned_vs_executed_series(project, settings)),
        ("finance_vs_executed", finance_vs_executed_series(project, settings)),
    ):
        if series is None:
            logging.warning("Not enough data for %s series", name)
            continue
        path = out_dir / f"{project.id}_{name}.csv"
        series_frame(series).to_csv(path, index=False)
        logging.info("Series saved: %s", path)
        written += 1
    return 0 if written else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a project's consistency.

    Returns:
        0 if no validation errors were found
        2 if validation errors were found or the project is missing
    """
    from obra_control.validation.registry import print_report, run_validation

    store = _store(args)
    project = _load_project(store, args.project_id)
    if project is None:
        return 2
    report = run_validation(project, _settings(args))
    print_report(report)

    report_arg = getattr(args, "report", False)
    if report_arg:
        report_dir = Path(".") if report_arg is True else Path(report_arg)
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{project.id}_validation.md"
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(report.to_markdown())
        logging.info("Markdown report saved: %s", report_path)

    report_json_arg = getattr(args, "report_json", False)
    if report_json_arg:
        report_dir = Path(".") if report_json_arg is True else Path(report_json_arg)
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{project.id}_validation.json"
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(report.to_json())
        logging.info("JSON report saved: %s", report_path)

    if report.has_errors(strict=False):
        logging.error("Validation found %d errors.", report.get_error_count())
        return 2
    return 0


# ===================== MARK: Backup commands ==============================


def cmd_export(args: argparse.Namespace) -> int:
    try:
        payload = backup.export_backup(_store(args), _settings(args))
    except ValueError as e:
        logging.error("%s", e)
        return 2
    backup.write_backup(payload, Path(args.output))
    logging.info("Backup written: %s (%d project(s))", args.output, len(payload["projects"]))
    return 0


def cmd_restore(args: argparse.Namespace) -> int:
    """Restore a backup into the store and write its settings to the settings file.

    The settings file is only rewritten when the restored settings differ from
    the ones it holds (rewriting drops any comments in it).
    """
    try:
        payload = backup.read_backup(Path(args.path))
        settings, count = backup.restore_backup(payload, _store(args))
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2
    settings_path = _settings_path(args)
    try:
        current = load_settings(settings_path) if settings_path.exists() else None
    except ValueError as e:
        logging.warning("%s", e)
        current = None
    if current == settings:
        logging.info("Settings unchanged; %s left as is", settings_path)
    else:
        if settings_path.exists():
            logging.warning("Overwriting %s with the restored settings", settings_path)
        save_settings(settings, settings_path)
        logging.info("Settings saved: %s", settings_path)
    if count == 0:
        logging.warning("Backup contained no projects.")
        return 1
    return 0


# ===================== MARK: Parser =======================================


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="obra-control",
        description=f"Construction contract control (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )
    p.add_argument(
        "--store-root",
        default=None,
        help="Directory holding one JSON file per project (defaults to ./data/projects)",
    )
    p.add_argument(
        "--settings",
        default=None,
        help="Path to settings.yaml (defaults to config/settings.yaml)",
    )
    p.add_argument(
        "--vocabulary",
        default=None,
        help="Path to vocabulary.yaml with extra header/column keywords (defaults to config/vocabulary.yaml)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="Create a project")
    p_init.add_argument("--name", default=None, help="Project name")
    p_init.add_argument("--currency", default=None, help="Contract currency (defaults to COP)")
    p_init.add_argument("--start", type=_iso_date, default=None, help="Contract start date")
    p_init.add_argument("--end", type=_iso_date, default=None, help="Initial contract end date")
    p_init.set_defaults(func=cmd_init)

    p_list = sub.add_parser("list", help="List stored projects")
    p_list.set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("import-budget", cmd_import_budget, "Import a budget sheet (replaces items, keeps revisions)"),
        ("import-planned", cmd_import_planned, "Import a planned cost sheet (replaces the curve)"),
    ):
        p_imp = sub.add_parser(name, help=help_text)
        p_imp.add_argument("project_id")
        p_imp.add_argument("path", help="Path to an .xlsx/.xls workbook or a .csv file")
        p_imp.add_argument("--sheet", default=None, help="Sheet name (defaults to the first sheet)")
        p_imp.set_defaults(func=func)

    p_rev = sub.add_parser("add-revision", help="Add a budget revision (contract modification)")
    p_rev.add_argument("project_id")
    p_rev.add_argument("--name", default=None, help="Revision name (defaults to 'MOD n')")
    p_rev.add_argument("--date", type=_iso_date, default=None, help="Effective date")
    p_rev.set_defaults(func=cmd_add_revision)

    p_change = sub.add_parser("set-change", help="Set a revision's quantity/price for one item")
    p_change.add_argument("project_id")
    p_change.add_argument("revision", help="Revision id or name")
    p_change.add_argument("code", help="Item code")
    p_change.add_argument("--quantity", type=float, default=None)
    p_change.add_argument("--unit-price", type=float, default=None)
    p_change.set_defaults(func=cmd_set_change)

    p_report = sub.add_parser("add-report", help="Create a progress report")
    p_report.add_argument("project_id")
    p_report.add_argument("cutoff", type=_iso_date, help="Cutoff date (YYYY-MM-DD)")
    p_report.add_argument("--label", default=None, help="Label (defaults to the cutoff date)")
    p_report.add_argument("--start", type=_iso_date, default=None, help="Period start date")
    p_report.add_argument("--notes", default=None)
    p_report.set_defaults(func=cmd_add_report)

    p_qty = sub.add_parser("set-quantity", help="Set an item's cumulative quantity in a report")
    p_qty.add_argument("project_id")
    p_qty.add_argument("report_id")
    p_qty.add_argument("code", help="Item code")
    p_qty.add_argument("quantity", type=float)
    p_qty.set_defaults(func=cmd_set_quantity)

    p_delrep = sub.add_parser("delete-report", help="Delete a progress report")
    p_delrep.add_argument("project_id")
    p_delrep.add_argument("report_id")
    p_delrep.set_defaults(func=cmd_delete_report)

    p_susp = sub.add_parser("add-suspension", help="Record a contract suspension")
    p_susp.add_argument("project_id")
    p_susp.add_argument("start", type=_iso_date)
    p_susp.add_argument("end", type=_iso_date)
    p_susp.add_argument("--reason", default=None)
    p_susp.set_defaults(func=cmd_add_suspension)

    p_rmsusp = sub.add_parser("remove-suspension", help="Remove a suspension by position")
    p_rmsusp.add_argument("project_id")
    p_rmsusp.add_argument("index", type=int, help="Zero-based position")
    p_rmsusp.set_defaults(func=cmd_remove_suspension)

    p_fin = sub.add_parser("add-finance", help="Record an advance or payment")
    p_fin.add_argument("project_id")
    p_fin.add_argument("date", type=_iso_date)
    p_fin.add_argument("amount", type=float)
    p_fin.add_argument(
        "--type",
        type=str.upper,
        choices=FINANCE_TYPE_CHOICES,
        default="PAYMENT",
        help="Event type (case insensitive)",
    )
    p_fin.add_argument("--note", default=None)
    p_fin.set_defaults(func=cmd_add_finance)

    p_delfin = sub.add_parser("delete-finance", help="Delete the most recent finance event")
    p_delfin.add_argument("project_id")
    p_delfin.set_defaults(func=cmd_delete_finance)

    p_norm = sub.add_parser(
        "normalize-quantities", help="Round ITEM quantities to the configured precision"
    )
    p_norm.add_argument("project_id")
    p_norm.set_defaults(func=cmd_normalize_quantities)

    p_status = sub.add_parser("status", help="Show contract value and progress")
    p_status.add_argument("project_id")
    p_status.set_defaults(func=cmd_status)

    p_curves = sub.add_parser("curves", help="Export comparison series as CSV")
    p_curves.add_argument("project_id")
    p_curves.add_argument("--output", default=None, help="Output directory (defaults to .)")
    p_curves.set_defaults(func=cmd_curves)

    p_validate = sub.add_parser("validate", help="Check project consistency")
    p_validate.add_argument("project_id")
    p_validate.add_argument(
        "--report",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed Markdown report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--report-json",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed JSON report. Optionally specify custom directory path.",
    )
    p_validate.set_defaults(func=cmd_validate)

    p_export = sub.add_parser("export", help="Write a JSON backup of all projects and settings")
    p_export.add_argument("output", help="Backup file path")
    p_export.set_defaults(func=cmd_export)

    p_restore = sub.add_parser("restore", help="Restore a JSON backup (upserts projects)")
    p_restore.add_argument("path", help="Backup file path")
    p_restore.set_defaults(func=cmd_restore)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
