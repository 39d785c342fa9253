"""End-to-end tests for the obra-control command line."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import pandas as pd
import pytest

from obra_control.core.settings import load_settings
from obra_control.interfaces.cli.main import cmd_validate, main
from obra_control.projects.store import JsonProjectStore


@pytest.fixture(autouse=True)
def restore_root_logging():
    """`main` replaces the root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli(tmp_path):
    """Run `main` against a store, settings file and vocabulary under tmp_path."""

    def run(*argv: str) -> int:
        return main(
            [
                "--store-root",
                str(tmp_path / "store"),
                "--settings",
                str(tmp_path / "settings.yaml"),
                "--vocabulary",
                str(tmp_path / "vocabulary.yaml"),
                *argv,
            ]
        )

    return run


@pytest.fixture
def budget_csv(tmp_path) -> Path:
    path = tmp_path / "presupuesto.csv"
    pd.DataFrame(
        [
            ["ITEM", "DESCRIPCION", "UNIDAD", "CANTIDAD", "VALOR UNITARIO", "VALOR TOTAL"],
            ["1", "PRELIMINARES", None, None, None, None],
            ["1.1.1", "Excavación", "m3", "10", "100", "1000"],
            ["1.1.2", "Relleno", "m3", "20", "50", "1000"],
            [None, "Administración 10%", None, None, None, "200"],
        ]
    ).to_csv(path, header=False, index=False)
    return path


def _new_project(cli, capsys, name: str = "Puente peatonal") -> str:
    assert cli("init", "--name", name) == 0
    return capsys.readouterr().out.strip()


def test_init_and_list(cli, capsys, tmp_path):  # pylint: disable=redefined-outer-name
    assert cli("list") == 1
    project_id = _new_project(cli, capsys)
    assert (tmp_path / "store" / f"{project_id}.json").exists()

    assert cli("list") == 0
    out = capsys.readouterr().out
    assert project_id in out
    assert "Puente peatonal" in out


def test_budget_revision_report_workflow(cli, capsys, tmp_path, budget_csv):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    assert cli("import-budget", project_id, str(budget_csv)) == 0
    capsys.readouterr()

    assert cli("add-revision", project_id) == 0
    assert capsys.readouterr().out.strip().startswith("rev_")
    assert cli("set-change", project_id, "MOD 1", "1.1.1", "--quantity", "12") == 0

    assert cli("add-report", project_id, "2024-01-31", "--label", "Mes 1") == 0
    report_id = capsys.readouterr().out.strip()
    assert cli("set-quantity", project_id, report_id, "1.1.1", "6") == 0

    stored = JsonProjectStore(tmp_path / "store").get(project_id)
    assert len(stored.budget.items) == 4
    assert stored.reports[0].quantities == {"1.1.1": 6.0, "1.1.2": 0.0}

    assert cli("status", project_id) == 0
    out = capsys.readouterr().out
    assert "Contract value: 2,400 COP" in out
    assert "Mes 1" in out
    assert "25.0%" in out


def test_import_errors(cli, capsys, tmp_path):  # pylint: disable=redefined-outer-name
    assert cli("import-budget", "proj_missing", str(tmp_path / "x.csv")) == 2
    project_id = _new_project(cli, capsys)
    assert cli("import-budget", project_id, str(tmp_path / "x.csv")) == 2

    empty = tmp_path / "vacio.csv"
    empty.write_text("sin,encabezado\n", encoding="utf-8")
    assert cli("import-budget", project_id, str(empty)) == 1


def test_set_change_needs_a_value(cli, capsys, budget_csv):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    cli("import-budget", project_id, str(budget_csv))
    assert cli("set-change", project_id, "MOD 1", "1.1.1", "--quantity", "3") == 2
    cli("add-revision", project_id)
    assert cli("set-change", project_id, "MOD 1", "1.1.1") == 2


def test_add_report_requires_budget(cli, capsys):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    assert cli("add-report", project_id, "2024-01-31") == 2


def test_suspensions_and_finance(cli, capsys, tmp_path):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    assert cli("add-suspension", project_id, "2024-02-10", "2024-02-01") == 2
    assert cli("add-suspension", project_id, "2024-02-01", "2024-02-10", "--reason", "Lluvias") == 0
    assert cli("remove-suspension", project_id, "3") == 2

    assert cli("add-finance", project_id, "2024-01-15", "500", "--type", "advance") == 0
    stored = JsonProjectStore(tmp_path / "store").get(project_id)
    assert stored.suspensions[0].reason == "Lluvias"
    assert stored.finance.events[0].type.value == "ADVANCE"

    assert cli("delete-finance", project_id) == 0
    assert cli("delete-finance", project_id) == 1
    assert cli("remove-suspension", project_id, "0") == 0


def test_invalid_date_argument(cli, capsys):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    with pytest.raises(SystemExit) as exc:
        cli("add-report", project_id, "31/01/2024")
    assert exc.value.code == 2


def test_curves(cli, capsys, tmp_path, budget_csv):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    out_dir = tmp_path / "curves"
    assert cli("curves", project_id, "--output", str(out_dir)) == 1

    cli("import-budget", project_id, str(budget_csv))
    cli("add-report", project_id, "2024-01-31")
    assert cli("curves", project_id, "--output", str(out_dir)) == 0
    assert (out_dir / f"{project_id}_finance_vs_executed.csv").exists()
    assert not (out_dir / f"{project_id}_planned_vs_executed.csv").exists()

    df = pd.read_csv(out_dir / f"{project_id}_finance_vs_executed.csv")
    assert list(df.columns) == ["series", "date", "value"]


def test_export_and_restore(cli, capsys, tmp_path, budget_csv):  # pylint: disable=redefined-outer-name
    project_id = _new_project(cli, capsys)
    cli("import-budget", project_id, str(budget_csv))
    backup_path = tmp_path / "backup.json"
    assert cli("export", str(backup_path)) == 0
    payload = json.loads(backup_path.read_text(encoding="utf-8"))
    assert [p["id"] for p in payload["projects"]] == [project_id]

    other = tmp_path / "other"
    args = ["--store-root", str(other / "store"), "--settings", str(other / "settings.yaml")]
    assert main([*args, "restore", str(backup_path)]) == 0
    assert JsonProjectStore(other / "store").get(project_id).budget.items
    assert load_settings(other / "settings.yaml").money_decimals == 0

    assert main([*args, "restore", str(tmp_path / "missing.json")]) == 2


def test_restore_rewrites_settings_only_when_changed(cli, capsys, tmp_path):  # pylint: disable=redefined-outer-name
    """An identical settings file keeps its comments; a differing one is replaced."""
    _new_project(cli, capsys)
    backup_path = tmp_path / "backup.json"
    assert cli("export", str(backup_path)) == 0

    other = tmp_path / "other"
    other.mkdir()
    settings_path = other / "settings.yaml"
    args = ["--store-root", str(other / "store"), "--settings", str(settings_path)]

    settings_path.write_text("# local settings\nmoney_decimals: 0\n", encoding="utf-8")
    assert main([*args, "restore", str(backup_path)]) == 0
    assert settings_path.read_text(encoding="utf-8") == "# local settings\nmoney_decimals: 0\n"

    settings_path.write_text("# local\nmoney_decimals: 2\n", encoding="utf-8")
    assert main([*args, "restore", str(backup_path)]) == 0
    assert load_settings(settings_path).money_decimals == 0
    assert "# local" not in settings_path.read_text(encoding="utf-8")


class TestCmdValidate:
    """Tests for cmd_validate function."""

    def test_missing_project(self, tmp_path):
        args = argparse.Namespace(project_id="proj_x", store_root=str(tmp_path), report=False)
        assert cmd_validate(args) == 2

    def test_clean_project_with_reports(self, cli, capsys, tmp_path, budget_csv):  # pylint: disable=redefined-outer-name
        project_id = _new_project(cli, capsys)
        cli("import-budget", project_id, str(budget_csv))

        args = argparse.Namespace(
            project_id=project_id,
            store_root=str(tmp_path / "store"),
            settings=str(tmp_path / "settings.yaml"),
            report=str(tmp_path / "reports"),
            report_json=str(tmp_path / "reports"),
        )
        assert cmd_validate(args) == 0
        assert "All validation checks passed" in capsys.readouterr().out
        assert (tmp_path / "reports" / f"{project_id}_validation.md").exists()
        data = json.loads((tmp_path / "reports" / f"{project_id}_validation.json").read_text(encoding="utf-8"))
        assert data["metadata"]["project_id"] == project_id

    def test_errors_return_2(self, cli, capsys, tmp_path):  # pylint: disable=redefined-outer-name
        dup = tmp_path / "dup.csv"
        pd.DataFrame(
            [
                ["ITEM", "DESCRIPCION", "UNIDAD", "CANTIDAD", "VALOR UNITARIO", "VALOR TOTAL"],
                ["1.1.1", "Excavación", "m3", "1", "10", "10"],
                ["1.1.1", "Excavación bis", "m3", "2", "10", "20"],
            ]
        ).to_csv(dup, header=False, index=False)
        project_id = _new_project(cli, capsys)
        cli("import-budget", project_id, str(dup))
        assert cli("validate", project_id) == 2
