"""Tests for backup export and restore."""

import json
import logging

import pytest

from obra_control.core.models import Project
from obra_control.core.numbers import MONEY_THOUSANDS
from obra_control.core.settings import Settings
from obra_control.projects.backup import (
    BACKUP_VERSION,
    export_backup,
    read_backup,
    restore_backup,
    write_backup,
)
from obra_control.projects.store import InMemoryProjectStore


@pytest.fixture
def store(project):  # pylint: disable=redefined-outer-name
    s = InMemoryProjectStore()
    s.put(project)
    s.put(Project(id="proj_other", name="Otro"))
    return s


def test_export_payload(store):  # pylint: disable=redefined-outer-name
    payload = export_backup(store, Settings(money_decimals=MONEY_THOUSANDS))
    assert payload["version"] == BACKUP_VERSION
    assert payload["exportedAt"]
    assert payload["settings"]["money_decimals"] == MONEY_THOUSANDS
    assert {p["id"] for p in payload["projects"]} == {"proj_test", "proj_other"}


def test_round_trip_through_file(tmp_path, store, project):  # pylint: disable=redefined-outer-name
    settings = Settings(money_decimals=2, highlight_extra_qty=False)
    path = tmp_path / "out" / "backup.json"
    write_backup(export_backup(store, settings), path)

    target = InMemoryProjectStore()
    restored_settings, count = restore_backup(read_backup(path), target)
    assert count == 2
    assert restored_settings == settings
    assert target.get("proj_test") == project
    assert sorted(p.id for p in target.list_all()) == ["proj_other", "proj_test"]


def test_restore_upserts_existing(project):  # pylint: disable=redefined-outer-name
    target = InMemoryProjectStore()
    target.put(Project(id="proj_test", name="Versión vieja"))
    restore_backup({"projects": [project.to_dict()]}, target)
    assert target.get("proj_test").name == project.name


def test_restore_accepts_legacy_setting_keys():
    settings, count = restore_backup(
        {"settings": {"moneyDecimals": 2, "shiftPlannedBySuspensions": False}, "projects": []},
        InMemoryProjectStore(),
    )
    assert count == 0
    assert settings.money_decimals == 2
    assert settings.shift_planned_by_suspensions is False


def test_version_mismatch_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        restore_backup({"version": 99, "projects": []}, InMemoryProjectStore())
    assert "differs" in caplog.text


class TestInvalidBackups:
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"projects": {"id": "x"}},
            {"projects": [], "settings": [1, 2]},
            {"projects": ["not an object"]},
            {"projects": [{"name": "sin id"}]},
        ],
    )
    def test_rejected(self, payload):
        with pytest.raises(ValueError):
            restore_backup(payload, InMemoryProjectStore())

    def test_nothing_written_when_a_project_is_malformed(self, project):  # pylint: disable=redefined-outer-name
        target = InMemoryProjectStore()
        with pytest.raises(ValueError):
            restore_backup({"projects": [project.to_dict(), {"name": "sin id"}]}, target)
        assert target.list_all() == []

    def test_read_errors(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_backup(tmp_path / "missing.json")
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError):
            read_backup(bad)
        listed = tmp_path / "list.json"
        listed.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ValueError):
            read_backup(listed)
