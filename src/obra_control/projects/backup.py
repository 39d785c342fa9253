"""Backup/restore interchange.

A backup is a JSON document::

    {"version": 1, "exportedAt": "<ISO timestamp>", "settings": {...}, "projects": [...]}

Restoring merges the settings over the defaults and upserts every project
wholesale into the store.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from obra_control.core.models import Project
from obra_control.core.settings import Settings
from .store import ProjectStore

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


def export_backup(store: ProjectStore, settings: Settings) -> Dict[str, Any]:
    projects = store.list_all()
    logger.info("Exporting %d project(s)", len(projects))
    return {
        "version": BACKUP_VERSION,
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "settings": settings.to_dict(),
        "projects": [p.to_dict() for p in projects],
    }


def write_backup(payload: Mapping[str, Any], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def read_backup(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Backup file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Backup file is not valid JSON: {path}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Backup file must contain a JSON object: {path}")
    return data


def restore_backup(
    payload: Mapping[str, Any], store: ProjectStore, defaults: Settings = Settings()
) -> Tuple[Settings, int]:
    """Restore a backup into `store`.

    Returns:
        The restored settings and the number of projects written.

    Raises:
        ValueError: The payload has no project list or a project is malformed.
    """
    projects = payload.get("projects")
    if not isinstance(projects, list):
        raise ValueError("Invalid backup: 'projects' must be a list")
    version = payload.get("version")
    if version is not None and version != BACKUP_VERSION:
        logger.warning("Backup version %s differs from %s; restoring anyway", version, BACKUP_VERSION)

    settings_data = payload.get("settings") or {}
    if not isinstance(settings_data, dict):
        raise ValueError("Invalid backup: 'settings' must be an object")
    settings = defaults.merged(settings_data)
    parsed = []
    for data in projects:
        if not isinstance(data, dict):
            raise ValueError("Invalid backup: every project must be an object")
        parsed.append(Project.from_dict(data))
    for project in parsed:
        store.put(project)
    logger.info("Restored %d project(s)", len(parsed))
    return settings, len(parsed)


__all__ = ["BACKUP_VERSION", "export_backup", "write_backup", "read_backup", "restore_backup"]
