"""Persisted-state boundary: a key-value store of projects keyed by id."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Protocol

from obra_control.core.models import Project

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class ProjectStore(Protocol):
    """Opaque put/get/delete/list-all interface keyed by project id."""

    def put(self, project: Project) -> None: ...

    def get(self, project_id: str) -> Project: ...

    def delete(self, project_id: str) -> None: ...

    def list_all(self) -> List[Project]: ...


class InMemoryProjectStore:
    """Store holding serialized copies, so callers never share live objects."""

    def __init__(self) -> None:
        self._data: Dict[str, dict] = {}

    def put(self, project: Project) -> None:
        self._data[project.id] = project.to_dict()

    def get(self, project_id: str) -> Project:
        if project_id not in self._data:
            raise KeyError(f"Project not found: {project_id}")
        return Project.from_dict(self._data[project_id])

    def delete(self, project_id: str) -> None:
        self._data.pop(project_id, None)

    def list_all(self) -> List[Project]:
        return [Project.from_dict(d) for d in self._data.values()]


class JsonProjectStore:
    """One ``<project id>.json`` file per project in a directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _path(self, project_id: str) -> Path:
        if not _SAFE_ID.match(project_id) or project_id in (".", ".."):
            raise ValueError(f"Invalid project id: {project_id!r}")
        return self.root / f"{project_id}.json"

    @staticmethod
    def _load(path: Path) -> Project:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return Project.from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            raise ValueError(f"Corrupt project file {path}: {e}") from e

    def put(self, project: Project) -> None:
        path = self._path(project.id)
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(project.to_dict(), f, ensure_ascii=False, indent=2)
        tmp.replace(path)
        logger.debug("Saved project %s to %s", project.id, path)

    def get(self, project_id: str) -> Project:
        path = self._path(project_id)
        if not path.exists():
            raise KeyError(f"Project not found: {project_id}")
        return self._load(path)

    def delete(self, project_id: str) -> None:
        path = self._path(project_id)
        if path.exists():
            path.unlink()
            logger.info("Deleted project %s", project_id)

    def list_all(self) -> List[Project]:
        if not self.root.exists():
            return []
        return [self._load(p) for p in sorted(self.root.glob("*.json"))]


__all__ = ["ProjectStore", "InMemoryProjectStore", "JsonProjectStore"]
