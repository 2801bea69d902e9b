# src/chore_ledger/storage/json_backend.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..core.codec import member_from_dict, member_to_dict, task_from_dict, task_to_dict
from ..core.models import Snapshot
from ..errors import StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


class JsonSnapshotBackend:
    """
    Single JSON file: {"tasks": [...], "members": [...]}.

    Same record shape as the browser local-storage the app started with.
    Writes go to a temp file and are moved into place with os.replace().
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Snapshot:
        if not self._path.exists():
            return Snapshot()
        try:
            raw = self._path.read_text("utf-8").strip()
        except OSError as e:
            raise StorageUnavailable(f"cannot read {self._path}: {e}") from e
        if not raw:
            return Snapshot()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageUnavailable(f"corrupt snapshot file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageUnavailable(f"corrupt snapshot file {self._path}: not an object")

        raw_tasks = data.get("tasks") or []
        raw_members = data.get("members") or []
        if not isinstance(raw_tasks, list) or not isinstance(raw_members, list):
            raise StorageUnavailable(
                f"corrupt snapshot file {self._path}: tasks and members must be lists"
            )

        try:
            tasks = [task_from_dict(t) for t in raw_tasks]
            members = [member_from_dict(m) for m in raw_members]
        except ValidationError as e:
            raise StorageUnavailable(f"corrupt snapshot file {self._path}: {e}") from e

        logger.info(
            "Loaded snapshot: %d tasks, %d members from %s", len(tasks), len(members), self._path
        )
        return Snapshot(tasks={t.id: t for t in tasks}, members={m.name: m for m in members})

    def save(self, snapshot: Snapshot) -> None:
        payload = {
            "tasks": [task_to_dict(t) for t in snapshot.tasks.values()],
            "members": [member_to_dict(m) for m in snapshot.members.values()],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageUnavailable(f"cannot write {self._path}: {e}") from e
        logger.debug("Saved snapshot to %s", self._path)
