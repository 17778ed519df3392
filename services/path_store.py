from __future__ import annotations

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter

from schemas.learning import LearningPath
from utils.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "skillRouteLearningPaths"

_paths_adapter = TypeAdapter(List[LearningPath])


class PathStore:
    """Keyed collection of learning paths persisted as one JSON array under a single key.

    Every write re-serializes the whole collection. Read failures (missing,
    corrupted or unreadable data) are logged and treated as an empty store;
    write failures are logged and dropped.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def list(self) -> List[LearningPath]:
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return []
            return _paths_adapter.validate_python(json.loads(raw))
        except (OSError, ValueError):
            logger.exception("Error retrieving learning paths from storage key '%s'", self.key)
            return []

    def list_recent(self) -> List[LearningPath]:
        return sorted(self.list(), key=lambda p: p.createdAt, reverse=True)

    def _save(self, paths: List[LearningPath]) -> None:
        try:
            payload = json.dumps([p.model_dump(mode="json") for p in paths], ensure_ascii=False)
            self.storage.set_item(self.key, payload)
        except (OSError, ValueError):
            logger.exception("Error saving learning paths to storage key '%s'", self.key)

    def insert(self, path: LearningPath) -> None:
        paths = self.list()
        paths.append(path)
        self._save(paths)

    def update(self, path: LearningPath) -> None:
        paths = self.list()
        if not any(p.id == path.id for p in paths):
            logger.debug("update ignored, no learning path with id %s", path.id)
            return
        self._save([path if p.id == path.id else p for p in paths])

    def get_by_id(self, path_id: str) -> Optional[LearningPath]:
        return next((p for p in self.list() if p.id == path_id), None)

    def delete(self, path_id: str) -> None:
        paths = self.list()
        remaining = [p for p in paths if p.id != path_id]
        if len(remaining) == len(paths):
            return
        self._save(remaining)
