from __future__ import annotations

import logging
import math
import re
from datetime import date
from typing import Optional

from core.errors import ConfirmationRequired, JournalEntryRejected, PathNotFound, StepNotFound
from schemas.learning import JournalEntry, LearningPath, LearningPathStep
from services.normalizer import new_journal_id, now_ms
from services.path_store import PathStore

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class PathSession:
    """The currently displayed learning path and the mutations applied to it.

    Each mutation copies the whole record, bumps ``updatedAt`` and writes the
    copy back through the store.
    """

    def __init__(self, store: PathStore, path: LearningPath):
        self.store = store
        self.path = path

    @classmethod
    def open(
            cls,
            store: PathStore,
            path_id: Optional[str] = None,
            handoff: Optional[LearningPath] = None,
    ) -> "PathSession":
        if handoff is not None and handoff.id:
            # 저장소 사본 우선, 없으면 전달받은 값 사용
            return cls(store, store.get_by_id(handoff.id) or handoff)
        if path_id:
            stored = store.get_by_id(path_id)
            if stored is None:
                raise PathNotFound(path_id)
            return cls(store, stored)
        raise PathNotFound(path_id or "")

    def _commit(self, updated: LearningPath) -> LearningPath:
        updated.updatedAt = max(now_ms(), self.path.updatedAt + 1)
        self.store.update(updated)
        logger.debug("learning path %s updated at %s", updated.id, updated.updatedAt)
        self.path = updated
        return updated

    def _locate(self, phase_index: int, step_index: int) -> LearningPathStep:
        phases = self.path.phases
        if not 0 <= phase_index < len(phases) or not 0 <= step_index < len(phases[phase_index].steps):
            raise StepNotFound(f"No step at phase {phase_index}, position {step_index}.")
        return phases[phase_index].steps[step_index]

    def toggle_step_completion(
            self,
            phase_index: int,
            step_index: int,
            completed: bool,
            step_id: Optional[str] = None,
    ) -> LearningPath:
        step = self._locate(phase_index, step_index)
        if step_id is not None and step.id != step_id:
            raise StepNotFound(
                f"Step at phase {phase_index}, position {step_index} is no longer '{step_id}'."
            )

        updated = self.path.model_copy(deep=True)
        updated.phases[phase_index].steps[step_index].completed = completed
        return self._commit(updated)

    def set_step_completed(self, step_id: str, completed: bool) -> LearningPath:
        for p_idx, phase in enumerate(self.path.phases):
            for s_idx, step in enumerate(phase.steps):
                if step.id == step_id:
                    return self.toggle_step_completion(p_idx, s_idx, completed, step_id=step_id)
        raise StepNotFound(f"Step '{step_id}' not found in this learning path.")

    def add_journal_entry(self, entry_date: str, title: str, notes: str = "") -> JournalEntry:
        entry_date = (entry_date or "").strip()
        title = (title or "").strip()
        if not entry_date or not title:
            raise JournalEntryRejected("Please provide a date and title for your journal entry.")
        if not _ISO_DATE_RE.fullmatch(entry_date):
            raise JournalEntryRejected("Journal date must be a calendar date (YYYY-MM-DD).")
        try:
            entry_date = date.fromisoformat(entry_date).isoformat()
        except ValueError:
            raise JournalEntryRejected("Journal date must be a calendar date (YYYY-MM-DD).") from None

        ts = now_ms()
        entry = JournalEntry(id=new_journal_id(ts), date=entry_date, title=title, notes=(notes or "").strip())

        updated = self.path.model_copy(deep=True)
        updated.journalEntries = [*updated.journalEntries, entry]
        self._commit(updated)
        return entry

    def delete_journal_entry(self, entry_id: str, confirmed: bool = False) -> LearningPath:
        if not confirmed:
            raise ConfirmationRequired("Are you sure you want to delete this journal entry?")

        updated = self.path.model_copy(deep=True)
        updated.journalEntries = [e for e in updated.journalEntries if e.id != entry_id]
        return self._commit(updated)

    def completion_counts(self) -> tuple[int, int]:
        total = completed = 0
        for step in self.path.iter_steps():
            total += 1
            if step.completed:
                completed += 1
        return completed, total

    def progress(self) -> int:
        completed, total = self.completion_counts()
        if total == 0:
            return 0
        # 0.5는 올림
        return math.floor(completed / total * 100 + 0.5)
