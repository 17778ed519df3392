from __future__ import annotations

import random
import string
import time
from typing import List, Optional, Set

from schemas.learning import (
    LearningPath, LearningPathPhase, LearningPathStep, PathGenerationResult,
)

DEFAULT_LEARNING_PATH_TITLE = "Your Personalized Learning Path"

_BASE36 = string.digits + string.ascii_lowercase


def now_ms() -> int:
    return int(time.time() * 1000)


def random_suffix(length: int = 7) -> str:
    return "".join(random.choice(_BASE36) for _ in range(length))


def new_path_id(ts: int) -> str:
    return f"path-{ts}-{random_suffix()}"


def new_journal_id(ts: int) -> str:
    return f"journal-{ts}-{random_suffix()}"


def _step_id(raw_id: Optional[str], created_at: int, p_idx: int, s_idx: int, seen: Set[str]) -> str:
    sid = (raw_id or "").strip()
    # 누락/중복 id는 생성 시각 + 위치로 대체
    if not sid or sid in seen:
        sid = f"step_{created_at}_{p_idx}_{s_idx}"
    seen.add(sid)
    return sid


def normalize_learning_path(
        result: PathGenerationResult,
        target_goal: str = "",
        created_at: Optional[int] = None,
) -> LearningPath:
    """Build the client-owned path from a successful generation result."""
    ts = created_at if created_at is not None else now_ms()
    seen: Set[str] = set()

    phases: List[LearningPathPhase] = []
    for p_idx, phase in enumerate(result.phases):
        steps = [
            LearningPathStep(
                id=_step_id(step.id, ts, p_idx, s_idx, seen),
                title=step.title,
                description=step.description,
                resources=list(step.resources),
                duration=step.duration,
                completed=False,
            )
            for s_idx, step in enumerate(phase.steps)
        ]
        phases.append(LearningPathPhase(phaseTitle=phase.phaseTitle, steps=steps))

    fallback_title = f"{target_goal.strip()} Learning Path" if target_goal.strip() else DEFAULT_LEARNING_PATH_TITLE

    return LearningPath(
        id=new_path_id(ts),
        pathTitle=(result.pathTitle or "").strip() or fallback_title,
        phases=phases,
        createdAt=ts,
        updatedAt=ts,
        journalEntries=[],
    )
