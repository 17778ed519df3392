from typing import List

from fastapi import APIRouter, Depends

from api.deps import get_generation_flag, get_path_generator, get_path_store
from core.errors import ConfirmationRequired, PathNotFound
from schemas.common import CommonResponse
from schemas.learning import (
    JournalEntry, JournalEntryReq, LearningPath, LearningPathInput, ProgressRes, StepCompletionReq,
)
from services.learning_planner import build_learning_path
from services.path_generator import PathGenerator
from services.path_session import PathSession
from services.path_store import PathStore
from utils.inflight import InFlightFlag

router = APIRouter()

# 저장소를 수정하는 라우트는 async def: await 없이 읽기-수정-쓰기가 이벤트 루프에서 한 번에 실행된다


@router.post(
    "/generate-learning-path",
    response_model=CommonResponse[LearningPath]
)
async def generate_learning_path_route(
        req: LearningPathInput,
        generator: PathGenerator = Depends(get_path_generator),
        store: PathStore = Depends(get_path_store),
        flag: InFlightFlag = Depends(get_generation_flag),
):
    with flag.hold():
        return await build_learning_path(req, generator, store)


@router.get(
    "/learning-paths",
    response_model=CommonResponse[List[LearningPath]]
)
def list_learning_paths(store: PathStore = Depends(get_path_store)):
    return CommonResponse[List[LearningPath]](
        success=True, code="Success", message="Saved learning paths", data=store.list_recent()
    )


@router.get(
    "/learning-paths/{path_id}",
    response_model=CommonResponse[LearningPath]
)
def get_learning_path(path_id: str, store: PathStore = Depends(get_path_store)):
    session = PathSession.open(store, path_id=path_id)
    return CommonResponse[LearningPath](
        success=True, code="Success", message="Learning path", data=session.path
    )


@router.delete(
    "/learning-paths/{path_id}",
    response_model=CommonResponse
)
async def delete_learning_path(path_id: str, confirm: bool = False, store: PathStore = Depends(get_path_store)):
    if not confirm:
        raise ConfirmationRequired(
            "Are you sure you want to delete this learning path? This action cannot be undone."
        )
    if store.get_by_id(path_id) is None:
        raise PathNotFound(path_id)
    store.delete(path_id)
    return CommonResponse(success=True, code="Success", message="Learning path deleted")


@router.get(
    "/learning-paths/{path_id}/progress",
    response_model=CommonResponse[ProgressRes]
)
def get_progress(path_id: str, store: PathStore = Depends(get_path_store)):
    session = PathSession.open(store, path_id=path_id)
    completed, total = session.completion_counts()
    return CommonResponse[ProgressRes](
        success=True,
        code="Success",
        message="Progress",
        data=ProgressRes(pathId=path_id, progress=session.progress(), completedSteps=completed, totalSteps=total),
    )


@router.patch(
    "/learning-paths/{path_id}/steps/{step_id}",
    response_model=CommonResponse[LearningPath]
)
async def set_step_completion(
        path_id: str,
        step_id: str,
        req: StepCompletionReq,
        store: PathStore = Depends(get_path_store),
):
    session = PathSession.open(store, path_id=path_id)
    path = session.set_step_completed(step_id, req.completed)
    return CommonResponse[LearningPath](success=True, code="Success", message="Step updated", data=path)


@router.post(
    "/learning-paths/{path_id}/journal-entries",
    response_model=CommonResponse[JournalEntry]
)
async def add_journal_entry(path_id: str, req: JournalEntryReq, store: PathStore = Depends(get_path_store)):
    session = PathSession.open(store, path_id=path_id)
    entry = session.add_journal_entry(req.date, req.title, req.notes)
    return CommonResponse[JournalEntry](success=True, code="Success", message="Journal entry added", data=entry)


@router.delete(
    "/learning-paths/{path_id}/journal-entries/{entry_id}",
    response_model=CommonResponse[LearningPath]
)
async def delete_journal_entry(
        path_id: str,
        entry_id: str,
        confirm: bool = False,
        store: PathStore = Depends(get_path_store),
):
    session = PathSession.open(store, path_id=path_id)
    path = session.delete_journal_entry(entry_id, confirmed=confirm)
    return CommonResponse[LearningPath](success=True, code="Success", message="Journal entry deleted", data=path)
