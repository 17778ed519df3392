import logging

from schemas.common import CommonResponse
from schemas.learning import GenerationErrorKind, LearningPath, LearningPathInput
from services.normalizer import normalize_learning_path
from services.path_generator import PathGenerator
from services.path_store import PathStore

logger = logging.getLogger(__name__)

EMPTY_PATH_ERROR = (
    "The AI couldn't generate a path with the provided information. Please try refining your input."
)


async def build_learning_path(
        req: LearningPathInput,
        generator: PathGenerator,
        store: PathStore,
) -> CommonResponse[LearningPath]:
    """Generate, normalize and persist a path. Nothing is stored on any error."""
    result = await generator.generate(req)

    if result.error:
        return CommonResponse[LearningPath](
            success=False,
            code=result.errorKind.value if result.errorKind else "Error",
            message=result.error,
        )

    if not result.phases:
        return CommonResponse[LearningPath](
            success=False,
            code=GenerationErrorKind.INSUFFICIENT_INPUT.value,
            message=EMPTY_PATH_ERROR,
        )

    path = normalize_learning_path(result, target_goal=req.targetGoal)
    # 동기 저장: 루프 위에서 다른 변경과 겹치지 않는다 (파일이 작아 블로킹은 짧다)
    store.insert(path)
    logger.info("Created learning path %s (%d phases)", path.id, len(path.phases))

    return CommonResponse[LearningPath](
        success=True,
        code="Success",
        message="Learning path generated",
        data=path,
    )
