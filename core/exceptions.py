import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from core.errors import (
    ConfirmationRequired, JournalEntryRejected, OperationInFlight, PathNotFound, SkillRouteError,
    StepNotFound,
)
from schemas.common import CommonResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    PathNotFound: status.HTTP_404_NOT_FOUND,
    StepNotFound: status.HTTP_404_NOT_FOUND,
    JournalEntryRejected: status.HTTP_400_BAD_REQUEST,
    ConfirmationRequired: status.HTTP_409_CONFLICT,
    OperationInFlight: status.HTTP_409_CONFLICT,
}


def _status_for(exc: SkillRouteError) -> int:
    for cls, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, cls):
            return code
    return status.HTTP_400_BAD_REQUEST


async def skillroute_error_handler(request: Request, exc: SkillRouteError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    body = CommonResponse(success=False, code=exc.code, message=exc.message)
    return JSONResponse(status_code=_status_for(exc), content=body.model_dump())
