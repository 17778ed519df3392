from fastapi import APIRouter, Depends

from api.deps import get_assistant, get_assistant_flag
from schemas.common import CommonResponse
from schemas.learning import AssistantReq, AssistantRes
from services.assistant import Assistant
from utils.inflight import InFlightFlag

router = APIRouter()


@router.post(
    "/assistant/ask",
    response_model=CommonResponse[AssistantRes]
)
async def ask_assistant_route(
        req: AssistantReq,
        assistant: Assistant = Depends(get_assistant),
        flag: InFlightFlag = Depends(get_assistant_flag),
):
    if not req.query.strip():
        return CommonResponse[AssistantRes](
            success=False, code="ValidationError", message="Please enter or say your question."
        )
    with flag.hold():
        answer = await assistant.ask(req.query, req.context)
    return CommonResponse[AssistantRes](
        success=True, code="Success", message="Assistant response", data=AssistantRes(answer=answer)
    )
