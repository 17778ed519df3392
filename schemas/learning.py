# schemas/learning.py
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class LearningPathInput(BaseModel):
    currentSkills: str
    targetGoal: str
    performanceSummary: str = ""
    resumeText: Optional[str] = None

    @field_validator("resumeText")
    @classmethod
    def _drop_blank_resume(cls, v: Optional[str]) -> Optional[str]:
        # 빈 이력서는 요청에서 제외
        if v is None or not v.strip():
            return None
        return v


class LearningPathStep(BaseModel):
    id: str
    title: str
    description: str = ""
    resources: List[str] = Field(default_factory=list)
    duration: str = ""
    completed: bool = False


class LearningPathPhase(BaseModel):
    phaseTitle: str
    steps: List[LearningPathStep] = Field(default_factory=list)


class JournalEntry(BaseModel):
    id: str
    date: str
    title: str
    notes: str = ""


class LearningPath(BaseModel):
    id: str
    pathTitle: str
    phases: List[LearningPathPhase] = Field(default_factory=list)
    createdAt: int
    updatedAt: int
    journalEntries: List[JournalEntry] = Field(default_factory=list)

    def iter_steps(self):
        for phase in self.phases:
            yield from phase.steps


# 모델 응답 원본 계약 (정규화 전)
class RawLearningPathStep(BaseModel):
    model_config = {"extra": "ignore"}

    id: Optional[str] = None
    title: str = ""
    description: str = ""
    resources: List[str] = Field(default_factory=list)
    duration: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # 숫자 id는 문자열로
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "description", "duration", mode="before")
    @classmethod
    def _null_text(cls, v):
        return "" if v is None else v

    @field_validator("resources", mode="before")
    @classmethod
    def _null_resources(cls, v):
        return [] if v is None else v


class RawLearningPathPhase(BaseModel):
    model_config = {"extra": "ignore"}

    phaseTitle: str = ""
    steps: List[RawLearningPathStep] = Field(default_factory=list)


class GeminiLearningPathResponse(BaseModel):
    model_config = {"extra": "ignore"}

    pathTitle: str = Field(min_length=1)
    phases: List[RawLearningPathPhase]
    error: Optional[str] = None


class GenerationErrorKind(str, Enum):
    CONFIG_MISSING = "ConfigMissing"
    PARSE_FAILURE = "ParseFailure"
    SCHEMA_INVALID = "SchemaInvalid"
    MODEL_INVOCATION_FAILURE = "ModelInvocationFailure"
    INSUFFICIENT_INPUT = "InsufficientInput"


class PathGenerationResult(BaseModel):
    pathTitle: str = ""
    phases: List[RawLearningPathPhase] = Field(default_factory=list)
    error: Optional[str] = None
    errorKind: Optional[GenerationErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StepCompletionReq(BaseModel):
    completed: bool


class JournalEntryReq(BaseModel):
    date: str = ""
    title: str = ""
    notes: str = ""


class ProgressRes(BaseModel):
    pathId: str
    progress: int
    completedSteps: int
    totalSteps: int


class AssistantReq(BaseModel):
    query: str
    context: Optional[str] = None


class AssistantRes(BaseModel):
    answer: str
