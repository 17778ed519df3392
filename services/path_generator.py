from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from core.config import Settings
from schemas.learning import (
    GeminiLearningPathResponse, GenerationErrorKind, LearningPathInput, PathGenerationResult,
)
from services.llm_client import GenerationConfig, ModelClient, RESPONSE_FORMAT_JSON
from utils.jsonutils import is_parse_failure, parse_model_json
from utils.templater import render_template

logger = logging.getLogger(__name__)

INSUFFICIENT_INFO_ERROR = (
    "Insufficient information provided. Please provide more details about your current skills "
    "and target role to generate a path."
)
API_KEY_MISSING_ERROR = (
    "AI API key is not configured. Please ensure the API key environment variable is set."
)
MALFORMED_RESPONSE_ERROR = (
    "AI response was not in the expected format (e.g., missing phases or path title)."
)

PATH_GENERATION_CONFIG = GenerationConfig(
    temperature=0.5,
    top_p=0.9,
    top_k=30,
    response_format=RESPONSE_FORMAT_JSON,
)

_AUTH_HINTS = ("api key", "permission denied", "authentication")


def _error_result(kind: GenerationErrorKind, error: str, title: str) -> PathGenerationResult:
    return PathGenerationResult(pathTitle=title, phases=[], error=error, errorKind=kind)


def _describe_model_error(exc: Exception) -> str:
    message = str(exc) or "An unknown error occurred while generating the learning path."
    lowered = message.lower()
    if any(hint in lowered for hint in _AUTH_HINTS):
        message = (
            f"AI API key is invalid, missing, or lacks permissions: {message}. "
            "Please verify the API key environment variable and API console settings."
        )
    return f"AI API Error: {message}"


def build_prompt(req: LearningPathInput, resume_max_chars: int = 4000) -> str:
    resume = req.resumeText or ""
    return render_template(
        "learning_path_prompt.j2",
        current_skills=req.currentSkills,
        target_goal=req.targetGoal,
        performance_summary=req.performanceSummary,
        resume_excerpt=resume[:resume_max_chars],
        resume_truncated=len(resume) > resume_max_chars,
        insufficient_info_error=INSUFFICIENT_INFO_ERROR,
    )


def validate_response(parsed: Any) -> PathGenerationResult:
    """Turn a decoded model payload into a result, rejecting half-valid shapes."""
    if isinstance(parsed, dict) and parsed.get("error") and not parsed.get("phases"):
        kind = (GenerationErrorKind.PARSE_FAILURE if is_parse_failure(parsed)
                else GenerationErrorKind.INSUFFICIENT_INPUT)
        logger.warning("Model returned an error payload (%s): %s", kind.value, parsed["error"])
        return _error_result(kind, str(parsed["error"]), str(parsed.get("pathTitle") or "Error Creating Path"))

    try:
        raw = GeminiLearningPathResponse.model_validate(parsed)
    except ValidationError as exc:
        logger.error("Model response missing 'phases', 'pathTitle', or is malformed: %s", exc)
        return _error_result(
            GenerationErrorKind.SCHEMA_INVALID, MALFORMED_RESPONSE_ERROR, "Error: Malformed AI Response",
        )

    return PathGenerationResult(pathTitle=raw.pathTitle, phases=raw.phases)


class PathGenerator:
    def __init__(self, client: Optional[ModelClient], settings: Settings):
        self.client = client
        self.settings = settings

    async def generate(self, req: LearningPathInput) -> PathGenerationResult:
        if self.client is None:
            logger.error("Path generation requested without a configured API key.")
            return _error_result(
                GenerationErrorKind.CONFIG_MISSING, API_KEY_MISSING_ERROR, "Error: API Key Missing",
            )

        prompt = build_prompt(req, self.settings.resume_max_chars)

        try:
            reply = await self.client.generate_content(
                model=self.settings.llm_model,
                contents=prompt,
                config=PATH_GENERATION_CONFIG,
            )
        except Exception as exc:
            logger.exception("Error generating learning path with model '%s'", self.settings.llm_model)
            return _error_result(
                GenerationErrorKind.MODEL_INVOCATION_FAILURE, _describe_model_error(exc),
                "Error: AI Service Failure",
            )

        return validate_response(parse_model_json(reply.text))
