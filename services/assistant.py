import logging
from typing import Optional

from core.config import Settings
from services.llm_client import GenerationConfig, ModelClient
from utils.templater import render_template

logger = logging.getLogger(__name__)

ASSISTANT_CONFIG = GenerationConfig(temperature=0.7, top_p=0.9, top_k=40)

UNAVAILABLE_MESSAGE = "AI Assistant is unavailable. API Key is not configured."
API_CONFIG_ISSUE_MESSAGE = "AI Assistant is temporarily unavailable due to an API configuration issue."
GENERIC_APOLOGY = "Sorry, I encountered an issue while processing your request."


def build_prompt(query: str, context: Optional[str] = None) -> str:
    return render_template(
        "assistant_prompt.j2",
        query=query,
        learning_context=(context or "").strip(),
    )


class Assistant:
    """Best-effort Q&A. Failures come back as apology text, never as exceptions."""

    def __init__(self, client: Optional[ModelClient], settings: Settings):
        self.client = client
        self.settings = settings

    async def ask(self, query: str, context: Optional[str] = None) -> str:
        if self.client is None:
            logger.error("Assistant query received without a configured API key.")
            return UNAVAILABLE_MESSAGE

        try:
            reply = await self.client.generate_content(
                model=self.settings.llm_model,
                contents=build_prompt(query, context),
                config=ASSISTANT_CONFIG,
            )
            return reply.text
        except Exception as exc:
            logger.exception("Error getting assistant response")
            if "api key" in str(exc).lower():
                return API_CONFIG_ISSUE_MESSAGE
            return GENERIC_APOLOGY
