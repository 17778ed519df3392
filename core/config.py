from __future__ import annotations
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_TPL_DIR = BASE_DIR / "templates"
DEFAULT_STORAGE_PATH = BASE_DIR / "data" / "storage.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    llm_provider: Literal["openai", "gemini"] = "openai"
    llm_model: str = "gpt-4o-mini"
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    template_path: str = str(DEFAULT_TPL_DIR)
    storage_path: str = str(DEFAULT_STORAGE_PATH)
    storage_key: str = "skillRouteLearningPaths"

    resume_max_chars: int = 4000
    log_level: str = "INFO"

    @property
    def template_dir(self) -> str:

        p = Path(self.template_path)
        if not p.is_absolute():
            p = (BASE_DIR / p).resolve()
        return str(p)

    @property
    def api_key(self) -> Optional[str]:
        """Credential for the selected provider, None when blank or unset."""
        key = self.gemini_api_key if self.llm_provider == "gemini" else self.openai_api_key
        if key is None or not key.strip():
            return None
        return key.strip()


settings = Settings()
