from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.routes.assistant import router as assistant_router
from api.routes.learning import router as learning_router
from core.config import settings
from core.errors import SkillRouteError
from core.exceptions import skillroute_error_handler
from core.logging import setup_logging
from services.llm_client import ModelClient, build_model_client
from services.path_store import PathStore
from utils.inflight import InFlightFlag
from utils.storage import JsonFileStorage, KeyValueStorage


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    yield


def create_app(
        model_client: Optional[ModelClient] = None,
        storage: Optional[KeyValueStorage] = None,
) -> FastAPI:
    app = FastAPI(title="SkillRoute Learning Paths", version="1.0.0", lifespan=lifespan)

    app.state.model_client = model_client if model_client is not None else build_model_client(settings)
    app.state.path_store = PathStore(storage or JsonFileStorage(settings.storage_path), settings.storage_key)
    app.state.generation_flag = InFlightFlag("learning path generation")
    app.state.assistant_flag = InFlightFlag("assistant")

    app.add_exception_handler(SkillRouteError, skillroute_error_handler)
    app.include_router(learning_router, tags=["learning"])
    app.include_router(assistant_router, tags=["assistant"])

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
