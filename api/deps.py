from fastapi import Request

from core.config import settings
from services.assistant import Assistant
from services.path_generator import PathGenerator
from services.path_store import PathStore
from utils.inflight import InFlightFlag


def get_path_store(request: Request) -> PathStore:
    return request.app.state.path_store


def get_path_generator(request: Request) -> PathGenerator:
    return PathGenerator(request.app.state.model_client, settings)


def get_assistant(request: Request) -> Assistant:
    return Assistant(request.app.state.model_client, settings)


def get_generation_flag(request: Request) -> InFlightFlag:
    return request.app.state.generation_flag


def get_assistant_flag(request: Request) -> InFlightFlag:
    return request.app.state.assistant_flag
