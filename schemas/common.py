from __future__ import annotations
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class CommonResponse(BaseModel, Generic[T]):
    success: bool
    code: str
    message: str
    data: Optional[T] = None
