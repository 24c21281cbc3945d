"""Response envelope shared by every workflow endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


def ok(data=None) -> dict:
    return {"success": True, "data": data, "error": None}


def failure(message: str) -> dict:
    return {"success": False, "data": None, "error": message}
