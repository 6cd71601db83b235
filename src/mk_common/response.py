"""Unified API error envelope.

Errors raised as AppError are rendered in this format:
{
    "code": 2003,            // non-0 = error code (see errors.py)
    "message": "Product P1 is out of stock: requested 3, available 1",
    "data": null,
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    if request_id is None:
        return ApiResponse(code=code, message=message, data=None)
    return ApiResponse(code=code, message=message, data=None, request_id=request_id)
