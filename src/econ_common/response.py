"""Result envelopes.

``OperationResult`` is what every engine operation returns to its caller:
expected business-rule failures come back as ``success=False`` with the
error code and a readable message instead of an exception.

``ApiResponse`` is the HTTP envelope all API endpoints return:
{
    "code": 0,           // 0=success, non-0=error code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request
from starlette.responses import Response

from src.econ_common.errors import AppError


class OperationResult(BaseModel):
    success: bool
    code: int = 0
    message: str
    data: Any = None
    http_status: int = Field(default=200, exclude=True)

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, code=0, message=message, data=data)

    @classmethod
    def failure(cls, error: AppError) -> "OperationResult":
        return cls(
            success=False,
            code=error.code,
            message=error.message,
            data=None,
            http_status=error.http_status,
        )


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_dump(item) for item in data]
    return data


def result_response(result: OperationResult, request_id: str | None = None) -> ApiResponse:
    """Map an engine OperationResult onto the HTTP envelope."""
    data = _dump(result.data)
    if result.success:
        resp = ApiResponse(code=0, message=result.message, data=data)
    else:
        resp = error_response(result.code, result.message)
    if request_id:
        resp.request_id = request_id
    return resp


def api_result(result: OperationResult, request: Request, response: Response) -> ApiResponse:
    """Router helper: envelope plus the HTTP status the result carries."""
    response.status_code = result.http_status
    return result_response(result, getattr(request.state, "request_id", None))
