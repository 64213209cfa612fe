from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppError(Exception):
    status_code = 500
    detail = "internal_error"

    def __init__(self, detail: Optional[str] = None, **extra: Any):
        self.detail = detail or self.detail
        self.extra: Dict[str, Any] = extra
        super().__init__(self.detail)


class ConfigurationError(AppError):
    """Identity or storage provider is not configured."""

    status_code = 503
    detail = "not_configured"

    def __init__(self, detail: Optional[str] = None, **extra: Any):
        extra.setdefault("setup_required", True)
        super().__init__(detail, **extra)


class ValidationError(AppError):
    status_code = 400
    detail = "invalid_request"


class AuthError(AppError):
    status_code = 401
    detail = "unauthorized"


class NotFoundError(AppError):
    status_code = 404
    detail = "not_found"


class AnalysisFailed(AppError):
    status_code = 500
    detail = "analysis_failed"


class TransientDependencyError(AppError):
    """Store or analyzer unreachable or too slow."""

    status_code = 500
    detail = "dependency_unavailable"


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, **exc.extra})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "invalid_request", "errors": errors})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
