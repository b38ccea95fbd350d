"""
错误分类 + HTTP 映射

所有业务错误继承 AppError（即 HTTPException），在处理函数边界直接抛出，
由 register_exception_handlers 注册的处理器统一转换为 JSON 响应：

- ValidationFailed / DuplicateEmail / InvalidCredentials → 400
- InvalidId / NotFound → 404（越权访问与不存在不可区分）
- Unauthenticated → 401，响应体固定为 {}
- 请求体校验失败（RequestValidationError）→ 400，而非 FastAPI 默认的 422
- 存储层异常（PyMongoError）→ 400，记录错误日志
"""

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from todo_api.observability.metrics import ERROR_TOTAL

log = structlog.get_logger()


class AppError(HTTPException):
    """业务错误基类"""

    status_code = 400
    default_detail = "bad request"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationFailed(AppError):
    status_code = 400
    default_detail = "validation failed"


class DuplicateEmail(AppError):
    status_code = 400
    default_detail = "email already registered"


class InvalidCredentials(AppError):
    status_code = 400
    default_detail = "invalid credentials"


class InvalidId(AppError):
    status_code = 404

    def __init__(self, object_id: str):
        super().__init__(f"Invalid Object Id: {object_id}")


class NotFound(AppError):
    status_code = 404

    def __init__(self, object_id: str):
        super().__init__(f"No Todo item found matching the given object id: {object_id}")


class Unauthenticated(AppError):
    status_code = 401
    default_detail = "unauthenticated"


async def _unauthenticated_handler(request: Request, exc: Unauthenticated) -> JSONResponse:
    return JSONResponse(status_code=401, content={})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    ERROR_TOTAL.labels(error_type="validation").inc()
    # 不回显 input / ctx：可能包含明文密码或无法编码的字符
    detail = [{k: v for k, v in e.items() if k in ("type", "loc", "msg")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(detail)})


async def _store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    ERROR_TOTAL.labels(error_type="store").inc()
    log.error("存储层异常", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(status_code=400, content={"detail": "store operation failed"})


def register_exception_handlers(app: FastAPI) -> None:
    """注册错误 → HTTP 响应的转换处理器"""
    app.add_exception_handler(Unauthenticated, _unauthenticated_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(PyMongoError, _store_error_handler)
