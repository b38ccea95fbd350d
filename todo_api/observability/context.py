"""
链路追踪上下文：通过 structlog contextvars 在协程间自动传播 trace_id / user_id

请求日志中间件在请求入口调用 bind_request，鉴权通过后调用 bind_user，
之后同一请求内的日志自动携带 trace_id 与 user_id。
"""

import uuid

import structlog


def bind_request(trace_id: str | None) -> str:
    """开始一个新请求：清空上下文并绑定 trace_id（为空时生成）"""
    trace_id = trace_id or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)
    return trace_id


def bind_user(user_id: str) -> None:
    """鉴权通过后绑定当前用户"""
    structlog.contextvars.bind_contextvars(user_id=user_id)
