"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "todo_api_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "todo_api_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 200, 500, 1000, 2000],
)

# ── 鉴权指标 ──

AUTH_FAILURE_TOTAL = Counter(
    "todo_api_auth_failure_total",
    "鉴权失败总数",
    ["reason"],  # missing_token/invalid_token/revoked_token
)

# ── 业务指标 ──

TODO_OPERATION_TOTAL = Counter(
    "todo_api_todo_operation_total",
    "Todo 操作总数",
    ["operation"],  # create/update/delete
)

USER_OPERATION_TOTAL = Counter(
    "todo_api_user_operation_total",
    "用户操作总数",
    ["operation", "status"],  # register/login/logout, success/failure
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "todo_api_error_total",
    "错误总数",
    ["error_type"],  # validation/store
)
