"""
FastAPI 应用主入口
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorDatabase
from prometheus_client import make_asgi_app

from todo_api.api.health import router as health_router
from todo_api.api.todos import router as todos_router
from todo_api.api.users import router as users_router
from todo_api.config import get_settings
from todo_api.db.mongo import create_client, ensure_indexes
from todo_api.errors import register_exception_handlers
from todo_api.observability.logging_config import setup_logging
from todo_api.observability.metrics_middleware import MetricsMiddleware
from todo_api.observability.request_logger import RequestLoggerMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


def create_app(database: AsyncIOMotorDatabase | None = None) -> FastAPI:
    """
    创建应用。

    database 为空时在 lifespan 中按配置连接 MongoDB；
    传入时直接使用（测试注入内存库），由调用方负责索引与生命周期。
    """

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        """应用生命周期：启动时预检 MongoDB 并建索引，关闭时释放连接"""
        log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)
        if database is not None:
            yield
            return

        client = create_client(settings)
        db = client[settings.MONGODB_DB]

        # ── Warm-up：Fail Fast，依赖不可用时拒绝启动 ──
        await db.command("ping")
        log.info("MongoDB 连接正常", db=settings.MONGODB_DB)
        await ensure_indexes(db)

        application.state.db = db
        yield

        client.close()
        log.info("应用关闭，资源已释放")

    application = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    if database is not None:
        application.state.db = database

    register_exception_handlers(application)

    # ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(RequestLoggerMiddleware)

    # ── Prometheus 指标端点 ──
    application.mount("/metrics", make_asgi_app())

    # ── 路由注册 ──
    application.include_router(health_router)
    application.include_router(users_router)
    application.include_router(todos_router)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("todo_api.main:app", host="0.0.0.0", port=settings.APP_PORT)
