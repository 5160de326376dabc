"""FastAPI应用主文件.

Review note:
- create_app 构建应用上下文（配置 + 数据库句柄 + 资源组件），挂在 app.state.context。
- 启动时执行一次 ensure_schema；数据库不可用时只记录日志，读接口依旧可以降级返回。
- 所有错误响应统一为 {"error": "..."}，500 不返回内部错误信息。
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from app.config import Settings, settings as default_settings
from app.context import build_context
from app.crud.result import STORE_ERRORS
from app.services.errors import ComicLibraryError

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    ctx = app.state.context
    logger.info("启动漫画库后端... environment=%s", ctx.settings.ENVIRONMENT)

    ctx.database.ensure_sqlite_directory()
    try:
        report = await ctx.schema.ensure_schema()
        logger.info(
            "数据库初始化完成 seeded_categories=%s foreign_key=%s",
            report.seeded_categories,
            report.foreign_key_attached,
        )
    except STORE_ERRORS as exc:
        logger.error("数据库初始化失败，读接口将降级返回默认数据 reason=%s", str(exc)[:180])

    yield

    logger.info("关闭漫画库后端...")
    await ctx.database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """统一错误响应格式"""

    @app.exception_handler(ComicLibraryError)
    async def handle_domain_error(request: Request, exc: ComicLibraryError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": f"{location}: {message}" if location else message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled-error method=%s path=%s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """创建FastAPI应用"""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="漫画库后端API",
        lifespan=lifespan,
    )
    app.state.context = build_context(settings)

    # 配置CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """根路径"""
        return {
            "message": "Comic Library API",
            "version": settings.APP_VERSION,
            "endpoints": {
                "categories": "/api/categories",
                "comics": "/api/comics",
                "stats": "/api/stats",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health_check():
        """健康检查（不访问数据库）"""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    # 导入并注册路由
    from app.api import categories, comics, stats
    app.include_router(categories.router, prefix="/api", tags=["categories"])
    app.include_router(comics.router, prefix="/api", tags=["comics"])
    app.include_router(stats.router, prefix="/api", tags=["stats"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
    )
