"""应用上下文：进程级的配置、数据库句柄与各资源组件

Review note:
- create_app 时构建一次并挂在 app.state.context 上，路由通过依赖注入拿到，
  资源组件在构造时接收数据库句柄，不再访问模块级全局连接池。
"""
from dataclasses import dataclass
from fastapi import Request

from app.config import Settings
from app.database import Database
from app.services.category_service import CategoryService
from app.services.comic_service import ComicService
from app.services.diagnostics_service import DiagnosticsService
from app.services.schema_manager import SchemaManager
from app.services.stats_service import StatsService


@dataclass
class AppContext:
    settings: Settings
    database: Database
    schema: SchemaManager
    categories: CategoryService
    comics: ComicService
    stats: StatsService
    diagnostics: DiagnosticsService


def build_context(settings: Settings) -> AppContext:
    """根据配置构建应用上下文"""
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    schema = SchemaManager(database)
    return AppContext(
        settings=settings,
        database=database,
        schema=schema,
        categories=CategoryService(schema),
        comics=ComicService(
            schema,
            default_page_size=settings.DEFAULT_PAGE_SIZE,
            max_page_size=settings.MAX_PAGE_SIZE,
        ),
        stats=StatsService(schema),
        diagnostics=DiagnosticsService(database, settings),
    )


def get_context(request: Request) -> AppContext:
    """获取应用上下文的依赖注入函数"""
    return request.app.state.context
