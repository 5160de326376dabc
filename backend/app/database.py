"""数据库连接和会话管理

Review note:
- 引擎与会话工厂由 `Database` 持有，在 create_app 时创建一次并挂在 app.state 上，
  不再使用模块级全局引擎。
- 每次操作通过 `async with database.session()` 获取会话，任何退出路径都会归还连接。
"""
from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator
import logging
import os

logger = logging.getLogger("uvicorn.error")


def _engine_options(url: str) -> dict:
    """按方言生成引擎参数（SQLite 需要关闭线程检查，内存库需共享单连接）"""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}

    options = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


class Database:
    """进程级数据库句柄：引擎（连接池）+ 会话工厂"""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **_engine_options(url))
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def session(self) -> AsyncSession:
        """新建会话，调用方使用 async with 管理生命周期"""
        return self.session_maker()

    def ensure_sqlite_directory(self) -> None:
        """SQLite 文件库：确保所在目录存在"""
        parsed = make_url(self.url)
        if parsed.get_backend_name() != "sqlite" or parsed.database in (None, "", ":memory:"):
            return
        try:
            os.makedirs(os.path.dirname(os.path.abspath(parsed.database)), exist_ok=True)
        except OSError as exc:
            logger.warning("sqlite-directory-unavailable path=%s reason=%s", parsed.database, exc)

    async def dispose(self) -> None:
        """关闭连接池"""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """从应用上下文获取数据库句柄的依赖注入函数"""
    return request.app.state.context.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话的依赖注入函数"""
    async with get_database(request).session() as session:
        try:
            yield session
        finally:
            await session.close()
