"""SQLAlchemy基类"""
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """当前 UTC 时间（naive，与 DateTime 列保持一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(AsyncAttrs, DeclarativeBase):
    """所有模型的基类"""
    pass
