"""分类的CRUD操作"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List

from app.crud.result import StoreResult, capture_read
from app.models.category import Category


class CRUDCategory:
    """分类CRUD操作（只读）"""

    async def get_all(self, db: AsyncSession) -> StoreResult[List[Category]]:
        """获取所有分类（按名称排序）"""
        async def read():
            result = await db.execute(
                select(Category).order_by(Category.name)
            )
            return list(result.scalars().all())

        return await capture_read(db, read)

    async def count(self, db: AsyncSession) -> StoreResult[int]:
        """分类总数"""
        async def read():
            result = await db.execute(select(func.count()).select_from(Category))
            return int(result.scalar_one())

        return await capture_read(db, read)


# 创建实例
category_crud = CRUDCategory()
