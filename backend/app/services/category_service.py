"""分类资源：只读列表，存储不可用时返回内置默认分类"""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, List

from app.crud.category import category_crud
from app.services.defaults import default_categories
from app.services.schema_manager import SchemaManager


class CategoryService:
    def __init__(self, schema: SchemaManager):
        self.schema = schema

    async def list_categories(self, db: AsyncSession) -> List[Any]:
        """按名称升序返回全部分类；任何失败都降级为默认分类"""
        result = await self.schema.read_with_self_heal(
            "list_categories",
            lambda: category_crud.get_all(db),
        )
        if not result.ok:
            return default_categories()
        return result.value
