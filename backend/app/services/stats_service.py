"""统计聚合：漫画总数、分类总数、正在阅读数量"""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict

from app.crud.category import category_crud
from app.crud.comic import comic_crud
from app.services.defaults import DEFAULT_CATEGORY_ROWS
from app.services.schema_manager import SchemaManager


class StatsService:
    def __init__(self, schema: SchemaManager):
        self.schema = schema

    async def get_stats(self, db: AsyncSession) -> Dict[str, int]:
        """读路径：分类数失败时用默认分类数量，漫画计数失败时记为 0"""
        total_items = await self.schema.read_with_self_heal(
            "stats_total_items",
            lambda: comic_crud.count(db),
        )
        total_categories = await self.schema.read_with_self_heal(
            "stats_total_categories",
            lambda: category_crud.count(db),
        )
        reading = await self.schema.read_with_self_heal(
            "stats_reading_count",
            lambda: comic_crud.count_reading(db),
        )
        return {
            "totalItems": total_items.value_or(0),
            "totalCategories": total_categories.value_or(len(DEFAULT_CATEGORY_ROWS)),
            "readingCount": reading.value_or(0),
        }
