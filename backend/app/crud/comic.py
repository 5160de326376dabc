"""漫画的CRUD操作

Review note:
- 读操作（列表/分组/计数）返回 StoreResult，由上层决定降级值；写操作直接抛出异常。
- 部分更新在 SQL 层用 COALESCE(:new, col) 合并，缺省字段保持原值。
- upsert 依赖方言的 ON CONFLICT（PostgreSQL / SQLite）。
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, literal, and_, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from typing import Any, Dict, List, Optional

from app.crud.result import StoreResult, capture_read
from app.models.base import utcnow
from app.models.category import Category
from app.models.comic import Comic

# PUT /api/comics/{id} 可合并的字段
MERGEABLE_FIELDS = ("title", "subcategory", "chapter", "rating", "tags", "description")

# 导入冲突时覆盖的字段，其余字段保留原行
UPSERT_UPDATE_FIELDS = ("chapter", "rating", "last_updated")

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CRUDComic:
    """漫画CRUD操作"""

    async def get(self, db: AsyncSession, comic_id: str) -> Optional[Comic]:
        """获取单个漫画"""
        result = await db.execute(
            select(Comic).where(Comic.comic_id == comic_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> StoreResult[List[Comic]]:
        """获取漫画列表（分类精确匹配 + 标题/描述模糊搜索，按最近更新排序）"""
        conditions = []
        if category_id:
            conditions.append(Comic.category_id == category_id)
        if search:
            conditions.append(or_(
                Comic.title.icontains(search, autoescape=True),
                Comic.description.icontains(search, autoescape=True),
            ))

        query = select(Comic)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Comic.last_updated.desc()).offset(offset).limit(limit)

        async def read():
            result = await db.execute(query)
            return list(result.scalars().all())

        return await capture_read(db, read)

    async def get_all_for_grouping(self, db: AsyncSession) -> StoreResult[List[Comic]]:
        """获取全部漫画（按分类名、子分类、标题排序；分类表缺失的分类按ID排）"""
        query = (
            select(Comic)
            .outerjoin(Category, Comic.category_id == Category.category_id)
            .order_by(
                func.coalesce(Category.name, Comic.category_id),
                Comic.category_id,
                func.coalesce(Comic.subcategory, ""),
                Comic.title,
            )
        )

        async def read():
            result = await db.execute(query)
            return list(result.scalars().all())

        return await capture_read(db, read)

    async def create(self, db: AsyncSession, comic_id: str, values: Dict[str, Any]) -> Comic:
        """创建漫画"""
        now = utcnow()
        db_obj = Comic(
            comic_id=comic_id,
            last_updated=now,
            created_at=now,
            **values,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        comic_id: str,
        values: Dict[str, Any],
    ) -> Optional[Comic]:
        """部分更新漫画（None 表示保持原值）"""
        merged = {}
        for field in MERGEABLE_FIELDS:
            column = Comic.__table__.c[field]
            merged[field] = func.coalesce(literal(values.get(field), column.type), column)

        result = await db.execute(
            update(Comic)
            .where(Comic.comic_id == comic_id)
            .values(**merged, last_updated=utcnow())
            .returning(Comic.comic_id),
            execution_options={"synchronize_session": False},
        )
        return await self._commit_and_reload(db, result.scalar_one_or_none())

    async def update_chapter(self, db: AsyncSession, comic_id: str, chapter: str) -> Optional[Comic]:
        """仅更新章节"""
        result = await db.execute(
            update(Comic)
            .where(Comic.comic_id == comic_id)
            .values(chapter=chapter, last_updated=utcnow())
            .returning(Comic.comic_id),
            execution_options={"synchronize_session": False},
        )
        return await self._commit_and_reload(db, result.scalar_one_or_none())

    async def _commit_and_reload(self, db: AsyncSession, comic_id: Optional[str]) -> Optional[Comic]:
        """提交后重新加载（覆盖会话中可能过期的同一对象）"""
        await db.commit()
        if comic_id is None:
            return None
        return await db.get(Comic, comic_id, populate_existing=True)

    async def delete(self, db: AsyncSession, comic_id: str) -> bool:
        """删除漫画"""
        result = await db.execute(
            delete(Comic).where(Comic.comic_id == comic_id)
        )
        await db.commit()
        return result.rowcount > 0

    async def upsert(self, db: AsyncSession, comic_id: str, values: Dict[str, Any]) -> Comic:
        """按 (title, category_id) 插入或更新，不提交事务"""
        dialect = db.get_bind().dialect.name
        insert_fn = _UPSERT_INSERTS.get(dialect)
        if insert_fn is None:
            raise NotImplementedError(f"upsert is not supported for dialect {dialect!r}")

        now = utcnow()
        stmt = insert_fn(Comic).values(
            comic_id=comic_id,
            last_updated=now,
            created_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["title", "category_id"],
            set_={field: getattr(stmt.excluded, field) for field in UPSERT_UPDATE_FIELDS},
        ).returning(Comic)

        result = await db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    async def count(self, db: AsyncSession) -> StoreResult[int]:
        """漫画总数"""
        async def read():
            result = await db.execute(select(func.count()).select_from(Comic))
            return int(result.scalar_one())

        return await capture_read(db, read)

    async def count_reading(self, db: AsyncSession) -> StoreResult[int]:
        """正在阅读的数量：chapter 非空且不为 "0" """
        async def read():
            result = await db.execute(
                select(func.count())
                .select_from(Comic)
                .where(
                    Comic.chapter.is_not(None),
                    Comic.chapter != "",
                    Comic.chapter != "0",
                )
            )
            return int(result.scalar_one())

        return await capture_read(db, read)


# 创建实例
comic_crud = CRUDComic()
