"""Schema creation, category seeding and the best-effort foreign key step.

`ensure_schema` is idempotent: it runs at startup and again whenever a read
path finds one of its tables missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar
import logging

from sqlalchemy import func, insert, inspect, select, text

from app.crud.result import STORE_ERRORS, StoreResult, describe_error
from app.database import Database
from app.models.base import Base
from app.models.category import Category
from app.models.comic import Comic
from app.services.defaults import default_categories

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

COMIC_CATEGORY_FK_NAME = "fk_comics_category_id"

ADD_COMIC_CATEGORY_FK_SQL = (
    f"ALTER TABLE comics ADD CONSTRAINT {COMIC_CATEGORY_FK_NAME} "
    "FOREIGN KEY (category_id) REFERENCES categories (category_id) ON DELETE CASCADE"
)


@dataclass
class SchemaReport:
    seeded_categories: int = 0
    foreign_key_attached: bool = False
    foreign_key_error: Optional[str] = None


def _category_fk_exists(sync_conn) -> bool:
    for fk in inspect(sync_conn).get_foreign_keys(Comic.__tablename__):
        if fk.get("referred_table") == Category.__tablename__:
            return True
    return False


class SchemaManager:
    def __init__(self, database: Database):
        self.database = database

    async def ensure_schema(self) -> SchemaReport:
        """Create missing tables, seed categories when empty, then try the foreign key."""
        report = SchemaReport()

        async with self.database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=[
                Category.__table__,
                Comic.__table__,
            ])

            result = await conn.execute(select(func.count()).select_from(Category))
            if int(result.scalar_one()) == 0:
                rows = default_categories()
                await conn.execute(insert(Category), rows)
                report.seeded_categories = len(rows)
                logger.info("schema-seeded-categories count=%s", len(rows))

        attached, error = await self._attach_category_fk()
        report.foreign_key_attached = attached
        report.foreign_key_error = error
        return report

    async def _attach_category_fk(self):
        try:
            async with self.database.engine.begin() as conn:
                if await conn.run_sync(_category_fk_exists):
                    return True, None
                await conn.execute(text(ADD_COMIC_CATEGORY_FK_SQL))
        except STORE_ERRORS as exc:
            reason = describe_error(exc)
            logger.warning(
                "schema-fk-attach-failed dialect=%s reason=%s",
                self.database.dialect_name,
                reason,
            )
            return False, reason

        logger.info("schema-fk-attached name=%s", COMIC_CATEGORY_FK_NAME)
        return True, None

    async def read_with_self_heal(
        self,
        op: str,
        read: Callable[[], Awaitable[StoreResult[T]]],
    ) -> StoreResult[T]:
        """Run a read; when its table is missing, ensure the schema and retry once."""
        result = await read()
        if result.missing_table:
            logger.warning("store-table-missing op=%s action=ensure-schema", op)
            try:
                await self.ensure_schema()
            except STORE_ERRORS as exc:
                logger.warning("schema-self-heal-failed op=%s reason=%s", op, str(exc)[:180])
            else:
                result = await read()

        if not result.ok:
            logger.warning("store-read-degraded op=%s reason=%s", op, str(result.error)[:180])
        return result
