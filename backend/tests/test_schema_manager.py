"""Tests for SchemaManager: table creation, seeding, best-effort foreign key and self-healing reads."""
from __future__ import annotations

import pytest
from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import OperationalError

from app.crud.comic import comic_crud
from app.crud.result import StoreResult
from app.models import Category, Comic
from app.services.defaults import DEFAULT_CATEGORY_ROWS

pytestmark = pytest.mark.anyio


async def _table_names(ctx):
    async with ctx.database.engine.connect() as conn:
        return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())


async def _category_count(ctx):
    async with ctx.database.session() as session:
        return (await session.execute(select(func.count()).select_from(Category))).scalar_one()


async def test_ensure_schema_creates_tables_and_seeds_once(ctx):
    assert {"categories", "comics"} <= set(await _table_names(ctx))
    assert await _category_count(ctx) == 16

    report = await ctx.schema.ensure_schema()

    assert report.seeded_categories == 0
    assert await _category_count(ctx) == 16


async def test_partial_seed_is_not_retried(ctx):
    async with ctx.database.session() as session:
        await session.execute(delete(Category).where(Category.category_id != "ngon"))
        await session.commit()

    report = await ctx.schema.ensure_schema()

    assert report.seeded_categories == 0
    assert await _category_count(ctx) == 1


async def test_seeded_rows_match_defaults(ctx):
    async with ctx.database.session() as session:
        rows = (await session.execute(select(Category))).scalars().all()

    by_id = {row.category_id: row for row in rows}
    for category_id, name, code, icon, color in DEFAULT_CATEGORY_ROWS:
        assert by_id[category_id].name == name
        assert by_id[category_id].code == code
        assert by_id[category_id].icon == icon
        assert by_id[category_id].color == color
        assert by_id[category_id].created_at is not None


async def test_foreign_key_failure_is_reported_not_raised(ctx, caplog):
    # SQLite cannot ALTER TABLE ... ADD CONSTRAINT, so the step always fails here
    with caplog.at_level("WARNING", logger="uvicorn.error"):
        report = await ctx.schema.ensure_schema()

    assert report.foreign_key_attached is False
    assert report.foreign_key_error
    assert any("schema-fk-attach-failed" in record.getMessage() for record in caplog.records)


async def test_read_recreates_missing_table(ctx, db):
    async with ctx.database.engine.begin() as conn:
        await conn.run_sync(Comic.__table__.drop)
    assert "comics" not in await _table_names(ctx)

    comics = await ctx.comics.list_comics(db)

    assert comics == []
    assert "comics" in await _table_names(ctx)


async def test_self_heal_gives_up_when_store_is_down(down_ctx):
    async with down_ctx.database.session() as session:
        result = await down_ctx.schema.read_with_self_heal(
            "list_comics",
            lambda: comic_crud.get_all(session),
        )

    assert isinstance(result, StoreResult)
    assert not result.ok
    assert result.value_or(["fallback"]) == ["fallback"]


async def test_ensure_schema_raises_when_store_is_down(down_ctx):
    with pytest.raises(OperationalError):
        await down_ctx.schema.ensure_schema()
