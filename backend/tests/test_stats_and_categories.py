"""Tests for the category listing fallback and the stats aggregator."""
from __future__ import annotations

import pytest

from app.models import Comic
from app.services.defaults import default_categories

pytestmark = pytest.mark.anyio


async def test_categories_are_ordered_by_name(ctx, db):
    categories = await ctx.categories.list_categories(db)

    names = [c.name for c in categories]
    assert len(names) == 16
    assert names == sorted(names)


async def test_categories_fall_back_to_defaults_when_store_is_down(down_ctx):
    async with down_ctx.database.session() as session:
        categories = await down_ctx.categories.list_categories(session)

    assert categories == default_categories()
    assert len(categories) == 16


async def test_default_categories_return_fresh_copies():
    defaults = default_categories()
    defaults[0]["name"] = "changed"

    assert len({c["category_id"] for c in defaults}) == 16
    assert default_categories()[0]["name"] == "HỌC ĐƯỜNG"


async def test_stats_on_empty_comics(ctx, db):
    assert await ctx.stats.get_stats(db) == {
        "totalItems": 0,
        "totalCategories": 16,
        "readingCount": 0,
    }


async def test_stats_reading_count_skips_unstarted(ctx, db):
    for index, chapter in enumerate([None, "", "0", "1", "12.5", "end"]):
        db.add(Comic(comic_id=f"comic_{index}", title=f"T{index}", category_id="ngon", chapter=chapter))
    await db.commit()

    stats = await ctx.stats.get_stats(db)

    assert stats["totalItems"] == 6
    assert stats["readingCount"] == 3


async def test_stats_when_store_is_down(down_ctx):
    async with down_ctx.database.session() as session:
        stats = await down_ctx.stats.get_stats(session)

    assert stats == {"totalItems": 0, "totalCategories": 16, "readingCount": 0}
