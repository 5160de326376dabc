"""初始化数据库：建表、写入默认分类，可选从 JSON 文件批量导入漫画

用法:
    python scripts/init_db.py
    python scripts/init_db.py --import comics.json
    python scripts/init_db.py --reset --import comics.json

JSON 文件可以是漫画数组，也可以是 {"comics": [...]}（与 /api/comics/import 相同）。
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from app.config import settings
from app.context import build_context
from app.models import Category, Comic


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description="Initialize the comic library database")
    parser.add_argument("--import", dest="import_file", type=Path, default=None,
                        help="JSON file with comics to upsert")
    parser.add_argument("--reset", action="store_true",
                        help="delete all comics and categories before seeding")
    parser.add_argument("--database-url", default=None,
                        help="override DATABASE_URL")
    return parser.parse_args(argv)


def load_comics(path: Path):
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("comics")
    return data


async def init_database(args) -> int:
    config = settings.model_copy(update={"DATABASE_URL": args.database_url}) if args.database_url else settings
    ctx = build_context(config)
    ctx.database.ensure_sqlite_directory()

    try:
        if args.reset:
            await ctx.schema.ensure_schema()
            async with ctx.database.session() as session:
                await session.execute(delete(Comic))
                await session.execute(delete(Category))
                await session.commit()
            print("🧹 已清空 comics / categories")

        report = await ctx.schema.ensure_schema()
        print(f"✅ 数据库表就绪，写入默认分类 {report.seeded_categories} 条")
        if not report.foreign_key_attached:
            print(f"⚠️  外键未附加: {report.foreign_key_error}")

        if args.import_file:
            comics = load_comics(args.import_file)
            async with ctx.database.session() as session:
                imported = await ctx.comics.bulk_import(session, comics)
            print(f"📚 已导入 {len(imported)} 条漫画")
    finally:
        await ctx.database.dispose()
    return 0


def main(argv=None) -> int:
    return asyncio.run(init_database(parse_arguments(argv)))


if __name__ == "__main__":
    sys.exit(main())
