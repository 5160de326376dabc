"""漫画管理API"""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.context import AppContext, get_context
from app.database import get_session
from app.schemas.comic import (
    ComicCreate,
    ComicUpdate,
    ChapterUpdate,
    ComicImportRequest,
    ComicResponse,
    GroupedComicsResponse,
    ComicImportResponse,
)

router = APIRouter()


def _query_int(value: Optional[str]) -> Optional[int]:
    """无法解析的分页参数视为未提供"""
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.get("/comics", response_model=List[ComicResponse])
async def get_comics(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """获取漫画列表（可按分类筛选、按标题/描述搜索，分页）"""
    return await ctx.comics.list_comics(
        db,
        category_id=category,
        search=search,
        page=_query_int(page),
        limit=_query_int(limit),
    )


@router.get("/comics/grouped", response_model=GroupedComicsResponse)
async def get_grouped_comics(
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """按分类和子分类分组的漫画"""
    return await ctx.comics.list_grouped(db)


@router.post("/comics/import", response_model=ComicImportResponse)
async def import_comics(
    import_in: ComicImportRequest,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """批量导入（按标题+分类 upsert）"""
    imported = await ctx.comics.bulk_import(db, import_in.comics)
    return {
        "message": f"Successfully imported {len(imported)} comics",
        "count": len(imported),
        "imported": imported,
    }


@router.get("/comics/{comic_id}", response_model=ComicResponse)
async def get_comic(
    comic_id: str,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """获取单个漫画"""
    return await ctx.comics.get_comic(db, comic_id)


@router.post("/comics", response_model=ComicResponse, status_code=201)
async def create_comic(
    comic_in: ComicCreate,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """创建漫画"""
    return await ctx.comics.create_comic(db, comic_in)


@router.put("/comics/{comic_id}", response_model=ComicResponse)
async def update_comic(
    comic_id: str,
    comic_in: ComicUpdate,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """更新漫画（未提供的字段保持不变）"""
    return await ctx.comics.update_comic(db, comic_id, comic_in)


@router.patch("/comics/{comic_id}/chapter", response_model=ComicResponse)
async def update_chapter(
    comic_id: str,
    chapter_in: ChapterUpdate,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """仅更新章节"""
    return await ctx.comics.patch_chapter(db, comic_id, chapter_in.chapter)


@router.delete("/comics/{comic_id}", status_code=204)
async def delete_comic(
    comic_id: str,
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """删除漫画"""
    await ctx.comics.delete_comic(db, comic_id)
    return Response(status_code=204)
