"""分类API"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.context import AppContext, get_context
from app.database import get_session
from app.schemas.category import CategoryResponse

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse])
async def get_categories(
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """获取所有分类（失败时返回默认分类）"""
    return await ctx.categories.list_categories(db)
