"""统计与诊断API"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.context import AppContext, get_context
from app.database import get_session
from app.schemas.stats import StatsResponse

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_session),
):
    """统计数据"""
    return await ctx.stats.get_stats(db)


@router.get("/debug/db")
async def debug_db(ctx: AppContext = Depends(get_context)):
    """数据库诊断信息（存储不可用时返回 500 和错误信息）"""
    status_code, payload = await ctx.diagnostics.debug_info()
    return JSONResponse(status_code=status_code, content=payload)
