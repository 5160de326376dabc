"""统计与诊断相关的Pydantic schemas"""
from pydantic import BaseModel


class StatsResponse(BaseModel):
    """统计响应"""
    totalItems: int
    totalCategories: int
    readingCount: int
