"""分类相关的Pydantic schemas"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CategoryResponse(BaseModel):
    """分类响应"""
    category_id: str
    name: str
    code: str
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None  # 内置默认分类没有创建时间

    class Config:
        from_attributes = True
