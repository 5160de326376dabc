"""漫画相关的Pydantic schemas

Review note:
- 写入类 schema 的字段全部可选：必填校验在服务层完成，以便返回 400 而不是 422。
- chapter 允许客户端传数字，统一转成字符串保存。
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


class ComicCreate(BaseModel):
    """创建漫画"""
    title: Optional[str] = Field(None, max_length=500, description="标题")
    category_id: Optional[str] = Field(None, max_length=50, description="所属分类ID")
    subcategory: Optional[str] = Field(None, max_length=100, description="子分类")
    chapter: Optional[str] = Field(None, max_length=50, description="阅读进度")
    rating: Optional[str] = Field(None, max_length=20, description="评级")
    tags: Optional[List[str]] = None
    description: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class ComicUpdate(BaseModel):
    """更新漫画（缺省或 null 的字段保持原值）"""
    title: Optional[str] = Field(None, max_length=500)
    subcategory: Optional[str] = Field(None, max_length=100)
    chapter: Optional[str] = Field(None, max_length=50)
    rating: Optional[str] = Field(None, max_length=20)
    tags: Optional[List[str]] = None
    description: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class ChapterUpdate(BaseModel):
    """仅更新章节"""
    chapter: Optional[str] = Field(None, max_length=50)

    class Config:
        coerce_numbers_to_str = True


class ComicImportRequest(BaseModel):
    """批量导入请求（comics 的类型在服务层校验）"""
    comics: Any = None


class ComicResponse(BaseModel):
    """漫画响应"""
    comic_id: str
    title: str
    category_id: str
    subcategory: Optional[str] = None
    chapter: Optional[str] = None
    rating: str
    tags: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    last_updated: datetime
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def tags_default_empty(cls, value):
        return [] if value is None else value

    class Config:
        from_attributes = True


class GroupedComicItem(BaseModel):
    """分组视图中的条目"""
    id: str
    title: str
    chapter: Optional[str] = None
    rating: str
    tags: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    lastUpdated: datetime


class ComicGroup(BaseModel):
    """(分类, 子分类) 分组"""
    subcategory: str
    items: List[GroupedComicItem]


GroupedComicsResponse = Dict[str, List[ComicGroup]]


class ComicImportResponse(BaseModel):
    """批量导入响应"""
    message: str
    count: int
    imported: List[ComicResponse]
