"""Schemas包初始化"""
from app.schemas.category import CategoryResponse
from app.schemas.comic import (
    ComicCreate,
    ComicUpdate,
    ChapterUpdate,
    ComicImportRequest,
    ComicResponse,
    GroupedComicItem,
    ComicGroup,
    GroupedComicsResponse,
    ComicImportResponse,
)
from app.schemas.stats import StatsResponse

__all__ = [
    # Category schemas
    "CategoryResponse",
    # Comic schemas
    "ComicCreate",
    "ComicUpdate",
    "ChapterUpdate",
    "ComicImportRequest",
    "ComicResponse",
    "GroupedComicItem",
    "ComicGroup",
    "GroupedComicsResponse",
    "ComicImportResponse",
    # Stats schemas
    "StatsResponse",
]
