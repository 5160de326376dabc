"""Comic resource: CRUD, filtered listing, grouped view and bulk import.

Reads degrade (empty list / empty mapping) when the store fails; writes
raise `ValidationError` / `NotFoundError`, or let store errors propagate to
the application's 500 handler.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.comic import comic_crud
from app.crud.result import rollback_quietly
from app.models.comic import Comic
from app.schemas.comic import ComicCreate, ComicUpdate
from app.services.errors import NotFoundError, ValidationError
from app.services.schema_manager import SchemaManager
from app.utils.ids import generate_comic_id

logger = logging.getLogger("uvicorn.error")

COMIC_NOT_FOUND = "Comic not found"


def _insert_values(payload: ComicCreate) -> Dict[str, Any]:
    return {
        "title": payload.title,
        "category_id": payload.category_id,
        "subcategory": payload.subcategory or "",
        "chapter": payload.chapter if payload.chapter is not None else "",
        "rating": payload.rating or "none",
        "tags": list(payload.tags or []),
        "description": payload.description or "",
    }


def _require_title_and_category(payload: ComicCreate) -> None:
    if not payload.title or not payload.category_id:
        raise ValidationError("Title and category_id are required")


def _grouped_item(comic: Comic) -> Dict[str, Any]:
    return {
        "id": comic.comic_id,
        "title": comic.title,
        "chapter": comic.chapter,
        "rating": comic.rating,
        "tags": comic.tags or [],
        "description": comic.description,
        "lastUpdated": comic.last_updated,
    }


class ComicService:
    def __init__(self, schema: SchemaManager, default_page_size: int = 50, max_page_size: int = 200):
        self.schema = schema
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def list_comics(
        self,
        db: AsyncSession,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = None,
    ) -> List[Comic]:
        page, limit = self._normalize_paging(page, limit)

        result = await self.schema.read_with_self_heal(
            "list_comics",
            lambda: comic_crud.get_all(
                db,
                category_id=category_id,
                search=search,
                offset=(page - 1) * limit,
                limit=limit,
            ),
        )
        return result.value_or([])

    def _normalize_paging(self, page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
        """缺省或非法的分页参数回退到默认值，limit 不超过上限"""
        if page is None or page < 1:
            page = 1
        if limit is None or limit < 1:
            limit = self.default_page_size
        return page, min(limit, self.max_page_size)

    async def list_grouped(self, db: AsyncSession) -> Dict[str, List[Dict[str, Any]]]:
        """{category_id: [{subcategory, items}]}, rows arrive sorted by category, subcategory, title."""
        result = await self.schema.read_with_self_heal(
            "list_grouped",
            lambda: comic_crud.get_all_for_grouping(db),
        )
        if not result.ok:
            return {}

        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for comic in result.value:
            groups = grouped.setdefault(comic.category_id, [])
            subcategory = comic.subcategory or ""
            if not groups or groups[-1]["subcategory"] != subcategory:
                groups.append({"subcategory": subcategory, "items": []})
            groups[-1]["items"].append(_grouped_item(comic))
        return grouped

    async def get_comic(self, db: AsyncSession, comic_id: str) -> Comic:
        comic = await comic_crud.get(db, comic_id)
        if comic is None:
            raise NotFoundError(COMIC_NOT_FOUND)
        return comic

    async def create_comic(self, db: AsyncSession, payload: ComicCreate) -> Comic:
        _require_title_and_category(payload)
        comic = await comic_crud.create(db, generate_comic_id(), _insert_values(payload))
        logger.info("comic-created comic_id=%s category_id=%s", comic.comic_id, comic.category_id)
        return comic

    async def update_comic(self, db: AsyncSession, comic_id: str, payload: ComicUpdate) -> Comic:
        comic = await comic_crud.update(db, comic_id, payload.model_dump(exclude_unset=True))
        if comic is None:
            raise NotFoundError(COMIC_NOT_FOUND)
        return comic

    async def patch_chapter(self, db: AsyncSession, comic_id: str, chapter: Optional[str]) -> Comic:
        if not chapter:
            raise ValidationError("Chapter is required")
        comic = await comic_crud.update_chapter(db, comic_id, chapter)
        if comic is None:
            raise NotFoundError(COMIC_NOT_FOUND)
        return comic

    async def delete_comic(self, db: AsyncSession, comic_id: str) -> None:
        if not await comic_crud.delete(db, comic_id):
            raise NotFoundError(COMIC_NOT_FOUND)
        logger.info("comic-deleted comic_id=%s", comic_id)

    async def bulk_import(self, db: AsyncSession, comics: Any) -> List[Comic]:
        """Upsert every entry on (title, category_id) inside one transaction."""
        if not isinstance(comics, list):
            raise ValidationError("Invalid data format")

        payloads = []
        for index, entry in enumerate(comics):
            if not isinstance(entry, dict):
                raise ValidationError(f"Invalid comic at index {index}")
            try:
                payload = ComicCreate.model_validate(entry)
            except PydanticValidationError:
                raise ValidationError(f"Invalid comic at index {index}") from None
            if not payload.title or not payload.category_id:
                raise ValidationError(f"Title and category_id are required (index {index})")
            payloads.append(payload)

        imported = []
        try:
            for payload in payloads:
                row = await comic_crud.upsert(db, generate_comic_id(), _insert_values(payload))
                # 同一批次重复的 (title, category_id) 会命中同一行，先脱离会话保留本次结果
                db.expunge(row)
                imported.append(row)
            await db.commit()
        except Exception:
            logger.exception("comic-import-rolled-back processed=%s total=%s", len(imported), len(payloads))
            await rollback_quietly(db)
            raise

        logger.info("comic-import-finished count=%s", len(imported))
        return imported
