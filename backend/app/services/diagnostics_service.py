"""Store diagnostics: current time, table list and per-table row counts."""

from __future__ import annotations

from typing import Any, Dict, Tuple
import logging

from sqlalchemy import func, inspect, select, table, text

from app.config import Settings
from app.crud.result import STORE_ERRORS, describe_error
from app.database import Database

logger = logging.getLogger("uvicorn.error")


class DiagnosticsService:
    def __init__(self, database: Database, settings: Settings):
        self.database = database
        self.settings = settings

    def env_info(self) -> Dict[str, Any]:
        return {
            "database_url_configured": self.settings.database_url_configured,
            "database_url_length": len(self.settings.DATABASE_URL or ""),
            "mode": self.settings.ENVIRONMENT,
            "dialect": self.database.dialect_name,
        }

    async def debug_info(self) -> Tuple[int, Dict[str, Any]]:
        """Return (status_code, payload); never raises on store failures."""
        try:
            async with self.database.engine.connect() as conn:
                now = (await conn.execute(text("SELECT CURRENT_TIMESTAMP"))).scalar_one()
                tables = sorted(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))

                counts: Dict[str, Any] = {}
                for name in tables:
                    try:
                        result = await conn.execute(select(func.count()).select_from(table(name)))
                        counts[name] = int(result.scalar_one())
                    except STORE_ERRORS as exc:
                        counts[name] = {"error": describe_error(exc)}
                        await conn.rollback()
        except STORE_ERRORS as exc:
            logger.warning("debug-db-unreachable reason=%s", str(exc)[:180])
            return 500, {
                "status": "error",
                "error": describe_error(exc),
                "env": self.env_info(),
            }

        return 200, {
            "status": "ok",
            "time": str(now),
            "tables": tables,
            "counts": counts,
            "env": self.env_info(),
        }
