from __future__ import annotations

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockinfo.db.models import Overview

logger = structlog.get_logger(__name__)

# Columns that may hold the same value on many rows.
LIST_LOOKUP_FIELDS = {
    "exchange": Overview.exchange,
    "asset_type": Overview.asset_type,
    "currency": Overview.currency,
    "country": Overview.country,
    "sector": Overview.sector,
}


class OverviewRepository:
    """Storage queries against the ``overviews`` table.

    Each method is one statement and, where it writes, one commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, overview: Overview) -> Overview:
        self.session.add(overview)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning("overview_save_rejected", symbol=overview.symbol)
            raise
        await self.session.refresh(overview)
        logger.info("overview_saved", id=overview.id, symbol=overview.symbol)
        return overview

    async def find_all(self) -> list[Overview]:
        result = await self.session.execute(select(Overview).order_by(Overview.id))
        return list(result.scalars().all())

    async def find_by_id(self, overview_id: int) -> Overview | None:
        return await self.session.get(Overview, overview_id)

    async def find_by_symbol(self, symbol: str) -> Overview | None:
        result = await self.session.execute(select(Overview).where(Overview.symbol == symbol))
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Overview | None:
        # Names are not constrained unique; the lowest id wins.
        result = await self.session.execute(
            select(Overview).where(Overview.name == name).order_by(Overview.id).limit(1)
        )
        return result.scalars().first()

    async def find_all_by(self, field: str, value: str) -> list[Overview]:
        column = LIST_LOOKUP_FIELDS.get(field)
        if column is None:
            raise ValueError(f"Unsupported lookup field: {field}")
        result = await self.session.execute(
            select(Overview).where(column == value).order_by(Overview.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Overview))
        return int(result.scalar_one())

    async def delete(self, overview: Overview) -> None:
        await self.session.delete(overview)
        await self.session.commit()
        logger.info("overview_deleted", id=overview.id, symbol=overview.symbol)

    async def delete_all(self) -> None:
        await self.session.execute(delete(Overview))
        await self.session.commit()
        logger.info("overviews_deleted_all")
