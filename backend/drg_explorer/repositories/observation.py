"""Observation repository.

The only place that builds SQL against the observations table. Every read
is a single bounded statement; the one write path replaces the whole table
and leaves transaction control to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from drg_explorer.models import Observation
from drg_explorer.services.filters import DrgFilter, ExactCode, TextContains

logger = logging.getLogger(__name__)


class ObservationRepository:
    """Read and bulk-replace access to Observation rows."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: Async SQLAlchemy session.
        """
        self.db = db

    # ------------------------------------------------------------------
    # Distinct-value projections
    # ------------------------------------------------------------------

    async def distinct_geo_levels(self) -> list[str]:
        """All distinct non-null geography levels, ascending."""
        stmt = (
            select(Observation.geo_level)
            .where(Observation.geo_level.isnot(None))
            .distinct()
            .order_by(Observation.geo_level.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def distinct_geographies(
        self,
        level: str,
        search: str | None = None,
        limit: int = 200,
    ) -> list[str]:
        """Distinct geography descriptions within a level.

        Args:
            level: Exact (case-sensitive) geography level.
            search: Optional case-insensitive substring of the description.
            limit: Maximum number of descriptions returned.
        """
        stmt = select(Observation.geo_description).where(
            Observation.geo_level == level,
            Observation.geo_description.isnot(None),
        )
        if search:
            stmt = stmt.where(Observation.geo_description.icontains(search, autoescape=True))
        stmt = stmt.distinct().order_by(Observation.geo_description.asc()).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def distinct_drgs(
        self,
        drg_filter: DrgFilter | None = None,
        limit: int = 50,
    ) -> list[tuple[int, str]]:
        """Distinct (code, description) DRG pairs ordered by code.

        Args:
            drg_filter: ExactCode matches the code, TextContains matches the
                description case-insensitively; None applies no filter.
            limit: Maximum number of pairs returned.
        """
        stmt = select(Observation.drg_code, Observation.drg_description).where(
            Observation.drg_code.isnot(None),
            Observation.drg_description.isnot(None),
        )
        if isinstance(drg_filter, ExactCode):
            stmt = stmt.where(Observation.drg_code == drg_filter.code)
        elif isinstance(drg_filter, TextContains):
            stmt = stmt.where(
                Observation.drg_description.icontains(drg_filter.text, autoescape=True)
            )
        stmt = (
            stmt.distinct()
            .order_by(Observation.drg_code.asc(), Observation.drg_description.asc())
            .limit(limit)
        )

        result = await self.db.execute(stmt)
        return [(row.drg_code, row.drg_description) for row in result.all()]

    # ------------------------------------------------------------------
    # Row retrieval
    # ------------------------------------------------------------------

    async def find_records(
        self,
        level: str,
        geo: str,
        drg_code: int | None = None,
        limit: int = 500,
    ) -> list[Observation]:
        """Observations for one geography, highest submitted charge first.

        Args:
            level: Exact geography level.
            geo: Exact geography description.
            drg_code: Optional exact DRG code.
            limit: Maximum number of rows returned.
        """
        stmt = select(Observation).where(
            Observation.geo_level == level,
            Observation.geo_description == geo,
        )
        if drg_code is not None:
            stmt = stmt.where(Observation.drg_code == drg_code)
        stmt = stmt.order_by(
            Observation.avg_submitted_charge.desc(),
            Observation.id.asc(),
        ).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Observation))
        return result.scalar() or 0

    async def first(self) -> Observation | None:
        """Lowest-id observation, used as a post-load sample."""
        result = await self.db.execute(
            select(Observation).order_by(Observation.id.asc()).limit(1)
        )
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Bulk replace
    # ------------------------------------------------------------------

    async def delete_all(self) -> int:
        """Delete every observation. Returns the number of rows removed."""
        result = await self.db.execute(delete(Observation))
        return result.rowcount or 0

    async def insert_batch(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """Insert one batch of attribute-keyed mappings."""
        if not rows:
            return 0
        await self.db.execute(insert(Observation), [dict(row) for row in rows])
        return len(rows)

    async def replace_all(
        self,
        rows: Sequence[Mapping[str, Any]],
        batch_size: int = 1000,
        on_batch: Callable[[int, int], None] | None = None,
    ) -> tuple[int, int]:
        """Delete all observations, then insert ``rows`` in fixed-size batches.

        Must run inside a caller-owned transaction for the replace to be
        all-or-nothing.

        Args:
            rows: Attribute-keyed mappings (see Observation).
            batch_size: Rows per INSERT statement.
            on_batch: Called with (inserted_so_far, total) after each batch.

        Returns:
            (deleted, inserted) row counts.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be positive")

        deleted = await self.delete_all()
        logger.debug("Deleted %d existing observations", deleted)

        inserted = 0
        total = len(rows)
        for start in range(0, total, batch_size):
            inserted += await self.insert_batch(rows[start : start + batch_size])
            if on_batch is not None:
                on_batch(inserted, total)

        return deleted, inserted
