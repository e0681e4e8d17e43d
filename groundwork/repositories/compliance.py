"""Repositories for I-9 records and E-Verify cases."""

from __future__ import annotations

from datetime import date

from groundwork.domain.compliance import EVerifyCase, I9Record
from groundwork.repositories.base import BaseRepository


class I9RecordRepository(BaseRepository[I9Record]):
    model = I9Record
    default_sort = "section1_completed_date"

    async def expiring_by(self, cutoff: date) -> list[I9Record]:
        """Records whose work authorization lapses on or before the cutoff."""
        return await self.find(
            I9Record.work_authorization_expires.is_not(None),
            I9Record.work_authorization_expires <= cutoff,
            order_by=I9Record.work_authorization_expires.asc(),
        )


class EVerifyCaseRepository(BaseRepository[EVerifyCase]):
    model = EVerifyCase
    default_sort = "submitted_date"
