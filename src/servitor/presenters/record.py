"""RecordPresenter — presenter base for persisted models.

Adds ``id`` and timestamp delegates so resource presenters stay focused on
shaping output and permission logic::

    class InspectionPresenter(RecordPresenter):
        def attributes(self) -> dict[str, Any]:
            return {
                "id": self.id,
                "status": self.record.status,
                "created_at": self.created_at_iso,
            }
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from servitor.presenters.application import ApplicationPresenter


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class RecordPresenter(ApplicationPresenter):
    @property
    def id(self) -> Any:
        return self.record.id

    @property
    def created_at(self) -> datetime | None:
        return self.record.created_at

    @property
    def updated_at(self) -> datetime | None:
        return self.record.updated_at

    @property
    def created_at_iso(self) -> str | None:
        return _iso(self.created_at)

    @property
    def updated_at_iso(self) -> str | None:
        return _iso(self.updated_at)
