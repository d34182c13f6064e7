"""
Canonical project records
=========================

Every dataset variant (embedded constant, local JSON, fetched JSON) is mapped
into `ProjectRecord`. Records are frozen so a loaded snapshot can be shared by
the filter, the aggregator and the UI without anyone editing it in place.

Optional fields are `None` when the source variant does not carry them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class ProjectStatus(str, Enum):
    OPERATIONAL = "operational"
    UNDER_CONSTRUCTION = "under_construction"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    PLANNED = "planned"
    DELAYED = "delayed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "ProjectStatus":
        """Map free status text onto the enum; anything unrecognised is UNKNOWN."""
        if isinstance(value, ProjectStatus):
            return value
        key = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class Investment:
    """Investment as displayed plus its normalized value.

    `amount` is expressed in billions of `currency`. Both are None when the
    text holds no number; `currency` alone is None when the text names none.
    """

    raw: str
    amount: Optional[float] = None
    currency: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.amount is not None


@dataclass(frozen=True)
class ProjectRecord:
    """One metro line or project."""

    id: int
    name: str
    city: str
    country: str
    region: str
    status: ProjectStatus
    length_km: float
    investment: Investment
    description: str = ""
    no_of_stations: Optional[int] = None
    from_station: Optional[str] = None
    to_station: Optional[str] = None
    completion_year: Optional[int] = None
    operational_year: Optional[int] = None
    line_number: Optional[int] = None
    line_color: Optional[str] = None

    @property
    def has_stations(self) -> bool:
        return self.no_of_stations is not None

    @property
    def has_route(self) -> bool:
        return bool(self.from_station and self.to_station)

    @property
    def year(self) -> Optional[int]:
        """Opening year for running lines, planned completion otherwise."""
        if self.status in (ProjectStatus.OPERATIONAL, ProjectStatus.COMPLETED):
            return self.operational_year or self.completion_year
        return self.completion_year or self.operational_year


@dataclass(frozen=True)
class LoadedData:
    records: Tuple[ProjectRecord, ...] = field(default_factory=tuple)
    last_updated: Optional[datetime] = None
    source: str = ""
