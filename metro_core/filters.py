from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from metro_core.models import ProjectRecord, ProjectStatus


ALL_REGIONS = "all"


@dataclass(frozen=True)
class FilterCriteria:
    region: Optional[str] = None
    search_text: Optional[str] = None
    status: Optional[ProjectStatus] = None


def _as_optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _as_status(value: object) -> Optional[ProjectStatus]:
    if isinstance(value, ProjectStatus):
        return value
    s = _as_optional_str(value)
    if s is None or s.lower() == ALL_REGIONS:
        return None
    status = ProjectStatus.parse(s)
    if status is ProjectStatus.UNKNOWN and s.lower() != ProjectStatus.UNKNOWN.value:
        raise ValueError(f"Unknown status filter: {s!r}")
    return status


def normalize_filters(raw: dict) -> FilterCriteria:
    """Build FilterCriteria from loosely-typed UI/API input.

    Accepts both `search_text` and the shorter `q`; blank values and "all"
    mean no constraint.
    """
    region = _as_optional_str(raw.get("region"))
    if region is not None and region.lower() == ALL_REGIONS:
        region = None
    search_text = _as_optional_str(raw.get("search_text", raw.get("q")))
    return FilterCriteria(region=region, search_text=search_text, status=_as_status(raw.get("status")))


def matches_region(record: ProjectRecord, region: Optional[str]) -> bool:
    # Region tags are a controlled vocabulary, so compare case-sensitively.
    if not region or region == ALL_REGIONS:
        return True
    return record.region == region


def matches_search(record: ProjectRecord, search_text: Optional[str]) -> bool:
    q = (search_text or "").strip().lower()
    if not q:
        return True
    return q in record.name.lower() or q in record.city.lower()


def matches_status(record: ProjectRecord, status: Optional[ProjectStatus]) -> bool:
    if not status:
        return True
    return record.status == ProjectStatus.parse(status)


def filter_records(records: Iterable[ProjectRecord], criteria: Optional[FilterCriteria] = None) -> List[ProjectRecord]:
    """Return the records matching every criterion, in input order."""
    criteria = criteria or FilterCriteria()
    return [
        r
        for r in records
        if matches_region(r, criteria.region)
        and matches_search(r, criteria.search_text)
        and matches_status(r, criteria.status)
    ]


def available_regions(records: Sequence[ProjectRecord]) -> List[str]:
    return sorted({r.region for r in records})


def available_statuses(records: Sequence[ProjectRecord]) -> List[str]:
    order = [s.value for s in ProjectStatus]
    present = {r.status.value for r in records}
    return [s for s in order if s in present]
