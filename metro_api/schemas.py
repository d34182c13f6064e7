from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, field_validator

from metro_core.models import ProjectStatus


class FilterCriteriaModel(BaseModel):
    region: Optional[str] = "all"
    search_text: Optional[str] = ""
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip() or value.strip().lower() == "all":
            return None
        status = ProjectStatus.parse(value)
        if status is ProjectStatus.UNKNOWN and value.strip().lower() != ProjectStatus.UNKNOWN.value:
            raise ValueError(f"unknown status {value!r}; expected one of {[s.value for s in ProjectStatus]}")
        return status.value


class MetaListResponse(BaseModel):
    values: List[str]


class SnapshotResponse(BaseModel):
    source: Optional[str] = None
    project_count: int = 0
    last_updated: Optional[str] = None
    loaded_at: Optional[str] = None
    request_id: Optional[int] = None
    last_error: Optional[str] = None
    last_error_type: Optional[str] = None
