from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProjectRecordModel(BaseModel):
    """One entry of the `projects` array, keyed the way the JSON document spells it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True, coerce_numbers_to_str=True)

    id: int
    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    region: Optional[str] = None
    status: str = Field(..., min_length=1)
    length_km: float = Field(..., alias="lengthKm", ge=0)
    investment: Optional[str] = ""
    description: Optional[str] = ""
    no_of_stations: Optional[int] = Field(default=None, alias="noOfStations", ge=0)
    from_station: Optional[str] = Field(default=None, alias="fromStation")
    to_station: Optional[str] = Field(default=None, alias="toStation")
    completion_year: Optional[int] = Field(default=None, alias="completionYear")
    operational_year: Optional[int] = Field(default=None, alias="operationalYear")
    line_number: Optional[int] = Field(default=None, alias="lineNumber")
    line_color: Optional[str] = Field(default=None, alias="lineColor")

    @model_validator(mode="after")
    def _region_defaults_to_country(self) -> "ProjectRecordModel":
        # Some dataset variants only tag records by country.
        if not self.region:
            self.region = self.country
        return self


class ProjectDocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    projects: List[ProjectRecordModel]
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")

    @model_validator(mode="after")
    def _unique_ids(self) -> "ProjectDocumentModel":
        seen = set()
        for p in self.projects:
            if p.id in seen:
                raise ValueError(f"duplicate project id {p.id}")
            seen.add(p.id)
        return self
