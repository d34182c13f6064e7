from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence

import altair as alt
import pandas as pd

from metro_core.charts import status_color_scale, to_vega_spec
from metro_core.data import records_to_frame, round_half_up
from metro_core.filters import FilterCriteria, filter_records
from metro_core.investment import UNSPECIFIED_CURRENCY, format_investment
from metro_core.models import ProjectRecord, ProjectStatus


@dataclass(frozen=True)
class Summary:
    total_count: int = 0
    status_counts: Dict[str, int] = field(default_factory=lambda: {s.value: 0 for s in ProjectStatus})
    total_length_km: float = 0.0
    total_stations: int = 0
    stations_reported: int = 0
    investment_totals: Dict[str, float] = field(default_factory=dict)
    investment_counts: Dict[str, int] = field(default_factory=dict)
    unparseable_investments: int = 0
    city_count: int = 0
    region_count: int = 0

    @property
    def total_length_km_display(self) -> float:
        return round_half_up(self.total_length_km, 2) or 0.0

    @property
    def operational_lines(self) -> int:
        return self.status_counts.get(ProjectStatus.OPERATIONAL.value, 0)

    @property
    def mixed_currency(self) -> bool:
        return len(self.investment_totals) > 1

    @property
    def investment_currency(self) -> Optional[str]:
        if len(self.investment_totals) != 1:
            return None
        return next(iter(self.investment_totals))

    @property
    def investment_total(self) -> Optional[float]:
        """Total in billions when every parsed investment shares one currency."""
        currency = self.investment_currency
        return self.investment_totals[currency] if currency is not None else None

    @property
    def average_investment(self) -> Dict[str, float]:
        return {c: self.investment_totals[c] / n for c, n in self.investment_counts.items() if n}


def compute_summary(records: Iterable[ProjectRecord]) -> Summary:
    """KPI summary of `records`; an empty input yields an all-zero Summary."""
    records = list(records)
    status_counts = {s.value: 0 for s in ProjectStatus}
    investments: Dict[str, list] = {}
    unparseable = 0
    total_stations = 0
    stations_reported = 0

    for r in records:
        status_counts[r.status.value] += 1
        if r.no_of_stations is not None:
            total_stations += r.no_of_stations
            stations_reported += 1
        if r.investment.parsed:
            investments.setdefault(r.investment.currency or UNSPECIFIED_CURRENCY, []).append(r.investment.amount)
        else:
            unparseable += 1

    return Summary(
        total_count=len(records),
        status_counts=status_counts,
        total_length_km=math.fsum(r.length_km for r in records),
        total_stations=total_stations,
        stations_reported=stations_reported,
        investment_totals={c: math.fsum(v) for c, v in investments.items()},
        investment_counts={c: len(v) for c, v in investments.items()},
        unparseable_investments=unparseable,
        city_count=len({r.city for r in records}),
        region_count=len({r.region for r in records}),
    )


def summary_payload(summary: Summary) -> Dict[str, Any]:
    """Summary as JSON-ready dict, with the display strings the cards show."""
    if summary.mixed_currency:
        investment_display = "mixed currency"
        avg_display = "mixed currency"
    else:
        currency = summary.investment_currency
        investment_display = format_investment(summary.investment_total, currency)
        avg_display = format_investment(summary.average_investment.get(currency) if currency else None, currency)
    return {
        **asdict(summary),
        "total_length_km_display": summary.total_length_km_display,
        "operational_lines": summary.operational_lines,
        "mixed_currency": summary.mixed_currency,
        "investment_currency": summary.investment_currency,
        "investment_total": summary.investment_total,
        "average_investment": summary.average_investment,
        "display": {
            "total_length": f"{summary.total_length_km_display:.2f} km",
            "total_investment": investment_display,
            "avg_investment": avg_display,
        },
    }


def _status_chart(df: pd.DataFrame) -> Dict[str, Any]:
    counts = df.groupby("status").size().reset_index(name="projects")
    chart = (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            x=alt.X("projects:Q", title="Projects", axis=alt.Axis(format="d")),
            y=alt.Y("status:N", title=None, sort="-x"),
            color=alt.Color("status:N", scale=status_color_scale(), legend=None),
            tooltip=["status", "projects"],
        )
        .properties(height=160)
    )
    return to_vega_spec(chart)


def _length_by_city_chart(df: pd.DataFrame) -> Dict[str, Any]:
    by_city = (
        df.groupby("city")
        .agg(length_km=("length_km", "sum"), lines=("id", "count"))
        .reset_index()
        .sort_values("length_km", ascending=False)
    )
    chart = (
        alt.Chart(by_city)
        .mark_bar()
        .encode(
            x=alt.X("length_km:Q", title="Network length (km)"),
            y=alt.Y("city:N", title=None, sort="-x"),
            tooltip=["city", "lines", alt.Tooltip("length_km:Q", format=",.2f")],
        )
        .properties(height=220)
    )
    return to_vega_spec(chart)


def compute_overview(criteria: FilterCriteria, records: Sequence[ProjectRecord]) -> Dict[str, Any]:
    filtered = filter_records(records, criteria)
    charts: Dict[str, Any] = {}
    if filtered:
        df = records_to_frame(filtered)
        charts = {"status_breakdown": _status_chart(df), "length_by_city": _length_by_city_chart(df)}

    return {
        "filters": {
            "region": criteria.region,
            "search_text": criteria.search_text,
            "status": criteria.status.value if criteria.status else None,
        },
        "summary": summary_payload(compute_summary(filtered)),
        "totals": summary_payload(compute_summary(records)),
        "charts": charts,
    }
