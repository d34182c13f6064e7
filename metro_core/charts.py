from __future__ import annotations

from typing import Any, Dict

import altair as alt

from metro_core.models import ProjectStatus

alt.data_transformers.disable_max_rows()

STATUS_COLORS = {
    ProjectStatus.OPERATIONAL.value: "#16a34a",
    ProjectStatus.COMPLETED.value: "#15803d",
    ProjectStatus.UNDER_CONSTRUCTION.value: "#f59e0b",
    ProjectStatus.ONGOING.value: "#2563eb",
    ProjectStatus.PLANNED.value: "#6b7280",
    ProjectStatus.DELAYED.value: "#dc2626",
    ProjectStatus.UNKNOWN.value: "#9ca3af",
}


def status_color_scale() -> alt.Scale:
    return alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values()))


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Altair chart -> Vega-Lite spec dict, with data inlined so the payload is self-contained."""
    return chart.to_dict()
