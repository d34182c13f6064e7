from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional

import altair as alt
import streamlit as st

from metro_core.data import default_source, records_to_frame
from metro_core.filters import ALL_REGIONS, FilterCriteria, available_regions, available_statuses
from metro_core.metrics_overview import compute_overview
from metro_core.models import ProjectRecord, ProjectStatus
from metro_core.state import POLL_INTERVAL_SECONDS, DashboardController, DashboardView

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .line-swatch {display: inline-block;width: 10px;height: 10px;border-radius: 50%;margin-right: 6px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, color: Optional[str] = None):
    swatch = f"<span class='line-swatch' style='background:{color}'></span>" if color else ""
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{swatch}{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(criteria: FilterCriteria) -> str:
    chips = [
        f"Region: {criteria.region or 'All'}",
        f"Status: {criteria.status.label if criteria.status else 'All'}",
        f"Search: {criteria.search_text}" if criteria.search_text else "Search: none",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def get_controller() -> DashboardController:
    if "controller" not in st.session_state:
        st.session_state["load_errors"] = []
        st.session_state["controller"] = DashboardController(
            default_source(),
            on_error=lambda err: st.session_state["load_errors"].append(err),
        )
    return st.session_state["controller"]


def refresh_if_due(controller: DashboardController, force: bool = False) -> None:
    attempted = controller.attempted_at
    due = attempted is None or (datetime.now(timezone.utc) - attempted).total_seconds() >= POLL_INTERVAL_SECONDS
    if force or due:
        controller.refresh()


# ---------- Renderers ----------
def render_kpi_cards(view: DashboardView):
    payload = compute_overview(view.criteria, list(view.records))
    s = payload["summary"]
    cols = st.columns(5)
    cols[0].metric("Projects", f"{s['total_count']:,}", help="Projects matching the current filters.")
    cols[1].metric("Operational lines", f"{s['operational_lines']:,}")
    cols[2].metric("Network length", s["display"]["total_length"])
    cols[3].metric(
        "Stations",
        f"{s['total_stations']:,}",
        help=f"Summed over {s['stations_reported']} project(s) that report a station count.",
    )
    cols[4].metric(
        "Avg investment",
        s["display"]["avg_investment"],
        help="Averaged per currency; shown as mixed when projects use different currencies.",
    )
    if s["mixed_currency"]:
        st.caption(
            "Investment by currency: "
            + ", ".join(f"{c} {v:,.2f}B" for c, v in sorted(s["investment_totals"].items()))
        )
    if s["unparseable_investments"]:
        st.caption(f"{s['unparseable_investments']} project(s) have no parseable investment figure.")

    charts = payload["charts"]
    if charts:
        c1, c2 = st.columns(2)
        c1.vega_lite_chart(charts["status_breakdown"], use_container_width=True)
        c2.vega_lite_chart(charts["length_by_city"], use_container_width=True)


def render_project_card(record: ProjectRecord):
    with card(record.name, record.line_color):
        st.caption(f"{record.city}, {record.country} · {record.status.label}" + (f" · {record.year}" if record.year else ""))
        cols = st.columns(3)
        cols[0].metric("Length", f"{record.length_km:,.2f} km")
        cols[1].metric("Stations", f"{record.no_of_stations}" if record.has_stations else "N/A")
        cols[2].metric("Investment", record.investment.raw or "N/A")
        if record.has_route:
            st.write(f"{record.from_station} → {record.to_station}")
        if record.description:
            st.write(record.description)


def render_project_cards(records: List[ProjectRecord]):
    if not records:
        st.info("No projects match the selected filters.")
        return
    cols = st.columns(2)
    for i, record in enumerate(records):
        with cols[i % 2]:
            render_project_card(record)


# ---------- Page ----------
st.set_page_config(page_title="Metro Projects Dashboard", layout="wide")
inject_base_styles()
st.title("Metro Projects Dashboard")
st.caption("Metro lines and projects with live KPIs; data refreshes every 5 minutes.")

controller = get_controller()

with st.sidebar:
    st.markdown("### Data")
    force = st.button("Refresh now")
refresh_if_due(controller, force=force)

for err in st.session_state.get("load_errors", []):
    st.error(f"Could not load projects ({err.kind}): {err.cause}")
st.session_state["load_errors"] = []

records = list(controller.records)
if not records:
    st.error("No project data available yet.")
    st.stop()

with st.sidebar:
    st.markdown("### Filters")
    region = st.selectbox("Region", [ALL_REGIONS] + available_regions(records), format_func=lambda r: "All" if r == ALL_REGIONS else r)
    status_options = [""] + available_statuses(records)
    status = st.selectbox("Status", status_options, format_func=lambda s: ProjectStatus(s).label if s else "All")
    search_text = st.text_input("Search name or city", "")

criteria = FilterCriteria(
    region=None if region == ALL_REGIONS else region,
    search_text=search_text.strip() or None,
    status=ProjectStatus(status) if status else None,
)
view = controller.set_criteria(criteria)

snap = controller.snapshot
st.markdown(f"<div class='chip-row'>{format_filter_summary(criteria)}</div>", unsafe_allow_html=True)
if snap is not None:
    updated = snap.last_updated.isoformat() if snap.last_updated else "n/a"
    st.caption(f"Source: {snap.source} · data updated {updated} · fetched {snap.loaded_at:%Y-%m-%d %H:%M UTC}")

render_kpi_cards(view)

frame = records_to_frame(view.records)
st.download_button(
    "Export CSV",
    data=frame.to_csv(index=False).encode("utf-8"),
    file_name="projects.csv",
    mime="text/csv",
    disabled=frame.empty,
)
render_project_cards(view.records)

with st.expander("Table view"):
    st.dataframe(frame, hide_index=True, use_container_width=True)
