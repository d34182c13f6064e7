from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from contextlib import asynccontextmanager
from typing import Optional

import pandas as pd
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from metro_api.schemas import FilterCriteriaModel, MetaListResponse, SnapshotResponse
from metro_core.data import EmbeddedSource, default_source, record_to_dict, records_to_csv
from metro_core.filters import FilterCriteria, available_regions, available_statuses, filter_records, normalize_filters
from metro_core.metrics_overview import compute_overview
from metro_core.state import POLL_INTERVAL_SECONDS, DashboardController, poll


logger = logging.getLogger(__name__)


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas objects and non-finite floats."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                float: _safe_float,
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": getattr(exc, "kind", type(exc).__name__)})


def _criteria(model: FilterCriteriaModel) -> FilterCriteria:
    return normalize_filters(model.model_dump())


def _controller(request: Request) -> DashboardController:
    return request.app.state.controller


def create_app(source=None, *, poll_interval: Optional[float] = None) -> FastAPI:
    """Build the API around one DashboardController.

    Remote sources are polled every POLL_INTERVAL_SECONDS unless
    `poll_interval` says otherwise; 0 disables polling.
    """
    source = source or default_source()
    if poll_interval is None:
        poll_interval = 0.0 if isinstance(source, EmbeddedSource) else POLL_INTERVAL_SECONDS

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        controller: DashboardController = app.state.controller
        await controller.arefresh()
        task = None
        if poll_interval:
            task = asyncio.create_task(poll(controller, poll_interval, start_delay=poll_interval))
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(title="Metro Projects Dashboard API", version="0.1.0", lifespan=lifespan)
    app.state.controller = DashboardController(source)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8501"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/meta/regions")
    def meta_regions(request: Request):
        try:
            return _json(MetaListResponse(values=available_regions(_controller(request).records)).model_dump())
        except Exception as exc:
            logger.exception("meta_regions failed")
            return _error(exc)

    @app.get("/meta/statuses")
    def meta_statuses(request: Request):
        try:
            return _json(MetaListResponse(values=available_statuses(_controller(request).records)).model_dump())
        except Exception as exc:
            logger.exception("meta_statuses failed")
            return _error(exc)

    @app.get("/meta/snapshot")
    def meta_snapshot(request: Request):
        controller = _controller(request)
        snap = controller.snapshot
        err = controller.last_error
        payload = SnapshotResponse(
            source=snap.source if snap else None,
            project_count=len(snap.records) if snap else 0,
            last_updated=snap.last_updated.isoformat() if snap and snap.last_updated else None,
            loaded_at=snap.loaded_at.isoformat() if snap else None,
            request_id=snap.request_id if snap else None,
            last_error=err.cause if err else None,
            last_error_type=err.kind if err else None,
        )
        return _json(payload.model_dump())

    @app.post("/projects")
    def projects(request: Request, filters: FilterCriteriaModel):
        try:
            f = _criteria(filters)
            rows = [record_to_dict(r) for r in filter_records(_controller(request).records, f)]
            return _json({"filters": filters.model_dump(), "count": len(rows), "projects": rows})
        except Exception as exc:
            logger.exception("projects failed")
            return _error(exc)

    @app.post("/overview")
    def overview(request: Request, filters: FilterCriteriaModel):
        try:
            return _json(compute_overview(_criteria(filters), _controller(request).records))
        except Exception as exc:
            logger.exception("overview failed")
            return _error(exc)

    @app.post("/export/projects")
    def export_projects(request: Request, filters: FilterCriteriaModel):
        rows = filter_records(_controller(request).records, _criteria(filters))
        return Response(
            content=records_to_csv(rows),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=projects.csv"},
        )

    @app.post("/refresh")
    async def refresh(request: Request):
        outcome = await _controller(request).arefresh()
        if outcome.error is not None:
            return _error(outcome.error, status_code=502)
        return _json({"request_id": outcome.request_id, "changed": outcome.applied})

    return app


app = create_app()
