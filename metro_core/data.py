from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx
import pandas as pd
from pydantic import ValidationError

from metro_core.dataset import METRO_PROJECTS
from metro_core.errors import NetworkError, ParseError, ShapeError
from metro_core.investment import parse_investment
from metro_core.models import LoadedData, ProjectRecord, ProjectStatus
from metro_core.schema import ProjectDocumentModel, ProjectRecordModel


logger = logging.getLogger(__name__)

DEFAULT_DATA_URL: Optional[str] = None
REQUEST_TIMEOUT_SECONDS = 10.0
CONNECT_TIMEOUT_SECONDS = 5.0

FRAME_COLUMNS = [
    "id",
    "name",
    "city",
    "country",
    "region",
    "status",
    "length_km",
    "no_of_stations",
    "investment",
    "investment_amount_bn",
    "investment_currency",
    "from_station",
    "to_station",
    "operational_year",
    "completion_year",
    "line_number",
    "line_color",
    "description",
]


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def parse_timestamp(value: object) -> Optional[datetime]:
    """Lenient ISO-8601-ish parsing; anything pandas cannot read becomes None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        logger.warning("Ignoring unparseable lastUpdated value %r", value)
        return None
    return ts.to_pydatetime()


def _shape_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:5]:
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    more = len(exc.errors()) - len(parts)
    if more > 0:
        parts.append(f"(+{more} more)")
    return "; ".join(parts)


def to_record(model: ProjectRecordModel) -> ProjectRecord:
    return ProjectRecord(
        id=model.id,
        name=model.name,
        city=model.city,
        country=model.country,
        region=model.region or model.country,
        status=ProjectStatus.parse(model.status),
        length_km=float(model.length_km),
        investment=parse_investment(model.investment),
        description=model.description or "",
        no_of_stations=model.no_of_stations,
        from_station=model.from_station or None,
        to_station=model.to_station or None,
        completion_year=model.completion_year,
        operational_year=model.operational_year,
        line_number=model.line_number,
        line_color=model.line_color or None,
    )


def build_loaded_data(document: Any, *, source: str = "") -> LoadedData:
    """Validate an already-decoded document and map it into canonical records."""
    try:
        doc = ProjectDocumentModel.model_validate(document)
    except ValidationError as exc:
        raise ShapeError(_shape_message(exc), source=source) from exc
    records = tuple(to_record(p) for p in doc.projects)
    unknown = [r.id for r in records if r.status is ProjectStatus.UNKNOWN]
    if unknown:
        logger.info("%s: %d record(s) with unrecognised status: %s", source or "document", len(unknown), unknown)
    return LoadedData(records=records, last_updated=parse_timestamp(doc.last_updated), source=source)


def parse_document(payload: Union[str, bytes], *, source: str = "") -> LoadedData:
    try:
        document = json.loads(payload)
    except ValueError as exc:
        raise ParseError(f"response is not valid JSON ({exc})", source=source) from exc
    return build_loaded_data(document, source=source)


# ---------------- Sources ----------------
class EmbeddedSource:
    """The project list shipped with the package; always loads."""

    label = "embedded"

    def __init__(self, projects: Optional[List[Dict[str, Any]]] = None) -> None:
        self.projects = METRO_PROJECTS if projects is None else projects

    def load(self) -> LoadedData:
        return build_loaded_data({"projects": self.projects}, source=self.label)

    async def aload(self) -> LoadedData:
        return self.load()


class JsonFileSource:
    """A JSON document on local disk, re-read on every load."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.label = str(self.path)

    def load(self) -> LoadedData:
        try:
            payload = self.path.read_bytes()
        except OSError as exc:
            raise NetworkError(f"cannot read file ({exc.strerror or exc})", source=self.label) from exc
        return parse_document(payload, source=self.label)

    async def aload(self) -> LoadedData:
        return self.load()


class HttpJsonSource:
    """A JSON document fetched over HTTP(S) with httpx."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.label = url
        self.timeout = timeout
        self.transport = transport
        self.async_transport = async_transport

    @property
    def client_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout, connect=min(self.timeout, CONNECT_TIMEOUT_SECONDS))

    def _check(self, response: httpx.Response) -> bytes:
        if response.status_code < 200 or response.status_code >= 300:
            raise NetworkError(f"HTTP {response.status_code} {response.reason_phrase}".strip(), source=self.label)
        return response.content

    def load(self) -> LoadedData:
        try:
            with httpx.Client(timeout=self.client_timeout, transport=self.transport) as client:
                response = client.get(self.url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            raise NetworkError(f"request failed ({type(exc).__name__}: {exc})", source=self.label) from exc
        return parse_document(self._check(response), source=self.label)

    async def aload(self) -> LoadedData:
        try:
            async with httpx.AsyncClient(timeout=self.client_timeout, transport=self.async_transport) as client:
                response = await client.get(self.url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            raise NetworkError(f"request failed ({type(exc).__name__}: {exc})", source=self.label) from exc
        return parse_document(self._check(response), source=self.label)


def default_source() -> Union[EmbeddedSource, HttpJsonSource]:
    if DEFAULT_DATA_URL:
        return HttpJsonSource(DEFAULT_DATA_URL)
    return EmbeddedSource()


def load_projects(source=None) -> LoadedData:
    """Load once from `source` (default: configured URL, else embedded list).

    Raises LoadError; callers decide whether to keep a previous snapshot.
    """
    source = source or default_source()
    return source.load()


# ---------------- Frames / export ----------------
def record_to_dict(record: ProjectRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "city": record.city,
        "country": record.country,
        "region": record.region,
        "status": record.status.value,
        "length_km": record.length_km,
        "no_of_stations": record.no_of_stations,
        "investment": record.investment.raw,
        "investment_amount_bn": record.investment.amount,
        "investment_currency": record.investment.currency,
        "from_station": record.from_station,
        "to_station": record.to_station,
        "operational_year": record.operational_year,
        "completion_year": record.completion_year,
        "line_number": record.line_number,
        "line_color": record.line_color,
        "description": record.description,
    }


def records_to_frame(records: Iterable[ProjectRecord]) -> pd.DataFrame:
    rows = [record_to_dict(r) for r in records]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["no_of_stations"] = df["no_of_stations"].astype("Int64")
    return df


def records_to_csv(records: Iterable[ProjectRecord]) -> bytes:
    return records_to_frame(records).to_csv(index=False).encode("utf-8")

