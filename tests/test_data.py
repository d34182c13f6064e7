"""Tests for document parsing and the project sources."""

import asyncio
import json

import httpx
import pytest

from metro_core.data import (
    EmbeddedSource,
    HttpJsonSource,
    JsonFileSource,
    load_projects,
    parse_document,
    records_to_csv,
    records_to_frame,
)
from metro_core.errors import LoadError, NetworkError, ParseError, ShapeError
from metro_core.models import ProjectStatus


URL = "https://example.com/metro-projects.json"


class TestParseDocument:
    """JSON document -> LoadedData."""

    def test_valid_document(self, document):
        data = parse_document(json.dumps(document), source="test")
        assert [r.id for r in data.records] == [1, 2]
        assert data.source == "test"
        assert data.last_updated is not None and data.last_updated.year == 2024

        red, paris = data.records
        assert red.length_km == 26.46
        assert red.no_of_stations == 21
        assert red.has_route and red.from_station == "Rithala"
        assert red.investment.currency == "USD"
        assert red.year == 2002
        assert paris.status is ProjectStatus.ONGOING
        assert paris.no_of_stations is None
        assert not paris.has_route
        assert paris.year == 2030

    def test_malformed_json(self):
        with pytest.raises(ParseError) as exc_info:
            parse_document('{"projects": [', source="bad")
        assert exc_info.value.kind == "ParseError"
        assert isinstance(exc_info.value, LoadError)

    def test_missing_projects(self):
        with pytest.raises(ShapeError):
            parse_document('{"lastUpdated": "2024-01-01"}')

    def test_not_an_object(self):
        with pytest.raises(ShapeError):
            parse_document("[1, 2, 3]")

    def test_missing_required_field(self, document):
        del document["projects"][0]["name"]
        with pytest.raises(ShapeError) as exc_info:
            parse_document(json.dumps(document))
        assert "name" in exc_info.value.cause

    def test_negative_length(self, document):
        document["projects"][1]["lengthKm"] = -1
        with pytest.raises(ShapeError):
            parse_document(json.dumps(document))

    def test_duplicate_ids(self, document):
        document["projects"][1]["id"] = 1
        with pytest.raises(ShapeError) as exc_info:
            parse_document(json.dumps(document))
        assert "duplicate" in exc_info.value.cause

    def test_region_falls_back_to_country(self, document):
        del document["projects"][1]["region"]
        data = parse_document(json.dumps(document))
        assert data.records[1].region == "France"

    def test_unknown_status_tolerated(self, document):
        document["projects"][0]["status"] = "suspended"
        data = parse_document(json.dumps(document))
        assert data.records[0].status is ProjectStatus.UNKNOWN

    def test_bad_timestamp_is_dropped(self, document):
        document["lastUpdated"] = "not a date"
        assert parse_document(json.dumps(document)).last_updated is None

    def test_extra_keys_ignored(self, document):
        document["projects"][0]["ridership"] = 123
        assert len(parse_document(json.dumps(document)).records) == 2


class TestSources:
    """Embedded, file and HTTP sources."""

    def test_embedded(self):
        data = EmbeddedSource().load()
        assert len(data.records) == 17
        assert len({r.id for r in data.records}) == 17
        assert data.last_updated is None

    def test_load_projects_defaults_to_embedded(self):
        data = load_projects()
        assert data.source == "embedded"
        assert len(data.records) == 17

    def test_file_source(self, tmp_path, document):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        assert len(JsonFileSource(path).load().records) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(NetworkError):
            JsonFileSource(tmp_path / "missing.json").load()

    def test_http_success(self, document):
        def handler(request):
            assert request.url == URL
            return httpx.Response(200, json=document)

        data = HttpJsonSource(URL, transport=httpx.MockTransport(handler)).load()
        assert data.source == URL
        assert len(data.records) == 2

    def test_http_error_status(self):
        source = HttpJsonSource(URL, transport=httpx.MockTransport(lambda request: httpx.Response(503)))
        with pytest.raises(NetworkError) as exc_info:
            source.load()
        assert "503" in exc_info.value.cause

    def test_http_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            HttpJsonSource(URL, transport=httpx.MockTransport(handler)).load()

    def test_http_malformed_body(self):
        source = HttpJsonSource(URL, transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")))
        with pytest.raises(ParseError):
            source.load()

    def test_http_async(self, document):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=document))
        data = asyncio.run(HttpJsonSource(URL, async_transport=transport).aload())
        assert [r.id for r in data.records] == [1, 2]

    def test_sync_and_async_share_timeouts(self, document):
        seen = []

        def handler(request):
            seen.append(request.extensions["timeout"])
            return httpx.Response(200, json=document)

        transport = httpx.MockTransport(handler)
        source = HttpJsonSource(URL, timeout=8.0, transport=transport, async_transport=transport)
        source.load()
        asyncio.run(source.aload())
        assert seen[0] == seen[1]
        assert seen[0]["connect"] == 5.0
        assert seen[0]["read"] == 8.0


class TestExport:
    """Frame and CSV helpers."""

    def test_frame_columns(self, records):
        df = records_to_frame(records)
        assert list(df["id"]) == [1, 2, 3, 4, 5, 6]
        assert df.loc[3, "investment_currency"] == "SGD"

    def test_empty_frame(self):
        df = records_to_frame([])
        assert df.empty
        assert "investment_amount_bn" in df.columns

    def test_csv(self, records):
        lines = records_to_csv(records).decode("utf-8").strip().splitlines()
        assert lines[0].startswith("id,name,city")
        assert len(lines) == len(records) + 1
