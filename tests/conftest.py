from __future__ import annotations

import json
from datetime import datetime, timezone
from urllib.parse import unquote

import httpx
import pytest

from app.core.config import Settings
from app.schemas.location import Demographics, GeoPoint, Location
from app.services.search_index import LocationIndex


class FakeSearchEngine:
    """
    Minimal in-memory stand-in for the Elasticsearch REST API, plugged into
    httpx.MockTransport. Scores: 1.0 per matched must clause + matched
    should boosts. Honors the request's sort and ?size.
    """

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, dict]] = {}
        self.mappings: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], tuple[int, dict]] = {}
        self.error: Exception | None = None

    # test hooks
    def fail(self, method: str, path: str, status: int, body: dict | None = None) -> None:
        self.failures[(method, path)] = (status, body or {"error": "boom"})

    def docs(self, index: str = "locations") -> dict[str, dict]:
        return self.indices.get(index, {})

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    # transport
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        method, path = request.method, request.url.path
        if (method, path) in self.failures:
            status, body = self.failures[(method, path)]
            return httpx.Response(status, json=body)

        # route on the raw path so an encoded id stays one segment
        raw = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
        parts = [unquote(p) for p in raw.split("/") if p]
        if method == "POST" and parts == ["_bulk"]:
            return self._bulk(request)
        if len(parts) == 1:
            return self._index_op(method, parts[0], request)
        if len(parts) == 3 and parts[1] == "_doc":
            return self._doc_op(method, parts[0], parts[2], request)
        if method == "POST" and len(parts) == 2 and parts[1] == "_search":
            return self._search(parts[0], request)
        return httpx.Response(400, json={"error": f"unsupported {method} {path}"})

    def _index_op(self, method, index, request):
        if method == "HEAD":
            return httpx.Response(200 if index in self.indices else 404)
        if method == "PUT":
            if index in self.indices:
                return httpx.Response(
                    400, json={"error": {"type": "resource_already_exists_exception"}}
                )
            self.indices[index] = {}
            self.mappings[index] = json.loads(request.content)
            return httpx.Response(200, json={"acknowledged": True, "index": index})
        return httpx.Response(405)

    def _doc_op(self, method, index, doc_id, request):
        if method == "PUT":
            docs = self.indices.setdefault(index, {})
            result = "updated" if doc_id in docs else "created"
            docs[doc_id] = json.loads(request.content)
            return httpx.Response(201 if result == "created" else 200, json={"result": result})
        if method == "GET":
            doc = self.indices.get(index, {}).get(doc_id)
            if doc is None:
                return httpx.Response(404, json={"_id": doc_id, "found": False})
            return httpx.Response(200, json={"_id": doc_id, "found": True, "_source": doc})
        return httpx.Response(405)

    def _bulk(self, request):
        lines = [ln for ln in request.content.decode("utf-8").split("\n") if ln]
        items = []
        for meta_line, doc_line in zip(lines[::2], lines[1::2]):
            meta = json.loads(meta_line)["index"]
            self.indices.setdefault(meta["_index"], {})[meta["_id"]] = json.loads(doc_line)
            items.append({"index": {"_id": meta["_id"], "status": 201}})
        return httpx.Response(200, json={"errors": False, "items": items})

    def _search(self, index, request):
        if index not in self.indices:
            return httpx.Response(404, json={"error": {"type": "index_not_found_exception"}})
        body = json.loads(request.content)
        size = int(request.url.params.get("size", 10))
        must = body["query"]["bool"].get("must", [])
        should = body["query"]["bool"].get("should", [])

        scored = []
        for doc_id, doc in self.indices[index].items():
            if not all(_term_matches(doc, clause["term"]) for clause in must):
                continue
            score = float(len(must))
            for clause in should:
                (field, cond), = clause["range"].items()
                if _range_matches(doc.get(field), cond):
                    score += cond.get("boost", 1.0)
            scored.append((doc_id, doc, score))

        for spec in reversed(body.get("sort", [])):
            (field, opts), = spec.items()
            reverse = opts.get("order", "asc") == "desc"
            if field == "_score":
                scored.sort(key=lambda h: h[2], reverse=reverse)
            else:
                scored.sort(key=lambda h, f=field: h[1].get(f, 0.0), reverse=reverse)

        hits = [
            {"_index": index, "_id": doc_id, "_score": score, "_source": doc}
            for doc_id, doc, score in scored[:size]
        ]
        return httpx.Response(
            200, json={"hits": {"total": {"value": len(scored)}, "hits": hits}}
        )


def _term_matches(doc: dict, term: dict) -> bool:
    (field, value), = term.items()
    actual = doc.get(field)
    if isinstance(actual, list):
        return value in actual
    return actual == value


def _range_matches(value, cond: dict) -> bool:
    if value is None:
        return False
    if "gte" in cond and value < cond["gte"]:
        return False
    if "lte" in cond and value > cond["lte"]:
        return False
    return True


_TS = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_location(
    loc_id: str,
    *,
    region: str = "Moscow",
    city: str = "Moscow",
    types: list[str] | None = None,
    traffic: float = 5.0,
    competition: float = 5.0,
    embedding: list[float] | None = None,
) -> Location:
    return Location(
        id=loc_id,
        name=f"Location {loc_id}",
        address=f"Primernaya st. 1, {city}",
        coordinates=GeoPoint(lat=55.75, lon=37.61),
        region=region,
        city=city,
        description=f"Location {loc_id} in {city}",
        business_types_suitable=types if types is not None else ["cafe", "gym"],
        traffic_score=traffic,
        competition_density=competition,
        demographics=Demographics(
            age_group="26-35",
            average_income=65000.0,
            interests=["food", "sports"],
            population_density=4200.5,
        ),
        embedding=embedding,
        created_at=_TS,
        updated_at=_TS,
    )


@pytest.fixture
def fake_engine() -> FakeSearchEngine:
    return FakeSearchEngine()


@pytest.fixture
def index(fake_engine) -> LocationIndex:
    return LocationIndex(
        "http://search.test:9200",
        "locations",
        transport=httpx.MockTransport(fake_engine.handler),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'reference.db'}",
        ELASTICSEARCH_URL="http://search.test:9200",
        LOG_DIR=str(tmp_path / "logs"),
        LOG_LEVEL="WARNING",
        REQUEST_DEADLINE_S=5.0,
    )
