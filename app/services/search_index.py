# app/services/search_index.py
# -----------------------------------------------------------------------------
# Location index client (Elasticsearch / OpenSearch over plain REST)
# - no vendor SDK, no product/version handshake: works against any engine
#   that speaks the same REST dialect
# - every call takes an optional deadline (seconds) -> Cancelled on expiry
# - transport failure / 5xx -> StorageUnavailable, 4xx -> SchemaError/QueryError
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
from typing import Iterable, List, Optional, Tuple, Type
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from app.core.errors import (
    LocationServiceError,
    NotFound,
    QueryError,
    SchemaError,
    StorageUnavailable,
    with_deadline,
)
from app.schemas.location import Location
from app.services.query_builder import StructuredQuery

SearchHit = Tuple[Location, float]


class LocationIndex:
    def __init__(
        self,
        base_url: str,
        index: str = "locations",
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.index = index
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout, connect=min(timeout, 6.0)),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── low-level ────────────────────────────────────────────────────────────
    async def _send(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        deadline: Optional[float] = None,
        **kwargs,
    ) -> httpx.Response:
        try:
            return await with_deadline(
                self._client.request(method, url, **kwargs),
                deadline,
                operation=operation,
                target=self.index,
            )
        except httpx.HTTPError as e:
            logger.warning(f"[Search] {operation} transport error: {e!r}")
            raise StorageUnavailable(
                f"{type(e).__name__}: {e}", operation=operation, target=self.index
            ) from e

    def _doc_path(self, location_id: str) -> str:
        # ids are opaque: encode as one path segment ('/', '?', '#', '%' included)
        return f"/{self.index}/_doc/{quote(location_id, safe='')}"

    def _check(
        self,
        res: httpx.Response,
        operation: str,
        client_error: Type[LocationServiceError],
    ) -> None:
        if res.status_code < 400:
            return
        msg = f"status {res.status_code}, body: {res.text[:500]}"
        if res.status_code >= 500:
            raise StorageUnavailable(msg, operation=operation, target=self.index)
        raise client_error(msg, operation=operation, target=self.index)

    def _json(self, res: httpx.Response, operation: str) -> dict:
        try:
            return res.json()
        except ValueError as e:
            raise StorageUnavailable(
                f"undecodable response: {e}", operation=operation, target=self.index
            ) from e

    def _parse(self, source: dict, operation: str) -> Location:
        try:
            return Location.model_validate(source)
        except ValidationError as e:
            raise SchemaError(
                f"stored document does not match Location: {e}",
                operation=operation,
                target=self.index,
            ) from e

    # ── operations ───────────────────────────────────────────────────────────
    async def create_index(
        self, mapping: dict, *, deadline: Optional[float] = None
    ) -> bool:
        """Create the index with `mapping`; returns False when it already existed."""
        op = "create_index"
        res = await self._send("HEAD", f"/{self.index}", operation=op, deadline=deadline)
        if res.status_code == 200:
            return False
        if res.status_code != 404:
            # auth/proxy refusals on the existence check, not a bad mapping
            self._check(res, op, StorageUnavailable)

        res = await self._send(
            "PUT", f"/{self.index}", operation=op, deadline=deadline, json=mapping
        )
        if res.status_code == 400 and "resource_already_exists" in res.text:
            # created concurrently between HEAD and PUT
            return False
        self._check(res, op, SchemaError)
        logger.info(f"[Search] index '{self.index}' created")
        return True

    async def index_location(
        self, location: Location, *, deadline: Optional[float] = None
    ) -> None:
        """Upsert one document, refreshed so the next read sees it."""
        op = "index_location"
        res = await self._send(
            "PUT",
            self._doc_path(location.id),
            operation=op,
            deadline=deadline,
            params={"refresh": "true"},
            json=location.to_document(),
        )
        self._check(res, op, SchemaError)

    async def bulk_index_locations(
        self, locations: Iterable[Location], *, deadline: Optional[float] = None
    ) -> int:
        """
        One _bulk round trip. Any non-2xx answer fails the whole batch;
        per-item results in the response body are not inspected.
        """
        op = "bulk_index_locations"
        lines: List[str] = []
        for loc in locations:
            lines.append(json.dumps({"index": {"_index": self.index, "_id": loc.id}}))
            lines.append(json.dumps(loc.to_document(), ensure_ascii=False))
        if not lines:
            return 0

        res = await self._send(
            "POST",
            "/_bulk",
            operation=op,
            deadline=deadline,
            params={"refresh": "true"},
            content=("\n".join(lines) + "\n").encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        )
        self._check(res, op, SchemaError)
        return len(lines) // 2

    async def get_location(
        self, location_id: str, *, deadline: Optional[float] = None
    ) -> Location:
        op = "get_location"
        res = await self._send(
            "GET", self._doc_path(location_id), operation=op, deadline=deadline
        )
        if res.status_code == 404:
            raise NotFound(f"location {location_id!r} not found", operation=op, target=self.index)
        self._check(res, op, QueryError)

        data = self._json(res, op)
        if not data.get("found"):
            raise NotFound(f"location {location_id!r} not found", operation=op, target=self.index)
        return self._parse(data.get("_source") or {}, op)

    async def search(
        self,
        query: StructuredQuery,
        limit: Optional[int] = None,
        *,
        deadline: Optional[float] = None,
    ) -> List[SearchHit]:
        """Hits in engine order (the query's sort), at most `limit` of them."""
        op = "search"
        size = limit if limit is not None else query.size
        res = await self._send(
            "POST",
            f"/{self.index}/_search",
            operation=op,
            deadline=deadline,
            params={"size": size},
            json=query.to_body(),
        )
        self._check(res, op, QueryError)

        hits = (self._json(res, op).get("hits") or {}).get("hits") or []
        out: List[SearchHit] = []
        for hit in hits[:size]:
            location = self._parse(hit.get("_source") or {}, op)
            out.append((location, float(hit.get("_score") or 0.0)))
        return out
