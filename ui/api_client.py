"""HTTP client for the remote data service."""

import logging
from typing import Any, Dict, List, Optional

import requests

from core.errors import BackendNotConfigured, BackendUnavailable, WireDecodeError
from modules.catalog.kinds import EntityKind
from modules.catalog.wire import decode_list

logger = logging.getLogger(__name__)


def _friendly_message(default: str, resp) -> str:
    try:
        data = resp.json()
    except ValueError:
        return default
    if isinstance(data, dict):
        return data.get("message") or data.get("detail") or default
    return default


class BackendClient:
    """Talks to the REST endpoints under ``base_url``.

    Reads use ``fetch_timeout`` seconds; writes pass ``write_timeout`` which
    defaults to None, leaving them to the transport. ``session`` is anything
    with a requests-style ``request(method, url, json=..., timeout=...)``.
    """

    def __init__(
        self,
        base_url: Optional[str],
        fetch_timeout: float = 2.0,
        write_timeout: Optional[float] = None,
        session=None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.fetch_timeout = fetch_timeout
        self.write_timeout = write_timeout
        self.session = session if session is not None else requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None, timeout=None):
        if not self.configured:
            raise BackendNotConfigured()
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=payload, timeout=timeout)
        except requests.RequestException as exc:
            raise BackendUnavailable(f"{method} {path} failed: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise BackendUnavailable(
                _friendly_message(f"{method} {path} returned {resp.status_code}", resp),
                status_code=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise WireDecodeError("Response body is not JSON") from exc

    def list(self, kind: EntityKind) -> List[Any]:
        resp = self._request("GET", kind.collection_path, timeout=self.fetch_timeout)
        return decode_list(self._json(resp), kind.from_wire)

    def _written(self, kind: EntityKind, resp, entity) -> Any:
        # Only called after a 2xx, so the write is already stored remotely
        try:
            return kind.from_wire(self._json(resp))
        except WireDecodeError as exc:
            logger.warning("Backend stored %s %s but its reply could not be decoded: %s", kind.name, entity.id, exc)
            return entity

    def create(self, kind: EntityKind, entity) -> Any:
        resp = self._request("POST", kind.collection_path, kind.to_wire(entity), timeout=self.write_timeout)
        return self._written(kind, resp, entity)

    def update(self, kind: EntityKind, entity) -> Any:
        resp = self._request("PUT", kind.item_path(entity.id), kind.to_wire(entity), timeout=self.write_timeout)
        return self._written(kind, resp, entity)

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        self._request("DELETE", kind.item_path(entity_id), timeout=self.write_timeout)
