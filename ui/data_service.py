"""Single CRUD entry point over the remote backend and the local store.

Remote failures never reach callers: the service flips its ``online`` flag to
False and serves the request from the local store instead. A failed remote
write is not retried or queued; the entity only lands locally.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import ValidationError

from core.errors import DataServiceError, LocalStoreError
from core.settings import Settings, get_settings
from modules.catalog.entities import Component, Product
from modules.catalog.kinds import COMPONENTS, PRODUCTS, EntityKind
from ui.api_client import BackendClient
from ui.local_store import LocalStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Outcome(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
    FAILED = "failed"


@dataclass
class OperationResult(Generic[T]):
    outcome: Outcome
    value: Optional[T] = None
    # Remote error that caused a local fallback, or the local error on FAILED
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.FAILED


class DataService:
    def __init__(self, backend: Optional[BackendClient], store: LocalStore, online: Optional[bool] = None):
        self.backend = backend
        self.store = store
        self.online = self.configured if online is None else online

    @property
    def configured(self) -> bool:
        return self.backend is not None and self.backend.configured

    # --- local collection helpers ---

    def _read_local(self, kind: EntityKind) -> List[Any]:
        raw = self.store.read(kind.store_key)
        try:
            return [kind.entity_type.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise LocalStoreError(f"Stored {kind.name} are malformed") from exc

    def _write_local(self, kind: EntityKind, items: List[Any]) -> None:
        self.store.write(kind.store_key, [item.to_entity_dict() for item in items])

    def _local_add(self, kind: EntityKind, entity):
        items = self._read_local(kind)
        if any(item.id == entity.id for item in items):
            items = [entity if item.id == entity.id else item for item in items]
        else:
            items.append(entity)
        self._write_local(kind, items)
        return entity

    def _local_update(self, kind: EntityKind, entity):
        items = [entity if item.id == entity.id else item for item in self._read_local(kind)]
        self._write_local(kind, items)
        return entity

    def _local_delete(self, kind: EntityKind, entity_id: str) -> None:
        self._write_local(kind, [item for item in self._read_local(kind) if item.id != entity_id])

    # --- result plumbing ---

    def _mark_offline(self, action: str, kind: EntityKind, exc: Exception) -> None:
        if self.online:
            logger.warning("Backend %s of %s failed (%s); switching to local storage", action, kind.name, exc)
        else:
            logger.debug("Backend %s of %s failed (%s)", action, kind.name, exc)
        self.online = False

    def _try_remote(self, action: str, kind: EntityKind, call: Callable[[], T]):
        try:
            value = call()
        except DataServiceError as exc:
            self._mark_offline(action, kind, exc)
            return None, exc
        self.online = True
        return OperationResult(Outcome.REMOTE, value), None

    def _run_local(self, call: Callable[[], T], remote_error: Optional[Exception] = None, default=None):
        try:
            value = call()
        except LocalStoreError as exc:
            logger.error("Local storage failed: %s", exc)
            return OperationResult(Outcome.FAILED, default, exc)
        return OperationResult(Outcome.LOCAL, value, remote_error)

    def _write(self, action: str, kind: EntityKind, remote_call: Callable, local_call: Callable) -> OperationResult:
        remote_error = None
        if self.online and self.configured:
            result, remote_error = self._try_remote(action, kind, remote_call)
            if result is not None:
                return result
        return self._run_local(local_call, remote_error)

    # --- generic operations ---

    def fetch(self, kind: EntityKind) -> OperationResult:
        remote_error = None
        if self.configured:
            result, remote_error = self._try_remote("fetch", kind, lambda: self.backend.list(kind))
            if result is not None:
                return result
        return self._run_local(lambda: self._read_local(kind), remote_error, default=[])

    def create(self, kind: EntityKind, entity) -> OperationResult:
        return self._write(
            "create", kind, lambda: self.backend.create(kind, entity), lambda: self._local_add(kind, entity)
        )

    def update(self, kind: EntityKind, entity) -> OperationResult:
        return self._write(
            "update", kind, lambda: self.backend.update(kind, entity), lambda: self._local_update(kind, entity)
        )

    def delete(self, kind: EntityKind, entity_id: str) -> OperationResult:
        return self._write(
            "delete", kind, lambda: self.backend.delete(kind, entity_id), lambda: self._local_delete(kind, entity_id)
        )

    @staticmethod
    def _unwrap(result: OperationResult):
        if result.outcome == Outcome.FAILED:
            raise DataServiceError(f"Local storage unavailable: {result.error}") from result.error
        return result.value

    # --- entity specific API used by the UI ---

    def fetch_components(self) -> List[Component]:
        return self.fetch(COMPONENTS).value

    def add_component(self, component: Component) -> Component:
        return self._unwrap(self.create(COMPONENTS, component))

    def update_component(self, component: Component) -> Component:
        return self._unwrap(self.update(COMPONENTS, component))

    def delete_component(self, component_id: str) -> None:
        # Products referencing the component are left untouched
        self._unwrap(self.delete(COMPONENTS, component_id))

    def fetch_products(self) -> List[Product]:
        return self.fetch(PRODUCTS).value

    def add_product(self, product: Product) -> Product:
        return self._unwrap(self.create(PRODUCTS, product))

    def update_product(self, product: Product) -> Product:
        return self._unwrap(self.update(PRODUCTS, product))

    def delete_product(self, product_id: str) -> None:
        self._unwrap(self.delete(PRODUCTS, product_id))


def build_data_service(settings: Settings = None) -> DataService:
    settings = settings or get_settings()
    backend = BackendClient(settings.api_url, fetch_timeout=settings.fetch_timeout_seconds)
    store = LocalStore(settings.local_store_dir)
    service = DataService(backend, store)
    logger.info(
        "Data service ready (endpoint=%s, local store=%s)", settings.api_url or "none", settings.local_store_dir
    )
    return service
