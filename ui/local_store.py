"""Durable key-value store holding one JSON document per collection."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from core.errors import LocalStoreError

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> List[Dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as exc:
            raise LocalStoreError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(data, list):
            raise LocalStoreError(f"{path} does not hold a JSON array")
        return data

    def write(self, key: str, items: List[Dict[str, Any]]) -> None:
        """Replace the whole document for ``key``."""
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        except OSError as exc:
            raise LocalStoreError(f"Cannot write {path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except OSError as exc:
            raise LocalStoreError(f"Cannot write {path}: {exc}") from exc
        finally:
            # Gone after a successful replace
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %d item(s) to %s", len(items), path)
