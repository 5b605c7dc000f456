"""Device-scoped key-value storage the local scenario store writes to."""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, Optional, Protocol

from wealth_planner.schemas.scenario import Identity

logger = logging.getLogger(__name__)

GUEST_NAMESPACE = "scenarios_guest"


def storage_namespace(identity: Optional[Identity]) -> str:
    if identity is None:
        return GUEST_NAMESPACE
    return f"scenarios_{identity.email or identity.id}"


class KeyValueStorage(Protocol):
    def get(self, namespace: str) -> Optional[str]:
        ...

    def set(self, namespace: str, raw: str) -> None:
        ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, namespace: str) -> Optional[str]:
        return self._data.get(namespace)

    def set(self, namespace: str, raw: str) -> None:
        self._data[namespace] = raw


class JsonFileStorage:
    """All namespaces live in one JSON object file; every write replaces it atomically."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw_text = f.read().strip()
                if not raw_text:
                    return {}
                data = json.loads(raw_text)
        # ValueError covers bad JSON and bytes that are not UTF-8
        except (ValueError, OSError):
            logger.warning("Ignoring unreadable storage file %s", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def get(self, namespace: str) -> Optional[str]:
        return self._read_all().get(namespace)

    def set(self, namespace: str, raw: str) -> None:
        data = self._read_all()
        data[namespace] = raw
        folder = os.path.dirname(self.path)
        if folder and not os.path.exists(folder):
            os.makedirs(folder, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)
