import json
import logging
from typing import Any, Dict, List, Protocol


logger = logging.getLogger(__name__)

STORAGE_KEY = "firebase-manager-collections"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> Any: ...


class MemoryStore:
    def __init__(self) -> None:
        self.data: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class CollectionBookmarks:
    """Ordered, distinct collection names persisted as a JSON array."""

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self._names: List[str] = self._load()

    def _load(self) -> List[str]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            parsed = json.loads(raw) if isinstance(raw, str) else raw
        except ValueError:
            logger.error("Error parsing saved collections under %r", self.key)
            return []
        if not isinstance(parsed, list):
            logger.error("Saved collections under %r are not a list", self.key)
            return []

        names: List[str] = []
        for item in parsed:
            if isinstance(item, str) and item and item not in names:
                names.append(item)
        return names

    def _save(self) -> None:
        self.store.set(self.key, json.dumps(self._names))

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def add(self, name: str) -> bool:
        if not name or name in self._names:
            return False
        self._names.append(name)
        self._save()
        return True

    def remove(self, name: str) -> bool:
        if name not in self._names:
            return False
        self._names.remove(name)
        self._save()
        return True
