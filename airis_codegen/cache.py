"""
結果快取 — 以內容指紋（scope + 節點內容 + 選項 + 版本 + 引擎設定）記住產生結果

不做淘汰；set 以 lock 保護、整筆替換，get 為單純 dict 查詢。
同時有多個呼叫端 miss 時可能重複計算，但已存入的值不會被部分改寫。
"""

import dataclasses
import hashlib
import json
import threading
from enum import Enum
from typing import Any, Optional


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def generate_key(scope: str, node, options, version: str, fragments=None, engine=None) -> str:
    """engine：會影響輸出的可替換設定（規則表、命名、縮放策略）."""
    payload = {
        "scope": scope,
        "node": _jsonable(node),
        "options": _jsonable(options),
        "version": version,
        "fragments": _jsonable(fragments),
        "engine": _jsonable(engine),
    }
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class ResultCache:
    def __init__(self):
        self._entries: dict = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        value = self._entries.get(key)
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def has(self, key: str) -> bool:
        return key in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        return {"hits": self.hits, "misses": self.misses, "size": len(self._entries)}
