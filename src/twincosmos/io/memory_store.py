# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — In-Memory Key-Value Log
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Append/overwrite key-value log with linear substring retrieval."""

from __future__ import annotations

import dataclasses
import json
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass(frozen=True)
class MemoryEntry:
    key: str
    value: Any
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="replace")
    if isinstance(obj, Iterable):
        return list(obj)
    return str(obj)


def serialize_value(value: Any) -> str:
    """
    Compact JSON text used for substring retrieval.

    Never raises: unknown objects fall back to their ``str()``; values
    json cannot encode at all (self-references, non-string keys) fall back
    to their ``repr()``.
    """
    try:
        return json.dumps(value, default=_json_default, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(value)


class MemoryStore:
    """
    Unbounded in-memory log.  Storing an existing key overwrites its entry
    in place; nothing is ever evicted.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, MemoryEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def store(self, key: str, value: Any, metadata: Optional[Dict[str, Any]] = None) -> bool:
        self._entries[str(key)] = MemoryEntry(
            key=str(key),
            value=value,
            metadata=dict(metadata or {}),
            timestamp=time.time(),
        )
        return True

    def get(self, key: str) -> Optional[MemoryEntry]:
        return self._entries.get(key)

    def retrieve(self, query: str) -> List[MemoryEntry]:
        """Entries whose key or serialized value contains ``query``, in insertion order."""
        return [
            entry
            for key, entry in self._entries.items()
            if query in key or query in serialize_value(entry.value)
        ]
