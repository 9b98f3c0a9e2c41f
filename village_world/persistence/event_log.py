"""Append-only JSONL event log with size-based rotation."""

from __future__ import annotations

import json
import gzip
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List

from ..config import CONFIG
from ..core.events import ResourceEvent

DEFAULT_RETENTION_MB = 50

# Event type constants used by the reservation manager and systems
RESOURCE_SPAWNED = "RESOURCE_SPAWNED"
RESERVATION_GRANTED = "RESERVATION_GRANTED"
RESERVATION_REJECTED = "RESERVATION_REJECTED"
RESOURCE_RELEASED = "RESOURCE_RELEASED"
RESOURCE_CONSUMED = "RESOURCE_CONSUMED"
RESOURCE_REMOVED = "RESOURCE_REMOVED"


def _log_retention_bytes() -> int:
    """Rotation threshold from ``paths.log_retention_mb`` in the loaded config."""
    paths = CONFIG.paths or {}
    return int(paths.get("log_retention_mb", DEFAULT_RETENTION_MB)) * 1024 * 1024


def _rotate_log(path: Path) -> Path:
    """Gzip ``path`` under a timestamped name beside it, then remove it."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    archive = path.with_name(f"{path.stem}_{stamp}{path.suffix}.gz")
    with path.open("rb") as src, gzip.open(archive, "wb") as dst:
        shutil.copyfileobj(src, dst)
    path.unlink()
    return archive


def append_event(
    dest: str | Path | List[Dict[str, Any]], tick: int, event_type: str, data: Any
) -> None:
    """Append an event to ``dest`` which may be a path or in-memory list."""

    record = {"tick": tick, "event_type": event_type, "data": data}
    if isinstance(dest, list):
        dest.append(record)
        return

    path = Path(dest)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.is_file() and path.stat().st_size >= _log_retention_bytes():
        _rotate_log(path)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def append_resource_event(
    dest: str | Path | List[Dict[str, Any]], event: ResourceEvent
) -> None:
    """Append a :class:`ResourceEvent` keyed by its ``kind``."""

    data = event.to_dict()
    data.pop("tick")
    data.pop("kind")
    append_event(dest, event.tick, event.kind, data)


def iter_events(
    path: str | Path, event_type: str | None = None
) -> Iterator[Dict[str, Any]]:
    """Yield events from ``path`` in the order they were logged.

    Malformed lines are skipped. With ``event_type`` only matching events
    are yielded.
    """

    p = Path(path)
    if not p.exists():
        return

    with p.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if event_type is None or event.get("event_type") == event_type:
                yield event


class EventLog:
    """JSONL file of simulation events."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def append(self, tick: int, event_type: str, data: Any) -> None:
        append_event(self.path, tick, event_type, data)

    def record(self, event: ResourceEvent) -> None:
        append_resource_event(self.path, event)

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return list(iter_events(self.path, event_type))

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        yield from iter_events(self.path)


__all__ = [
    "EventLog",
    "append_event",
    "append_resource_event",
    "iter_events",
    "RESOURCE_SPAWNED",
    "RESERVATION_GRANTED",
    "RESERVATION_REJECTED",
    "RESOURCE_RELEASED",
    "RESOURCE_CONSUMED",
    "RESOURCE_REMOVED",
]
