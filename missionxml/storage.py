#!/usr/bin/env python3
"""
storage.py - Staged editor state for the mission being edited.

The assessment and its overview are kept as two JSON strings in a key-value
store, under MissionEditingAssessmentSA and MissionEditingOverviewSA by
default. A missing key means nothing is staged.

JsonFileStore format:
{
  "version": "1.0",
  "entries": {
    "MissionEditingAssessmentSA": "{\"id\": -1, ...}",
    "MissionEditingOverviewSA": "{\"id\": -1, ...}"
  }
}

Usage:
    from missionxml.storage import JsonFileStore, retrieve_local_assessment

    store = JsonFileStore(Path(".missionxml/editing_state.json"))
    assessment = retrieve_local_assessment(store)
"""

import json
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, TypeVar

from missionxml.config_utils import DEFAULT_ASSESSMENT_KEY, DEFAULT_OVERVIEW_KEY
from missionxml.errors import StorageError
from missionxml.icons import WARNING
from missionxml.models import Assessment, AssessmentOverview


T = TypeVar("T")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, for tests and embedding."""

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self.entries: Dict[str, str] = dict(entries or {})

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def put(self, key: str, value: str) -> None:
        self.entries[key] = value

    def clear(self, key: str) -> None:
        self.entries.pop(key, None)


class JsonFileStore:
    """
    Store backed by a single JSON file.

    Every put/clear rewrites the file. An unreadable file is treated as empty
    and replaced on the next write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.version = "1.0"
        self.entries: Dict[str, str] = {}

        self._load()

    def _load(self):
        """Load entries from disk."""
        if not self.path.exists():
            return

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self.version = data.get("version", "1.0")
            self.entries = dict(data.get("entries", {}))
        except (OSError, ValueError, AttributeError, TypeError) as e:
            print(f"[store:warn] {WARNING} Failed to load {self.path}: {e}")
            print(f"[store:warn] Starting with empty editing state")

    def save(self):
        """Save entries to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": self.version,
            "entries": self.entries,
        }

        try:
            self.path.write_text(
                json.dumps(data, indent=2, sort_keys=True),
                encoding="utf-8"
            )
        except OSError as e:
            raise StorageError(f"Failed to save {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def put(self, key: str, value: str) -> None:
        self.entries[key] = value
        self.save()

    def clear(self, key: str) -> None:
        if self.entries.pop(key, None) is not None:
            self.save()


# ============================================================================
# Staged assessment / overview
# ============================================================================

def _retrieve(store: KeyValueStore, key: str, from_dict: Callable[[dict], T]) -> Optional[T]:
    raw = store.get(key)
    if raw is None:
        return None

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise StorageError(f"Staged value under '{key}' is not valid JSON: {e}")

    try:
        return from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise StorageError(f"Staged value under '{key}' is not a valid record: {e!r}")


def retrieve_local_assessment(
    store: KeyValueStore,
    key: str = DEFAULT_ASSESSMENT_KEY,
) -> Optional[Assessment]:
    """The staged assessment, or None when nothing is staged."""
    return _retrieve(store, key, Assessment.from_dict)


def retrieve_local_assessment_overview(
    store: KeyValueStore,
    key: str = DEFAULT_OVERVIEW_KEY,
) -> Optional[AssessmentOverview]:
    """The staged overview, or None when nothing is staged."""
    return _retrieve(store, key, AssessmentOverview.from_dict)


def store_local_assessment(
    store: KeyValueStore,
    assessment: Assessment,
    key: str = DEFAULT_ASSESSMENT_KEY,
) -> None:
    store.put(key, json.dumps(assessment.to_dict()))


def store_local_assessment_overview(
    store: KeyValueStore,
    overview: AssessmentOverview,
    key: str = DEFAULT_OVERVIEW_KEY,
) -> None:
    store.put(key, json.dumps(overview.to_dict()))


def clear_local_state(
    store: KeyValueStore,
    assessment_key: str = DEFAULT_ASSESSMENT_KEY,
    overview_key: str = DEFAULT_OVERVIEW_KEY,
) -> None:
    """Drop both staged records."""
    store.clear(assessment_key)
    store.clear(overview_key)
