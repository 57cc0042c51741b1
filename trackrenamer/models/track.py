"""Track records exchanged with the frontend.

Each record mirrors a JSON object with fixed key names. Records are built
from a loosely-typed source (a mapping or its JSON string form); keys that
are missing from the source become None rather than raising.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

# Status values written by the rename planners
STATUS_NO_MATCH = "No Match"
STATUS_MATCHED = "Matched"


def _load_source(source: Any) -> Mapping:
    """Normalize a record source into a mapping."""
    if source is None:
        return {}
    if isinstance(source, (str, bytes, bytearray)):
        source = json.loads(source)
    if not isinstance(source, Mapping):
        raise TypeError(f"Cannot build a record from {type(source).__name__}")
    return source


class _WireRecord:
    """Mixin mapping dataclass attributes to their JSON keys."""

    _wire_keys: ClassVar[dict[str, str]] = {}

    @classmethod
    def create_from(cls, source: Any = None):
        """Build a record from a mapping or a JSON-encoded string of one."""
        data = _load_source(source)
        values = {
            f.name: data.get(cls._wire_keys.get(f.name, f.name))
            for f in fields(cls)
        }
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary keyed by wire names."""
        return {
            self._wire_keys.get(f.name, f.name): getattr(self, f.name)
            for f in fields(self)
        }


@dataclass(frozen=True)
class AIParsedTrack(_WireRecord):
    """Best-effort guess of a filename's metadata, as returned by the AI parser."""

    original_filename: str | None = None
    artist: str | None = None
    title: str | None = None
    track_number: str | None = None


@dataclass(frozen=True)
class LocalTrack(_WireRecord):
    """An audio file found on disk with any embedded tag metadata."""

    path: str | None = None
    original_name: str | None = None
    tag_artist: str | None = None
    tag_title: str | None = None

    _wire_keys: ClassVar[dict[str, str]] = {
        "original_name": "originalName",
        "tag_artist": "tagArtist",
        "tag_title": "tagTitle",
    }


@dataclass(frozen=True)
class MatchedTrack(_WireRecord):
    """A local file paired with a proposed new name."""

    local_path: str | None = None
    original_name: str | None = None
    proposed_new_name: str | None = None
    confidence: float | None = None
    status: str | None = None

    _wire_keys: ClassVar[dict[str, str]] = {
        "local_path": "localPath",
        "original_name": "originalName",
        "proposed_new_name": "proposedNewName",
    }
