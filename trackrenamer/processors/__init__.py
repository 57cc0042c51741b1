"""Processor modules for scanning, renaming and matching audio files."""

from .audio import AudioProcessor
from .matcher import TrackMatcher
from .renamer import RenameResult, rename_matched_tracks
from .template import generate_template_renames

__all__ = [
    "AudioProcessor",
    "RenameResult",
    "TrackMatcher",
    "generate_template_renames",
    "rename_matched_tracks",
]
