"""Applying rename proposals on disk."""

import logging
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from ..models.track import MatchedTrack

logger = logging.getLogger(__name__)


@dataclass
class RenameResult:
    """Counts of a rename run."""

    renamed: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def message(self) -> str:
        return f"Successfully renamed {self.renamed} track(s)."


def _is_text(value) -> bool:
    return isinstance(value, str) and bool(value)


def is_bare_filename(name: str) -> bool:
    """Check that name has no directory part, so the rename stays in its folder."""
    if name in (".", "..") or "/" in name or "\\" in name:
        return False
    return Path(name).name == name


def rename_matched_tracks(tracks: list[MatchedTrack], show_progress: bool = False) -> RenameResult:
    """Rename each matched file to its proposed name within its folder.

    Unchanged names, existing targets, incomplete entries and proposed names
    with a folder part are skipped. Failed renames are logged and counted;
    they never stop the run.
    """
    result = RenameResult()
    for track in tqdm(tracks, desc="Renaming", unit="file", disable=not show_progress):
        if track.original_name == track.proposed_new_name:
            result.skipped += 1
            continue
        if not _is_text(track.local_path) or not _is_text(track.proposed_new_name):
            logger.warning(f"Skipping rename for {track.original_name}: incomplete rename entry")
            result.skipped += 1
            continue
        if not is_bare_filename(track.proposed_new_name):
            logger.warning(
                f"Skipping rename for {track.original_name}: "
                f"proposed name {track.proposed_new_name!r} is not a plain filename"
            )
            result.skipped += 1
            continue

        source = Path(track.local_path)
        target = source.parent / track.proposed_new_name
        if target.exists():
            logger.warning(
                f"Skipping rename for {track.original_name}: "
                f"target file {track.proposed_new_name} already exists"
            )
            result.skipped += 1
            continue

        try:
            source.rename(target)
        except OSError as e:
            logger.error(f"Error renaming {source} to {target}: {e}")
            result.failed += 1
            continue
        logger.debug(f"Renamed {source.name} -> {target.name}")
        result.renamed += 1

    return result
