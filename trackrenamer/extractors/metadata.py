"""Tag metadata extraction using TinyTag."""

import logging
from pathlib import Path

from tinytag import TinyTag

from ..models.track import LocalTrack

logger = logging.getLogger(__name__)


class MetadataExtractor:
    """Reads artist and title tags from audio files using TinyTag."""

    def extract(self, file_path: Path) -> LocalTrack:
        """Build a LocalTrack for an audio file.

        Files whose tags cannot be read still produce a record, with empty
        tag fields.
        """
        artist = ""
        title = ""
        try:
            tag = TinyTag.get(str(file_path))
            artist = tag.artist or ""
            title = tag.title or ""
        except Exception as e:
            logger.warning(f"Could not read metadata from {file_path}: {e}")

        return LocalTrack(
            path=str(file_path),
            original_name=file_path.name,
            tag_artist=artist,
            tag_title=title,
        )
