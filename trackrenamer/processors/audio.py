"""Audio file scanning."""

import logging
from pathlib import Path

from ..config import SUPPORTED_FORMATS

logger = logging.getLogger(__name__)


class AudioProcessor:
    """Finds audio files in a folder."""

    def scan_directory(self, folder: Path) -> list[Path]:
        """Return the supported audio files directly inside folder, sorted by name.

        Subfolders are not searched.
        """
        folder = Path(folder)
        if not folder.exists():
            raise FileNotFoundError(f"Folder not found: {folder}")
        if not folder.is_dir():
            raise NotADirectoryError(f"Not a folder: {folder}")

        audio_files = [
            entry
            for entry in folder.iterdir()
            if entry.is_file() and entry.suffix.lower() in SUPPORTED_FORMATS
        ]
        logger.debug(f"Found {len(audio_files)} audio files in {folder}")
        return sorted(audio_files, key=lambda p: p.name)
