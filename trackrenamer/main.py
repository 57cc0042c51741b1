#!/usr/bin/env python3
"""
Track Renamer

Scans a folder of audio files and proposes clean "NN. Artist - Title"
names, either from the filenames themselves, from a Bandcamp or Beatport
release page, or from an AI parse of the filenames. Proposals are printed
as JSON and can be applied to disk.
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from tqdm import tqdm

from .config import FORMAT_ARTIST_TITLE, RENAME_FORMATS, Config, configure_logging
from .exceptions import TrackRenamerError
from .extractors.metadata import MetadataExtractor
from .models.track import AIParsedTrack, LocalTrack, MatchedTrack
from .processors import renamer, template
from .processors.audio import AudioProcessor
from .processors.matcher import TrackMatcher
from .services.albums import AlbumFetcher
from .services.bandcamp import BandcampService
from .services.beatport import BeatportService
from .services.gemini import GeminiService
from .services.http import PageFetcher

logger = logging.getLogger(__name__)


class TrackRenamerApp:
    """Entry points used by the CLI and any frontend."""

    def __init__(self, config: Config, matcher: TrackMatcher | None = None) -> None:
        self._config = config
        self._audio = AudioProcessor()
        self._metadata = MetadataExtractor()
        if matcher is None:
            fetcher = PageFetcher(config.http)
            matcher = TrackMatcher(
                AlbumFetcher(BandcampService(fetcher), BeatportService(fetcher))
            )
        self._matcher = matcher

    def select_folder(self, path: str, show_progress: bool = False) -> list[LocalTrack]:
        """List the audio files in a folder with their tag metadata.

        An empty path means no folder was chosen and yields no tracks.
        """
        if not path:
            return []

        audio_files = self._audio.scan_directory(Path(path))
        logger.info(f"Reading tags from {len(audio_files)} files in {path}")

        with ThreadPoolExecutor(max_workers=self._config.max_workers) as executor:
            return list(
                tqdm(
                    executor.map(self._metadata.extract, audio_files),
                    total=len(audio_files),
                    desc="Reading tags",
                    unit="file",
                    disable=not show_progress,
                )
            )

    def generate_template_renames(
        self, local_tracks: list[LocalTrack], rename_format: str = FORMAT_ARTIST_TITLE
    ) -> list[MatchedTrack]:
        return template.generate_template_renames(local_tracks, rename_format)

    def fetch_and_match_tracks(self, url: str, local_tracks: list[LocalTrack]) -> list[MatchedTrack]:
        return self._matcher.fetch_and_match(url, local_tracks)

    def rename_matched_tracks(
        self, tracks: list[MatchedTrack], show_progress: bool = False
    ) -> renamer.RenameResult:
        result = renamer.rename_matched_tracks(tracks, show_progress=show_progress)
        logger.info(
            f"Renamed {result.renamed}, skipped {result.skipped}, failed {result.failed}"
        )
        return result

    def parse_filenames_with_ai(
        self, filenames: list[str], api_key: str | None = None
    ) -> list[AIParsedTrack]:
        """Ask the configured AI model to split filenames into their parts.

        An explicit api_key takes precedence over the configured one.
        """
        gemini_config = self._config.gemini
        if api_key:
            gemini_config = replace(gemini_config, api_key=api_key)
        return GeminiService(gemini_config).parse_filenames(filenames)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _load_plan(plan_path: Path) -> list[MatchedTrack]:
    """Read a rename plan, as printed by the template or match commands."""
    with open(plan_path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Rename plan must be a JSON list: {plan_path}")
    return [MatchedTrack.create_from(item) for item in data]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Propose and apply clean names for audio files"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of parallel tag readers (default: TRACK_RENAMER_WORKERS or 4)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="List audio files with their tags")
    scan.add_argument("folder")

    template_cmd = subparsers.add_parser("template", help="Propose names from the filenames")
    template_cmd.add_argument("folder")
    template_cmd.add_argument(
        "--format",
        dest="rename_format",
        choices=RENAME_FORMATS,
        default=FORMAT_ARTIST_TITLE,
        help=f"Target name format (default: {FORMAT_ARTIST_TITLE})",
    )
    template_cmd.add_argument("--apply", action="store_true", help="Rename the files")

    match = subparsers.add_parser("match", help="Propose names from a Bandcamp or Beatport release")
    match.add_argument("folder")
    match.add_argument("url")
    match.add_argument("--apply", action="store_true", help="Rename the files")

    ai_parse = subparsers.add_parser("ai-parse", help="Split filenames with the Gemini API")
    ai_parse.add_argument("folder")
    ai_parse.add_argument("--api-key", help="Gemini API key (default: GEMINI_API_KEY)")

    rename = subparsers.add_parser("rename", help="Apply a saved rename plan")
    rename.add_argument("plan", type=Path)

    return parser.parse_args(argv)


def run(args: argparse.Namespace, app: TrackRenamerApp) -> None:
    """Run one CLI command."""
    if args.command == "rename":
        result = app.rename_matched_tracks(_load_plan(args.plan), show_progress=True)
        print(result.message)
        return

    local_tracks = app.select_folder(args.folder, show_progress=True)

    if args.command == "scan":
        _print_json([track.to_dict() for track in local_tracks])
        return

    if args.command == "ai-parse":
        filenames = [track.original_name for track in local_tracks]
        parsed = app.parse_filenames_with_ai(filenames, api_key=args.api_key)
        _print_json([track.to_dict() for track in parsed])
        return

    if args.command == "template":
        matched = app.generate_template_renames(local_tracks, args.rename_format)
    else:
        matched = app.fetch_and_match_tracks(args.url, local_tracks)
    _print_json([track.to_dict() for track in matched])

    if args.apply:
        result = app.rename_matched_tracks(matched, show_progress=True)
        print(result.message)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        config = Config.from_environment()
        if args.workers is not None:
            config.max_workers = args.workers
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        run(args, TrackRenamerApp(config))
    except (TrackRenamerError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
