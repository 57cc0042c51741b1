"""Matching of release tracklists against local files."""

import logging
import os

from ..exceptions import AlbumFetchError
from ..models.album import AlbumData, AlbumTrack
from ..models.track import LocalTrack, MatchedTrack
from ..services.albums import AlbumFetcher
from ..utils.similarity import sorensen_dice
from ..utils.text import clean_track_title, extract_track_number, has_token_overlap, normalize_for_match

logger = logging.getLogger(__name__)

TRACK_NUMBER_BONUS = 0.12
TRACK_NUMBER_BONUS_CEILING = 0.9  # ratings at or above this get no bonus
BEATPORT_MIN_CONFIDENCE = 0.25


class TrackMatcher:
    """Pairs release tracks with local files and proposes new names.

    Matching is greedy in release order: each release track takes the best
    remaining file, which is then removed from the pool.
    """

    def __init__(self, album_fetcher: AlbumFetcher | None = None) -> None:
        self._album_fetcher = album_fetcher or AlbumFetcher()

    def fetch_and_match(self, url: str, local_tracks: list[LocalTrack]) -> list[MatchedTrack]:
        """Fetch the release at url and match its tracks against local files.

        Raises:
            AlbumFetchError: if the release cannot be fetched or parsed.
        """
        try:
            album = self._album_fetcher.fetch_album_data(url)
        except AlbumFetchError as e:
            raise AlbumFetchError(f"failed to fetch or parse album data: {e}") from e
        return self.match_album(album, local_tracks, url)

    def match_album(
        self, album: AlbumData, local_tracks: list[LocalTrack], url: str = ""
    ) -> list[MatchedTrack]:
        """Match an already fetched release against local files."""
        available = list(local_tracks)
        matched = []

        logger.debug(f"Album URL: {url}")
        logger.debug(f"Album Artist: {album.artist}")
        logger.debug(f"Is VA Album (calculated): {is_various_artists(album, url)}")

        min_confidence = BEATPORT_MIN_CONFIDENCE if album.is_beatport else 0.0

        for album_track in album.tracks:
            if not available:
                break
            logger.debug(f"Processing Album Track: {album_track.title} (Num: {album_track.track_num})")

            best_index = -1
            best_rating = -1.0
            for i, local in enumerate(available):
                rating = self._rate(album, album_track, local)
                if rating > best_rating:
                    best_rating = rating
                    best_index = i

            if best_index == -1 or best_rating < min_confidence:
                logger.debug(f"No confident match for '{album_track.title}' ({best_rating:.3f})")
                continue

            local = available.pop(best_index)
            matched.append(
                MatchedTrack(
                    local_path=local.path,
                    original_name=local.original_name,
                    proposed_new_name=propose_name(album, album_track, local),
                    confidence=best_rating,
                    status=f"{album.source} Match",
                )
            )

        return matched

    def _rate(self, album: AlbumData, album_track: AlbumTrack, local: LocalTrack) -> float:
        """Score how well a local file fits a release track."""
        original_name = local.original_name or ""
        local_stem = os.path.splitext(original_name)[0]
        normalized_local = normalize_for_match(local_stem)
        normalized_title = normalize_for_match(album_track.title)

        normalized_full = ""
        if album_track.artist.strip():
            normalized_full = normalize_for_match(f"{album_track.artist} - {album_track.title}")
        elif album.artist:
            normalized_full = normalize_for_match(f"{album.artist} - {album_track.title}")

        rating_filename = max(
            _overlap_similarity(normalized_title, normalized_local),
            _overlap_similarity(normalized_full, normalized_local),
        )

        rating_tags = 0.0
        tag_title = local.tag_title or ""
        tag_artist = local.tag_artist or ""
        if tag_title:
            rating_tags = _overlap_similarity(normalized_title, normalize_for_match(tag_title))
            if tag_artist and normalized_full:
                tag_full = normalize_for_match(f"{tag_artist} - {tag_title}")
                rating_tags = max(rating_tags, _overlap_similarity(normalized_full, tag_full))

        rating = rating_filename
        if rating_tags > rating:
            rating = rating_tags
            logger.debug(f"  Higher match found using tags for '{original_name}': {rating:f}")

        logger.debug(
            f"  Comparing Album '{album_track.title}' with Local '{local_stem}' "
            f"(Tags: '{tag_artist}' - '{tag_title}')"
        )
        logger.debug(f"  Similarity Rating: {rating:f}")

        if album_track.track_num_explicit and album_track.track_num > 0:
            local_num = extract_track_number(local_stem)
            if local_num and int(local_num) == album_track.track_num and rating < TRACK_NUMBER_BONUS_CEILING:
                rating = min(rating + TRACK_NUMBER_BONUS, 1.0)

        return rating


def _overlap_similarity(a: str, b: str) -> float:
    """Similarity of two normalized names, or 0 when they share no word."""
    if not a or not has_token_overlap(a, b):
        return 0.0
    return sorensen_dice(a, b)


def is_various_artists(album: AlbumData, url: str) -> bool:
    artist = album.artist.lower()
    markers = ("various", "v.a.", "va ")
    return any(marker in artist for marker in markers) or "/va-" in url


def propose_name(album: AlbumData, album_track: AlbumTrack, local: LocalTrack) -> str:
    """Build the new filename for a matched local file.

    Produces "NN. Artist - Title.ext", or "NN. Title.ext" when the title
    already carries a dash or no artist is known.
    """
    original_name = local.original_name or ""
    stem, ext = os.path.splitext(original_name)

    track_num = album_track.track_num
    local_num = extract_track_number(stem)
    if local_num:
        n = int(local_num)
        if album.is_beatport and album_track.track_num_explicit and album_track.track_num != n:
            track_num = n
        elif not album_track.track_num_explicit:
            track_num = n

    title = album_track.title
    if album_track.track_num_explicit and album_track.track_num > 0:
        title = clean_track_title(album_track.title, album_track.track_num)

    album_artist = album.artist.strip()
    if not album_artist:
        title_parts = album.title.split(" - ", 1)
        if len(title_parts) > 1:
            album_artist = title_parts[0]

    track_artist = album_track.artist.strip()
    if "-" in title:
        return f"{track_num:02d}. {title}{ext}"
    if track_artist:
        return f"{track_num:02d}. {track_artist} - {title}{ext}"
    if album_artist:
        return f"{track_num:02d}. {album_artist} - {title}{ext}"
    return f"{track_num:02d}. {title}{ext}"
