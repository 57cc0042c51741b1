"""Bandcamp release page service."""

import json
import logging

from bs4 import BeautifulSoup

from ..exceptions import AlbumFetchError
from ..models.album import AlbumData, AlbumTrack
from .http import PageFetcher

logger = logging.getLogger(__name__)

SOURCE_NAME = "Bandcamp"


class BandcampService:
    """Reads album tracklists from the data embedded in Bandcamp pages.

    Bandcamp album pages carry the full tracklist as JSON in the
    ``data-tralbum`` attribute of a script tag.
    """

    def __init__(self, fetcher: PageFetcher | None = None) -> None:
        self._fetcher = fetcher or PageFetcher()

    def fetch_album(self, url: str) -> AlbumData:
        """Fetch a Bandcamp album page and extract its tracklist.

        Raises:
            AlbumFetchError: if the page cannot be fetched or parsed.
        """
        doc = self._fetcher.fetch_document(url)
        album = parse_album_page(doc)
        logger.debug(f"Bandcamp album '{album.title}' by '{album.artist}': {len(album.tracks)} tracks")
        return album


def parse_album_page(doc: BeautifulSoup) -> AlbumData:
    """Extract album data from a parsed Bandcamp page."""
    script = doc.select_one("script[data-tralbum]")
    data = script.get("data-tralbum", "") if script is not None else ""
    if not data:
        raise AlbumFetchError("could not find album data on page")

    try:
        tralbum = json.loads(data)
    except ValueError as e:
        raise AlbumFetchError(f"failed to unmarshal album data: {e}") from e
    if not isinstance(tralbum, dict):
        raise AlbumFetchError("failed to unmarshal album data: expected an object")

    tracks = []
    for item in tralbum.get("trackinfo") or []:
        if not isinstance(item, dict):
            continue
        track_num = item.get("track_num")
        tracks.append(
            AlbumTrack(
                title=item.get("title") or "",
                artist=item.get("artist") or "",
                track_num=int(track_num) if isinstance(track_num, (int, float)) else 0,
                track_num_explicit=True,
            )
        )

    current = tralbum.get("current") or {}
    return AlbumData(
        artist=tralbum.get("artist") or "",
        title=(current.get("title") or "") if isinstance(current, dict) else "",
        tracks=tracks,
        source=SOURCE_NAME,
    )
