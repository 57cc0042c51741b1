"""Beatport release page service."""

import logging

from bs4 import BeautifulSoup

from ..exceptions import AlbumFetchError
from ..models.album import AlbumData
from ..parsers.beatport import (
    id_from_url,
    parse_data_json_spans,
    parse_json_ld,
    parse_meta_title,
    parse_next_data,
)
from .http import PageFetcher

logger = logging.getLogger(__name__)

SOURCE_NAME = "Beatport"


class BeatportService:
    """Reads release tracklists from Beatport pages.

    Sources are tried in order and the first one that yields tracks wins:
    JSON-LD, the Next.js page payload, then legacy data-json spans.
    """

    def __init__(self, fetcher: PageFetcher | None = None) -> None:
        self._fetcher = fetcher or PageFetcher()

    def fetch_album(self, url: str) -> AlbumData:
        """Fetch a Beatport release page and extract its tracklist.

        Raises:
            AlbumFetchError: if the page cannot be fetched or holds no tracks.
        """
        doc = self._fetcher.fetch_document(url)
        return parse_release_page(doc, id_from_url(url))


def parse_release_page(doc: BeautifulSoup, release_id: int) -> AlbumData:
    """Extract release data from a parsed Beatport page."""
    album = AlbumData(source=SOURCE_NAME)

    meta = doc.select_one('meta[property="og:title"]')
    og_title = (meta.get("content") or "").strip() if meta is not None else ""
    if og_title:
        album.title, album.artist = parse_meta_title(og_title)

    tracks, title, artist = parse_json_ld(doc)
    if tracks:
        album.title = album.title or title
        album.artist = album.artist or artist
        album.tracks = tracks
        logger.debug(f"Beatport release {release_id}: {len(tracks)} tracks from JSON-LD")
        return album

    tracks, order_map = parse_next_data(doc, release_id)
    if tracks:
        album.tracks = tracks
        logger.debug(f"Beatport release {release_id}: {len(tracks)} tracks from page data")
        return album

    tracks = parse_data_json_spans(doc, release_id, order_map)
    if tracks:
        album.tracks = tracks
        logger.debug(f"Beatport release {release_id}: {len(tracks)} tracks from data-json spans")
        return album

    raise AlbumFetchError("could not find Beatport track data on page")
