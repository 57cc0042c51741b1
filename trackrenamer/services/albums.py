"""Release page dispatch."""

from ..models.album import AlbumData
from .bandcamp import BandcampService
from .beatport import BeatportService


class AlbumFetcher:
    """Routes a release URL to the service that understands it."""

    def __init__(
        self,
        bandcamp: BandcampService | None = None,
        beatport: BeatportService | None = None,
    ) -> None:
        self._bandcamp = bandcamp or BandcampService()
        self._beatport = beatport or BeatportService()

    def fetch_album_data(self, url: str) -> AlbumData:
        """Fetch a release; Beatport URLs go to Beatport, anything else to Bandcamp."""
        if "beatport.com" in url.lower():
            return self._beatport.fetch_album(url)
        return self._bandcamp.fetch_album(url)
