"""Album data models fetched from release pages."""

from dataclasses import dataclass, field


@dataclass
class AlbumTrack:
    """A track listed on a release page."""

    title: str
    artist: str = ""
    track_num: int = 0
    track_num_explicit: bool = False  # number came from the page, not list position
    track_id: int = 0


@dataclass
class AlbumData:
    """Tracklist and credits of a release, normalized across sources."""

    artist: str = ""
    title: str = ""
    tracks: list[AlbumTrack] = field(default_factory=list)
    source: str = ""  # "Bandcamp" or "Beatport"

    @property
    def is_beatport(self) -> bool:
        return self.source.lower() == "beatport"
