"""Data models for tracks and albums."""

from .album import AlbumData, AlbumTrack
from .track import STATUS_MATCHED, STATUS_NO_MATCH, AIParsedTrack, LocalTrack, MatchedTrack

__all__ = [
    "AIParsedTrack",
    "LocalTrack",
    "MatchedTrack",
    "AlbumData",
    "AlbumTrack",
    "STATUS_MATCHED",
    "STATUS_NO_MATCH",
]
