"""Exception classes raised by the track renamer services."""


class TrackRenamerError(Exception):
    """Base exception class for all track renamer errors."""

    pass


class AlbumFetchError(TrackRenamerError):
    """Raised when a release page cannot be fetched or holds no tracklist."""

    pass


class AIParseError(TrackRenamerError):
    """Raised when the AI filename parser fails or returns unusable content."""

    pass
