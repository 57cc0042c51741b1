"""Service modules for release pages and the AI filename parser."""

from .albums import AlbumFetcher
from .bandcamp import BandcampService
from .beatport import BeatportService
from .gemini import GeminiService
from .http import PageFetcher

__all__ = ["AlbumFetcher", "BandcampService", "BeatportService", "GeminiService", "PageFetcher"]
