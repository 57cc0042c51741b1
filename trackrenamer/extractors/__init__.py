"""Extractor modules for audio tag metadata."""

from .metadata import MetadataExtractor

__all__ = ["MetadataExtractor"]
