"""Parsers for JSON embedded in release pages."""
