"""Unit tests for trackrenamer/services/beatport.py and its page parsers."""

import json

import pytest

from trackrenamer.exceptions import AlbumFetchError
from trackrenamer.parsers.beatport import (
    extract_track_number,
    id_from_url,
    is_sequential_from_one,
    parse_artists_field,
    parse_int_from_any,
    parse_meta_title,
)
from trackrenamer.services.beatport import BeatportService, parse_release_page
from trackrenamer.services.http import parse_html


def page(*parts: str) -> str:
    return "<html><head>" + "".join(parts) + "</head><body></body></html>"


def og_title(value: str) -> str:
    return f'<meta property="og:title" content="{value}">'


def ld_script(data) -> str:
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


def next_data_script(data) -> str:
    return f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(data)}</script>'


def data_json_span(data) -> str:
    payload = json.dumps(data).replace("'", "&#39;")
    return f"<span data-json='{payload}'></span>"


class TestHelpers:
    """Tests for the small parsing helpers."""

    def test_parse_int_from_any(self):
        assert parse_int_from_any("7") == 7
        assert parse_int_from_any(0, "3") == 3
        assert parse_int_from_any(2.0) == 2
        assert parse_int_from_any(True, "x") == 0
        assert parse_int_from_any() == 0

    def test_id_from_url(self):
        assert id_from_url("https://www.beatport.com/release/name/4242") == 4242
        assert id_from_url("https://www.beatport.com/release/name/4242/") == 4242
        assert id_from_url("https://www.beatport.com/release/name") == 0

    def test_parse_meta_title(self):
        assert parse_meta_title("Night EP by Someone on Beatport") == ("Night EP", "Someone")
        assert parse_meta_title("Night EP") == ("Night EP", "")

    def test_parse_artists_field(self):
        assert parse_artists_field("  Solo ") == "Solo"
        assert parse_artists_field({"name": "One"}) == "One"
        assert parse_artists_field([{"name": "One"}, "Two", {"id": 3}]) == "One, Two"
        assert parse_artists_field(None) == ""

    def test_extract_track_number(self):
        assert extract_track_number({"trackNumber": 4}) == (4, True)
        assert extract_track_number({"position": "bad"}) == (0, True)
        assert extract_track_number({"name": "x"}) == (0, False)

    def test_is_sequential_from_one(self):
        assert is_sequential_from_one([2, 1, 3], 3)
        assert not is_sequential_from_one([1, 1], 2)
        assert not is_sequential_from_one([2, 3], 2)
        assert not is_sequential_from_one([], 0)


class TestJsonLd:
    """Tests for JSON-LD tracklists."""

    @pytest.fixture
    def doc(self):
        album = {
            "@context": "https://schema.org",
            "@type": "MusicAlbum",
            "name": "LD Title",
            "byArtist": {"name": "LD Artist"},
            "track": [
                {"@type": "MusicRecording", "name": "Alpha"},
                {"@type": "MusicRecording", "name": "Beta", "byArtist": [{"name": "X"}, {"name": "Y"}]},
            ],
        }
        return parse_html(page(og_title("Night EP by Someone on Beatport"), ld_script(album)))

    def test_tracks(self, doc):
        album = parse_release_page(doc, 4242)
        assert [t.title for t in album.tracks] == ["Alpha", "Beta"]
        assert [t.track_num for t in album.tracks] == [1, 2]
        assert not album.tracks[0].track_num_explicit
        assert album.tracks[1].artist == "X, Y"
        assert album.source == "Beatport"

    def test_meta_title_wins(self, doc):
        """The og:title credits take precedence over the JSON-LD ones."""
        album = parse_release_page(doc, 4242)
        assert album.title == "Night EP"
        assert album.artist == "Someone"

    def test_ld_credits_without_meta(self):
        album = {
            "@graph": [
                {"@type": "WebPage", "name": "Page"},
                {"@type": "MusicRelease", "name": "LD Title", "artist": "LD Artist", "track": [{"name": "Only"}]},
            ]
        }
        result = parse_release_page(parse_html(page(ld_script(album))), 0)
        assert (result.title, result.artist) == ("LD Title", "LD Artist")
        assert [t.title for t in result.tracks] == ["Only"]


class TestNextData:
    """Tests for the __NEXT_DATA__ payload."""

    def test_dehydrated_tracks_use_release_order(self):
        """Track numbers come from the release's own track list."""
        data = {
            "props": {
                "pageProps": {
                    "release": {
                        "id": 4242,
                        "tracks": [
                            "https://api.beatport.com/v4/catalog/tracks/11/",
                            "https://api.beatport.com/v4/catalog/tracks/12/",
                        ],
                    },
                    "dehydratedState": {
                        "queries": [
                            {"queryKey": ["release", {"id": 4242}], "state": {"data": {}}},
                            {
                                "queryKey": ["tracks", {"release_id": 4242}],
                                "state": {
                                    "data": {
                                        "results": [
                                            {"id": 12, "name": "Second", "mix_name": "Original Mix",
                                             "artists": [{"name": "B"}]},
                                            {"id": 11, "name": "First", "mix_name": "Extended Mix",
                                             "artists": [{"name": "A"}]},
                                        ]
                                    }
                                },
                            },
                        ]
                    },
                }
            }
        }
        album = parse_release_page(parse_html(page(next_data_script(data))), 4242)
        by_number = {t.track_num: t for t in album.tracks}
        assert by_number[1].title == "First (Extended Mix)"
        assert by_number[2].title == "Second (Original Mix)"
        assert by_number[1].artist == "A"
        assert by_number[1].track_id == 11
        assert all(t.track_num_explicit for t in album.tracks)

    def test_mix_name_not_repeated(self):
        data = {
            "props": {
                "pageProps": {
                    "dehydratedState": {
                        "queries": [
                            {
                                "queryKey": ["tracks", {"release_id": 1}],
                                "state": {"data": {"results": [
                                    {"id": 5, "name": "Song (Original Mix)", "mix_name": "Original Mix"}
                                ]}},
                            }
                        ]
                    }
                }
            }
        }
        album = parse_release_page(parse_html(page(next_data_script(data))), 1)
        assert album.tracks[0].title == "Song (Original Mix)"

    def test_best_track_array(self):
        """The numbered, sequential array should beat unrelated track lists."""
        data = {
            "props": {
                "pageProps": {
                    "related": [{"name": "Other", "artists": [{"name": "Z"}]}],
                    "release": {
                        "tracks": [
                            {"name": "Two", "artists": [{"name": "A"}], "number": 2},
                            {"name": "One", "artists": [{"name": "A"}], "number": 1},
                        ]
                    },
                }
            }
        }
        album = parse_release_page(parse_html(page(next_data_script(data))), 0)
        assert [t.title for t in album.tracks] == ["One", "Two"]
        assert [t.track_num for t in album.tracks] == [1, 2]


class TestDataJsonSpans:
    """Tests for the legacy span[data-json] fallback."""

    def test_spans_filtered_by_release(self):
        html = page(
            data_json_span({"id": 5, "title": "Span Track", "artists": [{"name": "S"}], "release": {"id": 4242}}),
            data_json_span({"id": 6, "title": "Elsewhere", "artists": [{"name": "T"}], "release": {"id": 999}}),
            data_json_span({"id": 7, "name": "Second Span", "artists": "U"}),
        )
        album = parse_release_page(parse_html(html), 4242)
        assert [t.title for t in album.tracks] == ["Span Track", "Second Span"]
        assert [t.track_num for t in album.tracks] == [1, 2]
        assert album.tracks[0].artist == "S"

    def test_no_track_data(self):
        with pytest.raises(AlbumFetchError, match="could not find Beatport track data"):
            parse_release_page(parse_html(page(og_title("Night EP by Someone"))), 4242)


class FakeFetcher:
    def __init__(self, html: str):
        self.html = html

    def fetch_document(self, url: str):
        return parse_html(self.html)


class TestBeatportService:
    """Tests for BeatportService.fetch_album()."""

    def test_release_id_from_url(self):
        """Spans from other releases are dropped using the id in the URL."""
        html = page(
            data_json_span({"id": 5, "title": "Mine", "release": {"id": 4242}}),
            data_json_span({"id": 6, "title": "Theirs", "release": {"id": 1}}),
        )
        album = BeatportService(FakeFetcher(html)).fetch_album(
            "https://www.beatport.com/release/night-ep/4242"
        )
        assert [t.title for t in album.tracks] == ["Mine"]
