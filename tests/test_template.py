"""Unit tests for trackrenamer/processors/template.py."""

import pytest

from trackrenamer.config import FORMAT_ARTIST_TITLE, FORMAT_TRACK_TITLE
from trackrenamer.models.track import STATUS_MATCHED, STATUS_NO_MATCH, LocalTrack
from trackrenamer.processors.template import (
    TemplateCandidate,
    build_template_candidate,
    choose_best_candidate,
    generate_template_renames,
    parse_legacy_template,
    parse_template_from_parts,
    parse_template_from_tokens,
)


def local(name: str, artist: str = "", title: str = "") -> LocalTrack:
    return LocalTrack(path=f"/music/{name}", original_name=name, tag_artist=artist, tag_title=title)


class TestParsers:
    """Tests for the individual filename parsers."""

    def test_legacy_template(self):
        """Artist - Album - NN Title (BPM) should parse with a compact BPM."""
        candidate = parse_legacy_template("Artist - Album - 01 Title (128)")
        assert candidate.artist == "Artist"
        assert candidate.title == "Title"
        assert candidate.track == "01"
        assert candidate.bpm == "128"
        assert candidate.confidence == 0.9

    def test_legacy_template_no_match(self):
        assert parse_legacy_template("Artist - Title") is None

    def test_parts_leading_number(self):
        candidate = parse_template_from_parts(["05", "Artist", "Title", "Remix"])
        assert (candidate.artist, candidate.title, candidate.track) == ("Artist", "Title - Remix", "05")
        assert candidate.confidence == 0.8

    def test_parts_prefixed_last(self):
        candidate = parse_template_from_parts(["Artist", "02 Title"])
        assert (candidate.artist, candidate.title, candidate.track) == ("Artist", "Title", "02")

    def test_parts_prefixed_first(self):
        candidate = parse_template_from_parts(["01. Artist", "Title"])
        assert (candidate.artist, candidate.title, candidate.track) == ("Artist", "Title", "01")
        assert candidate.confidence == 0.7

    def test_parts_label_first(self):
        """A leading label part should be skipped with high confidence."""
        candidate = parse_template_from_parts(["Deep Records", "Artist", "Title"])
        assert (candidate.artist, candidate.title) == ("Artist", "Title")
        assert candidate.confidence == 0.95

    def test_parts_three_plain(self):
        candidate = parse_template_from_parts(["Artist", "Title", "Remix"])
        assert (candidate.artist, candidate.title) == ("Artist", "Title - Remix")
        assert candidate.confidence == 0.55

    def test_parts_two_plain(self):
        candidate = parse_template_from_parts(["Artist", "Title"])
        assert candidate.confidence == 0.6

    def test_parts_single(self):
        assert parse_template_from_parts(["Title"]) is None

    def test_tokens_vs(self):
        """A "vs" credit should stay in the artist and be normalized."""
        candidate = parse_template_from_tokens("Artist vs Other Title Words")
        assert candidate.artist == "Artist Vs. Other"
        assert candidate.title == "Title Words"
        assert candidate.confidence == 0.55

    def test_tokens_ampersand(self):
        candidate = parse_template_from_tokens("One & Two Some Title")
        assert candidate.artist == "One & Two"
        assert candidate.title == "Some Title"
        assert candidate.confidence == 0.5

    def test_tokens_duplicate_first_token(self):
        """A repeated first token should be collapsed."""
        candidate = parse_template_from_tokens("Artist artist Title")
        assert (candidate.artist, candidate.title) == ("artist", "Title")

    def test_tokens_single_word(self):
        assert parse_template_from_tokens("Title") is None

    def test_choose_best_prefers_complete(self):
        """Incomplete candidates never win, whatever their confidence."""
        incomplete = TemplateCandidate(artist="A", confidence=0.99)
        complete = TemplateCandidate(artist="A", title="B", confidence=0.4)
        assert choose_best_candidate(incomplete, None, complete) is complete

    def test_choose_best_tie_keeps_first(self):
        first = TemplateCandidate(artist="A", title="B", confidence=0.6)
        second = TemplateCandidate(artist="C", title="D", confidence=0.6)
        assert choose_best_candidate(first, second) is first

    def test_choose_best_empty(self):
        assert not choose_best_candidate(None, None).is_complete


class TestBuildTemplateCandidate:
    """Tests for build_template_candidate()."""

    def test_ambiguous_numeric_tail(self):
        """A bare number as last part without BPM marker is left alone."""
        assert not build_template_candidate(local("Artist - Title - 12.mp3")).is_complete

    def test_tag_fallback(self):
        """Tags that share a word with the filename should be used."""
        candidate = build_template_candidate(local("track.mp3", "Someone", "Track"))
        assert (candidate.artist, candidate.title) == ("Someone", "Track")
        assert candidate.confidence == 0.85

    def test_tag_fallback_needs_overlap(self):
        candidate = build_template_candidate(local("track.mp3", "Someone", "Else"))
        assert not candidate.is_complete

    def test_filename_wins_over_tags(self):
        candidate = build_template_candidate(local("Artist - Title.mp3", "Tag Artist", "Tag Title"))
        assert (candidate.artist, candidate.title) == ("Artist", "Title")


class TestGenerateTemplateRenames:
    """Tests for generate_template_renames()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("01. Artist - Title.mp3", "01. Artist - Title.mp3"),
            ("Artist - Title (128 bpm).mp3", "Artist - Title (128 bpm).mp3"),
            ("Artist_-_Title.flac", "Artist - Title.flac"),
            ("Deep Records - Artist - Title.wav", "Artist - Title.wav"),
            ("Artist vs Other Title Words.mp3", "Artist Vs. Other - Title Words.mp3"),
        ],
    )
    def test_artist_title_format(self, name, expected):
        (result,) = generate_template_renames([local(name)], FORMAT_ARTIST_TITLE)
        assert result.proposed_new_name == expected
        assert result.status == STATUS_MATCHED

    def test_track_title_format(self):
        """The Track. Title format should drop the artist."""
        (result,) = generate_template_renames([local("01. Artist - Title.mp3")], FORMAT_TRACK_TITLE)
        assert result.proposed_new_name == "01. Title.mp3"

    def test_no_match_keeps_name(self):
        (result,) = generate_template_renames([local("track.mp3")], FORMAT_ARTIST_TITLE)
        assert result.proposed_new_name == "track.mp3"
        assert result.status == STATUS_NO_MATCH
        assert result.confidence == 0

    def test_one_result_per_track_in_order(self):
        tracks = [local("b.mp3"), local("Artist - Title.mp3"), local("a.mp3")]
        results = generate_template_renames(tracks, FORMAT_ARTIST_TITLE)
        assert [r.original_name for r in results] == ["b.mp3", "Artist - Title.mp3", "a.mp3"]
        assert [r.local_path for r in results] == [t.path for t in tracks]

    def test_confidence_from_parser(self):
        (result,) = generate_template_renames([local("Artist - Title.mp3")], FORMAT_ARTIST_TITLE)
        assert result.confidence == 0.6
