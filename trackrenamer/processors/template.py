"""Rename proposals derived from filenames alone.

A filename is parsed three ways (a legacy "artist - album - NN title"
template, " - " separated parts, and whitespace tokens). The most confident
parse that yields both an artist and a title wins. Embedded tags are used
only when the filename gives nothing usable and the tags agree with it.
"""

import logging
import os
import re
from dataclasses import dataclass

from ..config import FORMAT_TRACK_TITLE
from ..models.track import STATUS_MATCHED, STATUS_NO_MATCH, LocalTrack, MatchedTrack
from ..utils.text import (
    BPM_STYLE_COMPACT,
    DIGITS_ONLY_PATTERN,
    append_bpm_if_missing,
    collapse_spaces,
    extract_bpm,
    extract_track_prefix,
    format_track_prefix,
    has_token_overlap,
    is_label_part,
    normalize_for_match,
    normalize_template_base,
    normalize_vs_tokens,
    split_template_parts,
    split_template_parts_loose,
    strip_trailing_code_tokens,
)

logger = logging.getLogger(__name__)

LEGACY_TEMPLATE_PATTERN = re.compile(
    r"^(?P<artist>.+?)\s+-\s+(?P<album>.+?)\s+-\s+(?P<track>\d+)\s+(?P<title>.+?)(?:\s+\((?P<bpm>\d+)\))?$",
    re.IGNORECASE,
)


@dataclass
class TemplateCandidate:
    """One interpretation of a filename."""

    artist: str = ""
    title: str = ""
    track: str = ""
    bpm: str = ""
    bpm_style: str = ""
    confidence: float = 0.0

    @property
    def is_complete(self) -> bool:
        return bool(self.artist) and bool(self.title)


def parse_legacy_template(base: str) -> TemplateCandidate | None:
    """Parse "Artist - Album - 01 Title (128)" style names."""
    match = LEGACY_TEMPLATE_PATTERN.match(base)
    if match is None:
        return None
    candidate = TemplateCandidate(
        artist=match.group("artist"),
        title=match.group("title"),
        track=match.group("track"),
        confidence=0.9,
    )
    bpm = (match.group("bpm") or "").strip()
    if bpm:
        candidate.bpm = bpm
        candidate.bpm_style = BPM_STYLE_COMPACT
    return candidate


def parse_template_from_parts(parts: list[str]) -> TemplateCandidate | None:
    if not parts:
        return None

    if len(parts) >= 3 and DIGITS_ONLY_PATTERN.match(parts[0]):
        return TemplateCandidate(
            artist=parts[1], title=" - ".join(parts[2:]), track=parts[0], confidence=0.8
        )

    prefixed_last = extract_track_prefix(parts[-1])
    if prefixed_last is not None:
        track, rest = prefixed_last
        return TemplateCandidate(artist=parts[0], title=rest, track=track, confidence=0.8)

    prefixed_first = extract_track_prefix(parts[0])
    if prefixed_first is not None and prefixed_first[1]:
        track, rest = prefixed_first
        title = parts[1] if len(parts) == 2 else parts[-1]
        return TemplateCandidate(artist=rest, title=title, track=track, confidence=0.7)

    if len(parts) >= 3:
        if is_label_part(parts[0]):
            return TemplateCandidate(
                artist=parts[1], title=" - ".join(parts[2:]), confidence=0.95
            )
        return TemplateCandidate(
            artist=parts[0], title=" - ".join(parts[1:]), confidence=0.55
        )

    if len(parts) == 2:
        return TemplateCandidate(artist=parts[0], title=parts[1], confidence=0.6)

    return None


def parse_template_from_tokens(value: str) -> TemplateCandidate | None:
    """Guess an artist/title split from bare whitespace tokens."""
    track = ""
    base = value
    prefixed = extract_track_prefix(value)
    if prefixed is not None:
        track, base = prefixed
    base = strip_trailing_code_tokens(base.strip())
    if not base:
        return None

    tokens = base.split()
    if len(tokens) >= 2 and tokens[0].lower() == tokens[1].lower():
        tokens = tokens[1:]
    if not tokens:
        return None

    for i, token in enumerate(tokens):
        if token.lower() in ("vs", "vs.") and i + 1 < len(tokens) - 1:
            return TemplateCandidate(
                artist=" ".join(normalize_vs_tokens(tokens[: i + 2])),
                title=" ".join(tokens[i + 2 :]),
                track=track,
                confidence=0.55,
            )

    for i in range(len(tokens) - 1, -1, -1):
        if tokens[i] == "&" and i + 1 < len(tokens) - 1:
            return TemplateCandidate(
                artist=" ".join(tokens[: i + 2]),
                title=" ".join(tokens[i + 2 :]),
                track=track,
                confidence=0.5,
            )

    if len(tokens) >= 2:
        return TemplateCandidate(
            artist=tokens[0], title=" ".join(tokens[1:]), track=track, confidence=0.4
        )
    return None


def choose_best_candidate(*candidates: TemplateCandidate | None) -> TemplateCandidate:
    """Pick the most confident complete candidate; ties keep the earliest."""
    best: TemplateCandidate | None = None
    for candidate in candidates:
        if candidate is None or not candidate.is_complete:
            continue
        if best is None or candidate.confidence > best.confidence:
            best = candidate
    return best or TemplateCandidate()


def build_template_candidate(local_track: LocalTrack) -> TemplateCandidate:
    """Interpret a local file's name, falling back to its tags."""
    original_name = local_track.original_name or ""
    base, _ = os.path.splitext(original_name)
    bpm, bpm_style, base_no_bpm = extract_bpm(base)
    normalized = strip_trailing_code_tokens(normalize_template_base(base_no_bpm))
    parts = split_template_parts(normalized)
    if len(parts) <= 1:
        parts = split_template_parts_loose(normalized)

    if not bpm and len(parts) >= 3 and DIGITS_ONLY_PATTERN.match(parts[-1]):
        logger.debug(f"Ambiguous numeric tail in '{original_name}', keeping original name")
        return TemplateCandidate()

    file_candidate = choose_best_candidate(
        parse_legacy_template(base_no_bpm),
        parse_template_from_parts(parts),
        parse_template_from_tokens(normalized),
    )
    file_candidate.bpm = bpm
    file_candidate.bpm_style = bpm_style

    tag_artist = (local_track.tag_artist or "").strip()
    tag_title = (local_track.tag_title or "").strip()
    if tag_artist and tag_title and not file_candidate.is_complete:
        tag_norm = normalize_for_match(f"{tag_artist} - {tag_title}")
        if has_token_overlap(tag_norm, normalize_for_match(base_no_bpm)):
            return TemplateCandidate(
                artist=tag_artist,
                title=tag_title,
                bpm=bpm,
                bpm_style=bpm_style,
                confidence=0.85,
            )

    return file_candidate


def generate_template_renames(
    local_tracks: list[LocalTrack], rename_format: str
) -> list[MatchedTrack]:
    """Propose a new name for every track from its filename.

    Tracks that cannot be interpreted keep their original name with status
    "No Match" and confidence 0.
    """
    matched = []
    for local_track in local_tracks:
        candidate = build_template_candidate(local_track)
        if not candidate.is_complete:
            matched.append(
                MatchedTrack(
                    local_path=local_track.path,
                    original_name=local_track.original_name,
                    proposed_new_name=local_track.original_name,
                    confidence=0,
                    status=STATUS_NO_MATCH,
                )
            )
            continue

        title = append_bpm_if_missing(candidate.title, candidate.bpm, candidate.bpm_style)
        if rename_format == FORMAT_TRACK_TITLE:
            base = title
        else:
            base = f"{candidate.artist} - {title}"
        proposed = collapse_spaces((format_track_prefix(candidate.track) + base).strip())
        proposed += os.path.splitext(local_track.original_name or "")[1]

        matched.append(
            MatchedTrack(
                local_path=local_track.path,
                original_name=local_track.original_name,
                proposed_new_name=proposed,
                confidence=candidate.confidence,
                status=STATUS_MATCHED,
            )
        )
    return matched
