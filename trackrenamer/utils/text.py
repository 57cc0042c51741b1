"""Filename normalization helpers shared by the template parser and the matcher."""

import re

BPM_STYLE_SPACE = "space"
BPM_STYLE_COMPACT = "compact"

BPM_PATTERN = re.compile(r"(\d{2,3})\s*[-_ ]*bpm", re.IGNORECASE | re.ASCII)
TRACK_PREFIX_PATTERN = re.compile(r"^\s*(\d{1,2})[.\s_-]+(.+)$", re.ASCII)
TRACK_ONLY_PATTERN = re.compile(r"^\s*(\d{1,2})\b", re.ASCII)
DIGITS_ONLY_PATTERN = re.compile(r"^\d{1,3}$")
LABEL_KEYWORDS_PATTERN = re.compile(
    r"\b(records?|recordings|music|label|netlabel|rec|recs)\b", re.IGNORECASE
)
_MULTI_DASH = re.compile(r"--+")
_SPACED_DASH = re.compile(r"\s+-\s+")
_SPACES = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^a-z0-9]+")


def collapse_spaces(value: str) -> str:
    """Collapse whitespace runs to a single space."""
    return _SPACES.sub(" ", value)


def normalize_template_base(raw: str) -> str:
    """Normalize separators in a filename stem.

    Example: "Artist__--Title" -> "Artist - Title"
    """
    s = raw.replace("_", " ")
    s = s.replace("—", " - ").replace("–", " - ")
    s = _MULTI_DASH.sub(" - ", s)
    s = _SPACED_DASH.sub(" - ", s)
    s = collapse_spaces(s)
    return s.strip()


def extract_bpm(raw: str) -> tuple[str, str, str]:
    """Pull a BPM marker out of a filename.

    Returns (bpm, style, cleaned). Style is "compact" for markers written
    like "128Bpm" and "space" otherwise. Without a marker the input is
    returned unchanged with empty bpm and style.
    """
    match = BPM_PATTERN.search(raw)
    if match is None:
        return "", "", raw
    text = match.group(0)
    style = BPM_STYLE_SPACE
    if "Bpm" in text and " bpm" not in text and " Bpm" not in text:
        style = BPM_STYLE_COMPACT
    cleaned = (raw[: match.start()] + " " + raw[match.end():]).strip()
    return match.group(1), style, cleaned


def format_bpm(bpm: str, style: str) -> str:
    if not bpm:
        return ""
    if style == BPM_STYLE_COMPACT:
        return f"({bpm}Bpm)"
    return f"({bpm} bpm)"


def append_bpm_if_missing(title: str, bpm: str, style: str) -> str:
    if not bpm:
        return title
    if "bpm" in title.lower():
        return title
    return f"{title.strip()} {format_bpm(bpm, style)}"


def extract_track_prefix(value: str) -> tuple[str, str] | None:
    """Split a leading track number from the rest of the text.

    Example: "03. Song Name" -> ("03", "Song Name")
    """
    match = TRACK_PREFIX_PATTERN.match(value)
    if match is None:
        return None
    return match.group(1), match.group(2).strip()


def extract_track_number(value: str) -> str:
    match = TRACK_ONLY_PATTERN.match(value)
    return match.group(1) if match else ""


def format_track_prefix(track: str) -> str:
    """Format a track number as a filename prefix ("7" -> "07. ")."""
    if not track:
        return ""
    try:
        return f"{int(track):02d}. "
    except ValueError:
        return f"{track}. "


def is_catalog_code_token(token: str) -> bool:
    """Check for release catalog codes such as "ABC123"."""
    if len(token) < 4:
        return False
    has_digit = False
    has_letter = False
    for char in token:
        if "0" <= char <= "9":
            has_digit = True
        elif "a" <= char <= "z" or "A" <= char <= "Z":
            has_letter = True
        else:
            return False
    return has_digit and has_letter


def strip_trailing_code_tokens(value: str) -> str:
    """Drop trailing catalog codes and stray single characters."""
    tokens = value.split()
    while tokens:
        last = tokens[-1]
        if len(last) == 1 or is_catalog_code_token(last):
            tokens.pop()
            continue
        break
    return " ".join(tokens)


def is_label_part(value: str) -> bool:
    return LABEL_KEYWORDS_PATTERN.search(value.lower()) is not None


def _clean_parts(raw_parts: list[str]) -> list[str]:
    parts = [p.strip() for p in raw_parts if p.strip()]
    if len(parts) > 1 and is_catalog_code_token(parts[-1]):
        parts = parts[:-1]
    return parts


def split_template_parts(value: str) -> list[str]:
    return _clean_parts(value.split(" - "))


def split_template_parts_loose(value: str) -> list[str]:
    """Split on " - ", falling back to bare dashes when there are two or more."""
    if " - " in value:
        return split_template_parts(value)
    if value.count("-") < 2:
        return [value.strip()]
    return _clean_parts(value.split("-"))


def normalize_vs_tokens(tokens: list[str]) -> list[str]:
    return ["Vs." if t.lower() in ("vs", "vs.") else t for t in tokens]


def clean_track_title(title: str, track_num: int) -> str:
    """Remove a track number that a release page repeated inside the title."""
    cleaned = title
    prefixes = [
        f"{track_num}. ",
        f"{track_num:02d}. ",
        f"{track_num} - ",
        f"{track_num:02d} - ",
    ]
    for prefix in prefixes:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    return cleaned.strip()


def normalize_for_match(raw: str) -> str:
    """Reduce a name to lowercase alphanumeric words for fuzzy comparison.

    Example: "01. Artist - Title (128 bpm) XYZ001" -> "artist title"
    """
    if not raw:
        return ""
    _, _, base = extract_bpm(raw)
    base = normalize_template_base(base)
    prefix = extract_track_prefix(base)
    if prefix is not None:
        base = prefix[1]
    base = strip_trailing_code_tokens(base)
    base = _NON_WORD.sub(" ", base.lower())
    return collapse_spaces(base).strip()


def has_token_overlap(a: str, b: str) -> bool:
    """Check whether two normalized names share at least one word."""
    if not a or not b:
        return False
    return bool(set(a.split()) & set(b.split()))
