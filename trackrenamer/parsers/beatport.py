"""Tracklist extraction from the JSON blobs embedded in Beatport pages.

Beatport exposes release tracks in several places depending on the page
version: JSON-LD scripts, the Next.js ``__NEXT_DATA__`` payload (either as a
dehydrated "tracks" query or somewhere deeper in the page props), and legacy
``span[data-json]`` attributes. These helpers work on decoded JSON values
and never raise on unexpected shapes.
"""

import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup

from ..models.album import AlbumTrack

logger = logging.getLogger(__name__)

TRACK_NUMBER_KEYS = ("trackNumber", "track_number", "position", "number", "index", "trackNo")
LD_ALBUM_TYPES = {"MusicAlbum", "MusicRelease", "MusicPlaylist"}

_INTEGER = re.compile(r"^[+-]?\d+$")

# Track order maps go from track id to 1-based position in the release.
OrderMap = dict[int, int]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_int_from_any(*values: Any) -> int:
    """Return the first value that reads as an integer, or 0.

    Numbers count only when positive; numeric strings count as written.
    """
    for value in values:
        if _is_number(value):
            if value > 0:
                return int(value)
        elif isinstance(value, str):
            text = value.strip()
            if _INTEGER.match(text):
                return int(text)
    return 0


def get_string(obj: dict, *keys: str) -> str:
    """Return the first string value among keys, stripped."""
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str):
            return value.strip()
    return ""


def parse_artists_field(value: Any) -> str:
    """Flatten an artist credit (string, object or list of either)."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return get_string(value, "name")
    if isinstance(value, list):
        names = []
        for item in value:
            if isinstance(item, str) and item.strip():
                names.append(item.strip())
            elif isinstance(item, dict):
                name = get_string(item, "name")
                if name:
                    names.append(name)
        return ", ".join(names)
    return ""


def extract_track_number(obj: dict) -> tuple[int, bool]:
    """Read a track position from any of the known keys.

    The second value is True when one of the keys is present at all, even if
    its value cannot be read.
    """
    values = [obj[key] for key in TRACK_NUMBER_KEYS if key in obj]
    if not values:
        return 0, False
    return parse_int_from_any(*values), True


def extract_release_id(obj: dict) -> int:
    if "releaseId" in obj:
        return parse_int_from_any(obj["releaseId"])
    if "release_id" in obj:
        return parse_int_from_any(obj["release_id"])
    release = obj.get("release")
    if isinstance(release, dict):
        return parse_int_from_any(release.get("id"), release.get("releaseId"), release.get("release_id"))
    return 0


def extract_track_id(obj: dict) -> int:
    return parse_int_from_any(obj.get("id"), obj.get("trackId"), obj.get("track_id"))


def id_from_url(url: str) -> int:
    """Read the numeric id at the end of a Beatport URL.

    Example: "https://www.beatport.com/release/name/4242/" -> 4242
    """
    last = url.rstrip("/").split("/")[-1]
    return int(last) if _INTEGER.match(last) else 0


def extract_track_id_from_any(value: Any) -> int:
    if isinstance(value, str):
        return id_from_url(value)
    if isinstance(value, dict):
        track_id = extract_track_id(value)
        if track_id:
            return track_id
        url = value.get("url")
        if isinstance(url, str):
            return id_from_url(url)
        return 0
    if _is_number(value) and value > 0:
        return int(value)
    return 0


def parse_meta_title(value: str) -> tuple[str, str]:
    """Split an og:title such as "Release by Artist on Beatport".

    Returns (title, artist); artist is empty when there is no " by ".
    """
    value = value.replace(" on Beatport", "").strip()
    if " by " in value:
        title, artist = value.split(" by ", 1)
        return title.strip(), artist.strip()
    return value, ""


def _title_with_mix(obj: dict, title: str) -> str:
    mix_name = get_string(obj, "mixName", "mix_name")
    if mix_name and mix_name.lower() not in title.lower():
        return f"{title.strip()} ({mix_name})"
    return title


def _track_from_object(
    obj: dict, position: int, order_map: OrderMap | None, artists_key_only: bool = False
) -> AlbumTrack | None:
    """Build an AlbumTrack from a Beatport track object.

    Position is the 1-based fallback number used when the object carries no
    track number and the order map does not know it.
    """
    track_id = extract_track_id(obj)
    if artists_key_only:
        title = get_string(obj, "title", "name")
        artist = parse_artists_field(obj.get("artists"))
    else:
        title = get_string(obj, "name", "title")
        artist = parse_artists_field(obj.get("artists")) or parse_artists_field(obj.get("artist"))
    title = _title_with_mix(obj, title)

    track_num, explicit = extract_track_number(obj)
    if track_num == 0 and order_map and track_id in order_map:
        track_num = order_map[track_id]
        explicit = True
    if track_num == 0:
        track_num = position
    if not title:
        return None
    return AlbumTrack(
        title=title,
        artist=artist,
        track_num=track_num,
        track_num_explicit=explicit,
        track_id=track_id,
    )


# --- JSON-LD ---


def parse_ld_tracks(value: Any) -> list[AlbumTrack]:
    if not isinstance(value, list) or not value:
        return []
    tracks = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            continue
        title = get_string(item, "name", "title")
        artist = parse_artists_field(item.get("byArtist")) or parse_artists_field(item.get("artist"))
        track_num, explicit = extract_track_number(item)
        if track_num == 0:
            track_num = i + 1
        if title:
            tracks.append(
                AlbumTrack(title=title, artist=artist, track_num=track_num, track_num_explicit=explicit)
            )
    return tracks


def parse_ld_data(data: Any) -> tuple[list[AlbumTrack], str, str]:
    """Find the largest album tracklist in a JSON-LD value.

    Returns (tracks, album title, album artist).
    """
    if isinstance(data, list):
        best: tuple[list[AlbumTrack], str, str] = ([], "", "")
        for item in data:
            result = parse_ld_data(item)
            if len(result[0]) > len(best[0]):
                best = result
        return best
    if isinstance(data, dict):
        if "@graph" in data:
            return parse_ld_data(data["@graph"])
        if get_string(data, "@type") in LD_ALBUM_TYPES:
            title = get_string(data, "name", "title")
            artist = parse_artists_field(data.get("byArtist")) or parse_artists_field(data.get("artist"))
            return parse_ld_tracks(data.get("track")), title, artist
    return [], "", ""


def parse_json_ld(doc: BeautifulSoup) -> tuple[list[AlbumTrack], str, str]:
    best: tuple[list[AlbumTrack], str, str] = ([], "", "")
    for script in doc.select('script[type="application/ld+json"]'):
        raw = (script.string or "").strip()
        if not raw:
            continue
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Skipping undecodable JSON-LD block")
            continue
        result = parse_ld_data(data)
        if len(result[0]) > len(best[0]):
            best = result
    return best


# --- __NEXT_DATA__ ---


def _child(value: Any, key: str) -> dict:
    """Return value[key] when both are objects, else an empty dict."""
    if not isinstance(value, dict):
        return {}
    child = value.get(key)
    return child if isinstance(child, dict) else {}


def build_order_map(value: Any) -> OrderMap | None:
    """Map track ids to their position in a release's track list."""
    if not isinstance(value, list) or not value:
        return None
    order: OrderMap = {}
    for item in value:
        track_id = extract_track_id_from_any(item)
        if track_id and track_id not in order:
            order[track_id] = len(order) + 1
    return order or None


def find_release_track_order(value: Any, release_id: int) -> OrderMap | None:
    """Search the payload for the release object and read its track order."""
    if isinstance(value, dict):
        if release_id and parse_int_from_any(value.get("id")) == release_id and "tracks" in value:
            order = build_order_map(value["tracks"])
            if order:
                return order
        for nested in value.values():
            order = find_release_track_order(nested, release_id)
            if order:
                return order
    elif isinstance(value, list):
        for item in value:
            order = find_release_track_order(item, release_id)
            if order:
                return order
    return None


def tracks_from_ordered_results(results: list, order_map: OrderMap | None) -> list[AlbumTrack]:
    objects = [item for item in results if isinstance(item, dict)]
    tracks = []
    for i, obj in enumerate(objects):
        track = _track_from_object(obj, i + 1, order_map)
        if track is not None:
            tracks.append(track)
    return tracks


def extract_dehydrated_tracks(data: Any, release_id: int, order_map: OrderMap | None) -> list[AlbumTrack]:
    """Read the "tracks" query that Next.js dehydrated into the page props."""
    dehydrated = _child(_child(_child(data, "props"), "pageProps"), "dehydratedState")
    queries = dehydrated.get("queries")
    if not isinstance(queries, list):
        return []

    for query in queries:
        if not isinstance(query, dict):
            continue
        key = query.get("queryKey")
        if not isinstance(key, list) or len(key) < 2 or key[0] != "tracks":
            continue
        params = key[1]
        if not isinstance(params, dict):
            continue
        if release_id and parse_int_from_any(params.get("release_id"), params.get("releaseId")) != release_id:
            continue
        results = _child(_child(query, "state"), "data").get("results")
        if not isinstance(results, list) or not results:
            continue
        return tracks_from_ordered_results(results, order_map)
    return []


def is_track_like(obj: dict) -> bool:
    if not get_string(obj, "name", "title"):
        return False
    return "artists" in obj or "artist" in obj


def collect_track_arrays(value: Any, out: list[list[dict]]) -> None:
    """Collect every array whose items all look like track objects."""
    if isinstance(value, dict):
        for nested in value.values():
            collect_track_arrays(nested, out)
    elif isinstance(value, list):
        if value and all(isinstance(item, dict) and is_track_like(item) for item in value):
            out.append(list(value))
        for nested in value:
            collect_track_arrays(nested, out)


def is_sequential_from_one(nums: list[int], expected: int) -> bool:
    """Check that nums are distinct, positive and cover 1..expected."""
    if not nums or any(n <= 0 for n in nums):
        return False
    seen = set(nums)
    if len(seen) != len(nums):
        return False
    if expected <= 0:
        expected = len(nums)
    return all(i in seen for i in range(1, expected + 1))


def score_track_candidate(tracks: list[dict], release_id: int, order_map: OrderMap | None) -> int:
    """Score how likely an array is to be the release's tracklist."""
    score = len(tracks)
    nums = []
    artist_count = 0
    release_match = 0
    release_seen = 0
    order_matches = 0
    for obj in tracks:
        num, _ = extract_track_number(obj)
        if num > 0:
            nums.append(num)
        if "artists" in obj or "artist" in obj:
            artist_count += 1
        if release_id:
            obj_release = extract_release_id(obj)
            if obj_release:
                release_seen += 1
                if obj_release == release_id:
                    release_match += 1
        if order_map:
            track_id = extract_track_id(obj)
            if track_id and track_id in order_map:
                order_matches += 1

    score += artist_count
    if nums:
        score += len(nums) * 3
        if is_sequential_from_one(nums, len(tracks)):
            score += 200
        elif is_sequential_from_one(nums, len(nums)):
            score += 100
    if release_id and release_seen:
        if release_match == release_seen and release_match >= len(tracks) // 2:
            score += 1000
        elif release_match:
            score += release_match * 10
    if order_matches:
        score += order_matches * 5
        if order_matches >= len(tracks) // 2:
            score += 50
    return score


def order_track_objects(tracks: list[dict], order_map: OrderMap | None) -> list[dict]:
    """Sort track objects by release order, falling back to track numbers.

    The input order is kept when neither source gives a usable ordering.
    """
    if not tracks:
        return tracks

    if order_map:
        ordered = []
        used = [False] * len(tracks)
        for position in range(1, len(order_map) + 1):
            for idx, obj in enumerate(tracks):
                if used[idx]:
                    continue
                track_id = extract_track_id(obj)
                if track_id and order_map.get(track_id) == position:
                    ordered.append(obj)
                    used[idx] = True
                    break
        if len(ordered) >= len(tracks) // 2:
            ordered.extend(obj for idx, obj in enumerate(tracks) if not used[idx])
            return ordered

    nums = [n for n, _ in (extract_track_number(obj) for obj in tracks) if n > 0]
    if not nums:
        return tracks
    if not is_sequential_from_one(nums, len(tracks)) and len(nums) < len(tracks) // 2:
        return tracks

    ordered = []
    used = [False] * len(tracks)
    for position in range(1, len(tracks) + 1):
        for idx, obj in enumerate(tracks):
            if not used[idx] and extract_track_number(obj)[0] == position:
                ordered.append(obj)
                used[idx] = True
                break
        else:
            break
    return ordered if len(ordered) == len(tracks) else tracks


def find_track_list(data: Any, release_id: int, order_map: OrderMap | None) -> list[AlbumTrack]:
    """Pick the best scored track-like array anywhere in the payload."""
    candidates: list[list[dict]] = []
    collect_track_arrays(data, candidates)
    if not candidates:
        return []

    best = candidates[0]
    best_score = score_track_candidate(best, release_id, order_map)
    for candidate in candidates[1:]:
        score = score_track_candidate(candidate, release_id, order_map)
        if score > best_score:
            best, best_score = candidate, score

    tracks = []
    for i, obj in enumerate(order_track_objects(best, order_map)):
        track = _track_from_object(obj, i + 1, order_map)
        if track is not None:
            tracks.append(track)
    return tracks


def parse_next_data(doc: BeautifulSoup, release_id: int) -> tuple[list[AlbumTrack], OrderMap | None]:
    """Read tracks from the ``__NEXT_DATA__`` script.

    Also returns the release track order map so later fallbacks can use it.
    """
    script = doc.select_one("script#__NEXT_DATA__")
    raw = (script.string or "").strip() if script is not None else ""
    if not raw:
        return [], None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.debug("Could not decode __NEXT_DATA__ payload")
        return [], None

    order_map = find_release_track_order(data, release_id)
    tracks = extract_dehydrated_tracks(data, release_id, order_map)
    if tracks:
        return tracks, order_map
    return find_track_list(data, release_id, order_map), order_map


# --- span[data-json] ---


def parse_data_json_spans(doc: BeautifulSoup, release_id: int, order_map: OrderMap | None) -> list[AlbumTrack]:
    tracks: list[AlbumTrack] = []
    for span in doc.select("span[data-json]"):
        raw = (span.get("data-json") or "").strip()
        if not raw:
            continue
        try:
            obj = json.loads(raw)
        except ValueError:
            continue
        if not isinstance(obj, dict):
            continue
        if release_id:
            obj_release = extract_release_id(obj)
            if obj_release and obj_release != release_id:
                continue
        track = _track_from_object(obj, len(tracks) + 1, order_map, artists_key_only=True)
        if track is not None:
            tracks.append(track)
    return tracks
