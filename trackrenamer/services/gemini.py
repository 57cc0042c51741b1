"""Google Gemini service for parsing messy filenames."""

import json
import logging

import requests

from ..config import GeminiConfig
from ..exceptions import AIParseError
from ..models.track import AIParsedTrack

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
I have a list of audio filenames that are messy. Please extract the Artist, Title, and Track Number (if present) for each.
Return the result as a JSON object with a key "tracks" containing a list of objects.
Each object should have: "original_filename", "artist", "title", "track_number".
If a field is missing, use an empty string.
Do not include any markdown formatting (like ```json) in the response, just the raw JSON string.

Filenames:
{filenames}
"""


class GeminiService:
    """Asks a Gemini model to split filenames into artist, title and track number."""

    def __init__(self, config: GeminiConfig, timeout: float = 60.0) -> None:
        self._config = config
        self._timeout = timeout

    def parse_filenames(self, filenames: list[str]) -> list[AIParsedTrack]:
        """Parse filenames into AIParsedTrack records.

        Raises:
            ValueError: if no API key is configured.
            AIParseError: if the API call fails or its answer is not usable JSON.
        """
        if not self._config.api_key:
            raise ValueError("API key is required")

        body = {
            "contents": [
                {"parts": [{"text": PROMPT_TEMPLATE.format(filenames="\n".join(filenames))}]}
            ]
        }

        try:
            response = requests.post(
                self._config.endpoint,
                params={"key": self._config.api_key},
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise AIParseError(f"AI API request failed: {e}") from e

        if response.status_code != 200:
            raise AIParseError(
                f"AI API error: {response.status_code} {response.reason} - {response.text}"
            )

        try:
            content = self._response_text(response.json())
        except ValueError as e:
            raise AIParseError(f"failed to decode AI API response: {e}") from e
        if content is None:
            raise AIParseError("no response from AI")

        content = strip_code_fence(content)
        try:
            result = json.loads(content)
        except ValueError as e:
            raise AIParseError(f"failed to parse AI response: {e}. Content: {content}") from e

        tracks = result.get("tracks") if isinstance(result, dict) else None
        if not isinstance(tracks, list):
            return []
        logger.debug(f"AI parsed {len(tracks)} of {len(filenames)} filenames")
        return [AIParsedTrack.create_from(item) for item in tracks if isinstance(item, dict)]

    def _response_text(self, data: dict) -> str | None:
        """Pull the first candidate's first text part out of a response."""
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return None
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None
        text = parts[0].get("text", "")
        return text if isinstance(text, str) else None


def strip_code_fence(content: str) -> str:
    """Remove a markdown code fence wrapped around a model answer."""
    content = content.strip()
    content = content.removeprefix("```json")
    content = content.removeprefix("```")
    content = content.removesuffix("```")
    return content.strip()
