"""Color sources backing the get-colors-for-mood tool"""

import logging
from typing import Dict, List, Optional, Protocol

import requests

from models.palette import ColorEntry, ColorResponse

logger = logging.getLogger("MCP_Server")

DEFAULT_WEBHOOK_URL = "https://workflow.sanctifai.com/webhook/color-chooser"

MAX_CLAMPED_COLORS = 2

COUNT_LIMIT_MESSAGE = "Sorry, I can only suggest up to 2 colors at a time. Please ask for 1 or 2 colors."
GENERIC_ERROR_MESSAGE = "Sorry, I couldn't get colors for that mood right now. Please try again later."
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

SOURCE_KINDS = ("static", "webhook", "webhook-clamped")


def _palette(*pairs: tuple) -> List[ColorEntry]:
    return [ColorEntry(name, hex_code) for name, hex_code in pairs]


PALETTES: Dict[str, List[ColorEntry]] = {
    "happy": _palette(
        ("Coral Red", "#FF6B6B"),
        ("Sunshine Yellow", "#FFD93D"),
        ("Fresh Green", "#6BCB77"),
        ("Sky Blue", "#4D96FF"),
        ("Tangerine", "#FF9F45"),
    ),
    "sad": _palette(
        ("Slate Blue", "#4A6FA5"),
        ("Storm Gray", "#6C757D"),
        ("Midnight Navy", "#1B263B"),
        ("Faded Denim", "#7D9BB5"),
    ),
    "calm": _palette(
        ("Seafoam", "#9FE2BF"),
        ("Powder Blue", "#B0E0E6"),
        ("Lavender Mist", "#E6E6FA"),
        ("Sand", "#E2CFA5"),
    ),
    "angry": _palette(
        ("Crimson", "#DC143C"),
        ("Ember Orange", "#FF4500"),
        ("Charcoal", "#36454F"),
    ),
    "energetic": _palette(
        ("Electric Lime", "#CCFF00"),
        ("Hot Magenta", "#FF1DCE"),
        ("Vivid Orange", "#FF5F1F"),
        ("Cyan Burst", "#00FFFF"),
    ),
}

NEUTRAL_PALETTE = _palette(
    ("Warm Gray", "#A89F91"),
    ("Soft White", "#F5F5F0"),
    ("Stone", "#8D8D8A"),
)


class ColorSource(Protocol):
    def get_colors(self, mood: str, count: int) -> str:
        ...


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class StaticPaletteSource:
    """Serves colors from an in-process lookup table."""

    def __init__(self, palettes: Optional[Dict[str, List[ColorEntry]]] = None, fallback: Optional[List[ColorEntry]] = None):
        self._palettes = {key.lower(): value for key, value in (palettes or PALETTES).items()}
        self._fallback = fallback or NEUTRAL_PALETTE

    def palette_for(self, mood: str) -> List[ColorEntry]:
        return self._palettes.get(mood.strip().lower(), self._fallback)

    def get_colors(self, mood: str, count: int) -> str:
        palette = self.palette_for(mood)
        selected = palette[:_clamp(count, 1, len(palette))]
        lines = [entry.format() for entry in selected]
        return f"Colors for {mood} mood:\n" + "\n".join(lines)


class ColorServiceError(Exception):
    """The webhook answered but reported a failure."""


class WebhookColorSource:
    """Delegates color selection to a remote webhook.

    With ``clamp`` enabled the requested count is forced into
    ``[1, MAX_CLAMPED_COLORS]`` and ``success: false`` payloads are mapped to
    fixed user-facing messages instead of being passed through.
    """

    def __init__(self, url: str = DEFAULT_WEBHOOK_URL, timeout_s: float = 30, clamp: bool = False):
        self.url = url
        self.timeout_s = timeout_s
        self.clamp = clamp

    def get_colors(self, mood: str, count: int) -> str:
        if self.clamp:
            count = _clamp(count, 1, MAX_CLAMPED_COLORS)
        payload = {"colorCount": count, "mood": mood}
        logger.debug(f"Color API request: {payload}")
        try:
            text = self._post(payload)
        except requests.RequestException as e:
            logger.error(f"Error calling color API: {e}")
            if self.clamp:
                return GENERIC_ERROR_MESSAGE
            return str(e) or UNKNOWN_ERROR_MESSAGE

        try:
            data = ColorResponse.from_text(text)
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to parse color API response: {e}")
            return f"Invalid response from color API: {text}"
        logger.debug(f"Parsed color API response: {data}")

        if not self.clamp:
            return data.message or UNKNOWN_ERROR_MESSAGE

        try:
            return self._checked_message(data)
        except ColorServiceError as e:
            logger.warning(f"Color API reported failure: {e}")
            if _mentions_count_limit(str(e)):
                return COUNT_LIMIT_MESSAGE
            return GENERIC_ERROR_MESSAGE

    def _post(self, payload: Dict[str, object]) -> str:
        response = requests.post(
            self.url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout_s,
        )
        logger.debug(f"Color API raw response: {response.text}")
        logger.debug(f"Color API response status: {response.status_code}")
        return response.text

    @staticmethod
    def _checked_message(data: ColorResponse) -> str:
        if not data.success:
            raise ColorServiceError(data.message or UNKNOWN_ERROR_MESSAGE)
        return data.message


def _mentions_count_limit(message: str) -> bool:
    lowered = message.lower()
    return "count" in lowered or "limit" in lowered or "maximum" in lowered


def build_color_source(kind: str, url: Optional[str] = None, timeout_s: float = 30) -> ColorSource:
    """Create a color source from its kind name."""
    cleaned = kind.strip().lower()
    if cleaned == "static":
        return StaticPaletteSource()
    if cleaned == "webhook":
        return WebhookColorSource(url or DEFAULT_WEBHOOK_URL, timeout_s=timeout_s)
    if cleaned == "webhook-clamped":
        return WebhookColorSource(url or DEFAULT_WEBHOOK_URL, timeout_s=timeout_s, clamp=True)
    raise ValueError(f"Unknown color source '{kind}'. Expected one of: {', '.join(SOURCE_KINDS)}")
