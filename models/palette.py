"""Color palette data models"""

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class ColorEntry:
    """A named color with its hex code."""
    name: str
    hex: str

    def format(self) -> str:
        return f"{self.name} ({self.hex})"


@dataclass(frozen=True)
class ColorResponse:
    """Payload returned by the color-chooser webhook.

    The webhook always answers ``{"success": bool, "message": str}``; the
    message carries either the colors or the reason the request failed.
    """
    success: bool
    message: str

    @classmethod
    def from_text(cls, text: str) -> "ColorResponse":
        """Parse a raw response body.

        Raises ValueError if the body is not a JSON object.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        message = data.get("message")
        return cls(
            success=bool(data.get("success", False)),
            message=message if isinstance(message, str) else "",
        )
