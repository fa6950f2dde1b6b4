"""Theme colors and color utilities for the UI."""

from typing import Optional, Tuple

from roadmap.core.levels import MAX_LEVEL


class RoadmapColors:
    """Black-and-gold palette."""

    BG_TOP = "#0b0b0d"
    BG_BOTTOM = "#17140d"

    GOLD = "#d4af37"
    GOLD_LIGHT = "#f2d57e"
    GOLD_DARK = "#9c7c1c"

    CARD_BG = "rgba(255, 255, 255, 0.04)"
    CARD_BORDER = "rgba(212, 175, 55, 0.28)"

    TEXT_PRIMARY = "#f5f1e6"
    TEXT_SECONDARY = "#c9bfa5"
    TEXT_MUTED = "#8a8270"

    TRACK = "#2a261c"
    SUCCESS = "#3fb68b"
    ERROR = "#e0605a"


def _parse_hex(value: str) -> Optional[Tuple[int, int, int]]:
    value = value.strip()
    if not (value.startswith("#") and len(value) == 7):
        return None
    try:
        return int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16)
    except ValueError:
        return None


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b. Unparseable input returns *a*."""
    start = _parse_hex(a)
    end = _parse_hex(b)
    if start is None or end is None:
        return a
    try:
        t = max(0.0, min(1.0, float(t)))
    except (TypeError, ValueError):
        return a
    r, g, bl = (int(s + (e - s) * t) for s, e in zip(start, end))
    return f"#{r:02X}{g:02X}{bl:02X}"


def level_color(level: int) -> str:
    """Fill color for a task bar: dark gold at 0 rising to light gold at the top level."""
    return blend_hex(RoadmapColors.GOLD_DARK, RoadmapColors.GOLD_LIGHT, level / float(MAX_LEVEL))
