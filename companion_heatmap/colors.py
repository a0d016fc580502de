import math

BASE_GRAY = (44, 44, 52)  # #2c2c34
GREEN_MAX = (46, 125, 50)  # #2e7d32
RED_MAX = (211, 47, 47)  # #d32f2f

GAIN_TEXT = "76, 175, 80"
LOSS_TEXT = "239, 83, 80"


def _blend(start, end, t):
    return tuple(int(s + (e - s) * t) for s, e in zip(start, end))


def heatmap_color(change_pct: float, max_pct: float = 4.0) -> str:
    """
    Tile background for a percent change.

    Intensity grows non-linearly and starts at 25% so small moves are
    still visibly tinted; anything beyond max_pct gets the full color.
    """
    if change_pct == 0 or math.isnan(change_pct):
        return "#%02x%02x%02x" % BASE_GRAY

    intensity = min(abs(change_pct) / max_pct, 1.0) if max_pct > 0 else 1.0
    intensity = 0.25 + (intensity ** 0.6) * 0.75

    target = GREEN_MAX if change_pct > 0 else RED_MAX
    r, g, b = _blend(BASE_GRAY, target, intensity)
    return f"#{r:02x}{g:02x}{b:02x}"


def text_color(change_pct: float) -> str:
    """'r, g, b' string for sector performance labels."""
    return GAIN_TEXT if change_pct >= 0 else LOSS_TEXT
