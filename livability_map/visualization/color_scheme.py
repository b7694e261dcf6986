"""
Color Scheme Module

Defines color mapping for livability scores.

Two policies share the same red -> green ramp:
- linear: the full 0-10 range maps evenly from red to green
- compressed: for datasets whose useful signal lives in the upper range;
  scores are clamped to [6.5, 10] and spread with a 0.7 gamma curve
"""

import math
from typing import Dict, List, Tuple

LINEAR = "linear"
COMPRESSED = "compressed"
POLICIES = (LINEAR, COMPRESSED)

SCORE_MIN = 0.0
SCORE_MAX = 10.0

COMPRESSED_MIN = 6.5
COMPRESSED_OFFSET = 6.0
COMPRESSED_SPAN = 6.5
COMPRESSED_GAMMA = 0.7

NO_DATA_RGB = (128, 128, 128)

# Legend samples across 0-10 (every 0.1)
LEGEND_STEPS = 101

RGB = Tuple[int, int, int]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def ramp_position(score: float, policy: str = LINEAR) -> float:
    """
    Position of a score along the red (0.0) to green (1.0) ramp.

    Parameters
    ----------
    score : float
        Livability score (0-10 canonical range; out-of-range values are clamped)
    policy : str, optional
        "linear" or "compressed" (default: "linear")

    Returns
    -------
    float
        Ramp position in [0, 1]
    """
    if policy == LINEAR:
        return _clamp(float(score), SCORE_MIN, SCORE_MAX) / SCORE_MAX
    if policy == COMPRESSED:
        clamped = _clamp(float(score), COMPRESSED_MIN, SCORE_MAX)
        return ((clamped - COMPRESSED_OFFSET) / COMPRESSED_SPAN) ** COMPRESSED_GAMMA
    raise ValueError(f"Unknown color policy '{policy}'. Expected one of {POLICIES}")


def color_for(score: float, policy: str = LINEAR) -> RGB:
    """
    Get RGB color tuple for a livability score.

    Red channel falls and green rises along the ramp; blue stays 0.
    NaN scores get neutral grey (no data).

    Parameters
    ----------
    score : float
        Livability score
    policy : str, optional
        "linear" or "compressed" (default: "linear")

    Returns
    -------
    Tuple[int, int, int]
        RGB color tuple (0-255)
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown color policy '{policy}'. Expected one of {POLICIES}")
    if score is None or math.isnan(score):
        return NO_DATA_RGB

    t = ramp_position(score, policy)
    return _round_half_up(255 * (1 - t)), _round_half_up(255 * t), 0


def color_hex(score: float, policy: str = LINEAR) -> str:
    """Hex color code (e.g., "#00FF00") for a score."""
    r, g, b = color_for(score, policy)
    return f"#{r:02X}{g:02X}{b:02X}"


def color_css(score: float, policy: str = LINEAR) -> str:
    """CSS rgb() color for a score, as used by the map markers."""
    r, g, b = color_for(score, policy)
    return f"rgb({r},{g},{b})"


def color_rgba(score: float, policy: str = LINEAR, alpha: int = 255) -> List[int]:
    """RGBA color array [R, G, B, A] for deck.gl layers."""
    r, g, b = color_for(score, policy)
    return [r, g, b, alpha]


def legend_stops(policy: str = LINEAR, steps: int = LEGEND_STEPS) -> List[Tuple[float, str]]:
    """
    Sample the color curve for a legend gradient.

    The legend is built from the same function as the markers. Renderers
    blend linearly between stops, so the curve is sampled densely and the
    compressed policy always gets a stop exactly at its clamp threshold.

    Parameters
    ----------
    policy : str, optional
        Color policy (default: "linear")
    steps : int, optional
        Number of evenly spaced samples across 0-10 (default: 101)

    Returns
    -------
    List[Tuple[float, str]]
        (score, hex color) pairs from 0 to 10, ascending
    """
    if steps < 2:
        raise ValueError("A legend needs at least 2 stops")
    scores = [SCORE_MAX * i / (steps - 1) for i in range(steps)]
    if policy == COMPRESSED and COMPRESSED_MIN not in scores:
        scores = sorted(scores + [COMPRESSED_MIN])
    return [(score, color_hex(score, policy)) for score in scores]


def legend_html(policy: str = LINEAR, title: str = "Livability Score") -> str:
    """
    Legend body: title, gradient bar through every legend stop, range labels
    and the scheme description. Renderers wrap it in their own container.
    """
    info = get_color_scheme_info(policy)
    gradient = ", ".join(
        f"{color} {round(score / SCORE_MAX * 100, 3):g}%" for score, color in info['stops']
    )
    return f"""
    <h4 style="margin-top:0">{title}</h4>
    <div style="height: 12px; background: linear-gradient(to right, {gradient});"></div>
    <div style="display: flex; justify-content: space-between;">
        <span>{info['low_label']}</span><span>{info['high_label']}</span>
    </div>
    <p style="margin: 5px 0; font-size: 12px;">{info['description']}</p>
    """


def get_color_scheme_info(policy: str = LINEAR) -> Dict:
    """
    Get information about the color scheme.

    Returns
    -------
    dict
        Color scheme information
    """
    if policy == COMPRESSED:
        description = (
            "Red = lower, green = higher. Scores below 6.5 share the lowest color; "
            "the upper range is spread with a gamma curve."
        )
        low_label = f"<= {COMPRESSED_MIN:g}"
    else:
        description = "Red = least livable, green = most livable"
        low_label = f"{SCORE_MIN:g}"

    return {
        "policy": policy,
        "stops": legend_stops(policy),
        "low_label": low_label,
        "high_label": f"{SCORE_MAX:g}",
        "description": description
    }
