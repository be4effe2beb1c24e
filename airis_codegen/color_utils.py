"""
顏色與數值格式工具

Figma 顏色（0–1 浮點）→ CSS rgba / hex，以及 WCAG 對比度計算。
"""

import math
import re
from typing import Optional

from .scene_graph import Color, Paint

_RGBA_RE = re.compile(r"rgba?\(\s*([\d.]+),\s*([\d.]+),\s*([\d.]+)(?:,\s*([\d.]+))?\s*\)")
_PX_RE = re.compile(r"^(-?[\d.]+)px$")


def format_number(value: float) -> str:
    """整數值不帶小數點，其餘最多兩位小數."""
    if float(value).is_integer():
        return str(int(value))
    return f"{round(float(value), 2):g}"


def px(value: float) -> str:
    return f"{format_number(value)}px"


def parse_px(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = _PX_RE.match(value.strip())
    if not match:
        return None
    return float(match.group(1))


def to_rgba(color: Color, opacity: Optional[float] = None) -> str:
    r = round(color.r * 255)
    g = round(color.g * 255)
    b = round(color.b * 255)
    a = opacity if opacity is not None else (color.a if color.a is not None else 1)
    return f"rgba({r}, {g}, {b}, {format_number(a)})"


def to_hex(color: Color) -> str:
    r, g, b = round(color.r * 255), round(color.g * 255), round(color.b * 255)
    return f"#{r:02x}{g:02x}{b:02x}"


def parse_rgba(value: str) -> Optional[Color]:
    """rgba()/rgb() 字串 → Color；無法解析回傳 None."""
    match = _RGBA_RE.search(value or "")
    if not match:
        return None
    r, g, b = (float(match.group(i)) / 255 for i in (1, 2, 3))
    a = float(match.group(4)) if match.group(4) is not None else 1.0
    return Color(r=r, g=g, b=b, a=a)


def rgba_to_hex(value: str) -> str:
    color = parse_rgba(value)
    if color is None:
        return value
    return to_hex(color)


def gradient_to_css(paint: Paint) -> str:
    if not paint.gradient_stops:
        return "transparent"
    stops = ", ".join(
        f"{to_rgba(color)} {round(position * 100)}%"
        for position, color in paint.gradient_stops
    )
    if paint.type == "GRADIENT_LINEAR":
        angle = 90.0
        if len(paint.gradient_handles) >= 2:
            (x0, y0), (x1, y1) = paint.gradient_handles[0], paint.gradient_handles[1]
            angle = math.degrees(math.atan2(y1 - y0, x1 - x0)) + 90
        return f"linear-gradient({format_number(angle)}deg, {stops})"
    if paint.type == "GRADIENT_RADIAL":
        return f"radial-gradient(circle, {stops})"
    return f"linear-gradient(to bottom, {stops})"


def relative_luminance(color: Color) -> float:
    """WCAG 2.1 relative luminance."""
    def channel(c: float) -> float:
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return (
        0.2126 * channel(color.r)
        + 0.7152 * channel(color.g)
        + 0.0722 * channel(color.b)
    )


def contrast_ratio(first: Color, second: Color) -> float:
    lum1 = relative_luminance(first)
    lum2 = relative_luminance(second)
    brightest, darkest = max(lum1, lum2), min(lum1, lum2)
    return (brightest + 0.05) / (darkest + 0.05)


def meets_contrast(ratio: float, large_text: bool = False) -> dict:
    """WCAG AA / AAA 門檻判斷."""
    aa = 3.0 if large_text else 4.5
    aaa = 4.5 if large_text else 7.0
    return {"AA": ratio >= aa, "AAA": ratio >= aaa}


def first_solid_color(paints) -> Optional[Color]:
    for paint in paints:
        if paint.visible is not False and paint.type == "SOLID" and paint.color:
            return paint.color
    return None
