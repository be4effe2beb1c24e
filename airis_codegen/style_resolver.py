"""
Style resolver — SceneNode → canonical, dialect-neutral style bag.

Single node only; callers resolve children independently while emitting.
Keys are camelCase CSS property names, values are strings with units.
Absent key means "not specified".

Color precedence, later wins:
  1. explicit ``background_color``
  2. first visible SOLID fill (overrides 1 on ``backgroundColor``)
  3. text nodes: first solid typography fill sets ``color`` only
"""

from __future__ import annotations

from typing import Dict

from . import color_utils
from .scene_graph import DROP_SHADOW, IMAGE, SOLID, SceneNode

StyleBag = Dict[str, str]


def _css_align(value: str, axis: str) -> str:
    if value == "CENTER":
        return "center"
    if value == "MAX":
        return "flex-end"
    if value == "SPACE_BETWEEN" and axis == "primary":
        return "space-between"
    if value == "BASELINE" and axis == "counter":
        return "baseline"
    return "flex-start"


def _visible(paints):
    return [p for p in paints if p.visible is not False]


def _padding(node: SceneNode) -> str:
    pad = node.layout.padding
    if pad.top == pad.right == pad.bottom == pad.left:
        return color_utils.px(pad.top)
    return " ".join(color_utils.px(v) for v in (pad.top, pad.right, pad.bottom, pad.left))


def _shadows(node: SceneNode) -> str:
    parts = []
    for effect in node.effects:
        if effect.type != DROP_SHADOW or effect.visible is False:
            continue
        color = color_utils.to_rgba(effect.color) if effect.color else "rgba(0, 0, 0, 0.1)"
        parts.append(
            f"{color_utils.px(effect.offset_x)} {color_utils.px(effect.offset_y)} "
            f"{color_utils.px(effect.radius)} {color_utils.px(effect.spread)} {color}"
        )
    return ", ".join(parts)


def resolve_styles(node: SceneNode) -> StyleBag:
    styles: StyleBag = {}

    geometry = node.geometry
    if geometry is not None:
        if geometry.width is not None:
            styles["width"] = color_utils.px(geometry.width)
        if geometry.height is not None:
            styles["height"] = color_utils.px(geometry.height)

    # 背景色
    if node.background_color is not None:
        styles["backgroundColor"] = color_utils.to_rgba(node.background_color)
    fills = _visible(node.fills)
    solid = next((p for p in fills if p.type == SOLID and p.color), None)
    if solid is not None:
        styles["backgroundColor"] = color_utils.to_rgba(solid.color, solid.opacity)
    gradient = next((p for p in fills if p.is_gradient), None)
    if gradient is not None:
        styles["background"] = color_utils.gradient_to_css(gradient)
    image = next((p for p in fills if p.type == IMAGE), None)
    if image is not None:
        styles["backgroundImage"] = f'url("{image.image_ref or ""}")'

    # 文字
    typo = node.typography
    if node.is_text and typo is not None:
        text_fill = next(
            (p for p in _visible(typo.fills) if p.type == SOLID and p.color), None
        )
        if text_fill is not None:
            styles["color"] = color_utils.to_rgba(text_fill.color, text_fill.opacity)
    if typo is not None:
        styles["fontFamily"] = typo.font_family
        styles["fontSize"] = color_utils.px(typo.font_size)
        if typo.font_weight is not None:
            styles["fontWeight"] = color_utils.format_number(typo.font_weight)
        if typo.line_height is not None:
            styles["lineHeight"] = color_utils.px(typo.line_height)
        if typo.letter_spacing is not None:
            styles["letterSpacing"] = color_utils.px(typo.letter_spacing)
        if typo.text_align:
            align = typo.text_align.upper()
            styles["textAlign"] = "justify" if align == "JUSTIFIED" else align.lower()

    if node.corner_radius:
        styles["borderRadius"] = color_utils.px(node.corner_radius)

    stroke = next(
        (p for p in _visible(node.strokes) if p.type == SOLID and p.color), None
    )
    if stroke is not None:
        weight = node.stroke_weight if node.stroke_weight is not None else 1
        styles["border"] = (
            f"{color_utils.px(weight)} solid {color_utils.to_rgba(stroke.color, stroke.opacity)}"
        )

    shadows = _shadows(node)
    if shadows:
        styles["boxShadow"] = shadows

    if node.opacity is not None and node.opacity != 1:
        styles["opacity"] = color_utils.format_number(node.opacity)
    if node.clips_content:
        styles["overflow"] = "hidden"

    layout = node.layout
    if layout.is_flex:
        styles["display"] = "flex"
        styles["flexDirection"] = "row" if layout.axis == "HORIZONTAL" else "column"
        if layout.item_spacing:
            styles["gap"] = color_utils.px(layout.item_spacing)
        if layout.primary_align:
            styles["justifyContent"] = _css_align(layout.primary_align, "primary")
        if layout.counter_align:
            styles["alignItems"] = _css_align(layout.counter_align, "counter")
        if layout.wrap:
            styles["flexWrap"] = "wrap"

    if not layout.padding.is_zero():
        styles["padding"] = _padding(node)

    return styles


def camel_to_kebab(prop: str) -> str:
    out = []
    for ch in prop:
        if ch.isupper():
            out.append("-" + ch.lower())
        else:
            out.append(ch)
    return "".join(out)
