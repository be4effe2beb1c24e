"""
響應式變體 — 由 style bag 推導 mobile / tablet / desktop 覆寫

預設策略：mobile 字級 ×0.8（下限 14px）、padding 改為 8px；
tablet / desktop 原樣通過。ScalingPolicy 可換成逐斷點縮放。
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from . import color_utils
from .config import DEFAULT_BREAKPOINTS
from .scene_graph import SceneNode
from .style_resolver import StyleBag, camel_to_kebab

BREAKPOINT_NAMES = ("mobile", "tablet", "desktop")
RESPONSIVE_WIDTH_THRESHOLD = 768


@dataclass(frozen=True)
class BreakpointScale:
    font_scale: float = 1.0
    font_floor: Optional[float] = None
    padding: Optional[str] = None


@dataclass(frozen=True)
class ScalingPolicy:
    mobile: BreakpointScale = field(
        default_factory=lambda: BreakpointScale(font_scale=0.8, font_floor=14, padding="8px")
    )
    tablet: BreakpointScale = field(default_factory=BreakpointScale)
    desktop: BreakpointScale = field(default_factory=BreakpointScale)


DEFAULT_POLICY = ScalingPolicy()


@dataclass(frozen=True)
class ResponsiveVariants:
    mobile: Dict[str, str]
    tablet: Dict[str, str]
    desktop: Dict[str, str]

    def to_dict(self) -> dict:
        return {"mobile": self.mobile, "tablet": self.tablet, "desktop": self.desktop}


def _apply(style_bag: StyleBag, scale: BreakpointScale) -> Dict[str, str]:
    variant = dict(style_bag)
    font_size = color_utils.parse_px(style_bag.get("fontSize"))
    if font_size is not None and scale.font_scale != 1.0:
        scaled = font_size * scale.font_scale
        if scale.font_floor is not None:
            scaled = max(scaled, scale.font_floor)
        variant["fontSize"] = color_utils.px(scaled)
    if "padding" in style_bag and scale.padding is not None:
        variant["padding"] = scale.padding
    return variant


def derive_responsive(style_bag: StyleBag, policy: Optional[ScalingPolicy] = None) -> ResponsiveVariants:
    policy = policy or DEFAULT_POLICY
    return ResponsiveVariants(
        mobile=_apply(style_bag, policy.mobile),
        tablet=_apply(style_bag, policy.tablet),
        desktop=_apply(style_bag, policy.desktop),
    )


def has_responsive_design(node: SceneNode) -> bool:
    width = node.geometry.width if node.geometry else None
    if width is not None and width > RESPONSIVE_WIDTH_THRESHOLD:
        return True
    if node.constraints is not None and not node.constraints.is_default():
        return True
    return node.layout.axis != "NONE"


def variant_overrides(base: StyleBag, variants: ResponsiveVariants) -> Dict[str, Dict[str, str]]:
    """只保留與 base 不同的屬性；沒有差異的斷點不列出."""
    result = {}
    for name in BREAKPOINT_NAMES:
        variant = getattr(variants, name)
        diff = {k: v for k, v in variant.items() if base.get(k) != v}
        if diff:
            result[name] = diff
    return result


def media_condition(name: str, breakpoints: Optional[dict] = None) -> str:
    bp = dict(DEFAULT_BREAKPOINTS)
    bp.update(breakpoints or {})
    if name == "mobile":
        return f"(max-width: {bp['mobile']}px)"
    if name == "tablet":
        return f"(min-width: {bp['mobile'] + 1}px) and (max-width: {bp['tablet']}px)"
    return f"(min-width: {bp['tablet'] + 1}px)"


def media_queries(
    class_name: str,
    base: StyleBag,
    variants: ResponsiveVariants,
    breakpoints: Optional[dict] = None,
) -> str:
    blocks = []
    for name, diff in variant_overrides(base, variants).items():
        body = "\n".join(f"    {camel_to_kebab(k)}: {v};" for k, v in diff.items())
        blocks.append(
            f"@media {media_condition(name, breakpoints)} {{\n"
            f"  .{class_name} {{\n{body}\n  }}\n}}"
        )
    return "\n\n".join(blocks)
