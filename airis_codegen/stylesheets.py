"""
Stylesheet backends — style bag → 樣式文字

  UtilityBackend      Tailwind class（寫在 markup）+ @layer components 區塊
  ScopedModuleBackend CSS Modules，markup 以 styles['x'] / $style['x'] 參照
  CssInJsBackend      styled-components wrapper，巢狀 selector
  PlainBackend        一般 CSS class 規則

Plain / scoped / css-in-js 都是把 style bag 一對一序列化（camelCase → kebab-case）。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from . import color_utils
from .classifier import BUTTON
from .config import StyleDialect
from .responsive import media_condition
from .style_resolver import StyleBag, camel_to_kebab
from .tables import UtilityScale


@dataclass(frozen=True)
class StyledElement:
    """輸出用的元素樹：一個場景節點對應一個元素."""
    name: str
    tag: str
    class_name: str
    styles: Dict[str, str]
    category: str
    attrs: Tuple[Tuple[str, str], ...] = ()
    text: Optional[str] = None
    children: Tuple["StyledElement", ...] = ()

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


# ─── Tailwind 對照 ───────────────────────────────────────────

_JUSTIFY = {
    "flex-start": "justify-start", "center": "justify-center",
    "flex-end": "justify-end", "space-between": "justify-between",
}
_ITEMS = {
    "flex-start": "items-start", "center": "items-center",
    "flex-end": "items-end", "baseline": "items-baseline",
}


def snap_spacing(value: float, scale: UtilityScale) -> str:
    """px → spacing 後綴；超過最大刻度改用任意值 [Npx]."""
    steps = sorted(scale.spacing)
    if value > steps[-1]:
        return f"[{color_utils.px(value)}]"
    nearest = min(steps, key=lambda s: (abs(s - value), s))
    return scale.spacing[nearest]


def _arbitrary_color(value: str) -> str:
    color = color_utils.parse_rgba(value)
    if color is None:
        return value.replace(" ", "_")
    if color.a >= 1:
        return color_utils.to_hex(color)
    return value.replace(" ", "")


def _exact_spacing(prefix: str, value: str, scale: UtilityScale) -> str:
    num = color_utils.parse_px(value)
    if num is not None and num in scale.spacing:
        return f"{prefix}-{scale.spacing[num]}"
    return f"{prefix}-[{value}]"


def _padding_classes(value: str, scale: UtilityScale) -> List[str]:
    parts = [color_utils.parse_px(p) for p in value.split()]
    if any(p is None for p in parts):
        return [f"p-[{value.replace(' ', '_')}]"]
    if len(parts) == 1:
        return [f"p-{snap_spacing(parts[0], scale)}"]
    top, right, bottom, left = parts
    if top == bottom and left == right:
        return [f"py-{snap_spacing(top, scale)}", f"px-{snap_spacing(left, scale)}"]
    return [
        f"pt-{snap_spacing(top, scale)}", f"pr-{snap_spacing(right, scale)}",
        f"pb-{snap_spacing(bottom, scale)}", f"pl-{snap_spacing(left, scale)}",
    ]


def _font_size_class(value: str, scale: UtilityScale) -> str:
    num = color_utils.parse_px(value)
    for token, size in scale.font_sizes.items():
        if num == size:
            return f"text-{token}"
    return f"text-[{value}]"


def _radius_class(value: str, scale: UtilityScale) -> str:
    num = color_utils.parse_px(value)
    for token, size in scale.border_radius.items():
        if num == size:
            return f"rounded-{token}" if token else "rounded"
    if num is not None and num >= scale.border_radius.get("full", 9999):
        return "rounded-full"
    return f"rounded-[{value}]"


def _border_classes(value: str) -> List[str]:
    width, _, rest = value.partition(" ")
    color = rest.replace("solid", "", 1).strip()
    classes = ["border" if width == "1px" else f"border-[{width}]"]
    if color:
        classes.append(f"border-[{_arbitrary_color(color)}]")
    return classes


def _shadow_class(value: str, scale: UtilityScale) -> str:
    first = value.split(",")[0].split()
    blur = color_utils.parse_px(first[2]) if len(first) > 2 else 0
    for threshold, token in scale.shadow_blur:
        if (blur or 0) <= threshold:
            return token
    return scale.shadow_max


def _opacity_class(value: str) -> str:
    pct = round(float(value) * 100)
    if pct % 5 == 0:
        return f"opacity-{pct}"
    return f"opacity-[{value}]"


def utility_classes(styles: StyleBag, scale: UtilityScale) -> List[str]:
    """單一節點的 style bag → Tailwind class 清單."""
    classes: List[str] = []
    if styles.get("display") == "flex":
        classes.append("flex")
        classes.append("flex-row" if styles.get("flexDirection") == "row" else "flex-col")
        if styles.get("flexWrap") == "wrap":
            classes.append("flex-wrap")
    if "gap" in styles:
        classes.append(f"gap-{snap_spacing(color_utils.parse_px(styles['gap']) or 0, scale)}")
    if "justifyContent" in styles:
        classes.append(_JUSTIFY.get(styles["justifyContent"], "justify-start"))
    if "alignItems" in styles:
        classes.append(_ITEMS.get(styles["alignItems"], "items-start"))
    if "padding" in styles:
        classes.extend(_padding_classes(styles["padding"], scale))
    if "width" in styles:
        classes.append(_exact_spacing("w", styles["width"], scale))
    if "height" in styles:
        classes.append(_exact_spacing("h", styles["height"], scale))
    if "backgroundColor" in styles:
        classes.append(f"bg-[{_arbitrary_color(styles['backgroundColor'])}]")
    if "background" in styles:
        classes.append(f"bg-[{styles['background'].replace(' ', '_')}]")
    if "backgroundImage" in styles:
        url = styles["backgroundImage"].replace('"', "'")
        classes.extend([f"bg-[{url}]", "bg-cover", "bg-center"])
    if "color" in styles:
        classes.append(f"text-[{_arbitrary_color(styles['color'])}]")
    if "fontFamily" in styles:
        family = styles["fontFamily"].replace(" ", "_")
        classes.append(f"font-['{family}']")
    if "fontSize" in styles:
        classes.append(_font_size_class(styles["fontSize"], scale))
    if "fontWeight" in styles:
        weight = int(float(styles["fontWeight"]))
        name = scale.font_weights.get(weight)
        classes.append(f"font-{name}" if name else f"font-[{weight}]")
    if "lineHeight" in styles:
        classes.append(f"leading-[{styles['lineHeight']}]")
    if styles.get("letterSpacing") not in (None, "0px"):
        classes.append(f"tracking-[{styles['letterSpacing']}]")
    if "textAlign" in styles:
        classes.append(f"text-{styles['textAlign']}")
    if "borderRadius" in styles:
        classes.append(_radius_class(styles["borderRadius"], scale))
    if "border" in styles:
        classes.extend(_border_classes(styles["border"]))
    if "boxShadow" in styles:
        classes.append(_shadow_class(styles["boxShadow"], scale))
    if "opacity" in styles:
        classes.append(_opacity_class(styles["opacity"]))
    if styles.get("overflow") == "hidden":
        classes.append("overflow-hidden")
    return classes


# ─── Backends ────────────────────────────────────────────────

def _css_rule(selector: str, styles: StyleBag, indent: str = "") -> str:
    body = "\n".join(f"{indent}  {camel_to_kebab(k)}: {v};" for k, v in styles.items())
    return f"{indent}{selector} {{\n{body}\n{indent}}}"


def _media_blocks(class_name: str, overrides: Dict[str, Dict[str, str]], breakpoints, indent: str = "") -> List[str]:
    blocks = []
    for name, diff in overrides.items():
        rule = _css_rule(f".{class_name}", diff, indent + "  ")
        blocks.append(f"{indent}@media {media_condition(name, breakpoints)} {{\n{rule}\n{indent}}}")
    return blocks


@dataclass
class StyleBackend:
    dialect: StyleDialect
    scale: UtilityScale = field(default_factory=UtilityScale)
    # True → markup 以運算式參照 class（CSS Modules）
    is_expression: bool = False
    emits_media: bool = True

    def class_token(self, element: StyledElement) -> str:
        return element.class_name

    def render(
        self,
        root: StyledElement,
        component_name: str,
        overrides: Optional[Dict[str, Dict[str, str]]] = None,
        breakpoints: Optional[dict] = None,
    ) -> str:
        blocks = [
            _css_rule(f".{el.class_name}", el.styles)
            for el in root.walk() if el.styles
        ]
        if overrides:
            blocks.extend(_media_blocks(root.class_name, overrides, breakpoints))
        return "\n\n".join(blocks) + "\n" if blocks else ""


class PlainBackend(StyleBackend):
    def __init__(self, scale: Optional[UtilityScale] = None):
        super().__init__(StyleDialect.PLAIN, scale or UtilityScale())


class ScopedModuleBackend(StyleBackend):
    def __init__(self, scale: Optional[UtilityScale] = None):
        super().__init__(StyleDialect.SCOPED_MODULE, scale or UtilityScale(), is_expression=True)


class UtilityBackend(StyleBackend):
    def __init__(self, scale: Optional[UtilityScale] = None):
        super().__init__(StyleDialect.UTILITY, scale or UtilityScale(), emits_media=False)

    def classes_for(self, element: StyledElement) -> List[str]:
        classes = utility_classes(element.styles, self.scale)
        if element.category == BUTTON:
            classes.extend(self.scale.interactive_classes)
        return classes

    def class_token(self, element: StyledElement) -> str:
        return " ".join(self.classes_for(element)) or element.class_name

    def render(self, root, component_name, overrides=None, breakpoints=None) -> str:
        rules = []
        for el in root.walk():
            classes = self.classes_for(el)
            if classes:
                rules.append(f"  .{el.class_name} {{\n    @apply {' '.join(classes)};\n  }}")
        text = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n"
        if rules:
            text += "\n@layer components {\n" + "\n\n".join(rules) + "\n}\n"
        return text


class CssInJsBackend(StyleBackend):
    def __init__(self, scale: Optional[UtilityScale] = None):
        super().__init__(StyleDialect.CSS_IN_JS, scale or UtilityScale())

    @staticmethod
    def wrapper_name(component_name: str) -> str:
        return f"{component_name}Wrapper"

    def render(self, root, component_name, overrides=None, breakpoints=None) -> str:
        blocks = [
            _css_rule(f".{el.class_name}", el.styles, "  ")
            for el in root.walk() if el.styles
        ]
        if overrides:
            blocks.extend(_media_blocks(root.class_name, overrides, breakpoints, "  "))
        body = "\n\n".join(blocks)
        return (
            "import styled from 'styled-components';\n\n"
            f"export const {self.wrapper_name(component_name)} = styled.div`\n"
            f"{body}\n"
            "`;\n"
        )


STYLE_BACKENDS = {
    StyleDialect.UTILITY: UtilityBackend,
    StyleDialect.SCOPED_MODULE: ScopedModuleBackend,
    StyleDialect.CSS_IN_JS: CssInJsBackend,
    StyleDialect.PLAIN: PlainBackend,
}
