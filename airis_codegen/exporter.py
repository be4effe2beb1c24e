"""
輸出 — 將產生結果寫入檔案

每個元件一個目錄：<outputDir>/<ComponentName>/ 內含 markup、樣式、型別檔，
以及整批產生的 codegen-manifest.json。
同一批次中名稱相同的元件（例如非 ASCII 圖層名都變成 Unnamed）
目錄會加上節點 id 後綴，不會互相覆蓋。

設計 token 可另外輸出成 tokens.css（CSS 變數）與 design-tokens.json。
"""

import json
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Set

from . import color_utils
from .config import DEFAULT_BREAKPOINTS, GenerationOptions
from .emitters import markup_filename, stylesheet_filename, types_filename
from .style_resolver import resolve_styles

MANIFEST_NAME = "codegen-manifest.json"
TOKENS_CSS_NAME = "tokens.css"
TOKENS_JSON_NAME = "design-tokens.json"

# token 類別 → CSS 變數名稱片段
_CSS_VARIABLE_GROUPS = (
    ("colors", "color"),
    ("fontSizes", "font-size"),
    ("fontFamilies", "font-family"),
    ("spacing", "spacing"),
    ("shadows", "shadow"),
    ("radii", "radius"),
)


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def component_dirname(component, taken: Optional[Set[str]] = None) -> str:
    """元件目錄名；與 taken 衝突時加上節點 id（1:2 → 1-2），仍衝突再加流水號."""
    name = component.sanitized_name
    if taken is None:
        return name
    candidate = name
    if candidate in taken:
        node_suffix = re.sub(r"[^A-Za-z0-9]+", "-", component.metadata.source_node_id).strip("-")
        candidate = f"{name}-{node_suffix}" if node_suffix else name
        counter = 2
        base = candidate
        while candidate in taken:
            candidate = f"{base}-{counter}"
            counter += 1
    taken.add(candidate)
    return candidate


def write_component(
    output_dir: str,
    component,
    options: GenerationOptions,
    taken: Optional[Set[str]] = None,
) -> List[str]:
    """
    寫入單一元件，回傳寫出的檔案路徑。

    taken：同一批次已使用的目錄名（會就地更新）；
    批次輸出時傳同一個 set 進來即可避免覆蓋。
    """
    name = component.sanitized_name
    base = Path(output_dir) / component_dirname(component, taken)
    written = []

    markup_path = base / markup_filename(name, options)
    _write(markup_path, component.markup)
    written.append(str(markup_path))

    if component.stylesheet:
        style_path = base / stylesheet_filename(name, options)
        _write(style_path, component.stylesheet)
        written.append(str(style_path))

    if component.type_declarations:
        types_path = base / types_filename(name)
        _write(types_path, component.type_declarations)
        written.append(str(types_path))

    if component.accessibility is not None:
        report_path = base / "accessibility.json"
        _write(report_path, json.dumps(component.accessibility.to_dict(), indent=2, ensure_ascii=False))
        written.append(str(report_path))
    return written


def write_components(output_dir: str, report, options: GenerationOptions) -> List[str]:
    """整批寫入 GenerationReport 的元件，目錄名在批次內唯一."""
    taken: Set[str] = set()
    written = []
    for component in report.components:
        written.extend(write_component(output_dir, component, options, taken))
    return written


def write_manifest(output_dir: str, report, options: GenerationOptions = None, tokens: dict = None) -> str:
    """在 output_dir 寫入 codegen-manifest.json."""
    manifest = {
        "source": "airis_codegen",
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "options": options.to_dict() if options else None,
        "designTokens": tokens or {},
    }
    manifest.update(report.to_dict())
    path = os.path.join(output_dir, MANIFEST_NAME)
    os.makedirs(output_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)
    return path


def extract_design_tokens(node, breakpoints: Optional[dict] = None) -> dict:
    """
    從場景樹擷取設計 token 索引，供 manifest 或設計系統使用。

    顏色、字級、字型、陰影依出現順序去重；
    間距（padding / itemSpacing）與圓角由小到大排序；
    斷點來自設定（預設 mobile / tablet / desktop）。
    """
    tokens = {"colors": [], "fontSizes": [], "fontFamilies": [], "shadows": []}
    spacing = set()
    radii = set()
    for current in node.walk():
        styles = resolve_styles(current)
        for key in ("backgroundColor", "color"):
            if styles.get(key):
                tokens["colors"].append(styles[key])
        if styles.get("fontSize"):
            tokens["fontSizes"].append(styles["fontSize"])
        if styles.get("fontFamily"):
            tokens["fontFamilies"].append(styles["fontFamily"])
        if styles.get("boxShadow"):
            tokens["shadows"].append(styles["boxShadow"])

        pad = current.layout.padding
        spacing.update(v for v in (pad.top, pad.right, pad.bottom, pad.left) if v)
        if current.layout.item_spacing:
            spacing.add(current.layout.item_spacing)
        if current.corner_radius:
            radii.add(current.corner_radius)

    # 去重
    result = {k: list(dict.fromkeys(v)) for k, v in tokens.items()}
    result["spacing"] = [color_utils.px(v) for v in sorted(spacing)]
    result["radii"] = [color_utils.px(v) for v in sorted(radii)]
    result["breakpoints"] = {
        name: color_utils.px(width)
        for name, width in (breakpoints or DEFAULT_BREAKPOINTS).items()
    }
    return result


def design_tokens_to_css(tokens: dict, prefix: str = "") -> str:
    """token 索引 → :root CSS 變數（--color-1、--spacing-2、--breakpoint-mobile …）."""
    lines = ["/* Design Tokens - Generated by airis-codegen */", ":root {"]
    for key, label in _CSS_VARIABLE_GROUPS:
        for index, value in enumerate(tokens.get(key) or [], start=1):
            lines.append(f"  --{prefix}{label}-{index}: {value};")
    for name, value in (tokens.get("breakpoints") or {}).items():
        lines.append(f"  --{prefix}breakpoint-{name}: {value};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_design_tokens(output_dir: str, tokens: dict, prefix: str = "") -> List[str]:
    """寫入 tokens.css 與 design-tokens.json，回傳檔案路徑."""
    css_path = Path(output_dir) / TOKENS_CSS_NAME
    _write(css_path, design_tokens_to_css(tokens, prefix))
    json_path = Path(output_dir) / TOKENS_JSON_NAME
    _write(json_path, json.dumps(tokens, indent=2, ensure_ascii=False))
    return [str(css_path), str(json_path)]
