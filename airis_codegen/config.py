"""設定檔載入、基本驗證與產生選項."""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigurationError

DEFAULT_CONFIG_FILE = "codegen.config.json"


class MarkupDialect(Enum):
    COMPONENTIZED = "react"
    TEMPLATED = "vue"
    STATIC = "html"


class StyleDialect(Enum):
    UTILITY = "tailwind"
    SCOPED_MODULE = "css-modules"
    CSS_IN_JS = "styled-components"
    PLAIN = "plain-css"


DEFAULT_BREAKPOINTS = {"mobile": 768, "tablet": 1024, "desktop": 1440}


def _parse_dialect(enum_cls, value, label: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        valid = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"Unsupported {label} '{value}' (expected one of: {valid})")


@dataclass(frozen=True)
class GenerationOptions:
    """單次產生的選項；dialect 為 None 時在選擇 backend 時報錯."""
    markup: Optional[MarkupDialect] = MarkupDialect.COMPONENTIZED
    stylesheet: Optional[StyleDialect] = StyleDialect.UTILITY
    typescript: bool = True
    accessibility: bool = True
    responsive: bool = True
    optimize_images: bool = False
    breakpoints: dict = field(default_factory=lambda: dict(DEFAULT_BREAKPOINTS))

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationOptions":
        """接受 framework / styling / optimizeImages / customBreakpoints 等欄位名稱."""
        breakpoints = dict(DEFAULT_BREAKPOINTS)
        breakpoints.update(data.get("customBreakpoints") or data.get("breakpoints") or {})
        return cls(
            markup=_parse_dialect(MarkupDialect, data.get("framework"), "framework"),
            stylesheet=_parse_dialect(StyleDialect, data.get("styling"), "styling"),
            typescript=bool(data.get("typescript", True)),
            accessibility=bool(data.get("accessibility", True)),
            responsive=bool(data.get("responsive", True)),
            optimize_images=bool(data.get("optimizeImages", False)),
            breakpoints=breakpoints,
        )

    def to_dict(self) -> dict:
        return {
            "framework": self.markup.value if self.markup else None,
            "styling": self.stylesheet.value if self.stylesheet else None,
            "typescript": self.typescript,
            "accessibility": self.accessibility,
            "responsive": self.responsive,
            "optimizeImages": self.optimize_images,
            "customBreakpoints": dict(sorted(self.breakpoints.items())),
        }


# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "generation", "export"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "fileKey"},
    "generation": {
        "framework", "styling", "typescript", "accessibility",
        "responsive", "optimizeImages", "breakpoints",
    },
    "export": {"outputDir"},
}

_VALID_FRAMEWORKS = {m.value for m in MarkupDialect}
_VALID_STYLINGS = {m.value for m in StyleDialect}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    generation = cfg.get("generation", {})
    if not isinstance(generation, dict):
        return

    framework = generation.get("framework")
    if framework and framework not in _VALID_FRAMEWORKS:
        valid = ", ".join(sorted(_VALID_FRAMEWORKS))
        _warn(f"generation.framework '{framework}' 不在已知值中（{valid}）")

    styling = generation.get("styling")
    if styling and styling not in _VALID_STYLINGS:
        valid = ", ".join(sorted(_VALID_STYLINGS))
        _warn(f"generation.styling '{styling}' 不在已知值中（{valid}）")

    # breakpoints 值類型
    for name, width in (generation.get("breakpoints") or {}).items():
        if not isinstance(width, (int, float)):
            _warn(f"generation.breakpoints.{name} 應為數字，目前是 {type(width).__name__}")


def load_config(config_path: str = DEFAULT_CONFIG_FILE) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def options_from_config(cfg: dict, **overrides) -> GenerationOptions:
    """config 的 generation 區塊 → GenerationOptions（CLI 參數可覆寫）."""
    generation = dict(cfg.get("generation") or {})
    generation.setdefault("framework", MarkupDialect.COMPONENTIZED.value)
    generation.setdefault("styling", StyleDialect.UTILITY.value)
    for key, value in overrides.items():
        if value is not None:
            generation[key] = value
    if "breakpoints" in generation and "customBreakpoints" not in generation:
        generation["customBreakpoints"] = generation.pop("breakpoints")
    return GenerationOptions.from_dict(generation)
