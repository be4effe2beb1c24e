"""
Custom-code integrator — 將呼叫端提供的片段插入產出的程式碼

以 regex 找插入點（不解析 AST）：
  markup   → 元件定義開頭之後（React 箭頭函式 / defineComponent({ / <body>）
  imports  → 第一行框架 import 之後，找不到則放最前面
  styles   → 以註解 banner 附加在樣式表後面
任何片段插入失敗時回傳原始文字並記一筆警告，不拋例外。
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import MarkupDialect
from .errors import IntegrationError

MARKUP_WITHOUT_STYLES = "custom markup without corresponding styles"
STYLES_WITHOUT_MARKUP = "custom styles without corresponding markup"

_DEFINITION_PATTERNS = {
    MarkupDialect.COMPONENTIZED: re.compile(r"const \w+ = \([^)]*\) => \{"),
    MarkupDialect.TEMPLATED: re.compile(r"defineComponent\(\{"),
    MarkupDialect.STATIC: re.compile(r"<body[^>]*>", re.IGNORECASE),
}

_FRAMEWORK_IMPORT = re.compile(r"^import\s+(?:React\b|\{[^}]*\}\s+from\s+'vue')[^\n]*\n", re.MULTILINE)


@dataclass(frozen=True)
class CustomFragments:
    markup: Optional[str] = None
    stylesheet: Optional[str] = None
    advanced_stylesheet: Optional[str] = None
    imports: Optional[str] = None
    utilities: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.markup, self.stylesheet, self.advanced_stylesheet,
                        self.imports, self.utilities))

    def to_dict(self) -> dict:
        return {
            "markup": self.markup,
            "stylesheet": self.stylesheet,
            "advancedStylesheet": self.advanced_stylesheet,
            "imports": self.imports,
            "utilities": self.utilities,
        }


@dataclass(frozen=True)
class IntegrationResult:
    markup: str
    stylesheet: str
    warnings: Tuple[str, ...] = ()


def _indent(text: str, pad: str) -> str:
    return "\n".join(f"{pad}{line}" if line.strip() else line for line in text.strip("\n").split("\n"))


def _splice_markup(markup: str, custom: str, dialect: MarkupDialect) -> str:
    pattern = _DEFINITION_PATTERNS.get(dialect)
    match = pattern.search(markup) if pattern else None
    if match is None:
        raise IntegrationError(f"No component definition found for {dialect.value} markup")
    block = "\n" + _indent(custom, "  ")
    return markup[: match.end()] + block + markup[match.end():]


def _splice_imports(markup: str, imports: str) -> str:
    section = imports.strip() + "\n"
    match = _FRAMEWORK_IMPORT.search(markup)
    if match is None:
        return section + markup
    return markup[: match.end()] + section + markup[match.end():]


def _append_styles(stylesheet: str, custom: Optional[str], advanced: Optional[str]) -> str:
    result = stylesheet.rstrip("\n")
    if custom:
        result += "\n\n/* Custom Styles */\n" + custom.strip("\n")
    if advanced:
        result += "\n\n/* Advanced Styles */\n" + advanced.strip("\n")
    return result + "\n"


def pairing_warnings(fragments: CustomFragments) -> List[str]:
    has_styles = bool(fragments.stylesheet or fragments.advanced_stylesheet)
    if fragments.markup and not has_styles:
        return [MARKUP_WITHOUT_STYLES]
    if has_styles and not fragments.markup:
        return [STYLES_WITHOUT_MARKUP]
    return []


def integrate(
    base_markup: str,
    base_stylesheet: str,
    fragments: Optional[CustomFragments],
    markup_dialect: MarkupDialect,
) -> IntegrationResult:
    if fragments is None or fragments.is_empty():
        return IntegrationResult(base_markup, base_stylesheet)

    warnings = pairing_warnings(fragments)
    try:
        markup = base_markup
        if fragments.imports:
            markup = _splice_imports(markup, fragments.imports)
        if fragments.markup:
            markup = _splice_markup(markup, fragments.markup, markup_dialect)
        stylesheet = base_stylesheet
        if fragments.stylesheet or fragments.advanced_stylesheet:
            stylesheet = _append_styles(
                stylesheet, fragments.stylesheet, fragments.advanced_stylesheet
            )
    except IntegrationError as e:
        warnings.append(f"Custom code could not be integrated: {e.message}")
        return IntegrationResult(base_markup, base_stylesheet, tuple(warnings))
    return IntegrationResult(markup, stylesheet, tuple(warnings))


def integrate_utilities(type_declarations: str, utilities: Optional[str]) -> str:
    if not utilities:
        return type_declarations
    return type_declarations.rstrip("\n") + "\n\n// Custom Utilities\n" + utilities.strip("\n") + "\n"
