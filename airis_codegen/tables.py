"""
規則表 — 分類關鍵字、Tailwind 刻度、標籤對照、無障礙規則

所有表格都以參數傳入 classifier / emitter / auditor，
不使用模組層級的可變狀態；測試可直接替換。
"""

from dataclasses import dataclass, field


@dataclass
class ClassifierTables:
    """元件分類設定（關鍵字依序比對，第一個命中者勝出）."""
    category_keywords: list = field(default_factory=lambda: [
        ("button", ["button", "btn"]),
        ("card", ["card", "panel"]),
        ("input", ["input", "field", "form"]),
        ("icon", ["icon"]),
        ("image", ["image", "img", "photo", "picture", "avatar"]),
    ])
    interactive_keywords: list = field(default_factory=lambda: [
        "button", "btn", "input", "select", "checkbox", "radio",
        "toggle", "switch", "link",
    ])
    layout_child_threshold: int = 3
    simple_max_weight: int = 3
    medium_max_weight: int = 8
    effects_weight: int = 2
    multi_fill_weight: int = 1
    variant_kinds: list = field(default_factory=lambda: ["COMPONENT_SET", "INSTANCE"])


@dataclass
class UtilityScale:
    """Tailwind 刻度表（px → class 後綴）."""
    spacing: dict = field(default_factory=lambda: {
        0: "0", 2: "0.5", 4: "1", 6: "1.5", 8: "2", 10: "2.5", 12: "3",
        14: "3.5", 16: "4", 20: "5", 24: "6", 28: "7", 32: "8", 36: "9",
        40: "10", 44: "11", 48: "12", 56: "14", 64: "16", 80: "20", 96: "24",
    })
    font_sizes: dict = field(default_factory=lambda: {
        "xs": 12, "sm": 14, "base": 16, "lg": 18, "xl": 20, "2xl": 24,
        "3xl": 30, "4xl": 36, "5xl": 48, "6xl": 60, "7xl": 72, "8xl": 96,
        "9xl": 128,
    })
    border_radius: dict = field(default_factory=lambda: {
        "none": 0, "sm": 2, "": 4, "md": 6, "lg": 8, "xl": 12,
        "2xl": 16, "3xl": 24, "full": 9999,
    })
    font_weights: dict = field(default_factory=lambda: {
        100: "thin", 200: "extralight", 300: "light", 400: "normal",
        500: "medium", 600: "semibold", 700: "bold",
        800: "extrabold", 900: "black",
    })
    shadow_blur: list = field(default_factory=lambda: [
        (2, "shadow-sm"), (6, "shadow"), (10, "shadow-md"),
        (15, "shadow-lg"), (25, "shadow-xl"),
    ])
    shadow_max: str = "shadow-2xl"
    interactive_classes: list = field(default_factory=lambda: [
        "cursor-pointer", "hover:opacity-80", "transition-opacity",
    ])


@dataclass
class MarkupTables:
    """標籤與 ARIA role 對照（依序比對名稱關鍵字）."""
    tag_keywords: list = field(default_factory=lambda: [
        ("button", "button"), ("btn", "button"), ("input", "input"),
        ("header", "header"), ("footer", "footer"), ("nav", "nav"),
    ])
    role_keywords: list = field(default_factory=lambda: [
        ("button", "button"), ("btn", "button"), ("link", "link"),
        ("checkbox", "checkbox"), ("radio", "radio"), ("toggle", "switch"),
        ("switch", "switch"), ("select", "combobox"), ("input", "textbox"),
    ])
    void_tags: list = field(default_factory=lambda: ["input", "img"])


@dataclass
class AuditTables:
    """無障礙規則設定."""
    interactive_pattern: str = r"\b(button|btn|click|link|input|select)\b"
    heading_pattern: str = r"\b(title|heading|header|h[1-6])\b"
    image_pattern: str = r"\b(image|img|photo|picture|icon)\b"
    contrast_normal: float = 4.5
    contrast_large: float = 3.0
    contrast_non_text: float = 3.0
    large_text_size: float = 24
    large_bold_text_size: float = 19
    general_suggestions: list = field(default_factory=lambda: [
        "Test with screen readers to ensure compatibility",
        "Verify keyboard navigation works properly",
        "Check color contrast meets WCAG AA standards",
    ])
    category_suggestions: dict = field(default_factory=lambda: {
        "button": [
            "Use semantic <button> element instead of div",
            "Implement proper focus states",
            "Support Enter and Space key activation",
        ],
        "input": [
            "Use semantic form elements",
            "Implement proper error messaging",
            "Support autocomplete attributes",
        ],
        "card": [
            "Use article or section elements for self-contained cards",
        ],
        "image": [
            "Provide descriptive alt text for informative images",
        ],
        "layout": [
            "Use landmark elements (header, main, nav, footer) for page regions",
        ],
    })


@dataclass
class EngineTables:
    classifier: ClassifierTables = field(default_factory=ClassifierTables)
    utility: UtilityScale = field(default_factory=UtilityScale)
    markup: MarkupTables = field(default_factory=MarkupTables)
    audit: AuditTables = field(default_factory=AuditTables)


DEFAULT_TABLES = EngineTables()
