"""
元件分類器 — 場景節點 → 語意類別 + 複雜度

名稱關鍵字優先（依固定順序，第一個命中者勝出），再退回結構判斷。
分類樹與輸入樹同形：每個子節點都會被分類。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .scene_graph import SceneNode
from .tables import DEFAULT_TABLES, ClassifierTables

BUTTON = "button"
CARD = "card"
TEXT = "text"
INPUT = "input"
LAYOUT = "layout"
IMAGE = "image"
ICON = "icon"
COMPLEX = "complex"

SIMPLE = "simple"
MEDIUM = "medium"


@dataclass(frozen=True)
class ComponentClassification:
    category: str
    complexity: str
    has_interactivity: bool
    has_variants: bool
    children: Tuple["ComponentClassification", ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "complexity": self.complexity,
            "hasInteractivity": self.has_interactivity,
            "hasVariants": self.has_variants,
            "children": [c.to_dict() for c in self.children],
        }


def _tables(tables) -> ClassifierTables:
    if tables is None:
        return DEFAULT_TABLES.classifier
    # 也接受整組 EngineTables
    return getattr(tables, "classifier", tables)


def is_interactive_name(name: str, tables=None) -> bool:
    """只看節點自身名稱."""
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in _tables(tables).interactive_keywords)


def category_for(node: SceneNode, tables=None) -> str:
    t = _tables(tables)
    lowered = node.name.lower()
    for category, keywords in t.category_keywords:
        if any(keyword in lowered for keyword in keywords):
            return category
    if node.is_text:
        return TEXT
    if node.has_image_fill():
        return IMAGE
    if len(node.children) > t.layout_child_threshold:
        return LAYOUT
    return COMPLEX


def complexity_for(node: SceneNode, tables=None) -> str:
    t = _tables(tables)
    weight = len(node.children)
    if node.effects:
        weight += t.effects_weight
    if len(node.foreground_fills()) > 1:
        weight += t.multi_fill_weight
    if weight <= t.simple_max_weight:
        return SIMPLE
    if weight <= t.medium_max_weight:
        return MEDIUM
    return COMPLEX


def classify(node: SceneNode, tables=None) -> ComponentClassification:
    t = _tables(tables)
    children = tuple(classify(child, t) for child in node.children)
    return ComponentClassification(
        category=category_for(node, t),
        complexity=complexity_for(node, t),
        has_interactivity=(
            is_interactive_name(node.name, t)
            or any(c.has_interactivity for c in children)
        ),
        has_variants=node.kind in t.variant_kinds,
        children=children,
    )


def preview_classification_tree(
    node: SceneNode,
    classification: Optional[ComponentClassification] = None,
    indent: int = 0,
) -> str:
    """除錯用：印出分類樹."""
    if classification is None:
        classification = classify(node)
    prefix = "  " * indent
    label = f"{prefix}├─ {node.name}  [{node.kind}]  {classification.category}/{classification.complexity}"
    if classification.has_interactivity:
        label += "  ⚡"
    if classification.has_variants:
        label += "  ◆"
    lines = [label]
    for child, child_cls in zip(node.children, classification.children):
        lines.append(preview_classification_tree(child, child_cls, indent + 1))
    return "\n".join(lines)
