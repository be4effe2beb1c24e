"""
命名引擎 — 圖層名稱 → 元件名稱 / class 名稱

元件名：PascalCase，數字開頭加前綴（9Slice → Component9slice）
class 名：kebab-case，根節點用元件名，子節點加流水號保證唯一
"""

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class NamingConfig:
    """命名引擎設定."""
    number_prefix: str = "Component"
    fallback_name: str = "Unnamed"
    # JS / TS 保留字不可當元件名
    reserved_names: list = field(default_factory=lambda: [
        "Default", "Class", "Function", "Object", "Array", "String",
        "Number", "Boolean", "Symbol", "Promise", "Error", "Map", "Set",
    ])
    custom_overrides: dict = field(default_factory=dict)


class NamingEngine:
    """將設計圖層名稱轉成可用於程式碼的識別字."""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def component_name(self, layer_name: str) -> str:
        override = self.config.custom_overrides.get(layer_name)
        if override:
            return override
        name = self._to_pascal_case(layer_name)
        if not name:
            return self.config.fallback_name
        if name[0].isdigit():
            name = f"{self.config.number_prefix}{name}"
        if name in self.config.reserved_names:
            name = f"{name}{self.config.number_prefix}"
        return name

    def _to_pascal_case(self, s: str) -> str:
        s = re.sub(r'[^a-zA-Z0-9]', ' ', s or "")
        words = s.split()
        return ''.join(w[:1].upper() + w[1:].lower() for w in words)


def kebab(name: str) -> str:
    out = []
    prev_lower = False
    for ch in name:
        if ch.isalnum():
            # camelCase 邊界也切開
            if ch.isupper() and prev_lower:
                out.append("-")
            out.append(ch.lower())
            prev_lower = ch.islower() or ch.isdigit()
        else:
            out.append("-")
            prev_lower = False
    slug = "".join(out).strip("-")
    while "--" in slug:
        slug = slug.replace("--", "-")
    return slug or "unnamed"


@dataclass
class ClassNamer:
    """單次產生內的 class 名稱分配（根節點不加流水號）."""
    prefix: str
    counter: int = 0

    def root(self) -> str:
        return self.prefix

    def child(self, layer_name: str) -> str:
        self.counter += 1
        return f"{self.prefix}-{kebab(layer_name)}-{self.counter}"
