"""Props 型別宣告 — 只依分類結果推導，不看樣式."""

from dataclasses import dataclass
from typing import List

from .classifier import BUTTON, INPUT, ComponentClassification


@dataclass(frozen=True)
class PropDefinition:
    name: str
    type: str
    required: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "required": self.required}


def suggested_props(classification: ComponentClassification) -> List[PropDefinition]:
    props = []
    if classification.has_interactivity:
        props.append(PropDefinition("onClick", "() => void"))
    if classification.category == BUTTON:
        props.append(PropDefinition("disabled", "boolean"))
        props.append(PropDefinition("variant", "'primary' | 'secondary' | 'outline'"))
    if classification.category == INPUT:
        props.append(PropDefinition("value", "string"))
        props.append(PropDefinition("onChange", "(value: string) => void"))
        props.append(PropDefinition("placeholder", "string"))
    props.append(PropDefinition("className", "string"))
    return props


def render_type_declarations(component_name: str, classification: ComponentClassification) -> str:
    lines = [f"export interface {component_name}Props {{"]
    for prop in suggested_props(classification):
        optional = "" if prop.required else "?"
        lines.append(f"  {prop.name}{optional}: {prop.type};")
    lines.append("}")
    return "\n".join(lines) + "\n"


# Vue props 物件用的 runtime 型別
_VUE_RUNTIME_TYPES = {
    "boolean": "Boolean",
    "string": "String",
}


def vue_prop_type(prop: PropDefinition) -> str:
    if "=>" in prop.type:
        return "Function"
    return _VUE_RUNTIME_TYPES.get(prop.type, "String")
