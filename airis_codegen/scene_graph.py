"""
Scene graph model — immutable nodes for a design-tool document.

Nodes are frozen dataclasses with tuple children, built bottom-up by
``figma_reader.FigmaToScene`` and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from .errors import NodeNotFoundError

TEXT = "TEXT"
FRAME = "FRAME"
COMPONENT_SET = "COMPONENT_SET"
INSTANCE = "INSTANCE"

KNOWN_KINDS = frozenset({
    "DOCUMENT", "CANVAS", "FRAME", "GROUP", "VECTOR", "BOOLEAN_OPERATION",
    "STAR", "LINE", "ELLIPSE", "REGULAR_POLYGON", "RECTANGLE", "TEXT",
    "SLICE", "COMPONENT", "COMPONENT_SET", "INSTANCE", "SECTION",
})

SOLID = "SOLID"
IMAGE = "IMAGE"
DROP_SHADOW = "DROP_SHADOW"


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class Paint:
    type: str
    visible: bool = True
    opacity: Optional[float] = None
    color: Optional[Color] = None
    gradient_stops: Tuple[Tuple[float, Color], ...] = ()
    gradient_handles: Tuple[Tuple[float, float], ...] = ()
    image_ref: Optional[str] = None

    @property
    def is_gradient(self) -> bool:
        return self.type.startswith("GRADIENT")


@dataclass(frozen=True)
class Effect:
    type: str
    visible: Optional[bool] = None
    radius: float = 0
    spread: float = 0
    offset_x: float = 0
    offset_y: float = 0
    color: Optional[Color] = None


@dataclass(frozen=True)
class Typography:
    font_family: str = "Inter"
    font_size: float = 14
    font_weight: Optional[float] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    text_align: Optional[str] = None
    fills: Tuple[Paint, ...] = ()


@dataclass(frozen=True)
class Padding:
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    def is_zero(self) -> bool:
        return not (self.top or self.right or self.bottom or self.left)


@dataclass(frozen=True)
class LayoutSpec:
    axis: str = "NONE"  # "HORIZONTAL" | "VERTICAL" | "NONE"
    item_spacing: float = 0
    padding: Padding = field(default_factory=Padding)
    primary_align: Optional[str] = None
    counter_align: Optional[str] = None
    wrap: bool = False

    @property
    def is_flex(self) -> bool:
        return self.axis in ("HORIZONTAL", "VERTICAL")


@dataclass(frozen=True)
class Geometry:
    x: float = 0
    y: float = 0
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class Constraints:
    horizontal: str = "LEFT"
    vertical: str = "TOP"

    def is_default(self) -> bool:
        return self.horizontal == "LEFT" and self.vertical == "TOP"


@dataclass(frozen=True)
class SceneNode:
    """A node in the input tree. Children are owned, parent→child only."""
    id: str
    name: str
    kind: str = FRAME
    children: Tuple["SceneNode", ...] = ()
    geometry: Optional[Geometry] = None
    fills: Tuple[Paint, ...] = ()
    strokes: Tuple[Paint, ...] = ()
    stroke_weight: Optional[float] = None
    effects: Tuple[Effect, ...] = ()
    typography: Optional[Typography] = None
    layout: LayoutSpec = field(default_factory=LayoutSpec)
    corner_radius: Optional[float] = None
    opacity: Optional[float] = None
    constraints: Optional[Constraints] = None
    background_color: Optional[Color] = None
    characters: Optional[str] = None
    clips_content: bool = False

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT

    def has_image_fill(self) -> bool:
        return any(p.type == IMAGE for p in self.fills)

    def foreground_fills(self) -> Tuple[Paint, ...]:
        """文字節點的字形顏色在 typography.fills；其他節點就是 fills."""
        if self.is_text and not self.fills and self.typography is not None:
            return self.typography.fills
        return self.fills


    def walk(self) -> Iterator["SceneNode"]:
        """Depth-first, children-order-preserving."""
        yield self
        for child in self.children:
            yield from child.walk()


def count_nodes(node: SceneNode) -> int:
    return sum(1 for _ in node.walk())


def find_node(root: SceneNode, node_id: str) -> Optional[SceneNode]:
    for node in root.walk():
        if node.id == node_id:
            return node
    return None


@dataclass(frozen=True)
class ComponentRef:
    key: str
    name: str


@dataclass(frozen=True)
class SceneDocument:
    """Root node plus the optional named-component index (id → ref)."""
    root: SceneNode
    components: Dict[str, ComponentRef] = field(default_factory=dict)
    name: str = ""

    def find_component_id(self, component_name: str) -> Optional[str]:
        for node_id, ref in self.components.items():
            if ref.name == component_name:
                return node_id
        return None

    def resolve_target(
        self,
        node_id: Optional[str] = None,
        component_name: Optional[str] = None,
    ) -> SceneNode:
        if component_name:
            found_id = self.find_component_id(component_name)
            if found_id is None:
                raise NodeNotFoundError(
                    f"Component '{component_name}' not found in component index"
                )
            node_id = found_id
        if node_id:
            node = find_node(self.root, node_id)
            if node is None:
                raise NodeNotFoundError(f"Target node '{node_id}' not found", node_id=node_id)
            return node
        # 沒指定目標 → 第一個 canvas
        if self.root.children:
            return self.root.children[0]
        return self.root
