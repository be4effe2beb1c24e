"""
SceneNode / FigmaToScene / SceneDocument 測試
不需要真實 Figma Token，全部用假資料。
"""
import pytest
from unittest.mock import MagicMock

from airis_codegen.errors import NodeNotFoundError
from airis_codegen.figma_reader import FigmaAPIClient, FigmaToScene, load_document, parse_document
from airis_codegen.scene_graph import SceneNode, count_nodes, find_node


def _make_node(**kwargs):
    base = {
        "id": "1:1",
        "type": "FRAME",
        "name": "TestFrame",
        "absoluteBoundingBox": {"x": 0, "y": 0, "width": 100, "height": 50},
        "children": [],
    }
    base.update(kwargs)
    return base


# ─── FigmaToScene ────────────────────────────────────────────────────────────

class TestFigmaToScene:
    def setup_method(self):
        self.converter = FigmaToScene()

    def test_convert_basic_frame(self):
        node = self.converter.convert(_make_node())
        assert node.name == "TestFrame"
        assert node.kind == "FRAME"
        assert node.geometry.width == 100
        assert node.geometry.height == 50
        assert node.children == ()

    def test_text_fills_move_to_typography(self):
        """文字節點的 fills 是字色，不應留在節點 fills"""
        raw = _make_node(
            type="TEXT",
            name="Title",
            characters="Hello",
            style={"fontSize": 16, "fontFamily": "Inter", "fontWeight": 700},
            fills=[{"visible": True, "type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 1}}],
        )
        node = self.converter.convert(raw)
        assert node.is_text
        assert node.characters == "Hello"
        assert node.fills == ()
        assert node.typography.font_size == 16
        assert node.typography.font_weight == 700
        assert len(node.typography.fills) == 1
        assert node.typography.fills[0].type == "SOLID"

    def test_invisible_children_skipped(self):
        raw = _make_node(children=[
            _make_node(id="1:2", name="Shown"),
            _make_node(id="1:3", name="Hidden", visible=False),
        ])
        node = self.converter.convert(raw)
        assert [c.name for c in node.children] == ["Shown"]

    def test_auto_layout_and_padding(self):
        raw = _make_node(
            layoutMode="HORIZONTAL",
            itemSpacing=12,
            paddingTop=8, paddingRight=16, paddingBottom=8, paddingLeft=16,
            primaryAxisAlignItems="CENTER",
        )
        node = self.converter.convert(raw)
        assert node.layout.axis == "HORIZONTAL"
        assert node.layout.is_flex
        assert node.layout.item_spacing == 12
        assert node.layout.padding.right == 16
        assert node.layout.primary_align == "CENTER"

    def test_unknown_kind_kept_verbatim(self):
        node = self.converter.convert(_make_node(type="WIDGET"))
        assert node.kind == "WIDGET"

    def test_effects_and_gradient(self):
        raw = _make_node(
            effects=[{"type": "DROP_SHADOW", "visible": True, "radius": 8,
                      "offset": {"x": 0, "y": 4}, "color": {"r": 0, "g": 0, "b": 0, "a": 0.25}}],
            fills=[{"type": "GRADIENT_LINEAR",
                    "gradientStops": [
                        {"position": 0, "color": {"r": 1, "g": 0, "b": 0, "a": 1}},
                        {"position": 1, "color": {"r": 0, "g": 0, "b": 1, "a": 1}},
                    ]}],
        )
        node = self.converter.convert(raw)
        assert node.effects[0].offset_y == 4
        assert node.effects[0].radius == 8
        assert node.fills[0].is_gradient
        assert len(node.fills[0].gradient_stops) == 2


# ─── SceneNode helpers ───────────────────────────────────────────────────────

def test_walk_is_depth_first_in_order():
    tree = SceneNode(id="a", name="A", children=(
        SceneNode(id="b", name="B", children=(SceneNode(id="c", name="C"),)),
        SceneNode(id="d", name="D"),
    ))
    assert [n.id for n in tree.walk()] == ["a", "b", "c", "d"]
    assert count_nodes(tree) == 4
    assert find_node(tree, "c").name == "C"
    assert find_node(tree, "zzz") is None


# ─── SceneDocument.resolve_target ────────────────────────────────────────────

class TestResolveTarget:
    def setup_method(self):
        self.document = parse_document({
            "name": "Design",
            "document": {
                "id": "0:0", "type": "DOCUMENT", "name": "Document",
                "children": [{
                    "id": "0:1", "type": "CANVAS", "name": "Page 1",
                    "children": [_make_node(id="1:2", name="Primary Button")],
                }],
            },
            "components": {"1:2": {"key": "abc", "name": "Primary Button"}},
        })

    def test_by_id(self):
        assert self.document.resolve_target(node_id="1:2").name == "Primary Button"

    def test_by_component_name(self):
        assert self.document.resolve_target(component_name="Primary Button").id == "1:2"

    def test_default_is_first_canvas(self):
        assert self.document.resolve_target().id == "0:1"

    def test_missing_id_raises(self):
        with pytest.raises(NodeNotFoundError) as exc:
            self.document.resolve_target(node_id="9:9")
        assert exc.value.node_id == "9:9"
        assert exc.value.to_dict()["name"] == "NodeNotFoundError"

    def test_missing_component_raises(self):
        with pytest.raises(NodeNotFoundError):
            self.document.resolve_target(component_name="Nope")

    def test_document_name(self):
        assert self.document.name == "Design"


def test_load_document_from_file(tmp_path):
    import json
    path = tmp_path / "scene.json"
    path.write_text(json.dumps({"document": _make_node(id="5:5", name="Root")}), encoding="utf-8")
    document = load_document(str(path))
    assert document.root.id == "5:5"


# ─── FigmaAPIClient ──────────────────────────────────────────────────────────

class TestFigmaAPIClient:
    def test_get_file_passes_ids_and_timeout(self):
        client = FigmaAPIClient("tok", timeout=5)
        client.session = MagicMock()
        client.session.get.return_value.json.return_value = {"document": {}}
        result = client.get_file("KEY", node_ids=["1:2", "3:4"])
        assert result == {"document": {}}
        args, kwargs = client.session.get.call_args
        assert args[0].endswith("/files/KEY")
        assert kwargs["params"] == {"ids": "1:2,3:4"}
        assert kwargs["timeout"] == 5
        client.session.get.return_value.raise_for_status.assert_called_once()

    def test_token_header(self):
        client = FigmaAPIClient("secret")
        assert client.session.headers["X-Figma-Token"] == "secret"
