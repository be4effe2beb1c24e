"""
Figma REST API 讀取與場景樹轉換

讀取 Figma 檔案（或本機 JSON 匯出），轉成不可變的 SceneNode 樹。
"""

import json
from pathlib import Path
from typing import Optional

import requests

from .scene_graph import (
    Color,
    ComponentRef,
    Constraints,
    Effect,
    Geometry,
    LayoutSpec,
    Padding,
    Paint,
    SceneDocument,
    SceneNode,
    Typography,
)


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = 30):
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_file(self, file_key: str, node_ids: Optional[list] = None) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}"
        params = {}
        if node_ids:
            params["ids"] = ",".join(node_ids)
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_file_nodes(self, file_key: str, node_ids: list) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}/nodes"
        params = {"ids": ",".join(node_ids)}
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()


class FigmaToScene:
    """將 Figma API 節點 JSON 轉成 SceneNode（由葉往根建構）."""

    def convert(self, figma_node: dict) -> SceneNode:
        node_type = figma_node.get("type", "FRAME")
        children = tuple(
            self.convert(c) for c in figma_node.get("children", []) or []
            if c.get("visible", True)
        )
        style = figma_node.get("style")
        typography = None
        fills = self._convert_paints(figma_node.get("fills"))
        if node_type == "TEXT":
            typography = self._convert_typography(style or {}, figma_node)
            # 文字節點的 fills 是字形顏色，歸到 typography，不當背景
            fills = ()

        return SceneNode(
            id=str(figma_node.get("id", "")),
            name=figma_node.get("name", "Unnamed"),
            kind=node_type,
            children=children,
            geometry=self._convert_geometry(figma_node.get("absoluteBoundingBox")),
            fills=fills,
            strokes=self._convert_paints(figma_node.get("strokes")),
            stroke_weight=figma_node.get("strokeWeight"),
            effects=tuple(self._convert_effect(e) for e in figma_node.get("effects", []) or []),
            typography=typography,
            layout=self._convert_layout(figma_node),
            corner_radius=figma_node.get("cornerRadius"),
            opacity=figma_node.get("opacity"),
            constraints=self._convert_constraints(figma_node.get("constraints")),
            background_color=self._convert_color(figma_node.get("backgroundColor")),
            characters=figma_node.get("characters"),
            clips_content=bool(figma_node.get("clipsContent", False)),
        )

    def _convert_color(self, c: Optional[dict]) -> Optional[Color]:
        if not c:
            return None
        return Color(
            r=c.get("r", 0), g=c.get("g", 0), b=c.get("b", 0),
            a=c.get("a", 1.0),
        )

    def _convert_paints(self, paints: Optional[list]) -> tuple:
        result = []
        for p in paints or []:
            stops = tuple(
                (s.get("position", 0), self._convert_color(s.get("color")) or Color(0, 0, 0))
                for s in p.get("gradientStops", []) or []
            )
            handles = tuple(
                (h.get("x", 0), h.get("y", 0))
                for h in p.get("gradientHandlePositions", []) or []
            )
            result.append(Paint(
                type=p.get("type", "SOLID"),
                visible=p.get("visible", True),
                opacity=p.get("opacity"),
                color=self._convert_color(p.get("color")),
                gradient_stops=stops,
                gradient_handles=handles,
                image_ref=p.get("imageRef"),
            ))
        return tuple(result)

    def _convert_effect(self, effect: dict) -> Effect:
        off = effect.get("offset", {}) or {}
        return Effect(
            type=effect.get("type", ""),
            visible=effect.get("visible"),
            radius=effect.get("radius", 0),
            spread=effect.get("spread", 0),
            offset_x=off.get("x", 0),
            offset_y=off.get("y", 0),
            color=self._convert_color(effect.get("color")),
        )

    def _convert_typography(self, style: dict, node: dict) -> Typography:
        # style.fills 存在時優先，否則用節點 fills
        fills = style.get("fills")
        if fills is None:
            fills = node.get("fills")
        return Typography(
            font_family=style.get("fontFamily", "Inter"),
            font_size=style.get("fontSize", 14),
            font_weight=style.get("fontWeight"),
            line_height=style.get("lineHeightPx"),
            letter_spacing=style.get("letterSpacing"),
            text_align=style.get("textAlignHorizontal"),
            fills=self._convert_paints(fills),
        )

    def _convert_geometry(self, bbox: Optional[dict]) -> Optional[Geometry]:
        if not bbox:
            return None
        return Geometry(
            x=bbox.get("x", 0), y=bbox.get("y", 0),
            width=bbox.get("width"), height=bbox.get("height"),
        )

    def _convert_layout(self, node: dict) -> LayoutSpec:
        return LayoutSpec(
            axis=node.get("layoutMode") or "NONE",
            item_spacing=node.get("itemSpacing", 0) or 0,
            padding=Padding(
                top=node.get("paddingTop", 0) or 0,
                right=node.get("paddingRight", 0) or 0,
                bottom=node.get("paddingBottom", 0) or 0,
                left=node.get("paddingLeft", 0) or 0,
            ),
            primary_align=node.get("primaryAxisAlignItems"),
            counter_align=node.get("counterAxisAlignItems"),
            wrap=node.get("layoutWrap") == "WRAP",
        )

    def _convert_constraints(self, constraints: Optional[dict]) -> Optional[Constraints]:
        if not constraints:
            return None
        return Constraints(
            horizontal=constraints.get("horizontal", "LEFT"),
            vertical=constraints.get("vertical", "TOP"),
        )


def parse_document(payload: dict) -> SceneDocument:
    """將 Figma 檔案回應（document + components）轉成 SceneDocument."""
    document = payload.get("document")
    if document is None:
        # 也接受直接傳入單一節點
        document = payload
    converter = FigmaToScene()
    components = {
        node_id: ComponentRef(key=info.get("key", ""), name=info.get("name", ""))
        for node_id, info in (payload.get("components") or {}).items()
    }
    return SceneDocument(
        root=converter.convert(document),
        components=components,
        name=payload.get("name", ""),
    )


def load_document(path: str) -> SceneDocument:
    """讀取本機 JSON 匯出的場景檔."""
    with open(Path(path), "r", encoding="utf-8") as f:
        payload = json.load(f)
    return parse_document(payload)
