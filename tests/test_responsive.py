"""
響應式變體測試
"""
from airis_codegen.color_utils import parse_px
from airis_codegen.responsive import (
    BreakpointScale,
    ScalingPolicy,
    derive_responsive,
    has_responsive_design,
    media_condition,
    media_queries,
    variant_overrides,
)
from airis_codegen.scene_graph import Constraints, Geometry, LayoutSpec, SceneNode


class TestDeriveResponsive:
    def test_mobile_scales_font(self):
        variants = derive_responsive({"fontSize": "20px"})
        assert variants.mobile["fontSize"] == "16px"

    def test_mobile_font_floor(self):
        """12px × 0.8 低於下限 → 14px"""
        assert derive_responsive({"fontSize": "12px"}).mobile["fontSize"] == "14px"
        assert derive_responsive({"fontSize": "16px"}).mobile["fontSize"] == "14px"

    def test_floor_holds_for_all_sizes(self):
        for size in range(6, 72):
            variants = derive_responsive({"fontSize": f"{size}px"})
            assert parse_px(variants.mobile["fontSize"]) >= 14

    def test_mobile_padding(self):
        variants = derive_responsive({"padding": "24px 32px 24px 32px"})
        assert variants.mobile["padding"] == "8px"

    def test_no_padding_not_added(self):
        assert "padding" not in derive_responsive({"width": "100px"}).mobile

    def test_tablet_desktop_pass_through(self):
        base = {"fontSize": "20px", "padding": "16px", "width": "1200px"}
        variants = derive_responsive(base)
        assert variants.tablet == base
        assert variants.desktop == base
        assert variants.mobile["width"] == "1200px"

    def test_custom_policy(self):
        policy = ScalingPolicy(tablet=BreakpointScale(font_scale=0.9))
        variants = derive_responsive({"fontSize": "20px"}, policy)
        assert variants.tablet["fontSize"] == "18px"
        assert variants.desktop["fontSize"] == "20px"

    def test_to_dict(self):
        data = derive_responsive({"fontSize": "20px"}).to_dict()
        assert set(data) == {"mobile", "tablet", "desktop"}


class TestHasResponsiveDesign:
    def test_wide_node(self):
        assert has_responsive_design(SceneNode(id="1", name="Page", geometry=Geometry(width=1024)))

    def test_narrow_static_node(self):
        assert not has_responsive_design(SceneNode(id="1", name="Chip", geometry=Geometry(width=320)))

    def test_exactly_threshold_is_not_wide(self):
        assert not has_responsive_design(SceneNode(id="1", name="Chip", geometry=Geometry(width=768)))

    def test_non_default_constraints(self):
        node = SceneNode(id="1", name="Chip", constraints=Constraints(horizontal="CENTER"))
        assert has_responsive_design(node)

    def test_auto_layout(self):
        assert has_responsive_design(SceneNode(id="1", name="Row", layout=LayoutSpec(axis="HORIZONTAL")))


class TestMediaQueries:
    def test_conditions(self):
        assert media_condition("mobile") == "(max-width: 768px)"
        assert media_condition("tablet") == "(min-width: 769px) and (max-width: 1024px)"
        assert media_condition("desktop") == "(min-width: 1025px)"

    def test_custom_breakpoints(self):
        assert media_condition("mobile", {"mobile": 640}) == "(max-width: 640px)"

    def test_only_differences_emitted(self):
        base = {"fontSize": "20px", "width": "100px"}
        overrides = variant_overrides(base, derive_responsive(base))
        assert overrides == {"mobile": {"fontSize": "16px"}}

    def test_media_queries_text(self):
        base = {"padding": "16px"}
        css = media_queries("card", base, derive_responsive(base))
        assert css == "@media (max-width: 768px) {\n  .card {\n    padding: 8px;\n  }\n}"

    def test_no_differences_no_blocks(self):
        base = {"width": "100px"}
        assert media_queries("card", base, derive_responsive(base)) == ""
