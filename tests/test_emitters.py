"""
Emitters / stylesheet backends 測試
"""
import itertools

import pytest

from airis_codegen.classifier import classify
from airis_codegen.config import GenerationOptions, MarkupDialect, StyleDialect
from airis_codegen.emitters import (
    emit,
    markup_filename,
    select_backends,
    stylesheet_filename,
    tag_for,
)
from airis_codegen.errors import ConfigurationError
from airis_codegen.scene_graph import (
    Color,
    LayoutSpec,
    Padding,
    Paint,
    SceneNode,
    Typography,
)
from airis_codegen.style_resolver import resolve_styles
from airis_codegen.stylesheets import snap_spacing, utility_classes
from airis_codegen.tables import MarkupTables, UtilityScale

WHITE = Color(1, 1, 1, 1)


def _text(name, characters, node_id):
    return SceneNode(id=node_id, name=name, kind="TEXT", characters=characters,
                     typography=Typography(font_family="Inter", font_size=16))


def _card():
    return SceneNode(
        id="2:1", name="User Card", kind="FRAME",
        layout=LayoutSpec(axis="VERTICAL", item_spacing=16, padding=Padding(16, 16, 16, 16)),
        fills=(Paint(type="SOLID", color=WHITE),),
        children=(
            SceneNode(id="2:2", name="Avatar", kind="RECTANGLE",
                      fills=(Paint(type="IMAGE", image_ref="img-1"),)),
            _text("Name", "Jane", "2:3"),
            _text("Role", "Designer", "2:4"),
        ),
    )


def _button():
    return SceneNode(
        id="3:1", name="Submit Button", kind="FRAME",
        children=(_text("Label", "Go", "3:2"),),
    )


def _emit(node, name, **option_kwargs):
    options = GenerationOptions(**option_kwargs)
    return emit(node, classify(node), resolve_styles(node), options, name)


# ─── React ───────────────────────────────────────────────────────────────────

class TestComponentizedMarkup:
    def test_tailwind_card(self):
        code = _emit(_card(), "UserCard")
        assert "import React from 'react';" in code.markup
        assert "import './UserCard.css';" in code.markup
        assert "import type { UserCardProps } from './UserCard.types';" in code.markup
        assert "const UserCard = (props: UserCardProps) => {" in code.markup
        assert 'className="flex flex-col gap-4 p-4 bg-[#ffffff]"' in code.markup
        assert code.markup.rstrip().endswith("export default UserCard;")

    def test_children_in_order(self):
        code = _emit(_card(), "UserCard")
        avatar = code.markup.index('alt="Avatar"')
        jane = code.markup.index(">Jane</span>")
        designer = code.markup.index(">Designer</span>")
        assert avatar < jane < designer

    def test_image_element(self):
        code = _emit(_card(), "UserCard")
        assert '<img className="bg-[url(\'img-1\')] bg-cover bg-center" src="img-1" alt="Avatar" />' in code.markup
        assert 'loading="lazy"' not in code.markup

    def test_image_optimization_hints(self):
        code = _emit(_card(), "UserCard", optimize_images=True)
        assert 'loading="lazy" decoding="async"' in code.markup

    def test_tailwind_stylesheet(self):
        code = _emit(_card(), "UserCard")
        assert code.stylesheet.startswith("@tailwind base;")
        assert "@layer components {" in code.stylesheet
        assert "@apply flex flex-col gap-4 p-4 bg-[#ffffff];" in code.stylesheet
        assert "@media" not in code.stylesheet

    def test_type_declarations(self):
        code = _emit(_card(), "UserCard")
        assert code.type_declarations.startswith("export interface UserCardProps {")
        assert "  className?: string;" in code.type_declarations
        assert "onClick" not in code.type_declarations

    def test_button_semantics(self):
        code = _emit(_button(), "SubmitButton")
        assert ('<button className="cursor-pointer hover:opacity-80 transition-opacity" '
                'role="button" tabIndex={0}>') in code.markup
        assert "onClick?: () => void;" in code.type_declarations
        assert "variant?: 'primary' | 'secondary' | 'outline';" in code.type_declarations

    def test_css_modules(self):
        code = _emit(_card(), "UserCard", stylesheet=StyleDialect.SCOPED_MODULE)
        assert "import styles from './UserCard.module.css';" in code.markup
        assert "className={styles['user-card']}" in code.markup
        assert "className={styles['user-card-avatar-1']}" in code.markup
        assert ".user-card {" in code.stylesheet

    def test_styled_components(self):
        code = _emit(_card(), "UserCard", stylesheet=StyleDialect.CSS_IN_JS)
        assert "import { UserCardWrapper } from './UserCard.styles';" in code.markup
        assert "<UserCardWrapper>" in code.markup
        assert "</UserCardWrapper>" in code.markup
        assert code.stylesheet.startswith("import styled from 'styled-components';")
        assert "export const UserCardWrapper = styled.div`" in code.stylesheet
        assert "  .user-card {" in code.stylesheet

    def test_without_typescript(self):
        options = GenerationOptions(typescript=False)
        node = _card()
        code = emit(node, classify(node), resolve_styles(node), options, "UserCard")
        assert "const UserCard = (props) => {" in code.markup
        assert "import type" not in code.markup
        assert code.type_declarations is None
        assert markup_filename("UserCard", options) == "UserCard.jsx"

    def test_childless_element_self_closes(self):
        node = SceneNode(id="9", name="Empty Box")
        code = _emit(node, "EmptyBox")
        assert '<div className="empty-box" />' in code.markup

    def test_text_braces_escaped(self):
        node = _text("Hint", "{count} items", "5")
        code = _emit(node, "Hint")
        assert "&#123;count&#125; items" in code.markup


# ─── Vue / HTML ──────────────────────────────────────────────────────────────

class TestTemplatedMarkup:
    def test_vue_css_modules(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.TEMPLATED,
                     stylesheet=StyleDialect.SCOPED_MODULE)
        assert code.markup.startswith("<template>")
        assert ":class=\"$style['user-card']\"" in code.markup
        assert '<script lang="ts">' in code.markup
        assert "export default defineComponent({" in code.markup
        assert "name: 'UserCard'," in code.markup
        assert '<style module src="./UserCard.module.css"></style>' in code.markup

    def test_vue_button_props(self):
        code = _emit(_button(), "SubmitButton", markup=MarkupDialect.TEMPLATED)
        assert "onClick: { type: Function, required: false }," in code.markup
        assert "disabled: { type: Boolean, required: false }," in code.markup
        assert 'tabindex="0"' in code.markup

    def test_vue_plain_is_scoped(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.TEMPLATED,
                     stylesheet=StyleDialect.PLAIN, typescript=False)
        assert "<script>" in code.markup
        assert '<style scoped src="./UserCard.css"></style>' in code.markup


class TestStaticMarkup:
    def test_html_document(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.STATIC,
                     stylesheet=StyleDialect.PLAIN)
        assert code.markup.startswith("<!doctype html>")
        assert '<link rel="stylesheet" href="./UserCard.css">' in code.markup
        assert '<div class="user-card">' in code.markup
        assert '<img class="user-card-avatar-1" src="img-1" alt="Avatar">' in code.markup
        assert '<span class="user-card-name-2">Jane</span>' in code.markup

    def test_html_empty_div_not_self_closed(self):
        node = SceneNode(id="9", name="Spacer")
        code = _emit(node, "Spacer", markup=MarkupDialect.STATIC, stylesheet=StyleDialect.PLAIN)
        assert '<div class="spacer"></div>' in code.markup

    def test_html_css_in_js_has_no_link(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.STATIC,
                     stylesheet=StyleDialect.CSS_IN_JS)
        assert "<link" not in code.markup

    def test_plain_stylesheet_with_media(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.STATIC,
                     stylesheet=StyleDialect.PLAIN)
        assert ".user-card {\n  background-color: rgba(255, 255, 255, 1);" in code.stylesheet
        assert "  flex-direction: column;" in code.stylesheet
        assert "@media (max-width: 768px) {\n  .user-card {\n    padding: 8px;\n  }\n}" in code.stylesheet
        assert "min-width" not in code.stylesheet

    def test_responsive_disabled(self):
        code = _emit(_card(), "UserCard", markup=MarkupDialect.STATIC,
                     stylesheet=StyleDialect.PLAIN, responsive=False)
        assert "@media" not in code.stylesheet


# ─── 所有 dialect 組合 ───────────────────────────────────────────────────────

@pytest.mark.parametrize("markup,stylesheet", list(itertools.product(MarkupDialect, StyleDialect)))
def test_every_dialect_pair_emits(markup, stylesheet):
    node = _card()
    options = GenerationOptions(markup=markup, stylesheet=stylesheet)
    code = emit(node, classify(node), resolve_styles(node), options, "UserCard")
    assert code.markup.strip()
    assert isinstance(code.stylesheet, str)
    assert "Jane" in code.markup


@pytest.mark.parametrize("markup,stylesheet", list(itertools.product(MarkupDialect, StyleDialect)))
def test_emit_is_deterministic(markup, stylesheet):
    node = _button()
    options = GenerationOptions(markup=markup, stylesheet=stylesheet)
    first = emit(node, classify(node), resolve_styles(node), options, "SubmitButton")
    second = emit(node, classify(node), resolve_styles(node), options, "SubmitButton")
    assert first == second


def test_missing_dialect_raises():
    with pytest.raises(ConfigurationError):
        select_backends(GenerationOptions(markup=None))
    with pytest.raises(ConfigurationError):
        select_backends(GenerationOptions(stylesheet=None))


def test_filenames():
    assert stylesheet_filename("X", GenerationOptions(stylesheet=StyleDialect.SCOPED_MODULE)) == "X.module.css"
    assert stylesheet_filename("X", GenerationOptions(stylesheet=StyleDialect.CSS_IN_JS)) == "X.styles.ts"
    assert markup_filename("X", GenerationOptions(markup=MarkupDialect.TEMPLATED)) == "X.vue"


class TestTagFor:
    def setup_method(self):
        self.tables = MarkupTables()

    def test_keywords(self):
        assert tag_for(SceneNode(id="1", name="Primary Btn"), self.tables) == "button"
        assert tag_for(SceneNode(id="1", name="Site Header"), self.tables) == "header"
        assert tag_for(SceneNode(id="1", name="Search Input"), self.tables) == "input"

    def test_unknown_kind_is_div(self):
        assert tag_for(SceneNode(id="1", name="Thing", kind="WIDGET"), self.tables) == "div"

    def test_text_is_span(self):
        assert tag_for(SceneNode(id="1", name="Copy", kind="TEXT"), self.tables) == "span"


# ─── Tailwind 對照 ───────────────────────────────────────────────────────────

class TestUtilityClasses:
    def setup_method(self):
        self.scale = UtilityScale()

    def test_snap_spacing(self):
        assert snap_spacing(16, self.scale) == "4"
        assert snap_spacing(17, self.scale) == "4"
        # 等距時取較小的刻度
        assert snap_spacing(15, self.scale) == "3.5"
        assert snap_spacing(96, self.scale) == "24"
        assert snap_spacing(120, self.scale) == "[120px]"

    def test_sizes(self):
        assert utility_classes({"width": "64px"}, self.scale) == ["w-16"]
        assert utility_classes({"width": "100px"}, self.scale) == ["w-[100px]"]
        assert utility_classes({"gap": "120px"}, self.scale) == ["gap-[120px]"]

    def test_padding(self):
        assert utility_classes({"padding": "8px 16px 8px 16px"}, self.scale) == ["py-2", "px-4"]
        assert utility_classes({"padding": "4px 8px 12px 16px"}, self.scale) == [
            "pt-1", "pr-2", "pb-3", "pl-4",
        ]

    def test_typography(self):
        assert utility_classes({"fontSize": "16px"}, self.scale) == ["text-base"]
        assert utility_classes({"fontSize": "15px"}, self.scale) == ["text-[15px]"]
        assert utility_classes({"fontWeight": "700"}, self.scale) == ["font-bold"]
        assert utility_classes({"fontWeight": "550"}, self.scale) == ["font-[550]"]
        assert utility_classes({"letterSpacing": "0px"}, self.scale) == []

    def test_decorations(self):
        assert utility_classes({"borderRadius": "4px"}, self.scale) == ["rounded"]
        assert utility_classes({"borderRadius": "9999px"}, self.scale) == ["rounded-full"]
        assert utility_classes({"borderRadius": "5px"}, self.scale) == ["rounded-[5px]"]
        assert utility_classes({"border": "1px solid rgba(255, 0, 0, 1)"}, self.scale) == [
            "border", "border-[#ff0000]",
        ]
        assert utility_classes({"boxShadow": "0px 4px 8px 0px rgba(0, 0, 0, 0.1)"}, self.scale) == ["shadow-md"]
        assert utility_classes({"opacity": "0.5"}, self.scale) == ["opacity-50"]
