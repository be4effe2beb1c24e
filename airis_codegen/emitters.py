"""
Code emitters — (node, classification, style bag) → markup / stylesheet / types.

One markup backend per markup dialect crossed with one stylesheet backend
per stylesheet dialect.  ``select_backends`` picks the pair once per
generation call; every combination in the two enums is supported.

Emission never raises for a legal SceneNode.  Unknown node kinds fall back
to a ``div`` element.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Optional

from .classifier import ComponentClassification, is_interactive_name
from .config import GenerationOptions, MarkupDialect, StyleDialect
from .errors import ConfigurationError
from .naming_engine import ClassNamer, kebab
from .responsive import ResponsiveVariants, derive_responsive, variant_overrides
from .scene_graph import SceneNode
from .style_resolver import StyleBag, resolve_styles
from .stylesheets import STYLE_BACKENDS, CssInJsBackend, StyleBackend, StyledElement
from .tables import DEFAULT_TABLES, EngineTables, MarkupTables
from .type_declarations import render_type_declarations, suggested_props, vue_prop_type


@dataclass(frozen=True)
class EmittedCode:
    markup: str
    stylesheet: str
    type_declarations: Optional[str] = None


# ─── 檔名 ────────────────────────────────────────────────────

def markup_filename(component_name: str, options: GenerationOptions) -> str:
    if options.markup == MarkupDialect.TEMPLATED:
        return f"{component_name}.vue"
    if options.markup == MarkupDialect.STATIC:
        return f"{component_name}.html"
    return f"{component_name}.{'tsx' if options.typescript else 'jsx'}"


def stylesheet_filename(component_name: str, options: GenerationOptions) -> str:
    if options.stylesheet == StyleDialect.SCOPED_MODULE:
        return f"{component_name}.module.css"
    if options.stylesheet == StyleDialect.CSS_IN_JS:
        return f"{component_name}.styles.{'ts' if options.typescript else 'js'}"
    return f"{component_name}.css"


def types_filename(component_name: str) -> str:
    return f"{component_name}.types.ts"


def _module_path(filename: str) -> str:
    """import 路徑不帶 .ts / .js 副檔名."""
    for ext in (".ts", ".js"):
        if filename.endswith(ext):
            return f"./{filename[: -len(ext)]}"
    return f"./{filename}"


# ─── 元素樹 ──────────────────────────────────────────────────

def tag_for(node: SceneNode, tables: MarkupTables) -> str:
    lowered = node.name.lower()
    for keyword, tag in tables.tag_keywords:
        if keyword in lowered:
            return tag
    if node.has_image_fill():
        return "img"
    if node.is_text:
        return "span"
    return "div"


def role_for(node: SceneNode, tables: MarkupTables) -> str:
    lowered = node.name.lower()
    for keyword, role in tables.role_keywords:
        if keyword in lowered:
            return role
    return "button"


def build_element_tree(
    node: SceneNode,
    classification: ComponentClassification,
    styles: StyleBag,
    namer: ClassNamer,
    tables: EngineTables,
    resolve: Callable[[SceneNode], StyleBag] = resolve_styles,
    optimize_images: bool = False,
    is_root: bool = True,
) -> StyledElement:
    tag = tag_for(node, tables.markup)
    attrs = []
    if is_interactive_name(node.name, tables.classifier):
        attrs.append(("role", role_for(node, tables.markup)))
        attrs.append(("tabindex", "0"))
    if tag == "img":
        image = next((p for p in node.fills if p.type == "IMAGE"), None)
        if image is not None and image.image_ref:
            attrs.append(("src", image.image_ref))
        attrs.append(("alt", node.name))
        if optimize_images:
            attrs.append(("loading", "lazy"))
            attrs.append(("decoding", "async"))

    # 先序編號：父節點的流水號小於子節點
    class_name = namer.root() if is_root else namer.child(node.name)
    children = tuple(
        build_element_tree(
            child, child_cls, resolve(child), namer, tables, resolve,
            optimize_images, is_root=False,
        )
        for child, child_cls in zip(node.children, classification.children)
    )
    text = node.characters if node.is_text and node.characters else None
    return StyledElement(
        name=node.name,
        tag=tag,
        class_name=class_name,
        styles=dict(styles),
        category=classification.category,
        attrs=tuple(attrs),
        text=text,
        children=children,
    )


# ─── Markup backends ─────────────────────────────────────────

@dataclass
class MarkupBackend:
    dialect: MarkupDialect
    tables: MarkupTables

    def class_attribute(self, element: StyledElement, styles: StyleBackend) -> str:
        return f'class="{styles.class_token(element)}"'

    def attribute(self, name: str, value: str) -> str:
        return f'{name}="{html.escape(value)}"'

    def text(self, value: str) -> str:
        return html.escape(value, quote=False)

    def self_close(self, opening: str, tag: str) -> str:
        return f"{opening} />"

    def render_element(self, element: StyledElement, styles: StyleBackend, depth: int) -> str:
        pad = "  " * depth
        attrs = [self.class_attribute(element, styles)]
        attrs.extend(self.attribute(k, v) for k, v in element.attrs)
        opening = f"{pad}<{element.tag} {' '.join(attrs)}"
        if element.tag in self.tables.void_tags:
            return self.self_close(opening, element.tag)
        if element.text is not None:
            return f"{opening}>{self.text(element.text)}</{element.tag}>"
        if not element.children:
            return self.self_close(opening, element.tag)
        inner = "\n".join(self.render_element(c, styles, depth + 1) for c in element.children)
        return f"{opening}>\n{inner}\n{pad}</{element.tag}>"

    def render(
        self,
        root: StyledElement,
        component_name: str,
        classification: ComponentClassification,
        styles: StyleBackend,
        options: GenerationOptions,
    ) -> str:
        raise NotImplementedError


class ComponentizedBackend(MarkupBackend):
    """React function component (JSX)."""

    def __init__(self, tables: MarkupTables):
        super().__init__(MarkupDialect.COMPONENTIZED, tables)

    def class_attribute(self, element, styles):
        if styles.is_expression:
            return f"className={{styles['{element.class_name}']}}"
        return f'className="{styles.class_token(element)}"'

    def attribute(self, name, value):
        if name == "tabindex":
            return f"tabIndex={{{value}}}"
        return super().attribute(name, value)

    def text(self, value):
        escaped = super().text(value)
        return escaped.replace("{", "&#123;").replace("}", "&#125;")

    def render(self, root, component_name, classification, styles, options):
        lines = ["import React from 'react';"]
        sheet = _module_path(stylesheet_filename(component_name, options))
        if styles.dialect == StyleDialect.SCOPED_MODULE:
            lines.append(f"import styles from '{sheet}';")
        elif styles.dialect == StyleDialect.CSS_IN_JS:
            lines.append(f"import {{ {CssInJsBackend.wrapper_name(component_name)} }} from '{sheet}';")
        else:
            lines.append(f"import '{sheet}';")
        if options.typescript:
            types_path = _module_path(types_filename(component_name))
            lines.append(f"import type {{ {component_name}Props }} from '{types_path}';")
        lines.append("")

        params = f"props: {component_name}Props" if options.typescript else "props"
        lines.append(f"const {component_name} = ({params}) => {{")
        lines.append("  return (")
        if styles.dialect == StyleDialect.CSS_IN_JS:
            wrapper = CssInJsBackend.wrapper_name(component_name)
            lines.append(f"    <{wrapper}>")
            lines.append(self.render_element(root, styles, 3))
            lines.append(f"    </{wrapper}>")
        else:
            lines.append(self.render_element(root, styles, 2))
        lines.append("  );")
        lines.append("};")
        lines.append("")
        lines.append(f"export default {component_name};")
        return "\n".join(lines) + "\n"


class TemplatedBackend(MarkupBackend):
    """Vue single-file component."""

    def __init__(self, tables: MarkupTables):
        super().__init__(MarkupDialect.TEMPLATED, tables)

    def class_attribute(self, element, styles):
        if styles.is_expression:
            return f":class=\"$style['{element.class_name}']\""
        return super().class_attribute(element, styles)

    def render(self, root, component_name, classification, styles, options):
        props = "\n".join(
            f"    {p.name}: {{ type: {vue_prop_type(p)}, required: {'true' if p.required else 'false'} }},"
            for p in suggested_props(classification)
        )
        script_open = '<script lang="ts">' if options.typescript else "<script>"
        text = (
            "<template>\n"
            f"{self.render_element(root, styles, 1)}\n"
            "</template>\n\n"
            f"{script_open}\n"
            "import { defineComponent } from 'vue';\n\n"
            "export default defineComponent({\n"
            f"  name: '{component_name}',\n"
            "  props: {\n"
            f"{props}\n"
            "  },\n"
            "});\n"
            "</script>\n"
        )
        sheet = stylesheet_filename(component_name, options)
        if styles.dialect == StyleDialect.SCOPED_MODULE:
            text += f'\n<style module src="./{sheet}"></style>\n'
        elif styles.dialect == StyleDialect.PLAIN:
            text += f'\n<style scoped src="./{sheet}"></style>\n'
        elif styles.dialect == StyleDialect.UTILITY:
            text += f'\n<style src="./{sheet}"></style>\n'
        return text


class StaticBackend(MarkupBackend):
    """Plain HTML document."""

    def __init__(self, tables: MarkupTables):
        super().__init__(MarkupDialect.STATIC, tables)

    def self_close(self, opening, tag):
        if tag in self.tables.void_tags:
            return f"{opening}>"
        return f"{opening}></{tag}>"

    def render(self, root, component_name, classification, styles, options):
        head = (
            "  <meta charset=\"utf-8\">\n"
            "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">\n"
            f"  <title>{html.escape(component_name)}</title>\n"
        )
        if styles.dialect != StyleDialect.CSS_IN_JS:
            head += f"  <link rel=\"stylesheet\" href=\"./{stylesheet_filename(component_name, options)}\">\n"
        return (
            "<!doctype html>\n"
            "<html>\n<head>\n" + head + "</head>\n<body>\n"
            + self.render_element(root, styles, 1)
            + "\n</body>\n</html>\n"
        )


MARKUP_BACKENDS = {
    MarkupDialect.COMPONENTIZED: ComponentizedBackend,
    MarkupDialect.TEMPLATED: TemplatedBackend,
    MarkupDialect.STATIC: StaticBackend,
}


@dataclass(frozen=True)
class BackendPair:
    markup: MarkupBackend
    stylesheet: StyleBackend


def select_backends(options: GenerationOptions, tables: Optional[EngineTables] = None) -> BackendPair:
    tables = tables or DEFAULT_TABLES
    if options.markup is None:
        raise ConfigurationError("Markup dialect (framework) is not set")
    if options.stylesheet is None:
        raise ConfigurationError("Stylesheet dialect (styling) is not set")
    markup_cls = MARKUP_BACKENDS.get(options.markup)
    style_cls = STYLE_BACKENDS.get(options.stylesheet)
    if markup_cls is None or style_cls is None:
        raise ConfigurationError(
            f"Unsupported dialect pair: {options.markup!r} × {options.stylesheet!r}"
        )
    return BackendPair(markup=markup_cls(tables.markup), stylesheet=style_cls(tables.utility))


def emit(
    node: SceneNode,
    classification: ComponentClassification,
    style_bag: StyleBag,
    options: GenerationOptions,
    component_name: str,
    tables: Optional[EngineTables] = None,
    resolve: Callable[[SceneNode], StyleBag] = resolve_styles,
    variants: Optional[ResponsiveVariants] = None,
) -> EmittedCode:
    tables = tables or DEFAULT_TABLES
    backends = select_backends(options, tables)
    namer = ClassNamer(prefix=kebab(component_name))
    root = build_element_tree(
        node, classification, style_bag, namer, tables, resolve,
        optimize_images=options.optimize_images,
    )

    overrides = None
    if options.responsive and backends.stylesheet.emits_media:
        overrides = variant_overrides(style_bag, variants or derive_responsive(style_bag))

    stylesheet = backends.stylesheet.render(root, component_name, overrides, options.breakpoints)
    markup = backends.markup.render(root, component_name, classification, backends.stylesheet, options)
    type_declarations = None
    if options.typescript:
        type_declarations = render_type_declarations(component_name, classification)
    return EmittedCode(markup=markup, stylesheet=stylesheet, type_declarations=type_declarations)
