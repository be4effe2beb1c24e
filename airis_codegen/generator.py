"""
Generator — scene graph → GeneratedComponent.

Pipeline per target node:
  lookup → cache check → classify → resolve → emit → integrate
  → audit (optional) → responsive (optional) → metadata → cache set

Everything here is pure and synchronous; only the cache is shared state.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from . import __version__
from .accessibility import AccessibilityReport, audit
from .cache import ResultCache, generate_key
from .classifier import COMPLEX, SIMPLE, TEXT, ComponentClassification, classify
from .config import GenerationOptions, MarkupDialect, StyleDialect
from .emitters import emit, select_backends
from .errors import NodeNotFoundError
from .integrator import CustomFragments, integrate, integrate_utilities
from .naming_engine import NamingEngine
from .responsive import (
    ResponsiveVariants,
    ScalingPolicy,
    derive_responsive,
    has_responsive_design,
)
from .scene_graph import SceneDocument, SceneNode, count_nodes
from .style_resolver import resolve_styles
from .tables import DEFAULT_TABLES, EngineTables
from .type_declarations import PropDefinition, suggested_props

CACHE_SCOPE = "component"

# 子樹名稱關鍵字 → 額外套件（僅 React 輸出）
_SUBTREE_DEPENDENCIES = (
    (("icon",), "lucide-react"),
    (("form", "input", "field"), "react-hook-form"),
    (("chart", "graph"), "recharts"),
)


@dataclass(frozen=True)
class ComponentMetadata:
    source_node_id: str
    category: str
    complexity: str
    estimated_accuracy: int
    generation_ms: float
    dependencies: Tuple[str, ...]
    suggested_props: Tuple[PropDefinition, ...]
    warnings: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "sourceNodeId": self.source_node_id,
            "category": self.category,
            "complexity": self.complexity,
            "estimatedAccuracy": self.estimated_accuracy,
            "generationMs": self.generation_ms,
            "dependencies": list(self.dependencies),
            "suggestedProps": [p.to_dict() for p in self.suggested_props],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class GeneratedComponent:
    id: str
    sanitized_name: str
    markup: str
    stylesheet: str
    type_declarations: Optional[str]
    accessibility: Optional[AccessibilityReport]
    responsive_variants: Optional[ResponsiveVariants]
    has_responsive_design: bool
    metadata: ComponentMetadata

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sanitizedName": self.sanitized_name,
            "markup": self.markup,
            "stylesheet": self.stylesheet,
            "typeDeclarations": self.type_declarations,
            "accessibility": self.accessibility.to_dict() if self.accessibility else None,
            "responsiveVariants": (
                self.responsive_variants.to_dict() if self.responsive_variants else None
            ),
            "hasResponsiveDesign": self.has_responsive_design,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class GenerationReport:
    components: Tuple[GeneratedComponent, ...]
    total_nodes: int
    cache_hits: int
    average_accuracy: float
    errors: Tuple[str, ...] = ()

    @property
    def component_count(self) -> int:
        return len(self.components)

    def to_dict(self) -> dict:
        return {
            "totalNodes": self.total_nodes,
            "componentCount": self.component_count,
            "cacheHits": self.cache_hits,
            "averageAccuracy": self.average_accuracy,
            "errors": list(self.errors),
            "components": [
                {
                    "id": c.id,
                    "name": c.sanitized_name,
                    "sourceNodeId": c.metadata.source_node_id,
                    "category": c.metadata.category,
                    "estimatedAccuracy": c.metadata.estimated_accuracy,
                }
                for c in self.components
            ],
        }


def estimate_accuracy(classification: ComponentClassification) -> int:
    accuracy = 85
    if classification.complexity == SIMPLE:
        accuracy += 10
    elif classification.complexity == COMPLEX:
        accuracy -= 15
    if classification.category == TEXT:
        accuracy += 5
    elif classification.category == COMPLEX:
        accuracy -= 10
    if classification.has_interactivity:
        accuracy -= 5
    if classification.has_variants:
        accuracy -= 10
    return max(60, min(95, accuracy))


def detect_dependencies(node: SceneNode, options: GenerationOptions) -> List[str]:
    deps: List[str] = []
    if options.markup == MarkupDialect.COMPONENTIZED:
        deps.append("react")
        if options.typescript:
            deps.append("@types/react")
    elif options.markup == MarkupDialect.TEMPLATED:
        deps.append("vue")
    if options.stylesheet == StyleDialect.UTILITY:
        deps.append("tailwindcss")
    elif options.stylesheet == StyleDialect.CSS_IN_JS:
        deps.append("styled-components")

    if options.markup == MarkupDialect.COMPONENTIZED:
        names = [n.name.lower() for n in node.walk()]
        for keywords, package in _SUBTREE_DEPENDENCIES:
            if any(k in name for name in names for k in keywords):
                deps.append(package)
    return deps


def _warnings(classification: ComponentClassification, options: GenerationOptions) -> List[str]:
    warnings = []
    if classification.complexity == COMPLEX:
        warnings.append("Complex component may require manual adjustments")
    if classification.has_variants:
        warnings.append("Component variants detected - verify all states are handled")
    if (options.stylesheet == StyleDialect.CSS_IN_JS
            and options.markup != MarkupDialect.COMPONENTIZED):
        warnings.append(
            "styled-components output is only wired into React markup; "
            "the generated wrapper is not referenced"
        )
    return warnings


class ComponentGenerator:
    """單一選項組合的元件產生器（可重複使用、共用快取）."""

    def __init__(
        self,
        options: GenerationOptions,
        tables: Optional[EngineTables] = None,
        cache: Optional[ResultCache] = None,
        naming: Optional[NamingEngine] = None,
        policy: Optional[ScalingPolicy] = None,
    ):
        self.options = options
        self.tables = tables or DEFAULT_TABLES
        self.cache = cache if cache is not None else ResultCache()
        self.naming = naming or NamingEngine()
        self.policy = policy

    def cache_key(self, node: SceneNode, fragments: Optional[CustomFragments] = None) -> str:
        engine = {"tables": self.tables, "naming": self.naming.config, "policy": self.policy}
        return generate_key(CACHE_SCOPE, node, self.options, __version__, fragments, engine)

    def generate(
        self,
        document: SceneDocument,
        node_id: Optional[str] = None,
        component_name: Optional[str] = None,
        fragments: Optional[CustomFragments] = None,
    ) -> GeneratedComponent:
        start = time.perf_counter()
        target = document.resolve_target(node_id=node_id, component_name=component_name)
        # dialect 設定錯誤要在查快取前就報出
        select_backends(self.options, self.tables)

        key = self.cache_key(target, fragments)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        options = self.options
        classification = classify(target, self.tables)
        styles = resolve_styles(target)
        name = self.naming.component_name(target.name)
        variants = derive_responsive(styles, self.policy) if options.responsive else None

        emitted = emit(
            target, classification, styles, options, name, self.tables,
            variants=variants,
        )
        warnings = _warnings(classification, options)

        fragments = fragments or CustomFragments()
        integration = integrate(emitted.markup, emitted.stylesheet, fragments, options.markup)
        warnings.extend(integration.warnings)

        type_declarations = emitted.type_declarations
        if fragments.utilities:
            if type_declarations is None:
                warnings.append("Custom utilities ignored: type declarations are disabled")
            else:
                type_declarations = integrate_utilities(type_declarations, fragments.utilities)

        report = None
        if options.accessibility:
            report = audit(target, classification, integration.markup, self.tables)

        metadata = ComponentMetadata(
            source_node_id=target.id,
            category=classification.category,
            complexity=classification.complexity,
            estimated_accuracy=estimate_accuracy(classification),
            generation_ms=round((time.perf_counter() - start) * 1000, 3),
            dependencies=tuple(detect_dependencies(target, options)),
            suggested_props=tuple(suggested_props(classification)),
            warnings=tuple(warnings),
        )
        component = GeneratedComponent(
            id=f"component-{key[:12]}",
            sanitized_name=name,
            markup=integration.markup,
            stylesheet=integration.stylesheet,
            type_declarations=type_declarations,
            accessibility=report,
            responsive_variants=variants,
            has_responsive_design=has_responsive_design(target),
            metadata=metadata,
        )
        self.cache.set(key, component)
        return component

    def generate_many(
        self,
        document: SceneDocument,
        targets: Sequence[str],
        fragments: Optional[Dict[str, CustomFragments]] = None,
    ) -> GenerationReport:
        """逐一產生；找不到的節點記錄在 errors，其餘照常進行."""
        fragments = fragments or {}
        hits_before = self.cache.hits
        components: List[GeneratedComponent] = []
        errors: List[str] = []
        total_nodes = 0
        for node_id in targets:
            try:
                component = self.generate(document, node_id=node_id, fragments=fragments.get(node_id))
            except NodeNotFoundError as e:
                errors.append(e.message)
                continue
            components.append(component)
            total_nodes += count_nodes(document.resolve_target(node_id=node_id))

        average = 0.0
        if components:
            average = round(
                sum(c.metadata.estimated_accuracy for c in components) / len(components), 2
            )
        return GenerationReport(
            components=tuple(components),
            total_nodes=total_nodes,
            cache_hits=self.cache.hits - hits_before,
            average_accuracy=average,
            errors=tuple(errors),
        )
