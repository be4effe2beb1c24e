"""
AiIRIS-codegen — 設計稿場景樹 → 元件程式碼（Python 管線）

分類、樣式解析、多 dialect 輸出、無障礙稽核、響應式變體與結果快取。
"""

__version__ = "0.1.0"

from .errors import (
    CodeGenerationError,
    ConfigurationError,
    IntegrationError,
    NodeNotFoundError,
)
from .scene_graph import SceneDocument, SceneNode, count_nodes, find_node
from .figma_reader import FigmaAPIClient, FigmaToScene, load_document, parse_document
from .tables import DEFAULT_TABLES, EngineTables
from .config import (
    GenerationOptions,
    MarkupDialect,
    StyleDialect,
    load_config,
    options_from_config,
    validate_config,
)
from .naming_engine import NamingConfig, NamingEngine
from .classifier import ComponentClassification, classify, preview_classification_tree
from .style_resolver import resolve_styles
from .emitters import EmittedCode, emit, select_backends
from .accessibility import (
    FULL_PROFILE,
    SIMPLIFIED_PROFILE,
    AccessibilityReport,
    audit,
    quick_audit,
)
from .responsive import ResponsiveVariants, derive_responsive, has_responsive_design
from .integrator import CustomFragments, integrate
from .cache import ResultCache, generate_key
from .generator import ComponentGenerator, GeneratedComponent, GenerationReport
from . import exporter

__all__ = [
    "__version__",
    "CodeGenerationError",
    "ConfigurationError",
    "IntegrationError",
    "NodeNotFoundError",
    "SceneDocument",
    "SceneNode",
    "count_nodes",
    "find_node",
    "FigmaAPIClient",
    "FigmaToScene",
    "load_document",
    "parse_document",
    "DEFAULT_TABLES",
    "EngineTables",
    "GenerationOptions",
    "MarkupDialect",
    "StyleDialect",
    "load_config",
    "options_from_config",
    "validate_config",
    "NamingConfig",
    "NamingEngine",
    "ComponentClassification",
    "classify",
    "preview_classification_tree",
    "resolve_styles",
    "EmittedCode",
    "emit",
    "select_backends",
    "FULL_PROFILE",
    "SIMPLIFIED_PROFILE",
    "AccessibilityReport",
    "audit",
    "quick_audit",
    "ResponsiveVariants",
    "derive_responsive",
    "has_responsive_design",
    "CustomFragments",
    "integrate",
    "ResultCache",
    "generate_key",
    "ComponentGenerator",
    "GeneratedComponent",
    "GenerationReport",
    "exporter",
]
