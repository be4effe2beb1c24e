"""
無障礙稽核 — 規則引擎

規則依固定順序執行（對比 → 焦點 → 語意結構 → 替代文字），每條規則都是
有 evaluate(node, tables) 的物件，對整棵子樹逐節點（深度優先）評估；
再疊加依元件類別的檢查。分數從 100 扣起並夾在 [0, 100]。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from . import color_utils
from .classifier import BUTTON, CARD, INPUT, ComponentClassification
from .scene_graph import SceneNode
from .tables import DEFAULT_TABLES, AuditTables

CRITICAL = "critical"
HIGH = "high"
MEDIUM = "medium"
LOW = "low"


@dataclass(frozen=True)
class AccessibilityIssue:
    severity: str
    message: str
    element: str
    fix: str
    rule_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "message": self.message,
            "element": self.element,
            "fix": self.fix,
            "ruleId": self.rule_id,
        }


@dataclass(frozen=True)
class AccessibilityReport:
    score: int
    issues: Tuple[AccessibilityIssue, ...]
    suggestions: Tuple[str, ...]
    compliance_tier: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": list(self.suggestions),
            "complianceTier": self.compliance_tier,
        }


@dataclass(frozen=True)
class ScoringProfile:
    """扣分表與等級名稱；severity_map 把四級嚴重度轉成 profile 自己的標籤."""
    name: str
    penalties: Dict[str, int]
    severity_map: Dict[str, str]
    blocking: Tuple[str, ...]
    degrading: Tuple[str, ...]
    tiers: Tuple[str, str, str] = ("A", "AA", "AAA")


FULL_PROFILE = ScoringProfile(
    name="full",
    penalties={CRITICAL: 20, HIGH: 15, MEDIUM: 10, LOW: 5},
    severity_map={CRITICAL: CRITICAL, HIGH: HIGH, MEDIUM: MEDIUM, LOW: LOW},
    blocking=(CRITICAL,),
    degrading=(HIGH,),
)

SIMPLIFIED_PROFILE = ScoringProfile(
    name="simplified",
    penalties={"error": 15, "warning": 10, "info": 0},
    severity_map={CRITICAL: "error", HIGH: "error", MEDIUM: "warning", LOW: "info"},
    blocking=("error",),
    degrading=(),
    tiers=("Non-compliant", "AA", "AAA"),
)


# ─── 規則 ────────────────────────────────────────────────────

class AuditRule:
    rule_id = ""

    def evaluate(self, node: SceneNode, tables: AuditTables) -> List[AccessibilityIssue]:
        raise NotImplementedError


def _matches(pattern: str, name: str) -> bool:
    return re.search(pattern, (name or "").lower()) is not None


def _is_large_text(node: SceneNode, tables: AuditTables) -> bool:
    typo = node.typography
    if typo is None:
        return False
    if typo.font_size >= tables.large_text_size:
        return True
    return (typo.font_weight or 400) >= 700 and typo.font_size >= tables.large_bold_text_size


class ContrastRule(AuditRule):
    """fill 與 stroke 都是實色時，以 WCAG 相對亮度算對比."""
    rule_id = "color-contrast"

    def evaluate(self, node, tables):
        fill = color_utils.first_solid_color(node.foreground_fills())
        stroke = color_utils.first_solid_color(node.strokes)
        if fill is None or stroke is None:
            return []
        ratio = color_utils.contrast_ratio(fill, stroke)
        if node.is_text:
            threshold = tables.contrast_large if _is_large_text(node, tables) else tables.contrast_normal
        else:
            threshold = tables.contrast_non_text
        if ratio >= threshold:
            return []
        return [AccessibilityIssue(
            severity=HIGH,
            message=f"Insufficient color contrast ({ratio:.2f}:1, {threshold:g}:1 required)",
            element=node.name,
            fix=f"Ensure a contrast ratio of at least {threshold:g}:1 between foreground and background",
            rule_id=self.rule_id,
        )]


class FocusManagementRule(AuditRule):
    rule_id = "focus-management"

    def evaluate(self, node, tables):
        if not _matches(tables.interactive_pattern, node.name):
            return []
        return [AccessibilityIssue(
            severity=MEDIUM,
            message="Interactive element may need focus indicators",
            element=node.name,
            fix="Add visible focus indicators for keyboard navigation",
            rule_id=self.rule_id,
        )]


class SemanticStructureRule(AuditRule):
    rule_id = "semantic-structure"

    def evaluate(self, node, tables):
        if not node.is_text or not _matches(tables.heading_pattern, node.name):
            return []
        return [AccessibilityIssue(
            severity=MEDIUM,
            message="Text element may need semantic heading structure",
            element=node.name,
            fix="Use proper heading hierarchy (h1, h2, h3, etc.)",
            rule_id=self.rule_id,
        )]


class AltTextRule(AuditRule):
    rule_id = "missing-alt"

    def evaluate(self, node, tables):
        if not (node.has_image_fill() or _matches(tables.image_pattern, node.name)):
            return []
        return [AccessibilityIssue(
            severity=CRITICAL,
            message="Image element requires alternative text",
            element=node.name,
            fix="Add descriptive alt text for screen readers",
            rule_id=self.rule_id,
        )]


DEFAULT_RULES = (ContrastRule(), FocusManagementRule(), SemanticStructureRule(), AltTextRule())


def _has_descendant_text(node: SceneNode) -> bool:
    return any(n.is_text for n in node.walk())


def category_issues(node: SceneNode, classification: ComponentClassification) -> List[AccessibilityIssue]:
    if classification.category == BUTTON and not _has_descendant_text(node):
        return [AccessibilityIssue(
            severity=HIGH,
            message="Button lacks descriptive text",
            element=node.name,
            fix="Ensure button has clear, descriptive text or aria-label",
            rule_id="semantic-structure",
        )]
    if classification.category == INPUT:
        return [AccessibilityIssue(
            severity=MEDIUM,
            message="Form input may need associated label",
            element=node.name,
            fix="Associate input with descriptive label using htmlFor/id",
            rule_id="semantic-structure",
        )]
    if classification.category == CARD and node.children:
        return [AccessibilityIssue(
            severity=LOW,
            message="Card content may need landmark roles",
            element=node.name,
            fix="Consider using semantic HTML elements or ARIA landmarks",
            rule_id="semantic-structure",
        )]
    return []


# ─── 分數 / 等級 ─────────────────────────────────────────────

def score_issues(issues, profile: ScoringProfile = FULL_PROFILE) -> int:
    score = 100
    for issue in issues:
        score -= profile.penalties.get(issue.severity, 0)
    return max(0, min(100, score))


def compliance_tier(score: int, severities, profile: ScoringProfile = FULL_PROFILE) -> str:
    severities = set(severities)
    low_tier, mid_tier, top_tier = profile.tiers
    if severities & set(profile.blocking) or score < 60:
        return low_tier
    if severities & set(profile.degrading) or score < 80:
        return mid_tier
    return top_tier


def build_suggestions(
    classification: ComponentClassification,
    issues,
    markup: str,
    tables: AuditTables,
) -> List[str]:
    suggestions = list(tables.general_suggestions)
    suggestions.extend(tables.category_suggestions.get(classification.category, []))
    rule_ids = {i.rule_id for i in issues}
    if "color-contrast" in rule_ids:
        suggestions.append("Use tools like WebAIM Contrast Checker to verify colors")
    if "focus-management" in rule_ids:
        suggestions.append("Implement :focus-visible for modern focus management")
    if "missing-alt" in rule_ids:
        suggestions.append('Use alt="" for purely decorative images')
    if classification.category == BUTTON and "aria-label" not in (markup or ""):
        suggestions.append("Add an aria-label when the button text alone is not descriptive")
    return suggestions


def audit(
    node: SceneNode,
    classification: ComponentClassification,
    markup: str = "",
    tables=None,
    profile: ScoringProfile = FULL_PROFILE,
    rules=DEFAULT_RULES,
) -> AccessibilityReport:
    audit_tables = (tables or DEFAULT_TABLES)
    audit_tables = getattr(audit_tables, "audit", audit_tables)

    issues: List[AccessibilityIssue] = []
    for current in node.walk():
        for rule in rules:
            issues.extend(rule.evaluate(current, audit_tables))
    issues.extend(category_issues(node, classification))

    if profile is not FULL_PROFILE:
        issues = [
            AccessibilityIssue(
                severity=profile.severity_map.get(i.severity, i.severity),
                message=i.message, element=i.element, fix=i.fix, rule_id=i.rule_id,
            )
            for i in issues
        ]

    score = score_issues(issues, profile)
    return AccessibilityReport(
        score=score,
        issues=tuple(issues),
        suggestions=tuple(build_suggestions(classification, issues, markup, audit_tables)),
        compliance_tier=compliance_tier(score, (i.severity for i in issues), profile),
    )


def quick_audit(node, classification, markup="", tables=None) -> AccessibilityReport:
    """簡化版：error / warning / info 三級."""
    return audit(node, classification, markup, tables, profile=SIMPLIFIED_PROFILE)
