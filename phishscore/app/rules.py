"""Rule tables and the weight-to-score normalization shared by both analyzers."""

from collections import namedtuple
from typing import Iterable, Sequence

from .models import AdvancedFinding, Classification, Finding, FindingValue, RiskLevel
from .textmetrics import round_half_up

# score < threshold -> classification
SUSPICIOUS_THRESHOLD = 25
PHISHING_THRESHOLD = 50


class Rule(namedtuple("Rule", ["feature", "label", "danger_weight", "warning_weight", "category"])):
    """One row of a rule table.

    A weight of 0 means the rule never grades at that level. ``category`` is
    only set for advanced rules and decides which finding type is produced.
    """

    __slots__ = ()

    def __new__(cls, feature, label, danger_weight=0.0, warning_weight=0.0, category=None):
        return super().__new__(cls, feature, label, danger_weight, warning_weight, category)

    @property
    def max_weight(self) -> float:
        return max(self.danger_weight, self.warning_weight)

    def weight_for(self, level: RiskLevel) -> float:
        if level is RiskLevel.DANGER:
            return self.danger_weight
        if level is RiskLevel.WARNING:
            return self.warning_weight
        return 0.0

    def finding(self, level: RiskLevel, value: FindingValue, description: str) -> Finding:
        weight = self.weight_for(level)
        if self.category is None:
            return Finding(self.feature, self.label, value, level, description, weight)
        return AdvancedFinding(self.feature, self.label, value, level, description, weight, self.category)


def max_total_weight(rules: Iterable[Rule]) -> float:
    """Largest weight sum a rule table can produce."""
    return sum(rule.max_weight for rule in rules)


def risk_score(findings: Iterable[Finding], rules: Sequence[Rule]) -> int:
    """Normalize the triggered weights of ``findings`` onto 0..100."""
    total = sum(f.weight for f in findings)
    ceiling = max_total_weight(rules)
    if ceiling <= 0:
        return 0
    return max(0, min(100, round_half_up(total / ceiling * 100)))


def classify(score: int) -> Classification:
    if score < SUSPICIOUS_THRESHOLD:
        return Classification.LEGITIMATE
    if score < PHISHING_THRESHOLD:
        return Classification.SUSPICIOUS
    return Classification.PHISHING
