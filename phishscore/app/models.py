"""Value types produced by the scoring engine."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Tuple, Union

FindingValue = Union[str, int, float, bool]


class RiskLevel(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class Category(str, Enum):
    ENTROPY = "entropy"
    IMPERSONATION = "impersonation"
    STRUCTURE = "structure"
    REPUTATION = "reputation"


class Classification(str, Enum):
    LEGITIMATE = "legitimate"
    SUSPICIOUS = "suspicious"
    PHISHING = "phishing"


class DomainAge(str, Enum):
    NEW = "new"
    ESTABLISHED = "established"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BasicFeatures:
    url_length: int
    has_at_symbol: bool
    has_double_slash: bool
    has_dash: bool
    has_ip_address: bool
    is_https: bool
    subdomain_count: int
    has_multiple_subdomains: bool
    has_suspicious_keywords: bool
    domain_length: int
    path_length: int
    has_encoded_chars: bool
    has_too_many_dots: bool


@dataclass(frozen=True)
class AdvancedFeatures:
    entropy_score: float
    has_homograph_chars: bool
    typosquatting_score: int
    suspicious_tld: bool
    redirect_risk: bool
    port_anomalies: bool
    punycode_domain: bool
    shortened_url: bool
    brand_impersonation: Optional[str] = None
    domain_age: DomainAge = DomainAge.UNKNOWN


@dataclass(frozen=True)
class Finding:
    """Outcome of one rule: what was observed and what it contributes to the score."""

    feature: str
    label: str
    value: FindingValue
    risk_level: RiskLevel
    description: str
    weight: float

    def to_dict(self) -> dict:
        d = asdict(self)
        d["risk_level"] = self.risk_level.value
        return d


@dataclass(frozen=True)
class AdvancedFinding(Finding):
    category: Category

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["category"] = self.category.value
        return d


@dataclass(frozen=True)
class Assessment:
    url: str
    basic_score: int
    advanced_score: int
    combined_score: int
    classification: Classification
    findings: Tuple[Finding, ...]
    advanced_findings: Tuple[AdvancedFinding, ...]

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "classification": self.classification.value,
            "basic_score": self.basic_score,
            "advanced_score": self.advanced_score,
            "combined_score": self.combined_score,
            "findings": [f.to_dict() for f in self.findings],
            "advanced_findings": [f.to_dict() for f in self.advanced_findings],
        }
