"""
advanced.py

Similarity / entropy / reputation checks (the "advanced" layer): typosquatting,
homograph characters, brand impersonation, suspicious TLDs, shorteners,
redirect parameters and odd ports. Everything is computed from the URL text.

Public functions:
    extract_advanced_features(url: str) -> AdvancedFeatures
    analyze_advanced_features(features: AdvancedFeatures) -> list[AdvancedFinding]
    advanced_risk_score(findings) -> int
"""

import logging
import re
from typing import List, Optional

from .heuristics import URLParseError, parse_url
from .models import AdvancedFeatures, AdvancedFinding, Category, DomainAge, RiskLevel
from .patterns import (
    HOMOGLYPHS,
    REDIRECT_PATTERNS,
    REPEATED_CHARS_PATTERN,
    STANDARD_PORTS,
    SUSPICIOUS_TLDS,
    TARGET_BRANDS,
    URL_SHORTENERS,
)
from .rules import Rule, risk_score
from .textmetrics import shannon_entropy, similarity

logger = logging.getLogger("advanced")

ENTROPY_DANGER = 4
ENTROPY_WARNING = 3
TYPOSQUAT_DANGER = 50
TYPOSQUAT_WARNING = 20
# open interval: 1.0 is the brand's own name
BRAND_SIMILARITY_MIN = 0.7

# typosquatting score contributions
TYPO_DIGIT_IN_HOST = 20
TYPO_BRAND = 40
TYPO_HOMOGRAPH = 30
TYPO_REPEATED_CHARS = 10

ADVANCED_RULES = (
    Rule("domain_entropy", "Domain Entropy", 2.5, 1, Category.ENTROPY),
    Rule("homograph_chars", "Homograph Characters", 3, 0, Category.IMPERSONATION),
    Rule("brand_impersonation", "Brand Impersonation", 3.5, 0, Category.IMPERSONATION),
    Rule("typosquatting", "Typosquatting Risk", 2.5, 1, Category.IMPERSONATION),
    Rule("suspicious_tld", "Suspicious TLD", 0, 1.5, Category.REPUTATION),
    Rule("punycode_domain", "Punycode (xn--) Domain", 2, 0, Category.IMPERSONATION),
    Rule("shortened_url", "Shortened URL", 0, 1.5, Category.STRUCTURE),
    Rule("redirect_patterns", "Redirect Patterns", 0, 1, Category.STRUCTURE),
    Rule("port_anomalies", "Port Anomalies", 0, 1, Category.STRUCTURE),
)

_SCHEME_PREFIX_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')
_PORT_RE = re.compile(r':(\d+)$')


def _hostname(url: str) -> str:
    try:
        _, _, host = parse_url(url)
    except URLParseError as exc:
        logger.debug("Using raw hostname for %r: %s", url, exc)
        return url.split('/')[0]
    return host


def _authority(url: str) -> str:
    rest = _SCHEME_PREFIX_RE.sub('', url, count=1)
    return re.split(r'[/?#]', rest, maxsplit=1)[0]


def detect_homographs(host: str) -> bool:
    return any(ch in HOMOGLYPHS for ch in host)


def detect_brand_impersonation(url: str, host: str) -> Optional[str]:
    """Name of the first brand the URL appears to imitate, or None."""
    lower_url = url.lower()
    label = host.lower()
    if label.startswith('www.'):
        label = label[4:]
    label = label.split('.')[0]

    for brand in TARGET_BRANDS:
        # a known spelling away from the official domain
        if any(p in lower_url for p in brand.variants) and brand.official_domain not in lower_url:
            return brand.name
        if BRAND_SIMILARITY_MIN < similarity(label, brand.canonical) < 1:
            return brand.name
    return None


def has_suspicious_tld(url: str) -> bool:
    lower_url = url.lower()
    return any(lower_url.endswith(tld) or (tld + '/') in lower_url for tld in SUSPICIOUS_TLDS)


def is_shortened(url: str) -> bool:
    lower_url = url.lower()
    return any(s in lower_url for s in URL_SHORTENERS)


def is_punycode(url: str) -> bool:
    return 'xn--' in url.lower()


def has_port_anomaly(url: str) -> bool:
    match = _PORT_RE.search(_authority(url))
    if not match:
        return False
    return int(match.group(1)) not in STANDARD_PORTS


def has_redirect_indicators(url: str) -> bool:
    return any(p.search(url) for p in REDIRECT_PATTERNS)


def typosquatting_score(url: str, host: str, brand: Optional[str], homographs: bool) -> int:
    score = 0
    if any(ch.isdigit() for ch in host):
        score += TYPO_DIGIT_IN_HOST
    if brand:
        score += TYPO_BRAND
    if homographs:
        score += TYPO_HOMOGRAPH
    if REPEATED_CHARS_PATTERN.search(url):
        score += TYPO_REPEATED_CHARS
    return min(100, score)


def extract_advanced_features(url: str) -> AdvancedFeatures:
    """Parse ``url`` into similarity / reputation facts. Never raises."""
    url = (url or '').strip()
    host = _hostname(url)
    homographs = detect_homographs(host)
    brand = detect_brand_impersonation(url, host)

    return AdvancedFeatures(
        entropy_score=shannon_entropy(host),
        has_homograph_chars=homographs,
        typosquatting_score=typosquatting_score(url, host, brand, homographs),
        suspicious_tld=has_suspicious_tld(url),
        redirect_risk=has_redirect_indicators(url),
        port_anomalies=has_port_anomaly(url),
        punycode_domain=is_punycode(url),
        shortened_url=is_shortened(url),
        brand_impersonation=brand,
        # no registry lookups
        domain_age=DomainAge.UNKNOWN,
    )


def analyze_advanced_features(features: AdvancedFeatures) -> List[AdvancedFinding]:
    (entropy_rule, homograph_rule, brand_rule, typo_rule, tld_rule,
     punycode_rule, shortener_rule, redirect_rule, port_rule) = ADVANCED_RULES
    findings = []

    entropy = features.entropy_score
    if entropy > ENTROPY_DANGER:
        findings.append(entropy_rule.finding(
            RiskLevel.DANGER, entropy, "High randomness in domain suggests auto-generated phishing domain"))
    elif entropy > ENTROPY_WARNING:
        findings.append(entropy_rule.finding(
            RiskLevel.WARNING, entropy, "Moderate entropy - domain may be suspicious"))
    else:
        findings.append(entropy_rule.finding(RiskLevel.SAFE, entropy, "Normal domain entropy"))

    if features.has_homograph_chars:
        findings.append(homograph_rule.finding(
            RiskLevel.DANGER, True, "Contains lookalike characters (Cyrillic/special) - IDN homograph attack"))
    else:
        findings.append(homograph_rule.finding(RiskLevel.SAFE, False, "No suspicious lookalike characters"))

    brand = features.brand_impersonation
    if brand:
        findings.append(brand_rule.finding(
            RiskLevel.DANGER, brand, f"Appears to impersonate {brand} - likely phishing"))
    else:
        findings.append(brand_rule.finding(RiskLevel.SAFE, "None", "No brand impersonation detected"))

    typo = features.typosquatting_score
    if typo > TYPOSQUAT_DANGER:
        findings.append(typo_rule.finding(
            RiskLevel.DANGER, typo, "High typosquatting risk - domain mimics legitimate site"))
    elif typo > TYPOSQUAT_WARNING:
        findings.append(typo_rule.finding(RiskLevel.WARNING, typo, "Moderate typosquatting indicators detected"))
    else:
        findings.append(typo_rule.finding(RiskLevel.SAFE, typo, "Low typosquatting risk"))

    if features.suspicious_tld:
        findings.append(tld_rule.finding(
            RiskLevel.WARNING, True, "Uses a TLD commonly associated with phishing/spam"))
    else:
        findings.append(tld_rule.finding(
            RiskLevel.SAFE, False, "TLD is not typically associated with phishing"))

    if features.punycode_domain:
        findings.append(punycode_rule.finding(
            RiskLevel.DANGER, True, "Internationalized domain name - potential IDN attack vector"))
    else:
        findings.append(punycode_rule.finding(RiskLevel.SAFE, False, "Standard ASCII domain"))

    if features.shortened_url:
        findings.append(shortener_rule.finding(
            RiskLevel.WARNING, True, "URL shortener detected - destination hidden"))
    else:
        findings.append(shortener_rule.finding(RiskLevel.SAFE, False, "Not a shortened URL"))

    if features.redirect_risk:
        findings.append(redirect_rule.finding(
            RiskLevel.WARNING, True, "URL contains redirect parameters - may lead elsewhere"))
    else:
        findings.append(redirect_rule.finding(RiskLevel.SAFE, False, "No suspicious redirect patterns"))

    if features.port_anomalies:
        findings.append(port_rule.finding(
            RiskLevel.WARNING, True, "Non-standard port used - unusual for legitimate sites"))
    else:
        findings.append(port_rule.finding(RiskLevel.SAFE, False, "Standard port usage"))

    return findings


def advanced_risk_score(findings: List[AdvancedFinding]) -> int:
    return risk_score(findings, ADVANCED_RULES)
