"""
heuristics.py

Lexical / structural URL heuristics (the "basic" layer).

Public functions:
    extract_basic_features(url: str) -> BasicFeatures
    analyze_basic_features(features: BasicFeatures) -> list[Finding]
    basic_risk_score(findings) -> int

Example:
    >>> from phishscore.app.heuristics import analyze_url
    >>> analyze_url("http://192.168.1.10/login?verify=true")["score"]
    41
"""

import logging
import re
from dataclasses import asdict
from typing import List, Tuple
from urllib.parse import SplitResult, urlsplit

from .models import BasicFeatures, Finding, RiskLevel
from .patterns import IPV4_PATTERN, SUSPICIOUS_KEYWORDS
from .rules import Rule, classify, risk_score

logger = logging.getLogger("heuristics")

# Configuration: thresholds (tweakable)
LONG_URL_DANGER = 75
LONG_URL_WARNING = 54
MAX_HOST_DOTS = 4

# Rule table in display order: (feature, label, danger weight, warning weight).
# The score ceiling is derived from these weights, keep them in sync here only.
BASIC_RULES = (
    Rule("url_length", "URL Length", 2, 1),
    Rule("at_symbol", "@ Symbol Present", 3, 0),
    Rule("double_slash", "Double Slash (//) in Path", 0, 1.5),
    Rule("dash_in_domain", "Dash (-) in Domain", 0, 1),
    Rule("ip_address", "IP Address Instead of Domain", 3, 0),
    Rule("https", "HTTPS Protocol", 0, 1.5),
    Rule("subdomain_count", "Subdomain Count", 2.5, 1),
    Rule("suspicious_keywords", "Suspicious Keywords", 0, 1.5),
    Rule("encoded_chars", "Encoded Characters", 0, 1),
)

_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


class URLParseError(ValueError):
    """The string could not be split into a URL with a usable hostname."""


def ensure_scheme(url: str) -> str:
    """Prefix https:// when the URL carries no scheme."""
    if not _SCHEME_RE.match(url):
        return 'https://' + url
    return url


def parse_url(url: str) -> Tuple[str, SplitResult, str]:
    """Return (url with scheme, split result, lower-cased hostname).

    Raises URLParseError when the URL is malformed.
    """
    full_url = ensure_scheme(url)
    try:
        parts = urlsplit(full_url)
        parts.port  # validates the port
    except ValueError as exc:
        raise URLParseError(str(exc)) from exc
    host = parts.hostname or ''
    if not host or any(ch.isspace() for ch in host):
        raise URLParseError(f"no usable hostname in {url!r}")
    return full_url, parts, host


def is_ip_address(host: str) -> bool:
    return bool(IPV4_PATTERN.match(host))


def has_suspicious_keyword(s: str) -> bool:
    s = s.lower()
    return any(kw in s for kw in SUSPICIOUS_KEYWORDS)


def _features_from_raw(url: str) -> BasicFeatures:
    """Best-effort features for strings that do not parse as URLs."""
    scheme_at = url.find('://')
    after_scheme = url[scheme_at + 3:] if scheme_at >= 0 else url
    return BasicFeatures(
        url_length=len(url),
        has_at_symbol='@' in url,
        has_double_slash='//' in after_scheme,
        has_dash='-' in url,
        has_ip_address=is_ip_address(url.split('/')[0]),
        is_https=url.lower().startswith('https'),
        subdomain_count=0,
        has_multiple_subdomains=False,
        has_suspicious_keywords=has_suspicious_keyword(url),
        domain_length=len(url),
        path_length=0,
        has_encoded_chars='%' in url,
        has_too_many_dots=url.count('.') > MAX_HOST_DOTS,
    )


def extract_basic_features(url: str) -> BasicFeatures:
    """Parse ``url`` into lexical facts. Never raises."""
    url = (url or '').strip()
    try:
        full_url, parts, host = parse_url(url)
    except URLParseError as exc:
        logger.debug("Falling back to raw-string heuristics for %r: %s", url, exc)
        return _features_from_raw(url)

    subdomains = max(0, len(host.split('.')) - 2)
    after_scheme = full_url[full_url.index('://') + 3:]

    return BasicFeatures(
        url_length=len(full_url),
        has_at_symbol='@' in full_url,
        has_double_slash='//' in after_scheme,
        has_dash='-' in host,
        has_ip_address=is_ip_address(host),
        is_https=parts.scheme.lower() == 'https',
        subdomain_count=subdomains,
        has_multiple_subdomains=subdomains > 2,
        has_suspicious_keywords=has_suspicious_keyword(full_url),
        domain_length=len(host),
        path_length=len(parts.path),
        has_encoded_chars='%' in full_url,
        has_too_many_dots=host.count('.') > MAX_HOST_DOTS,
    )


def analyze_basic_features(features: BasicFeatures) -> List[Finding]:
    """Grade every basic rule, in BASIC_RULES order."""
    (length_rule, at_rule, slash_rule, dash_rule, ip_rule,
     https_rule, subdomain_rule, keyword_rule, encoded_rule) = BASIC_RULES
    findings = []

    # 1) Length
    n = features.url_length
    if n > LONG_URL_DANGER:
        findings.append(length_rule.finding(
            RiskLevel.DANGER, n, "Excessively long URLs are often used to hide malicious content"))
    elif n > LONG_URL_WARNING:
        findings.append(length_rule.finding(RiskLevel.WARNING, n, "Moderately long URL - could be suspicious"))
    else:
        findings.append(length_rule.finding(RiskLevel.SAFE, n, "Normal URL length"))

    # 2) @ symbol
    if features.has_at_symbol:
        findings.append(at_rule.finding(RiskLevel.DANGER, True, "@ symbol in URL can redirect to a different site"))
    else:
        findings.append(at_rule.finding(RiskLevel.SAFE, False, "No @ symbol detected"))

    # 3) Double slash
    if features.has_double_slash:
        findings.append(slash_rule.finding(RiskLevel.WARNING, True, "Unusual double slash pattern detected"))
    else:
        findings.append(slash_rule.finding(RiskLevel.SAFE, False, "No suspicious slash patterns"))

    # 4) Dash in domain
    if features.has_dash:
        findings.append(dash_rule.finding(
            RiskLevel.WARNING, True,
            "Dashes in domain names are often used in phishing (e.g., secure-login-bank.com)"))
    else:
        findings.append(dash_rule.finding(RiskLevel.SAFE, False, "No dashes in domain"))

    # 5) IP-based domain
    if features.has_ip_address:
        findings.append(ip_rule.finding(
            RiskLevel.DANGER, True, "IP address used instead of domain name - highly suspicious"))
    else:
        findings.append(ip_rule.finding(RiskLevel.SAFE, False, "Normal domain name used"))

    # 6) Transport
    if features.is_https:
        findings.append(https_rule.finding(RiskLevel.SAFE, True, "Secure HTTPS connection"))
    else:
        findings.append(https_rule.finding(RiskLevel.WARNING, False, "No HTTPS - connection is not encrypted"))

    # 7) Subdomain depth
    depth = features.subdomain_count
    if features.has_multiple_subdomains:
        findings.append(subdomain_rule.finding(
            RiskLevel.DANGER, depth, "Too many subdomains - common phishing technique"))
    elif depth > 1:
        findings.append(subdomain_rule.finding(RiskLevel.WARNING, depth, "Multiple subdomains detected"))
    else:
        findings.append(subdomain_rule.finding(RiskLevel.SAFE, depth, "Normal subdomain structure"))

    # 8) Keywords
    if features.has_suspicious_keywords:
        findings.append(keyword_rule.finding(
            RiskLevel.WARNING, True, "Contains keywords commonly used in phishing"))
    else:
        findings.append(keyword_rule.finding(RiskLevel.SAFE, False, "No suspicious keywords detected"))

    # 9) Percent-encoding
    if features.has_encoded_chars:
        findings.append(encoded_rule.finding(
            RiskLevel.WARNING, True, "URL contains encoded characters - may hide malicious content"))
    else:
        findings.append(encoded_rule.finding(RiskLevel.SAFE, False, "No suspicious encoding"))

    return findings


def basic_risk_score(findings: List[Finding]) -> int:
    """0-100 score (higher -> more suspicious)."""
    return risk_score(findings, BASIC_RULES)


def analyze_url(url: str) -> dict:
    """
    Run the basic layer on its own and produce an explainable result.

    Returns a dict:
    {
      "url": "<original>",
      "features": {...},
      "findings": [ {"feature": "url_length", "risk_level": "safe", ...}, ... ],
      "score": 41,
      "final_verdict": "suspicious"
    }
    """
    features = extract_basic_features(url)
    findings = analyze_basic_features(features)
    score = basic_risk_score(findings)
    return {
        "url": url,
        "features": asdict(features),
        "findings": [f.to_dict() for f in findings],
        "score": score,
        "final_verdict": classify(score).value,
    }


# Simple CLI / quick tests
if __name__ == "__main__":
    test_urls = [
        "https://www.google.com",
        "http://192.168.1.1/login/verify-account",
        "https://secure-login-paypal.suspicious-domain.com/account",
        "http://very-long-url-" + "a" * 80 + ".com/path",
    ]

    for u in test_urls:
        res = analyze_url(u)
        print("=" * 80)
        print("URL:", u)
        print("Score:", res['score'], "Verdict:", res['final_verdict'])
        for f in res['findings']:
            print(f"- {f['label']}: {f['risk_level']} -> {f['description']}")
        print()
