from dataclasses import fields, replace

import pytest

from phishscore.app.heuristics import (
    BASIC_RULES,
    analyze_basic_features,
    analyze_url,
    basic_risk_score,
    extract_basic_features,
)
from phishscore.app.models import BasicFeatures, RiskLevel
from phishscore.app.rules import max_total_weight


def _levels(findings):
    return {f.feature: f.risk_level for f in findings}


def test_google_features():
    feats = extract_basic_features("https://www.google.com")
    assert feats.is_https is True
    assert feats.has_ip_address is False
    assert feats.has_dash is False
    assert feats.subdomain_count == 1
    assert feats.has_multiple_subdomains is False
    assert feats.domain_length == len("www.google.com")


def test_scheme_is_added_when_missing():
    feats = extract_basic_features("example.com/login")
    assert feats.is_https is True
    assert feats.path_length == len("/login")
    assert feats.url_length == len("https://example.com/login")


def test_ip_url_features():
    feats = extract_basic_features("http://192.168.1.1/login/verify-account")
    assert feats.has_ip_address is True
    assert feats.is_https is False
    assert feats.has_suspicious_keywords is True
    # dash is only counted in the hostname
    assert feats.has_dash is False


@pytest.mark.parametrize("host", ["256.1.1.1", "1.2.3", "1.2.3.4.5"])
def test_ip_detection_is_strict(host):
    assert extract_basic_features(f"http://{host}/").has_ip_address is False


def test_double_slash_after_scheme():
    assert extract_basic_features("https://example.com//evil.com").has_double_slash is True
    assert extract_basic_features("https://example.com/a/b").has_double_slash is False


def test_subdomains_and_dots():
    feats = extract_basic_features("https://a.b.c.d.example.com")
    assert feats.subdomain_count == 4
    assert feats.has_multiple_subdomains is True
    assert feats.has_too_many_dots is True


def test_encoded_chars_and_at_symbol():
    feats = extract_basic_features("https://example.com@evil.com/%2e%2e")
    assert feats.has_at_symbol is True
    assert feats.has_encoded_chars is True


def test_keywords_are_case_insensitive():
    assert extract_basic_features("https://example.com/SignIn").has_suspicious_keywords is True


@pytest.mark.parametrize("garbage", ["not a url", "http://[::1", "https://", "http://example.com:99999/"])
def test_malformed_urls_still_produce_features(garbage):
    feats = extract_basic_features(garbage)
    assert isinstance(feats, BasicFeatures)
    assert feats.url_length == len(garbage)
    assert feats.subdomain_count == 0
    assert feats.path_length == 0


def test_raw_fallback_values():
    feats = extract_basic_features("not a-url with login")
    assert feats.has_dash is True
    assert feats.has_suspicious_keywords is True
    assert feats.is_https is False


def test_analysis_has_fixed_order_and_size():
    findings = analyze_basic_features(extract_basic_features("https://www.google.com"))
    assert [f.feature for f in findings] == [r.feature for r in BASIC_RULES]
    assert len(findings) == 9


def test_url_length_thresholds():
    base = extract_basic_features("https://example.com")
    assert _levels(analyze_basic_features(replace(base, url_length=54)))["url_length"] is RiskLevel.SAFE
    assert _levels(analyze_basic_features(replace(base, url_length=55)))["url_length"] is RiskLevel.WARNING
    assert _levels(analyze_basic_features(replace(base, url_length=76)))["url_length"] is RiskLevel.DANGER


def test_subdomain_levels():
    base = extract_basic_features("https://example.com")
    two = replace(base, subdomain_count=2, has_multiple_subdomains=False)
    three = replace(base, subdomain_count=3, has_multiple_subdomains=True)
    assert _levels(analyze_basic_features(two))["subdomain_count"] is RiskLevel.WARNING
    assert _levels(analyze_basic_features(three))["subdomain_count"] is RiskLevel.DANGER


def test_score_ceiling_matches_rule_table():
    assert max_total_weight(BASIC_RULES) == 17


def test_worst_case_scores_100():
    worst = BasicFeatures(
        url_length=200, has_at_symbol=True, has_double_slash=True, has_dash=True,
        has_ip_address=True, is_https=False, subdomain_count=5, has_multiple_subdomains=True,
        has_suspicious_keywords=True, domain_length=50, path_length=100,
        has_encoded_chars=True, has_too_many_dots=True,
    )
    assert basic_risk_score(analyze_basic_features(worst)) == 100


def test_ip_url_score():
    findings = analyze_basic_features(extract_basic_features("http://192.168.1.1/login/verify-account"))
    # ip 3 + no https 1.5 + keywords 1.5 + two subdomain labels 1 = 7 of 17
    assert basic_risk_score(findings) == 41


def test_google_score_is_low():
    findings = analyze_basic_features(extract_basic_features("https://www.google.com"))
    assert basic_risk_score(findings) == 9


def test_triggering_a_flag_never_lowers_the_score():
    clean = extract_basic_features("https://example.com")
    baseline = basic_risk_score(analyze_basic_features(clean))
    for f in fields(BasicFeatures):
        if f.name in ("is_https", "has_multiple_subdomains") or f.type is not bool:
            continue
        flagged = replace(clean, **{f.name: True})
        assert basic_risk_score(analyze_basic_features(flagged)) >= baseline, f.name
    insecure = replace(clean, is_https=False)
    assert basic_risk_score(analyze_basic_features(insecure)) >= baseline


def test_analyze_url_shape():
    res = analyze_url("http://192.168.1.10/login?verify=true")
    assert res["score"] == 41
    assert res["final_verdict"] == "suspicious"
    assert len(res["findings"]) == 9
    assert res["features"]["has_ip_address"] is True
