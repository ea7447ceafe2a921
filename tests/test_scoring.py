import pytest

from phishscore.app.models import Assessment, Classification
from phishscore.app.scanner import classify, combine_scores, scan_batch, scan_url
from phishscore.batch import export_csv, parse_url_list, summarize

SAMPLE_URLS = [
    "https://www.google.com",
    "http://192.168.1.1/login/verify-account",
    "https://secure-login-paypal.suspicious-domain.com/account",
    "https://bit.ly/3xYz",
    "http://user@paypa1-secure.a.b.c.verify-account.tk:4444//redirect=evil%20site",
    "not a url at all",
    "xn--80ak6aa92e.com",
]


@pytest.mark.parametrize("score, expected", [
    (0, Classification.LEGITIMATE),
    (24, Classification.LEGITIMATE),
    (25, Classification.SUSPICIOUS),
    (49, Classification.SUSPICIOUS),
    (50, Classification.PHISHING),
    (100, Classification.PHISHING),
])
def test_classification_boundaries(score, expected):
    assert classify(score) is expected


def test_combine_scores_weights():
    assert combine_scores(0, 0) == 0
    assert combine_scores(100, 100) == 100
    # 0.4 * 21 + 0.6 * 30 = 26.4
    assert combine_scores(21, 30) == 26
    # 0.4 * 41 + 0.6 * 22 = 29.6
    assert combine_scores(41, 22) == 30


@pytest.mark.parametrize("url", SAMPLE_URLS)
def test_scores_stay_in_range(url):
    a = scan_url(url)
    for score in (a.basic_score, a.advanced_score, a.combined_score):
        assert isinstance(score, int)
        assert 0 <= score <= 100
    assert a.classification is classify(a.combined_score)
    assert len(a.findings) == 9
    assert len(a.advanced_findings) == 9


def test_google_is_legitimate():
    a = scan_url("https://www.google.com")
    assert a.basic_score == 9
    assert a.advanced_score == 0
    assert a.classification is Classification.LEGITIMATE


def test_ip_address_url():
    a = scan_url("http://192.168.1.1/login/verify-account")
    assert a.basic_score == 41
    assert a.advanced_score == 22
    assert a.combined_score == 30
    assert a.classification is Classification.SUSPICIOUS


def test_brand_in_subdomain_url():
    a = scan_url("https://secure-login-paypal.suspicious-domain.com/account")
    assert a.basic_score == 21
    assert a.advanced_score == 30
    assert a.combined_score == 26
    assert a.classification is not Classification.LEGITIMATE


def test_shortener_url():
    a = scan_url("https://bit.ly/3xYz")
    shortened = [f for f in a.advanced_findings if f.feature == "shortened_url"][0]
    assert shortened.weight == 1.5
    assert a.advanced_score == 8
    assert a.combined_score == 5


def test_kitchen_sink_url_is_phishing():
    a = scan_url(SAMPLE_URLS[4])
    assert a.classification is Classification.PHISHING


def test_scan_is_deterministic():
    assert scan_url(SAMPLE_URLS[2]) == scan_url(SAMPLE_URLS[2])


def test_batch_matches_individual_scans():
    singles = [scan_url(u) for u in SAMPLE_URLS]
    assert scan_batch(SAMPLE_URLS) == singles
    assert scan_batch(SAMPLE_URLS, max_workers=4) == singles
    assert scan_batch(list(reversed(SAMPLE_URLS)), max_workers=3) == list(reversed(singles))


def test_assessment_to_dict():
    d = scan_url("https://bit.ly/3xYz").to_dict()
    assert d["classification"] == "legitimate"
    assert d["findings"][0]["risk_level"] in ("safe", "warning", "danger")
    assert d["advanced_findings"][6]["category"] == "structure"


def test_parse_url_list():
    text = "a.com\nb.com, c.com;;\n\n d.com "
    assert parse_url_list(text) == ["a.com", "b.com", "c.com", "d.com"]
    assert parse_url_list("") == []


def test_export_csv_format():
    results = scan_batch(["https://www.google.com", "https://bit.ly/3xYz"])
    lines = export_csv(results).split("\n")
    assert lines[0] == "URL,Classification,Basic Score,Advanced Score,Combined Score"
    assert lines[1] == '"https://www.google.com",LEGITIMATE,9,0,4'
    assert lines[2].startswith('"https://bit.ly/3xYz",LEGITIMATE,')
    assert len(lines) == 3


def test_summarize_counts():
    results = scan_batch(SAMPLE_URLS[:3])
    summary = summarize(results)
    assert summary["total"] == 3
    assert summary["legitimate"] == 1
    assert summary["suspicious"] == 2
    assert summary["phishing"] == 0


def test_assessment_is_frozen():
    a = scan_url("https://www.google.com")
    assert isinstance(a, Assessment)
    with pytest.raises(Exception):
        a.combined_score = 99
