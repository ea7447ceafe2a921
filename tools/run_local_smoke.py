"""
Quick local smoke test: run the scorer on a few sample URLs and print one JSON
line per URL with the three scores, the verdict and every rule that fired.

Run: python3 tools/run_local_smoke.py [url ...]
"""
import json
import sys

from phishscore.app.scanner import scan_url

SAMPLES = [
    "https://www.google.com",
    "https://github.com",
    "http://192.168.1.1/login/verify-account",
    "https://secure-login-paypal.suspicious-domain.com/account",
    "https://bit.ly/3xYz",
    "http://paypa1-verify.account-update.tk:8888/redirect=http://x",
]


def main(urls):
    for u in urls:
        a = scan_url(u)
        fired = [f.feature for f in a.findings + a.advanced_findings if f.weight > 0]
        print(json.dumps({
            "url": u,
            "basic_score": a.basic_score,
            "advanced_score": a.advanced_score,
            "combined_score": a.combined_score,
            "classification": a.classification.value,
            "fired": fired,
        }))


if __name__ == '__main__':
    main(sys.argv[1:] or SAMPLES)
