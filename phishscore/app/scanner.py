"""
Scanner: runs the basic and advanced layers on a URL and merges them into one
Assessment.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .advanced import advanced_risk_score, analyze_advanced_features, extract_advanced_features
from .heuristics import analyze_basic_features, basic_risk_score, extract_basic_features
from .models import Assessment
from .rules import classify
from .textmetrics import round_half_up

logger = logging.getLogger("scanner")

# Weighted score combination
WEIGHT_BASIC = 0.4
WEIGHT_ADVANCED = 0.6

__all__ = ["classify", "combine_scores", "scan_url", "scan_batch"]


def combine_scores(basic_score: int, advanced_score: int) -> int:
    combined = round_half_up(WEIGHT_BASIC * basic_score + WEIGHT_ADVANCED * advanced_score)
    return max(0, min(100, combined))


def scan_url(url: str) -> Assessment:
    # -------------------------------------
    # 1. BASIC (lexical / structural)
    # -------------------------------------
    findings = analyze_basic_features(extract_basic_features(url))
    basic_score = basic_risk_score(findings)

    # -------------------------------------
    # 2. ADVANCED (similarity / entropy / reputation)
    # -------------------------------------
    advanced_findings = analyze_advanced_features(extract_advanced_features(url))
    advanced_score = advanced_risk_score(advanced_findings)

    # -------------------------------------
    # 3. Weighted Score Combination
    # -------------------------------------
    combined = combine_scores(basic_score, advanced_score)
    verdict = classify(combined)
    logger.debug("scanned %r basic=%d advanced=%d combined=%d verdict=%s",
                 url, basic_score, advanced_score, combined, verdict.value)

    return Assessment(
        url=url,
        basic_score=basic_score,
        advanced_score=advanced_score,
        combined_score=combined,
        classification=verdict,
        findings=tuple(findings),
        advanced_findings=tuple(advanced_findings),
    )


def scan_batch(urls: Iterable[str], max_workers: Optional[int] = None) -> List[Assessment]:
    """Scan every URL; results keep the input order.

    Each assessment depends only on its own URL, so running on a thread pool
    (``max_workers`` > 1) gives the same results as a plain loop.
    """
    urls = list(urls)
    if not max_workers or max_workers <= 1 or len(urls) <= 1:
        return [scan_url(u) for u in urls]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(scan_url, urls))
