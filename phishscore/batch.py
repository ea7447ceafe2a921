#!/usr/bin/env python3
"""
batch.py
Score many URLs at once and write the CSV report.

Usage:
    phishscore-batch urls.txt --out report.csv
    phishscore-batch dataset.csv --workers 8     # CSV input needs a 'url' column

Text input is split on newlines, commas and semicolons.
"""

import argparse
import logging
import re
import sys
from typing import Dict, Iterable, List, Optional

import pandas as pd

from phishscore import config
from phishscore.app.models import Assessment, Classification
from phishscore.app.scanner import scan_batch

logger = logging.getLogger("batch")

CSV_HEADER = ("URL", "Classification", "Basic Score", "Advanced Score", "Combined Score")

_SEPARATORS_RE = re.compile(r"[\n,;]+")


def parse_url_list(text: str) -> List[str]:
    """Split free text into URLs, dropping blanks and keeping order."""
    return [u.strip() for u in _SEPARATORS_RE.split(text or "") if u.strip()]


def _quote(value: str) -> str:
    # embedded quotes are doubled so the URL stays one field
    return '"' + value.replace('"', '""') + '"'


def export_csv(assessments: Iterable[Assessment]) -> str:
    """One header line, then one row per assessment. The URL is always quoted."""
    lines = [",".join(CSV_HEADER)]
    for a in assessments:
        lines.append(",".join([
            _quote(a.url),
            a.classification.value.upper(),
            str(a.basic_score),
            str(a.advanced_score),
            str(a.combined_score),
        ]))
    return "\n".join(lines)


def summarize(assessments: Iterable[Assessment]) -> Dict[str, int]:
    summary = {c.value: 0 for c in Classification}
    total = 0
    for a in assessments:
        summary[a.classification.value] += 1
        total += 1
    summary["total"] = total
    return summary


def load_urls(path: str) -> List[str]:
    """Read URLs from a CSV with a 'url' column, or from a plain text file."""
    if path.lower().endswith(".csv"):
        df = pd.read_csv(path)
        if "url" not in df.columns:
            raise ValueError(f"{path} has no 'url' column")
        return [u.strip() for u in df["url"].dropna().astype(str) if u.strip()]
    with open(path, "r", encoding="utf-8") as fh:
        return parse_url_list(fh.read())


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Score a list of URLs and export a CSV report")
    parser.add_argument("infile", help="Text file of URLs, or CSV with a 'url' column")
    parser.add_argument("--out", "-o", default=None, help="Report path (default: stdout)")
    parser.add_argument("--workers", type=int, default=config.BATCH_WORKERS)
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL)

    try:
        urls = load_urls(args.infile)
    except (OSError, ValueError) as e:
        logger.error("Could not read %s: %s", args.infile, e)
        return 2
    if not urls:
        logger.error("No URLs found in %s", args.infile)
        return 1

    logger.info("Scanning %d URL(s) with %d worker(s)", len(urls), args.workers)
    results = scan_batch(urls, max_workers=args.workers)
    report = export_csv(results)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as fh:
            fh.write(report + "\n")
        logger.info("Saved report to %s", args.out)
    else:
        sys.stdout.write(report + "\n")

    logger.info("Summary: %s", summarize(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
