"""Static lookup tables used by the URL analyzers.

Everything in here is data: the extractors only read these tables, so they
can be extended (or patched in tests) without touching detection logic.
"""

import re
from collections import namedtuple

SUSPICIOUS_KEYWORDS = (
    "login", "signin", "verify", "account", "update", "secure",
    "banking", "paypal", "ebay", "amazon", "apple", "microsoft",
    "google", "facebook", "instagram", "netflix", "password",
    "confirm", "suspend", "wallet", "credit", "debit",
)

# four octets, each 0-255
IPV4_PATTERN = re.compile(
    r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

SUSPICIOUS_TLDS = (
    ".tk", ".ml", ".ga", ".cf", ".gq", ".xyz", ".top", ".club",
    ".work", ".date", ".loan", ".online", ".site", ".website",
    ".space", ".win", ".bid", ".stream", ".racing", ".download",
)

URL_SHORTENERS = (
    "bit.ly", "tinyurl.com", "t.co", "goo.gl", "ow.ly", "is.gd",
    "buff.ly", "j.mp", "short.link", "rb.gy", "cutt.ly", "shorturl.at",
)

# look-alike character -> the Latin character it imitates
HOMOGLYPHS = {
    "а": "a",  # Cyrillic а
    "е": "e",  # Cyrillic е
    "о": "o",  # Cyrillic о
    "р": "p",  # Cyrillic р
    "с": "c",  # Cyrillic с
    "у": "y",  # Cyrillic у
    "х": "x",  # Cyrillic х
    "і": "i",  # Cyrillic і
    "ј": "j",  # Cyrillic ј
    "ѕ": "s",  # Cyrillic ѕ
    "ԁ": "d",  # Cyrillic ԁ
    "ԛ": "q",  # Cyrillic ԛ
    "ɡ": "g",  # Latin script ɡ
    "ν": "v",  # Greek ν
    "0": "o",
    "1": "l",
    "3": "e",
    "4": "a",
    "5": "s",
    "8": "b",
}

STANDARD_PORTS = frozenset({80, 443, 8080, 8443})

REDIRECT_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"redirect[=/]",
        r"redir[=/]",
        r"url[=/]http",
        r"goto[=/]",
        r"return[=/]http",
        r"next[=/]http",
        r"continue[=/]http",
    )
)

# three or more identical characters in a row
REPEATED_CHARS_PATTERN = re.compile(r"(.)\1{2,}")

Brand = namedtuple("Brand", ["name", "canonical", "variants", "official_domain"])


def _brand(name, canonical, *variants):
    return Brand(name, canonical, (canonical,) + variants, canonical + ".com")


# Checked in order; the first matching brand wins.
TARGET_BRANDS = (
    _brand("PayPal", "paypal", "paypa1", "paypai", "pаypal"),
    _brand("Amazon", "amazon", "amaz0n", "amazоn", "arnazon"),
    _brand("Apple", "apple", "app1e", "аpple"),
    _brand("Microsoft", "microsoft", "micr0soft", "micrоsoft"),
    _brand("Google", "google", "g00gle", "goog1e", "goоgle"),
    _brand("Netflix", "netflix", "netf1ix"),
    _brand("Facebook", "facebook", "faceb00k", "fаcebook"),
    _brand("Instagram", "instagram", "instagran", "1nstagram"),
    _brand("Twitter", "twitter", "twltter", "tw1tter"),
    _brand("LinkedIn", "linkedin", "linkedln", "l1nkedin"),
    _brand("Chase", "chase", "chas3", "chаse"),
    _brand("Bank of America", "bankofamerica", "bank0famerica"),
    _brand("Wells Fargo", "wellsfargo", "we11sfargo"),
)
