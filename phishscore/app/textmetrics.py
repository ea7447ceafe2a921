"""String metrics shared by the analyzers: Shannon entropy and Levenshtein similarity."""

import math
from collections import Counter


def shannon_entropy(data: str) -> float:
    """Entropy in bits per character, rounded to 2 decimals."""
    if not data:
        return 0.0
    length = len(data)
    probabilities = [count / length for count in Counter(data).values()]
    entropy = -sum(p * math.log2(p) for p in probabilities)
    # -0.0 for single-symbol strings
    return abs(round(entropy, 2))


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit costs for substitution, insertion and deletion."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]; 1.0 means identical."""
    return 1 - edit_distance(a, b) / max(len(a), len(b), 1)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
