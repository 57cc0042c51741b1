"""String similarity scoring."""

from collections import Counter


def _ngrams(value: str, size: int) -> Counter:
    if len(value) < size:
        return Counter([value]) if value else Counter()
    return Counter(value[i : i + size] for i in range(len(value) - size + 1))


def sorensen_dice(a: str, b: str, ngram_size: int = 2, case_sensitive: bool = False) -> float:
    """Sorensen-Dice coefficient over character n-gram multisets.

    Returns a score in [0, 1], where 1 means identical. A term shorter than
    the n-gram size counts as a single n-gram.

    Examples:
        sorensen_dice("night", "nacht") -> 0.25
        sorensen_dice("Title", "title") -> 1.0
    """
    if not a and not b:
        return 1.0
    if ngram_size <= 0:
        ngram_size = 2
    if not case_sensitive:
        a = a.lower()
        b = b.lower()
    if a == b:
        return 1.0

    grams_a = _ngrams(a, ngram_size)
    grams_b = _ngrams(b, ngram_size)
    total = sum(grams_a.values()) + sum(grams_b.values())
    if total == 0:
        return 0.0
    common = sum((grams_a & grams_b).values())
    return 2 * common / total
