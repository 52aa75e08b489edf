from rapidfuzz.distance import Levenshtein

from labmatch.normalization.text import TextFolder


def normalize_name(name: str | None, folder: TextFolder) -> str:
    """Letters only, tokens sorted: ``"Smith, John"`` -> ``"john smith"``."""
    if not name:
        return ""
    return " ".join(sorted(folder.letters_only(name).split()))


def name_similarity(first: str, second: str) -> float:
    """``1 - levenshtein / max_len`` over two already normalized names."""
    longest = max(len(first), len(second))
    if longest == 0:
        return 0.0
    return 1.0 - Levenshtein.distance(first, second) / longest


def name_points(similarity: float) -> int:
    if similarity >= 0.9:
        return 3
    if similarity >= 0.7:
        return 2
    if similarity >= 0.5:
        return 1
    return 0
