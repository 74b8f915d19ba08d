def normalize_answer(text) -> str:
    """Returns a trimmed, lowercased answer for tolerant comparisons"""
    if not isinstance(text, str):
        return ''
    return text.strip().lower()


def is_answer_correct(given, expected) -> bool:
    """True when the given answer matches the expected one ignoring case and surrounding whitespace"""
    expected_norm = normalize_answer(expected)
    if not expected_norm:
        return False
    return normalize_answer(given) == expected_norm
