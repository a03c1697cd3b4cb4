"""Text helpers shared by the validator and the fallback analyzer.

Every passage returned from here is a slice of the input text (modulo
surrounding whitespace), so callers can quote it as verbatim source.
"""

import re

# Share of a passage's significant words that must occur in the document
# for the passage to count as a (fuzzy) quotation.
FUZZY_MATCH_THRESHOLD = 0.7

# Words of this length or shorter are ignored by the overlap measure
MIN_SIGNIFICANT_WORD_LENGTH = 3

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+|\n\s*\n")
_WORD = re.compile(r"[a-z0-9]+(?:['-][a-z0-9]+)*")
_WHITESPACE = re.compile(r"\s+")


def count_words(text: str) -> int:
    """Count words in text (split on whitespace)."""
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """Split text into sentences on terminal punctuation or blank lines.

    Decimal points ("p < 0.05") do not end a sentence because a boundary
    needs whitespace after the punctuation.
    """
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s and s.strip()]


def sentences_between(text: str, min_chars: int = 50, max_chars: int = 300) -> list[str]:
    """Sentences whose length lies strictly between the two bounds."""
    return [s for s in split_sentences(text) if min_chars < len(s) < max_chars]


def significant_words(text: str) -> list[str]:
    """Lowercased word tokens longer than ``MIN_SIGNIFICANT_WORD_LENGTH``."""
    return [w for w in _WORD.findall(text.lower()) if len(w) > MIN_SIGNIFICANT_WORD_LENGTH]


def token_overlap(passage: str, document: str) -> float:
    """Fraction of the passage's significant words that occur in the document.

    Returns 0.0 when the passage has no significant words.
    """
    words = significant_words(passage)
    if not words:
        return 0.0
    vocabulary = set(_WORD.findall(document.lower()))
    return sum(1 for w in words if w in vocabulary) / len(words)


def contains_verbatim(passage: str, document: str) -> bool:
    """Case-insensitive containment, ignoring differences in whitespace runs."""
    needle = _WHITESPACE.sub(" ", passage).strip().lower()
    if not needle:
        return False
    return needle in _WHITESPACE.sub(" ", document).lower()


def is_fuzzy_match(passage: str, document: str) -> bool:
    return token_overlap(passage, document) >= FUZZY_MATCH_THRESHOLD


def keyword_density(sentence: str, pattern: re.Pattern) -> float:
    """Keyword hits per word; 0.0 for empty sentences."""
    words = count_words(sentence)
    if not words:
        return 0.0
    return len(pattern.findall(sentence)) / words


def positional_excerpts(
    text: str, count: int, length: int = 150, stride: int = 200
) -> list[str]:
    """Fixed-size excerpts taken every ``stride`` characters from the start."""
    excerpts: list[str] = []
    if not text.strip():
        return excerpts
    for index in range(count):
        start = max(0, min(index * stride, len(text) - length))
        excerpt = text[start : start + length].strip()
        if excerpt and excerpt not in excerpts:
            excerpts.append(excerpt)
    return excerpts
