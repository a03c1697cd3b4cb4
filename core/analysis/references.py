"""Source reference authenticity checks and generation."""

import logging
from typing import Callable, Optional

from .text import contains_verbatim, is_fuzzy_match, positional_excerpts, sentences_between
from .types import SourceReference

logger = logging.getLogger(__name__)

MIN_SOURCE_REFERENCES = 5
MAX_SOURCE_REFERENCES = 8

# Claimed quotations this short are too generic to verify
MIN_QUOTE_CHARS = 20


def is_authentic(original_text: str, document: str) -> bool:
    """Check that a claimed quotation really comes from the document.

    Accepts verbatim (case-insensitive) occurrences and passages whose
    significant words mostly occur in the document.
    """
    text = original_text.strip()
    if len(text) <= MIN_QUOTE_CHARS:
        return False
    return contains_verbatim(text, document) or is_fuzzy_match(text, document)


class ReferencePool:
    """Hands out unused passages of a document for program-made references.

    Sentences of 50-300 characters come first, in document order or
    ordered by ``score`` (highest first, ties keep document order). When
    sentences run out, fixed-size positional excerpts follow.
    """

    def __init__(
        self,
        document: str,
        score: Optional[Callable[[str], float]] = None,
        exclude: Optional[list[str]] = None,
    ):
        sentences = sentences_between(document)
        if score is not None:
            sentences = sorted(sentences, key=score, reverse=True)
        self._passages = sentences + positional_excerpts(document, MAX_SOURCE_REFERENCES)
        self._used = {text.strip().lower() for text in exclude or []}
        self._cursor = 0
        self.sentence_count = len(sentences)

    def take(self) -> Optional[str]:
        """Next passage not handed out or excluded yet, or None when exhausted."""
        while self._cursor < len(self._passages):
            passage = self._passages[self._cursor]
            self._cursor += 1
            key = passage.lower()
            if key not in self._used:
                self._used.add(key)
                return passage
        return None


def generate_reference(
    pool: ReferencePool, summary_reference: str, index: int
) -> Optional[SourceReference]:
    """Build a reference from the next passage in the pool."""
    passage = pool.take()
    if passage is None:
        return None
    return SourceReference(
        original_text=passage,
        summary_reference=summary_reference,
        relevance_score=max(0.5, 0.75 - index * 0.05),
        location=f"Document content - section {index + 1}",
    )


def verify_source_references(
    references: list[SourceReference],
    document: str,
    score: Optional[Callable[[str], float]] = None,
) -> list[SourceReference]:
    """Replace unverifiable references and top the list up to the minimum.

    Authentic provider references are kept in place. Each rejected one is
    replaced by a reference built from a real passage of the document,
    keeping the provider's summary reference text. The result holds at
    least ``MIN_SOURCE_REFERENCES`` entries whenever the document has
    enough distinct passages.
    """
    checks = [is_authentic(ref.original_text, document) for ref in references]
    pool = ReferencePool(
        document,
        score=score,
        exclude=[ref.original_text for ref, ok in zip(references, checks) if ok],
    )

    verified: list[SourceReference] = []
    rejected = 0
    for index, (ref, ok) in enumerate(zip(references, checks)):
        if ok:
            verified.append(ref)
            continue
        rejected += 1
        logger.warning(f"Source reference {index + 1} not found in document, generating alternative")
        replacement = generate_reference(pool, ref.summary_reference, len(verified))
        if replacement is not None:
            verified.append(replacement)

    while len(verified) < MIN_SOURCE_REFERENCES:
        extra = generate_reference(
            pool, f"Additional reference {len(verified) + 1}", len(verified)
        )
        if extra is None:
            break
        verified.append(extra)

    if rejected:
        logger.info(f"Replaced {rejected} of {len(references)} source references")
    logger.debug(f"Validated {len(verified)} source references")
    return verified
