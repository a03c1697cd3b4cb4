"""Validation and normalization of provider responses."""

import logging

from pydantic import ValidationError

from .errors import MalformedResponseError
from .parsing import extract_json_object
from .references import verify_source_references
from .text import significant_words
from .types import Summary

logger = logging.getLogger(__name__)

# Set by the service for record analyses, never taken from provider output
CALLER_OWNED_KEYS = ("paperId", "paper_id", "generatedAt", "generated_at")


def _summary_overlap_scorer(summary_content: str):
    """Score sentences by how many summary words they share."""
    summary_words = set(significant_words(summary_content))

    def score(sentence: str) -> float:
        words = significant_words(sentence)
        if not words:
            return 0.0
        return sum(1 for w in words if w in summary_words) / min(len(words), 20)

    return score


def validate_response(
    raw: str, source_text: str, provider: str | None = None
) -> Summary:
    """Turn raw provider output into a structurally complete Summary.

    Args:
        raw: Text payload returned by the provider (may be fenced Markdown)
        source_text: The full document text the analysis was run on
        provider: Provider name, for error reporting

    Returns:
        Summary with coerced fields and verified source references

    Raises:
        MalformedResponseError: If the payload is not a JSON object
    """
    payload = extract_json_object(raw, provider=provider)
    logger.debug(f"Response keys: {sorted(payload)}")

    dropped = [key for key in CALLER_OWNED_KEYS if payload.pop(key, None) is not None]
    if dropped:
        logger.debug(f"Ignoring caller-owned keys in response: {dropped}")

    try:
        summary = Summary.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Response does not fit the summary schema: {e.error_count()} errors",
            provider=provider,
        ) from e

    scorer = (
        _summary_overlap_scorer(summary.content)
        if payload.get("content")
        else None
    )
    summary.xai_data.source_references = verify_source_references(
        summary.xai_data.source_references, source_text, score=scorer
    )

    logger.info(
        f"Validated summary: {len(summary.key_points)} key points, "
        f"{len(summary.citations)} citations, {len(summary.ethics_flags)} ethics flags, "
        f"{len(summary.research_gaps)} research gaps, "
        f"{len(summary.xai_data.source_references)} source references"
    )
    return summary
