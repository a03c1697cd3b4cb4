"""LLM-backed analysis of academic papers.

Produces a structured Summary (key points, citations, ethics flags,
research gaps and explainability data) from a paper's text, using
OpenAI or Gemini with a keyword-driven fallback when no provider can
answer.

Example:
    from core.analysis import analyze_paper

    summary = await analyze_paper(text, "Attention Is All You Need", provider="gemini")
    print(summary.to_dict())

Environment Variables:
    OPENAI_API_KEY: API key for OpenAI (default provider)
    GEMINI_API_KEY: API key for Google Gemini
"""

from .config import AnalysisConfig, RetryPolicy, get_analysis_config
from .errors import (
    AnalysisError,
    ConfigurationGap,
    MalformedResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
    TransientProviderError,
)
from .fallback import analyze_fallback
from .prompts import build_prompt
from .service import (
    AnalysisService,
    close_analysis_service,
    get_analysis_service,
)
from .types import (
    Citation,
    EthicsFlag,
    EthicsFlagType,
    KeyPoint,
    LLMProvider,
    Paper,
    PaperMetadata,
    ResearchGap,
    SourceReference,
    Summary,
    XAIData,
)
from .validation import validate_response


async def analyze_paper(
    content: str,
    title: str,
    provider: str = "openai",
) -> Summary:
    """Analyze a paper's text with the process-wide service.

    Args:
        content: Full document text
        title: Paper title
        provider: "openai" or "gemini"

    Returns:
        Summary; never raises for provider failures
    """
    service = get_analysis_service()
    return await service.analyze(content, title, provider=provider)


async def analyze_paper_record(paper: Paper, provider: str = "openai") -> Summary:
    """Analyze a Paper record, fetching its text from the URL if needed.

    Raises:
        DocumentError: If the paper has no content and no usable URL
    """
    service = get_analysis_service()
    return await service.analyze_record(paper, provider=provider)


__all__ = [
    # Main functions
    "analyze_paper",
    "analyze_paper_record",
    "analyze_fallback",
    "build_prompt",
    "validate_response",
    # Service
    "AnalysisService",
    "get_analysis_service",
    "close_analysis_service",
    # Types
    "Summary",
    "KeyPoint",
    "Citation",
    "EthicsFlag",
    "EthicsFlagType",
    "ResearchGap",
    "SourceReference",
    "XAIData",
    "LLMProvider",
    "Paper",
    "PaperMetadata",
    # Config
    "AnalysisConfig",
    "RetryPolicy",
    "get_analysis_config",
    # Errors
    "AnalysisError",
    "ConfigurationGap",
    "TransientProviderError",
    "RateLimitError",
    "ServiceUnavailableError",
    "NetworkError",
    "MalformedResponseError",
    "ProviderError",
]
