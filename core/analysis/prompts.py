"""Prompts for paper analysis."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONTENT_CHARS = 8000
TRUNCATION_MARKER = "\n\n[Content truncated for analysis]"

# Sent as the system message (OpenAI) or prepended to the prompt (Gemini)
ANALYSIS_SYSTEM = (
    "You are an expert research assistant specializing in academic paper analysis "
    "with a focus on ethics, transparency, and explainable AI. Always respond with "
    "valid JSON that matches the expected schema exactly."
)

SUMMARY_SCHEMA = """{
  "content": "2-3 paragraph comprehensive summary",
  "keyPoints": [
    {
      "content": "Key finding description with specific details from the paper",
      "importance": "high|medium|low",
      "sourceSection": "Specific section reference (e.g., 'Results, Table 2' or 'Discussion, paragraph 3')",
      "confidence": 0.85
    }
  ],
  "limitations": ["limitation 1", "limitation 2"],
  "citations": [
    {
      "text": "Direct quote from paper with exact wording",
      "sourceLocation": "Specific location (e.g., 'Abstract, line 5' or 'Conclusion, final paragraph')",
      "confidence": 0.90
    }
  ],
  "confidence": 0.87,
  "ethicsFlags": [
    {
      "type": "bias|data-quality|representation|methodology|disclosure",
      "severity": "high|medium|low",
      "description": "Specific issue description with evidence",
      "recommendation": "Actionable recommendation to address the issue",
      "sourceLocation": "Where in the paper this was identified"
    }
  ],
  "researchGaps": [
    {
      "gap": "Specific research gap identified",
      "description": "Detailed description of what's missing or could be improved",
      "priority": "high|medium|low",
      "suggestedApproach": "Concrete suggestion for future research direction"
    }
  ],
  "xaiData": {
    "decisionPathways": [
      {
        "step": "Analysis step name",
        "reasoning": "Why this step mattered and how it influenced the analysis",
        "confidence": 0.85,
        "sources": ["specific section references"]
      }
    ],
    "sourceReferences": [
      {
        "originalText": "Exact text from original paper (50-150 words) - MUST be actual content from the provided text",
        "summaryReference": "How this text appears in the summary",
        "relevanceScore": 0.90,
        "location": "Specific section and paragraph reference"
      }
    ],
    "confidenceBreakdown": {
      "overall": 0.87,
      "keyPoints": 0.85,
      "citations": 0.90,
      "limitations": 0.80
    },
    "attentionWeights": [
      {
        "text": "key phrase or concept from paper",
        "weight": 0.95,
        "relevance": "why this was important for the analysis"
      }
    ]
  }
}"""

EXTRACTION_RULES = """CRITICAL REQUIREMENTS FOR SOURCE REFERENCES:
- Extract 5-8 ACTUAL text passages from the provided content
- Each originalText MUST be verbatim from the paper content provided
- Show exactly how each passage was transformed in the summary
- Provide precise location references (section names, paragraph numbers)
- Use relevance scores based on how much each passage influenced the analysis
- Focus on passages that directly support key findings, methodology, or conclusions

CRITICAL REQUIREMENTS:
- Extract 4-6 key points with SPECIFIC details from the paper
- Include 3-5 EXACT quotes with precise location references
- Identify 2-4 limitations honestly based on the methodology
- Flag any ethical concerns with specific evidence
- Identify 2-4 research gaps or future work opportunities
- Provide 5-8 source references showing how original text was transformed
- Use confidence scores between 0.0-1.0 based on evidence quality
- Be critical but fair in assessment
- Focus on REAL content analysis, not generic statements
- All location references must be specific (section names, paragraph numbers, etc.)"""


def truncate_content(content: str, max_chars: int = DEFAULT_MAX_CONTENT_CHARS) -> str:
    """Cut content to ``max_chars`` and mark the cut."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATION_MARKER


def build_prompt(
    content: str, title: str, max_chars: int = DEFAULT_MAX_CONTENT_CHARS
) -> str:
    """Format document text and title into the analysis instruction prompt."""
    body = truncate_content(content, max_chars)
    logger.debug(
        f"Prompt content: {len(content)} chars in, {len(body)} chars used, "
        f"truncated={len(content) > max_chars}"
    )
    return (
        "Analyze this research paper with focus on transparency, ethics, explainability, "
        "and identifying research gaps. Extract REAL source references from the actual "
        "document content.\n\n"
        f"Title: {title}\n\n"
        f"Content: {body}\n\n"
        "Provide analysis in this exact JSON format:\n"
        f"{SUMMARY_SCHEMA}\n\n"
        f"{EXTRACTION_RULES}"
    )
