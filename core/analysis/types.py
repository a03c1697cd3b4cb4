"""Type definitions for paper analysis.

Summary models are lenient at the edges and strict inside: every field
passes through a before-validator that coerces whatever a provider sent
into the declared shape (unknown enum values fall back to the field
default, numbers are clamped to [0, 1], wrong-typed values are replaced
by the default). Constructing a model therefore never fails on bad
provider data, and the resulting object always satisfies its schema.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.fields import FieldInfo


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value: "str | LLMProvider | None") -> "LLMProvider":
        """Resolve a provider selector, defaulting to OpenAI for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OPENAI


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EthicsFlagType(str, Enum):
    BIAS = "bias"
    DATA_QUALITY = "data-quality"
    REPRESENTATION = "representation"
    METHODOLOGY = "methodology"
    DISCLOSURE = "disclosure"


def clamp_unit(value: Any, default: float) -> float:
    """Clamp a number to [0, 1]; non-numbers (and bools, NaN) give ``default``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, int):
        # Compare before converting; huge JSON integers overflow float()
        return 0.0 if value < 0 else 1.0 if value > 1 else float(value)
    if math.isnan(value):
        return default
    return max(0.0, min(1.0, float(value)))


def coerce_text(value: Any, default: str) -> str:
    """Return a stripped non-empty string, else ``default``."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    """Map a value onto ``enum_cls`` case-insensitively, else ``default``."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    return default


def _coerce_field(field: FieldInfo, value: Any) -> Any:
    annotation = field.annotation
    default = field.get_default(call_default_factory=True)

    if get_origin(annotation) is list:
        if not isinstance(value, list):
            return default
        (item_type,) = get_args(annotation)
        if isinstance(item_type, type) and issubclass(item_type, BaseModel):
            # Non-object items carry nothing we can map onto a model
            return [item for item in value if isinstance(item, (dict, item_type))]
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return coerce_enum(annotation, value, default)
    if annotation is float:
        return clamp_unit(value, default)
    if annotation is str:
        return coerce_text(value, default)
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return value if isinstance(value, (dict, annotation)) else default
    return value


class SummaryModel(BaseModel):
    """Base for summary models: camelCase aliases plus field coercion."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info: ValidationInfo) -> Any:
        return _coerce_field(cls.model_fields[info.field_name], value)


class KeyPoint(SummaryModel):
    """A key finding of the paper."""

    content: str = "Key point identified"
    importance: Importance = Importance.MEDIUM
    source_section: str = Field(default="Paper content", alias="sourceSection")
    confidence: float = 0.75


class Citation(SummaryModel):
    """A quotation from the paper."""

    text: str = "Citation text"
    source_location: str = Field(default="Paper content", alias="sourceLocation")
    confidence: float = 0.80


class EthicsFlag(SummaryModel):
    """A structured warning about an ethics or transparency issue."""

    flag_type: EthicsFlagType = Field(default=EthicsFlagType.METHODOLOGY, alias="type")
    severity: Severity = Severity.MEDIUM
    description: str = "Ethics consideration identified"
    recommendation: str = "Review and address this concern"
    source_location: str = Field(default="Paper content", alias="sourceLocation")


class ResearchGap(SummaryModel):
    """An opportunity for future research."""

    gap: str = "Research gap identified"
    description: str = "Further research needed"
    priority: Priority = Priority.MEDIUM
    suggested_approach: str = Field(
        default="Additional studies recommended", alias="suggestedApproach"
    )


class DecisionPathway(SummaryModel):
    """One reasoning step of the analysis."""

    step: str = "Analysis step"
    reasoning: str = ""
    confidence: float = 0.75
    sources: list[str] = Field(default_factory=list)


class SourceReference(SummaryModel):
    """Link from the summary back to a passage of the source document."""

    original_text: str = Field(default="", alias="originalText")
    summary_reference: str = Field(default="Summary reference", alias="summaryReference")
    relevance_score: float = Field(default=0.75, alias="relevanceScore")
    location: str = "Document content"


class ConfidenceBreakdown(SummaryModel):
    overall: float = 0.75
    key_points: float = Field(default=0.75, alias="keyPoints")
    citations: float = 0.80
    limitations: float = 0.70


class AttentionWeight(SummaryModel):
    text: str = ""
    weight: float = 0.5
    relevance: str = ""


class XAIData(SummaryModel):
    """Explainability bundle attached to a summary."""

    decision_pathways: list[DecisionPathway] = Field(
        default_factory=list, alias="decisionPathways"
    )
    source_references: list[SourceReference] = Field(
        default_factory=list, alias="sourceReferences"
    )
    confidence_breakdown: ConfidenceBreakdown = Field(
        default_factory=ConfidenceBreakdown, alias="confidenceBreakdown"
    )
    attention_weights: list[AttentionWeight] = Field(
        default_factory=list, alias="attentionWeights"
    )


class Summary(SummaryModel):
    """Structured analysis of a paper."""

    content: str = "Analysis completed"
    key_points: list[KeyPoint] = Field(default_factory=list, alias="keyPoints")
    limitations: list[str] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
    confidence: float = 0.75
    ethics_flags: list[EthicsFlag] = Field(default_factory=list, alias="ethicsFlags")
    research_gaps: list[ResearchGap] = Field(default_factory=list, alias="researchGaps")
    xai_data: XAIData = Field(default_factory=XAIData, alias="xaiData")

    # Set only when the analysis was run for a stored paper record
    paper_id: Optional[str] = Field(default=None, alias="paperId")
    generated_at: Optional[datetime] = Field(default=None, alias="generatedAt")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape consumed by persistence."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaperMetadata(BaseModel):
    published_date: Optional[str] = None
    journal: Optional[str] = None
    citations: Optional[int] = None
    keywords: list[str] = Field(default_factory=list)
    abstract: Optional[str] = None


class Paper(BaseModel):
    """A paper as handed over by the calling layer."""

    id: str
    title: str
    authors: list[str] = Field(default_factory=list)
    content: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None
    metadata: PaperMetadata = Field(default_factory=PaperMetadata)
