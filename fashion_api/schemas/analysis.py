"""
AI image analysis request/response models.

The analysis result is ephemeral: it is built per request from the
label, text and classification calls and never persisted.
"""

from typing import Any, Literal

from pydantic import Field

from fashion_api.schemas.common import CamelModel


class CompositionEntry(CamelModel):
    material: str
    percentage: int


class ConfidenceScores(CamelModel):
    """0-100 integer confidence per attribute plus an overall score."""

    overall: int = 0
    brand: int = 0
    piece_type: int = 0
    color: int = 0
    material: int = 0


class ImageAnalysisResult(CamelModel):
    """
    Best-effort fashion analysis of a single image.

    Every attribute is optional: None means the sub-step that produces it
    failed or found nothing.
    """

    domain: Literal['APPAREL', 'FOOTWEAR'] | None = None
    detected_brand: str | None = None
    detected_piece_type: str | None = None
    detected_color: str | None = None
    detected_material: str | None = None
    detected_viewpoint: str | None = None
    detected_size: str | None = None
    parsed_composition: list[CompositionEntry] | None = None
    confidence: ConfidenceScores = Field(default_factory=ConfidenceScores)
    raw_labels: list[dict[str, Any]] = Field(default_factory=list)
    detected_text: list[str] = Field(default_factory=list)
    background_removed: bool = False
    processed_image_url: str | None = None


class VUFSSuggestion(CamelModel):
    domain: str | None = None
    brand: str | None = None
    piece_type: str | None = None
    color: str | None = None
    material: str | None = None


class AnalysisSuggestions(CamelModel):
    vufs_data: VUFSSuggestion
    confidence: ConfidenceScores
    needs_review: bool


class AnalysisResponse(CamelModel):
    message: str
    analysis: ImageAnalysisResult
    suggestions: AnalysisSuggestions


# =============================================================================
# URL / batch analysis
# =============================================================================
class AnalyzeUrlRequest(CamelModel):
    image_url: str | None = None


class BatchItemResult(CamelModel):
    """Result for a single URL in a batch (index-aligned with the request)."""

    index: int
    image_url: str
    success: bool
    analysis: ImageAnalysisResult | None = None
    error: str | None = None


class BatchSummary(CamelModel):
    total: int
    successful: int
    failed: int


class BatchProcessResponse(CamelModel):
    message: str
    results: list[BatchItemResult]
    summary: BatchSummary


# =============================================================================
# VUFS extraction
# =============================================================================
class CategoryDraft(CamelModel):
    page: str | None = None
    blue_subcategory: str | None = None
    white_subcategory: str | None = None
    gray_subcategory: str | None = None


class BrandDraft(CamelModel):
    brand: str | None = None
    line: str | None = None
    collaboration: str | None = None


class ColorDraft(CamelModel):
    primary: str
    undertones: list[str] = Field(default_factory=list)


class MetadataDraft(CamelModel):
    composition: list[CompositionEntry] | None = None
    size: str | None = None
    colors: list[ColorDraft] | None = None
    care_instructions: list[str] | None = None


class ConditionDraft(CamelModel):
    status: str | None = None
    defects: list[str] = Field(default_factory=list)


class VUFSConfidence(CamelModel):
    category: int = 0
    brand: int = 0
    metadata: int = 0
    condition: int = 0
    overall: int = 0


class VUFSSuggestionLists(CamelModel):
    category: list[str] = Field(default_factory=list)
    brand: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)


class VUFSExtractionResult(CamelModel):
    category: CategoryDraft
    brand: BrandDraft
    metadata: MetadataDraft
    condition: ConditionDraft
    detected_viewpoint: str | None = None
    confidence: VUFSConfidence
    suggestions: VUFSSuggestionLists


class VUFSExtractionResponse(CamelModel):
    message: str
    extraction: VUFSExtractionResult


# =============================================================================
# Feedback
# =============================================================================
class FeedbackRequest(CamelModel):
    item_id: str | None = None
    feedback_type: Literal['correction', 'confirmation', 'partial_correction']
    ai_suggestions: dict[str, Any] = Field(default_factory=dict)
    user_corrections: dict[str, Any] = Field(default_factory=dict)


class FeedbackResponse(CamelModel):
    message: str
    feedback_id: str
