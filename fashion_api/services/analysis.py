"""
Fashion image analysis orchestration.

One analysis runs four independent best-effort sub-calls on the original
image bytes, concurrently:

1. Background removal + re-upload of the processed PNG to S3
2. Label detection (Rekognition DetectLabels)
3. Text detection (Rekognition DetectText)
4. Fashion classification (SageMaker endpoint)

A failing sub-call only clears its own fields; the others continue.
Results are merged with the label/text heuristics into an
ImageAnalysisResult and, on demand, into a VUFS draft.
"""

import asyncio
import logging
import time
from pathlib import PurePath
from typing import Any

from fashion_api.clients.aws import AWSClient
from fashion_api.config import Settings, get_settings
from fashion_api.schemas.analysis import (
    AnalysisSuggestions,
    BrandDraft,
    CategoryDraft,
    ColorDraft,
    CompositionEntry,
    ConditionDraft,
    ImageAnalysisResult,
    MetadataDraft,
    VUFSConfidence,
    VUFSExtractionResult,
    VUFSSuggestion,
    VUFSSuggestionLists,
)
from fashion_api.services import fashion_attributes as attrs
from fashion_api.services.image import ImageService
from fashion_api.services.vufs import (
    APPAREL_MATERIALS,
    APPAREL_PIECE_TYPES,
    FOOTWEAR_MATERIALS,
    FOOTWEAR_TYPES,
    VUFS_BRANDS,
    VUFS_COLORS,
    strip_mark,
)


logger = logging.getLogger(__name__)


BLUE_SUBCATEGORIES = {
    'Shirts': 'Tops',
    'Tops': 'Tops',
    'Tank Tops': 'Tops',
    'Pants': 'Bottoms',
    'Shorts': 'Bottoms',
    'Dresses': 'Dresses',
    'Jackets': 'Outerwear',
    'Sweats': 'Casual',
    'Accessories': 'Accessories',
}

FOOTWEAR_BLUE_SUBCATEGORIES = {
    'Sneakers': 'Athletic',
    'Boots': 'Boots',
    'Sandals': 'Casual',
    'Dress Shoes': 'Formal',
    'Athletic': 'Athletic',
}

BRAND_LINES = {
    'Adidas': ['originals', 'performance', 'neo'],
    'Nike': ['air', 'dunk', 'jordan', 'sb'],
    'Zara': ['basic', 'trf', 'woman'],
}

CARE_INSTRUCTIONS = {
    'Cotton': ['Machine wash cold', 'Tumble dry low', 'Iron medium heat'],
    'Polyester': ['Machine wash warm', 'Tumble dry low', 'Do not iron'],
    'Wool': ['Hand wash cold', 'Lay flat to dry', 'Dry clean recommended'],
    'Silk': ['Hand wash cold', 'Air dry', 'Dry clean only'],
    'Denim': ['Machine wash cold', 'Hang dry', 'Iron medium heat'],
}

WEAR_KEYWORDS = ['worn', 'faded', 'stain', 'hole', 'tear', 'damage']


class FashionAnalysisService:
    """
    Orchestrates cloud AI calls into a single fashion analysis.

    Blocking SDK calls (boto3, rembg) run in worker threads so that the
    four sub-calls overlap.
    """

    def __init__(
        self,
        aws: AWSClient,
        image_service: ImageService | None = None,
        settings: Settings | None = None,
    ):
        self.aws = aws
        self.settings = settings or get_settings()
        self.image_service = image_service or ImageService(self.settings)

    # =========================================================================
    # Sub-calls (each absorbs its own failure)
    # =========================================================================
    async def _remove_background(self, image_bytes: bytes, filename: str) -> str | None:
        if not self.settings.enable_background_removal:
            return None
        try:
            processed = await asyncio.to_thread(self.image_service.remove_background, image_bytes)
            stem = PurePath(filename).stem or 'image'
            key = f'processed/{int(time.time() * 1000)}-{stem}.png'
            return await asyncio.to_thread(self.aws.upload_image, processed, key, 'image/png')
        except Exception as e:
            logger.warning(f'Background removal failed for {filename}: {e}')
            return None

    async def _detect_labels(self, image_bytes: bytes) -> list[dict[str, Any]]:
        try:
            return await asyncio.to_thread(self.aws.detect_labels, image_bytes)
        except Exception as e:
            logger.warning(f'Label detection failed: {e}')
            return []

    async def _detect_text(self, image_bytes: bytes) -> list[dict[str, Any]]:
        try:
            return await asyncio.to_thread(self.aws.detect_text, image_bytes)
        except Exception as e:
            logger.warning(f'Text detection failed: {e}')
            return []

    async def _classify(self, image_bytes: bytes) -> dict[str, Any] | None:
        try:
            return await asyncio.to_thread(self.aws.invoke_fashion_model, image_bytes)
        except Exception as e:
            logger.warning(f'Fashion classification failed: {e}')
            return None

    # =========================================================================
    # Analysis
    # =========================================================================
    async def process_item_image(self, image_bytes: bytes, filename: str) -> ImageAnalysisResult:
        """
        Analyze one fashion item image.

        Args:
            image_bytes: Encoded image (JPEG/PNG/WebP)
            filename: Original filename, used for the processed object key

        Returns:
            ImageAnalysisResult with whatever the sub-calls produced
        """
        start = time.perf_counter()
        processed_url, labels, text_detections, prediction = await asyncio.gather(
            self._remove_background(image_bytes, filename),
            self._detect_labels(image_bytes),
            self._detect_text(image_bytes),
            self._classify(image_bytes),
        )

        result = self.analyze_attributes(labels, text_detections, prediction)
        result.background_removed = processed_url is not None
        result.processed_image_url = processed_url

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f'Analyzed {filename} in {elapsed_ms:.0f}ms: domain={result.domain} '
            f'brand={result.detected_brand} overall={result.confidence.overall}'
        )
        return result

    def analyze_attributes(
        self,
        labels: list[dict[str, Any]],
        text_detections: list[dict[str, Any]],
        prediction: dict[str, Any] | None = None,
    ) -> ImageAnalysisResult:
        """Merge raw detections and an optional model prediction into an analysis."""
        detected_text = attrs.extract_text_lines(text_detections)
        domain = attrs.detect_domain(labels, prediction)
        brand = attrs.detect_brand(detected_text, prediction)
        piece_type = attrs.detect_piece_type(labels, domain, prediction)
        color = attrs.detect_color(labels, prediction)
        material = attrs.detect_material(labels, domain, prediction)
        confidence = attrs.calculate_confidence(brand, piece_type, color, material, prediction)
        composition = attrs.parse_composition(detected_text)

        return ImageAnalysisResult(
            domain=domain,
            detected_brand=brand,
            detected_piece_type=piece_type,
            detected_color=color,
            detected_material=composition[0].material if composition else material,
            detected_viewpoint=attrs.detect_viewpoint(labels, detected_text),
            detected_size=attrs.extract_size(detected_text),
            parsed_composition=composition or None,
            confidence=confidence,
            raw_labels=labels,
            detected_text=detected_text,
        )

    def build_suggestions(self, analysis: ImageAnalysisResult) -> AnalysisSuggestions:
        """Suggestion payload for the item form; low overall confidence needs review."""
        return AnalysisSuggestions(
            vufs_data=VUFSSuggestion(
                domain=analysis.domain,
                brand=analysis.detected_brand,
                piece_type=analysis.detected_piece_type,
                color=analysis.detected_color,
                material=analysis.detected_material,
            ),
            confidence=analysis.confidence,
            needs_review=analysis.confidence.overall < self.settings.ai_review_threshold,
        )

    # =========================================================================
    # VUFS extraction
    # =========================================================================
    async def extract_vufs_properties(self, image_bytes: bytes, filename: str) -> VUFSExtractionResult:
        analysis = await self.process_item_image(image_bytes, filename)
        return self.build_vufs_draft(analysis)

    def build_vufs_draft(self, analysis: ImageAnalysisResult) -> VUFSExtractionResult:
        category = self._category_hierarchy(analysis)
        brand = self._brand_hierarchy(analysis)
        metadata = self._item_metadata(analysis)
        condition = self._condition(analysis)

        return VUFSExtractionResult(
            category=category,
            brand=brand,
            metadata=metadata,
            condition=condition,
            detected_viewpoint=analysis.detected_viewpoint,
            confidence=self._vufs_confidence(analysis, category, brand, metadata, condition),
            suggestions=self._suggestion_lists(analysis),
        )

    def _category_hierarchy(self, analysis: ImageAnalysisResult) -> CategoryDraft:
        labels = attrs.label_names(analysis.raw_labels)
        piece_type = analysis.detected_piece_type

        if analysis.domain == 'APPAREL' and piece_type:
            if any('formal' in label or 'business' in label for label in labels):
                gray = 'Formal'
            elif any('sport' in label or 'athletic' in label for label in labels):
                gray = 'Athletic'
            else:
                gray = 'Casual'
            return CategoryDraft(
                page='Apparel',
                blue_subcategory=BLUE_SUBCATEGORIES.get(piece_type, 'Other'),
                white_subcategory=piece_type,
                gray_subcategory=gray,
            )

        if analysis.domain == 'FOOTWEAR':
            if any('running' in label or 'sport' in label for label in labels):
                gray = 'Athletic'
            elif any('dress' in label or 'formal' in label for label in labels):
                gray = 'Formal'
            else:
                gray = 'Casual'
            blue = FOOTWEAR_BLUE_SUBCATEGORIES.get(piece_type, 'Casual') if piece_type else 'Shoes'
            return CategoryDraft(
                page='Footwear',
                blue_subcategory=blue,
                white_subcategory=piece_type or 'Shoes',
                gray_subcategory=gray,
            )

        return CategoryDraft()

    def _brand_hierarchy(self, analysis: ImageAnalysisResult) -> BrandDraft:
        if not analysis.detected_brand:
            return BrandDraft()

        text = ' '.join(analysis.detected_text).lower()
        lines = BRAND_LINES.get(strip_mark(analysis.detected_brand), [])
        line = next((candidate for candidate in lines if candidate in text), None)

        collaboration = None
        if ' x ' in text:
            partner = text.split(' x ', 1)[1].split(' ')[0]
            collaboration = partner or None

        return BrandDraft(brand=analysis.detected_brand, line=line, collaboration=collaboration)

    def _item_metadata(self, analysis: ImageAnalysisResult) -> MetadataDraft:
        metadata = MetadataDraft(size=analysis.detected_size)

        if analysis.parsed_composition:
            metadata.composition = analysis.parsed_composition
        elif analysis.detected_material:
            metadata.composition = [CompositionEntry(material=analysis.detected_material, percentage=100)]

        if analysis.detected_color:
            lowered = [c.lower() for c in VUFS_COLORS]
            undertones = [
                label.get('Name', '')
                for label in analysis.raw_labels
                if 'color' in str(label.get('Name', '')).lower()
                or any(c in str(label.get('Name', '')).lower() for c in lowered)
            ]
            metadata.colors = [ColorDraft(primary=analysis.detected_color, undertones=undertones[:2])]

        if analysis.detected_material:
            metadata.care_instructions = CARE_INSTRUCTIONS.get(
                analysis.detected_material, ['Follow care label instructions']
            )

        return metadata

    def _condition(self, analysis: ImageAnalysisResult) -> ConditionDraft:
        quality = analysis.confidence.overall / 100
        labels = attrs.label_names(analysis.raw_labels)
        defects = [k for k in WEAR_KEYWORDS if any(k in label for label in labels)]

        if quality > 0.8 and not defects:
            status = 'Excellent Used'
        elif quality > 0.6 and len(defects) <= 1:
            status = 'Good'
        elif quality > 0.4:
            status = 'Fair'
        else:
            status = 'Poor'

        return ConditionDraft(status=status, defects=defects)

    def _vufs_confidence(
        self,
        analysis: ImageAnalysisResult,
        category: CategoryDraft,
        brand: BrandDraft,
        metadata: MetadataDraft,
        condition: ConditionDraft,
    ) -> VUFSConfidence:
        scores = analysis.confidence
        category_score = min(scores.piece_type + 10, 90) if category.page else 0
        brand_score = min(scores.brand + 15, 95) if brand.brand else 0
        metadata_score = (
            int(min((scores.color + scores.material) / 2 + 10, 85))
            if metadata.composition or metadata.colors
            else 0
        )
        condition_score = 75 if condition.status else 0

        return VUFSConfidence(
            category=category_score,
            brand=brand_score,
            metadata=metadata_score,
            condition=condition_score,
            overall=round((category_score + brand_score + metadata_score + condition_score) / 4),
        )

    def _suggestion_lists(self, analysis: ImageAnalysisResult) -> VUFSSuggestionLists:
        if analysis.domain == 'APPAREL':
            categories, materials = APPAREL_PIECE_TYPES[:5], APPAREL_MATERIALS[:8]
        elif analysis.domain == 'FOOTWEAR':
            categories, materials = FOOTWEAR_TYPES[:5], FOOTWEAR_MATERIALS[:8]
        else:
            categories, materials = [], []

        return VUFSSuggestionLists(
            category=categories,
            brand=VUFS_BRANDS[:10],
            colors=VUFS_COLORS[:10],
            materials=materials,
        )
