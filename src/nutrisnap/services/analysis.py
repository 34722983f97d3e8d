"""End-to-end food image analysis."""

import logging
from dataclasses import dataclass

from nutrisnap.domain.analysis import AnalysisResult
from nutrisnap.services.image_input import validate_image
from nutrisnap.services.nutrition import NutritionService
from nutrisnap.services.vision import VisionService

_logger = logging.getLogger(__name__)


@dataclass
class FoodAnalysisService:
    """Validates an image, detects foods, and enriches their macros."""

    vision_service: VisionService
    nutrition_service: NutritionService

    async def analyze_image(
        self, data: bytes, content_type: str | None
    ) -> AnalysisResult:
        """Analyze raw image bytes with a declared content type."""
        data_url = validate_image(data, content_type)
        foods = await self.vision_service.analyze(data_url)
        enriched = await self.nutrition_service.enrich(foods)
        _logger.info(
            "Food analysis finished: detected=%s content_type=%s",
            len(enriched),
            content_type,
        )
        return AnalysisResult(foods=enriched)
