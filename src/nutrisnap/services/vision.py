"""Food recognition service backed by a multimodal LLM."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from nutrisnap.domain.analysis import FoodItem
from nutrisnap.domain.errors import (
    EmptyResponseError,
    InvalidImageDataError,
    MalformedResponseError,
    MissingCredentialError,
    MissingFoodsFieldError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitedError,
    UpstreamSafetyBlockedError,
)
from nutrisnap.services.image_input import to_data_url
from nutrisnap.services.normalizer import normalize_foods

FOOD_ANALYSIS_PROMPT = """Analyze this food image and extract detailed nutrition information.

Return a JSON object with the following structure:
{
  "foods": [
    {
      "name": "food item name",
      "quantity": "serving size description (e.g., '1 cup', '100g', '1 piece')",
      "calories": number,
      "protein": number (in grams),
      "carbs": number (in grams),
      "fats": number (in grams)
    }
  ]
}

Instructions:
- Identify all visible food items in the image
- Estimate realistic quantities based on what you see
- Provide accurate nutrition values per item
- If multiple servings are visible, describe the quantity accordingly
- Round numbers to reasonable precision
- If you cannot identify a food item clearly, omit it
- Return an empty foods array if no food is detected

Be precise and realistic with your estimates."""

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URL_MIME = re.compile(r"data:([^;]+);base64")

# Upstream SDKs expose no structured error codes; first match wins.
_UPSTREAM_ERROR_RULES: tuple[tuple[tuple[str, ...], type[UpstreamError]], ...] = (
    (("API_KEY",), UpstreamAuthError),
    (("quota", "rate limit"), UpstreamRateLimitedError),
    (("safety",), UpstreamSafetyBlockedError),
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters for the vision model."""

    temperature: float = 0.4
    top_p: float = 0.95
    top_k: int = 40


@dataclass(frozen=True)
class InlineImage:
    """Decoded image bytes with their declared MIME type."""

    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        """Re-encode the image as a base64 data URL."""
        return to_data_url(self.data, self.mime_type)


class VisionClient(Protocol):
    """Interface for a multimodal completion provider."""

    async def generate(
        self, *, prompt: str, image: InlineImage, params: GenerationParams
    ) -> str | None:
        """Return the model's text completion for the prompt and image."""


@dataclass
class VisionService:
    """Service that prompts the vision model and validates its answer."""

    client: VisionClient | None
    params: GenerationParams = field(default_factory=GenerationParams)
    prompt: str = FOOD_ANALYSIS_PROMPT

    async def analyze(self, encoded_image: str) -> list[FoodItem]:
        """Detect foods in a base64 image (optionally a data URL)."""
        if self.client is None:
            raise MissingCredentialError
        image = parse_encoded_image(encoded_image)
        try:
            text = await self.client.generate(
                prompt=self.prompt, image=image, params=self.params
            )
        except Exception as exc:
            raise classify_upstream_error(exc) from exc
        if not text:
            raise EmptyResponseError
        try:
            return normalize_foods(text)
        except (MalformedResponseError, MissingFoodsFieldError):
            _logger.warning("Unparseable vision response: %s", text)
            raise


def parse_encoded_image(encoded_image: str) -> InlineImage:
    """Split a base64 string or data URL into MIME type and bytes."""
    mime_type = DEFAULT_MIME_TYPE
    if "data:" in encoded_image:
        match = _DATA_URL_MIME.search(encoded_image)
        if match:
            mime_type = match.group(1)
    payload = (
        encoded_image.split(",")[1] if "," in encoded_image else encoded_image
    )
    if not payload:
        raise InvalidImageDataError
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageDataError from exc
    return InlineImage(mime_type=mime_type, data=data)


def classify_upstream_error(exc: Exception) -> UpstreamError:
    """Map a provider exception to a typed upstream failure by its message."""
    message = str(exc) or type(exc).__name__
    for patterns, error_type in _UPSTREAM_ERROR_RULES:
        if any(pattern in message for pattern in patterns):
            return error_type()
    return UpstreamError(message)
