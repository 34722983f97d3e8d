"""Google Gemini client for food image analysis."""

from dataclasses import dataclass

from google import genai
from google.genai import types

from nutrisnap.services.vision import GenerationParams, InlineImage, VisionClient


@dataclass
class GeminiVisionClient(VisionClient):
    """Vision client backed by the Gemini generate_content API."""

    client: genai.Client
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout_seconds: float
    ) -> "GeminiVisionClient":
        """Create a Gemini vision client with a per-request timeout."""
        http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
        return cls(
            client=genai.Client(api_key=api_key, http_options=http_options),
            model=model,
        )

    async def generate(
        self, *, prompt: str, image: InlineImage, params: GenerationParams
    ) -> str | None:
        """Send the prompt with the inline image and return the text."""
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=[
                prompt,
                types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            ],
            config=types.GenerateContentConfig(
                temperature=params.temperature,
                top_p=params.top_p,
                top_k=params.top_k,
            ),
        )
        block_reason = _block_reason(response)
        if block_reason:
            raise RuntimeError(
                f"Image was blocked by Gemini safety filters ({block_reason})"
            )
        return response.text


def _block_reason(response: types.GenerateContentResponse) -> str | None:
    """Return why Gemini refused the prompt or stopped the answer, if it did."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        return str(block_reason)
    candidates = getattr(response, "candidates", None) or []
    if candidates and candidates[0].finish_reason == types.FinishReason.SAFETY:
        return "SAFETY"
    return None
