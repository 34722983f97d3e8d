"""OpenAI Responses API client for food image analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrisnap.services.vision import GenerationParams, InlineImage, VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout_seconds: float
    ) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, timeout=timeout_seconds, max_retries=0
            ),
            model=model,
        )

    async def generate(
        self, *, prompt: str, image: InlineImage, params: GenerationParams
    ) -> str | None:
        """Call OpenAI Responses API; top-k has no equivalent and is dropped."""
        response = await self.client.responses.create(
            model=self.model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image.to_data_url()},
                    ],
                }
            ],
            temperature=params.temperature,
            top_p=params.top_p,
            store=False,
        )
        return response.output_text
