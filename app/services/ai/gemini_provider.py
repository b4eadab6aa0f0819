"""
Google Gemini provider implementation.
"""
import time
from typing import Any, List, Optional, Sequence

import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.core.config import get_settings
from app.services.ai.base import (
    AIProviderBase,
    AIProviderError,
    AIResponse,
    EmptyResponseError,
    GeneratedImage,
    ImageInput,
    TokenUsage,
)

logger = structlog.get_logger(__name__)
settings = get_settings()


class GeminiProvider(AIProviderBase):
    """Gemini text and image models through the Google GenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        text_model: Optional[str] = None,
        image_model: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ):
        super().__init__(api_key or settings.ai_api_key)
        self.client = client or genai.Client(api_key=self.api_key)

        self.default_model = text_model or settings.AI_MODEL_TEXT
        self.image_model = image_model or settings.AI_MODEL_IMAGE

    async def generate(
        self,
        prompt: str,
        images: Sequence[ImageInput] = (),
        model: Optional[str] = None,
        response_mime_type: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate text using Gemini."""
        model = model or self.default_model
        config = None
        if response_mime_type:
            config = types.GenerateContentConfig(response_mime_type=response_mime_type)

        start_time = time.time()
        response = await self._generate_content(
            model=model,
            contents=self._build_contents(prompt, images),
            config=config,
        )
        latency_ms = int((time.time() - start_time) * 1000)

        content = (response.text or "").strip()
        if not content:
            logger.error("gemini_empty_text", model=model)
            raise EmptyResponseError("Model returned no text.")

        usage = self._extract_usage(response)
        logger.info(
            "gemini_generation_complete",
            model=model,
            tokens=usage.total_tokens if usage else None,
            latency_ms=latency_ms,
        )

        return AIResponse(
            content=content,
            model=model,
            latency_ms=latency_ms,
            usage=usage,
        )

    async def generate_image(
        self,
        prompt: str,
        image: ImageInput,
        model: Optional[str] = None,
        **kwargs
    ) -> GeneratedImage:
        """Edit a source image with an image-capable Gemini model."""
        model = model or self.image_model
        config = types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"])

        start_time = time.time()
        response = await self._generate_content(
            model=model,
            contents=self._build_contents(prompt, [image]),
            config=config,
        )
        latency_ms = int((time.time() - start_time) * 1000)

        for candidate in response.candidates or []:
            parts = candidate.content.parts if candidate.content else None
            for part in parts or []:
                if part.inline_data and part.inline_data.data:
                    logger.info(
                        "gemini_image_generated",
                        model=model,
                        mime_type=part.inline_data.mime_type,
                        size_bytes=len(part.inline_data.data),
                        latency_ms=latency_ms,
                    )
                    return GeneratedImage(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type,
                                    model=model,
                        latency_ms=latency_ms,
                    )

        logger.error("gemini_image_missing", model=model)
        raise EmptyResponseError("Image model did not return image bytes.")

    async def _generate_content(self, **kwargs: Any) -> types.GenerateContentResponse:
        try:
            return await self.client.aio.models.generate_content(**kwargs)
        except genai_errors.APIError as e:
            logger.error(
                "gemini_api_error",
                model=kwargs.get("model"),
                status_code=e.code,
                status=e.status,
                error=e.message,
            )
            raise AIProviderError(e.message or str(e)) from e
        except Exception as e:
            logger.error("gemini_request_failed", model=kwargs.get("model"), error=str(e))
            raise AIProviderError(str(e)) from e

    @staticmethod
    def _build_contents(prompt: str, images: Sequence[ImageInput]) -> List[types.Part]:
        parts = [types.Part.from_text(text=prompt)]
        for image in images:
            parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))
        return parts

    @staticmethod
    def _extract_usage(response: types.GenerateContentResponse) -> Optional[TokenUsage]:
        metadata = response.usage_metadata
        if metadata is None:
            return None
        prompt_tokens = metadata.prompt_token_count or 0
        completion_tokens = metadata.candidates_token_count or 0
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=metadata.total_token_count or prompt_tokens + completion_tokens,
        )
