"""
Base AI provider interface and abstract classes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass
class TokenUsage:
    """Token usage tracking."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ImageInput:
    """Raw image sent to a model alongside a prompt."""
    data: bytes
    mime_type: str


@dataclass
class AIResponse:
    """Standard AI response format."""
    content: str
    model: str
    latency_ms: int
    usage: Optional[TokenUsage] = None


@dataclass
class GeneratedImage:
    """Image returned by an image-capable model."""
    data: bytes
    mime_type: Optional[str]
    model: str
    latency_ms: int


class AIProviderBase(ABC):
    """Base class for AI providers."""

    def __init__(self, api_key: str, **kwargs):
        self.api_key = api_key
        self.default_model: str = ""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        images: Sequence[ImageInput] = (),
        model: Optional[str] = None,
        response_mime_type: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate text, optionally conditioned on images."""
        pass

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        image: ImageInput,
        model: Optional[str] = None,
        **kwargs
    ) -> GeneratedImage:
        """Produce a new image from a source image and an instruction."""
        pass


class AIProviderError(Exception):
    """Base exception for AI provider errors."""
    pass


class EmptyResponseError(AIProviderError):
    """Raised when the model returns no usable content."""
    pass
