"""
AI service module: Gemini-backed album art and playlist generation.
"""
from .album_service import AlbumArtService
from .base import (
    AIProviderBase,
    AIProviderError,
    AIResponse,
    EmptyResponseError,
    GeneratedImage,
    ImageInput,
    TokenUsage,
)
from .content_processor import extract_json, strip_code_fence
from .gemini_provider import GeminiProvider
from .prompt_manager import ContentType, PromptManager, PromptTemplate

__all__ = [
    # Base classes
    "AIProviderBase",
    "AIProviderError",
    "AIResponse",
    "EmptyResponseError",
    "GeneratedImage",
    "ImageInput",
    "TokenUsage",
    # Providers
    "GeminiProvider",
    # Core services
    "AlbumArtService",
    "ContentType",
    "PromptManager",
    "PromptTemplate",
    "extract_json",
    "strip_code_fence",
]
