"""
Prompt templates for the album-cover and playlist generation calls.
"""
from enum import Enum
from typing import Dict, List, Optional

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class ContentType(str, Enum):
    """Content types for generation."""
    ALBUM_COVER_PROMPT = "album_cover_prompt"
    SELFIE_EDIT = "selfie_edit"
    PLAYLIST_VIBE = "playlist_vibe"


class PromptTemplate(BaseModel):
    """Prompt template structure."""
    name: str
    content_type: ContentType
    template: str
    variables: List[str]
    version: int = 1

    def format(self, **kwargs) -> str:
        """Format template with provided variables."""
        return self.template.format(**kwargs)


DEFAULT_PROMPTS: Dict[ContentType, PromptTemplate] = {
    ContentType.ALBUM_COVER_PROMPT: PromptTemplate(
        name="Album Cover Prompt",
        content_type=ContentType.ALBUM_COVER_PROMPT,
        template=(
            'Analyze the photo and the mood "{mood}". Create ONE paragraph that can be '
            "pasted into an image model to produce a striking album cover.{style_text} "
            "No chit-chat; output only the prompt."
        ),
        variables=["mood", "style_text"],
    ),
    ContentType.SELFIE_EDIT: PromptTemplate(
        name="Selfie To Album Cover",
        content_type=ContentType.SELFIE_EDIT,
        template=(
            "Transform this user's photo into a complete album cover. {prompt} "
            "Square 1:1 aspect, keep the user's face recognizable and well-integrated."
        ),
        variables=["prompt"],
    ),
    ContentType.PLAYLIST_VIBE: PromptTemplate(
        name="Playlist Vibe",
        content_type=ContentType.PLAYLIST_VIBE,
        template=(
            "Return ONLY JSON with keys:\n"
            '"vibe": string (1-2 sentences),\n'
            '"genre": string (primary genre),\n'
            '"songs": array of exactly {playlist_length} objects with "title" and "artist" strings.\n'
            'Mood: "{mood}". Album cover: "{album_prompt}".'
        ),
        variables=["playlist_length", "mood", "album_prompt"],
    ),
}


class PromptManager:
    """Looks up prompt templates and renders them."""

    def __init__(self, templates: Optional[Dict[ContentType, PromptTemplate]] = None):
        self.templates = dict(templates or DEFAULT_PROMPTS)

    def get_prompt(self, content_type: ContentType) -> PromptTemplate:
        """Get prompt template for content type."""
        return self.templates[content_type]

    def render(self, content_type: ContentType, **variables) -> str:
        """Render the template for ``content_type``."""
        prompt = self.get_prompt(content_type)
        missing = [name for name in prompt.variables if name not in variables]
        if missing:
            raise KeyError(f"missing prompt variables: {', '.join(missing)}")

        logger.debug("prompt_rendered", content_type=content_type.value, version=prompt.version)
        return prompt.format(**variables)

    @staticmethod
    def build_style_text(
        decade: Optional[List[str]] = None,
        genre: Optional[List[str]] = None,
        style: Optional[str] = None,
    ) -> str:
        """Turn optional style hints into a trailing instruction sentence."""
        bits = []
        if decade:
            bits.append(f"decade aesthetic: {', '.join(decade)}")
        if genre:
            bits.append(f"music genres: {', '.join(genre)}")
        if style:
            bits.append(f"art style: {style}")
        return f" Incorporate: {'; '.join(bits)}." if bits else ""
