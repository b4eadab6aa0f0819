"""
Album art and playlist generation.

Builds prompts, calls the AI provider once per request and reshapes its
output into the endpoint response models. Provider failures are converted
to relay errors here; nothing is retried or cached.
"""
import base64
from typing import Optional

import structlog
from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import MalformedUpstreamResponseError, UpstreamGenerationError
from app.domain.schemas.generation import (
    AlbumCoverPromptRequest,
    AlbumCoverPromptResponse,
    PlaylistVibeRequest,
    PlaylistVibeResponse,
    SelfieEditRequest,
    SelfieEditResponse,
)
from app.services.ai.base import AIProviderBase, AIProviderError, ImageInput
from app.services.ai.content_processor import extract_json
from app.services.ai.prompt_manager import ContentType, PromptManager

logger = structlog.get_logger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


class AlbumArtService:
    """Front door for the three AI proxy operations."""

    def __init__(
        self,
        provider: AIProviderBase,
        prompt_manager: Optional[PromptManager] = None,
    ):
        self.provider = provider
        self.prompts = prompt_manager or PromptManager()

    async def generate_cover_prompt(
        self, request: AlbumCoverPromptRequest
    ) -> AlbumCoverPromptResponse:
        """Turn a photo and a mood into a text prompt for an image model."""
        prompt = self.prompts.render(
            ContentType.ALBUM_COVER_PROMPT,
            mood=request.mood,
            style_text=self.prompts.build_style_text(
                decade=request.styles.decade,
                genre=request.styles.genre,
                style=request.styles.style,
            ),
        )

        try:
            response = await self.provider.generate(
                prompt,
                images=[ImageInput(data=request.image_bytes, mime_type=request.image_mime_type)],
            )
        except AIProviderError as e:
            logger.error("album_cover_prompt_failed", error=str(e))
            raise UpstreamGenerationError("Error generating album cover prompt.") from e

        return AlbumCoverPromptResponse(prompt=response.content)

    async def edit_selfie(self, request: SelfieEditRequest) -> SelfieEditResponse:
        """Edit a selfie into a square album cover image."""
        prompt = self.prompts.render(ContentType.SELFIE_EDIT, prompt=request.prompt)

        try:
            image = await self.provider.generate_image(
                prompt,
                ImageInput(data=request.image_bytes, mime_type=request.image_mime_type),
            )
        except AIProviderError as e:
            # Often a safety filter; the client lets the user adjust the prompt
            logger.error("selfie_edit_failed", error=str(e))
            raise UpstreamGenerationError(f"Error editing selfie into album cover: {e}") from e

        return SelfieEditResponse(
            image_data=base64.b64encode(image.data).decode("ascii"),
            mime_type=image.mime_type or request.image_mime_type or DEFAULT_IMAGE_MIME_TYPE,
        )

    async def generate_playlist_vibe(self, request: PlaylistVibeRequest) -> PlaylistVibeResponse:
        """Describe the vibe and list exactly ``playlist_length`` songs."""
        prompt = self.prompts.render(
            ContentType.PLAYLIST_VIBE,
            playlist_length=request.playlist_length,
            mood=request.mood,
            album_prompt=request.album_prompt,
        )

        try:
            response = await self.provider.generate(
                prompt,
                response_mime_type="application/json",
            )
        except AIProviderError as e:
            logger.error("playlist_vibe_failed", error=str(e))
            raise UpstreamGenerationError("Error generating playlist vibe.") from e

        try:
            playlist = PlaylistVibeResponse.model_validate(extract_json(response.content))
        except (ValueError, SchemaValidationError) as e:
            logger.error("playlist_vibe_malformed", error=str(e))
            raise MalformedUpstreamResponseError("AI service returned malformed playlist JSON.") from e

        if len(playlist.songs) < request.playlist_length:
            logger.error(
                "playlist_vibe_too_short",
                requested=request.playlist_length,
                returned=len(playlist.songs),
            )
            raise MalformedUpstreamResponseError(
                f"AI service returned {len(playlist.songs)} songs, expected {request.playlist_length}."
            )

        playlist.songs = playlist.songs[: request.playlist_length]
        return playlist
