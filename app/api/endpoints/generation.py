"""
AI generation endpoints.

Thin proxies to the generative-AI provider so the browser never sees the
API key.
"""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_album_service
from app.domain.schemas.generation import (
    AlbumCoverPromptRequest,
    AlbumCoverPromptResponse,
    PlaylistVibeRequest,
    PlaylistVibeResponse,
    SelfieEditRequest,
    SelfieEditResponse,
)
from app.services.ai import AlbumArtService

router = APIRouter()


@router.post("/generate-album-cover-prompt", response_model=AlbumCoverPromptResponse)
async def generate_album_cover_prompt(
    request: AlbumCoverPromptRequest,
    service: AlbumArtService = Depends(get_album_service),
) -> AlbumCoverPromptResponse:
    """Turn a photo, mood and style hints into an image-model prompt."""
    return await service.generate_cover_prompt(request)


@router.post("/edit-selfie-into-album-cover", response_model=SelfieEditResponse)
async def edit_selfie_into_album_cover(
    request: SelfieEditRequest,
    service: AlbumArtService = Depends(get_album_service),
) -> SelfieEditResponse:
    """Edit a selfie into an album cover image."""
    return await service.edit_selfie(request)


@router.post("/generate-playlist-vibe", response_model=PlaylistVibeResponse)
async def generate_playlist_vibe(
    request: PlaylistVibeRequest,
    service: AlbumArtService = Depends(get_album_service),
) -> PlaylistVibeResponse:
    """
    Generate a playlist description and songs.

    Returns:
        ``vibe``, ``genre`` and exactly ``playlistLength`` songs
    """
    return await service.generate_playlist_vibe(request)
