"""
Schemas for the AI generation endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""
import base64
import binascii
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_PLAYLIST_LENGTH = 100


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImagePayload(CamelModel):
    """Base64 image supplied by the client."""
    image_data: str = Field(..., min_length=1, description="Base64-encoded image bytes")
    image_mime_type: str = Field(..., min_length=1, description="e.g. image/jpeg")

    @field_validator("image_data")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("imageData must be base64-encoded")
        return v

    @property
    def image_bytes(self) -> bytes:
        """Decoded image bytes."""
        return base64.b64decode(self.image_data)


class StyleHints(CamelModel):
    """Optional style directions for the album cover."""
    decade: List[str] = Field(default_factory=list)
    genre: List[str] = Field(default_factory=list)
    style: Optional[str] = None


class AlbumCoverPromptRequest(ImagePayload):
    """Request for turning a photo and mood into an image prompt."""
    mood: str = Field(..., min_length=1)
    styles: StyleHints


class AlbumCoverPromptResponse(CamelModel):
    """Generated image prompt."""
    prompt: str


class SelfieEditRequest(ImagePayload):
    """Request for editing a selfie into an album cover."""
    prompt: str = Field(..., min_length=1)


class SelfieEditResponse(CamelModel):
    """Generated album cover image."""
    image_data: str = Field(..., description="Base64-encoded image bytes")
    mime_type: str


class PlaylistVibeRequest(CamelModel):
    """Request for a playlist matching a mood and album cover."""
    mood: str = Field(..., min_length=1)
    album_prompt: str = Field(..., min_length=1)
    playlist_length: int = Field(..., gt=0, le=MAX_PLAYLIST_LENGTH)


class Song(CamelModel):
    """Single playlist entry."""
    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)


class PlaylistVibeResponse(CamelModel):
    """Playlist description and songs."""
    vibe: str
    genre: str
    songs: List[Song]


__all__ = [
    "AlbumCoverPromptRequest",
    "AlbumCoverPromptResponse",
    "ImagePayload",
    "PlaylistVibeRequest",
    "PlaylistVibeResponse",
    "SelfieEditRequest",
    "SelfieEditResponse",
    "Song",
    "StyleHints",
]
