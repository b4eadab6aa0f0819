"""
Domain schemas for the relay API.
"""

from .generation import *

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
