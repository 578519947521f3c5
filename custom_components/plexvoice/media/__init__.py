"""Episode selection and playback for Plex Voice."""
from .playback import IdentityCache, PlaybackOrchestrator
from .selector import select_episode
from .shows import ShowController

__all__ = [
    "IdentityCache",
    "PlaybackOrchestrator",
    "ShowController",
    "select_episode",
]
