"""Constants for Plex Voice - voice control for a Plex Media Server."""
import json
from pathlib import Path
from typing import Final

DOMAIN: Final = "plexvoice"

# Cache version at module load time to avoid blocking calls in async context
def _load_version() -> str:
    """Load version from manifest.json once at startup."""
    try:
        manifest_path = Path(__file__).parent / "manifest.json"
        with open(manifest_path) as f:
            return json.load(f).get("version", "unknown")
    except Exception:
        return "unknown"

VERSION: Final = _load_version()


def get_version() -> str:
    """Get cached version."""
    return VERSION

# =============================================================================
# SERVER CONNECTION
# =============================================================================
CONF_HOST: Final = "host"
CONF_PORT: Final = "port"
CONF_TOKEN: Final = "token"
CONF_SSL: Final = "ssl"
CONF_VERIFY_SSL: Final = "verify_ssl"
CONF_LIBRARY_SECTION: Final = "library_section"
CONF_CLIENT_IDENTIFIER: Final = "client_identifier"

DEFAULT_PORT: Final = 32400
DEFAULT_SSL: Final = False
DEFAULT_VERIFY_SSL: Final = True
DEFAULT_LIBRARY_SECTION: Final = "1"

# =============================================================================
# PLAYER SETTINGS - Options flow
# =============================================================================
CONF_PLAYER_NAME: Final = "player_name"
CONF_PLAYER_ADDRESS: Final = "player_address"
CONF_SERVER_IDENTIFIER: Final = "server_identifier"
CONF_TOP_RATED_FRACTION: Final = "top_rated_fraction"

DEFAULT_PLAYER_NAME: Final = ""
DEFAULT_PLAYER_ADDRESS: Final = ""  # Empty = discover via /clients
DEFAULT_SERVER_IDENTIFIER: Final = ""  # Empty = fetch from server root
DEFAULT_TOP_RATED_FRACTION: Final = 0.10

# =============================================================================
# PLEX CLIENT HEADERS - Sent as X-Plex-* on every request
# =============================================================================
PLEX_PRODUCT: Final = "Plex Voice"
PLEX_DEVICE: Final = "Home Assistant"
PLEX_DEVICE_NAME: Final = "Plex Voice"

# =============================================================================
# MATCHING / SELECTION
# =============================================================================
MIN_MATCH_SCORE: Final = 0.2

# "203" spoken as an episode number means season 2, episode 3
COMBINED_EPISODE_THRESHOLD: Final = 100

ON_DECK_LIMIT: Final = 6

# =============================================================================
# PLAYBACK COMMAND
# =============================================================================
PLAY_QUEUE_WINDOW: Final = 200
PLAYBACK_PROTOCOL: Final = "http"
PLAYBACK_COMMAND_ID: Final = 1

# =============================================================================
# INTENTS
# =============================================================================
INTENT_START_SHOW: Final = "PlexStartShow"
INTENT_START_RANDOM_SHOW: Final = "PlexStartRandomShow"
INTENT_START_SPECIFIC_EPISODE: Final = "PlexStartSpecificEpisode"
INTENT_START_HIGH_RATED_EPISODE: Final = "PlexStartHighRatedEpisode"
INTENT_ON_DECK: Final = "PlexOnDeck"

SLOT_SHOW_NAME: Final = "show_name"
SLOT_SEASON_NUMBER: Final = "season_number"
SLOT_EPISODE_NUMBER: Final = "episode_number"

# =============================================================================
# API TIMEOUT - Shared timeout for Plex API calls
# =============================================================================
API_TIMEOUT: Final = 15  # seconds
