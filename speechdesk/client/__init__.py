"""Client side of SpeechDesk: catalog loading and playback control."""

from speechdesk.client.languages import DEFAULT_LANGUAGE, LANGUAGES, Language
from speechdesk.client.loader import CatalogLoader, SelectionState
from speechdesk.client.playback import PlaybackController, PlaybackState
from speechdesk.client.proxy_client import ProxyRequestError, SpeechDeskClient

__all__ = [
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "CatalogLoader",
    "Language",
    "PlaybackController",
    "PlaybackState",
    "ProxyRequestError",
    "SelectionState",
    "SpeechDeskClient",
]
