"""Playback controller: one audio element, one live object URL.

States:
  IDLE      : nothing playing; a previous result may still be loaded
  GENERATING: a synthesis request is in flight
  PLAYING   : the element is playing the current result
  PAUSED    : playback suspended, position kept
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import enum
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from speechdesk.client.loader import SelectionState
from speechdesk.client.media import (
    AudioElement,
    AutoplayBlockedError,
    MediaPlaybackError,
    ObjectURLStore,
)
from speechdesk.client.notifications import Notification, Notifier
from speechdesk.client.proxy_client import ProxyRequestError, SpeechDeskClient

logger = logging.getLogger(__name__)

MAX_CHARACTERS = 1000
DOWNLOAD_FILENAME = "speech.mp3"
AUDIO_MIME_TYPE = "audio/mpeg"
PLAY_DELAY_SECONDS = 0.1
DEFAULT_VOLUME = 80


class PlaybackState(enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"
    PLAYING = "playing"
    PAUSED = "paused"


class ConversionInProgressError(RuntimeError):
    """Raised when a conversion is requested while another is in flight."""


class PlaybackController:
    """Mediates between the proxy, the audio element and the object URL slot."""

    def __init__(
        self,
        client: SpeechDeskClient,
        element: AudioElement,
        url_store: ObjectURLStore,
        notifier: Notifier,
        selection: SelectionState | None = None,
        max_characters: int = MAX_CHARACTERS,
        play_delay: float = PLAY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_characters < 1:
            raise ValueError("max_characters must be at least 1")
        self._client = client
        self._element = element
        self._urls = url_store
        self._notifier = notifier
        self.selection = selection if selection is not None else SelectionState()
        self._max_characters = max_characters
        self._play_delay = play_delay
        self._sleep = sleep

        self._state = PlaybackState.IDLE
        self._text = ""
        self._audio_url: str | None = None
        self._sequence = 0
        self._torn_down = False
        self._volume = DEFAULT_VOLUME

        self._element.on_ended = self.handle_ended
        self._element.volume = self._volume / 100

    # --- Read-only state ---

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def audio_url(self) -> str | None:
        return self._audio_url

    @property
    def text(self) -> str:
        return self._text

    @property
    def volume(self) -> int:
        return self._volume

    @property
    def max_characters(self) -> int:
        return self._max_characters

    @property
    def character_count(self) -> int:
        return len(self._text)

    @property
    def remaining(self) -> int:
        return max(self._max_characters - len(self._text), 0)

    @property
    def character_percentage(self) -> float:
        return len(self._text) / self._max_characters * 100

    @property
    def can_convert(self) -> bool:
        return (
            bool(self._text.strip())
            and bool(self.selection.selected_voice)
            and self._state is not PlaybackState.GENERATING
            and not self._torn_down
        )

    # --- Inputs ---

    def set_text(self, text: str) -> bool:
        """Accept an edit only if it fits the character limit."""
        if len(text) > self._max_characters:
            return False
        self._text = text
        return True

    def set_volume(self, volume: float) -> None:
        self._volume = int(min(max(volume, 0), 100))
        self._element.volume = self._volume / 100

    # --- Actions ---

    async def convert(self) -> bool:
        """Synthesize the current text and start playback.

        Returns True when a new result was loaded. Raises
        ``ConversionInProgressError`` if a conversion is already in flight.
        """
        if self._state is PlaybackState.GENERATING:
            raise ConversionInProgressError("A conversion is already in progress")
        if self._torn_down or not self._text.strip() or not self.selection.selected_voice:
            return False

        self._rewind()
        self._set_state(PlaybackState.GENERATING)
        self._sequence += 1
        ticket = self._sequence

        try:
            encoded = await self._client.text_to_speech(
                self._text,
                self.selection.selected_voice,
                model=self.selection.selected_model or None,
                stability=self.selection.stability,
                similarity_boost=self.selection.similarity_boost,
            )
            audio = base64.b64decode(encoded, validate=True)
            if not audio:
                raise ProxyRequestError("Received an empty audio payload")
        except (ProxyRequestError, binascii.Error, ValueError) as exc:
            if ticket != self._sequence:
                logger.debug("Discarding failure of superseded request #%d", ticket)
                return False
            message = getattr(exc, "message", None) or str(exc) or "Failed to generate speech"
            logger.error("Error generating speech: %s", message)
            self._set_state(PlaybackState.IDLE)
            self._notifier.notify(Notification("Error", message, variant="destructive"))
            return False

        if ticket != self._sequence:
            logger.debug("Discarding response of superseded request #%d", ticket)
            return False

        self._replace_audio(audio)
        self._set_state(PlaybackState.IDLE)

        # Give the element a moment to pick up the new source
        await self._sleep(self._play_delay)
        if ticket != self._sequence or self._torn_down:
            return True

        await self._start(user_gesture=False)
        return True

    async def resume(self) -> bool:
        """Start or resume playback of the loaded result."""
        if self._state is PlaybackState.PLAYING:
            return True
        if self._state is PlaybackState.GENERATING or self._audio_url is None:
            return False
        return await self._start(user_gesture=True)

    def pause(self) -> bool:
        if self._state is not PlaybackState.PLAYING:
            return False
        self._element.pause()
        self._set_state(PlaybackState.PAUSED)
        return True

    def stop(self) -> bool:
        if self._state not in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            return False
        self._rewind()
        self._set_state(PlaybackState.IDLE)
        return True

    def handle_ended(self) -> None:
        """Callback for the element's end-of-playback event."""
        if self._state in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            self._element.current_time = 0.0
            self._set_state(PlaybackState.IDLE)

    def download(self, destination: str | Path = ".") -> Path | None:
        """Save the current result as ``speech.mp3``.

        ``destination`` may be a directory or a full file path.
        """
        if self._audio_url is None:
            return None
        target = Path(destination)
        if target.is_dir():
            target = target / DOWNLOAD_FILENAME
        target.write_bytes(self._urls.read(self._audio_url))
        logger.info("Saved audio to %s", target)
        return target

    def teardown(self) -> None:
        """Release the live object URL. Safe to call more than once."""
        if self._torn_down:
            return
        self._torn_down = True
        self._sequence += 1
        self._element.pause()
        if self._audio_url is not None:
            self._urls.revoke(self._audio_url)
            self._audio_url = None
        self._element.src = None
        self._state = PlaybackState.IDLE

    # --- Internals ---

    def _rewind(self) -> None:
        self._element.pause()
        self._element.current_time = 0.0

    def _replace_audio(self, audio: bytes) -> None:
        previous = self._audio_url
        if previous is not None:
            self._urls.revoke(previous)
            self._audio_url = None
        self._audio_url = self._urls.create(audio, AUDIO_MIME_TYPE)
        self._element.src = self._audio_url

    async def _start(self, *, user_gesture: bool) -> bool:
        try:
            await self._element.play(user_gesture=user_gesture)
        except AutoplayBlockedError:
            logger.info("Autoplay blocked; waiting for manual play")
            self._set_state(PlaybackState.IDLE)
            self._notifier.notify(
                Notification("Autoplay blocked", "Please click play to listen to the audio")
            )
            return False
        except MediaPlaybackError as exc:
            logger.error("Playback error: %s", exc)
            self._set_state(PlaybackState.IDLE)
            self._notifier.notify(
                Notification(
                    "Playback error",
                    "There was an error playing the audio",
                    variant="destructive",
                )
            )
            return False
        self._set_state(PlaybackState.PLAYING)
        return True

    def _set_state(self, state: PlaybackState) -> None:
        if state is not self._state:
            logger.debug("Playback %s -> %s", self._state.value, state.value)
        self._state = state
