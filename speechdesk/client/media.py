"""Media primitives the playback controller drives.

``AudioElement`` mirrors the small slice of an HTML media element the
controller needs, and ``ObjectURLStore`` mirrors ``URL.createObjectURL`` /
``URL.revokeObjectURL``. The headless implementations below keep audio in
temporary files so that revoking a URL releases a real OS handle.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_SUFFIXES = {
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/ogg": ".ogg",
}


class MediaPlaybackError(Exception):
    """The element could not start playback."""


class AutoplayBlockedError(MediaPlaybackError):
    """Playback was refused because it was not started by a user gesture."""


class AudioElement(Protocol):
    src: str | None
    current_time: float
    volume: float
    paused: bool
    on_ended: Callable[[], None] | None

    async def play(self, *, user_gesture: bool = False) -> None: ...

    def pause(self) -> None: ...


class ObjectURLStore(Protocol):
    def create(self, data: bytes, mime_type: str) -> str: ...

    def revoke(self, url: str) -> None: ...

    def read(self, url: str) -> bytes: ...


class HeadlessAudioElement:
    """Audio element without an output device.

    Tracks source, position, volume and paused state. ``finish()`` simulates
    the element reaching the end of its source.
    """

    def __init__(self, autoplay_allowed: bool = True):
        self.autoplay_allowed = autoplay_allowed
        self.src: str | None = None
        self.current_time: float = 0.0
        self.volume: float = 1.0
        self.paused: bool = True
        self.on_ended: Callable[[], None] | None = None

    async def play(self, *, user_gesture: bool = False) -> None:
        if not self.src:
            raise MediaPlaybackError("No audio source assigned")
        if not (self.autoplay_allowed or user_gesture):
            raise AutoplayBlockedError("play() failed because the user didn't interact first")
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def finish(self) -> None:
        self.paused = True
        if self.on_ended is not None:
            self.on_ended()


class TempFileObjectURLStore:
    """Object URLs backed by temporary files, released on revoke."""

    def __init__(self, directory: str | os.PathLike[str] | None = None):
        self._directory = str(directory) if directory is not None else None
        self._live: dict[str, Path] = {}

    @property
    def live_urls(self) -> list[str]:
        return list(self._live)

    def create(self, data: bytes, mime_type: str) -> str:
        suffix = _SUFFIXES.get(mime_type, ".bin")
        fd, name = tempfile.mkstemp(prefix="speechdesk-", suffix=suffix, dir=self._directory)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        path = Path(name)
        url = path.as_uri()
        self._live[url] = path
        logger.debug("Created object URL %s (%d bytes)", url, len(data))
        return url

    def revoke(self, url: str) -> None:
        path = self._live.pop(url, None)
        if path is None:
            logger.debug("Ignoring revoke of unknown object URL %s", url)
            return
        path.unlink(missing_ok=True)
        logger.debug("Revoked object URL %s", url)

    def read(self, url: str) -> bytes:
        path = self._live.get(url)
        if path is None:
            raise KeyError(f"Object URL {url} is not live")
        return path.read_bytes()

    def close(self) -> None:
        for url in list(self._live):
            self.revoke(url)
