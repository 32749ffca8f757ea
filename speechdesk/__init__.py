"""SpeechDesk: text-to-speech proxy and playback client for the ElevenLabs API."""

__version__ = "0.1.0"
