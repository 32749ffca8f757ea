"""Command line entry point.

Usage:
    speechdesk serve --port 8000
    speechdesk voices --url http://localhost:8000
    speechdesk models
    speechdesk languages
    speechdesk speak "Hello there" --voice 21m00Tcm4TlvDq8ikWAM --out hello.mp3
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from speechdesk.client.languages import LANGUAGES
from speechdesk.client.loader import CatalogLoader, SelectionState, parse_models, parse_voices
from speechdesk.client.media import HeadlessAudioElement, TempFileObjectURLStore
from speechdesk.client.notifications import LoggingNotifier
from speechdesk.client.playback import DOWNLOAD_FILENAME, PlaybackController
from speechdesk.client.proxy_client import ProxyRequestError, SpeechDeskClient

DEFAULT_PROXY_URL = "http://localhost:8000"


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from speechdesk.config import settings

    uvicorn.run(
        "speechdesk.main:app",
        host=args.host or settings.speechdesk_host,
        port=args.port or settings.speechdesk_port,
        reload=args.reload,
    )
    return 0


async def _voices(args: argparse.Namespace) -> int:
    async with SpeechDeskClient(args.url) as client:
        voices = parse_voices(await client.list_voices())
    for voice in voices:
        print(f"{voice.voice_id:<24} {voice.name}")
    return 0


async def _models(args: argparse.Namespace) -> int:
    async with SpeechDeskClient(args.url) as client:
        models = parse_models(await client.list_models())
    for model in models:
        print(f"{model.model_id:<28} {model.name}")
    return 0


def _languages(args: argparse.Namespace) -> int:
    for language in LANGUAGES:
        print(f"{language.code:<4} {language.name}")
    return 0


async def _speak(args: argparse.Namespace) -> int:
    notifier = LoggingNotifier()
    url_store = TempFileObjectURLStore()
    async with SpeechDeskClient(args.url) as client:
        selection = SelectionState()
        if args.voice:
            selection.selected_voice = args.voice
        else:
            await CatalogLoader(client, notifier).load_voices(selection)
        if args.model:
            selection.selected_model = args.model
        selection.stability = args.stability
        selection.similarity_boost = args.similarity_boost

        controller = PlaybackController(
            client, HeadlessAudioElement(), url_store, notifier, selection=selection
        )
        try:
            if not controller.set_text(args.text):
                print(
                    f"Text is longer than {controller.max_characters} characters",
                    file=sys.stderr,
                )
                return 2
            if not selection.selected_voice:
                print("No voice available; pass --voice", file=sys.stderr)
                return 2
            if not await controller.convert():
                return 1
            controller.stop()
            saved = controller.download(args.out)
            print(f"Saved {saved}")
        finally:
            controller.teardown()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="speechdesk", description="ElevenLabs text-to-speech proxy")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the proxy server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    for name, help_text in (("voices", "List available voices"), ("models", "List synthesis models")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--url", default=DEFAULT_PROXY_URL, help="Proxy base URL")

    sub.add_parser("languages", help="List supported languages")

    speak = sub.add_parser("speak", help="Synthesize text and save it as MP3")
    speak.add_argument("text")
    speak.add_argument("--url", default=DEFAULT_PROXY_URL, help="Proxy base URL")
    speak.add_argument("--voice", default=None, help="Voice id (defaults to the first voice)")
    speak.add_argument("--model", default=None, help="Model id (defaults to eleven_turbo_v2)")
    speak.add_argument("--stability", type=float, default=0.5)
    speak.add_argument("--similarity-boost", type=float, default=0.5)
    speak.add_argument("--out", type=Path, default=Path(DOWNLOAD_FILENAME))
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "serve":
            return _serve(args)
        if args.command == "languages":
            return _languages(args)
        handler = {"voices": _voices, "models": _models, "speak": _speak}[args.command]
        return asyncio.run(handler(args))
    except ProxyRequestError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
