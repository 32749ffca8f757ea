"""Languages offered in the language selector. Static, not vendor-sourced."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Language:
    code: str
    name: str


DEFAULT_LANGUAGE = "en"

LANGUAGES: tuple[Language, ...] = (
    Language("en", "English"),
    Language("de", "German"),
    Language("pl", "Polish"),
    Language("es", "Spanish"),
    Language("it", "Italian"),
    Language("fr", "French"),
    Language("pt", "Portuguese"),
    Language("hi", "Hindi"),
    Language("ar", "Arabic"),
    Language("cs", "Czech"),
    Language("da", "Danish"),
    Language("nl", "Dutch"),
    Language("fi", "Finnish"),
    Language("el", "Greek"),
    Language("hu", "Hungarian"),
    Language("ja", "Japanese"),
    Language("ko", "Korean"),
    Language("no", "Norwegian"),
    Language("ro", "Romanian"),
    Language("ru", "Russian"),
    Language("sv", "Swedish"),
    Language("tr", "Turkish"),
    Language("uk", "Ukrainian"),
    Language("vi", "Vietnamese"),
)


def find_language(code: str) -> Language | None:
    for language in LANGUAGES:
        if language.code == code:
            return language
    return None
