"""Active-language resolution for bilingual content."""

import locale

from pourrice.config import get_config

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "zh-Hant")


def _system_language() -> str | None:
    try:
        lang, _ = locale.getlocale()
    except ValueError:
        return None
    if not lang or lang in ("C", "POSIX"):
        return None
    # POSIX tags use underscores (zh_HK); BCP 47 uses hyphens
    return lang.replace("_", "-")


def current_language() -> str:
    """Return the language tag used to pick bilingual text.

    The configured ``preferred_language`` wins, then the process locale,
    then English.
    """
    preferred = get_config().preferred_language
    if preferred:
        return preferred
    return _system_language() or DEFAULT_LANGUAGE


def is_chinese(language: str) -> bool:
    """Whether a language tag selects the Traditional Chinese text."""
    return language.lower().startswith("zh")


def language_code(language: str | None = None) -> str:
    """Return the bare language code (``zh-Hant`` -> ``zh``)."""
    tag = language or current_language()
    return tag.split("-")[0].lower() or DEFAULT_LANGUAGE
