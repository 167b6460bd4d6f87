"""Bilingual (English / Traditional Chinese) text values."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pourrice.localization import current_language, is_chinese


class BilingualText(BaseModel):
    """Text carried in British English and Traditional Chinese.

    The backend sends bilingual fields as ``{"EN": ..., "TC": ...}``; some
    payloads use lowercase or mixed-case keys instead. Decoding tries the
    canonical shape first and then falls back to a plain string map in
    which missing keys become empty strings.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    en: str = Field("", alias="EN", description="British English text")
    tc: str = Field("", alias="TC", description="Traditional Chinese text")

    @model_validator(mode="before")
    @classmethod
    def _decode_wire_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        # Attempt 1: canonical {"EN", "TC"} object
        en, tc = data.get("EN"), data.get("TC")
        if isinstance(en, str) and isinstance(tc, str):
            return {"EN": en, "TC": tc}

        # Attempt 2: generic string map, lowercase keys preferred
        return {
            "EN": _first_present(data, "en", "EN"),
            "TC": _first_present(data, "tc", "TC"),
        }

    @classmethod
    def uniform(cls, text: str) -> "BilingualText":
        """Create a value with the same text in both languages."""
        return cls(en=text, tc=text)

    def localized(self, language: str | None = None) -> str:
        """Return the text for ``language`` (defaults to the active language)."""
        tag = language if language is not None else current_language()
        return self.tc if is_chinese(tag) else self.en

    def __str__(self) -> str:
        return self.localized()


def _first_present(data: dict, *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return ""
