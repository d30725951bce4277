"""Resolve bodygraph label tables for a requested locale."""

from __future__ import annotations

from typing import Dict

from .hd_labels import AUTHORITY, CENTER, DEFINITION, NOT_SELF, SIGNATURE, STRATEGY, TYPE

SUPPORTED_LANGS = {"en", "zh"}

# FieldMap key -> per-language table
_FIELD_TABLES = {
    "type": TYPE,
    "authority": AUTHORITY,
    "definition": DEFINITION,
    "definedCenters": CENTER,
    "strategy": STRATEGY,
    "signature": SIGNATURE,
    "notSelfTheme": NOT_SELF,
}


def clamp_lang(lang: str | None) -> str:
    if not lang:
        return "en"
    lang = lang.lower().replace("_", "-").split("-")[0]
    return lang if lang in SUPPORTED_LANGS else "en"


def translation_tables(lang: str | None) -> Dict[str, Dict[str, str]]:
    """Return ``{field: {raw code: label}}`` for ``lang`` (English fallback)."""

    lang = clamp_lang(lang)
    return {name: tables.get(lang, tables["en"]) for name, tables in _FIELD_TABLES.items()}


def translate(value: str, table: Dict[str, str] | None) -> str:
    if not table:
        return value
    return table.get(value, value)
