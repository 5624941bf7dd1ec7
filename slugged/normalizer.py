"""
Text to slug normalization.

Converts arbitrary text into lowercase ASCII words joined by a separator,
for example ``"Der Preis fürs Überleben"`` -> ``"der-preis-furs-uberleben"``.
Per-language transliteration tables can override individual characters:

    SLUGGED = {
        "TRANSLITERATIONS": {
            "de": {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"},
        },
    }

With the German table active, the example above becomes
``"der-preis-fuers-ueberleben"``.
"""
from __future__ import annotations

import re
from typing import Dict, Optional

from django.conf import settings
from django.utils import translation
from django.utils.text import slugify
from unidecode import unidecode

DEFAULT_SEPARATOR = "-"

_WORD_BREAK = re.compile(r"[-_]+")


def transliterations(language: Optional[str] = None) -> Dict[str, str]:
    """Return the character table for ``language`` (default: the active language)."""
    tables = getattr(settings, "SLUGGED", {}).get("TRANSLITERATIONS", {})
    language = language or translation.get_language()
    if not language or not tables:
        return {}
    language = language.lower()
    if language in tables:
        return tables[language]
    return tables.get(language.split("-")[0], {})


def normalize(value, separator: str = DEFAULT_SEPARATOR) -> str:
    """Normalize ``value`` into slug text; blank input gives ``""``."""
    if value is None:
        return ""
    text = str(value).strip().lower()
    if not text:
        return ""

    for char, replacement in transliterations().items():
        text = text.replace(char.lower(), replacement)

    text = slugify(unidecode(text))
    return separator.join(word for word in _WORD_BREAK.split(text) if word)
